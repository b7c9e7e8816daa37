# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum, IntFlag

from meshcore.protocol.codec import hex_string

__all__ = 'ContactType', 'ContactFlags', 'MeshContact'


class ContactType(IntEnum):
    chat = 0x01
    repeater = 0x02
    room = 0x03


class ContactFlags(IntFlag):
    FAVORITE = 0x01
    TELEMETRY_BASE = 0x02
    TELEMETRY_LOCATION = 0x04
    TELEMETRY_ENVIRONMENT = 0x08

    TELEMETRY_ALL = TELEMETRY_BASE | TELEMETRY_LOCATION | TELEMETRY_ENVIRONMENT


@dataclass(frozen=True, slots=True, kw_only=True)
class MeshContact:
    """
    A contact record as stored by the firmware.

    out_path_length is signed: -1 means the contact is reached by flood
    routing and has no stored path.
    """

    public_key: bytes
    type: int
    flags: int
    out_path_length: int
    out_path: bytes
    advertised_name: str
    last_advertisement: datetime
    latitude: float
    longitude: float
    last_modified: datetime

    @property
    def id(self) -> str:
        return hex_string(self.public_key)

    @property
    def public_key_prefix(self) -> str:
        return hex_string(self.public_key[:6])

    @property
    def is_flood_path(self) -> bool:
        return self.out_path_length == -1

    @property
    def contact_type(self) -> ContactType | None:
        try:
            return ContactType(self.type)
        except ValueError:
            return None

    @property
    def contact_flags(self) -> ContactFlags:
        return ContactFlags(self.flags)
