# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from dataclasses import dataclass, replace
from typing import ClassVar, Self

__all__ = 'Configuration',  # noqa: COM818


@dataclass(frozen=True, slots=True, kw_only=True)
class Configuration:
    """
    Tunables consumed by the protocol core.

    client_identifier is announced to the firmware by the app start
    frame (only the first 5 characters are sent), subscription_buffer_size
    bounds every event subscription stream and neighbour_prefix_length is
    the key prefix width used when decoding neighbours responses.
    """

    default: ClassVar['Configuration']

    client_identifier: str = 'MCore'
    subscription_buffer_size: int = 100
    neighbour_prefix_length: int = 4

    def __post_init__(self) -> None:
        if not self.client_identifier:
            raise ValueError('client_identifier must be a non-empty string')
        if self.subscription_buffer_size < 1:
            raise ValueError(f'subscription_buffer_size must be a positive integer: {self.subscription_buffer_size!r}')
        if not 1 <= self.neighbour_prefix_length <= 32:
            raise ValueError(f'neighbour_prefix_length must be between 1 and 32: {self.neighbour_prefix_length!r}')

    def replace(self, **changes: object) -> Self:
        return replace(self, **changes)


Configuration.default = Configuration()
