# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from .contact import ContactFlags, ContactType, MeshContact
from .destination import ChannelSecret, Destination, FloodScope
from .device import BatteryInfo, DeviceCapabilities, SelfInfo

__all__ = 'MeshContact', 'ContactType', 'ContactFlags', 'SelfInfo', 'DeviceCapabilities', 'BatteryInfo', 'Destination', 'FloodScope', 'ChannelSecret'  # noqa: RUF022
