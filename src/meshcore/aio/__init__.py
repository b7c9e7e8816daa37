# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from .channel import Channel, OverflowPolicy, unlimited
from .exceptions import ClosedResourceError, EndOfChannel, WouldBlock

__all__ = 'Channel', 'OverflowPolicy', 'unlimited', 'ClosedResourceError', 'EndOfChannel', 'WouldBlock'  # noqa: RUF022
