# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

# The frame parsers, the frame builder and the direct message crypto live in
# the parsers, builder and crypto submodules. They depend on the models, lpp
# and events packages, which in turn depend on the leaf modules exported here.

from .codec import hex_string
from .codes import BinaryRequestType, CommandCode, ControlType, ResponseCategory, ResponseCode, StatsType, TextType
from .exceptions import InsufficientLengthError, InvalidInputError

__all__ = 'hex_string', 'CommandCode', 'ResponseCode', 'ResponseCategory', 'BinaryRequestType', 'ControlType', 'StatsType', 'TextType', 'InvalidInputError', 'InsufficientLengthError'  # noqa: RUF022
