# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from .decoder import decode, decode_scalar, decode_value
from .encoder import LPPEncoder
from .types import Colour, DataPoint, GPSLocation, LPPValue, SensorType, Vector3

__all__ = 'LPPEncoder', 'decode', 'decode_value', 'decode_scalar', 'SensorType', 'DataPoint', 'LPPValue', 'Vector3', 'GPSLocation', 'Colour'  # noqa: RUF022
