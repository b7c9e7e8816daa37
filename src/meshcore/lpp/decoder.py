# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from collections.abc import Buffer, Iterator
from datetime import UTC, datetime

from meshcore.protocol.codec import Int16BE, Int24BE, Int32BE, UInt8, UInt16BE, UInt32BE

from .types import Colour, DataPoint, GPSLocation, LPPValue, SensorType, Vector3

__all__ = 'decode', 'decode_value', 'decode_scalar'


def decode(data: Buffer) -> Iterator[DataPoint]:
    """
    Lazily decode an LPP payload into data points.

    Decoding stops at the first unknown sensor type or truncated entry.
    The data points decoded up to that point are still produced.
    """
    data = bytes(data)
    offset = 0
    while offset + 2 <= len(data):
        channel = data[offset]
        try:
            sensor_type = SensorType(data[offset + 1])
        except ValueError:
            return
        offset += 2
        if offset + sensor_type.data_size > len(data):
            return
        value = decode_value(sensor_type, data[offset:offset + sensor_type.data_size])
        offset += sensor_type.data_size
        yield DataPoint(channel, sensor_type, value)


def decode_value(sensor_type: SensorType, data: bytes) -> LPPValue:  # noqa: C901, PLR0911
    """Decode a single value of the given type (data must be exactly sensor_type.data_size bytes)"""
    match sensor_type:
        case SensorType.digital_input | SensorType.digital_output | SensorType.presence | SensorType.switch:
            return data[0] != 0
        case SensorType.percentage:
            return data[0]
        case SensorType.humidity:
            return data[0] * 0.5
        case SensorType.temperature:
            return Int16BE.read(data) / 10
        case SensorType.barometer:
            return UInt16BE.read(data) / 10
        case SensorType.voltage:
            return UInt16BE.read(data) / 100
        case SensorType.current:
            return UInt16BE.read(data) / 1000
        case SensorType.illuminance | SensorType.concentration | SensorType.power | SensorType.direction:
            return UInt16BE.read(data)
        case SensorType.altitude:
            return float(Int16BE.read(data))
        case SensorType.load:
            return UInt16BE.read(data) / 100
        case SensorType.analog_input | SensorType.analog_output:
            return Int16BE.read(data) / 100
        case SensorType.generic_sensor:
            return Int32BE.read(data)
        case SensorType.frequency:
            return UInt32BE.read(data)
        case SensorType.distance | SensorType.energy:
            return UInt32BE.read(data) / 1000
        case SensorType.unix_time:
            return datetime.fromtimestamp(UInt32BE.read(data), tz=UTC)
        case SensorType.accelerometer:
            return Vector3(Int16BE.read(data, 0) / 1000, Int16BE.read(data, 2) / 1000, Int16BE.read(data, 4) / 1000)
        case SensorType.gyrometer:
            return Vector3(Int16BE.read(data, 0) / 100, Int16BE.read(data, 2) / 100, Int16BE.read(data, 4) / 100)
        case SensorType.colour:
            return Colour(UInt8.read(data, 0), UInt8.read(data, 1), UInt8.read(data, 2))
        case SensorType.gps:
            return GPSLocation(Int24BE.read(data, 0) / 10000, Int24BE.read(data, 3) / 10000, Int24BE.read(data, 6) / 100)


def decode_scalar(sensor_type: SensorType, data: bytes) -> float:
    """
    Decode a value of the given type as a single number.

    Multi component types (accelerometer, gyrometer, GPS, colour) are
    reduced to their first component. Used by min/max/average summaries.
    """
    match decode_value(sensor_type, data):
        case Vector3(x, _, _):
            return x
        case GPSLocation(latitude, _, _):
            return latitude
        case Colour(red, _, _):
            return float(red)
        case datetime() as timestamp:
            return timestamp.timestamp()
        case value:
            return float(value)
