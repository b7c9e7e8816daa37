# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from collections.abc import Buffer

from meshcore.protocol.codec import Int16BE, Int24BE, IntegerField, UInt8, UInt16BE
from meshcore.protocol.exceptions import InvalidInputError

from .types import SensorType

__all__ = 'LPPEncoder',  # noqa: COM818


class LPPEncoder:
    """
    Build an LPP payload one data point at a time.

    Entries are laid out as [channel][type][value] in the order they are
    added, with values in big-endian byte order. Scaled values are
    truncated toward zero, matching the firmware encoder.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def count(self) -> int:
        """The current size of the encoded payload in bytes"""
        return len(self._buffer)

    def reset(self) -> None:
        self._buffer.clear()

    def encode(self) -> bytes:
        return bytes(self._buffer)

    def _add(self, channel: int, sensor_type: SensorType, *values: tuple[type[IntegerField], int]) -> None:
        data = b''.join(field.pack(value) for field, value in values)
        self._buffer += UInt8.pack(channel) + UInt8.pack(sensor_type) + data

    # Digital I/O

    def add_digital_input(self, channel: int, value: int) -> None:
        self._add(channel, SensorType.digital_input, (UInt8, 1 if value else 0))

    def add_digital_output(self, channel: int, value: int) -> None:
        self._add(channel, SensorType.digital_output, (UInt8, 1 if value else 0))

    # Analog I/O

    def add_analog_input(self, channel: int, value: float) -> None:
        self._add(channel, SensorType.analog_input, (Int16BE, int(value * 100)))

    def add_analog_output(self, channel: int, value: float) -> None:
        self._add(channel, SensorType.analog_output, (Int16BE, int(value * 100)))

    # Environmental

    def add_temperature(self, channel: int, celsius: float) -> None:
        self._add(channel, SensorType.temperature, (Int16BE, int(celsius * 10)))

    def add_humidity(self, channel: int, percent: float) -> None:
        self._add(channel, SensorType.humidity, (UInt8, int(percent * 2)))

    def add_barometer(self, channel: int, hpa: float) -> None:
        self._add(channel, SensorType.barometer, (UInt16BE, int(hpa * 10)))

    def add_illuminance(self, channel: int, lux: int) -> None:
        self._add(channel, SensorType.illuminance, (UInt16BE, lux))

    # Motion

    def add_accelerometer(self, channel: int, x: float, y: float, z: float) -> None:
        self._add(channel, SensorType.accelerometer, (Int16BE, int(x * 1000)), (Int16BE, int(y * 1000)), (Int16BE, int(z * 1000)))

    def add_gyrometer(self, channel: int, x: float, y: float, z: float) -> None:
        self._add(channel, SensorType.gyrometer, (Int16BE, int(x * 100)), (Int16BE, int(y * 100)), (Int16BE, int(z * 100)))

    # Location

    def add_gps(self, channel: int, latitude: float, longitude: float, altitude: float) -> None:
        self._add(channel, SensorType.gps, (Int24BE, int(latitude * 10000)), (Int24BE, int(longitude * 10000)), (Int24BE, int(altitude * 100)))

    # Electrical

    def add_voltage(self, channel: int, volts: float) -> None:
        self._add(channel, SensorType.voltage, (UInt16BE, int(volts * 100)))

    def add_current(self, channel: int, milliamps: int) -> None:
        self._add(channel, SensorType.current, (UInt16BE, milliamps))

    # Generic

    def add_raw(self, channel: int, sensor_type: SensorType, data: Buffer) -> None:
        data = bytes(data)
        if len(data) != sensor_type.data_size:
            raise InvalidInputError(f'{sensor_type.display_name} values are {sensor_type.data_size} bytes long, got {len(data)}')
        self._buffer += UInt8.pack(channel) + UInt8.pack(sensor_type) + data
