# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from datetime import UTC, datetime

import pytest

from meshcore.lpp import Colour, DataPoint, GPSLocation, LPPEncoder, SensorType, Vector3, decode, decode_scalar
from meshcore.protocol import InvalidInputError


class TestSensorType:

    def test_metadata(self) -> None:
        assert SensorType.temperature.data_size == 2
        assert SensorType.humidity.data_size == 1
        assert SensorType.unix_time.data_size == 4
        assert SensorType.gps.data_size == 9
        assert SensorType.accelerometer.data_size == 6
        assert SensorType.voltage == 116
        assert SensorType.voltage.display_name == 'Voltage'
        assert SensorType.gps.display_name == 'GPS'


class TestEncoder:

    def test_reference_bytes(self) -> None:
        encoder = LPPEncoder()
        encoder.add_temperature(1, -10.5)
        assert encoder.encode() == bytes.fromhex('01 67 FF 97')
        encoder.reset()
        encoder.add_voltage(1, 3.8)
        assert encoder.encode() == bytes.fromhex('01 74 01 7C')

    def test_entries_in_call_order(self) -> None:
        encoder = LPPEncoder()
        encoder.add_digital_input(3, 1)
        encoder.add_humidity(4, 45.5)
        assert encoder.encode() == bytes([3, 0, 1, 4, 104, 91])
        assert encoder.count == len(encoder) == 6
        encoder.reset()
        assert encoder.encode() == b''
        assert encoder.count == 0

    def test_add_raw(self) -> None:
        encoder = LPPEncoder()
        encoder.add_raw(2, SensorType.percentage, b'\x42')
        assert encoder.encode() == b'\x02\x78\x42'
        with pytest.raises(InvalidInputError):
            encoder.add_raw(2, SensorType.temperature, b'\x01')

    def test_value_out_of_range(self) -> None:
        encoder = LPPEncoder()
        with pytest.raises(InvalidInputError):
            encoder.add_temperature(1, 5000.0)
        assert encoder.encode() == b''


class TestDecoder:

    def test_temperature_round_trip(self) -> None:
        encoder = LPPEncoder()
        encoder.add_temperature(1, 25.5)
        [point] = decode(encoder.encode())
        assert point.channel == 1
        assert point.type is SensorType.temperature
        assert point.value == pytest.approx(25.5, abs=0.1)

    def test_multiple_entries(self) -> None:
        encoder = LPPEncoder()
        encoder.add_temperature(1, -10.5)
        encoder.add_barometer(2, 1013.5)
        encoder.add_current(3, 1500)
        encoder.add_accelerometer(4, 0.5, -0.25, 1.0)
        encoder.add_gps(5, 45.5, -120.25, 100.5)
        points = list(decode(encoder.encode()))
        assert [point.channel for point in points] == [1, 2, 3, 4, 5]
        assert points[0].value == pytest.approx(-10.5)
        assert points[1].value == pytest.approx(1013.5)
        assert points[2].value == pytest.approx(1.5)
        assert points[3].value == Vector3(0.5, -0.25, 1.0)
        assert points[4].value == GPSLocation(45.5, -120.25, 100.5)

    def test_raw_types(self) -> None:
        data = bytes([
            1, SensorType.unix_time, 0x65, 0x92, 0x6f, 0x00,
            2, SensorType.colour, 0xff, 0x80, 0x00,
            3, SensorType.presence, 0x01,
            4, SensorType.generic_sensor, 0xff, 0xff, 0xff, 0xfe,
        ])
        points = list(decode(data))
        assert points[0].value == datetime(2024, 1, 1, tzinfo=UTC)
        assert points[1].value == Colour(255, 128, 0)
        assert points[2].value is True
        assert points[3].value == -2

    def test_stops_at_unknown_type(self) -> None:
        data = bytes([1, SensorType.temperature, 0x00, 0xff, 2, 0x99, 0x00, 0x00, 3, SensorType.humidity, 0x10])
        points = list(decode(data))
        assert len(points) == 1
        assert points[0].value == pytest.approx(25.5)

    def test_stops_at_truncated_entry(self) -> None:
        assert list(decode(bytes([1, SensorType.temperature, 0x00]))) == []
        assert list(decode(b'\x01')) == []
        assert list(decode(b'')) == []

    def test_decode_scalar(self) -> None:
        assert decode_scalar(SensorType.voltage, b'\x01\x7c') == pytest.approx(3.8)
        assert decode_scalar(SensorType.accelerometer, bytes.fromhex('01f4 ff06 03e8')) == pytest.approx(0.5)
        assert decode_scalar(SensorType.colour, b'\x10\x20\x30') == 16.0


class TestDataPoint:

    def test_battery_percentage(self) -> None:
        assert DataPoint(1, SensorType.voltage, 3.6).battery_percentage == 50
        assert DataPoint(1, SensorType.voltage, 4.5).battery_percentage == 100
        assert DataPoint(1, SensorType.voltage, 2.9).battery_percentage == 0
        assert DataPoint(1, SensorType.temperature, 3.6).battery_percentage is None

    def test_formatted_value(self) -> None:
        assert DataPoint(1, SensorType.temperature, 25.5).formatted_value == '25.5°C'
        assert DataPoint(1, SensorType.voltage, 3.8).formatted_value == '3.80 V'
        assert DataPoint(1, SensorType.digital_input, True).formatted_value == 'On'
        assert DataPoint(1, SensorType.percentage, 42).formatted_value == '42%'
        assert DataPoint(1, SensorType.colour, Colour(1, 2, 3)).formatted_value == 'RGB(1, 2, 3)'
        assert DataPoint(1, SensorType.temperature, 25.5).type_name == 'Temperature'
