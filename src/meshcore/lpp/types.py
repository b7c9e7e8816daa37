# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum

__all__ = 'SensorType', 'Vector3', 'GPSLocation', 'Colour', 'LPPValue', 'DataPoint'  # noqa: RUF022


class SensorType(IntEnum):
    """Cayenne Low Power Payload sensor types"""

    digital_input = 0
    digital_output = 1
    analog_input = 2
    analog_output = 3
    generic_sensor = 100
    illuminance = 101
    presence = 102
    temperature = 103
    humidity = 104
    accelerometer = 113
    barometer = 115
    voltage = 116
    current = 117
    frequency = 118
    percentage = 120
    altitude = 121
    load = 122
    concentration = 125
    power = 128
    distance = 130
    energy = 131
    direction = 132
    unix_time = 133
    gyrometer = 134
    colour = 135
    gps = 136
    switch = 142

    @property
    def data_size(self) -> int:
        """The size in bytes of a value of this type"""
        return _data_sizes.get(self, 2)

    @property
    def display_name(self) -> str:
        return _display_names[self]


_data_sizes: dict[SensorType, int] = {
    SensorType.digital_input: 1,
    SensorType.digital_output: 1,
    SensorType.presence: 1,
    SensorType.humidity: 1,
    SensorType.percentage: 1,
    SensorType.switch: 1,
    SensorType.colour: 3,
    SensorType.generic_sensor: 4,
    SensorType.frequency: 4,
    SensorType.distance: 4,
    SensorType.energy: 4,
    SensorType.unix_time: 4,
    SensorType.accelerometer: 6,
    SensorType.gyrometer: 6,
    SensorType.gps: 9,
}

_display_names: dict[SensorType, str] = {
    SensorType.digital_input: 'Digital Input',
    SensorType.digital_output: 'Digital Output',
    SensorType.analog_input: 'Analog Input',
    SensorType.analog_output: 'Analog Output',
    SensorType.generic_sensor: 'Sensor',
    SensorType.illuminance: 'Illuminance',
    SensorType.presence: 'Presence',
    SensorType.temperature: 'Temperature',
    SensorType.humidity: 'Humidity',
    SensorType.accelerometer: 'Accelerometer',
    SensorType.barometer: 'Barometer',
    SensorType.voltage: 'Voltage',
    SensorType.current: 'Current',
    SensorType.frequency: 'Frequency',
    SensorType.percentage: 'Percentage',
    SensorType.altitude: 'Altitude',
    SensorType.load: 'Load',
    SensorType.concentration: 'Concentration',
    SensorType.power: 'Power',
    SensorType.distance: 'Distance',
    SensorType.energy: 'Energy',
    SensorType.direction: 'Direction',
    SensorType.unix_time: 'Time',
    SensorType.gyrometer: 'Gyrometer',
    SensorType.colour: 'Colour',
    SensorType.gps: 'GPS',
    SensorType.switch: 'Switch',
}


@dataclass(frozen=True, slots=True)
class Vector3:
    x: float
    y: float
    z: float


@dataclass(frozen=True, slots=True)
class GPSLocation:
    latitude: float
    longitude: float
    altitude: float


@dataclass(frozen=True, slots=True)
class Colour:
    red: int
    green: int
    blue: int


type LPPValue = bool | int | float | Vector3 | GPSLocation | Colour | datetime


@dataclass(frozen=True, slots=True)
class DataPoint:
    channel: int
    type: SensorType
    value: LPPValue

    @property
    def type_name(self) -> str:
        return self.type.display_name

    @property
    def battery_percentage(self) -> int | None:
        """The charge level of a LiPo cell (3.0V is empty, 4.2V is full), for voltage readings only"""
        if self.type is not SensorType.voltage or not isinstance(self.value, float):
            return None
        percent = (self.value - 3.0) / 1.2 * 100
        return int(min(100.0, max(0.0, percent)))

    @property
    def formatted_value(self) -> str:
        match self.value:
            case bool() as on:
                return 'On' if on else 'Off'
            case int() as value:
                return self._format_integer(value)
            case float() as value:
                return self._format_float(value)
            case Vector3(x, y, z):
                return self._format_vector(x, y, z)
            case GPSLocation(latitude, longitude, altitude):
                return f'{latitude:.6f}, {longitude:.6f} @ {altitude:.1f}m'
            case Colour(red, green, blue):
                return f'RGB({red}, {green}, {blue})'
            case datetime() as timestamp:
                return timestamp.strftime('%b %d, %Y %H:%M')

    def _format_integer(self, value: int) -> str:
        match self.type:
            case SensorType.percentage:
                return f'{value}%'
            case SensorType.illuminance:
                return f'{value} lux'
            case SensorType.direction:
                return f'{value}°'
            case SensorType.concentration:
                return f'{value} ppm'
            case SensorType.power:
                return f'{value} W'
            case SensorType.frequency:
                return f'{value} Hz'
            case _:
                return f'{value}'

    def _format_float(self, value: float) -> str:
        match self.type:
            case SensorType.temperature:
                return f'{value:.1f}°C'
            case SensorType.humidity:
                return f'{value:.1f}%'
            case SensorType.barometer:
                return f'{value:.1f} hPa'
            case SensorType.voltage:
                return f'{value:.2f} V'
            case SensorType.current:
                return f'{value:.3f} A'
            case SensorType.altitude:
                return f'{value:.1f} m'
            case SensorType.distance:
                return f'{value:.2f} m'
            case SensorType.energy:
                return f'{value:.3f} kWh'
            case SensorType.load:
                return f'{value:.2f} kg'
            case _:
                return f'{value:.2f}'

    def _format_vector(self, x: float, y: float, z: float) -> str:
        match self.type:
            case SensorType.accelerometer:
                return f'X:{x:.3f} Y:{y:.3f} Z:{z:.3f} g'
            case SensorType.gyrometer:
                return f'X:{x:.1f} Y:{y:.1f} Z:{z:.1f} °/s'
            case _:
                return f'X:{x:.2f} Y:{y:.2f} Z:{z:.2f}'
