# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from dataclasses import dataclass

__all__ = 'SelfInfo', 'DeviceCapabilities', 'BatteryInfo'


@dataclass(frozen=True, slots=True, kw_only=True)
class SelfInfo:
    advertisement_type: int
    tx_power: int
    max_tx_power: int
    public_key: bytes
    latitude: float
    longitude: float
    multi_acks: int
    advertisement_location_policy: int
    telemetry_mode_environment: int
    telemetry_mode_location: int
    telemetry_mode_base: int
    manual_add_contacts: bool
    radio_frequency: float
    radio_bandwidth: float
    radio_spreading_factor: int
    radio_coding_rate: int
    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class DeviceCapabilities:
    firmware_version: int
    max_contacts: int = 0
    max_channels: int = 0
    ble_pin: int = 0
    firmware_build: str = ''
    model: str = ''
    version: str = ''
    client_repeat: bool = False


@dataclass(frozen=True, slots=True)
class BatteryInfo:
    level: int
    used_storage_kb: int | None = None
    total_storage_kb: int | None = None
