# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Builders for the command frames sent to the firmware.

Every builder returns the complete frame: the command code followed by
the command payload. Integers are little endian and text is UTF-8. The
builders are pure functions: the same arguments always produce the same
bytes (the only exceptions are the timestamp and the discover tag, which
default to the current time and to a random tag when not given).

Destinations can be given as public key bytes, as a hex string or as a
MeshContact.
"""

import secrets
import time
from collections.abc import Buffer
from datetime import datetime

from meshcore.configuration import Configuration
from meshcore.models import ChannelSecret, Destination, FloodScope, MeshContact

from .codec import Int8, Int32LE, UInt8, UInt32LE, encode_fixed_text
from .codes import BinaryRequestType, CommandCode, ControlType, StatsType

__all__ = (  # noqa: RUF022
    'new_tag',

    # Device

    'app_start',
    'device_query',
    'get_battery',
    'get_time',
    'set_time',
    'set_name',
    'set_coordinates',
    'set_tx_power',
    'set_radio',
    'send_advertisement',
    'reboot',
    'factory_reset',
    'set_tuning',
    'get_tuning_params',
    'set_other_params',
    'set_device_pin',
    'get_custom_vars',
    'set_custom_var',
    'get_self_telemetry',
    'set_auto_add_config',
    'get_auto_add_config',
    'get_allowed_repeat_freq',

    # Contacts

    'get_contacts',
    'get_contact_by_key',
    'reset_path',
    'remove_contact',
    'share_contact',
    'export_contact',
    'import_contact',
    'update_contact',
    'encode_contact',
    'get_advert_path',

    # Messaging

    'get_message',
    'send_message',
    'send_command',
    'send_channel_message',
    'send_login',
    'send_logout',
    'send_status_request',
    'binary_request',
    'send_path_discovery',
    'send_trace',
    'send_raw_data',
    'has_connection',

    # Channels

    'get_channel',
    'set_channel',

    # Statistics

    'get_stats',
    'get_stats_core',
    'get_stats_radio',
    'get_stats_packets',

    # Keys and signing

    'export_private_key',
    'import_private_key',
    'sign_start',
    'sign_data',
    'sign_finish',

    # Routing and control

    'set_flood_scope',
    'send_control_data',
    'send_node_discover_request',
)


type Target = Buffer | str | MeshContact
type Timestamp = datetime | int | None


CLIENT_IDENTIFIER_SIZE = 5
MESSAGE_PREFIX_SIZE = 6
PUBLIC_KEY_SIZE = 32
PATH_SIZE = 64
NAME_SIZE = 32
CHANNEL_NAME_SIZE = 32


def new_tag() -> int:
    """Return a random, non-zero 32 bit tag"""
    return secrets.randbelow(0xffffffff) + 1


def _key(target: Target, size: int = PUBLIC_KEY_SIZE) -> bytes:
    if not isinstance(target, str | MeshContact):
        target = bytes(target)
    return Destination(target).public_key(prefix_length=size)


def _unix_time(timestamp: Timestamp) -> bytes:
    match timestamp:
        case None:
            return UInt32LE.pack(int(time.time()))
        case datetime():
            return UInt32LE.pack(int(timestamp.timestamp()))
        case _:
            return UInt32LE.pack(timestamp)


def _command(code: CommandCode, *parts: Buffer) -> bytes:
    return bytes([code]) + b''.join(bytes(part) for part in parts)


# Device

def app_start(client_identifier: str = Configuration.default.client_identifier) -> bytes:
    """
    Build the handshake frame.

    Layout: [0x01][0x03][6 reserved spaces][client id, at most 5 characters].
    The firmware reads the client identifier from byte 8.
    """
    return _command(CommandCode.app_start, b'\x03', b' ' * 6, client_identifier[:CLIENT_IDENTIFIER_SIZE].encode('utf-8'))


def device_query() -> bytes:
    return _command(CommandCode.device_query, b'\x03')


def get_battery() -> bytes:
    return _command(CommandCode.get_battery)


def get_time() -> bytes:
    return _command(CommandCode.get_time)


def set_time(timestamp: Timestamp) -> bytes:
    return _command(CommandCode.set_time, _unix_time(timestamp))


def set_name(name: str) -> bytes:
    return _command(CommandCode.set_name, name.encode('utf-8'))


def set_coordinates(latitude: float, longitude: float) -> bytes:
    # the trailing 4 bytes are an altitude placeholder
    return _command(CommandCode.set_coordinates, Int32LE.pack(int(latitude * 1_000_000)), Int32LE.pack(int(longitude * 1_000_000)), bytes(4))


def set_tx_power(power: int) -> bytes:
    # the firmware reads the power (dBm) as a 32 bit little endian value
    return _command(CommandCode.set_tx_power, Int32LE.pack(power))


def set_radio(frequency: float, bandwidth: float, spreading_factor: int, coding_rate: int, *, client_repeat: bool | None = None) -> bytes:
    """
    Build the radio parameters frame.

    frequency (MHz) and bandwidth (kHz) are sent multiplied by 1000. The
    client repeat flag byte is only appended when explicitly requested,
    as older firmware rejects frames that carry it.
    """
    parts = [UInt32LE.pack(round(frequency * 1000)), UInt32LE.pack(round(bandwidth * 1000)), UInt8.pack(spreading_factor), UInt8.pack(coding_rate)]
    if client_repeat is not None:
        parts.append(UInt8.pack(int(client_repeat)))
    return _command(CommandCode.set_radio, *parts)


def send_advertisement(*, flood: bool = False) -> bytes:
    return _command(CommandCode.send_advertisement, b'\x01' if flood else b'')


def reboot() -> bytes:
    return _command(CommandCode.reboot, b'reboot')


def factory_reset() -> bytes:
    return _command(CommandCode.factory_reset, b'reset')


def set_tuning(rx_delay: int, airtime_factor: int) -> bytes:
    return _command(CommandCode.set_tuning, UInt32LE.pack(rx_delay), UInt32LE.pack(airtime_factor), bytes(2))


def get_tuning_params() -> bytes:
    return _command(CommandCode.get_tuning_params)


def set_other_params(
    *,
    manual_add_contacts: bool,
    telemetry_mode_environment: int,
    telemetry_mode_location: int,
    telemetry_mode_base: int,
    advertisement_location_policy: int,
    multi_acks: int | None = None,
) -> bytes:
    telemetry_mode = (telemetry_mode_environment & 0b11) << 4 | (telemetry_mode_location & 0b11) << 2 | telemetry_mode_base & 0b11
    parts = [UInt8.pack(int(manual_add_contacts)), UInt8.pack(telemetry_mode), UInt8.pack(advertisement_location_policy)]
    if multi_acks is not None:
        parts.append(UInt8.pack(multi_acks))
    return _command(CommandCode.set_other_params, *parts)


def set_device_pin(pin: int) -> bytes:
    return _command(CommandCode.set_device_pin, UInt32LE.pack(pin))


def get_custom_vars() -> bytes:
    return _command(CommandCode.get_custom_vars)


def set_custom_var(key: str, value: str) -> bytes:
    return _command(CommandCode.set_custom_var, f'{key}:{value}'.encode('utf-8'))


def get_self_telemetry(destination: Target | None = None) -> bytes:
    return _command(CommandCode.get_self_telemetry, bytes(3), _key(destination) if destination is not None else b'')


def set_auto_add_config(config: int) -> bytes:
    return _command(CommandCode.set_auto_add_config, UInt8.pack(config))


def get_auto_add_config() -> bytes:
    return _command(CommandCode.get_auto_add_config)


def get_allowed_repeat_freq() -> bytes:
    return _command(CommandCode.get_allowed_repeat_freq)


# Contacts

def get_contacts(since: Timestamp = None) -> bytes:
    return _command(CommandCode.get_contacts, _unix_time(since) if since is not None else b'')


def get_contact_by_key(public_key: Target) -> bytes:
    return _command(CommandCode.get_contact_by_key, _key(public_key))


def reset_path(public_key: Target) -> bytes:
    return _command(CommandCode.reset_path, _key(public_key))


def remove_contact(public_key: Target) -> bytes:
    return _command(CommandCode.remove_contact, _key(public_key))


def share_contact(public_key: Target) -> bytes:
    return _command(CommandCode.share_contact, _key(public_key))


def export_contact(public_key: Target | None = None) -> bytes:
    """Export a contact as a shareable card (or the device's own card when no key is given)"""
    return _command(CommandCode.export_contact, _key(public_key) if public_key is not None else b'')


def import_contact(card: Buffer) -> bytes:
    return _command(CommandCode.import_contact, card)


def encode_contact(contact: MeshContact) -> bytes:
    """Encode a contact as the 147 byte record used by the firmware"""
    return b''.join([
        _key(contact),
        UInt8.pack(contact.type),
        UInt8.pack(contact.flags),
        Int8.pack(contact.out_path_length),
        contact.out_path[:PATH_SIZE].ljust(PATH_SIZE, b'\x00'),
        encode_fixed_text(contact.advertised_name, NAME_SIZE),
        _unix_time(contact.last_advertisement),
        Int32LE.pack(round(contact.latitude * 1_000_000)),
        Int32LE.pack(round(contact.longitude * 1_000_000)),
        _unix_time(contact.last_modified),
    ])


def update_contact(contact: MeshContact) -> bytes:
    return _command(CommandCode.update_contact, encode_contact(contact))


def get_advert_path(public_key: Target) -> bytes:
    return _command(CommandCode.get_advert_path, b'\x00', _key(public_key))


# Messaging

def get_message() -> bytes:
    return _command(CommandCode.get_message)


def send_message(destination: Target, text: str, timestamp: Timestamp = None, attempt: int = 0) -> bytes:
    """
    Build a direct text message frame.

    Layout: [0x02][text type][attempt][timestamp:4][key prefix:6][text].
    """
    return _command(CommandCode.send_message, b'\x00', UInt8.pack(attempt), _unix_time(timestamp), _key(destination, MESSAGE_PREFIX_SIZE), text.encode('utf-8'))


def send_command(destination: Target, command: str, timestamp: Timestamp = None) -> bytes:
    return _command(CommandCode.send_message, b'\x01\x00', _unix_time(timestamp), _key(destination, MESSAGE_PREFIX_SIZE), command.encode('utf-8'))


def send_channel_message(channel: int, text: str, timestamp: Timestamp = None) -> bytes:
    return _command(CommandCode.send_channel_message, b'\x00', UInt8.pack(channel), _unix_time(timestamp), text.encode('utf-8'))


def send_login(destination: Target, password: str) -> bytes:
    return _command(CommandCode.send_login, _key(destination), password.encode('utf-8'))


def send_logout(destination: Target) -> bytes:
    return _command(CommandCode.send_logout, _key(destination))


def send_status_request(destination: Target) -> bytes:
    return _command(CommandCode.send_status_request, _key(destination))


def binary_request(destination: Target, request_type: BinaryRequestType, payload: Buffer = b'') -> bytes:
    return _command(CommandCode.binary_request, _key(destination), UInt8.pack(request_type), payload)


def send_path_discovery(destination: Target) -> bytes:
    return _command(CommandCode.path_discovery, b'\x00', _key(destination))


def send_trace(tag: int, auth_code: int, flags: int, path: Buffer = b'') -> bytes:
    return _command(CommandCode.send_trace, UInt32LE.pack(tag), UInt32LE.pack(auth_code), UInt8.pack(flags), path)


def send_raw_data(path: Buffer, payload: Buffer) -> bytes:
    path = bytes(path)
    return _command(CommandCode.send_raw_data, UInt8.pack(len(path)), path, payload)


def has_connection(public_key: Target) -> bytes:
    return _command(CommandCode.has_connection, _key(public_key))


# Channels

def get_channel(index: int) -> bytes:
    return _command(CommandCode.get_channel, UInt8.pack(index))


def set_channel(index: int, name: str, secret: Buffer | None = None) -> bytes:
    """
    Build the channel configuration frame.

    Layout: [0x20][index][name:32, zero padded][secret:16]. Without an
    explicit secret, the secret is derived from the channel name.
    """
    secret_data = ChannelSecret(bytes(secret) if secret is not None else None).secret_data(name)
    return _command(CommandCode.set_channel, UInt8.pack(index), encode_fixed_text(name, CHANNEL_NAME_SIZE), secret_data)


# Statistics

def get_stats(stats_type: StatsType) -> bytes:
    return _command(CommandCode.get_stats, UInt8.pack(stats_type))


def get_stats_core() -> bytes:
    return get_stats(StatsType.core)


def get_stats_radio() -> bytes:
    return get_stats(StatsType.radio)


def get_stats_packets() -> bytes:
    return get_stats(StatsType.packets)


# Keys and signing

def export_private_key() -> bytes:
    return _command(CommandCode.export_private_key)


def import_private_key(key: Buffer) -> bytes:
    return _command(CommandCode.import_private_key, key)


def sign_start() -> bytes:
    return _command(CommandCode.sign_start)


def sign_data(chunk: Buffer) -> bytes:
    return _command(CommandCode.sign_data, chunk)


def sign_finish() -> bytes:
    return _command(CommandCode.sign_finish)


# Routing and control

def set_flood_scope(scope: FloodScope | Buffer) -> bytes:
    scope_key = scope.scope_key if isinstance(scope, FloodScope) else FloodScope(raw_key=bytes(scope)).scope_key
    return _command(CommandCode.set_flood_scope, b'\x00', scope_key)


def send_control_data(control_type: int, payload: Buffer = b'') -> bytes:
    return _command(CommandCode.send_control_data, UInt8.pack(control_type), payload)


def send_node_discover_request(node_filter: int, *, prefix_only: bool = True, tag: int | None = None, since: int | None = None) -> bytes:
    """
    Build a node discovery request.

    Layout: [0x37][0x80 | prefix only flag][filter][tag:4][since:4, optional].
    A random tag is used when none is given.
    """
    control_type = ControlType.node_discover_request | int(prefix_only)
    tag = new_tag() if tag is None else tag
    return send_control_data(control_type, UInt8.pack(node_filter) + UInt32LE.pack(tag) + (UInt32LE.pack(since) if since is not None else b''))
