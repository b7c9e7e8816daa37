# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Decoders for the frames received from the firmware.

A frame starts with a one byte response code that selects the decoder
for the rest of the frame. Each decoder validates the length of the
payload before reading any field and returns either the decoded event
or a ParseFailure carrying the payload and the reason. Decoders never
raise for malformed input.
"""

import logging
from collections.abc import Buffer, Callable
from datetime import UTC, datetime
from enum import Enum

from meshcore.events.model import (
    Acknowledgement,
    Advertisement,
    AdvertPathResponse,
    AllowedRepeatFreq,
    AutoAddConfig,
    BatteryReceived,
    BinaryResponse,
    ChannelInfo,
    ChannelMessage,
    ContactDeleted,
    ContactMessage,
    ContactReceived,
    ContactsEnd,
    ContactsFull,
    ContactsStart,
    ContactURI,
    ControlData,
    CoreStats,
    CurrentTime,
    CustomVars,
    DeviceInfoReceived,
    Disabled,
    DiscoverResponse,
    Error,
    Event,
    FrequencyRange,
    LoginFailed,
    LoginSuccess,
    MessageSent,
    MessagesWaiting,
    NewContact,
    NoMoreMessages,
    Ok,
    PacketStats,
    ParseFailure,
    PathInfo,
    PathUpdate,
    PrivateKey,
    RadioStats,
    RawData,
    RxLogData,
    SelfInfoReceived,
    Signature,
    SignStart,
    StatusResponse,
    TelemetryResponse,
    TraceInfo,
    TraceNode,
    TuningParamsResponse,
)
from meshcore.models import BatteryInfo, DeviceCapabilities, MeshContact, SelfInfo

from .binary import decode_status
from .codec import Int8, Int16LE, Int32LE, UInt16LE, UInt32LE, decode_fixed_text, decode_text
from .codes import ControlType, ResponseCode, StatsType, TextType

__all__ = (  # noqa: RUF022
    'MessageVersion',
    'parse_packet',

    'decode_contact',

    'parse_ok',
    'parse_error',
    'parse_contacts_start',
    'parse_contact',
    'parse_contacts_end',
    'parse_self_info',
    'parse_message_sent',
    'parse_contact_message',
    'parse_channel_message',
    'parse_current_time',
    'parse_no_more_messages',
    'parse_contact_uri',
    'parse_battery',
    'parse_device_info',
    'parse_private_key',
    'parse_disabled',
    'parse_channel_info',
    'parse_sign_start',
    'parse_signature',
    'parse_custom_vars',
    'parse_advert_path',
    'parse_tuning_params',
    'parse_stats',
    'parse_core_stats',
    'parse_radio_stats',
    'parse_packet_stats',
    'parse_auto_add_config',
    'parse_allowed_repeat_freq',

    'parse_advertisement',
    'parse_path_update',
    'parse_acknowledgement',
    'parse_messages_waiting',
    'parse_raw_data',
    'parse_login_success',
    'parse_login_failed',
    'parse_status_response',
    'parse_log_data',
    'parse_trace_data',
    'parse_new_advertisement',
    'parse_telemetry_response',
    'parse_binary_response_frame',
    'parse_path_discovery_response',
    'parse_control_data',
    'parse_contact_deleted',
    'parse_contacts_full',
)


log = logging.getLogger(__name__)


CONTACT_SIZE = 147
PUBLIC_KEY_SIZE = 32
KEY_PREFIX_SIZE = 6
SELF_INFO_MIN_SIZE = 55
MESSAGE_SENT_MIN_SIZE = 9
PRIVATE_KEY_SIZE = 64
BATTERY_MIN_SIZE = 2
BATTERY_STORAGE_SIZE = 10
SIGN_START_MIN_SIZE = 5
DEVICE_INFO_V3_SIZE = 79
CLIENT_REPEAT_FIRMWARE_VERSION = 9
ACK_SIZE = 4
CHANNEL_INFO_SIZE = 49
CORE_STATS_SIZE = 9
RADIO_STATS_SIZE = 12
PACKET_STATS_SIZE = 24
ADVERT_PATH_MIN_SIZE = 5
TUNING_PARAMS_SIZE = 8
STATUS_RESPONSE_MIN_SIZE = 1 + KEY_PREFIX_SIZE + 51
STATUS_RESPONSE_ERRORS_SIZE = 63
TRACE_DATA_MIN_SIZE = 11
RAW_DATA_MIN_SIZE = 3
CONTROL_DATA_MIN_SIZE = 4
DISCOVER_RESPONSE_MIN_SIZE = 5
PUSH_PREFIX_SIZE = 1 + KEY_PREFIX_SIZE  # reserved byte + key prefix
LOGIN_MIN_SIZE = 1 + KEY_PREFIX_SIZE
FREQUENCY_RANGE_SIZE = 8


class MessageVersion(Enum):
    v1 = 1
    v3 = 3  # prepends snr*4 (1 byte) and 2 reserved bytes


def _too_short(name: str, data: bytes, minimum: int) -> ParseFailure:
    return ParseFailure(data, f'{name} too short: {len(data)} < {minimum}')


def _timestamp(value: int) -> datetime:
    return datetime.fromtimestamp(value, tz=UTC)


def _coordinate(data: bytes, offset: int) -> float:
    return Int32LE.read(data, offset) / 1_000_000


# Command responses

def parse_ok(data: bytes) -> Ok:
    return Ok(UInt32LE.read(data) if len(data) >= 4 else None)


def parse_error(data: bytes) -> Error:
    return Error(data[0] if data else None)


# Contacts

def decode_contact(data: bytes) -> MeshContact:
    """Decode a 147 byte contact record (the length must have been validated)"""
    out_path_length = Int8.read(data, 34)
    return MeshContact(
        public_key=data[0:32],
        type=data[32],
        flags=data[33],
        out_path_length=out_path_length,
        out_path=data[35:35 + min(max(out_path_length, 0), 64)],
        advertised_name=decode_fixed_text(data[99:131]),
        last_advertisement=_timestamp(UInt32LE.read(data, 131)),
        latitude=_coordinate(data, 135),
        longitude=_coordinate(data, 139),
        last_modified=_timestamp(UInt32LE.read(data, 143)),
    )


def parse_contacts_start(data: bytes) -> ContactsStart | ParseFailure:
    if len(data) < 4:
        return _too_short('ContactsStart', data, 4)
    return ContactsStart(UInt32LE.read(data))


def parse_contact(data: bytes) -> ContactReceived | ParseFailure:
    if len(data) < CONTACT_SIZE:
        return _too_short('Contact response', data, CONTACT_SIZE)
    return ContactReceived(decode_contact(data))


def parse_contacts_end(data: bytes) -> ContactsEnd | ParseFailure:
    if len(data) < 4:
        return _too_short('ContactsEnd', data, 4)
    return ContactsEnd(_timestamp(UInt32LE.read(data)))


def parse_contact_uri(data: bytes) -> ContactURI:
    return ContactURI(decode_text(data, context='ContactURI').strip())


def parse_contact_deleted(data: bytes) -> ContactDeleted | ParseFailure:
    if len(data) < PUBLIC_KEY_SIZE:
        return _too_short('ContactDeleted', data, PUBLIC_KEY_SIZE)
    return ContactDeleted(data[:PUBLIC_KEY_SIZE])


def parse_contacts_full(data: bytes) -> ContactsFull:
    return ContactsFull()


# Device information

def parse_self_info(data: bytes) -> SelfInfoReceived | ParseFailure:
    if len(data) < SELF_INFO_MIN_SIZE:
        return _too_short('SelfInfo response', data, SELF_INFO_MIN_SIZE)
    telemetry_mode = data[45]
    info = SelfInfo(
        advertisement_type=data[0],
        tx_power=Int8.read(data, 1),
        max_tx_power=Int8.read(data, 2),
        public_key=data[3:35],
        latitude=_coordinate(data, 35),
        longitude=_coordinate(data, 39),
        multi_acks=data[43],
        advertisement_location_policy=data[44],
        telemetry_mode_environment=(telemetry_mode >> 4) & 0b11,
        telemetry_mode_location=(telemetry_mode >> 2) & 0b11,
        telemetry_mode_base=telemetry_mode & 0b11,
        manual_add_contacts=data[46] != 0,
        radio_frequency=UInt32LE.read(data, 47) / 1000,
        radio_bandwidth=UInt32LE.read(data, 51) / 1000,
        radio_spreading_factor=data[55] if len(data) > 55 else 0,
        radio_coding_rate=data[56] if len(data) > 56 else 0,
        name=decode_fixed_text(data[57:]),
    )
    return SelfInfoReceived(info)


def parse_device_info(data: bytes) -> DeviceInfoReceived | ParseFailure:
    """
    Decode the device information response.

    Firmware before version 3 (or a short frame) only provides the
    firmware version. Version 3 and later add the limits and the build,
    model and version strings, and version 9 and later append the client
    repeat flag.
    """
    if not data:
        return ParseFailure(data, 'DeviceInfo response empty')
    firmware_version = data[0]
    if firmware_version < 3 or len(data) < DEVICE_INFO_V3_SIZE:
        return DeviceInfoReceived(DeviceCapabilities(firmware_version=firmware_version))
    capabilities = DeviceCapabilities(
        firmware_version=firmware_version,
        max_contacts=data[1] * 2,
        max_channels=data[2],
        ble_pin=UInt32LE.read(data, 3),
        firmware_build=decode_fixed_text(data[7:19]),
        model=decode_fixed_text(data[19:59]),
        version=decode_fixed_text(data[59:79]),
        client_repeat=firmware_version >= CLIENT_REPEAT_FIRMWARE_VERSION and len(data) > DEVICE_INFO_V3_SIZE and data[DEVICE_INFO_V3_SIZE] != 0,
    )
    return DeviceInfoReceived(capabilities)


def parse_battery(data: bytes) -> BatteryReceived | ParseFailure:
    if len(data) < BATTERY_MIN_SIZE:
        return _too_short('Battery response', data, BATTERY_MIN_SIZE)
    if len(data) >= BATTERY_STORAGE_SIZE:
        battery = BatteryInfo(UInt16LE.read(data), used_storage_kb=UInt32LE.read(data, 2), total_storage_kb=UInt32LE.read(data, 6))
    else:
        battery = BatteryInfo(UInt16LE.read(data))
    return BatteryReceived(battery)


def parse_current_time(data: bytes) -> CurrentTime | ParseFailure:
    if len(data) < 4:
        return _too_short('CurrentTime response', data, 4)
    return CurrentTime(_timestamp(UInt32LE.read(data)))


def parse_private_key(data: bytes) -> PrivateKey | ParseFailure:
    if len(data) < PRIVATE_KEY_SIZE:
        return _too_short('PrivateKey response', data, PRIVATE_KEY_SIZE)
    return PrivateKey(data[:PRIVATE_KEY_SIZE])


def parse_disabled(data: bytes) -> Disabled:
    return Disabled(decode_text(data, context='Disabled'))


def parse_channel_info(data: bytes) -> ChannelInfo | ParseFailure:
    if len(data) < CHANNEL_INFO_SIZE:
        return _too_short('ChannelInfo', data, CHANNEL_INFO_SIZE)
    return ChannelInfo(index=data[0], name=decode_fixed_text(data[1:33]), secret=data[33:49])


def parse_custom_vars(data: bytes) -> CustomVars:
    """Decode the custom variables, sent as 'key:value' pairs separated by commas"""
    variables = {}
    for pair in decode_text(data, context='CustomVars').split(','):
        key, separator, value = pair.partition(':')
        if separator and key:
            variables[key] = value
    return CustomVars(variables)


def parse_advert_path(data: bytes) -> AdvertPathResponse | ParseFailure:
    if len(data) < ADVERT_PATH_MIN_SIZE:
        return _too_short('AdvertPath response', data, ADVERT_PATH_MIN_SIZE)
    path_length = data[4]
    return AdvertPathResponse(recv_timestamp=UInt32LE.read(data), path_length=path_length, path=data[5:5 + path_length])


def parse_tuning_params(data: bytes) -> TuningParamsResponse | ParseFailure:
    if len(data) < TUNING_PARAMS_SIZE:
        return _too_short('TuningParams response', data, TUNING_PARAMS_SIZE)
    return TuningParamsResponse(rx_delay_base=UInt32LE.read(data) / 1000, airtime_factor=UInt32LE.read(data, 4) / 1000)


def parse_core_stats(data: bytes) -> CoreStats | ParseFailure:
    if len(data) < CORE_STATS_SIZE:
        return _too_short('CoreStats', data, CORE_STATS_SIZE)
    return CoreStats(battery_mv=UInt16LE.read(data), uptime_seconds=UInt32LE.read(data, 2), errors=UInt16LE.read(data, 6), queue_length=data[8])


def parse_radio_stats(data: bytes) -> RadioStats | ParseFailure:
    if len(data) < RADIO_STATS_SIZE:
        return _too_short('RadioStats', data, RADIO_STATS_SIZE)
    return RadioStats(
        noise_floor=Int16LE.read(data),
        last_rssi=Int8.read(data, 2),
        last_snr=Int8.read(data, 3) / 4,
        tx_airtime_seconds=UInt32LE.read(data, 4),
        rx_airtime_seconds=UInt32LE.read(data, 8),
    )


def parse_packet_stats(data: bytes) -> PacketStats | ParseFailure:
    if len(data) < PACKET_STATS_SIZE:
        return _too_short('PacketStats', data, PACKET_STATS_SIZE)
    received, sent, flood_tx, direct_tx, flood_rx, direct_rx = (UInt32LE.read(data, offset) for offset in range(0, PACKET_STATS_SIZE, 4))
    return PacketStats(received=received, sent=sent, flood_tx=flood_tx, direct_tx=direct_tx, flood_rx=flood_rx, direct_rx=direct_rx)


def parse_stats(data: bytes) -> CoreStats | RadioStats | PacketStats | ParseFailure:
    if not data:
        return _too_short('Stats response', data, 1)
    match data[0]:
        case StatsType.core:
            return parse_core_stats(data[1:])
        case StatsType.radio:
            return parse_radio_stats(data[1:])
        case StatsType.packets:
            return parse_packet_stats(data[1:])
        case stats_type:
            return ParseFailure(data, f'Unknown stats type: {stats_type}')


def parse_auto_add_config(data: bytes) -> AutoAddConfig | ParseFailure:
    if not data:
        return _too_short('AutoAddConfig response', data, 1)
    return AutoAddConfig(data[0])


def parse_allowed_repeat_freq(data: bytes) -> AllowedRepeatFreq:
    ranges = tuple(
        FrequencyRange(lower_khz=UInt32LE.read(data, offset), upper_khz=UInt32LE.read(data, offset + 4))
        for offset in range(0, len(data) - FREQUENCY_RANGE_SIZE + 1, FREQUENCY_RANGE_SIZE)
    )
    return AllowedRepeatFreq(ranges)


# Messaging

def parse_message_sent(data: bytes) -> MessageSent | ParseFailure:
    if len(data) < MESSAGE_SENT_MIN_SIZE:
        return _too_short('MessageSent response', data, MESSAGE_SENT_MIN_SIZE)
    return MessageSent(type=data[0], expected_ack=data[1:5], suggested_timeout_ms=UInt32LE.read(data, 5))


def parse_contact_message(data: bytes, version: MessageVersion = MessageVersion.v1) -> ContactMessage | ParseFailure:
    minimum = 15 if version is MessageVersion.v3 else 12
    if len(data) < minimum:
        return _too_short('ContactMessage response', data, minimum)
    if version is MessageVersion.v3:
        snr = Int8.read(data) / 4
        offset = 3
    else:
        snr = None
        offset = 0
    text_type = data[offset + 7]
    signature = None
    text_offset = offset + 12
    if text_type == TextType.signed and len(data) >= text_offset + 4:
        signature = data[text_offset:text_offset + 4]
        text_offset += 4
    return ContactMessage(
        sender_public_key_prefix=data[offset:offset + 6],
        path_length=data[offset + 6],
        text_type=text_type,
        sender_timestamp=_timestamp(UInt32LE.read(data, offset + 8)),
        signature=signature,
        text=decode_text(data[text_offset:], context='ContactMessage'),
        snr=snr,
    )


def parse_channel_message(data: bytes, version: MessageVersion = MessageVersion.v1) -> ChannelMessage | ParseFailure:
    minimum = 11 if version is MessageVersion.v3 else 8
    if len(data) < minimum:
        return _too_short('ChannelMessage response', data, minimum)
    if version is MessageVersion.v3:
        snr = Int8.read(data) / 4
        offset = 3
    else:
        snr = None
        offset = 0
    return ChannelMessage(
        channel_index=data[offset],
        path_length=data[offset + 1],
        text_type=data[offset + 2],
        sender_timestamp=_timestamp(UInt32LE.read(data, offset + 3)),
        text=decode_text(data[offset + 7:], context='ChannelMessage'),
        snr=snr,
    )


def parse_no_more_messages(data: bytes) -> NoMoreMessages:
    return NoMoreMessages()


def parse_messages_waiting(data: bytes) -> MessagesWaiting:
    return MessagesWaiting()


# Signing

def parse_sign_start(data: bytes) -> SignStart | ParseFailure:
    if len(data) < SIGN_START_MIN_SIZE:
        return _too_short('SignStart response', data, SIGN_START_MIN_SIZE)
    return SignStart(UInt32LE.read(data, 1))


def parse_signature(data: bytes) -> Signature:
    return Signature(data)


# Push notifications

def parse_advertisement(data: bytes) -> Advertisement | ParseFailure:
    if len(data) < PUBLIC_KEY_SIZE:
        return _too_short('Advertisement', data, PUBLIC_KEY_SIZE)
    return Advertisement(data[:PUBLIC_KEY_SIZE])


def parse_new_advertisement(data: bytes) -> NewContact | Advertisement | ParseFailure:
    if len(data) >= CONTACT_SIZE:
        return NewContact(decode_contact(data))
    if len(data) >= PUBLIC_KEY_SIZE:
        return Advertisement(data[:PUBLIC_KEY_SIZE])
    return _too_short('NewAdvertisement', data, PUBLIC_KEY_SIZE)


def parse_path_update(data: bytes) -> PathUpdate | ParseFailure:
    if len(data) < PUBLIC_KEY_SIZE:
        return _too_short('PathUpdate', data, PUBLIC_KEY_SIZE)
    return PathUpdate(data[:PUBLIC_KEY_SIZE])


def parse_acknowledgement(data: bytes) -> Acknowledgement | ParseFailure:
    if len(data) < ACK_SIZE:
        return _too_short('Acknowledgement', data, ACK_SIZE)
    return Acknowledgement(data[:ACK_SIZE])


def parse_raw_data(data: bytes) -> RawData | ParseFailure:
    # [snr*4:1][rssi:1][reserved:1][payload]
    if len(data) < RAW_DATA_MIN_SIZE:
        return _too_short('RawData', data, RAW_DATA_MIN_SIZE)
    return RawData(snr=Int8.read(data) / 4, rssi=Int8.read(data, 1), payload=data[3:])


def parse_log_data(data: bytes) -> RxLogData:
    if len(data) >= 2:
        return RxLogData(snr=Int8.read(data) / 4, rssi=Int8.read(data, 1), payload=data[2:])
    return RxLogData(snr=None, rssi=None, payload=data)


def parse_login_success(data: bytes) -> LoginSuccess:
    # [permissions:1][key prefix:6]; older firmware sends no payload at all
    if len(data) < LOGIN_MIN_SIZE:
        return LoginSuccess(permissions=0, is_admin=False, public_key_prefix=b'')
    return LoginSuccess(permissions=data[0], is_admin=bool(data[0] & 0x01), public_key_prefix=data[1:LOGIN_MIN_SIZE])


def parse_login_failed(data: bytes) -> LoginFailed:
    if len(data) < LOGIN_MIN_SIZE:
        return LoginFailed(None)
    return LoginFailed(data[1:LOGIN_MIN_SIZE])


def parse_status_response(data: bytes) -> StatusResponse | ParseFailure:
    """
    Decode a status response push notification.

    The key prefix is preceded by a reserved byte that must be skipped.
    The receive errors counter is only present in 63 byte frames.
    """
    if len(data) < STATUS_RESPONSE_MIN_SIZE:
        return _too_short('StatusResponse', data, STATUS_RESPONSE_MIN_SIZE)
    public_key_prefix = data[1:PUSH_PREFIX_SIZE]
    return decode_status(data, PUSH_PREFIX_SIZE, public_key_prefix, rx_airtime=True, receive_errors=len(data) >= STATUS_RESPONSE_ERRORS_SIZE)


def parse_telemetry_response(data: bytes) -> TelemetryResponse | ParseFailure:
    # [reserved:1][key prefix:6][LPP data]
    if len(data) < PUSH_PREFIX_SIZE:
        return _too_short('TelemetryResponse', data, PUSH_PREFIX_SIZE)
    return TelemetryResponse(public_key_prefix=data[1:PUSH_PREFIX_SIZE], tag=None, raw_data=data[PUSH_PREFIX_SIZE:])


def parse_binary_response_frame(data: bytes) -> BinaryResponse | ParseFailure:
    if len(data) < 4:
        return _too_short('BinaryResponse', data, 4)
    return BinaryResponse(tag=data[:4], data=data[4:])


def parse_path_discovery_response(data: bytes) -> PathInfo | ParseFailure:
    """
    Decode a path discovery response.

    Layout: [reserved:1][key prefix:6][out length:1][out path][in length:1][in path].
    Paths that would overrun the frame are left empty.
    """
    if len(data) < PUSH_PREFIX_SIZE:
        return _too_short('PathDiscoveryResponse', data, PUSH_PREFIX_SIZE)
    paths = []
    offset = PUSH_PREFIX_SIZE
    for _ in range(2):
        path = b''
        if offset < len(data):
            length = data[offset]
            offset += 1
            if length > 0 and offset + length <= len(data):
                path = data[offset:offset + length]
                offset += length
        paths.append(path)
    out_path, in_path = paths
    return PathInfo(public_key_prefix=data[1:PUSH_PREFIX_SIZE], out_path=out_path, in_path=in_path)


def parse_trace_data(data: bytes) -> TraceInfo | ParseFailure:
    """
    Decode a trace response.

    Layout: [reserved:1][path length:1][flags:1][tag:4][auth code:4]
    followed by the hop hashes, one SNR byte per hop and a final SNR byte
    for the destination. The lower two bits of flags select the width of
    a hop hash (1, 2 or 4 bytes) and path length counts hash bytes, so it
    must be a whole number of hashes. The indicator value 3 is undefined
    and fails the parse. A hash with all bits set marks the destination
    rather than a repeater.
    """
    if len(data) < TRACE_DATA_MIN_SIZE:
        return _too_short('TraceData', data, TRACE_DATA_MIN_SIZE)
    path_length = data[1]
    flags = data[2]
    if flags & 0x03 == 0x03:
        return ParseFailure(data, f'TraceData has an undefined hash size indicator: {flags:#04x}')
    hash_size = 1 << (flags & 0x03)
    if path_length % hash_size:
        return ParseFailure(data, f'TraceData path length {path_length} is not a multiple of the hash size {hash_size}')
    hop_count = path_length // hash_size
    no_hash = b'\xff' * hash_size
    hashes_offset = TRACE_DATA_MIN_SIZE
    snrs_offset = hashes_offset + path_length
    final_snr_offset = snrs_offset + hop_count

    path = []
    if final_snr_offset < len(data):
        for hop in range(hop_count):
            hash_bytes = data[hashes_offset + hop * hash_size:hashes_offset + (hop + 1) * hash_size]
            path.append(TraceNode(hash_bytes=None if hash_bytes == no_hash else hash_bytes, snr=Int8.read(data, snrs_offset + hop) / 4))
        path.append(TraceNode(hash_bytes=None, snr=Int8.read(data, final_snr_offset) / 4))

    return TraceInfo(tag=UInt32LE.read(data, 3), auth_code=UInt32LE.read(data, 7), flags=flags, path_length=path_length, path=tuple(path))


def parse_control_data(data: bytes) -> ControlData | DiscoverResponse | ParseFailure:
    """
    Decode a control data frame.

    Layout: [snr*4:1][rssi:1][path length:1][payload type:1][payload].
    A node discover response (payload type 0x9X, with the node type in
    the low nibble) carrying [snr in*4:1][tag:4][public key] is decoded
    into a DiscoverResponse. Anything else, including discover responses
    with a truncated payload, yields the generic ControlData event.
    """
    if len(data) < CONTROL_DATA_MIN_SIZE:
        return _too_short('ControlData', data, CONTROL_DATA_MIN_SIZE)
    snr = Int8.read(data) / 4
    rssi = Int8.read(data, 1)
    path_length = data[2]
    payload_type = data[3]
    payload = data[4:]
    if payload_type & 0xf0 == ControlType.node_discover_response and len(payload) >= DISCOVER_RESPONSE_MIN_SIZE:
        return DiscoverResponse(
            node_type=payload_type & 0x0f,
            snr_in=Int8.read(payload) / 4,
            snr=snr,
            rssi=rssi,
            path_length=path_length,
            tag=payload[1:5],
            public_key=payload[5:],
        )
    return ControlData(snr=snr, rssi=rssi, path_length=path_length, payload_type=payload_type, payload=payload)


# Dispatch

type FrameParser = Callable[[bytes], Event]

_parsers: dict[ResponseCode, FrameParser] = {
    ResponseCode.ok: parse_ok,
    ResponseCode.error: parse_error,
    ResponseCode.contact_start: parse_contacts_start,
    ResponseCode.contact: parse_contact,
    ResponseCode.contact_end: parse_contacts_end,
    ResponseCode.self_info: parse_self_info,
    ResponseCode.message_sent: parse_message_sent,
    ResponseCode.contact_message_received: lambda data: parse_contact_message(data, MessageVersion.v1),
    ResponseCode.channel_message_received: lambda data: parse_channel_message(data, MessageVersion.v1),
    ResponseCode.current_time: parse_current_time,
    ResponseCode.no_more_messages: parse_no_more_messages,
    ResponseCode.contact_uri: parse_contact_uri,
    ResponseCode.battery: parse_battery,
    ResponseCode.device_info: parse_device_info,
    ResponseCode.private_key: parse_private_key,
    ResponseCode.disabled: parse_disabled,
    ResponseCode.contact_message_received_v3: lambda data: parse_contact_message(data, MessageVersion.v3),
    ResponseCode.channel_message_received_v3: lambda data: parse_channel_message(data, MessageVersion.v3),
    ResponseCode.channel_info: parse_channel_info,
    ResponseCode.sign_start: parse_sign_start,
    ResponseCode.signature: parse_signature,
    ResponseCode.custom_vars: parse_custom_vars,
    ResponseCode.advert_path: parse_advert_path,
    ResponseCode.tuning_params: parse_tuning_params,
    ResponseCode.stats: parse_stats,
    ResponseCode.auto_add_config: parse_auto_add_config,
    ResponseCode.allowed_repeat_freq: parse_allowed_repeat_freq,

    ResponseCode.advertisement: parse_advertisement,
    ResponseCode.path_update: parse_path_update,
    ResponseCode.ack: parse_acknowledgement,
    ResponseCode.messages_waiting: parse_messages_waiting,
    ResponseCode.raw_data: parse_raw_data,
    ResponseCode.login_success: parse_login_success,
    ResponseCode.login_failed: parse_login_failed,
    ResponseCode.status_response: parse_status_response,
    ResponseCode.log_data: parse_log_data,
    ResponseCode.trace_data: parse_trace_data,
    ResponseCode.new_advertisement: parse_new_advertisement,
    ResponseCode.telemetry_response: parse_telemetry_response,
    ResponseCode.binary_response: parse_binary_response_frame,
    ResponseCode.path_discovery_response: parse_path_discovery_response,
    ResponseCode.control_data: parse_control_data,
    ResponseCode.contact_deleted: parse_contact_deleted,
    ResponseCode.contacts_full: parse_contacts_full,
}

assert set(_parsers) == set(ResponseCode), 'every response code must have a parser'  # noqa: S101


def parse_packet(frame: Buffer) -> Event:
    """Decode a complete frame (response code followed by its payload) into an event"""
    frame = bytes(frame)
    if not frame:
        return ParseFailure(frame, 'Empty frame')
    try:
        code = ResponseCode(frame[0])
    except ValueError:
        log.debug('Ignoring frame with unknown response code 0x%02x (%d bytes)', frame[0], len(frame))
        return ParseFailure(frame, f'Unknown response code: 0x{frame[0]:02x}')
    return _parsers[code](frame[1:])
