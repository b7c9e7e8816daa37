# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
The closed set of events produced by the protocol core.

Every decoded frame turns into exactly one event. Events are immutable
records with structural equality. Where a payload record belongs to a
single kind of event, the record is the event itself (for example
StatusResponse or ContactMessage). Records shared by several events
(contacts, device information) are wrapped by the events that carry
them. Numeric fields hold already scaled values (SNR in dB, coordinates
in degrees).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from meshcore.lpp import DataPoint, SensorType, decode
from meshcore.models import BatteryInfo, DeviceCapabilities, MeshContact, SelfInfo

__all__ = (  # noqa: RUF022
    # Connection state

    'TransportErrorKind',
    'TransportError',
    'Disconnected',
    'Connecting',
    'Connected',
    'Reconnecting',
    'ConnectionFailed',
    'ConnectionState',

    # Events

    'Event',
    'MeshEvent',

    'ConnectionStateChanged',

    'Ok',
    'Error',

    'SelfInfoReceived',
    'DeviceInfoReceived',
    'BatteryReceived',
    'CurrentTime',
    'CustomVars',
    'ChannelInfo',
    'CoreStats',
    'RadioStats',
    'PacketStats',
    'AutoAddConfig',
    'FrequencyRange',
    'AllowedRepeatFreq',
    'AdvertPathResponse',
    'TuningParamsResponse',
    'PrivateKey',
    'Disabled',

    'ContactsStart',
    'ContactReceived',
    'ContactsEnd',
    'NewContact',
    'ContactURI',
    'ContactDeleted',
    'ContactsFull',

    'MessageSent',
    'ContactMessage',
    'ChannelMessage',
    'NoMoreMessages',
    'MessagesWaiting',

    'Advertisement',
    'PathUpdate',
    'Acknowledgement',
    'TraceNode',
    'TraceInfo',
    'PathInfo',

    'LoginSuccess',
    'LoginFailed',

    'StatusResponse',
    'TelemetryResponse',
    'BinaryResponse',
    'MMAEntry',
    'MMAResponse',
    'ACLEntry',
    'ACLResponse',
    'Neighbour',
    'NeighboursResponse',

    'SignStart',
    'Signature',

    'RawData',
    'RxLogData',
    'ControlData',
    'DiscoverResponse',

    'ParseFailure',
)


_empty: Mapping[str, Any] = MappingProxyType({})


# Connection state

class TransportErrorKind(Enum):
    not_connected = 'not-connected'
    connection_failed = 'connection-failed'
    send_failed = 'send-failed'
    device_not_found = 'device-not-found'
    service_not_found = 'service-not-found'
    characteristic_not_found = 'characteristic-not-found'


@dataclass(frozen=True, slots=True)
class TransportError:
    kind: TransportErrorKind
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class Disconnected:
    pass


@dataclass(frozen=True, slots=True)
class Connecting:
    pass


@dataclass(frozen=True, slots=True)
class Connected:
    pass


@dataclass(frozen=True, slots=True)
class Reconnecting:
    attempt: int


@dataclass(frozen=True, slots=True)
class ConnectionFailed:
    error: TransportError


type ConnectionState = Disconnected | Connecting | Connected | Reconnecting | ConnectionFailed


# Events

class Event:
    """Base class for all events"""

    __slots__ = ()

    @property
    def attributes(self) -> Mapping[str, Any]:
        """Event specific attributes that generic filters can match on"""
        return _empty


@dataclass(frozen=True, slots=True)
class ConnectionStateChanged(Event):
    state: ConnectionState


# Command responses

@dataclass(frozen=True, slots=True)
class Ok(Event):
    value: int | None = None

    @property
    def attributes(self) -> Mapping[str, Any]:
        return {'value': self.value}


@dataclass(frozen=True, slots=True)
class Error(Event):
    code: int | None = None

    @property
    def attributes(self) -> Mapping[str, Any]:
        return {'code': self.code}


# Device information

@dataclass(frozen=True, slots=True)
class SelfInfoReceived(Event):
    info: SelfInfo


@dataclass(frozen=True, slots=True)
class DeviceInfoReceived(Event):
    capabilities: DeviceCapabilities


@dataclass(frozen=True, slots=True)
class BatteryReceived(Event):
    battery: BatteryInfo


@dataclass(frozen=True, slots=True)
class CurrentTime(Event):
    time: datetime


@dataclass(frozen=True, slots=True)
class CustomVars(Event):
    variables: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ChannelInfo(Event):
    index: int
    name: str
    secret: bytes


@dataclass(frozen=True, slots=True)
class CoreStats(Event):
    battery_mv: int
    uptime_seconds: int
    errors: int
    queue_length: int


@dataclass(frozen=True, slots=True)
class RadioStats(Event):
    noise_floor: int
    last_rssi: int
    last_snr: float
    tx_airtime_seconds: int
    rx_airtime_seconds: int


@dataclass(frozen=True, slots=True)
class PacketStats(Event):
    received: int
    sent: int
    flood_tx: int
    direct_tx: int
    flood_rx: int
    direct_rx: int


@dataclass(frozen=True, slots=True)
class AutoAddConfig(Event):
    config: int


@dataclass(frozen=True, slots=True)
class FrequencyRange:
    lower_khz: int
    upper_khz: int


@dataclass(frozen=True, slots=True)
class AllowedRepeatFreq(Event):
    ranges: tuple[FrequencyRange, ...]


@dataclass(frozen=True, slots=True)
class AdvertPathResponse(Event):
    recv_timestamp: int
    path_length: int
    path: bytes


@dataclass(frozen=True, slots=True)
class TuningParamsResponse(Event):
    rx_delay_base: float
    airtime_factor: float


@dataclass(frozen=True, slots=True)
class PrivateKey(Event):
    key: bytes = field(repr=False)


@dataclass(frozen=True, slots=True)
class Disabled(Event):
    reason: str


# Contact management

@dataclass(frozen=True, slots=True)
class ContactsStart(Event):
    count: int


@dataclass(frozen=True, slots=True)
class ContactReceived(Event):
    contact: MeshContact

    @property
    def attributes(self) -> Mapping[str, Any]:
        return {'public_key': self.contact.public_key}


@dataclass(frozen=True, slots=True)
class ContactsEnd(Event):
    last_modified: datetime


@dataclass(frozen=True, slots=True)
class NewContact(Event):
    contact: MeshContact

    @property
    def attributes(self) -> Mapping[str, Any]:
        return {'public_key': self.contact.public_key}


@dataclass(frozen=True, slots=True)
class ContactURI(Event):
    uri: str


@dataclass(frozen=True, slots=True)
class ContactDeleted(Event):
    public_key: bytes


@dataclass(frozen=True, slots=True)
class ContactsFull(Event):
    pass


# Messaging

@dataclass(frozen=True, slots=True)
class MessageSent(Event):
    type: int
    expected_ack: bytes
    suggested_timeout_ms: int

    @property
    def attributes(self) -> Mapping[str, Any]:
        return {'type': self.type, 'expected_ack': self.expected_ack}


@dataclass(frozen=True, slots=True, kw_only=True)
class ContactMessage(Event):
    sender_public_key_prefix: bytes
    path_length: int
    text_type: int
    sender_timestamp: datetime
    signature: bytes | None
    text: str
    snr: float | None = None

    @property
    def attributes(self) -> Mapping[str, Any]:
        return {'public_key_prefix': self.sender_public_key_prefix, 'text_type': self.text_type}


@dataclass(frozen=True, slots=True, kw_only=True)
class ChannelMessage(Event):
    channel_index: int
    path_length: int
    text_type: int
    sender_timestamp: datetime
    text: str
    snr: float | None = None

    @property
    def attributes(self) -> Mapping[str, Any]:
        return {'channel_index': self.channel_index, 'text_type': self.text_type}


@dataclass(frozen=True, slots=True)
class NoMoreMessages(Event):
    pass


@dataclass(frozen=True, slots=True)
class MessagesWaiting(Event):
    pass


# Network events

@dataclass(frozen=True, slots=True)
class Advertisement(Event):
    public_key: bytes

    @property
    def attributes(self) -> Mapping[str, Any]:
        return {'public_key_prefix': self.public_key[:6]}


@dataclass(frozen=True, slots=True)
class PathUpdate(Event):
    public_key: bytes

    @property
    def attributes(self) -> Mapping[str, Any]:
        return {'public_key_prefix': self.public_key[:6]}


@dataclass(frozen=True, slots=True)
class Acknowledgement(Event):
    code: bytes

    @property
    def attributes(self) -> Mapping[str, Any]:
        return {'code': self.code}


@dataclass(frozen=True, slots=True)
class TraceNode:
    """A hop of a traced path; the destination entry has no hash"""

    hash_bytes: bytes | None
    snr: float

    @property
    def hash(self) -> int | None:
        return self.hash_bytes[0] if self.hash_bytes else None


@dataclass(frozen=True, slots=True)
class TraceInfo(Event):
    tag: int
    auth_code: int
    flags: int
    path_length: int
    path: tuple[TraceNode, ...]


@dataclass(frozen=True, slots=True)
class PathInfo(Event):
    public_key_prefix: bytes
    out_path: bytes
    in_path: bytes


# Authentication

@dataclass(frozen=True, slots=True)
class LoginSuccess(Event):
    permissions: int
    is_admin: bool
    public_key_prefix: bytes


@dataclass(frozen=True, slots=True)
class LoginFailed(Event):
    public_key_prefix: bytes | None = None


# Binary protocol responses

@dataclass(frozen=True, slots=True, kw_only=True)
class StatusResponse(Event):
    public_key_prefix: bytes
    battery: int
    tx_queue_length: int
    noise_floor: int
    last_rssi: int
    packets_received: int
    packets_sent: int
    airtime: int
    uptime: int
    sent_flood: int
    sent_direct: int
    received_flood: int
    received_direct: int
    full_events: int
    last_snr: float
    direct_duplicates: int
    flood_duplicates: int
    rx_airtime: int = 0
    receive_errors: int = 0

    @property
    def attributes(self) -> Mapping[str, Any]:
        return {'public_key_prefix': self.public_key_prefix}


@dataclass(frozen=True, slots=True)
class TelemetryResponse(Event):
    public_key_prefix: bytes
    tag: bytes | None
    raw_data: bytes

    @property
    def data_points(self) -> tuple[DataPoint, ...]:
        return tuple(decode(self.raw_data))

    @property
    def attributes(self) -> Mapping[str, Any]:
        return {'public_key_prefix': self.public_key_prefix}


@dataclass(frozen=True, slots=True)
class BinaryResponse(Event):
    tag: bytes
    data: bytes


@dataclass(frozen=True, slots=True)
class MMAEntry:
    channel: int
    type: SensorType
    min: float
    max: float
    avg: float

    @property
    def type_name(self) -> str:
        return self.type.display_name


@dataclass(frozen=True, slots=True)
class MMAResponse(Event):
    public_key_prefix: bytes
    tag: bytes
    entries: tuple[MMAEntry, ...]


@dataclass(frozen=True, slots=True)
class ACLEntry:
    key_prefix: bytes
    permissions: int


@dataclass(frozen=True, slots=True)
class ACLResponse(Event):
    public_key_prefix: bytes
    tag: bytes
    entries: tuple[ACLEntry, ...]


@dataclass(frozen=True, slots=True)
class Neighbour:
    public_key_prefix: bytes
    seconds_ago: int
    snr: float


@dataclass(frozen=True, slots=True)
class NeighboursResponse(Event):
    public_key_prefix: bytes
    tag: bytes
    total_count: int
    neighbours: tuple[Neighbour, ...]


# Cryptographic signing

@dataclass(frozen=True, slots=True)
class SignStart(Event):
    max_length: int


@dataclass(frozen=True, slots=True)
class Signature(Event):
    signature: bytes


# Raw data and logging

@dataclass(frozen=True, slots=True)
class RawData(Event):
    snr: float
    rssi: int
    payload: bytes


@dataclass(frozen=True, slots=True)
class RxLogData(Event):
    snr: float | None
    rssi: int | None
    payload: bytes


@dataclass(frozen=True, slots=True)
class ControlData(Event):
    snr: float
    rssi: int
    path_length: int
    payload_type: int
    payload: bytes


@dataclass(frozen=True, slots=True, kw_only=True)
class DiscoverResponse(Event):
    node_type: int
    snr_in: float
    snr: float
    rssi: int
    path_length: int
    tag: bytes
    public_key: bytes


# Diagnostics

@dataclass(frozen=True, slots=True)
class ParseFailure(Event):
    data: bytes
    reason: str


type MeshEvent = (
    ConnectionStateChanged |
    Ok | Error |
    SelfInfoReceived | DeviceInfoReceived | BatteryReceived | CurrentTime | CustomVars | ChannelInfo |
    CoreStats | RadioStats | PacketStats | AutoAddConfig | AllowedRepeatFreq | AdvertPathResponse |
    TuningParamsResponse | PrivateKey | Disabled |
    ContactsStart | ContactReceived | ContactsEnd | NewContact | ContactURI | ContactDeleted | ContactsFull |
    MessageSent | ContactMessage | ChannelMessage | NoMoreMessages | MessagesWaiting |
    Advertisement | PathUpdate | Acknowledgement | TraceInfo | PathInfo |
    LoginSuccess | LoginFailed |
    StatusResponse | TelemetryResponse | BinaryResponse | MMAResponse | ACLResponse | NeighboursResponse |
    SignStart | Signature |
    RawData | RxLogData | ControlData | DiscoverResponse |
    ParseFailure
)
