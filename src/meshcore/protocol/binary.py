# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Decoders for the binary request/response sub-protocol.

Binary responses are correlated with their requests by a tag, so the
layout of their payload depends on the type of the request that caused
them and not on anything inside the payload itself. The session layer
that tracks pending requests hands the payload to parse_binary_response()
together with the request type.
"""

from collections.abc import Buffer

from meshcore.configuration import Configuration
from meshcore.events.model import (
    ACLEntry,
    ACLResponse,
    BinaryResponse,
    Event,
    MMAEntry,
    MMAResponse,
    Neighbour,
    NeighboursResponse,
    ParseFailure,
    StatusResponse,
    TelemetryResponse,
)
from meshcore.lpp import SensorType, decode_scalar

from .codec import Int8, Int16LE, Int32LE, UInt16LE, UInt32LE
from .codes import BinaryRequestType

__all__ = (  # noqa: RUF022
    'STATUS_FIELDS_SIZE',
    'decode_status',
    'parse_status_binary',
    'decode_acl',
    'decode_mma',
    'decode_neighbours',
    'parse_binary_response',
)


STATUS_FIELDS_SIZE = 48  # the fields common to all firmware versions
ACL_ENTRY_SIZE = 7


def decode_status(data: bytes, offset: int, public_key_prefix: bytes, *, rx_airtime: bool, receive_errors: bool) -> StatusResponse:
    """Decode the status fields starting at offset (the frame length must have been validated)"""
    return StatusResponse(
        public_key_prefix=public_key_prefix,
        battery=UInt16LE.read(data, offset),
        tx_queue_length=UInt16LE.read(data, offset + 2),
        noise_floor=Int16LE.read(data, offset + 4),
        last_rssi=Int16LE.read(data, offset + 6),
        packets_received=UInt32LE.read(data, offset + 8),
        packets_sent=UInt32LE.read(data, offset + 12),
        airtime=UInt32LE.read(data, offset + 16),
        uptime=UInt32LE.read(data, offset + 20),
        sent_flood=UInt32LE.read(data, offset + 24),
        sent_direct=UInt32LE.read(data, offset + 28),
        received_flood=UInt32LE.read(data, offset + 32),
        received_direct=UInt32LE.read(data, offset + 36),
        full_events=UInt16LE.read(data, offset + 40),
        last_snr=Int16LE.read(data, offset + 42) / 4,
        direct_duplicates=UInt16LE.read(data, offset + 44),
        flood_duplicates=UInt16LE.read(data, offset + 46),
        rx_airtime=UInt32LE.read(data, offset + 48) if rx_airtime else 0,
        receive_errors=UInt32LE.read(data, offset + 52) if receive_errors else 0,
    )


def parse_status_binary(data: Buffer, public_key_prefix: bytes = b'') -> StatusResponse | ParseFailure:
    """
    Decode a status response received through a binary request.

    This layout has no reserved byte and no key prefix. Older firmware
    versions send 48 or 52 bytes, newer ones 56 or more. The fields
    that are missing from the shorter layouts default to zero, while
    lengths that fall between two known layouts are rejected.
    """
    data = bytes(data)
    length = len(data)
    if length < STATUS_FIELDS_SIZE:
        return ParseFailure(data, f'StatusResponse binary too short: {length} < {STATUS_FIELDS_SIZE}')
    if STATUS_FIELDS_SIZE < length < 52 or 52 < length < 56:
        return ParseFailure(data, f'StatusResponse binary has invalid length: {length}')
    return decode_status(data, 0, public_key_prefix, rx_airtime=length >= 52, receive_errors=length >= 56)


def decode_acl(data: Buffer) -> tuple[ACLEntry, ...]:
    """Decode access list entries, skipping the unused (all zero) ones"""
    data = bytes(data)
    entries = []
    for offset in range(0, len(data) - ACL_ENTRY_SIZE + 1, ACL_ENTRY_SIZE):
        key_prefix = data[offset:offset + 6]
        if any(key_prefix):
            entries.append(ACLEntry(key_prefix=key_prefix, permissions=data[offset + 6]))
    return tuple(entries)


def decode_mma(data: Buffer) -> tuple[MMAEntry, ...]:
    """
    Decode min/max/average entries.

    Each entry is [channel][LPP type][min][max][avg] with the three
    values encoded like the LPP value of that type. Decoding stops at
    an unknown type or at an entry that would overrun the buffer.
    """
    data = bytes(data)
    entries = []
    offset = 0
    while offset + 2 <= len(data):
        channel = data[offset]
        try:
            sensor_type = SensorType(data[offset + 1])
        except ValueError:
            break
        offset += 2
        size = sensor_type.data_size
        if offset + 3 * size > len(data):
            break
        minimum, maximum, average = (decode_scalar(sensor_type, data[start:start + size]) for start in range(offset, offset + 3 * size, size))
        offset += 3 * size
        entries.append(MMAEntry(channel=channel, type=sensor_type, min=minimum, max=maximum, avg=average))
    return tuple(entries)


def decode_neighbours(data: Buffer, public_key_prefix: bytes, tag: bytes, prefix_length: int = Configuration.default.neighbour_prefix_length) -> NeighboursResponse:
    """
    Decode a neighbours listing.

    The payload is [total:2][count:2] followed by count entries of
    [key prefix:prefix_length][seconds ago:4][snr*4:1]. A payload too
    short for the header yields an empty listing.
    """
    data = bytes(data)
    if len(data) < 4:
        return NeighboursResponse(public_key_prefix=public_key_prefix, tag=tag, total_count=0, neighbours=())
    total_count = Int16LE.read(data, 0)
    result_count = Int16LE.read(data, 2)
    entry_size = prefix_length + 4 + 1
    neighbours = []
    offset = 4
    for _ in range(result_count):
        if offset + entry_size > len(data):
            break
        neighbours.append(
            Neighbour(
                public_key_prefix=data[offset:offset + prefix_length],
                seconds_ago=Int32LE.read(data, offset + prefix_length),
                snr=Int8.read(data, offset + prefix_length + 4) / 4,
            ),
        )
        offset += entry_size
    return NeighboursResponse(public_key_prefix=public_key_prefix, tag=tag, total_count=total_count, neighbours=tuple(neighbours))


def parse_binary_response(
    request_type: BinaryRequestType | int,
    data: Buffer,
    *,
    public_key_prefix: Buffer = b'',
    tag: Buffer = b'',
    prefix_length: int = Configuration.default.neighbour_prefix_length,
) -> Event:
    """Decode the payload of a binary response according to the type of request that produced it"""
    data = bytes(data)
    public_key_prefix = bytes(public_key_prefix)
    tag = bytes(tag)
    match request_type:
        case BinaryRequestType.status:
            return parse_status_binary(data, public_key_prefix)
        case BinaryRequestType.telemetry:
            return TelemetryResponse(public_key_prefix=public_key_prefix, tag=tag, raw_data=data)
        case BinaryRequestType.mma:
            return MMAResponse(public_key_prefix=public_key_prefix, tag=tag, entries=decode_mma(data))
        case BinaryRequestType.acl:
            return ACLResponse(public_key_prefix=public_key_prefix, tag=tag, entries=decode_acl(data))
        case BinaryRequestType.neighbours:
            return decode_neighbours(data, public_key_prefix, tag, prefix_length)
        case _:
            return BinaryResponse(tag=tag, data=data)
