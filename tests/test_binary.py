# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from meshcore.configuration import Configuration
from meshcore.events import ACLEntry, ACLResponse, BinaryResponse, MMAEntry, MMAResponse, Neighbour, NeighboursResponse, ParseFailure, StatusResponse, TelemetryResponse
from meshcore.lpp import SensorType
from meshcore.protocol import BinaryRequestType
from meshcore.protocol.binary import decode_acl, decode_mma, decode_neighbours, parse_binary_response, parse_status_binary
from meshcore.protocol.codec import Int16LE, Int32LE, UInt32LE

from .test_parsers import status_fields


PREFIX = bytes.fromhex('010203040506')
TAG = b'\xa0\xb0\xc0\xd0'


class TestStatusBinary:

    def test_legacy_layout(self) -> None:
        event = parse_status_binary(status_fields(), PREFIX)
        assert isinstance(event, StatusResponse)
        assert event.public_key_prefix == PREFIX
        assert event.battery == 4100
        assert event.tx_queue_length == 3
        assert event.packets_received == 1000
        assert event.received_direct == 40
        assert event.last_snr == -5.5
        assert event.rx_airtime == 0
        assert event.receive_errors == 0

    def test_optional_fields(self) -> None:
        event = parse_status_binary(status_fields() + UInt32LE.pack(500))
        assert event.rx_airtime == 500
        assert event.receive_errors == 0
        event = parse_status_binary(status_fields() + UInt32LE.pack(500) + UInt32LE.pack(3))
        assert (event.rx_airtime, event.receive_errors) == (500, 3)
        # newer firmware may append more fields
        event = parse_status_binary(status_fields() + UInt32LE.pack(500) + UInt32LE.pack(3) + bytes(4))
        assert (event.rx_airtime, event.receive_errors) == (500, 3)

    def test_invalid_lengths(self) -> None:
        event = parse_status_binary(status_fields()[:-1])
        assert isinstance(event, ParseFailure)
        assert event.reason == 'StatusResponse binary too short: 47 < 48'
        for length in (49, 50, 51, 53, 54, 55):
            data = (status_fields() + bytes(8))[:length]
            event = parse_status_binary(data)
            assert isinstance(event, ParseFailure), length
            assert event.reason == f'StatusResponse binary has invalid length: {length}'


class TestACL:

    def test_null_entries_are_skipped(self) -> None:
        data = b'\xaa' * 6 + b'\x01' + bytes(6) + b'\x02' + b'\xbb' * 6 + b'\x03'
        assert decode_acl(data) == (ACLEntry(key_prefix=b'\xaa' * 6, permissions=1), ACLEntry(key_prefix=b'\xbb' * 6, permissions=3))

    def test_truncated_entry(self) -> None:
        data = b'\xaa' * 6 + b'\x01' + b'\xbb' * 5
        assert decode_acl(data) == (ACLEntry(key_prefix=b'\xaa' * 6, permissions=1),)
        assert decode_acl(b'') == ()


class TestMMA:

    def test_entries(self) -> None:
        data = bytes([
            1, SensorType.temperature, 0x00, 0xc8, 0x01, 0x2c, 0x00, 0xfa,
            2, SensorType.humidity, 0x50, 0x64, 0x5a,
        ])
        [temperature, humidity] = decode_mma(data)
        assert temperature == MMAEntry(channel=1, type=SensorType.temperature, min=20.0, max=30.0, avg=25.0)
        assert temperature.type_name == 'Temperature'
        assert humidity == MMAEntry(channel=2, type=SensorType.humidity, min=40.0, max=50.0, avg=45.0)

    def test_stops_at_unknown_or_truncated_entry(self) -> None:
        valid = bytes([1, SensorType.humidity, 0x50, 0x64, 0x5a])
        assert len(decode_mma(valid + bytes([2, 0x99, 0, 0, 0]))) == 1
        assert len(decode_mma(valid + bytes([2, SensorType.temperature, 0x00, 0xc8, 0x01]))) == 1
        assert decode_mma(b'') == ()


class TestNeighbours:

    @staticmethod
    def entry(prefix: bytes, seconds_ago: int, snr: int) -> bytes:
        return prefix + Int32LE.pack(seconds_ago) + snr.to_bytes(1, 'little', signed=True)

    def test_neighbours(self) -> None:
        data = Int16LE.pack(5) + Int16LE.pack(2) + self.entry(b'\x01\x02\x03\x04', 60, 40) + self.entry(b'\x05\x06\x07\x08', 3600, -10)
        event = decode_neighbours(data, PREFIX, TAG)
        assert event == NeighboursResponse(
            public_key_prefix=PREFIX,
            tag=TAG,
            total_count=5,
            neighbours=(Neighbour(b'\x01\x02\x03\x04', 60, 10.0), Neighbour(b'\x05\x06\x07\x08', 3600, -2.5)),
        )

    def test_truncated_listing(self) -> None:
        data = Int16LE.pack(3) + Int16LE.pack(3) + self.entry(b'\x01\x02\x03\x04', 60, 40) + b'\x05\x06'
        event = decode_neighbours(data, PREFIX, TAG)
        assert event.total_count == 3
        assert len(event.neighbours) == 1
        assert decode_neighbours(b'\x01\x00', PREFIX, TAG).neighbours == ()

    def test_prefix_length(self) -> None:
        configuration = Configuration.default.replace(neighbour_prefix_length=6)
        data = Int16LE.pack(1) + Int16LE.pack(1) + self.entry(PREFIX, 5, 4)
        event = parse_binary_response(BinaryRequestType.neighbours, data, public_key_prefix=PREFIX, tag=TAG, prefix_length=configuration.neighbour_prefix_length)
        assert event.neighbours == (Neighbour(PREFIX, 5, 1.0),)


class TestBinaryResponse:

    def test_dispatch_by_request_type(self) -> None:
        assert isinstance(parse_binary_response(BinaryRequestType.status, status_fields(), public_key_prefix=PREFIX, tag=TAG), StatusResponse)
        assert parse_binary_response(BinaryRequestType.telemetry, b'\x01\x74\x01\x7c', public_key_prefix=PREFIX, tag=TAG) == TelemetryResponse(public_key_prefix=PREFIX, tag=TAG, raw_data=b'\x01\x74\x01\x7c')
        assert parse_binary_response(BinaryRequestType.acl, bytes(7), tag=TAG) == ACLResponse(public_key_prefix=b'', tag=TAG, entries=())
        assert parse_binary_response(BinaryRequestType.mma, b'', tag=TAG) == MMAResponse(public_key_prefix=b'', tag=TAG, entries=())
        assert parse_binary_response(BinaryRequestType.keep_alive, b'\x01', tag=TAG) == BinaryResponse(tag=TAG, data=b'\x01')
        assert parse_binary_response(0x7f, b'\x01', tag=TAG) == BinaryResponse(tag=TAG, data=b'\x01')

    @pytest.mark.parametrize('request_type', list(BinaryRequestType))
    def test_never_raises_on_garbage(self, request_type: BinaryRequestType) -> None:
        parse_binary_response(request_type, b'\xff' * 13)
