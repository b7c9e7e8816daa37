# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

import hashlib
from dataclasses import replace

import pytest

from meshcore.models import BatteryInfo, ChannelSecret, ContactFlags, ContactType, Destination, DeviceCapabilities, FloodScope
from meshcore.protocol import InsufficientLengthError, InvalidInputError

from .test_parsers import CONTACT


class TestMeshContact:

    def test_properties(self) -> None:
        assert CONTACT.id == bytes(range(32)).hex()
        assert CONTACT.public_key_prefix == '000102030405'
        assert not CONTACT.is_flood_path
        assert replace(CONTACT, out_path_length=-1, out_path=b'').is_flood_path

    def test_typed_accessors(self) -> None:
        assert CONTACT.contact_type is ContactType.chat
        assert replace(CONTACT, type=9).contact_type is None
        assert CONTACT.contact_flags == ContactFlags.FAVORITE | ContactFlags.TELEMETRY_BASE
        assert ContactFlags.TELEMETRY_LOCATION in ContactFlags.TELEMETRY_ALL
        assert ContactFlags.FAVORITE not in ContactFlags.TELEMETRY_ALL


class TestDestination:

    def test_targets(self) -> None:
        key = bytes(range(32))
        assert Destination(key).public_key() == key[:6]
        assert Destination(key.hex()).public_key(prefix_length=4) == key[:4]
        assert Destination(CONTACT).full_public_key() == CONTACT.public_key

    def test_errors(self) -> None:
        with pytest.raises(InsufficientLengthError) as exc_info:
            Destination(b'\x01\x02').public_key()
        assert (exc_info.value.expected, exc_info.value.actual) == (6, 2)
        assert isinstance(exc_info.value, InvalidInputError)
        with pytest.raises(InvalidInputError):
            Destination('xyz').public_key()
        with pytest.raises(TypeError):
            Destination(42).public_key()  # type: ignore[arg-type]


class TestFloodScope:

    def test_scope_key(self) -> None:
        assert FloodScope.disabled().scope_key == bytes(16)
        assert FloodScope(channel_name='#mesh').scope_key == hashlib.sha256(b'#mesh').digest()[:16]
        assert FloodScope(raw_key=b'\x01').scope_key == b'\x01' + bytes(15)
        assert FloodScope(raw_key=bytes(range(20))).scope_key == bytes(range(16))

    def test_exclusive_sources(self) -> None:
        with pytest.raises(ValueError, match='either'):
            FloodScope(channel_name='#mesh', raw_key=b'\x01')


class TestChannelSecret:

    def test_secret_data(self) -> None:
        assert ChannelSecret().secret_data('#mesh') == hashlib.sha256(b'#mesh').digest()[:16]
        assert ChannelSecret(b'\xaa' * 20).secret_data('ignored') == b'\xaa' * 16


class TestDeviceModels:

    def test_defaults(self) -> None:
        assert BatteryInfo(4100) == BatteryInfo(level=4100, used_storage_kb=None, total_storage_kb=None)
        capabilities = DeviceCapabilities(firmware_version=2)
        assert capabilities.model == ''
        assert capabilities.client_repeat is False
