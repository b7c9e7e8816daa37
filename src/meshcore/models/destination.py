# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

import hashlib
from dataclasses import dataclass

from meshcore.protocol.codec import from_hex
from meshcore.protocol.exceptions import InsufficientLengthError

from .contact import MeshContact

__all__ = 'Destination', 'FloodScope', 'ChannelSecret'


def _sha256_prefix(text: str) -> bytes:
    return hashlib.sha256(text.encode('utf-8')).digest()[:16]


def _pad16(data: bytes) -> bytes:
    return data[:16].ljust(16, b'\x00')


@dataclass(frozen=True, slots=True)
class Destination:
    """A message destination given as raw key bytes, a hex string or a contact"""

    target: bytes | str | MeshContact

    def public_key(self, prefix_length: int = 6) -> bytes:
        match self.target:
            case bytes() as key:
                pass
            case str() as text:
                key = from_hex(text)
            case MeshContact() as contact:
                key = contact.public_key
            case target:
                raise TypeError(f'Unsupported destination target: {target!r}')
        if len(key) < prefix_length:
            raise InsufficientLengthError(expected=prefix_length, actual=len(key))
        return key[:prefix_length]

    def full_public_key(self) -> bytes:
        return self.public_key(prefix_length=32)


@dataclass(frozen=True, slots=True)
class FloodScope:
    """
    The scope key restricting flood routed traffic.

    A scope is either disabled (all zero key), derived from a channel
    name (first 16 bytes of its SHA-256 digest) or given as a raw key
    which is truncated or zero padded to 16 bytes.
    """

    channel_name: str | None = None
    raw_key: bytes | None = None

    def __post_init__(self) -> None:
        if self.channel_name is not None and self.raw_key is not None:
            raise ValueError('A flood scope is defined either by a channel name or by a raw key, not both')

    @classmethod
    def disabled(cls) -> 'FloodScope':
        return cls()

    @property
    def scope_key(self) -> bytes:
        if self.channel_name is not None:
            return _sha256_prefix(self.channel_name)
        if self.raw_key is not None:
            return _pad16(self.raw_key)
        return bytes(16)


@dataclass(frozen=True, slots=True)
class ChannelSecret:
    """A channel secret, either given explicitly or derived from the channel name"""

    explicit: bytes | None = None

    def secret_data(self, channel_name: str) -> bytes:
        if self.explicit is not None:
            return _pad16(self.explicit)
        return _sha256_prefix(channel_name)
