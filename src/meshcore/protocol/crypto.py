# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Decryption of direct (peer to peer) messages.

Direct messages are encrypted with AES-128 in ECB mode using the first
16 bytes of the X25519 shared secret of the two peers as the key, and
authenticated with HMAC-SHA256 (keyed with the full shared secret) over
the ciphertext, truncated to 2 bytes (encrypt-then-MAC).

    packet:    [dest hash:1][src hash:1][mac:2][ciphertext:16*n]
    plaintext: [timestamp:4 LE][type/attempt:1][text, NUL padded]
"""

import hmac as _hmac
from collections.abc import Buffer
from dataclasses import dataclass
from enum import Enum

from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .codec import UInt8, UInt32LE

__all__ = 'DecryptFailure', 'DecryptedMessage', 'DecryptResult', 'decrypt_direct_message', 'extract_timestamp', 'MAC_SIZE', 'HEADER_SIZE', 'MIN_PACKET_SIZE'  # noqa: RUF022


MAC_SIZE = 2
HEADER_SIZE = 2
KEY_SIZE = 32
BLOCK_SIZE = 16

MIN_PACKET_SIZE = HEADER_SIZE + MAC_SIZE + BLOCK_SIZE
MIN_PLAINTEXT_SIZE = 5


class DecryptFailure(Enum):
    key_error = 'key-error'
    mac_mismatch = 'mac-mismatch'
    decryption_failed = 'decryption-failed'
    invalid_payload = 'invalid-payload'


@dataclass(frozen=True, slots=True)
class DecryptedMessage:
    timestamp: int
    type_attempt: int
    text: str | None  # None if the text is not valid UTF-8


type DecryptResult = DecryptedMessage | DecryptFailure


def _shared_secret(private_key: bytes, public_key: bytes) -> bytes | None:
    if len(private_key) != KEY_SIZE or len(public_key) != KEY_SIZE:
        return None
    try:
        return X25519PrivateKey.from_private_bytes(private_key).exchange(X25519PublicKey.from_public_bytes(public_key))
    except ValueError:  # raised for keys that result in an all zero shared secret
        return None


def _mac(data: bytes, key: bytes) -> bytes:
    h = hmac.HMAC(key, hashes.SHA256())
    h.update(data)
    return h.finalize()[:MAC_SIZE]


def _decrypt(ciphertext: bytes, key: bytes) -> bytes | None:
    if len(ciphertext) % BLOCK_SIZE:
        return None
    decryptor = Cipher(algorithms.AES(key[:BLOCK_SIZE]), modes.ECB()).decryptor()  # noqa: S305
    return decryptor.update(ciphertext) + decryptor.finalize()


def decrypt_direct_message(payload: Buffer, my_private_key: Buffer, sender_public_key: Buffer) -> DecryptResult:
    """
    Decrypt a direct message packet.

    Returns the decrypted message or the reason why it could not be
    decrypted. The MAC is verified before any decryption is attempted.
    This function never raises for malformed keys or packets.
    """
    payload = bytes(payload)
    if len(payload) < MIN_PACKET_SIZE:
        return DecryptFailure.invalid_payload

    secret = _shared_secret(bytes(my_private_key), bytes(sender_public_key))
    if secret is None:
        return DecryptFailure.key_error

    received_mac = payload[HEADER_SIZE:HEADER_SIZE + MAC_SIZE]
    ciphertext = payload[HEADER_SIZE + MAC_SIZE:]

    if not _hmac.compare_digest(_mac(ciphertext, secret), received_mac):
        return DecryptFailure.mac_mismatch

    plaintext = _decrypt(ciphertext, secret)
    if plaintext is None or len(plaintext) < MIN_PLAINTEXT_SIZE:
        return DecryptFailure.decryption_failed

    text_data = plaintext[MIN_PLAINTEXT_SIZE:].partition(b'\x00')[0]
    try:
        text = text_data.decode('utf-8')
    except UnicodeDecodeError:
        text = None

    return DecryptedMessage(timestamp=UInt32LE.read(plaintext), type_attempt=UInt8.read(plaintext, 4), text=text)


def extract_timestamp(payload: Buffer, my_private_key: Buffer, sender_public_key: Buffer) -> int | None:
    """Return the sender timestamp of a direct message, or None if it cannot be decrypted"""
    match decrypt_direct_message(payload, my_private_key, sender_public_key):
        case DecryptedMessage(timestamp=timestamp):
            return timestamp
        case _:
            return None
