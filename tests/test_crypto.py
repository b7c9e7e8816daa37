# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

import unittest

from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from meshcore.protocol.crypto import MIN_PACKET_SIZE, DecryptedMessage, DecryptFailure, decrypt_direct_message, extract_timestamp


def _pad(data: bytes) -> bytes:
    return data.ljust(-(-len(data) // 16) * 16, b'\x00')


def _mac(data: bytes, key: bytes) -> bytes:
    h = hmac.HMAC(key, hashes.SHA256())
    h.update(data)
    return h.finalize()[:2]


class TestDirectMessage(unittest.TestCase):

    def setUp(self):
        self.sender = X25519PrivateKey.from_private_bytes(bytes(range(1, 33)))
        self.recipient = X25519PrivateKey.from_private_bytes(bytes(range(101, 133)))
        self.my_private_key = self.recipient.private_bytes_raw()
        self.sender_public_key = self.sender.public_key().public_bytes_raw()
        self.secret = self.sender.exchange(self.recipient.public_key())

    def _packet(self, plaintext: bytes, *, pad: bool = True) -> bytes:
        ciphertext = plaintext
        if pad:
            encryptor = Cipher(algorithms.AES(self.secret[:16]), modes.ECB()).encryptor()
            ciphertext = encryptor.update(_pad(plaintext)) + encryptor.finalize()
        return b'\x12\x34' + _mac(ciphertext, self.secret) + ciphertext

    def test_decrypt(self):
        packet = self._packet(b'\x00\x6f\x92\x65' + b'\x01' + b'hello world')
        result = decrypt_direct_message(packet, self.my_private_key, self.sender_public_key)
        self.assertEqual(result, DecryptedMessage(timestamp=1704067200, type_attempt=1, text='hello world'))
        self.assertEqual(extract_timestamp(packet, self.my_private_key, self.sender_public_key), 1704067200)

    def test_multi_block_text(self):
        text = 'a longer message that spans a few cipher blocks'
        packet = self._packet(b'\x10\x00\x00\x00\x00' + text.encode())
        result = decrypt_direct_message(packet, self.my_private_key, self.sender_public_key)
        self.assertIsInstance(result, DecryptedMessage)
        self.assertEqual(result.timestamp, 16)
        self.assertEqual(result.text, text)

    def test_empty_text(self):
        packet = self._packet(b'\x01\x00\x00\x00\x02')
        result = decrypt_direct_message(packet, self.my_private_key, self.sender_public_key)
        self.assertEqual(result, DecryptedMessage(timestamp=1, type_attempt=2, text=''))

    def test_invalid_utf8_text(self):
        packet = self._packet(b'\x01\x00\x00\x00\x00' + b'\xff\xfe')
        result = decrypt_direct_message(packet, self.my_private_key, self.sender_public_key)
        self.assertIsInstance(result, DecryptedMessage)
        self.assertIsNone(result.text)

    def test_mac_tampering(self):
        packet = bytearray(self._packet(b'\x01\x00\x00\x00\x00' + b'secret'))
        packet[2] ^= 0x01
        self.assertIs(decrypt_direct_message(packet, self.my_private_key, self.sender_public_key), DecryptFailure.mac_mismatch)
        packet[2] ^= 0x01
        packet[-1] ^= 0x80
        self.assertIs(decrypt_direct_message(packet, self.my_private_key, self.sender_public_key), DecryptFailure.mac_mismatch)
        self.assertIsNone(extract_timestamp(packet, self.my_private_key, self.sender_public_key))

    def test_wrong_key(self):
        packet = self._packet(b'\x01\x00\x00\x00\x00' + b'secret')
        other_public_key = X25519PrivateKey.from_private_bytes(bytes(range(201, 233))).public_key().public_bytes_raw()
        self.assertIs(decrypt_direct_message(packet, self.my_private_key, other_public_key), DecryptFailure.mac_mismatch)

    def test_key_errors(self):
        packet = self._packet(b'\x01\x00\x00\x00\x00' + b'secret')
        self.assertIs(decrypt_direct_message(packet, self.my_private_key[:31], self.sender_public_key), DecryptFailure.key_error)
        self.assertIs(decrypt_direct_message(packet, self.my_private_key, self.sender_public_key + b'\x00'), DecryptFailure.key_error)
        # a low order public key yields an all zero shared secret, which is rejected
        self.assertIs(decrypt_direct_message(packet, self.my_private_key, bytes(32)), DecryptFailure.key_error)

    def test_invalid_payload(self):
        packet = self._packet(b'\x01\x00\x00\x00\x00' + b'secret')
        self.assertIs(decrypt_direct_message(packet[:MIN_PACKET_SIZE - 1], self.my_private_key, self.sender_public_key), DecryptFailure.invalid_payload)
        self.assertIs(decrypt_direct_message(b'', self.my_private_key, self.sender_public_key), DecryptFailure.invalid_payload)

    def test_decryption_failed(self):
        # an authentic ciphertext whose length is not a multiple of the block size
        packet = self._packet(bytes(17), pad=False)
        self.assertIs(decrypt_direct_message(packet, self.my_private_key, self.sender_public_key), DecryptFailure.decryption_failed)
