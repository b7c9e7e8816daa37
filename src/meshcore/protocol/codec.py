# SPDX-FileCopyrightText: 2025-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
from collections.abc import Buffer
from typing import ClassVar, Literal, NoReturn

from .exceptions import InvalidInputError

__all__ = (  # noqa: RUF022
    # Integer fields

    'IntegerField',

    'UInt8',
    'Int8',

    'UInt16LE',
    'Int16LE',
    'UInt32LE',
    'Int32LE',

    'UInt16BE',
    'Int16BE',
    'Int24BE',
    'UInt32BE',
    'Int32BE',

    # Helpers

    'hex_string',
    'from_hex',
    'decode_text',
    'decode_fixed_text',
    'encode_fixed_text',
)


log = logging.getLogger(__name__)


type ByteOrder = Literal['little', 'big']


class IntegerField:
    """
    Fixed width integer field accessor.

    read() decodes the field at an arbitrary offset and returns 0 when the
    field would extend past the end of the buffer. Callers validate the
    frame length against the format's minimum size before reading fields,
    so this is an accessor, not a validator. pack() encodes a value for
    the frame builders and rejects values that do not fit the field.
    """

    _abstract_: ClassVar[bool] = True
    _bits_: ClassVar[int] = NotImplemented
    _size_: ClassVar[int] = NotImplemented
    _signed_: ClassVar[bool] = False
    _byteorder_: ClassVar[ByteOrder] = 'little'

    def __init_subclass__(cls, *, bits: int = NotImplemented, signed: bool = False, byteorder: ByteOrder = 'little', **kw: object) -> None:
        if bits is not NotImplemented:
            cls._bits_ = bits
            cls._size_ = bits // 8
            cls._signed_ = signed
            cls._byteorder_ = byteorder
            cls._abstract_ = False
        super().__init_subclass__(**kw)

    def __new__(cls, *args: object, **kw: object) -> NoReturn:
        raise TypeError(f'{cls.__qualname__} is a field accessor and cannot be instantiated')

    @classmethod
    def read(cls, buffer: Buffer, offset: int = 0) -> int:
        if cls._abstract_:
            raise TypeError(f'Cannot read from abstract field {cls.__qualname__}')
        if offset < 0:
            raise ValueError(f'offset must be a non-negative integer: {offset!r}')
        data = memoryview(buffer)
        if offset + cls._size_ > len(data):
            return 0
        return int.from_bytes(data[offset:offset + cls._size_], byteorder=cls._byteorder_, signed=cls._signed_)

    @classmethod
    def pack(cls, value: int, /) -> bytes:
        if cls._abstract_:
            raise TypeError(f'Cannot pack abstract field {cls.__qualname__}')
        try:
            return int(value).to_bytes(cls._size_, byteorder=cls._byteorder_, signed=cls._signed_)
        except OverflowError as exc:
            kind = 'signed' if cls._signed_ else 'unsigned'
            raise InvalidInputError(f'Value is out of range for {kind} {cls._bits_}-bit integer: {value!r}') from exc


class UInt8(IntegerField, bits=8):
    pass


class Int8(IntegerField, bits=8, signed=True):
    pass


class UInt16LE(IntegerField, bits=16):
    pass


class Int16LE(IntegerField, bits=16, signed=True):
    pass


class UInt32LE(IntegerField, bits=32):
    pass


class Int32LE(IntegerField, bits=32, signed=True):
    pass


class UInt16BE(IntegerField, bits=16, byteorder='big'):
    pass


class Int16BE(IntegerField, bits=16, signed=True, byteorder='big'):
    pass


class Int24BE(IntegerField, bits=24, signed=True, byteorder='big'):
    pass


class UInt32BE(IntegerField, bits=32, byteorder='big'):
    pass


class Int32BE(IntegerField, bits=32, signed=True, byteorder='big'):
    pass


# Helpers

def hex_string(data: Buffer) -> str:
    """Render bytes as lowercase hex, two digits per byte, no separators"""
    return bytes(data).hex()


def from_hex(text: str) -> bytes:
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise InvalidInputError(f'Invalid hex string: {text!r}') from exc


def decode_text(data: Buffer, *, context: str | None = None) -> str:
    """
    Decode UTF-8 text coming from the firmware.

    Undecodable byte sequences are replaced with U+FFFD instead of
    failing, since firmware buffers may contain uninitialized memory.
    """
    data = bytes(data)
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError:
        if context is not None:
            log.warning('%s: invalid UTF-8 in text payload, using lossy conversion', context)
        return data.decode('utf-8', errors='replace')


def decode_fixed_text(data: Buffer) -> str:
    """Decode a fixed width text field up to its first NUL or control byte"""
    data = bytes(data)
    end = next((index for index, byte in enumerate(data) if byte < 0x20 or byte == 0x7f), len(data))
    return data[:end].decode('utf-8', errors='replace')


def encode_fixed_text(text: str, size: int) -> bytes:
    """Encode text as UTF-8, truncated or zero padded to exactly size bytes"""
    return text.encode('utf-8')[:size].ljust(size, b'\x00')
