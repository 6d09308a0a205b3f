# Copyright (C) 2024  The id3forge authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""UTF-8 inspection and UTF-8 to UTF-16 conversion.

All functions take UTF-8 encoded bytes. Nothing in here replaces
invalid data with U+FFFD: malformed input always raises
:class:`ID3MalformedInputError`.
"""

from __future__ import annotations

import struct
from collections.abc import Iterator
from enum import IntEnum
from typing import NamedTuple

from ._util import ID3MalformedInputError, ID3TranscodingError


class UTF8Class(IntEnum):
    """Result of :func:`classify`"""

    ASCII = 0
    """Only single byte sequences"""

    MULTIBYTE = 1
    """At least one sequence of two or more bytes"""

    MALFORMED = 2
    """Not valid UTF-8"""


# payload bits of the leading byte, by sequence length
_LEAD_MASKS = {1: 0x7F, 2: 0x1F, 3: 0x0F, 4: 0x07}

_MAX_CODEPOINT = 0x10FFFF


def utf8_char_length(byte: int) -> int:
    """Returns the length of the sequence started by `byte` (1-4) or 0
    if `byte` can't start a sequence.

    0xxxxxxx -> 1, 110xxxxx -> 2, 1110xxxx -> 3, 11110xxx -> 4
    """

    if byte & 0x80 == 0x00:
        return 1
    elif byte & 0xE0 == 0xC0:
        return 2
    elif byte & 0xF0 == 0xE0:
        return 3
    elif byte & 0xF8 == 0xF0:
        return 4
    return 0


def iter_sequences(data: bytes) -> Iterator[bytes]:
    """Yields the byte sequence of each character in `data`.

    Raises:
        ID3MalformedInputError
    """

    index = 0
    end = len(data)
    while index < end:
        length = utf8_char_length(data[index])
        if not length:
            raise ID3MalformedInputError(
                "invalid leading byte 0x%02x at offset %d" %
                (data[index], index))
        for offset in range(index + 1, index + length):
            if offset >= end:
                raise ID3MalformedInputError(
                    "truncated sequence at offset %d" % index)
            if data[offset] & 0xC0 != 0x80:
                raise ID3MalformedInputError(
                    "invalid continuation byte 0x%02x at offset %d" %
                    (data[offset], offset))
        yield data[index:index + length]
        index += length


def classify(data: bytes) -> UTF8Class:
    """Tells whether `data` is pure ASCII, contains multibyte sequences
    or is malformed. Malformed wins over multibyte.
    """

    result = UTF8Class.ASCII
    try:
        for sequence in iter_sequences(data):
            if len(sequence) > 1:
                result = UTF8Class.MULTIBYTE
    except ID3MalformedInputError:
        return UTF8Class.MALFORMED
    return result


def is_multibyte(data: bytes) -> bool:
    """Like :func:`classify` but raises for malformed data.

    Raises:
        ID3MalformedInputError
    """

    multibyte = False
    for sequence in iter_sequences(data):
        if len(sequence) > 1:
            multibyte = True
    return multibyte


def decode_codepoints(data: bytes) -> list[int]:
    """Returns the code points of a UTF-8 byte string.

    Raises:
        ID3MalformedInputError
    """

    codepoints = []
    for sequence in iter_sequences(data):
        codepoint = sequence[0] & _LEAD_MASKS[len(sequence)]
        for byte in sequence[1:]:
            codepoint = (codepoint << 6) | (byte & 0x3F)
        codepoints.append(codepoint)
    return codepoints


class UTF16String:
    """A NUL terminated sequence of UTF-16 code units.

    ``bytes()`` returns the encoded units including the two byte
    terminator, ``len()`` the number of code units excluding it.
    """

    __slots__ = ("_data", "bigendian")

    _data: bytes
    bigendian: bool

    def __init__(self, units: bytes = b"", bigendian: bool = False):
        if len(units) % 2:
            raise ValueError("odd number of bytes")
        self._data = bytes(units) + b"\x00\x00"
        self.bigendian = bigendian

    def __len__(self) -> int:
        return len(self._data) // 2 - 1

    def __bytes__(self) -> bytes:
        return self._data

    @property
    def units(self) -> list[int]:
        """The code unit values, without the terminator"""

        fmt = (">" if self.bigendian else "<") + "%dH" % len(self)
        return list(struct.unpack(fmt, self._data[:-2]))

    def byteswap(self) -> UTF16String:
        """Returns a copy with the byte order of every unit swapped"""

        data = bytearray(self._data[:-2])
        data[0::2], data[1::2] = data[1::2], data[0::2]
        return UTF16String(bytes(data), not self.bigendian)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UTF16String):
            return NotImplemented
        return (self._data == other._data and
                self.bigendian == other.bigendian)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "<%s %s units=%s>" % (
            type(self).__name__, "BE" if self.bigendian else "LE",
            ["%04X" % u for u in self.units])


def to_utf16(data: bytes, bigendian: bool = False) -> UTF16String:
    """Converts UTF-8 to UTF-16 (little endian by default).

    Code points above U+FFFF get split into a surrogate pair. The big
    endian variant is the little endian conversion with every unit
    byte-swapped afterwards.

    Raises:
        ID3MalformedInputError: if `data` isn't valid UTF-8
        ID3TranscodingError: for anything else going wrong
    """

    codepoints = decode_codepoints(data)

    try:
        units = []
        append = units.append
        for codepoint in codepoints:
            if codepoint <= 0xFFFF:
                append(codepoint)
            elif codepoint <= _MAX_CODEPOINT:
                codepoint -= 0x10000
                append((codepoint >> 10) + 0xD800)
                append((codepoint & 0x3FF) + 0xDC00)
            else:
                raise ID3TranscodingError(
                    "code point U+%X not representable in UTF-16" %
                    codepoint)
        result = UTF16String(struct.pack("<%dH" % len(units), *units))
    except MemoryError as e:
        raise ID3TranscodingError(e) from e

    if bigendian:
        result = result.byteswap()
    return result


class ParsedString(NamedTuple):
    """A UTF-8 string split into its characters"""

    chars: list[bytes]
    """The byte sequence of each character. A carriage return is part
    of the newline sequence and not listed.
    """

    num_bytes: int
    """Sum of the bytes of all characters"""

    @property
    def num_chars(self) -> int:
        return len(self.chars)


def parse_string(data: bytes) -> ParsedString:
    """Splits `data` into characters.

    Raises:
        ID3MalformedInputError
    """

    chars = [s for s in iter_sequences(data) if s != b"\r"]
    return ParsedString(chars, sum(len(c) for c in chars))
