# Copyright (C) 2006  Joe Wreschnig
#               2024  The id3forge authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Utility classes for id3forge.

You should not rely on the interfaces here being stable. They are
intended for internal use in id3forge only.
"""

from __future__ import annotations

import contextlib
import os
from collections.abc import Callable, Iterator
from functools import wraps
from typing import IO, NamedTuple


class error(Exception):
    """Base class for all id3forge errors"""

    __module__ = "id3forge"


class ID3InvalidKeyError(error, ValueError):
    """The frame identifier is not one of the supported text frames"""


class ID3InvalidValueError(error, ValueError):
    """A field is empty, too long, out of range or conflicting"""


class ID3OutOfMemoryError(error, MemoryError):
    pass


class ID3MalformedInputError(error, ValueError):
    """The passed text is not structurally valid UTF-8"""


class ID3TranscodingError(error, ValueError):
    """UTF-16 conversion failed for a reason other than malformed input"""


class ID3FileAccessError(error, IOError):
    """A picture source or the output file can't be opened/read/written"""


class ID3NotFoundError(error, KeyError):
    pass


class ID3EmptyCollectionError(error, LookupError):
    pass


def convert_error(exc_src: type[BaseException] | tuple[type[BaseException], ...],
                  exc_dest: type[error]) -> Callable:
    """A decorator for reraising exceptions with a different type.
    Mostly useful for OSError.

    Args:
        exc_src (type): The source exception type
        exc_dest (type): The target exception type.
    """

    def wrap(func):

        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except error:
                raise
            except exc_src as err:
                raise exc_dest(err) from err

        return wrapper

    return wrap


class FileThing(NamedTuple):
    """
    filename is None if the source is not a filename.
    name is a filename which can be used for error messages.
    """

    fileobj: IO[bytes]
    filename: str | bytes | None
    name: str


def _is_fileobj(filething: object) -> bool:
    return hasattr(filething, "write") or hasattr(filething, "read")


@contextlib.contextmanager
def openfile(filething: str | bytes | os.PathLike | IO[bytes],
             mode: str = "rb") -> Iterator[FileThing]:
    """yields a FileThing

    Paths are opened with `mode` and closed again when the context is
    left, on success and on error. File objects are passed through and
    left open.

    Raises:
        ID3FileAccessError: in case the path can't be opened
    """

    if _is_fileobj(filething):
        name = getattr(filething, "name", None)
        if not isinstance(name, str):
            name = "<fileobj>"
        yield FileThing(filething, None, name)
        return

    filename = os.fspath(filething)
    try:
        fileobj = open(filename, mode)
    except OSError as e:
        raise ID3FileAccessError(e) from e

    with fileobj:
        yield FileThing(fileobj, filename, os.fsdecode(filename))


def get_size(filename: str | bytes | os.PathLike) -> int:
    """Returns the size of the file behind `filename` in bytes.

    The file gets opened to make sure it is readable and not just
    present.

    Raises:
        ID3FileAccessError
    """

    with openfile(filename) as filething:
        try:
            return os.fstat(filething.fileobj.fileno()).st_size
        except OSError as e:
            raise ID3FileAccessError(e) from e


def copy_bytes(src: IO[bytes], dst: IO[bytes], size: int,
               BUFFER_SIZE: int = 2 ** 16) -> None:
    """Copy exactly `size` bytes from src to dst.

    Raises:
        ID3FileAccessError: if src ends before `size` bytes were read
        OSError
    """

    assert 0 <= size
    while size:
        data = src.read(min(BUFFER_SIZE, size))
        if not data:
            raise ID3FileAccessError(
                "source ended %d bytes early" % size)
        dst.write(data)
        size -= len(data)


def utf8(data: str | bytes | bytearray | memoryview) -> bytes:
    """Convert text to UTF-8 bytes without replacing anything.

    bytes-like values are taken as is, so they can still be malformed
    and have to be checked by the caller.

    Raises:
        ID3MalformedInputError: if text contains lone surrogates
        TypeError
    """

    if isinstance(data, bytes):
        return data
    elif isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    elif isinstance(data, str):
        try:
            return data.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ID3MalformedInputError(e) from e
    else:
        raise TypeError("only str/bytes types can be converted to UTF-8")


class BitPaddedInt(int):
    """An integer written with only the lower `bits` bits of each byte
    used, most significant byte first.

    With the default of 7 bits this is the synchsafe integer of the
    ID3v2 main header: 257 is written as 00 00 02 01.
    """

    bits: int

    def __new__(cls, value: int, bits: int = 7) -> BitPaddedInt:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("BitPaddedInt needs an int")
        if value < 0:
            raise ValueError("BitPaddedInt can't be negative: %d" % value)

        self = int.__new__(cls, value)
        self.bits = bits
        return self

    def as_str(self, width: int = 4) -> bytes:
        """
        Raises:
            ValueError: if the value needs more than `width` bytes
        """

        mask = (1 << self.bits) - 1
        value = int(self)
        bytes_ = bytearray(width)
        for index in range(width - 1, -1, -1):
            bytes_[index] = value & mask
            value >>= self.bits
        if value:
            raise ValueError('Value too wide (>%d bytes)' % width)
        return bytes(bytes_)
