# Copyright (C) 2005  Michael Urman
#               2024  The id3forge authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import codecs
import contextlib
import os
from collections.abc import Iterator
from enum import IntEnum
from io import BytesIO
from typing import IO, TYPE_CHECKING, Generic, NamedTuple, TypeVar

from ._util import ID3InvalidValueError, copy_bytes, get_size, openfile, utf8

if TYPE_CHECKING:
    from ._frames import Frame

T = TypeVar("T")


class PictureType(IntEnum):
    """Enumeration of image types defined by the ID3 standard for the APIC
    frame.
    """

    OTHER = 0
    """Other"""

    FILE_ICON = 1
    """32x32 pixels 'file icon' (PNG only)"""

    OTHER_FILE_ICON = 2
    """Other file icon"""

    COVER_FRONT = 3
    """Cover (front)"""

    COVER_BACK = 4
    """Cover (back)"""

    LEAFLET_PAGE = 5
    """Leaflet page"""

    MEDIA = 6
    """Media (e.g. label side of CD)"""

    LEAD_ARTIST = 7
    """Lead artist/lead performer/soloist"""

    ARTIST = 8
    """Artist/performer"""

    CONDUCTOR = 9
    """Conductor"""

    BAND = 10
    """Band/Orchestra"""

    COMPOSER = 11
    """Composer"""

    LYRICIST = 12
    """Lyricist/text writer"""

    RECORDING_LOCATION = 13
    """Recording Location"""

    DURING_RECORDING = 14
    """During recording"""

    DURING_PERFORMANCE = 15
    """During performance"""

    SCREEN_CAPTURE = 16
    """Movie/video screen capture"""

    FISH = 17
    """A bright coloured fish"""

    ILLUSTRATION = 18
    """Illustration"""

    BAND_LOGOTYPE = 19
    """Band/artist logotype"""

    PUBLISHER_LOGOTYPE = 20
    """Publisher/Studio logotype"""

    @property
    def is_icon(self) -> bool:
        """Only one picture of each icon type may exist in a tag"""

        return self in (PictureType.FILE_ICON, PictureType.OTHER_FILE_ICON)

    def _pprint(self) -> str:
        return self.name.lower().replace("_", " ")


class Encoding(IntEnum):
    """Text Encoding (only the two valid in ID3v2.3)"""

    LATIN1 = 0
    """ISO-8859-1"""

    UTF16 = 1
    """UTF-16 with BOM"""


class WriteConfig(NamedTuple):
    """Options passed down to every spec while writing"""

    bigendian: bool = False
    """Write UTF-16 text big endian (BOM FE FF) instead of little endian"""

    buffer_size: int = 2 ** 16
    """Chunk size used when copying picture files"""


class Spec(Generic[T]):
    """Describes one field of a frame: how to validate it, how many bytes
    it takes and how to serialize it.
    """

    name: str
    default: T | None

    def __init__(self, name: str, default: T | None = None):
        self.name = name
        self.default = default

    def __hash__(self) -> int:
        raise TypeError("Spec objects are unhashable")

    def validate(self, frame: Frame, value) -> T:
        """
        Returns:
            the validated value
        Raises:
            ID3InvalidValueError
        """

        raise NotImplementedError

    def size(self, frame: Frame, value: T) -> int:
        """Number of bytes `write` will produce"""

        raise NotImplementedError

    def write(self, config: WriteConfig, frame: Frame, value: T) -> bytes:
        raise NotImplementedError

    def write_to(self, config: WriteConfig, frame: Frame, value: T,
                 fileobj: IO[bytes]) -> None:
        fileobj.write(self.write(config, frame, value))


class ByteSpec(Spec[int]):

    def validate(self, frame: Frame, value) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ID3InvalidValueError("%s has to be an int" % self.name)
        if not 0 <= value <= 0xFF:
            raise ID3InvalidValueError(
                "%s out of range: %r" % (self.name, value))
        return value

    def size(self, frame: Frame, value: int) -> int:
        return 1

    def write(self, config: WriteConfig, frame: Frame, value: int) -> bytes:
        return bytes([value])


class EncodingSpec(ByteSpec):

    def validate(self, frame: Frame, value) -> Encoding:
        value = ByteSpec.validate(self, frame, value)
        try:
            return Encoding(value)
        except ValueError:
            raise ID3InvalidValueError(
                "Invalid Encoding: %r" % value) from None


class PictureTypeSpec(ByteSpec):

    def validate(self, frame: Frame, value) -> PictureType:
        value = ByteSpec.validate(self, frame, value)
        try:
            return PictureType(value)
        except ValueError:
            raise ID3InvalidValueError(
                "picture type out of range: 0x%02x" % value) from None


class StringSpec(Spec[bytes]):
    """A fixed size ASCII only payload."""

    len: int

    def __init__(self, name: str, length: int):
        super().__init__(name, b" " * length)
        self.len = length

    def validate(self, frame: Frame, value) -> bytes:
        if isinstance(value, str):
            try:
                value = value.encode("ascii")
            except UnicodeEncodeError:
                raise ID3InvalidValueError(
                    "%s has to be ASCII" % self.name) from None
        elif isinstance(value, (bytes, bytearray, memoryview)):
            value = bytes(value)
            if not value.isascii():
                raise ID3InvalidValueError("%s has to be ASCII" % self.name)
        else:
            raise ID3InvalidValueError("%s has to be str" % self.name)

        if len(value) != self.len or b"\x00" in value:
            raise ID3InvalidValueError(
                'Invalid StringSpec[%d] data: %r' % (self.len, value))
        return value

    def size(self, frame: Frame, value: bytes) -> int:
        return self.len

    def write(self, config: WriteConfig, frame: Frame, value: bytes) -> bytes:
        return value


class Latin1TextSpec(Spec[bytes]):
    """ISO-8859-1 text followed by a single NUL, independent of the frame
    encoding.
    """

    def __init__(self, name: str, default: bytes = b"",
                 required: bool = False):
        super().__init__(name, default)
        self.required = required

    def validate(self, frame: Frame, value) -> bytes:
        if isinstance(value, str):
            try:
                value = value.encode("latin-1")
            except UnicodeEncodeError:
                raise ID3InvalidValueError(
                    "%s has to be ISO-8859-1" % self.name) from None
        elif isinstance(value, (bytes, bytearray, memoryview)):
            value = bytes(value)
        else:
            raise ID3InvalidValueError("%s has to be str" % self.name)

        if self.required and not value:
            raise ID3InvalidValueError("%s must not be empty" % self.name)
        if b"\x00" in value:
            raise ID3InvalidValueError("%s contains NUL" % self.name)
        return value

    def size(self, frame: Frame, value: bytes) -> int:
        return len(value) + 1

    def write(self, config: WriteConfig, frame: Frame, value: bytes) -> bytes:
        return value + b"\x00"


class EncodedTextSpec(Spec[bytes]):
    """UTF-8 text written according to the frame encoding.

    ISO-8859-1: the text followed by NUL. UTF-16: BOM, the UTF-16 units
    stored in the frame as ``utf16_<name>`` and a two byte NUL.
    """

    _BOM = {
        False: codecs.BOM_UTF16_LE,
        True: codecs.BOM_UTF16_BE,
    }

    def __init__(self, name: str, default: bytes = b"",
                 required: bool = False):
        super().__init__(name, default)
        self.required = required

    @property
    def utf16_name(self) -> str:
        return "utf16_" + self.name

    def validate(self, frame: Frame, value) -> bytes:
        try:
            value = utf8(value)
        except TypeError:
            raise ID3InvalidValueError(
                "%s has to be str or bytes" % self.name) from None

        if self.required and not value:
            raise ID3InvalidValueError("%s must not be empty" % self.name)
        if b"\x00" in value:
            raise ID3InvalidValueError("%s contains NUL" % self.name)
        return value

    def size(self, frame: Frame, value: bytes) -> int:
        if frame.encoding == Encoding.UTF16:
            units = getattr(frame, self.utf16_name)
            return len(self._BOM[False]) + 2 * len(units) + 2
        return len(value) + 1

    def write(self, config: WriteConfig, frame: Frame, value: bytes) -> bytes:
        if frame.encoding == Encoding.UTF16:
            units = getattr(frame, self.utf16_name)
            if config.bigendian != units.bigendian:
                units = units.byteswap()
            return self._BOM[config.bigendian] + bytes(units)
        return value + b"\x00"


class ImageSource(NamedTuple):
    """Where the picture data of an APIC frame comes from.

    Exactly one of `path` and `data` is set.
    """

    path: str | bytes | None
    data: bytes | None
    size: int

    @contextlib.contextmanager
    def open(self) -> Iterator[IO[bytes]]:
        """Yields a readable file object for the picture data

        Raises:
            ID3FileAccessError
        """

        if self.path is None:
            yield BytesIO(self.data)
        else:
            with openfile(self.path) as filething:
                yield filething.fileobj


class ImageSpec(Spec[ImageSource]):
    """Binary picture data, either copied from a file or from memory."""

    def validate(self, frame: Frame, value) -> ImageSource:
        # (path, data); an ImageSource only comes out of here
        if not isinstance(value, tuple) or isinstance(value, ImageSource) \
                or len(value) != 2:
            raise ID3InvalidValueError("image has to be a (path, data) pair")
        path, data = value
        if (path is None) == (data is None):
            raise ID3InvalidValueError(
                "exactly one of path and data has to be given")
        if path is not None:
            if not isinstance(path, (str, bytes, os.PathLike)):
                raise ID3InvalidValueError("path has to be a path")
            path = os.fspath(path)
            if not path:
                raise ID3InvalidValueError("path must not be empty")
            return ImageSource(path, None, get_size(path))
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise ID3InvalidValueError("data has to be bytes")
        data = bytes(data)
        return ImageSource(None, data, len(data))

    def size(self, frame: Frame, value: ImageSource) -> int:
        return value.size

    def write(self, config: WriteConfig, frame: Frame,
              value: ImageSource) -> bytes:
        fileobj = BytesIO()
        self.write_to(config, frame, value, fileobj)
        return fileobj.getvalue()

    def write_to(self, config: WriteConfig, frame: Frame,
                 value: ImageSource, fileobj: IO[bytes]) -> None:
        if value.data is not None:
            fileobj.write(value.data)
            return
        with value.open() as source:
            copy_bytes(source, fileobj, value.size, config.buffer_size)
