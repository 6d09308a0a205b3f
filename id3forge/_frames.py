# Copyright (C) 2005  Michael Urman
#               2024  The id3forge authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

from collections.abc import Sequence
from typing import IO, Any

from ._specs import (
    EncodedTextSpec,
    Encoding,
    EncodingSpec,
    ImageSource,
    ImageSpec,
    Latin1TextSpec,
    PictureType,
    PictureTypeSpec,
    Spec,
    StringSpec,
    WriteConfig,
)
from ._utf import is_multibyte, to_utf16


def _key_text(value: bytes) -> str:
    return value.decode("utf-8", "surrogateescape")


class Frame:
    """Fundamental unit of ID3 data.

    A frame is built from keyword arguments, one per field in
    `_framespec`. All fields are validated, the text encoding is chosen
    and the size of the frame content is computed before the constructor
    returns, so a frame which exists is always consistent.

    Frames are read-only; use the tag collections to change them.
    """

    _framespec: Sequence[Spec[Any]] = []

    encoding: Encoding = Encoding.LATIN1
    encoded_byte_length: int = 0
    """Size of the frame content in bytes, without the 10 byte header"""

    def __init__(self, **kwargs: object):
        # the encoding is always derived from the text fields
        names = {s.name for s in self._framespec
                 if not isinstance(s, EncodingSpec)}
        for name in kwargs:
            if name not in names:
                raise TypeError("%s got an unexpected keyword argument %r" %
                                (type(self).__name__, name))

        values: dict[str, object] = {}
        for spec in self._framespec:
            if isinstance(spec, EncodingSpec):
                continue
            values[spec.name] = spec.validate(
                self, kwargs.get(spec.name, spec.default))

        # all fields share the encoding, UTF-16 as soon as one needs it
        text_specs = [s for s in self._framespec
                      if isinstance(s, EncodedTextSpec)]
        encoding = Encoding.LATIN1
        for spec in text_specs:
            if is_multibyte(values[spec.name]):
                encoding = Encoding.UTF16

        for spec in text_specs:
            if encoding == Encoding.UTF16:
                values[spec.utf16_name] = to_utf16(values[spec.name])
            else:
                values[spec.utf16_name] = None

        values["encoding"] = encoding
        self.__dict__.update(values)
        self.__dict__["encoded_byte_length"] = sum(
            spec.size(self, getattr(self, spec.name))
            for spec in self._framespec)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(
            "%s frames are read-only, use the tag collection to change "
            "them" % type(self).__name__)

    def _to_other(self, other: Frame) -> None:
        """Replace all fields and cached data of `other` with ours"""

        if type(other) is not type(self):
            raise ValueError
        other.__dict__.clear()
        other.__dict__.update(self.__dict__)

    @property
    def is_multibyte(self) -> bool:
        """If any text field needed UTF-16"""

        return self.encoding == Encoding.UTF16

    @property
    def HashKey(self) -> str:
        """An internal key used to ensure frame uniqueness in a tag"""

        return self.FrameID

    @property
    def FrameID(self) -> str:
        """ID3v2 four character frame ID"""

        return type(self).__name__

    def __repr__(self) -> str:
        kw = []
        for attr in self._framespec:
            if hasattr(self, attr.name):
                kw.append('%s=%r' % (attr.name, getattr(self, attr.name)))
        return '%s(%s)' % (type(self).__name__, ', '.join(kw))

    def _writeData(self, fileobj: IO[bytes],
                   config: WriteConfig | None = None) -> None:
        """Writes the frame content (without header) to fileobj.

        Raises:
            ID3FileAccessError
            OSError
        """

        if config is None:
            config = WriteConfig()

        for writer in self._framespec:
            writer.write_to(
                config, self, getattr(self, writer.name), fileobj)

    def pprint(self) -> str:
        """Return a human-readable representation of the frame."""
        return "%s=%s" % (type(self).__name__, self._pprint())

    def _pprint(self) -> str:
        return "[unrepresentable data]"


class TextFrame(Frame):
    """Text strings.

    Text frames have a 'text' attribute holding the UTF-8 encoded value
    and an 'encoding' attribute; 0 for ISO-8859-1 (pure ASCII values),
    1 for UTF-16. The encoding is picked automatically.
    """

    text: bytes
    utf16_text: Any

    _framespec = [
        EncodingSpec('encoding'),
        EncodedTextSpec('text', required=True),
    ]

    def __bytes__(self) -> bytes:
        return self.text

    def __str__(self) -> str:
        # overlong forms pass validation but not the codec
        return self.text.decode("utf-8", "replace")

    def _pprint(self) -> str:
        return str(self)


class TALB(TextFrame):
    "Album"


class TBPM(TextFrame):
    "Beats per minute"


class TCOM(TextFrame):
    "Composer"


class TCON(TextFrame):
    "Content type (Genre)"


class TCOP(TextFrame):
    "Copyright (c)"


class TDAT(TextFrame):
    "Date of recording (DDMM)"


class TDLY(TextFrame):
    "Audio Delay (ms)"


class TENC(TextFrame):
    "Encoder"


class TEXT(TextFrame):
    "Lyricist"


class TFLT(TextFrame):
    "File type"


class TIME(TextFrame):
    "Time of recording (HHMM)"


class TIT1(TextFrame):
    "Content group description"


class TIT2(TextFrame):
    "Title"


class TIT3(TextFrame):
    "Subtitle/Description refinement"


class TKEY(TextFrame):
    "Starting Key"


class TLAN(TextFrame):
    "Audio Languages"


class TLEN(TextFrame):
    "Audio Length (ms)"


class TMED(TextFrame):
    "Source Media Type"


class TOAL(TextFrame):
    "Original Album"


class TOFN(TextFrame):
    "Original Filename"


class TOLY(TextFrame):
    "Original Lyricist"


class TOPE(TextFrame):
    "Original Artist/Performer"


class TORY(TextFrame):
    "Original Release Year"


class TOWN(TextFrame):
    "Owner/Licensee"


class TPE1(TextFrame):
    "Lead Artist/Performer/Soloist/Group"


class TPE2(TextFrame):
    "Band/Orchestra/Accompaniment"


class TPE3(TextFrame):
    "Conductor"


class TPE4(TextFrame):
    "Interpreter/Remixer/Modifier"


class TPOS(TextFrame):
    "Part of set"


class TPUB(TextFrame):
    "Publisher"


class TRCK(TextFrame):
    "Track Number"


class TRDA(TextFrame):
    "Recording Dates"


class TRSN(TextFrame):
    "Internet Radio Station Name"


class TRSO(TextFrame):
    "Internet Radio Station Owner"


class TSIZ(TextFrame):
    "Size of audio data (bytes)"


class TSRC(TextFrame):
    "International Standard Recording Code (ISRC)"


class TSSE(TextFrame):
    "Encoder settings"


class TYER(TextFrame):
    "Year of recording"


class TXXX(TextFrame):
    """User-defined text data.

    TXXX frames have a 'desc' attribute which is set to any Unicode
    value (though the encoding of the text and the description must be
    the same). Many taggers use this frame to store freeform keys.
    """

    desc: bytes
    utf16_desc: Any

    _framespec = [
        EncodingSpec('encoding'),
        EncodedTextSpec('desc'),
        EncodedTextSpec('text', required=True),
    ]

    @staticmethod
    def key_for(desc: bytes) -> str:
        return "TXXX:%s" % _key_text(desc)

    @property
    def HashKey(self) -> str:
        return self.key_for(self.desc)

    def _pprint(self) -> str:
        return "%s=%s" % (self.desc.decode("utf-8", "replace"), str(self))


class COMM(Frame):
    """User comment.

    User comment frames have a short description and a three letter
    ISO language code in the 'lang' attribute. Only one comment per
    language and description may exist.
    """

    lang: bytes
    desc: bytes
    text: bytes
    utf16_desc: Any
    utf16_text: Any

    _framespec = [
        EncodingSpec('encoding'),
        StringSpec('lang', length=3),
        EncodedTextSpec('desc'),
        EncodedTextSpec('text', required=True),
    ]

    @staticmethod
    def key_for(lang: bytes, desc: bytes) -> str:
        return "COMM:%s:%s" % (_key_text(desc), _key_text(lang))

    @property
    def HashKey(self) -> str:
        return self.key_for(self.lang, self.desc)

    def _pprint(self) -> str:
        return "%s=%s=%s" % (
            self.desc.decode("utf-8", "replace"), self.lang.decode("ascii"),
            self.text.decode("utf-8", "replace"))


class APIC(Frame):
    """Attached Picture.

    Attributes:

    * encoding -- text encoding for the description
    * mime -- a MIME type (e.g. image/jpeg)
    * type -- the source of the image (3 is the album front cover)
    * desc -- a text description of the image
    * image -- the :class:`ImageSource` (file path or in-memory data)

    There may only be one picture of each of the two file icon types;
    any other picture is unique by type and description.
    """

    mime: bytes
    type: PictureType
    desc: bytes
    image: ImageSource
    utf16_desc: Any

    _framespec = [
        EncodingSpec('encoding'),
        Latin1TextSpec('mime', required=True),
        PictureTypeSpec('type', default=PictureType.COVER_FRONT),
        EncodedTextSpec('desc'),
        ImageSpec('image', default=(None, None)),
    ]

    @staticmethod
    def key_for(type: int, desc: bytes) -> str:
        if type in (PictureType.FILE_ICON, PictureType.OTHER_FILE_ICON):
            return "APIC:%d" % type
        return "APIC:%d:%s" % (type, _key_text(desc))

    @property
    def HashKey(self) -> str:
        return self.key_for(self.type, self.desc)

    @property
    def path(self) -> str | bytes | None:
        return self.image.path

    @property
    def data(self) -> bytes | None:
        return self.image.data

    @property
    def image_size(self) -> int:
        return self.image.size

    def _pprint(self) -> str:
        return "%s, %s (%s, %d bytes)" % (
            self.type._pprint(), self.desc.decode("utf-8", "replace"),
            self.mime.decode("latin-1"), self.image_size)


Frames: dict[str, type[TextFrame]] = {}
"""The standard text frames accepted by TextTags, keyed by frame ID.
TXXX is not part of it."""


k, v = None, None
for k, v in list(globals().items()):
    if isinstance(v, type) and issubclass(v, Frame):
        v.__module__ = "id3forge"

        if len(k) == 4 and issubclass(v, TextFrame) and v is not TXXX:
            Frames[k] = v

try:
    del k
    del v
except NameError:
    pass
