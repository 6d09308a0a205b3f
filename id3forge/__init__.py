# Copyright (C) 2005  Michael Urman
#               2024  The id3forge authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""id3forge writes ID3v2.3 tags.

::

    from id3forge import TextTags, CommentTags, PictureTags, PictureType
    from id3forge import write

    texts = TextTags()
    texts.add_or_update("TALB", "Selection 3")
    texts.add_or_update("TPE1", "Ærøskøbing Brass")

    comments = CommentTags()
    comments.add_or_update("eng", "", "Tag, you're it!")

    pictures = PictureTags()
    pictures.add_or_update("image/jpeg", PictureType.COVER_FRONT, "FRONT",
                           path="folder.jpg")

    write("tag.id3", texts, comments, pictures)

Text is passed as ``str`` or as UTF-8 encoded ``bytes``. Frames holding
only ASCII are written as ISO-8859-1, all others as UTF-16 with BOM.
"""

from ._util import (
    error,
    ID3InvalidKeyError,
    ID3InvalidValueError,
    ID3OutOfMemoryError,
    ID3MalformedInputError,
    ID3TranscodingError,
    ID3FileAccessError,
    ID3NotFoundError,
    ID3EmptyCollectionError,
    BitPaddedInt,
)
from ._utf import (
    UTF8Class,
    UTF16String,
    ParsedString,
    classify,
    is_multibyte,
    to_utf16,
    parse_string,
)
from ._specs import Encoding, PictureType, WriteConfig, ImageSource
from ._frames import Frame, TextFrame, TXXX, COMM, APIC, Frames
from ._store import Outcome, TextTags, CommentTags, PictureTags
from ._file import ID3, write, tag_size
from ._frames import TALB as TALB, TBPM as TBPM, TCOM as TCOM, TCON as TCON, \
    TCOP as TCOP, TDAT as TDAT, TDLY as TDLY, TENC as TENC, TEXT as TEXT, \
    TFLT as TFLT, TIME as TIME, TIT1 as TIT1, TIT2 as TIT2, TIT3 as TIT3, \
    TKEY as TKEY, TLAN as TLAN, TLEN as TLEN, TMED as TMED, TOAL as TOAL, \
    TOFN as TOFN, TOLY as TOLY, TOPE as TOPE, TORY as TORY, TOWN as TOWN, \
    TPE1 as TPE1, TPE2 as TPE2, TPE3 as TPE3, TPE4 as TPE4, TPOS as TPOS, \
    TPUB as TPUB, TRCK as TRCK, TRDA as TRDA, TRSN as TRSN, TRSO as TRSO, \
    TSIZ as TSIZ, TSRC as TSRC, TSSE as TSSE, TYER as TYER


version = (1, 0, 0)
"""Version tuple."""

version_string = ".".join(map(str, version))
"""Version string."""


__all__ = [
    "error",
    "ID3InvalidKeyError",
    "ID3InvalidValueError",
    "ID3OutOfMemoryError",
    "ID3MalformedInputError",
    "ID3TranscodingError",
    "ID3FileAccessError",
    "ID3NotFoundError",
    "ID3EmptyCollectionError",
    "BitPaddedInt",
    "UTF8Class",
    "UTF16String",
    "ParsedString",
    "classify",
    "is_multibyte",
    "to_utf16",
    "parse_string",
    "Encoding",
    "PictureType",
    "WriteConfig",
    "ImageSource",
    "Frame",
    "TextFrame",
    "TXXX",
    "COMM",
    "APIC",
    "Frames",
    "Outcome",
    "TextTags",
    "CommentTags",
    "PictureTags",
    "ID3",
    "write",
    "tag_size",
    "version",
    "version_string",
    "TALB", "TBPM", "TCOM", "TCON", "TCOP", "TDAT", "TDLY", "TENC", "TEXT",
    "TFLT", "TIME", "TIT1", "TIT2", "TIT3", "TKEY", "TLAN", "TLEN", "TMED",
    "TOAL", "TOFN", "TOLY", "TOPE", "TORY", "TOWN", "TPE1", "TPE2", "TPE3",
    "TPE4", "TPOS", "TPUB", "TRCK", "TRDA", "TRSN", "TRSO", "TSIZ", "TSRC",
    "TSSE", "TYER",
]
