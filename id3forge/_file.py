# Copyright (C) 2005  Michael Urman
#               2006  Lukas Lalinsky
#               2013  Christoph Reiter
#               2024  The id3forge authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import os
import struct
from collections.abc import Iterator
from typing import IO

from ._frames import Frame
from ._specs import WriteConfig
from ._store import CommentTags, PictureTags, TextTags
from ._util import (
    BitPaddedInt,
    ID3FileAccessError,
    ID3InvalidValueError,
    convert_error,
    openfile,
)

# 28 bits, the most a synchsafe size can hold
MAX_TAG_SIZE = (1 << 28) - 1


def save_frame(fileobj: IO[bytes], frame: Frame,
               config: WriteConfig | None = None) -> None:
    """Writes the 10 byte frame header followed by the frame content.

    The size field is a plain 32 bit big endian integer (not synchsafe
    in v2.3) taken from the size the frame computed when it was built.
    """

    header = struct.pack(
        '>4sLH', frame.FrameID.encode("ascii"), frame.encoded_byte_length, 0)
    fileobj.write(header)
    frame._writeData(fileobj, config)


def make_header(size: int) -> bytes:
    """The 10 byte ID3v2.3 main header for `size` bytes of frames.

    Raises:
        ID3InvalidValueError: if the size doesn't fit into 28 bits
    """

    if not 0 <= size <= MAX_TAG_SIZE:
        raise ID3InvalidValueError("tag too large: %d bytes" % size)
    return struct.pack(
        '>3sBBB4s', b'ID3', 3, 0, 0, BitPaddedInt(size).as_str())


class ID3:
    """ID3(texts=None, comments=None, pictures=None)

    An ID3v2.3 tag made up of up to three caller owned frame collections.
    A collection which is `None` gets skipped when writing. The
    collections are only read, never modified.

    ::

        texts = TextTags()
        texts.add_or_update("TALB", "Selection 3")
        ID3(texts=texts).save("song.mp3")

    Attributes:
        texts (TextTags): or `None`
        comments (CommentTags): or `None`
        pictures (PictureTags): or `None`
    """

    __module__ = "id3forge"

    texts: TextTags | None
    comments: CommentTags | None
    pictures: PictureTags | None

    def __init__(self, texts: TextTags | None = None,
                 comments: CommentTags | None = None,
                 pictures: PictureTags | None = None):
        self.texts = texts
        self.comments = comments
        self.pictures = pictures

    def _collections(self):
        return [c for c in (self.texts, self.comments, self.pictures)
                if c is not None]

    def __iter__(self) -> Iterator[Frame]:
        """All frames in the order they get written: text, comment,
        picture.
        """

        for collection in self._collections():
            yield from collection

    def __len__(self) -> int:
        return sum(len(c) for c in self._collections())

    @property
    def size(self) -> int:
        """The size of the tag excluding the 10 byte main header, as
        written into that header.
        """

        return sum(c.size for c in self._collections())

    def pprint(self) -> str:
        frames = "\n".join(f.pprint() for f in self)
        return "ID3v2.3 (%d bytes)" % self.size + (
            "\n" + frames if frames else "")

    @convert_error(OSError, ID3FileAccessError)
    def save(self, filething: str | bytes | os.PathLike | IO[bytes],
             config: WriteConfig | None = None) -> None:
        """save(filething, config=None)

        Write the tag to a file.

        A file name gets created or truncated and will contain only the
        tag. A file object is written to at its current position and not
        closed. Nothing gets rolled back if writing fails half way.

        Args:
            filething (filething): a path or a writable binary file object
            config (WriteConfig): `None` for the defaults
        Raises:
            ID3InvalidValueError: the tag is too large, nothing is written
            ID3FileAccessError: the output or a picture file failed
        """

        if config is None:
            config = WriteConfig()

        header = make_header(self.size)
        frames = list(self)

        with openfile(filething, "wb") as f:
            f.fileobj.write(header)
            for frame in frames:
                save_frame(f.fileobj, frame, config)


def tag_size(texts: TextTags | None = None,
             comments: CommentTags | None = None,
             pictures: PictureTags | None = None) -> int:
    """Size the frames of all passed collections take once written"""

    return ID3(texts, comments, pictures).size


def write(filething: str | bytes | os.PathLike | IO[bytes],
          texts: TextTags | None = None,
          comments: CommentTags | None = None,
          pictures: PictureTags | None = None,
          config: WriteConfig | None = None) -> None:
    """Write an ID3v2.3 tag made of the passed collections.

    Same as ``ID3(texts, comments, pictures).save(filething, config)``.
    """

    ID3(texts, comments, pictures).save(filething, config)
