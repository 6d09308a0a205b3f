# Copyright (C) 2005  Michael Urman
#               2024  The id3forge authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Ordered collections of frames, one per frame kind.

Each collection is owned by the caller and only read by the writer.
Every mutating call either succeeds completely or raises and leaves
the collection exactly as it was.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from enum import IntEnum
from typing import Generic, TypeVar

from ._frames import APIC, COMM, TXXX, Frame, Frames, TextFrame
from ._specs import PictureTypeSpec
from ._util import (
    ID3EmptyCollectionError,
    ID3InvalidKeyError,
    ID3MalformedInputError,
    ID3NotFoundError,
    ID3OutOfMemoryError,
    convert_error,
    utf8,
)

F = TypeVar("F", bound=Frame)


class Outcome(IntEnum):
    """What a successful add_or_update/delete call did"""

    ADDED = 0
    UPDATED = 1
    DELETED = 2


class FrameList(Generic[F]):
    """Insertion ordered frames, unique by their HashKey.

    Iterating yields the frames, ``tags[key]`` looks one up by HashKey.
    """

    def __init__(self) -> None:
        self.__frames: dict[str, F] = {}

    def __iter__(self) -> Iterator[F]:
        return iter(list(self.__frames.values()))

    def __len__(self) -> int:
        return len(self.__frames)

    def __getitem__(self, key: str) -> F:
        return self.__frames[key]

    def __contains__(self, key: object) -> bool:
        return key in self.__frames

    def keys(self) -> list[str]:
        return list(self.__frames.keys())

    def values(self) -> list[F]:
        return list(self.__frames.values())

    def __repr__(self) -> str:
        return "<%s %r>" % (type(self).__name__, self.values())

    @property
    def size(self) -> int:
        """Bytes all frames take once written, frame headers included"""

        return sum(10 + f.encoded_byte_length for f in self.__frames.values())

    def _add(self, frame: F) -> Outcome:
        """Adds the frame or copies it into the frame with the same key.

        `frame` has to be complete already, nothing here can fail.
        """

        existing = self.__frames.get(frame.HashKey)
        if existing is None:
            self.__frames[frame.HashKey] = frame
            return Outcome.ADDED
        frame._to_other(existing)
        return Outcome.UPDATED

    def _delete(self, key: str) -> Outcome:
        if not self.__frames:
            raise ID3EmptyCollectionError("no frames in %s" %
                                          type(self).__name__)
        try:
            del self.__frames[key]
        except KeyError:
            raise ID3NotFoundError(key) from None
        return Outcome.DELETED

    def destroy_all(self) -> None:
        """Removes all frames. Does nothing if there are none."""

        self.__frames.clear()

    clear = destroy_all

    def pprint(self) -> str:
        """Returns one line per frame, in the order they get written"""

        return "\n".join(f.pprint() for f in self.__frames.values())


def _lookup_text(value: str | bytes) -> bytes:
    # keys passed for lookups only, invalid UTF-8 simply won't match
    try:
        return utf8(value)
    except (TypeError, ID3MalformedInputError):
        return b"\xff"


class TextTags(FrameList[TextFrame]):
    """Text information frames (T***), at most one per frame ID, plus
    user defined TXXX frames, at most one per description.

    ::

        texts = TextTags()
        texts.add_or_update("TALB", "Selection 3")
        texts.add_or_update_user_text("CATALOG", "XYZ-001")
    """

    @convert_error(MemoryError, ID3OutOfMemoryError)
    def add_or_update(self, frame_id: str, text: str | bytes) -> Outcome:
        """Set the value of a text frame.

        Args:
            frame_id (str): one of the 38 supported frame IDs, see
                :data:`id3forge.Frames`
            text (str or bytes): non-empty value, bytes have to be UTF-8
        Returns:
            Outcome: ADDED or UPDATED
        Raises:
            ID3InvalidKeyError
            ID3InvalidValueError
            ID3MalformedInputError
            ID3TranscodingError
            ID3OutOfMemoryError
        """

        try:
            cls = Frames[frame_id]
        except (KeyError, TypeError):
            raise ID3InvalidKeyError(
                "not a supported text frame: %r" % (frame_id,)) from None
        return self._add(cls(text=text))

    def delete(self, frame_id: str) -> Outcome:
        """TXXX frames are removed with :meth:`delete_user_text`.

        Raises:
            ID3InvalidKeyError
            ID3EmptyCollectionError
            ID3NotFoundError
        """

        try:
            cls = Frames[frame_id]
        except (KeyError, TypeError):
            raise ID3InvalidKeyError(
                "not a supported text frame: %r" % (frame_id,)) from None
        return self._delete(cls.__name__)

    @convert_error(MemoryError, ID3OutOfMemoryError)
    def add_or_update_user_text(self, desc: str | bytes,
                                text: str | bytes) -> Outcome:
        """Set the value of the TXXX frame with the given description
        (which may be empty).
        """

        return self._add(TXXX(desc=desc, text=text))

    def delete_user_text(self, desc: str | bytes) -> Outcome:
        return self._delete(TXXX.key_for(_lookup_text(desc)))


class CommentTags(FrameList[COMM]):
    """COMM frames, unique by language and short description.

    ::

        comments = CommentTags()
        comments.add_or_update("eng", "", "Tag, you're it!")
    """

    @convert_error(MemoryError, ID3OutOfMemoryError)
    def add_or_update(self, lang: str | bytes, desc: str | bytes,
                      text: str | bytes) -> Outcome:
        """
        Args:
            lang (str): three letter ISO-639-2 language code
            desc (str or bytes): short content description, may be empty
            text (str or bytes): the comment, must not be empty
        Raises:
            ID3InvalidValueError
            ID3MalformedInputError
            ID3TranscodingError
            ID3OutOfMemoryError
        """

        return self._add(COMM(lang=lang, desc=desc, text=text))

    def delete(self, lang: str | bytes, desc: str | bytes) -> Outcome:
        return self._delete(
            COMM.key_for(_lookup_text(lang), _lookup_text(desc)))


_PICTURE_TYPE = PictureTypeSpec("type")


class PictureTags(FrameList[APIC]):
    """APIC frames.

    For the two file icon types (1 and 2) only one picture per type may
    exist, so adding one replaces the previous icon of that type
    including its description. All other pictures are unique by type
    and description.

    ::

        pictures = PictureTags()
        pictures.add_or_update("image/jpeg", PictureType.COVER_FRONT,
                               "FRONT", path="./folder.jpg")
        pictures.add_or_update("image/png", PictureType.COVER_BACK, "",
                               data=buffer)
    """

    @convert_error(MemoryError, ID3OutOfMemoryError)
    def add_or_update(self, mime: str | bytes, type: int,
                      desc: str | bytes = "",
                      path: str | bytes | os.PathLike | None = None,
                      data: bytes | None = None) -> Outcome:
        """Provide either `path` or `data`, not both.

        The picture file at `path` is opened to get its size, the data
        gets copied into the output when writing. `data` is copied.

        Raises:
            ID3InvalidValueError
            ID3FileAccessError
            ID3MalformedInputError
            ID3TranscodingError
            ID3OutOfMemoryError
        """

        return self._add(
            APIC(mime=mime, type=type, desc=desc, image=(path, data)))

    def delete(self, type: int, desc: str | bytes = "") -> Outcome:
        """Icon pictures are deleted by type alone.

        Raises:
            ID3InvalidValueError: if `type` is no picture type
            ID3EmptyCollectionError
            ID3NotFoundError
        """

        type = _PICTURE_TYPE.validate(None, type)
        return self._delete(APIC.key_for(type, _lookup_text(desc)))
