# Copyright 2005 Joe Wreschnig
#           2024 The id3forge authors
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Write a new ID3v2.3 tag into a file."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence

from ._util import SignalHandler, split_escape, utf8_console

_sig = SignalHandler()


class Arguments(argparse.Namespace):
    texts: list[str] = []
    comments: list[str] = []
    pictures: list[str] = []
    list_frames: bool = False
    bigendian: bool = False
    output: str | None = None


def parse_text(value: str) -> tuple[str, str, str | None]:
    """'TIT2=Title' -> ("TIT2", "Title", None),
    'TXXX=DESC:Value' -> ("TXXX", "Value", "DESC")
    """

    if "=" not in value:
        raise ValueError("expected ID=VALUE, got %r" % value)
    frame_id, text = value.split("=", 1)
    if frame_id == "TXXX":
        parts = split_escape(text, ":", maxsplit=1)
        if len(parts) != 2:
            raise ValueError("expected TXXX=DESC:VALUE, got %r" % value)
        desc, text = parts
        return frame_id, text, desc
    return frame_id, text, None


def parse_comment(value: str) -> tuple[str, str, str]:
    parts = split_escape(value, ":", maxsplit=2)
    if len(parts) != 3:
        raise ValueError("expected LANG:DESC:TEXT, got %r" % value)
    lang, desc, text = parts
    return lang, desc, text


def parse_picture_type(value: str) -> int:
    from id3forge import PictureType

    try:
        return int(value)
    except ValueError:
        pass
    try:
        return PictureType[value.upper()]
    except KeyError:
        raise ValueError("unknown picture type %r" % value) from None


def parse_picture(value: str) -> tuple[str, int, str, str]:
    parts = split_escape(value, ":", maxsplit=3)
    if len(parts) != 4:
        raise ValueError("expected MIME:TYPE:DESC:PATH, got %r" % value)
    mime, type_, desc, path = parts
    return mime, parse_picture_type(type_), desc, path


def main(argv: Sequence[str]) -> int:
    import id3forge
    from id3forge import ID3, CommentTags, PictureTags, TextTags, WriteConfig

    parser = argparse.ArgumentParser(
        prog=os.path.basename(argv[0]),
        usage="%(prog)s [options] OUTPUT",
        description="Write an ID3v2.3 tag into OUTPUT, replacing its "
                    "content. Escape ':' in values with '\\:'.")

    _ = parser.add_argument(
        "--version", action="version",
        version="id3forge %s" % id3forge.version_string)
    _ = parser.add_argument(
        "-t", "--text", dest="texts", action="append", default=[],
        metavar="ID=VALUE",
        help="add a text frame, TXXX=DESC:VALUE for user defined text")
    _ = parser.add_argument(
        "-c", "--comment", dest="comments", action="append", default=[],
        metavar="LANG:DESC:TEXT", help="add a comment")
    _ = parser.add_argument(
        "-p", "--picture", dest="pictures", action="append", default=[],
        metavar="MIME:TYPE:DESC:PATH",
        help="add a picture, TYPE is a number or a name like cover_front")
    _ = parser.add_argument(
        "-l", "--list", dest="list_frames", action="store_true", default=False,
        help="only print the frames instead of writing them")
    _ = parser.add_argument(
        "--big-endian", dest="bigendian", action="store_true", default=False,
        help="write UTF-16 text big endian")
    _ = parser.add_argument(
        "output", nargs="?", metavar="OUTPUT", help="the file to write")

    args = parser.parse_args(argv[1:], namespace=Arguments())

    if args.output is None and not args.list_frames:
        parser.error("OUTPUT is required unless --list is given")

    try:
        texts_ = [parse_text(v) for v in args.texts]
        comments_ = [parse_comment(v) for v in args.comments]
        pictures_ = [parse_picture(v) for v in args.pictures]
    except ValueError as e:
        parser.error(str(e))

    texts = TextTags()
    comments = CommentTags()
    pictures = PictureTags()
    tag = ID3(texts, comments, pictures)

    with utf8_console():
        try:
            for frame_id, text, desc in texts_:
                if desc is None:
                    texts.add_or_update(frame_id, text)
                else:
                    texts.add_or_update_user_text(desc, text)
            for lang, desc, text in comments_:
                comments.add_or_update(lang, desc, text)
            for mime, type_, desc, path in pictures_:
                pictures.add_or_update(mime, type_, desc, path=path)

            if args.list_frames:
                print(tag.pprint())
                return 0

            with _sig.block():
                tag.save(args.output, WriteConfig(bigendian=args.bigendian))
        except id3forge.error as e:
            print("%s: error: %s" % (parser.prog, e), file=sys.stderr)
            return 1

    return 0


def entry_point() -> int:
    _sig.init()
    return main(sys.argv)
