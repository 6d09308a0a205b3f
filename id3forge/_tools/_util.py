# Copyright 2015 Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

from __future__ import annotations

import contextlib
import ctypes
import locale
import os
import signal
from collections.abc import Iterator
from types import FrameType

# Windows code page identifier of UTF-8
CP_UTF8 = 65001


def iterbytes(b: bytes) -> Iterator[bytes]:
    return (bytes([v]) for v in b)


def split_escape(string: str | bytes, sep: str | bytes, maxsplit: int | None = None,
                 escape_char: str | bytes = "\\") -> list:
    """Like unicode/str/bytes.split but allows for the separator to be escaped

    If passed unicode/str/bytes will only return list of unicode/str/bytes.
    """

    assert len(sep) == 1
    assert len(escape_char) == 1

    if isinstance(string, bytes):
        if isinstance(escape_char, str):
            escape_char = escape_char.encode("ascii")
        if isinstance(sep, str):
            sep = sep.encode("ascii")
        iter_ = iterbytes
    else:
        iter_ = iter

    if maxsplit is None:
        maxsplit = len(string)

    empty = string[:0]
    result = []
    current = empty
    escaped = False
    for char in iter_(string):
        if escaped:
            if char != escape_char and char != sep:
                current += escape_char
            current += char
            escaped = False
        else:
            if char == escape_char:
                escaped = True
            elif char == sep and len(result) < maxsplit:
                result.append(current)
                current = empty
            else:
                current += char
    result.append(current)
    return result


class SignalHandler:

    _interrupted: bool
    _nosig: bool
    _init: bool

    def __init__(self):
        self._interrupted = False
        self._nosig = False
        self._init = False

    def init(self) -> None:
        _ = signal.signal(signal.SIGINT, self._handler)
        _ = signal.signal(signal.SIGTERM, self._handler)
        if os.name != "nt":
            _ = signal.signal(signal.SIGHUP, self._handler)

    def _handler(self, signum: int, frame: FrameType | None) -> None:
        self._interrupted = True
        if not self._nosig:
            raise SystemExit("Aborted...")

    @contextlib.contextmanager
    def block(self) -> Iterator[None]:
        """While this context manager is active any signals for aborting
        the process will be queued and exit the program once the context
        is left.
        """

        self._nosig = True
        yield
        self._nosig = False
        if self._interrupted:
            raise SystemExit("Aborted...")


_old_cp: int | None = None


def set_utf8_console() -> bool:
    """Switch the Windows console output to UTF-8.

    The previous code page is remembered for :func:`restore_console`.
    Calling it twice keeps the first remembered code page. Does nothing
    outside of Windows.

    Returns:
        bool: if the console is now in UTF-8 mode
    """

    global _old_cp

    if os.name != "nt":
        return False

    kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
    old_cp = kernel32.GetConsoleOutputCP()
    if kernel32.SetConsoleOutputCP(CP_UTF8) == 0:
        return False
    if _old_cp is None:
        _old_cp = old_cp

    try:
        locale.setlocale(locale.LC_ALL, ".UTF8")
    except locale.Error:
        # older C runtimes don't know UTF-8 locales, output still works
        pass
    return True


def restore_console() -> None:
    """Restore the code page replaced by :func:`set_utf8_console`.
    Does nothing if it wasn't changed.
    """

    global _old_cp

    if os.name != "nt" or _old_cp is None:
        return

    ctypes.windll.kernel32.SetConsoleOutputCP(_old_cp)  # type: ignore[attr-defined]
    _old_cp = None


@contextlib.contextmanager
def utf8_console() -> Iterator[None]:
    """Keeps the console in UTF-8 mode while the context is active"""

    set_utf8_console()
    try:
        yield
    finally:
        restore_console()
