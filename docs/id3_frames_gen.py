#!/usr/bin/python
# Copyright 2013 Christoph Reiter
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""
./id3_frames_gen.py > api/frames.rst
"""

import os
import sys

sys.path.insert(0, os.path.abspath('../'))

import id3forge  # noqa: E402
from id3forge import Frame, Frames  # noqa: E402

BaseFrames = dict([(k, v) for (k, v) in vars(id3forge).items()
                   if v not in Frames.values() and
                   isinstance(v, type) and
                   (issubclass(v, Frame) or v is Frame)])


def print_header(header, type_="-"):
    print(header)
    print(type_ * len(header))
    print("")


def print_frames(frames, sort_mro=False):
    if sort_mro:
        # less bases first, then by name
        def sort_func(x):
            return (len(x[1].__mro__), x[0])
    else:
        def sort_func(x):
            return x[0]

    for _name, cls in sorted(frames.items(), key=sort_func):
        print(f"""
.. autoclass:: id3forge.{cls.__name__}
    :show-inheritance:
    :members:
""")


if __name__ == "__main__":

    print_header("Frame Base Classes")
    print_frames(BaseFrames, sort_mro=True)
    print_header("Text Frames")
    print_frames(Frames)
