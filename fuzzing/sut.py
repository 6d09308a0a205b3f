import os
import sys

import afl
from fuzztools import run_all


def main():
    # one pass over known good input before handing over to afl
    for sample in [b'', b'smoke test', 'ü\U0001f600'.encode("utf-8")]:
        run_all(sample)

    buffer = sys.stdin.buffer
    while afl.loop(1000):
        data = buffer.read()
        try:
            run_all(data)
        finally:
            buffer.seek(0)


if __name__ == '__main__':
    main()
    os._exit(0)
