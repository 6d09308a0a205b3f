import glob
import os
import sys
import textwrap
import traceback
from io import BytesIO

from id3forge import error as ID3Error
from id3forge import (ID3, CommentTags, ID3MalformedInputError, PictureTags,
                      TextTags, UTF8Class, WriteConfig, classify, to_utf16)


def run_codec(data):
    kind = classify(data)
    try:
        units = to_utf16(data)
    except ID3MalformedInputError:
        assert kind == UTF8Class.MALFORMED
        return
    except ID3Error:
        return

    assert kind != UTF8Class.MALFORMED

    # only the structure is checked, overlong forms and surrogates pass
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return
    assert bytes(units)[:-2] == data.decode("utf-8").encode("utf-16-le")
    assert bytes(to_utf16(data, bigendian=True))[:-2] == \
        data.decode("utf-8").encode("utf-16-be")


def run_writer(data):
    texts = TextTags()
    comments = CommentTags()
    pictures = PictureTags()

    # the same input for every kind of field, most of them will fail
    for call in [
            lambda: texts.add_or_update("TIT2", data),
            lambda: texts.add_or_update_user_text(data[:8], data[8:]),
            lambda: comments.add_or_update(data[:3], data[3:8], data[8:]),
            lambda: pictures.add_or_update(data[:4], len(data) % 24,
                                           data[4:8], data=data)]:
        try:
            call()
        except ID3Error:
            pass

    tag = ID3(texts, comments, pictures)
    for bigendian in [False, True]:
        f = BytesIO()
        tag.save(f, WriteConfig(bigendian=bigendian))
        assert len(f.getvalue()) == tag.size + 10


def run_all(data):
    run_codec(data)
    run_writer(data)


def group_crashes(result_path):
    """Re-checks all errors, and groups them by stack trace
    and error type.
    """

    crash_paths = []
    pattern = os.path.join(result_path, '**', 'crashes', '*')
    for path in glob.glob(pattern):
        if os.path.splitext(path)[-1] == ".txt":
            continue
        crash_paths.append(path)

    if not crash_paths:
        print("No crashes found")
        return

    def norm_exc():
        lines = traceback.format_exc().splitlines()
        if ":" in lines[-1]:
            lines[-1], message = lines[-1].split(":", 1)
        else:
            message = ""
        return "\n".join(lines), message.strip()

    traces = {}
    messages = {}
    for path in crash_paths:
        with open(path, "rb") as h:
            data = h.read()
        try:
            run_all(data)
        except Exception:
            trace, message = norm_exc()
            messages.setdefault(trace, set()).add(message)
            traces.setdefault(trace, []).append(path)

    for trace, paths in traces.items():
        print('-' * 80)
        print("\n".join(paths))
        print()
        print(textwrap.indent(trace, '    '))
        print(messages[trace])

    print("%d crashes with %d traces" % (len(crash_paths), len(traces)))


if __name__ == '__main__':
    group_crashes(sys.argv[1])
