import os
import struct
from io import BytesIO

from id3forge import (
    ID3,
    CommentTags,
    ID3FileAccessError,
    ID3InvalidValueError,
    PictureTags,
    TextTags,
    WriteConfig,
    tag_size,
    write,
)
from id3forge._file import make_header

from tests import TestCase, get_temp_empty, get_temp_file


def read_frames(data):
    """Splits a written tag into (id, size, flags, content) tuples"""

    assert data[:5] == b"ID3\x03\x00"
    frames = []
    offset = 10
    while offset < len(data):
        frame_id, size, flags = struct.unpack(
            ">4sLH", data[offset:offset + 10])
        offset += 10
        frames.append(
            (frame_id, size, flags, data[offset:offset + size]))
        offset += size
    return frames


class Tmake_header(TestCase):

    def test_header(self):
        self.assertEqual(make_header(0), b"ID3\x03\x00\x00\x00\x00\x00\x00")
        self.assertEqual(
            make_header(257), b"ID3\x03\x00\x00\x00\x00\x02\x01")
        self.assertEqual(
            make_header(16384), b"ID3\x03\x00\x00\x00\x01\x00\x00")

    def test_too_large(self):
        self.assertEqual(
            make_header((1 << 28) - 1)[6:], b"\x7f\x7f\x7f\x7f")
        self.assertRaises(ID3InvalidValueError, make_header, 1 << 28)


class TWrite(TestCase):

    def setUp(self):
        self.filename = get_temp_empty(".id3")

    def tearDown(self):
        os.unlink(self.filename)

    def read(self):
        with open(self.filename, "rb") as h:
            return h.read()

    def test_empty(self):
        write(self.filename)
        self.assertEqual(self.read(), b"ID3\x03\x00\x00\x00\x00\x00\x00")

    def test_truncates(self):
        with open(self.filename, "wb") as h:
            h.write(b"x" * 100)
        write(self.filename, TextTags())
        self.assertEqual(len(self.read()), 10)

    def test_text_and_comment(self):
        texts = TextTags()
        texts.add_or_update("TALB", "Selection 3")
        comments = CommentTags()
        comments.add_or_update("eng", "", "Tag, you're it!")

        write(self.filename, texts, comments)
        data = self.read()
        self.assertEqual(
            data,
            b"ID3\x03\x00\x00\x00\x00\x00\x36"
            b"TALB\x00\x00\x00\x0d\x00\x00\x00Selection 3\x00"
            b"COMM\x00\x00\x00\x15\x00\x00\x00eng\x00Tag, you're it!\x00")
        self.assertEqual(tag_size(texts, comments), 0x36)

    def test_minimal(self):
        texts = TextTags()
        texts.add_or_update("TALB", "Test")
        comments = CommentTags()
        comments.add_or_update("eng", "", "Hi")

        write(self.filename, texts, comments)
        data = self.read()
        # 16 bytes TALB, 18 bytes COMM
        self.assertEqual(data[:10], b"ID3\x03\x00\x00\x00\x00\x00\x22")
        self.assertEqual(len(data), 10 + 16 + 18)
        self.assertEqual(data[10:26], b"TALB\x00\x00\x00\x06\x00\x00\x00Test\x00")

    def test_order(self):
        texts = TextTags()
        comments = CommentTags()
        pictures = PictureTags()
        pictures.add_or_update("image/png", 3, data=b"p")
        comments.add_or_update("eng", "", "c")
        texts.add_or_update("TIT2", "b")
        texts.add_or_update_user_text("k", "v")
        texts.add_or_update("TALB", "a")

        write(self.filename, texts, comments, pictures)
        ids = [f[0] for f in read_frames(self.read())]
        self.assertEqual(ids, [b"TIT2", b"TXXX", b"TALB", b"COMM", b"APIC"])

    def test_none_skipped(self):
        pictures = PictureTags()
        pictures.add_or_update("image/png", 3, data=b"p")
        write(self.filename, pictures=pictures)
        frames = read_frames(self.read())
        self.assertEqual([f[0] for f in frames], [b"APIC"])

    def test_size_header_matches(self):
        texts = TextTags()
        texts.add_or_update("TIT2", u"\U0001F600 Ünïcode")
        comments = CommentTags()
        comments.add_or_update("deu", u"Köln", "ok")
        tag = ID3(texts, comments)
        tag.save(self.filename)
        data = self.read()
        self.assertEqual(len(data), 10 + tag.size)
        self.assertEqual(len(tag), 2)
        for frame_id, size, flags, content in read_frames(data):
            self.assertEqual(len(content), size)
            self.assertEqual(flags, 0)
            self.assertEqual(content[:1], b"\x01")

    def test_picture_from_file(self):
        image = b"\xff\xd8" + bytes(range(256)) * 1000
        filename = get_temp_file(image)
        try:
            pictures = PictureTags()
            pictures.add_or_update(
                "image/jpeg", 3, "FRONT", path=filename)
            write(self.filename, pictures=pictures,
                  config=WriteConfig(buffer_size=1000))
        finally:
            os.unlink(filename)

        frames = read_frames(self.read())
        self.assertEqual(len(frames), 1)
        frame_id, size, flags, content = frames[0]
        self.assertEqual(size, 1 + 11 + 1 + 6 + len(image))
        self.assertEqual(content[:19], b"\x00image/jpeg\x00\x03FRONT\x00")
        self.assertEqual(content[19:], image)

    def test_picture_from_data(self):
        pictures = PictureTags()
        pictures.add_or_update("image/png", 4, u"bäck", data=b"\x89PNG")
        write(self.filename, pictures=pictures)
        frames = read_frames(self.read())
        self.assertEqual(
            frames[0][3],
            b"\x01image/png\x00\x04\xff\xfeb\x00\xe4\x00c\x00k\x00\x00\x00"
            b"\x89PNG")

    def test_picture_file_truncated(self):
        filename = get_temp_file(b"x" * 50)
        try:
            pictures = PictureTags()
            pictures.add_or_update("image/png", 3, path=filename)
            with open(filename, "wb") as h:
                h.write(b"x" * 10)
            self.assertRaises(
                ID3FileAccessError, write, self.filename, pictures=pictures)
        finally:
            os.unlink(filename)

    def test_picture_file_gone(self):
        filename = get_temp_file(b"x" * 50)
        pictures = PictureTags()
        pictures.add_or_update("image/png", 3, path=filename)
        os.unlink(filename)
        self.assertRaises(
            ID3FileAccessError, write, self.filename, pictures=pictures)

    def test_bigendian(self):
        texts = TextTags()
        texts.add_or_update("TIT2", u"\xe9")
        little = BytesIO()
        big = BytesIO()
        ID3(texts).save(little)
        ID3(texts).save(big, WriteConfig(bigendian=True))
        self.assertEqual(len(little.getvalue()), len(big.getvalue()))
        self.assertEqual(
            read_frames(little.getvalue())[0][3], b"\x01\xff\xfe\xe9\x00\x00\x00")
        self.assertEqual(
            read_frames(big.getvalue())[0][3], b"\x01\xfe\xff\x00\xe9\x00\x00")

    def test_fileobj_not_closed(self):
        fileobj = BytesIO()
        write(fileobj)
        self.assertFalse(fileobj.closed)
        self.assertEqual(len(fileobj.getvalue()), 10)

    def test_unwritable(self):
        filename = os.path.join(self.filename, "nope")
        self.assertRaises(ID3FileAccessError, write, filename, TextTags())

    def test_collections_untouched(self):
        texts = TextTags()
        texts.add_or_update("TALB", "a")
        before = texts.keys()
        write(self.filename, texts)
        write(self.filename, texts)
        self.assertEqual(texts.keys(), before)
        self.assertEqual(len(self.read()), 10 + 10 + 3)

    def test_pprint(self):
        texts = TextTags()
        texts.add_or_update("TALB", "a")
        self.assertEqual(ID3(texts).pprint(), "ID3v2.3 (13 bytes)\nTALB=a")
        self.assertEqual(ID3().pprint(), "ID3v2.3 (0 bytes)")
