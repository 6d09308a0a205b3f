import os
from io import BytesIO

from id3forge._util import (
    BitPaddedInt,
    ID3FileAccessError,
    ID3MalformedInputError,
    ID3OutOfMemoryError,
    convert_error,
    copy_bytes,
    error,
    get_size,
    openfile,
    utf8,
)

from tests import TestCase, get_temp_empty, get_temp_file


class BitPaddedIntTest(TestCase):

    def test_negative(self):
        self.assertRaises(ValueError, BitPaddedInt, -1)

    def test_not_int(self):
        self.assertRaises(TypeError, BitPaddedInt, b'\x00\x00\x00\x00')
        self.assertRaises(TypeError, BitPaddedInt, True)

    def test_value(self):
        self.assertEqual(BitPaddedInt(257), 257)
        self.assertEqual(BitPaddedInt(257).bits, 7)

    def test_s0(self):
        self.assertEqual(BitPaddedInt(0).as_str(), b'\x00\x00\x00\x00')

    def test_s129(self):
        self.assertEqual(BitPaddedInt(129).as_str(), b'\x00\x00\x01\x01')

    def test_s257(self):
        self.assertEqual(BitPaddedInt(257).as_str(), b'\x00\x00\x02\x01')

    def test_s16384(self):
        # 16384 == 1 << 14, so the third byte from the right is set
        self.assertEqual(BitPaddedInt(16384).as_str(), b'\x00\x01\x00\x00')

    def test_max(self):
        self.assertEqual(
            BitPaddedInt((1 << 28) - 1).as_str(), b'\x7f\x7f\x7f\x7f')
        self.assertRaises(ValueError, BitPaddedInt(1 << 28).as_str)

    def test_width(self):
        self.assertEqual(BitPaddedInt(1 << 28).as_str(width=5),
                         b'\x01\x00\x00\x00\x00')
        self.assertEqual(BitPaddedInt(0x81).as_str(width=2), b'\x01\x01')
        self.assertRaises(ValueError, BitPaddedInt(1 << 14).as_str, width=2)

    def test_8bits(self):
        self.assertEqual(BitPaddedInt(0xFFFFFFFF, bits=8).as_str(),
                         b'\xFF\xFF\xFF\xFF')


class Tconvert_error(TestCase):

    def test_converts(self):
        @convert_error(OSError, ID3FileAccessError)
        def fail():
            raise OSError("nope")

        with self.assertRaises(ID3FileAccessError) as ctx:
            fail()
        self.assertTrue(isinstance(ctx.exception.__cause__, OSError))
        self.assertTrue(isinstance(ctx.exception, IOError))

    def test_passes_own_errors(self):
        @convert_error(MemoryError, ID3OutOfMemoryError)
        def fail():
            raise ID3MalformedInputError("bad")

        self.assertRaises(ID3MalformedInputError, fail)

    def test_other_untouched(self):
        @convert_error(OSError, ID3FileAccessError)
        def fail():
            raise KeyError("x")

        self.assertRaises(KeyError, fail)

    def test_return_value(self):
        @convert_error(OSError, ID3FileAccessError)
        def ok(a, b=1):
            return a + b

        self.assertEqual(ok(1, b=2), 3)


class Tutf8(TestCase):

    def test_bytes(self):
        self.assertEqual(utf8(b"\xc3\xbc"), b"\xc3\xbc")
        self.assertEqual(utf8(bytearray(b"a")), b"a")
        self.assertTrue(isinstance(utf8(memoryview(b"a")), bytes))

    def test_str(self):
        self.assertEqual(utf8(u"\xfc"), b"\xc3\xbc")

    def test_lone_surrogate(self):
        self.assertRaises(ID3MalformedInputError, utf8, u"\ud800")

    def test_malformed_bytes_pass(self):
        self.assertEqual(utf8(b"\xff"), b"\xff")

    def test_other(self):
        self.assertRaises(TypeError, utf8, 42)
        self.assertRaises(TypeError, utf8, None)

    def test_errors_are_library_errors(self):
        self.assertTrue(issubclass(ID3MalformedInputError, error))
        self.assertTrue(issubclass(ID3MalformedInputError, ValueError))


class Tcopy_bytes(TestCase):

    def test_exact(self):
        src = BytesIO(b"abcdef")
        dst = BytesIO()
        copy_bytes(src, dst, 4, BUFFER_SIZE=3)
        self.assertEqual(dst.getvalue(), b"abcd")

    def test_zero(self):
        dst = BytesIO()
        copy_bytes(BytesIO(b"abc"), dst, 0)
        self.assertEqual(dst.getvalue(), b"")

    def test_short_source(self):
        dst = BytesIO()
        self.assertRaises(
            ID3FileAccessError, copy_bytes, BytesIO(b"ab"), dst, 3)
        self.assertEqual(dst.getvalue(), b"ab")


class Tfiles(TestCase):

    def test_get_size(self):
        filename = get_temp_file(b"x" * 42)
        try:
            self.assertEqual(get_size(filename), 42)
        finally:
            os.unlink(filename)

    def test_get_size_missing(self):
        filename = get_temp_empty()
        os.unlink(filename)
        self.assertRaises(ID3FileAccessError, get_size, filename)

    def test_openfile_fileobj_stays_open(self):
        fileobj = BytesIO()
        with openfile(fileobj, "wb") as filething:
            self.assertTrue(filething.fileobj is fileobj)
            self.assertEqual(filething.filename, None)
        self.assertFalse(fileobj.closed)

    def test_openfile_path_closed(self):
        filename = get_temp_empty()
        try:
            with openfile(filename, "wb") as filething:
                filething.fileobj.write(b"abc")
                self.assertEqual(filething.filename, filename)
            self.assertTrue(filething.fileobj.closed)
            self.assertEqual(get_size(filename), 3)
        finally:
            os.unlink(filename)

    def test_openfile_missing_dir(self):
        filename = os.path.join(get_temp_empty(), "nope")
        with self.assertRaises(ID3FileAccessError):
            with openfile(filename, "wb"):
                pass
