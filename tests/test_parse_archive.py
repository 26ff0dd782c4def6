import unittest
from io import BufferedReader, BytesIO, RawIOBase

from car.errors import CarArchiveError
from car.parse.archive import MAGIC, ArchiveEntry, base_name, read_archive, write_archive

EXPECTED = (
    MAGIC
    + b"\x05\x00\x00\x00a.txt\x02\x00\x00\x00\x00\x00\x00\x00hi"
    + b"\x05\x00\x00\x00b.txt\x00\x00\x00\x00\x00\x00\x00\x00"
)


def _pack(*entries: ArchiveEntry) -> bytes:
    with BytesIO() as f:
        write_archive(f, entries)
        return f.getvalue()


def _read(data: bytes, check_magic: bool = False):
    return list(read_archive(BytesIO(data), check_magic))


class WriteArchiveTest(unittest.TestCase):
    def test_layout(self):
        data = _pack(ArchiveEntry(b"a.txt", b"hi"), ArchiveEntry(b"b.txt", b""))
        self.assertEqual(data, EXPECTED)

    def test_no_entries_is_magic_only(self):
        self.assertEqual(_pack(), MAGIC)

    def test_partial_archive_on_failing_source(self):
        def entries():
            yield ArchiveEntry(b"a.txt", b"hi")
            raise OSError("unreadable")

        f = BytesIO()
        with self.assertRaises(OSError):
            write_archive(f, entries())
        self.assertEqual(f.getvalue(), EXPECTED[: len(MAGIC) + 4 + 5 + 8 + 2])


class ReadArchiveTest(unittest.TestCase):
    def test_entries_in_order(self):
        entries = _read(EXPECTED)
        self.assertEqual([e.name for e in entries], [b"a.txt", b"b.txt"])
        self.assertEqual([e.data for e in entries], [b"hi", b""])
        self.assertEqual([e.offset for e in entries], [8, 27])

    def test_magic_only(self):
        self.assertEqual(_read(MAGIC), [])

    def test_shorter_than_magic_is_empty(self):
        self.assertEqual(_read(b""), [])
        self.assertEqual(_read(MAGIC[:3]), [])

    def test_other_magic_is_accepted(self):
        entries = _read(b"NOTANXLS" + EXPECTED[8:])
        self.assertEqual([e.name for e in entries], [b"a.txt", b"b.txt"])

    def test_check_magic(self):
        self.assertEqual(len(_read(EXPECTED, check_magic=True)), 2)
        with self.assertRaisesRegex(CarArchiveError, "magic"):
            _read(b"NOTANXLS" + EXPECTED[8:], check_magic=True)
        with self.assertRaisesRegex(CarArchiveError, "magic"):
            _read(MAGIC[:3], check_magic=True)

    def test_truncated_name(self):
        data = MAGIC + b"\x0a\x00\x00\x00abc"
        with self.assertRaisesRegex(CarArchiveError, "name"):
            _read(data)

    def test_truncated_name_length(self):
        with self.assertRaisesRegex(CarArchiveError, "name length"):
            _read(EXPECTED + b"\x05\x00")

    def test_truncated_size(self):
        data = MAGIC + b"\x05\x00\x00\x00a.txt\x02\x00\x00"
        with self.assertRaisesRegex(CarArchiveError, "file size"):
            _read(data)

    def test_truncated_data(self):
        with self.assertRaisesRegex(CarArchiveError, "file data"):
            _read(EXPECTED[: len(MAGIC) + 4 + 5 + 8 + 1])

    def test_negative_name_length(self):
        with self.assertRaisesRegex(CarArchiveError, r"^name length: -1 >= 0 \(at 8\)$"):
            _read(MAGIC + b"\xff\xff\xff\xff")

    def test_negative_size(self):
        data = MAGIC + b"\x01\x00\x00\x00a" + b"\xff" * 8
        with self.assertRaisesRegex(CarArchiveError, "file size"):
            _read(data)

    def test_absurd_size(self):
        data = MAGIC + b"\x01\x00\x00\x00a" + b"\xff" * 7 + b"\x7f" + b"xyz"
        with self.assertRaisesRegex(CarArchiveError, "file data"):
            _read(data)

    def test_entries_before_corruption_are_yielded(self):
        iterator = read_archive(BytesIO(EXPECTED + b"\x05\x00\x00\x00ab"))
        self.assertEqual(next(iterator).name, b"a.txt")
        self.assertEqual(next(iterator).name, b"b.txt")
        with self.assertRaises(CarArchiveError):
            next(iterator)

    def test_raw_name_bytes(self):
        name = b"caf\xe9.txt"
        self.assertEqual(_read(_pack(ArchiveEntry(name, b"x")))[0].name, name)


class _Pipe(RawIOBase):
    """A readable stream that cannot seek, like a FIFO."""

    def __init__(self, data: bytes):
        self._data = BytesIO(data)

    def readable(self):
        return True

    def readinto(self, b):
        chunk = self._data.read(len(b))
        b[: len(chunk)] = chunk
        return len(chunk)


def _read_pipe(data: bytes):
    return list(read_archive(BufferedReader(_Pipe(data))))


class NonSeekableReadTest(unittest.TestCase):
    def test_entries(self):
        entries = _read_pipe(EXPECTED)
        self.assertEqual([e.name for e in entries], [b"a.txt", b"b.txt"])
        self.assertEqual([e.data for e in entries], [b"hi", b""])

    def test_magic_only(self):
        self.assertEqual(_read_pipe(MAGIC), [])

    def test_truncated_name_length(self):
        with self.assertRaisesRegex(CarArchiveError, "name length"):
            _read_pipe(EXPECTED + b"\x05\x00")

    def test_absurd_size(self):
        data = MAGIC + b"\x01\x00\x00\x00a" + b"\xff" * 7 + b"\x3f" + b"xyz"
        message = r"file data: expected \d+ bytes, got 3"
        with self.assertRaisesRegex(CarArchiveError, message):
            _read_pipe(data)


class BaseNameTest(unittest.TestCase):
    def test_strips_directories(self):
        self.assertEqual(base_name("some/dir/a.txt"), b"a.txt")
        self.assertEqual(base_name(b"/abs/b.bin"), b"b.bin")
        self.assertEqual(base_name("plain"), b"plain")


if __name__ == "__main__":
    unittest.main()
