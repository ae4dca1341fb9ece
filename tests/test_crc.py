"""CRC-32 streaming and progress event tests."""

from __future__ import annotations

import io
import os
import tempfile
import unittest
import zlib
from pathlib import Path
from unittest import mock

from sfv_checker.core.crc import checksum_file, compute_checksum, format_checksum


class ComputeChecksumTests(unittest.TestCase):
    def test_check_value_matches_crc32_iso_hdlc(self) -> None:
        data = b"123456789"
        self.assertEqual(compute_checksum(io.BytesIO(data), len(data)), 0xCBF43926)

    def test_empty_input_is_zero_and_reports_no_progress(self) -> None:
        events: list[int] = []
        self.assertEqual(compute_checksum(io.BytesIO(b""), 0, events.append), 0)
        self.assertEqual(events, [])

    def test_matches_zlib_for_any_chunk_size(self) -> None:
        data = os.urandom(5000)
        expected = zlib.crc32(data) & 0xFFFFFFFF
        for size in (1, 7, 64, 4096, 100000):
            with self.subTest(chunk_size=size):
                self.assertEqual(compute_checksum(io.BytesIO(data), len(data), chunk_size=size), expected)

    def test_progress_fires_once_per_distinct_percent(self) -> None:
        data = b"x" * 200
        events: list[int] = []
        compute_checksum(io.BytesIO(data), len(data), events.append, chunk_size=64)
        self.assertEqual(events, [32, 64, 96, 100])

    def test_byte_by_byte_progress_never_repeats_a_percent(self) -> None:
        data = b"y" * 200
        events: list[int] = []
        compute_checksum(io.BytesIO(data), len(data), events.append, chunk_size=1)
        self.assertEqual(events, list(range(1, 101)))

    def test_progress_callback_does_not_change_result(self) -> None:
        data = b"progress" * 100
        plain = compute_checksum(io.BytesIO(data), len(data), chunk_size=3)
        watched = compute_checksum(io.BytesIO(data), len(data), lambda _pct: None, chunk_size=3)
        self.assertEqual(plain, watched)

    def test_default_chunk_size_comes_from_environment(self) -> None:
        data = b"z" * 10
        events: list[int] = []
        with mock.patch.dict(os.environ, {"SFV_CHUNK_SIZE": "5"}):
            compute_checksum(io.BytesIO(data), len(data), events.append)
        self.assertEqual(events, [50, 100])

    def test_read_failure_propagates(self) -> None:
        fh = mock.Mock()
        fh.read.side_effect = OSError("device gone")
        with self.assertRaises(OSError):
            compute_checksum(fh, 10)


class FormatAndFileTests(unittest.TestCase):
    def test_format_is_eight_uppercase_digits(self) -> None:
        self.assertEqual(format_checksum(0), "00000000")
        self.assertEqual(format_checksum(0xABC), "00000ABC")
        self.assertEqual(format_checksum(0xdeadbeef), "DEADBEEF")

    def test_checksum_file_reports_size_and_value(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "data.bin"
            target.write_bytes(b"hello")
            result = checksum_file(target)

        self.assertEqual(result.size, 5)
        self.assertEqual(result.checksum, zlib.crc32(b"hello") & 0xFFFFFFFF)
        self.assertEqual(result.hex, "3610A686")

    def test_checksum_file_missing_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                checksum_file(Path(tmp) / "nope.bin")


if __name__ == "__main__":
    unittest.main()
