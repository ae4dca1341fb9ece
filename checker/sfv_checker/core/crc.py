from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable
import os
import zlib

from ..flags import chunk_size as _default_chunk_size


ProgressCallback = Callable[[int], None]


@dataclass(frozen=True)
class ChecksumResult:
    path: Path
    checksum: int
    size: int

    @property
    def hex(self) -> str:
        return format_checksum(self.checksum)


def format_checksum(value: int) -> str:
    """8 upper-case hex digits, zero padded."""
    return f"{value & 0xFFFFFFFF:08X}"


def compute_checksum(fh: BinaryIO, total_size: int,
                     on_progress: ProgressCallback | None = None,
                     chunk_size: int | None = None) -> int:
    """Stream ``fh`` through CRC-32 (ISO-HDLC, same as zip/zlib).

    ``on_progress(percent)`` fires only when floor(read / total * 100) changes,
    so an empty file reports nothing and fast reads may skip percentages.
    """
    size = chunk_size or _default_chunk_size()
    crc = 0
    done = 0
    last = 0
    for chunk in iter(lambda: fh.read(size), b""):
        crc = zlib.crc32(chunk, crc)
        done += len(chunk)
        if on_progress and total_size > 0:
            pct = done * 100 // total_size
            if pct != last:
                last = pct
                on_progress(pct)
    return crc & 0xFFFFFFFF


def checksum_file(path: str | Path, on_progress: ProgressCallback | None = None) -> ChecksumResult:
    p = Path(path)
    total = os.stat(p).st_size
    with p.open("rb") as f:
        crc = compute_checksum(f, total, on_progress)
    return ChecksumResult(p, crc, total)
