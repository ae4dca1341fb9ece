"""SFV manifest text: line grammar, typed lines, serialisation.

    ; comment lines start with ';' or '#'
    relative/path/file.ext 1A2B3C4D
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable, Union

from .core.crc import format_checksum
from .core.io import split_lines

COMMENT_MARKERS = (";", "#")

# group 1 = path, group 2 = optional 0x, group 3 = hex digits
_ENTRY_RE = r"^\s*([^;#\s](?:.*\S)?)\s+(0[xX])?([0-9A-Fa-f]{1,8})\s*$"


@dataclass(frozen=True)
class ManifestEntry:
    path: str
    checksum: str

    @property
    def expected(self) -> int:
        """Stored CRC as an unsigned int; ValueError if the digits are not hex."""
        return int(self.checksum, 16)


@dataclass(frozen=True)
class Comment:
    text: str


@dataclass(frozen=True)
class Blank:
    pass


@dataclass(frozen=True)
class Entry:
    entry: ManifestEntry


@dataclass(frozen=True)
class Malformed:
    raw: str
    line_number: int


ManifestLine = Union[Comment, Blank, Entry, Malformed]


class SFVParser:
    def __init__(self) -> None:
        self._entry = re.compile(_ENTRY_RE)

    def parse_line(self, raw: str, line_number: int = 0) -> ManifestLine:
        stripped = raw.strip()
        if not stripped:
            return Blank()
        if stripped.startswith(COMMENT_MARKERS):
            return Comment(raw)
        m = self._entry.match(raw)
        if not m:
            return Malformed(raw, line_number)
        return Entry(ManifestEntry(m.group(1).strip(), m.group(3)))

    def parse(self, text: str) -> list[ManifestLine]:
        """Parse a whole manifest; line numbers are 1-based over physical lines."""
        if text.startswith("\ufeff"):
            text = text[1:]
        return self.parse_lines(split_lines(text))

    def parse_lines(self, lines: Iterable[str]) -> list[ManifestLine]:
        return [self.parse_line(line, n) for n, line in enumerate(lines, start=1)]


class SFVWriter:
    @staticmethod
    def header(created: str, description: str = "") -> list[str]:
        lines: list[str] = []
        if description:
            lines.append(f"; SFV File for {description}")
        lines.append(f"; Created on {created}")
        lines.append("; File encoding is UTF-8")
        lines.append("")
        return lines

    @staticmethod
    def entry_line(relative_path: str | PurePath, checksum: int) -> str:
        rel = relative_path.as_posix() if isinstance(relative_path, PurePath) else relative_path
        return f"{rel} {format_checksum(checksum)}"

    @staticmethod
    def serialize(lines: Iterable[str]) -> str:
        return "\n".join(lines) + "\n"
