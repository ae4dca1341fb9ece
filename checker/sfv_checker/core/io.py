from __future__ import annotations
import os, re, stat
from pathlib import Path
from typing import Iterable


_LINE_BREAK = re.compile(r"\r\n|\r|\n")


# Single place for "toRealPath" semantics so resolver, walker and pipelines agree
# on what following (or not following) symlinks means.
def real_path(p: str | Path, follow_links: bool = True) -> Path:
    """Canonical absolute path of an existing entry.

    Raises FileNotFoundError when nothing exists at ``p``. With
    ``follow_links=False`` the final component is not dereferenced, so a
    dangling symlink still counts as existing.
    """
    p = Path(p)
    if follow_links:
        return p.resolve(strict=True)
    os.lstat(p)
    return Path(os.path.abspath(p))


def absolute(p: str | Path) -> Path:
    return Path(os.path.abspath(p))


def exists(p: Path, follow_links: bool = True) -> bool:
    if follow_links:
        return p.exists()
    return os.path.lexists(p)


def is_dir(p: Path, follow_links: bool = True) -> bool:
    try:
        st = os.stat(p) if follow_links else os.lstat(p)
    except OSError:
        return False
    return stat.S_ISDIR(st.st_mode)


def is_regular_file(p: Path, follow_links: bool = True) -> bool:
    """Raises OSError if the entry cannot be stat'ed."""
    st = os.stat(p) if follow_links else os.lstat(p)
    return stat.S_ISREG(st.st_mode)


def split_lines(text: str) -> list[str]:
    """Physical lines; only CR, LF and CRLF end one (str.splitlines also breaks on \\f, \\x85 ...)."""
    lines = _LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def read_text(p: Path) -> str:
    # utf-8-sig drops a BOM written by some Windows tools
    return p.read_text(encoding="utf-8-sig")


def write_text_lines(p: Path, lines: Iterable[str]) -> None:
    """Overwrite ``p`` with ``lines``; newline translation gives platform separators."""
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
