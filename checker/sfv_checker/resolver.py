from __future__ import annotations
import os, re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from .core.io import absolute, real_path
from .errors import FatalRunError, EXIT_GLOB_FAILED, EXIT_INVALID_SOURCE

WILDCARDS = ("*", "?")
_SEPARATORS = ("/", "\\") if os.name == "nt" else ("/",)


@dataclass(frozen=True, order=True)
class ResolvedSource:
    path: Path
    exists: bool = True


def has_wildcard(token: str) -> bool:
    return any(c in token for c in WILDCARDS)


def split_glob(token: str) -> tuple[str, str]:
    """Split ``dir/sub/*.log`` into (``dir/sub``, ``*.log``).

    The split is at the last separator before the first wildcard; with no such
    separator the parent is ``./``.
    """
    first = min(i for i in (token.find(w) for w in WILDCARDS) if i != -1)
    cut = max(token.rfind(s, 0, first) for s in _SEPARATORS)
    if cut == -1:
        return "./", token
    parent = token[:cut] or token[0]
    return parent, token[cut + 1:]


def compile_pattern(pattern: str) -> re.Pattern:
    """Glob pattern -> regex; everything but [A-Za-z0-9*?] matches literally."""
    parts = []
    for c in pattern:
        if c == "*":
            parts.append(".*")
        elif c == "?":
            parts.append(".")
        elif c.isascii() and c.isalnum():
            parts.append(c)
        else:
            parts.append(re.escape(c))
    flags = re.DOTALL | (re.IGNORECASE if os.name == "nt" else 0)
    return re.compile("".join(parts), flags)


class PathResolver:
    """Expand raw source tokens (files, dirs, missing paths, globs) to ResolvedSource."""

    def __init__(self, follow_links: bool = True):
        self.follow_links = follow_links

    def resolve(self, token: str) -> Iterator[ResolvedSource]:
        if not token:
            return
        if has_wildcard(token):
            yield from self._expand(token)
            return
        try:
            yield ResolvedSource(real_path(token, self.follow_links))
        except FileNotFoundError:
            yield ResolvedSource(absolute(token), exists=False)
        except (OSError, ValueError) as e:
            raise FatalRunError(f"{token}: {e}", EXIT_INVALID_SOURCE) from e

    def _expand(self, token: str) -> Iterator[ResolvedSource]:
        parent, pattern = split_glob(token)
        rx = compile_pattern(pattern)
        try:
            with os.scandir(parent) as it:
                names = sorted(e.name for e in it if rx.fullmatch(e.name))
        except OSError as e:
            raise FatalRunError(f"{parent}: {e.strerror or e}", EXIT_GLOB_FAILED) from e
        for name in names:
            try:
                yield ResolvedSource(real_path(Path(parent, name), self.follow_links))
            except FileNotFoundError:
                # vanished between listing and resolving
                yield ResolvedSource(absolute(Path(parent, name)), exists=False)

    def resolve_all(self, tokens: Iterable[str]) -> list[ResolvedSource]:
        """Flatten every token's sources and sort by path for a stable manifest order."""
        found = [src for tok in tokens for src in self.resolve(tok)]
        return sorted(found, key=lambda s: str(s.path))
