from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from .core.crc import checksum_file
from .core.io import absolute, exists, is_dir, real_path, write_text_lines
from .errors import FatalRunError, EXIT_BAD_TARGET, EXIT_TARGET_IS_DIR, EXIT_WRITE_FAILED
from .progress import ProgressFactory, echo, log, percent_bar
from .resolver import PathResolver
from .sfv import SFVWriter
from .walker import DirectoryWalker


@dataclass
class GenerateResult:
    """Accumulator for one generate run: counters plus the manifest lines."""
    target: Path
    lines: list[str] = field(default_factory=list)
    base: Path | None = None
    succeeded: int = 0
    failed: int = 0


def prepare_target(manifest: str | Path) -> Path:
    """Absolute manifest path; a missing file is fine, a directory is fatal."""
    try:
        sfv = real_path(manifest, follow_links=False)
    except FileNotFoundError:
        sfv = absolute(manifest)
    except OSError as e:
        raise FatalRunError(f"{manifest}: {e.strerror or e}", EXIT_BAD_TARGET) from e
    if is_dir(sfv, follow_links=False):
        raise FatalRunError(f"{sfv} must be a file.", EXIT_TARGET_IS_DIR)
    return sfv


class GeneratePipeline:
    def __init__(self, follow_links: bool = True, out: Callable[[str], None] = echo,
                 progress: ProgressFactory = percent_bar,
                 resolver: PathResolver | None = None,
                 walker: DirectoryWalker | None = None):
        self.follow_links = follow_links
        self.out = out
        self.progress = progress
        self.resolver = resolver or PathResolver(follow_links)
        self.walker = walker or DirectoryWalker(follow_links, on_failure=self._walk_failed)

    def generate(self, target: Path, sources: Iterable[str], header: Iterable[str] = ()) -> GenerateResult:
        """Checksum every source and write the manifest to ``target``.

        ``target`` should come from prepare_target(); overwrite confirmation is
        the caller's job.
        """
        result = GenerateResult(target, list(header), base=self._base_dir(target))
        for src in self.resolver.resolve_all(sources):
            if src.exists and is_dir(src.path, self.follow_links):
                self._walk(src.path, result)
            else:
                self._add_file(src.path, result)

        self.out("")
        self.out(f"{result.succeeded} file(s) processed successfully")
        self.out(f"{result.failed} file(s) failed to be processed")

        try:
            write_text_lines(target, result.lines)
        except OSError as e:
            raise FatalRunError(f"{target}: {e.strerror or e}", EXIT_WRITE_FAILED) from e
        return result

    def _walk(self, root: Path, result: GenerateResult) -> None:
        try:
            result.failed += self.walker.walk(root, lambda p: self._add_file(p, result))
        except OSError as e:
            log(f"[generate] {root}: {e.strerror or e}")
            result.failed += 1

    def _add_file(self, file: Path, result: GenerateResult) -> None:
        if not exists(file, self.follow_links):
            self.out(f"{file} was not found.")
            result.failed += 1
            return
        if self._same_file(file, result.target):
            return

        try:
            with self.progress(file.name) as on_progress:
                crc = checksum_file(file, on_progress)
            rel = self._relative(file, result.base)
        except OSError as e:
            log(f"[generate] {file}: {e.strerror or e}")
            result.failed += 1
            return

        result.lines.append(SFVWriter.entry_line(rel, crc.checksum))
        result.succeeded += 1
        self.out(f"{file} {crc.hex}")

    def _base_dir(self, target: Path) -> Path:
        """Manifest directory resolved under the same link policy as the sources."""
        try:
            return real_path(target.parent, self.follow_links)
        except OSError:
            # not created yet; write_text_lines makes it
            return target.parent

    def _relative(self, file: Path, base: Path) -> Path:
        full = real_path(file, follow_links=False)
        try:
            return Path(os.path.relpath(full, base))
        except ValueError:
            # different drive on Windows; keep the absolute path
            return full

    @staticmethod
    def _same_file(file: Path, target: Path) -> bool:
        try:
            return os.path.samefile(file, target)
        except OSError:
            return False

    def _walk_failed(self, path: Path, err: OSError) -> None:
        log(f"[generate] Unable to visit path {path}: {err.strerror or err}")
