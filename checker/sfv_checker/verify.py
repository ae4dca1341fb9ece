from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from .core.crc import checksum_file
from .core.io import exists, is_dir, read_text, real_path
from .progress import ProgressFactory, echo, log, percent_bar
from .sfv import Entry, Malformed, ManifestEntry, SFVParser


@dataclass
class VerifyReport:
    manifest: Path
    opened: bool = False
    good: int = 0
    bad: int = 0
    missing: int = 0
    errors: int = 0
    malformed: int = 0

    @property
    def ok(self) -> bool:
        return self.opened and not (self.bad or self.missing or self.errors)

    def summary(self) -> str:
        return (f"good: {self.good}, bad: {self.bad}, not found: {self.missing}, "
                f"errors: {self.errors}, malformed: {self.malformed}")


class VerifyPipeline:
    def __init__(self, follow_links: bool = True, out: Callable[[str], None] = echo,
                 progress: ProgressFactory = percent_bar, parser: SFVParser | None = None):
        self.follow_links = follow_links
        self.out = out
        self.progress = progress
        self.parser = parser or SFVParser()

    def verify_all(self, manifests: Iterable[str | Path]) -> list[VerifyReport]:
        items = list(manifests)
        reports = []
        for i, m in enumerate(items):
            reports.append(self.verify(m))
            if i != len(items) - 1:
                self.out("")
        return reports

    def verify(self, manifest: str | Path) -> VerifyReport:
        report = VerifyReport(Path(manifest))
        try:
            sfv = real_path(manifest, self.follow_links)
        except FileNotFoundError:
            self.out(f"{Path(manifest).absolute()} was not found.")
            return report
        except OSError as e:
            log(f"[verify] {manifest}: {e.strerror or e}")
            return report
        report.manifest = sfv

        if is_dir(sfv, self.follow_links):
            self.out(f"{sfv} must be a file.")
            return report

        try:
            text = read_text(sfv)
        except (OSError, UnicodeDecodeError) as e:
            log(f"[verify] {sfv}: {e}")
            return report
        report.opened = True

        self.out(f"Reading the contents of {sfv}:")
        self.out("")
        base = sfv.parent
        for line in self.parser.parse(text):
            if isinstance(line, Malformed):
                report.malformed += 1
                self.out(f'Malformed SFV line (#{line.line_number}): "{line.raw}"')
            elif isinstance(line, Entry):
                self._check(base, line.entry, report)
        self.out(report.summary())
        return report

    def _check(self, base: Path, entry: ManifestEntry, report: VerifyReport) -> None:
        target = base / entry.path
        if not exists(target, self.follow_links):
            report.missing += 1
            self.out(f"{target} was not found.")
            return

        try:
            with self.progress(entry.path) as on_progress:
                result = checksum_file(target, on_progress)
        except OSError as e:
            log(f"[verify] {target}: {e.strerror or e}")
            report.errors += 1
            self.out(f"{entry.path} ... error.")
            return

        try:
            expected = entry.expected
        except ValueError:
            report.errors += 1
            self.out(f"{entry.path} ... error.")
            return

        if expected == result.checksum:
            report.good += 1
            self.out(f"{entry.path} ... good.")
        else:
            report.bad += 1
            self.out(f"{entry.path} ... bad.")
