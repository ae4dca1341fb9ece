from __future__ import annotations
import errno, os
from pathlib import Path
from typing import Callable

from .core.io import is_regular_file

Visitor = Callable[[Path], None]
FailureHandler = Callable[[Path, OSError], None]


class DirectoryWalker:
    """Recursive regular-file enumeration that keeps going past per-entry failures."""

    def __init__(self, follow_links: bool = True, on_failure: FailureHandler | None = None):
        self.follow_links = follow_links
        self.on_failure = on_failure

    def walk(self, root: str | Path, visitor: Visitor) -> int:
        """Call ``visitor`` for each regular file under ``root``; return failure count.

        Raises OSError if ``root`` itself cannot be listed.
        """
        root = Path(root)
        # os.walk swallows a failure on the root into onerror; check it up front
        with os.scandir(root):
            pass

        failed = 0
        # (st_dev, st_ino) of every directory from root down to each pending dirpath
        ancestry = {os.fspath(root): frozenset([_dir_key(root)])}

        def _onerror(err: OSError) -> None:
            nonlocal failed
            failed += 1
            self._report(Path(err.filename or root), err)

        for dirpath, dirnames, filenames in os.walk(root, onerror=_onerror,
                                                    followlinks=self.follow_links):
            dirnames.sort()
            if self.follow_links:
                chain = ancestry.pop(dirpath, frozenset())
                keep = []
                for d in dirnames:
                    sub = os.path.join(dirpath, d)
                    try:
                        key = _dir_key(sub)
                    except OSError as e:
                        failed += 1
                        self._report(Path(sub), e)
                        continue
                    if key in chain:
                        # link back to an ancestor; descending would never end
                        failed += 1
                        self._report(Path(sub), OSError(errno.ELOOP, "File system loop detected", sub))
                        continue
                    ancestry[sub] = chain | {key}
                    keep.append(d)
                dirnames[:] = keep
            else:
                # a symlinked dir shows up in dirnames; never descend or report it
                dirnames[:] = [d for d in dirnames if not os.path.islink(os.path.join(dirpath, d))]
            for name in sorted(filenames):
                p = Path(dirpath, name)
                try:
                    regular = is_regular_file(p, self.follow_links)
                except OSError as e:
                    failed += 1
                    self._report(p, e)
                    continue
                if regular:
                    visitor(p)
        return failed

    def _report(self, path: Path, err: OSError) -> None:
        if self.on_failure:
            self.on_failure(path, err)


def _dir_key(p: str | Path) -> tuple[int, int]:
    st = os.stat(p)
    return st.st_dev, st.st_ino
