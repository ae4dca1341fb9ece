from __future__ import annotations
import io, sys
from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator

from tqdm import tqdm

from .flags import progress_disabled

# Factory handed to the pipelines: label -> context yielding on_progress(percent)
ProgressFactory = Callable[[str], ContextManager[Callable[[int], None]]]


def log(msg: str) -> None:
    """
    Diagnostics to stderr:
    - Prefer tqdm.write so an open bar is not torn.
    - Fallback to plain print, even if sys.stderr is None.
    """
    try:
        tqdm.write(msg, file=sys.stderr)
        return
    except Exception:
        pass
    if getattr(sys, "stderr", None) is not None:
        print(msg, file=sys.stderr)
    else:
        print(msg)


def echo(msg: str) -> None:
    """Results to stdout, interleaved safely with progress bars."""
    try:
        tqdm.write(msg, file=sys.stdout)
    except Exception:
        print(msg)


def _tqdm_file():
    """
    Return a file-like object for tqdm to write to.
    Progress goes to stderr so stdout keeps only results; a sink when there is none.
    """
    f = getattr(sys, "stderr", None)
    return f if (f is not None and hasattr(f, "write")) else io.StringIO()


@contextmanager
def percent_bar(label: str) -> Iterator[Callable[[int], None]]:
    """Transient 0-100% bar for one file; yields the on_progress callback."""
    with tqdm(total=100, desc=label, unit="%", leave=False,
              file=_tqdm_file(), disable=progress_disabled()) as bar:
        def _update(pct: int) -> None:
            bar.update(pct - bar.n)
        yield _update

