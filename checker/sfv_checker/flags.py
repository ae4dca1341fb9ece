import os, sys

_DEFAULT_CHUNK = 64 * 1024


def progress_disabled() -> bool:
    """
    Whether per-file percent bars are hidden (default: only when stderr is unusable).
    Env override: SFV_TQDM=0 forces enable, =1 forces disable.
    """
    env = os.environ.get("SFV_TQDM")
    if env == "0":
        return False
    if env == "1":
        return True
    f = getattr(sys, "stderr", None)
    return not (f is not None and hasattr(f, "write"))


def chunk_size() -> int:
    """Read size for checksumming; SFV_CHUNK_SIZE overrides (bytes)."""
    raw = os.environ.get("SFV_CHUNK_SIZE", "")
    try:
        n = int(raw)
    except ValueError:
        return _DEFAULT_CHUNK
    return n if n > 0 else _DEFAULT_CHUNK
