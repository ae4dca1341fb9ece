"""Pytest bootstrap for local source imports.

The package lives under ``checker/`` rather than the repository root. Ensure
``import sfv_checker`` resolves to the local sources when not installed.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path


SOURCE_ROOT = Path(__file__).resolve().parent.parent / "checker"
SOURCE_ROOT_STR = str(SOURCE_ROOT)

if SOURCE_ROOT_STR not in sys.path:
    sys.path.insert(0, SOURCE_ROOT_STR)

# progress bars only add noise to captured output
os.environ.setdefault("SFV_TQDM", "1")
