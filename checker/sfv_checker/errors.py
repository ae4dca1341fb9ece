from __future__ import annotations

EXIT_OK = 0
EXIT_BAD_TARGET = 1
EXIT_TARGET_IS_DIR = 2
EXIT_GLOB_FAILED = 3
EXIT_INVALID_SOURCE = 4
EXIT_WRITE_FAILED = 5


class FatalRunError(Exception):
    """Aborts the whole invocation; ``exit_code`` becomes the process status."""

    def __init__(self, message: str, exit_code: int):
        super().__init__(message)
        self.exit_code = exit_code
