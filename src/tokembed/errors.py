"""Error types raised by tokembed."""

from __future__ import annotations

from pathlib import Path


class TokembedError(Exception):
    """Base class for tokembed failures."""


class ConfigurationError(TokembedError, ValueError):
    """Raised when a tokenizer definition or config file is missing or malformed."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class OutputWriteError(TokembedError, OSError):
    """Raised when the embedding output file cannot be written."""

    def __init__(self, message: str, path: str | Path) -> None:
        super().__init__(message)
        self.path = Path(path)


__all__ = ["ConfigurationError", "OutputWriteError", "TokembedError"]
