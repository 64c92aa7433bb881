# src/jira2pdf/errors.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable


class Jira2PdfError(RuntimeError):
    """Base class for every fatal error of a run."""


class ConfigError(Jira2PdfError):
    pass


class FetchError(Jira2PdfError):
    pass


class AuthError(FetchError):
    pass


class WriteError(Jira2PdfError):
    def __init__(self, message: str, paths: Iterable[Path | str] = ()) -> None:
        super().__init__(message)
        self.paths = [Path(p) for p in paths]


__all__ = [
    "Jira2PdfError",
    "ConfigError",
    "FetchError",
    "AuthError",
    "WriteError",
]
