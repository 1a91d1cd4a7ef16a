"""
Error taxonomy for SiteMirror.

Every error names the URL or file it concerns and the underlying cause, so
that a single log line is enough to diagnose a failed page.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

__all__ = ("MirrorError", "MalformedURL", "FetchError", "ParseError", "PersistenceError")


class MirrorError(Exception):
    """Base class for all mirroring failures."""


class MalformedURL(MirrorError):
    """A URL or URL reference cannot be parsed."""

    def __init__(self, ref: str, reason: str = "cannot be parsed as a URL") -> None:
        self.ref = ref
        self.reason = reason
        super().__init__(f"Malformed URL {ref!r}: {reason}")


class FetchError(MirrorError):
    """An HTTP request failed or returned an unacceptable status."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"Failed to fetch {url}: {reason}")


class ParseError(MirrorError):
    """HTML could not be parsed into a document."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to parse HTML of {url}: {reason}")


class PersistenceError(MirrorError):
    """A directory could not be created or a file could not be written."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")
