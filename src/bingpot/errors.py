"""Exceptions raised by bingpot.

Every failure in the download pipeline is one of the subclasses of
:class:`BingpotError`. Callers that only care whether a batch succeeded can
catch the base class; ``kind`` names the failure for reporting.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class BingpotError(Exception):
    """Base class for all pipeline failures."""

    kind = "error"

    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.offset = offset

    def __str__(self) -> str:
        if self.offset is None:
            return self.message
        return f"{self.message} (offset {self.offset})"


class TransportError(BingpotError):
    """DNS, connection, TLS or timeout failure talking to a remote host."""

    kind = "transport"

    def __init__(self, url: str, cause: BaseException, offset: Optional[int] = None):
        super().__init__(f"request to {url} failed: {cause}", offset=offset)
        self.url = url
        self.cause = cause


class ProtocolError(BingpotError):
    """The server answered with a non-success HTTP status."""

    kind = "protocol"

    def __init__(self, status: int, url: str, offset: Optional[int] = None):
        super().__init__(f"server returned HTTP {status} for {url}", offset=offset)
        self.status = status
        self.url = url


class DecodeError(BingpotError):
    """A response body could not be parsed as archive JSON or as an image."""

    kind = "decode"


class NotFoundError(BingpotError):
    """The archive has no record for the requested offset."""

    kind = "not_found"

    def __init__(self, offset: int, reason: str = "archive returned no image record"):
        super().__init__(reason, offset=offset)


class FilesystemError(BingpotError):
    """The output file could not be created or written."""

    kind = "filesystem"

    def __init__(self, path: Union[str, Path], cause: BaseException, offset: Optional[int] = None):
        super().__init__(f"could not write {path}: {cause}", offset=offset)
        self.path = Path(path)
        self.cause = cause


__all__ = [
    "BingpotError",
    "DecodeError",
    "FilesystemError",
    "NotFoundError",
    "ProtocolError",
    "TransportError",
]
