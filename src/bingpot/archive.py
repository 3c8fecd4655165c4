from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import requests

from .config import DEFAULT_CONFIG, ArchiveConfig
from .errors import DecodeError, NotFoundError, ProtocolError, TransportError

logger = logging.getLogger("bingpot.archive")


@dataclass(frozen=True)
class ArchiveRecord:
    """One day's entry from ``HPImageArchive.aspx``.

    Only ``url`` is used to locate the image; the other fields are kept so a
    record can be written back out unchanged.
    """

    url: str
    urlbase: str = ""
    copyright: str = ""
    copyrightlink: str = ""
    title: str = ""
    startdate: str = ""
    fullstartdate: str = ""
    enddate: str = ""
    quiz: str = ""
    wp: bool = False
    hsh: str = ""
    drk: int = 0
    top: int = 0
    bot: int = 0
    hs: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArchiveRecord":
        if not isinstance(data, dict):
            raise DecodeError(f"image record must be an object, got {type(data).__name__}")
        url = data.get("url")
        if not isinstance(url, str) or not url.startswith("/"):
            raise DecodeError(f"image record has no usable 'url' field: {url!r}")
        known = {}
        for key, value in data.items():
            expected = _FIELD_TYPES.get(key)
            if expected is None:
                continue
            # bool is an int subclass; only wp may be a bool
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise DecodeError(
                    f"image record field {key!r} should be {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
            known[key] = value
        return cls(**known)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_FIELD_TYPES = {
    "url": str,
    "urlbase": str,
    "copyright": str,
    "copyrightlink": str,
    "title": str,
    "startdate": str,
    "fullstartdate": str,
    "enddate": str,
    "quiz": str,
    "wp": bool,
    "hsh": str,
    "drk": int,
    "top": int,
    "bot": int,
    "hs": list,
}


@dataclass(frozen=True)
class ArchiveResponse:
    """Top-level body of an archive query."""

    images: List[ArchiveRecord]
    tooltips: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Any) -> "ArchiveResponse":
        if not isinstance(data, dict):
            raise DecodeError("archive response is not a JSON object")
        images = data.get("images")
        if not isinstance(images, list):
            raise DecodeError("archive response has no 'images' list")
        tooltips = data.get("tooltips") or {}
        if not isinstance(tooltips, dict):
            raise DecodeError("archive response 'tooltips' is not an object")
        return cls(
            images=[ArchiveRecord.from_dict(item) for item in images],
            tooltips=dict(tooltips),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "images": [img.to_dict() for img in self.images],
            "tooltips": dict(self.tooltips),
        }


class ArchiveClient:
    """Query the Bing image archive one day at a time.

    A session passed in by the caller is left open; a session created here is
    closed by :meth:`close` (or on leaving a ``with`` block).
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        config: Optional[ArchiveConfig] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "ArchiveClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch_response(self, offset: int) -> ArchiveResponse:
        """Download and parse the archive entry ``offset`` days back.

        Raises
        ------
        NotFoundError
            For negative offsets; the archive only serves past days.
        TransportError
            If the request could not be completed.
        ProtocolError
            On a non-2xx status.
        DecodeError
            If the body is not archive JSON.
        """
        if offset < 0:
            raise NotFoundError(offset, "the archive has no images for future dates")

        url = self.config.archive_url
        params = {"format": "js", "idx": offset, "n": 1}
        logger.debug("Querying archive idx=%s", offset)
        try:
            r = self.session.get(url, params=params, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise TransportError(url, e, offset=offset) from e
        if not 200 <= r.status_code < 300:
            raise ProtocolError(r.status_code, url, offset=offset)
        try:
            data = r.json()
        except ValueError as e:
            raise DecodeError(f"archive response is not JSON: {e}", offset=offset) from e
        try:
            return ArchiveResponse.from_json(data)
        except DecodeError as e:
            e.offset = offset
            raise

    def fetch_record(self, offset: int) -> ArchiveRecord:
        """Return the single record for ``offset``."""
        response = self.fetch_response(offset)
        if not response.images:
            raise NotFoundError(offset)
        return response.images[0]

    def resolve_url(self, record: ArchiveRecord) -> str:
        """Join the image origin and the record's relative url."""
        return f"{self.config.image_origin}{record.url}"

    def get_image_url(self, offset: int) -> str:
        return self.resolve_url(self.fetch_record(offset))


def get_image_url(
    offset: int,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> str:
    """Return the full-resolution image URL for the day ``offset`` days ago.

    Parameters
    ----------
    offset
        Days before today; 0 is today's image.
    session
        Optional requests session to reuse.
    timeout
        Requests timeout in seconds. ``None`` waits indefinitely.
    """
    with ArchiveClient(session=session, config=ArchiveConfig(timeout=timeout)) as client:
        return client.get_image_url(offset)
