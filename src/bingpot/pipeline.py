from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import requests

from .archive import ArchiveClient
from .config import DEFAULT_CONFIG, WALLPAPER_FILENAME, ArchiveConfig
from .dates import day_offsets, local_today
from .errors import BingpotError
from .images import ImageFetcher, write_jpeg

logger = logging.getLogger("bingpot")


def _save_offset(
    offset: int,
    filename: str,
    client: ArchiveClient,
    fetcher: ImageFetcher,
    config: ArchiveConfig,
) -> str:
    """Run one offset through resolve -> fetch -> write."""
    try:
        record = client.fetch_record(offset)
        url = client.resolve_url(record)
        logger.debug("idx=%s: url resolved %s", offset, url)
        img = fetcher.fetch_image(url)
        logger.debug("idx=%s: image fetched, shape=%s", offset, img.shape)
        path = write_jpeg(img, Path(filename), quality=config.jpeg_quality)
    except BingpotError as e:
        if e.offset is None:
            e.offset = offset
        raise
    logger.info("Saved %s: %s (%s)", path, record.title or "untitled", record.copyright or "no copyright")
    return str(path)


def save_images_by_offset(
    offsets: Iterable[int],
    session: Optional[requests.Session] = None,
    config: Optional[ArchiveConfig] = None,
) -> Dict[int, str]:
    """
    Download the archive image for each offset and write ``<offset>.jpg`` to
    the working directory.

    Offsets are processed in order. The first failure is raised with its
    ``offset`` set and the remaining offsets are not attempted.

    Returns
    -------
    dict: {offset: jpg_path}
    """
    config = config or DEFAULT_CONFIG
    out: Dict[int, str] = {}

    scope = nullcontext(session) if session is not None else requests.Session()
    with scope as s:
        client = ArchiveClient(session=s, config=config)
        fetcher = ImageFetcher(session=s, config=config)
        for offset in offsets:
            out[offset] = _save_offset(offset, f"{offset}.jpg", client, fetcher, config)

    return out


def get_images(
    dates: List[date],
    today: Optional[date] = None,
    session: Optional[requests.Session] = None,
    config: Optional[ArchiveConfig] = None,
) -> Dict[int, str]:
    """
    Download the archive image for each calendar date.

    ``today`` defaults to the local date, read once for the whole batch.
    Files are named after the day offset, e.g. a date eight days ago is
    written to ``8.jpg``.
    """
    if today is None:
        today = local_today()
    offsets = day_offsets(dates, today)
    for d, offset in zip(dates, offsets):
        logger.debug("%s: offset computed idx=%s", d.isoformat(), offset)
    return save_images_by_offset(offsets, session=session, config=config)


def save_wallpaper(
    session: Optional[requests.Session] = None,
    config: Optional[ArchiveConfig] = None,
) -> str:
    """Download today's image and write it to ``wallpaper.jpg``."""
    config = config or DEFAULT_CONFIG
    scope = nullcontext(session) if session is not None else requests.Session()
    with scope as s:
        client = ArchiveClient(session=s, config=config)
        fetcher = ImageFetcher(session=s, config=config)
        return _save_offset(0, WALLPAPER_FILENAME, client, fetcher, config)
