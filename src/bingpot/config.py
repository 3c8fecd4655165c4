"""Endpoints and defaults for talking to the Bing image archive."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

ARCHIVE_URL = "https://www.bing.com/HPImageArchive.aspx"
IMAGE_ORIGIN = "https://bing.com"
WALLPAPER_FILENAME = "wallpaper.jpg"
JPEG_QUALITY = 95


@dataclass(frozen=True)
class ArchiveConfig:
    """Settings shared by the archive client, image fetcher and pipeline."""

    archive_url: str = ARCHIVE_URL
    image_origin: str = IMAGE_ORIGIN
    timeout: Optional[float] = None  # seconds; None blocks until the server answers
    jpeg_quality: int = JPEG_QUALITY


DEFAULT_CONFIG = ArchiveConfig()
