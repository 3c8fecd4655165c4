"""
bingpot: download Bing "image of the day" archive pictures and save them as JPEG.

Public API:
- get_images
- save_images_by_offset
- save_wallpaper
- get_image_url
- day_offsets
"""

from importlib.metadata import PackageNotFoundError, version

from .archive import ArchiveClient, ArchiveRecord, get_image_url
from .dates import day_offsets
from .errors import (
    BingpotError,
    DecodeError,
    FilesystemError,
    NotFoundError,
    ProtocolError,
    TransportError,
)
from .pipeline import get_images, save_images_by_offset, save_wallpaper

try:  # pragma: no cover - importlib.metadata uses environment
    __version__ = version("bingpot")
except PackageNotFoundError:  # pragma: no cover - during local editing
    __version__ = "0.0.0"

__all__ = [
    "ArchiveClient",
    "ArchiveRecord",
    "BingpotError",
    "DecodeError",
    "FilesystemError",
    "NotFoundError",
    "ProtocolError",
    "TransportError",
    "__version__",
    "day_offsets",
    "get_image_url",
    "get_images",
    "save_images_by_offset",
    "save_wallpaper",
]
