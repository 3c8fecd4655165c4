"""Download, decode and re-encode archive images."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import imageio.v3 as iio
import numpy as np
import requests

from .config import DEFAULT_CONFIG, JPEG_QUALITY, ArchiveConfig
from .errors import DecodeError, FilesystemError, ProtocolError, TransportError

logger = logging.getLogger("bingpot.images")


def decode_image(data: bytes) -> np.ndarray:
    """Decode image bytes into a numpy array using imageio.

    No extension hint is given, so imageio picks the format from the file
    signature. The archive serves JPEG most of the time but the URL suffix is
    not reliable. Only the first frame of an animated image is read.

    Raises
    ------
    DecodeError
        If the bytes are not a readable raster image.
    """
    if not data:
        raise DecodeError("image response body is empty")
    try:
        img = iio.imread(data, index=0)
    except Exception as e:
        raise DecodeError(f"Failed to decode image: {e}") from e
    arr = np.asarray(img)
    if arr.size == 0 or arr.ndim < 2:
        raise DecodeError(f"decoded image has unusable shape {arr.shape}")
    return arr


def _to_uint8(img: np.ndarray) -> np.ndarray:
    """Normalize an array to uint8 for JPEG output."""
    arr = np.asarray(img)

    if arr.dtype == np.uint8:
        return arr
    if arr.dtype == np.bool_:
        return arr.astype(np.uint8) * 255

    arr = arr.astype(np.float64, copy=False)
    mn = np.nanmin(arr)
    mx = np.nanmax(arr)
    if mx == mn:
        return np.zeros(arr.shape, dtype=np.uint8)

    arr = (arr - mn) / (mx - mn)
    return (255.0 * np.nan_to_num(arr)).astype(np.uint8)


def to_jpeg_array(img: np.ndarray) -> np.ndarray:
    """Reduce a decoded image to something JPEG can store.

    ``img`` is a single frame, either H x W or H x W x C. Alpha is dropped
    and the pixel type becomes uint8.
    """
    arr = np.asarray(img)
    if arr.ndim == 3:
        channels = arr.shape[-1]
        if channels == 4:
            arr = arr[..., :3]
        elif channels in (1, 2):
            arr = arr[..., 0]
        elif channels != 3:
            raise DecodeError(f"cannot store {channels}-channel image as JPEG")
    elif arr.ndim != 2:
        raise DecodeError(f"cannot store image of shape {arr.shape} as JPEG")
    return _to_uint8(arr)


def encode_jpeg(img: np.ndarray, quality: int = JPEG_QUALITY) -> bytes:
    arr = to_jpeg_array(img)
    try:
        return iio.imwrite("<bytes>", arr, extension=".jpg", quality=quality)
    except Exception as e:
        raise DecodeError(f"Failed to encode JPEG: {e}") from e


def write_jpeg(
    img: np.ndarray,
    path: Union[str, Path],
    quality: int = JPEG_QUALITY,
) -> Path:
    """Encode ``img`` as JPEG and write it to ``path``, replacing any existing file.

    The bytes go to a temporary file next to ``path`` that is renamed over it
    once complete, so a failed write leaves any previous file untouched.
    """
    path = Path(path)
    data = encode_jpeg(img, quality=quality)
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".part", dir=path.parent)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise FilesystemError(path, e) from e
    logger.debug("Wrote %d bytes to %s", len(data), path)
    return path


class ImageFetcher:
    """Download images over a (possibly shared) requests session."""

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

    def __enter__(self) -> "ImageFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch_bytes(self, url: str) -> bytes:
        """Download the raw body of ``url``; the Content-Type is ignored."""
        try:
            r = self.session.get(url, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise TransportError(url, e) from e
        if not 200 <= r.status_code < 300:
            raise ProtocolError(r.status_code, url)
        return r.content

    def fetch_image(self, url: str) -> np.ndarray:
        data = self.fetch_bytes(url)
        logger.debug("Downloaded %d bytes from %s", len(data), url)
        return decode_image(data)
