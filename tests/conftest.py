import imageio.v3 as iio
import numpy as np
import pytest
import requests

from bingpot.config import ARCHIVE_URL, IMAGE_ORIGIN


class FakeResponse:
    def __init__(self, status_code=200, content=b"", json_data=None):
        self.status_code = status_code
        self.content = content
        self._json = json_data

    def json(self):
        if self._json is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._json


class FakeSession:
    """Stand-in for requests.Session that answers from a route table.

    Routes map a URL to either a FakeResponse, an exception instance to raise,
    or a callable taking the query params and returning one of those.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        handler = self.routes.get(url)
        if handler is None:
            return FakeResponse(status_code=404)
        if callable(handler):
            handler = handler(params)
        if isinstance(handler, BaseException):
            raise handler
        return handler

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def make_png(value=0, shape=(8, 12, 3)):
    return iio.imwrite("<bytes>", np.full(shape, value, dtype=np.uint8), extension=".png")


def record(url, **extra):
    rec = {
        "startdate": "20261010",
        "fullstartdate": "202610100700",
        "enddate": "20261011",
        "url": url,
        "urlbase": url.split("_1920x1080")[0],
        "copyright": "Example photographer",
        "copyrightlink": "https://www.bing.com/search?q=example",
        "title": "Example",
        "quiz": "/search?q=Bing+homepage+quiz",
        "wp": True,
        "hsh": "abc123",
        "drk": 1,
        "top": 1,
        "bot": 1,
        "hs": [],
    }
    rec.update(extra)
    return rec


def archive_body(*records):
    return {
        "images": list(records),
        "tooltips": {
            "loading": "Loading...",
            "previous": "Previous image",
            "next": "Next image",
            "walle": "This image is not available to download as wallpaper.",
            "walls": "Download this image.",
        },
    }


def image_path(idx):
    return f"/th?id=OHR.Day{idx}_EN-US000{idx}_1920x1080.jpg&rf=LaDigue_1920x1080.jpg&pid=hp"


@pytest.fixture
def fake_bing():
    """Build a FakeSession serving one distinct record and image per offset.

    ``statuses`` maps an offset to an HTTP status returned by the archive
    query instead of a record; ``empty`` lists offsets with no records.
    """

    def _build(offsets, statuses=None, empty=()):
        statuses = statuses or {}
        routes = {}

        def archive(params):
            idx = int(params["idx"])
            if idx in statuses:
                return FakeResponse(status_code=statuses[idx])
            if idx in empty:
                return FakeResponse(json_data=archive_body())
            if idx not in offsets:
                return FakeResponse(status_code=404)
            return FakeResponse(json_data=archive_body(record(image_path(idx), title=f"Day {idx}")))

        routes[ARCHIVE_URL] = archive
        for idx in offsets:
            routes[IMAGE_ORIGIN + image_path(idx)] = FakeResponse(content=make_png(value=idx * 10))
        return FakeSession(routes)

    return _build


@pytest.fixture
def connection_error():
    return requests.ConnectionError("Name or service not known")
