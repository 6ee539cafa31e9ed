import re
import threading
from urllib.parse import urlsplit

import pytest
import requests

from plex_movie_sync.config import SyncConfig


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, content=b"", text=None):
        self.status_code = status_code
        self._json = json_data
        self.content = content
        self.text = text if text is not None else ("" if json_data is None else str(json_data))

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json


def raw_movie(rating_key, title, **extra):
    movie = {
        "ratingKey": str(rating_key),
        "title": title,
        "year": 1999,
        "summary": f"About {title}",
        "thumb": f"/library/metadata/{rating_key}/thumb/1700000000",
        "duration": 7200000,
        "addedAt": 1600000000,
        "updatedAt": 1700000000,
    }
    movie.update(extra)
    return movie


class FakePlex:
    """Stands in for requests.get and answers like a Plex server would."""

    def __init__(self, sections=None, movies=None):
        self.sections = sections if sections is not None else [
            {"key": "1", "type": "movie", "title": "Films"},
            {"key": "2", "type": "show", "title": "TV Shows"},
        ]
        self.movies = movies if movies is not None else {}
        self.image_sizes = {}
        self.image_errors = {}
        self.calls = []
        self.lock = threading.Lock()

    def image_calls(self, movie_id=None):
        prefix = "/library/metadata/" + (f"{movie_id}/" if movie_id else "")
        return [(url, params) for url, params, _, _ in self.calls if urlsplit(url).path.startswith(prefix)]

    def get(self, url, params=None, headers=None, timeout=None):
        with self.lock:
            self.calls.append((url, dict(params or {}), dict(headers or {}), timeout))

        path = urlsplit(url).path
        if path == "/library/sections":
            return FakeResponse(json_data={"MediaContainer": {"Directory": self.sections}})

        match = re.fullmatch(r"/library/sections/(\w+)/all", path)
        if match:
            metadata = self.movies.get(match.group(1), [])
            return FakeResponse(json_data={"MediaContainer": {"Metadata": metadata}})

        match = re.match(r"/library/metadata/(\w+)/thumb", path)
        if match:
            movie_id = match.group(1)
            if movie_id in self.image_errors:
                error = self.image_errors[movie_id]
                if isinstance(error, Exception):
                    raise error
                return FakeResponse(status_code=error, text="poster failed")
            size = self.image_sizes.get(movie_id, 1024)
            return FakeResponse(content=b"\xff" * size)

        return FakeResponse(status_code=404, text="Not Found")


@pytest.fixture
def fake_plex(monkeypatch):
    plex = FakePlex()
    monkeypatch.setattr(requests, "get", plex.get)
    return plex


@pytest.fixture
def config(tmp_path):
    return SyncConfig(
        server_url="http://plex.local:32400",
        token="secret-token",
        data_dir=str(tmp_path / "public" / "data"),
        posters_dir=str(tmp_path / "public" / "posters"),
        index_path=str(tmp_path / "src" / "generated" / "posters.js"),
        max_workers=4,
    )
