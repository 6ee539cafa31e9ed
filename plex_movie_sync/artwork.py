from typing import NamedTuple

from .config import SyncConfig
from .errors import ConnectionFailure, DownloadFailure, Timeout, UpstreamError, WriteFailure
from .file_utils import write_bytes
from .log_utils import log_oversized_poster, log_poster_downloaded
from .metadata import MovieRecord, poster_path
from .plex_api import fetch_image_bytes

POSTER_WIDTH = 400
POSTER_HEIGHT = 600
START_QUALITY = 90
QUALITY_STEP = 20
MIN_QUALITY = 40
MAX_ATTEMPTS = 3
SIZE_BUDGET = 500 * 1024


class PosterResult(NamedTuple):
    movie_id: str
    path: str
    quality: int
    size: int
    attempts: int

    @property
    def oversized(self) -> bool:
        return self.size > SIZE_BUDGET


def next_quality(quality: int) -> int:
    return max(quality - QUALITY_STEP, MIN_QUALITY)


def fetch_within_budget(config: SyncConfig, url: str):
    """
    Fetch a poster, lowering the requested quality until it fits SIZE_BUDGET.

    Only the size budget drives retries. Transport errors propagate on the first attempt.
    After MAX_ATTEMPTS the last (oversized) image is returned rather than failing.
    Returns (data, quality, attempts).
    """
    quality = START_QUALITY
    attempt = 0
    while True:
        attempt += 1
        data = fetch_image_bytes(
            config,
            url,
            {"width": POSTER_WIDTH, "height": POSTER_HEIGHT, "quality": quality},
        )
        if len(data) <= SIZE_BUDGET or attempt >= MAX_ATTEMPTS:
            return data, quality, attempt
        quality = next_quality(quality)


def download_poster(config: SyncConfig, movie: MovieRecord, output_path: str) -> PosterResult:
    """Download the poster for one movie to output_path."""
    try:
        data, quality, attempts = fetch_within_budget(config, poster_path(movie))
        write_bytes(output_path, data)
    except (ConnectionFailure, Timeout, UpstreamError, WriteFailure) as e:
        raise DownloadFailure(movie.id, movie.title, e) from e

    result = PosterResult(movie.id, output_path, quality, len(data), attempts)
    if result.oversized:
        log_oversized_poster(movie.title, result.size, SIZE_BUDGET)
    log_poster_downloaded(movie.title, quality, result.size, attempts)
    return result
