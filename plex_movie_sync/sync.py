"""
One sync run, start to finish:

    section discovery -> movie listing -> mapping -> poster downloads
    -> manifest write -> asset index

Metadata calls run one after another. Poster downloads run on a bounded thread
pool and form an all-or-nothing barrier: if any download fails the run stops
and movies.json is left exactly as it was.
"""

import json
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from enum import Enum
from typing import List, NamedTuple

from .artwork import PosterResult, download_poster
from .asset_index import render_asset_index
from .config import SyncConfig
from .errors import SyncFailed
from .file_utils import write_text_atomic
from .log_utils import (
    log_duplicate_movie,
    log_file_written,
    log_info,
    log_library_selected,
    log_stage,
)
from .metadata import MovieRecord, map_movie
from .plex_api import Section, find_movie_section, list_movies, list_sections


class SyncStage(Enum):
    INIT = "init"
    SECTION_DISCOVERY = "section discovery"
    MOVIE_LISTING = "movie listing"
    MAPPING = "mapping"
    POSTER_DOWNLOAD = "poster download"
    MANIFEST_WRITE = "manifest write"
    ASSET_INDEX = "asset index generation"
    DONE = "done"


class SyncReport(NamedTuple):
    section: Section
    movies: List[MovieRecord]
    posters: List[PosterResult]
    manifest_path: str
    index_path: str
    started_at: datetime
    finished_at: datetime


def utc_now() -> datetime:
    """Current UTC time at the millisecond precision lastUpdated is written with."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def iso_timestamp(moment: datetime) -> str:
    """2024-05-01T12:00:00.000Z, the format the site's JavaScript produces and expects."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def poster_file(config: SyncConfig, movie_id: str) -> str:
    return os.path.join(config.posters_dir, f"{movie_id}.jpg")


def served_thumb(config: SyncConfig, movie_id: str) -> str:
    return f"{config.base_path}{config.posters_url.rstrip('/')}/{movie_id}.jpg"


def map_unique(raw_movies: List[dict]) -> List[MovieRecord]:
    """Map raw movies in server order, keeping the first record for each rating key."""
    movies = []
    seen = set()
    for raw in raw_movies:
        movie = map_movie(raw)
        if movie.id in seen:
            log_duplicate_movie(movie.id, movie.title)
            continue
        seen.add(movie.id)
        movies.append(movie)
    return movies


def download_all(config: SyncConfig, movies: List[MovieRecord]) -> List[PosterResult]:
    """
    Download every poster on a pool of config.max_workers threads.

    The first failure cancels downloads that have not started yet and is re-raised.
    Results come back in the same order as movies.
    """
    results = {}
    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        futures = {
            executor.submit(download_poster, config, movie, poster_file(config, movie.id)): movie
            for movie in movies
        }
        try:
            for future in as_completed(futures):
                results[futures[future].id] = future.result()
        except Exception:
            executor.shutdown(wait=False, cancel_futures=True)
            raise

    return [results[movie.id] for movie in movies]


def build_manifest(movies: List[MovieRecord], last_updated: datetime) -> dict:
    return {
        "lastUpdated": iso_timestamp(last_updated),
        "movies": [movie.to_dict() for movie in movies],
    }


def render_manifest(manifest: dict) -> str:
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


def run_sync(config: SyncConfig) -> SyncReport:
    """Run every stage in order. Any failure is raised as SyncFailed naming the stage."""
    started_at = utc_now()
    stage = SyncStage.INIT

    try:
        stage = SyncStage.SECTION_DISCOVERY
        log_stage("Finding movie library")
        section = find_movie_section(list_sections(config), config.library_title)
        log_library_selected(section.title, section.key)

        stage = SyncStage.MOVIE_LISTING
        log_stage("Listing movies")
        raw_movies = list_movies(config, section.key)
        log_info(f"Plex returned {len(raw_movies)} movies")

        stage = SyncStage.MAPPING
        movies = map_unique(raw_movies)

        stage = SyncStage.POSTER_DOWNLOAD
        log_stage(f"Downloading {len(movies)} posters ({config.max_workers} at a time)")
        posters = download_all(config, movies)
        for movie in movies:
            movie.thumb = served_thumb(config, movie.id)

        manifest_text = render_manifest(build_manifest(movies, utc_now()))
        index_text = render_asset_index(
            [(poster.movie_id, poster.path) for poster in posters], config.index_path
        )

        stage = SyncStage.MANIFEST_WRITE
        log_stage("Writing manifest")
        write_text_atomic(config.manifest_path, manifest_text)
        log_file_written("manifest", config.manifest_path)

        stage = SyncStage.ASSET_INDEX
        write_text_atomic(config.index_path, index_text)
        log_file_written("poster index", config.index_path)
    except Exception as e:
        raise SyncFailed(stage, e) from e

    return SyncReport(
        section=section,
        movies=movies,
        posters=posters,
        manifest_path=config.manifest_path,
        index_path=config.index_path,
        started_at=started_at,
        finished_at=utc_now(),
    )
