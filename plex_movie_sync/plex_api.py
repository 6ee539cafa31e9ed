from typing import List, NamedTuple, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests

from . import __version__
from .config import SyncConfig
from .errors import ConnectionFailure, NoMatchingLibrary, Timeout, UpstreamError
from .log_utils import log_available_libraries, log_skipped_metadata

TOKEN_PARAM = "X-Plex-Token"

PLEX_HEADERS = {
    "X-Plex-Client-Identifier": "plex-movie-sync",
    "X-Plex-Platform": "Python",
    "X-Plex-Platform-Version": "3",
    "X-Plex-Product": "Plex Movie Sync",
    "X-Plex-Version": __version__,
}


class Section(NamedTuple):
    key: str
    type: str
    title: str


def strip_token(url: str) -> str:
    """Remove any X-Plex-Token already present in a url's query string."""
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != TOKEN_PARAM]
    return urlunsplit(parts._replace(query=urlencode(query)))


def get_plex_response(
    config: SyncConfig,
    url: str,
    params: dict = None,
    timeout: float = None,
    accept: str = "application/json",
) -> requests.Response:
    """GET wrapper for Plex API with token injection and error translation."""
    if url.startswith("/"):
        url = f"{config.server_url}{url}"
    params = dict(params or {})
    params[TOKEN_PARAM] = config.token
    headers = dict(PLEX_HEADERS, Accept=accept)
    if timeout is None:
        timeout = config.timeout

    try:
        response = requests.get(url, params=params, headers=headers, timeout=timeout)
    except requests.Timeout as e:
        raise Timeout(f"Request to {url} timed out after {timeout:g}s") from e
    except requests.RequestException as e:
        raise ConnectionFailure(f"Could not connect to Plex at {config.server_url}: {e}") from e

    if not response.ok:
        raise UpstreamError(response.status_code, response.text, url)
    return response


def get_plex_json(config: SyncConfig, endpoint: str) -> dict:
    response = get_plex_response(config, endpoint)
    try:
        payload = response.json()
    except ValueError as e:
        raise UpstreamError(response.status_code, response.text, endpoint) from e
    if not isinstance(payload, dict):
        raise UpstreamError(response.status_code, response.text, endpoint)
    return payload.get("MediaContainer") or {}


def list_sections(config: SyncConfig) -> List[Section]:
    """Returns every library section on the server as Section(key, type, title)."""
    container = get_plex_json(config, "/library/sections")
    sections = []
    for directory in container.get("Directory") or []:
        if not isinstance(directory, dict) or directory.get("key") is None:
            continue
        sections.append(
            Section(
                key=str(directory["key"]),
                type=directory.get("type", ""),
                title=directory.get("title", ""),
            )
        )
    return sections


def find_movie_section(sections: List[Section], title: Optional[str] = None) -> Section:
    """Pick the movie section to sync, matching the configured title exactly when one is set."""
    movie_sections = [s for s in sections if s.type == "movie"]
    if title is not None:
        movie_sections = [s for s in movie_sections if s.title == title]

    if not movie_sections:
        available = ", ".join(f"'{s.title}' ({s.type})" for s in sections) or "none"
        wanted = f"movie library titled '{title}'" if title is not None else "movie library"
        raise NoMatchingLibrary(f"No {wanted} found on the server. Available: {available}")
    return movie_sections[0]


def list_movies(config: SyncConfig, section_key: str) -> List[dict]:
    """Fetch all movie metadata objects from a Plex library section."""
    container = get_plex_json(config, f"/library/sections/{section_key}/all")
    movies = []
    for entry in container.get("Metadata") or []:
        if not isinstance(entry, dict):
            log_skipped_metadata(f"expected an object, got {type(entry).__name__}")
            continue
        if entry.get("ratingKey") in (None, ""):
            log_skipped_metadata(f"'{entry.get('title', 'Unknown Title')}' has no ratingKey")
            continue
        movies.append(entry)
    return movies


def fetch_image_bytes(config: SyncConfig, url: str, size_hints: dict) -> bytes:
    """
    Download raw image bytes. The token is always supplied here, so any token an upstream
    url already carries is dropped first.
    """
    response = get_plex_response(
        config,
        strip_token(url),
        params=size_hints,
        timeout=config.image_timeout,
        accept="image/jpeg,image/*",
    )
    return response.content


def list_plex_libraries(config: SyncConfig):
    """Prints a formatted list of Plex libraries (title, type, and ID), sorted by ID."""
    sections = list_sections(config)
    sections.sort(key=lambda s: s.key.zfill(10))
    log_available_libraries(sections)
