import argparse

from .config import (
    DEFAULT_DATA_DIR,
    DEFAULT_IMAGE_TIMEOUT,
    DEFAULT_INDEX_PATH,
    DEFAULT_MAX_WORKERS,
    DEFAULT_POSTERS_DIR,
    DEFAULT_POSTERS_URL,
    DEFAULT_TIMEOUT,
)


def positive_int(value):
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="""
    Pull the movie library from a Plex server and bake it into a static bundle:
    movies.json, one poster per movie, and a generated poster import index.

    Reads PLEX_SERVER_URL and PLEX_TOKEN from the environment (or a .env / .env.local file).

    Use --list-libraries to view available libraries before syncing.

    Examples:
    python sync_movies.py --list-libraries
    python sync_movies.py
    python sync_movies.py --library "Movies" --max-workers 4
    python sync_movies.py --any-library --data-dir public/data --posters-dir public/posters
    """,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--library",
        default=None,
        help="Title of the Plex movie library to sync (default: $PLEX_LIBRARY or 'Films').",
    )

    parser.add_argument(
        "--any-library",
        action="store_true",
        default=False,
        help="Use the first movie library on the server instead of matching a title.",
    )

    parser.add_argument(
        "--data-dir",
        default=DEFAULT_DATA_DIR,
        help=f"Directory movies.json is written to (default: {DEFAULT_DATA_DIR}).",
    )

    parser.add_argument(
        "--posters-dir",
        default=DEFAULT_POSTERS_DIR,
        help=f"Directory poster images are written to (default: {DEFAULT_POSTERS_DIR}).",
    )

    parser.add_argument(
        "--index-path",
        default=DEFAULT_INDEX_PATH,
        help=f"Generated poster import index (default: {DEFAULT_INDEX_PATH}).",
    )

    parser.add_argument(
        "--posters-url",
        default=DEFAULT_POSTERS_URL,
        help=f"URL path posters are served from, after $SITE_BASE_PATH (default: {DEFAULT_POSTERS_URL}).",
    )

    parser.add_argument(
        "--max-workers",
        type=positive_int,
        default=DEFAULT_MAX_WORKERS,
        help=f"Maximum concurrent poster downloads (default: {DEFAULT_MAX_WORKERS}).",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Timeout in seconds for metadata requests (default: {DEFAULT_TIMEOUT:g}).",
    )

    parser.add_argument(
        "--image-timeout",
        type=float,
        default=DEFAULT_IMAGE_TIMEOUT,
        help=f"Timeout in seconds for each poster request (default: {DEFAULT_IMAGE_TIMEOUT:g}).",
    )

    parser.add_argument(
        "--list-libraries",
        action="store_true",
        default=False,
        help="List available plex libraries and exit.",
    )

    return parser.parse_args(argv)
