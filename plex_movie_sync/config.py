import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigMissing

DEFAULT_LIBRARY_TITLE = "Films"
DEFAULT_DATA_DIR = os.path.join("public", "data")
DEFAULT_POSTERS_DIR = os.path.join("public", "posters")
DEFAULT_INDEX_PATH = os.path.join("src", "generated", "posters.js")
DEFAULT_POSTERS_URL = "/posters"
DEFAULT_TIMEOUT = 5.0
DEFAULT_IMAGE_TIMEOUT = 15.0
DEFAULT_MAX_WORKERS = 8


@dataclass(frozen=True)
class SyncConfig:
    """Everything a sync run needs, threaded explicitly from main() into the client."""

    server_url: str
    token: str
    library_title: Optional[str] = DEFAULT_LIBRARY_TITLE
    base_path: str = ""
    data_dir: str = DEFAULT_DATA_DIR
    posters_dir: str = DEFAULT_POSTERS_DIR
    index_path: str = DEFAULT_INDEX_PATH
    posters_url: str = DEFAULT_POSTERS_URL
    timeout: float = DEFAULT_TIMEOUT
    image_timeout: float = DEFAULT_IMAGE_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS

    @property
    def manifest_path(self) -> str:
        return os.path.join(self.data_dir, "movies.json")


def load_environment():
    """Load .env.local, then .env, without overriding variables already set."""
    for filename in (".env.local", ".env"):
        if os.path.exists(filename):
            load_dotenv(filename, override=False)


def check_required_env(environ: Mapping[str, str]):
    """
    Checks that all required environment variables are set, and raises ConfigMissing naming
    every one that is absent.
    """
    missing = [name for name in ("PLEX_SERVER_URL", "PLEX_TOKEN") if not environ.get(name)]
    if missing:
        raise ConfigMissing(missing)


def load_config(args=None, environ: Optional[Mapping[str, str]] = None) -> SyncConfig:
    """Build a SyncConfig from the environment, with command line arguments taking precedence."""
    if environ is None:
        environ = os.environ
    check_required_env(environ)

    library_title = environ.get("PLEX_LIBRARY") or DEFAULT_LIBRARY_TITLE
    base_path = environ.get("SITE_BASE_PATH", "").rstrip("/")
    values = {}

    if args is not None:
        if args.library:
            library_title = args.library
        if args.any_library:
            library_title = None
        values = {
            "data_dir": args.data_dir,
            "posters_dir": args.posters_dir,
            "index_path": args.index_path,
            "posters_url": args.posters_url,
            "timeout": args.timeout,
            "image_timeout": args.image_timeout,
            "max_workers": args.max_workers,
        }

    return SyncConfig(
        server_url=environ["PLEX_SERVER_URL"].rstrip("/"),
        token=environ["PLEX_TOKEN"],
        library_title=library_title,
        base_path=base_path,
        **values,
    )
