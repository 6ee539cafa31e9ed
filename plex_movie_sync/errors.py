class PlexSyncError(Exception):
    """Base class for every failure that aborts a sync run."""


class ConfigMissing(PlexSyncError):
    def __init__(self, names):
        self.names = list(names)
        super().__init__(f"Missing environment variable(s): {', '.join(self.names)}")


class ConnectionFailure(PlexSyncError):
    """The Plex server could not be reached."""


class Timeout(PlexSyncError):
    """A request to the Plex server took longer than its timeout."""


class UpstreamError(PlexSyncError):
    """Plex answered with a non-2xx status or a body we could not read."""

    def __init__(self, status_code, body, url=None):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"Plex returned HTTP {status_code}: {body[:200]}")


class NoMatchingLibrary(PlexSyncError):
    pass


class WriteFailure(PlexSyncError):
    def __init__(self, path, cause):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not write {path}: {cause}")


class DownloadFailure(PlexSyncError):
    """A poster download failed; names the movie so the report can point at it."""

    def __init__(self, movie_id, title, cause):
        self.movie_id = movie_id
        self.title = title
        self.cause = cause
        super().__init__(f"Poster download failed for '{title}' (id {movie_id}): {cause}")


class SyncFailed(PlexSyncError):
    def __init__(self, stage, cause):
        self.stage = stage
        self.cause = cause
        super().__init__(f"Sync failed during {stage.value}: {cause}")
