from .args import parse_args
from .config import load_config, load_environment
from .errors import ConfigMissing, PlexSyncError, SyncFailed
from .log_utils import log_error, log_fatal_error, log_summary
from .plex_api import list_plex_libraries
from .sync import run_sync


def main_logic(config):
    try:
        report = run_sync(config)
    except SyncFailed as e:
        log_fatal_error(f"Sync failed during {e.stage.value}: {e.cause}")
    else:
        log_summary(report)


def main(argv=None):
    args = parse_args(argv)
    load_environment()

    try:
        config = load_config(args)
    except ConfigMissing as e:
        log_error(str(e))
        log_fatal_error("Please set them in your environment or .env file.")

    if args.list_libraries:
        try:
            list_plex_libraries(config)
        except PlexSyncError as e:
            log_fatal_error(f"Could not list libraries at {config.server_url}: {e}")
        return

    main_logic(config)


if __name__ == "__main__":
    main()
