import sys

from colorama import Fore, Style, init

init(autoreset=True)


def log_info(message):
    print(f"{Fore.CYAN}[INFO]{Fore.WHITE} {message}")


def log_warning(message):
    """Log a non-fatal warning in yellow."""
    print(f"{Fore.YELLOW}[WARN]{Fore.WHITE} {message}")


def log_error(message):
    """Log an error in red. The caller decides whether to exit."""
    print(f"{Fore.RED}[ERROR]{Fore.WHITE} {message}", file=sys.stderr)


def log_fatal_error(message):
    """Log a fatal error in red and exit immediately."""
    log_error(message)
    sys.exit(1)


def bright_text(text):
    """Returns the text formatted in bright style."""
    return f"{Style.BRIGHT}{Fore.WHITE}{text}{Style.RESET_ALL}"


def bright_magenta_text(text):
    """Returns the text formatted in bright style."""
    return f"{Style.BRIGHT}{Fore.MAGENTA}{text}{Style.RESET_ALL}"


def yellow_text(text):
    return f"{Fore.YELLOW}{text}{Style.RESET_ALL}"


def green_text(text):
    return f"{Fore.GREEN}{text}{Style.RESET_ALL}"


def cyan_text(text):
    return f"{Fore.CYAN}{text}{Style.RESET_ALL}"


def blue_text(text):
    return f"{Fore.BLUE}{text}{Style.RESET_ALL}"


def human_size(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f"{num_bytes} B"
    return f"{num_bytes / 1024:.1f} KiB"


def log_stage(stage_name: str):
    print(f"\n{bright_text('==')} {bright_magenta_text(stage_name)}")


def log_library_selected(title, key, movie_count=None):
    suffix = f" ({movie_count} movies)" if movie_count is not None else ""
    print(f"Using library {bright_magenta_text(title)} (section {bright_text(key)}){suffix}")


def log_poster_downloaded(title: str, quality: int, size: int, attempts: int):
    """Print a formatted success message when a poster is downloaded."""
    retries = f", {attempts} attempts" if attempts > 1 else ""
    print(
        f"{cyan_text('poster')}: {bright_text(title)} "
        f"-- quality {yellow_text(quality)}, {human_size(size)}{retries}"
    )


def log_oversized_poster(title: str, size: int, budget: int):
    log_warning(
        f"Poster for '{title}' is still {human_size(size)} after the last attempt "
        f"(budget {human_size(budget)}); keeping it"
    )


def log_skipped_metadata(reason: str):
    log_warning(f"Skipping malformed movie entry from Plex: {reason}")


def log_duplicate_movie(movie_id: str, title: str):
    log_warning(f"Duplicate rating key {bright_text(movie_id)} for '{title}'; keeping the first")


def log_file_written(label: str, path: str):
    print(f"{green_text('wrote')} {label}: {blue_text(path)}")


def log_summary(report):
    """Prints a summary of a finished sync run."""
    elapsed = (report.finished_at - report.started_at).total_seconds()
    print(
        f"\n{bright_text('Sync Summary for Library:')} {bright_magenta_text(report.section.title)}"
        f"\n==============================================================="
    )
    print(f"Movies written:     {bright_text(len(report.movies))}")
    print(f"Posters downloaded: {bright_text(len(report.posters))}")
    oversized = sum(1 for poster in report.posters if poster.oversized)
    if oversized:
        print(f"Posters over budget: {yellow_text(oversized)}")
    print(f"Manifest:           {blue_text(report.manifest_path)}")
    print(f"Poster index:       {blue_text(report.index_path)}")
    print(f"Finished in {elapsed:.1f}s\n")


def log_available_libraries(libraries):
    """Print a formatted list of available Plex libraries."""
    print(
        f"\n\n{bright_text('Available Plex Libraries:')}"
        f"\n{bright_text('===============================================================')}"
    )

    for section in libraries:
        print(
            f"{bright_magenta_text(section.title):<40}"
            f"type: {yellow_text(section.type):<20}"
            f"library: {bright_text(section.key)}"
        )
    print("\n")
