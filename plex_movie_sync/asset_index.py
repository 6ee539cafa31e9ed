import json
import re
from typing import Dict, Iterable, Tuple

from .file_utils import relative_import_path

HEADER = "// Generated by plex-movie-sync. Do not edit."


def import_name(movie_id: str, taken: set) -> str:
    base = "poster_" + re.sub(r"\W", "_", movie_id)
    name = base
    n = 2
    while name in taken:
        name = f"{base}_{n}"
        n += 1
    taken.add(name)
    return name


def render_asset_index(posters: Iterable[Tuple[str, str]], index_path: str) -> str:
    """
    Render an ES module that imports every poster and exports {movie id: asset}, so the
    site bundler picks the images up at build time.

    posters is a sequence of (movie_id, poster_file_path) in manifest order.
    """
    taken = set()
    imports = []
    entries: Dict[str, str] = {}
    for movie_id, path in posters:
        name = import_name(movie_id, taken)
        imports.append(f"import {name} from {json.dumps(relative_import_path(path, index_path))};")
        entries[movie_id] = name

    lines = [HEADER, *imports, "", "const posters = {"]
    lines.extend(f"  {json.dumps(movie_id)}: {name}," for movie_id, name in entries.items())
    lines.extend(["};", "", "export default posters;", ""])
    return "\n".join(lines)
