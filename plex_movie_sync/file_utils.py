import os
import tempfile

from .errors import WriteFailure


def ensure_parent_dir(path: str):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def write_bytes(path: str, data: bytes):
    """Write data to path, creating parent folders and overwriting any existing file."""
    try:
        ensure_parent_dir(path)
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise WriteFailure(path, e) from e


def write_text_atomic(path: str, text: str):
    """
    Replace the file at path with text in one step: the content goes to a temporary file in
    the same folder first, which is then renamed over the target. Readers see either the old
    file or the new one, never a partial write.
    """
    try:
        ensure_parent_dir(path)
        fd, tmp_path = tempfile.mkstemp(
            dir=os.path.dirname(path) or ".", prefix=f".{os.path.basename(path)}.", suffix=".tmp"
        )
    except OSError as e:
        raise WriteFailure(path, e) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise WriteFailure(path, e) from e


def relative_import_path(target: str, from_file: str) -> str:
    """Path of target relative to the folder holding from_file, in ES module import form."""
    relative = os.path.relpath(target, os.path.dirname(os.path.abspath(from_file)) or ".")
    relative = relative.replace(os.sep, "/")
    if not relative.startswith("."):
        relative = f"./{relative}"
    return relative
