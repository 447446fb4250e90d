"""Path mapping for user-supplied file paths (~ home prefix, absolute, relative)."""

import re
import unicodedata
from pathlib import Path


def has_home_path_prefix(path: str) -> bool:
    """Return True when path uses the supported home prefix forms."""
    return path == "~" or path.startswith("~/") or path.startswith("~\\")


def map_path(path: str) -> str:
    """Map a path string to an absolute path string.

    - ``~`` or ``~/...`` expands to the user home directory
    - absolute paths are used as-is
    - relative paths resolve against the current working directory

    Raises:
        ValueError: If the path contains a NUL character
    """
    if "\x00" in path:
        raise ValueError("Path contains NUL character")
    normalized = unicodedata.normalize("NFC", path)

    if has_home_path_prefix(normalized):
        suffix = re.sub(r"[\\/]+", "/", normalized[1:]).lstrip("/")
        home = Path.home()
        return str((home / suffix) if suffix else home)

    return str(Path(normalized).resolve())
