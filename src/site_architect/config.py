"""Configuration constants for site-architect."""

import os
from pathlib import Path

# Directory with the database. First directory which exists is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/site-architect").expanduser(),
    Path("~/.site-architect").expanduser(),
]

# Used when none of DATA_DIRECTORIES exists yet.
DEFAULT_DATA_DIR: Path = DATA_DIRECTORIES[0]

# Overrides the data directory lookup when set.
DATA_DIR_ENV_VAR = "SITE_ARCHITECT_DATA_DIR"

DB_FILENAME = "site-architect.db"


def resolve_data_directory() -> Path:
    """Return the env override, the first existing data directory, or the default."""
    override = os.environ.get(DATA_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DEFAULT_DATA_DIR
