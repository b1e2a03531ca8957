"""Locate ``gradectl.toml``.

``GRADECTL_CONFIG`` names the file outright. Otherwise the search starts
in the working directory and climbs toward the filesystem root, so any
subdirectory of a project shares the project's config.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "gradectl.toml"
CONFIG_ENV_VAR = "GRADECTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start*, or None.

    An env var pointing at a missing file yields None rather than falling
    back to the directory search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        explicit = Path(override)
        return explicit if explicit.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
