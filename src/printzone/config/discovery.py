"""Locate the printzone.toml that holds resolver, placement and zone settings.

An explicit path in PRINTZONE_CONFIG wins. Otherwise the nearest
printzone.toml in the working directory or one of its parents applies,
so a storefront checkout can carry its own render defaults. ``--config``
bypasses discovery entirely (see ``PrintzoneSettings.load``).
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "printzone.toml"
CONFIG_ENV_VAR = "PRINTZONE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the printzone.toml governing *start* (default: cwd), if any.

    A PRINTZONE_CONFIG that names a missing file disables discovery rather
    than falling through to a walk-up match.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
