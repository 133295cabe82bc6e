# -*- coding: utf-8 -*-
"""Project version lookup.

Source checkouts read conf/version.json; installed copies fall back to the
distribution metadata.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import metadata
from pathlib import Path

DIST_NAME = "blockprops-lab"
VERSION_FILE = Path(__file__).resolve().parents[1] / "conf" / "version.json"


@lru_cache(maxsize=1)
def project_version() -> str:
    try:
        doc = json.loads(VERSION_FILE.read_text(encoding="utf-8"))
        return str(doc["project_version"]).strip() or "unknown"
    except (OSError, ValueError, KeyError, TypeError):
        pass
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return "unknown"
