# -*- coding: utf-8 -*-
"""Version string helpers (game + companion mod versions)."""

from __future__ import annotations

import logging
import re
from typing import Optional, Tuple

__all__ = [
    "MAX_VERSION",
    "parse_version_to_int",
    "version_parts",
    "version_at_least",
    "version_code",
]

logger = logging.getLogger(__name__)

# snapshots compare as newer than any release
MAX_VERSION = 2**31 - 1

_SNAPSHOT_RE = re.compile(r"\d{2}w\d{2}[a-z]")


def _core(version: str) -> str:
    return version.strip().split("-")[0].split("+")[0]


def parse_version_to_int(version: str) -> int:
    """``1.21.1`` -> 12101, ``1.20`` -> 12000, ``1.7.10`` -> 10710.

    Snapshots (``24w14a``) map to MAX_VERSION. Raises ValueError when fewer
    than two numeric parts are present.
    """
    if _SNAPSHOT_RE.fullmatch(version.strip()):
        logger.info("Detected snapshot version: %s, treating as latest", version)
        return MAX_VERSION

    parts = _core(version).split(".")
    if len(parts) < 2:
        raise ValueError(f"Invalid version format: {version} (expected X.Y or X.Y.Z)")
    try:
        major = int(parts[0])
        minor = int(parts[1])
        patch = int(parts[2]) if len(parts) >= 3 else 0
    except ValueError as exc:
        raise ValueError(f"Failed to parse version: {version} (parts must be numeric)") from exc
    return major * 10000 + minor * 100 + patch


def version_parts(version: Optional[str], minimum: int = 2) -> Optional[Tuple[int, ...]]:
    """Leading numeric parts of a mod version, None when unparsable."""
    if not version or not version.strip():
        return None
    parts = _core(version).split(".")
    if len(parts) < minimum:
        logger.warning("Failed to parse version: %s", version)
        return None
    try:
        nums = tuple(int(p) for p in parts[:3])
    except ValueError:
        logger.warning("Failed to parse version: %s", version)
        return None
    return nums + (0,) * (3 - len(nums))


def version_at_least(version: Optional[str], required: Tuple[int, ...], minimum: int = 2) -> bool:
    parts = version_parts(version, minimum)
    if parts is None:
        return False
    return parts >= tuple(required) + (0,) * (3 - len(required))


def version_code(version: Optional[str]) -> int:
    """``major*10000 + minor*100 + patch``, 0 when unparsable."""
    parts = version_parts(version, minimum=3)
    if parts is None:
        return 0
    major, minor, patch = parts
    return major * 10000 + minor * 100 + patch
