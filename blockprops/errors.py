# -*- coding: utf-8 -*-
"""Exception hierarchy for blockprops."""

from __future__ import annotations

from typing import Optional

__all__ = [
    "BlockPropsError",
    "BlockPropertiesReadError",
    "PackSourceError",
    "CatalogError",
    "ConfigError",
    "AnalysisInProgressError",
]


class BlockPropsError(Exception):
    """Base class for every error raised by blockprops."""


class BlockPropertiesReadError(BlockPropsError):
    """The mapping file could not be read. Aborts the whole parse."""

    def __init__(self, line_number: int, path: Optional[str] = None):
        self.line_number = int(line_number)
        self.path = path
        where = f" ({path})" if path else ""
        super().__init__(f"Error reading block.properties at line {self.line_number}{where}")


class PackSourceError(BlockPropsError):
    """A shader pack could not be mounted or has no block.properties."""


class CatalogError(BlockPropsError):
    """A block catalog dump could not be loaded."""


class ConfigError(BlockPropsError):
    """An analysis setting has an invalid value."""


class AnalysisInProgressError(BlockPropsError):
    """A run with the same key is already being analyzed."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Analysis already in progress: {key}")
