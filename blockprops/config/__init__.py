# -*- coding: utf-8 -*-
"""Analysis settings."""

from blockprops.config.defines import build_environment
from blockprops.config.loader import (
    DEFAULT_CONFIG_PATH,
    PROJECT_ROOT,
    AnalysisConfig,
    ScanMode,
    TagSupportMode,
    resolve_config,
)
from blockprops.config.versions import parse_version_to_int

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "PROJECT_ROOT",
    "AnalysisConfig",
    "ScanMode",
    "TagSupportMode",
    "build_environment",
    "parse_version_to_int",
    "resolve_config",
]
