# -*- coding: utf-8 -*-
"""Derive the directive environment (flags + #if variables) from settings."""

from __future__ import annotations

import logging

from blockprops.config.loader import AnalysisConfig
from blockprops.config.versions import parse_version_to_int, version_at_least, version_code
from blockprops.directives import DirectiveEnvironment
from blockprops.errors import ConfigError

__all__ = [
    "FLAG_IRIS",
    "FLAG_OCULUS",
    "VAR_MC_VERSION",
    "VAR_OCULUS_VERSION",
    "VAR_TAG_SUPPORT",
    "build_environment",
]

logger = logging.getLogger(__name__)

FLAG_IRIS = "EUPHORIA_PATCHES_IRIS"
FLAG_OCULUS = "EUPHORIA_PATCHES_OCULUS"

VAR_MC_VERSION = "MC_VERSION"
VAR_OCULUS_VERSION = "EUPHORIA_PATCHES_OCULUS_VERSION"
VAR_TAG_SUPPORT = "IRIS_TAG_SUPPORT"

# companion defines exist only from this patches release on
PATCHES_DEFINES_VERSION = (1, 7, 8)


def build_environment(config: AnalysisConfig) -> DirectiveEnvironment:
    iris = False
    oculus = False
    oculus_version = 0

    if version_at_least(config.euphoria_patches_version, PATCHES_DEFINES_VERSION, minimum=3):
        oculus = bool(config.oculus_version)
        if oculus:
            oculus_version = version_code(config.oculus_version)
        else:
            iris = bool(config.iris_version)
        logger.info(
            "Companion defines: %s=%s, %s=%s, %s=%d",
            FLAG_IRIS, iris, FLAG_OCULUS, oculus, VAR_OCULUS_VERSION, oculus_version,
        )
    else:
        logger.info("Euphoria Patches not detected, companion defines disabled")

    tag_support = 2 if config.tag_support_enabled else 0
    logger.info("%s = %d", VAR_TAG_SUPPORT, tag_support)

    variables = {
        VAR_OCULUS_VERSION: oculus_version,
        VAR_TAG_SUPPORT: tag_support,
    }
    if config.mc_version:
        try:
            variables[VAR_MC_VERSION] = parse_version_to_int(config.mc_version)
        except ValueError as exc:
            raise ConfigError(f"Invalid mc_version: {config.mc_version!r} ({exc})") from exc

    return DirectiveEnvironment(
        flags={FLAG_IRIS: iris, FLAG_OCULUS: oculus},
        variables=variables,
    )
