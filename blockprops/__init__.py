# -*- coding: utf-8 -*-
"""Shader block.properties compatibility analysis."""

from blockprops.analyzer import AnalysisReport, RenderLayerMismatch, RunGuard, ShaderAnalyzer
from blockprops.catalog import BlockCatalog, BlockInfo, JsonCatalog, StateInfo
from blockprops.config import AnalysisConfig, ScanMode, TagSupportMode, build_environment, resolve_config
from blockprops.directives import DirectiveEnvironment, Truth
from blockprops.engine import PackSource
from blockprops.ids import normalize_block_id, parse_block_state
from blockprops.parsers import BlockPropertiesParser, ParseResult

__all__ = [
    "AnalysisConfig",
    "AnalysisReport",
    "BlockCatalog",
    "BlockInfo",
    "BlockPropertiesParser",
    "DirectiveEnvironment",
    "JsonCatalog",
    "PackSource",
    "ParseResult",
    "RenderLayerMismatch",
    "RunGuard",
    "ScanMode",
    "ShaderAnalyzer",
    "StateInfo",
    "TagSupportMode",
    "Truth",
    "build_environment",
    "normalize_block_id",
    "parse_block_state",
    "resolve_config",
]
