#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Shader compatibility analyzer.

Phases
1. parse block.properties (directives, aliases, assignments)
2. resolve tag aliases to blocks (first-claim-wins)
3. categorize catalog blocks the file leaves uncovered
4. validate blockstate completeness
5. validate declared render layers (DEEP scan only)
6. collect duplicate definitions and statistics
"""

from __future__ import annotations

import contextlib
import datetime
import logging
import threading
import zipfile
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Set

from blockprops.catalog import BlockCatalog, BlockInfo, StateInfo
from blockprops.config import AnalysisConfig, ScanMode, build_environment
from blockprops.directives import DirectiveEnvironment
from blockprops.engine import PackSource
from blockprops.errors import AnalysisInProgressError, PackSourceError
from blockprops.ids import base_block_id, split_namespace
from blockprops.parsers import BlockPropertiesParser, ParseResult
from blockprops.states import validate_block_states
from blockprops.tagging import covered_blocks, resolve_tag_coverage
from blockprops.version import project_version

__all__ = [
    "CATEGORY_BLOCK_ENTITY",
    "CATEGORY_LIGHT_EMITTING",
    "CATEGORY_TRANSLUCENT",
    "CATEGORY_NON_FULL",
    "CATEGORY_FULL",
    "CATEGORY_ORDER",
    "REPORT_SCHEMA",
    "report_meta",
    "RenderLayerMismatch",
    "AnalysisReport",
    "ShaderAnalyzer",
    "RunGuard",
    "actual_render_layer",
]

logger = logging.getLogger(__name__)

CATEGORY_BLOCK_ENTITY = "Block Entity"
CATEGORY_LIGHT_EMITTING = "Light Emitting"
CATEGORY_TRANSLUCENT = "Translucent"
CATEGORY_NON_FULL = "Non-Full"
CATEGORY_FULL = "Full"

CATEGORY_ORDER = [
    CATEGORY_BLOCK_ENTITY,
    CATEGORY_LIGHT_EMITTING,
    CATEGORY_TRANSLUCENT,
    CATEGORY_NON_FULL,
    CATEGORY_FULL,
]

REPORT_SCHEMA = 1


def report_meta() -> Dict[str, Any]:
    return {
        "schema": REPORT_SCHEMA,
        "tool": "blockprops.analyzer",
        "version": project_version(),
        "generated": datetime.datetime.now().astimezone().isoformat(timespec="seconds"),
    }


# catalog layer -> shader layer name
_LAYER_NAMES = {
    "solid": "solid",
    "cutout": "cutout",
    "cutout_mipped": "cutout_mipped",
    "translucent": "translucent",
    "tripwire": "translucent",
}


def actual_render_layer(state: StateInfo) -> str:
    layer = state.render_layer.lower()
    return _LAYER_NAMES.get(layer, layer)


@dataclass(frozen=True)
class RenderLayerMismatch:
    expected: str
    actual: str

    def to_dict(self) -> Dict[str, str]:
        return {"expected": self.expected, "actual": self.actual}


@dataclass
class AnalysisReport:
    pack_name: str
    missing_blocks_by_mod: Dict[str, Dict[str, List[str]]] = field(default_factory=dict)
    tag_coverage: Dict[str, Set[str]] = field(default_factory=dict)
    tag_definitions: Mapping[str, str] = field(default_factory=dict)
    tag_to_property: Mapping[str, int] = field(default_factory=dict)
    render_layer_mismatches: Dict[str, RenderLayerMismatch] = field(default_factory=dict)
    incomplete_block_states: Dict[str, Dict[str, List[str]]] = field(default_factory=dict)
    duplicate_definitions: Mapping[str, Any] = field(default_factory=dict)
    unused_tags: List[str] = field(default_factory=list)
    total_blocks_in_game: int = 0
    total_blocks_in_shader: int = 0
    tag_support_enabled: bool = False
    unmatched_conditionals: int = 0

    @property
    def total_missing_blocks(self) -> int:
        return sum(len(blocks) for cats in self.missing_blocks_by_mod.values() for blocks in cats.values())

    @property
    def coverage_percent(self) -> float:
        if self.total_blocks_in_game <= 0:
            return 0.0
        return 100.0 * (1.0 - self.total_missing_blocks / self.total_blocks_in_game)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "meta": report_meta(),
            "pack": self.pack_name,
            "statistics": {
                "total_blocks_in_game": self.total_blocks_in_game,
                "total_blocks_in_shader": self.total_blocks_in_shader,
                "missing_blocks": self.total_missing_blocks,
                "coverage_percent": round(self.coverage_percent, 2),
                "unmatched_conditionals": self.unmatched_conditionals,
            },
            "tag_support_enabled": self.tag_support_enabled,
            "missing_blocks_by_mod": self.missing_blocks_by_mod,
            "tag_coverage": {k: sorted(v) for k, v in self.tag_coverage.items()},
            "tag_definitions": dict(self.tag_definitions),
            "tag_to_property": dict(self.tag_to_property),
            "unused_tags": list(self.unused_tags),
            "incomplete_block_states": self.incomplete_block_states,
            "duplicate_definitions": {k: list(v) for k, v in sorted(self.duplicate_definitions.items())},
            "render_layer_mismatches": {
                k: v.to_dict() for k, v in sorted(self.render_layer_mismatches.items())
            },
        }


class ShaderAnalyzer:
    """Run every analysis phase for one block.properties against a catalog.

    Parameters
    - config: analysis settings (scan mode, category toggles, tag support).
    - catalog: host block registry.
    - environment: directive flags/variables; derived from config when omitted.
    """

    def __init__(
        self,
        config: AnalysisConfig,
        catalog: BlockCatalog,
        environment: Optional[DirectiveEnvironment] = None,
    ):
        self.config = config
        self.catalog = catalog
        self.environment = environment if environment is not None else build_environment(config)

    def make_parser(self) -> BlockPropertiesParser:
        return BlockPropertiesParser(
            self.environment,
            tag_support=self.config.tag_support_enabled,
            namespace=self.config.namespace,
        )

    # --------------------------------------------------------
    # Entry points
    # --------------------------------------------------------

    def analyze(self, source: PackSource) -> AnalysisReport:
        logger.info("Processing: %s", source.name)
        try:
            stream = source.open_text()
        except (OSError, zipfile.BadZipFile) as exc:
            raise PackSourceError(f"Cannot open {source.display_path}: {exc}") from exc
        with stream:
            result = self.make_parser().parse(stream, path=source.display_path)
        return self.analyze_result(source.name, result)

    def analyze_lines(self, pack_name: str, lines: Iterable[str]) -> AnalysisReport:
        result = self.make_parser().parse(lines, path=pack_name)
        return self.analyze_result(pack_name, result)

    def analyze_result(self, pack_name: str, result: ParseResult) -> AnalysisReport:
        ns = self.config.namespace
        tag_coverage = self.resolve_tags(result)
        covered = covered_blocks(result.block_to_property, tag_coverage, ns)

        report = AnalysisReport(
            pack_name=pack_name,
            missing_blocks_by_mod=self.categorize_missing_blocks(covered),
            tag_coverage=tag_coverage,
            tag_definitions=result.tag_definitions,
            tag_to_property=result.tag_to_property,
            render_layer_mismatches=self.validate_render_layers(result),
            incomplete_block_states=validate_block_states(result.block_to_property, self.catalog, ns),
            duplicate_definitions=result.duplicate_blocks,
            unused_tags=result.unused_tags(),
            total_blocks_in_game=self.catalog.size(),
            total_blocks_in_shader=len(covered),
            tag_support_enabled=self.config.tag_support_enabled,
            unmatched_conditionals=result.unmatched_conditionals,
        )
        logger.info("Analysis complete for %s", pack_name)
        return report

    # --------------------------------------------------------
    # Phases
    # --------------------------------------------------------

    def resolve_tags(self, result: ParseResult) -> Dict[str, Set[str]]:
        if not self.config.tag_support_enabled:
            return {}
        return resolve_tag_coverage(
            tag_definitions=result.tag_definitions,
            tag_to_property=result.tag_to_property,
            block_to_property=result.block_to_property,
            tag_members=self.catalog.tag_members,
            namespace=self.config.namespace,
        )

    def categorize_missing_blocks(self, covered: Set[str]) -> Dict[str, Dict[str, List[str]]]:
        logger.info("Categorizing blocks using %s scan mode", self.config.scan_mode.value)

        grouped: Dict[str, Dict[str, List[str]]] = {}
        for block_id in self.catalog.all_items():
            if block_id in covered:
                continue
            info = self.catalog.block_info(block_id)
            if info is None:
                continue
            category = self.categorize_block(info)
            if category is None:
                continue
            ns = split_namespace(block_id, self.config.namespace)
            grouped.setdefault(ns, {}).setdefault(category, []).append(block_id)

        return {
            ns: {cat: sorted(grouped[ns][cat]) for cat in sorted(grouped[ns])}
            for ns in sorted(grouped)
        }

    def categorize_block(self, info: BlockInfo) -> Optional[str]:
        cfg = self.config
        if cfg.check_block_entity and info.block_entity:
            return CATEGORY_BLOCK_ENTITY

        if cfg.scan_mode is ScanMode.DEEP:
            states = info.states or (info.default_state,)
            if cfg.check_light_emitting and any(s.luminance > 0 for s in states):
                return CATEGORY_LIGHT_EMITTING
            if cfg.check_translucent and any(s.translucent for s in states):
                return CATEGORY_TRANSLUCENT
            if cfg.check_non_full and any(s.non_full for s in states):
                return CATEGORY_NON_FULL
            if cfg.check_full and all(s.opaque_full_cube for s in states):
                return CATEGORY_FULL
            return None

        state = info.default_state
        if cfg.check_light_emitting and state.luminance > 0:
            return CATEGORY_LIGHT_EMITTING
        if cfg.check_translucent and state.translucent:
            return CATEGORY_TRANSLUCENT
        if cfg.check_non_full and state.non_full:
            return CATEGORY_NON_FULL
        if cfg.check_full:
            return CATEGORY_FULL
        return None

    def validate_render_layers(self, result: ParseResult) -> Dict[str, RenderLayerMismatch]:
        mismatches: Dict[str, RenderLayerMismatch] = {}
        if not self.config.validate_render_layers or self.config.scan_mode is not ScanMode.DEEP:
            return mismatches

        for block_id, expected in result.block_to_render_layer.items():
            info = self.catalog.block_info(base_block_id(block_id, self.config.namespace))
            if info is None:
                continue
            actual = actual_render_layer(info.default_state)
            if expected.lower() != actual.lower():
                mismatches[block_id] = RenderLayerMismatch(expected=expected, actual=actual)
        return mismatches


class RunGuard:
    """Reject overlapping runs that share a key (compare-and-set)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._running: Set[str] = set()

    def try_acquire(self, key: str) -> bool:
        with self._lock:
            if key in self._running:
                return False
            self._running.add(key)
            return True

    def release(self, key: str) -> None:
        with self._lock:
            self._running.discard(key)

    def is_running(self, key: str) -> bool:
        with self._lock:
            return key in self._running

    @contextlib.contextmanager
    def hold(self, key: str) -> Iterator[None]:
        if not self.try_acquire(key):
            logger.info("Analysis already in progress for %s, skipping request", key)
            raise AnalysisInProgressError(key)
        try:
            yield
        finally:
            self.release(key)
