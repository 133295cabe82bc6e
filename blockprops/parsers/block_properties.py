# -*- coding: utf-8 -*-
"""block.properties parser.

Streams a shader block-mapping file and produces:

- block_to_property      normalized block id (maybe with state qualifiers) -> property id
- block_to_render_layer  normalized block id -> declared layer name
- tag_definitions        alias -> raw ``%tag`` definition (insertion ordered)
- tag_to_property        alias -> property id (insertion ordered)
- duplicate_blocks       block id -> every distinct property id it was given

Conditional directives (#ifdef/#ifndef/#if/#else/#endif) are always
processed; everything else only runs while the whole conditional stack is
active. Malformed lines are logged and skipped; only a read failure aborts.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from blockprops.directives import (
    ConditionalStack,
    DirectiveEnvironment,
    ExpressionEvaluator,
    Truth,
    iter_logical_lines,
)
from blockprops.ids import DEFAULT_NAMESPACE, normalize_block_id

__all__ = [
    "BLOCK_PREFIX",
    "LAYER_PREFIX",
    "ParseResult",
    "BlockPropertiesParser",
]

logger = logging.getLogger(__name__)

BLOCK_PREFIX = "block."
LAYER_PREFIX = "layer."

_DEFINE_RE = re.compile(r"#define\s+(\w+)\s+(.+)")
_PROPERTY_ID_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class ParseResult:
    """Read-only output of one parse pass."""

    block_to_property: Mapping[str, int] = field(default_factory=dict)
    block_to_render_layer: Mapping[str, str] = field(default_factory=dict)
    tag_definitions: Mapping[str, str] = field(default_factory=dict)
    tag_to_property: Mapping[str, int] = field(default_factory=dict)
    duplicate_blocks: Mapping[str, Tuple[int, ...]] = field(default_factory=dict)
    unmatched_conditionals: int = 0
    line_count: int = 0

    def unused_tags(self) -> List[str]:
        """Aliases defined but never assigned to a block.N property."""
        return sorted(k for k in self.tag_definitions if k not in self.tag_to_property)


class _ParseState:
    """Mutable accumulators for a single parse call."""

    def __init__(self) -> None:
        self.stack = ConditionalStack()
        self.block_to_property: Dict[str, int] = {}
        self.block_to_render_layer: Dict[str, str] = {}
        self.tag_definitions: Dict[str, str] = {}
        self.tag_to_property: Dict[str, int] = {}
        self.duplicate_blocks: Dict[str, List[int]] = {}

    def freeze(self, line_count: int) -> ParseResult:
        return ParseResult(
            block_to_property=MappingProxyType(dict(self.block_to_property)),
            block_to_render_layer=MappingProxyType(dict(self.block_to_render_layer)),
            tag_definitions=MappingProxyType(dict(self.tag_definitions)),
            tag_to_property=MappingProxyType(dict(self.tag_to_property)),
            duplicate_blocks=MappingProxyType({k: tuple(v) for k, v in self.duplicate_blocks.items()}),
            unmatched_conditionals=len(self.stack),
            line_count=line_count,
        )


class BlockPropertiesParser:
    """Directive-aware parser for block.properties.

    Parameters
    - environment: flags and integer variables visible to directives.
    - tag_support: when False, ``#define`` lines are ignored.
    - namespace: default namespace for bare identifiers.
    """

    def __init__(
        self,
        environment: Optional[DirectiveEnvironment] = None,
        *,
        tag_support: bool = True,
        namespace: str = DEFAULT_NAMESPACE,
    ):
        self.environment = environment or DirectiveEnvironment()
        self.tag_support = bool(tag_support)
        self.namespace = namespace
        self._evaluator = ExpressionEvaluator(self.environment)

    # --------------------------------------------------------
    # Entry points
    # --------------------------------------------------------

    def parse(self, lines: Iterable[str], path: Optional[str] = None) -> ParseResult:
        state = _ParseState()
        line_number = 0

        for line_number, line in iter_logical_lines(lines, path):
            self._handle_line(state, line, line_number)

        if len(state.stack):
            logger.warning("Parsing ended with %d unmatched #if directive(s)", len(state.stack))

        logger.info(
            "Parsed %d direct block assignments and %d tag definitions",
            len(state.block_to_property),
            len(state.tag_definitions),
        )
        return state.freeze(line_number)

    def parse_text(self, text: str) -> ParseResult:
        return self.parse(text.splitlines())

    def parse_file(self, path: Path, encoding: str = "utf-8") -> ParseResult:
        with Path(path).open("r", encoding=encoding) as fh:
            return self.parse(fh, path=str(path))

    # --------------------------------------------------------
    # Line dispatch
    # --------------------------------------------------------

    def _handle_line(self, state: _ParseState, line: str, line_number: int) -> None:
        # directives change the stack itself, so they run even when inactive
        if line.startswith("#ifdef ") or line.startswith("#ifndef "):
            self._handle_ifdef(state, line, line_number)
            return
        if line.startswith("#if "):
            self._handle_if(state, line, line_number)
            return
        if line.startswith("#else"):
            self._handle_else(state, line_number)
            return
        if line.startswith("#endif"):
            self._handle_endif(state, line_number)
            return

        if not state.stack.is_active():
            return

        if not line or (line.startswith("#") and not line.startswith("#define")):
            return

        if line.startswith("#define") and self.tag_support:
            self._handle_define(state, line, line_number)
            return

        if "=" in line:
            self._handle_assignment(state, line, line_number)

    # --------------------------------------------------------
    # Directives
    # --------------------------------------------------------

    def _handle_ifdef(self, state: _ParseState, line: str, line_number: int) -> None:
        is_ifndef = line.startswith("#ifndef")
        directive = "#ifndef" if is_ifndef else "#ifdef"
        symbol = line[len(directive):].strip()

        parent_active = state.stack.is_active()
        supported = self.environment.knows_flag(symbol)
        defined = self.environment.is_defined(symbol)
        active = parent_active and (defined != is_ifndef)

        state.stack.push(supported, active)
        logger.debug(
            "Line %d: %s %s -> %s (supported: %s, depth: %d)",
            line_number, directive, symbol, active, supported, len(state.stack),
        )

    def _handle_if(self, state: _ParseState, line: str, line_number: int) -> None:
        expression = line[len("#if "):].strip()
        parent_active = state.stack.is_active()
        result = self._evaluator.evaluate(expression)

        if result is Truth.UNKNOWN:
            logger.warning(
                "Line %d: Unsupported #if expression: %s (stack depth: %d)",
                line_number, expression, len(state.stack),
            )
            state.stack.push(False, False)
            return

        active = parent_active and result is Truth.TRUE
        state.stack.push(True, active)
        logger.debug("Line %d: #if %s -> %s (depth: %d)", line_number, expression, active, len(state.stack))

    def _handle_else(self, state: _ParseState, line_number: int) -> None:
        ctx = state.stack.flip()
        if ctx is None:
            logger.warning("Line %d: #else without matching #if (stack is empty)", line_number)
            return
        logger.debug("Line %d: #else -> %s (supported: %s)", line_number, ctx.active, ctx.supported)

    def _handle_endif(self, state: _ParseState, line_number: int) -> None:
        if state.stack.pop() is None:
            logger.warning("Line %d: #endif without matching #if (stack is empty)", line_number)
            return
        logger.debug("Line %d: #endif (depth: %d)", line_number, len(state.stack))

    def _handle_define(self, state: _ParseState, line: str, line_number: int) -> None:
        m = _DEFINE_RE.fullmatch(line)
        if not m:
            logger.warning("Line %d: Invalid #define directive: %s", line_number, line)
            return
        ident, definition = m.group(1), m.group(2)
        state.tag_definitions[ident] = definition
        logger.debug("Line %d: Defined tag %s = %s", line_number, ident, definition)

    # --------------------------------------------------------
    # Assignments
    # --------------------------------------------------------

    def _handle_assignment(self, state: _ParseState, line: str, line_number: int) -> None:
        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip()

        if key.startswith(BLOCK_PREFIX):
            self._handle_block_property(state, key[len(BLOCK_PREFIX):], value, line_number)
        elif key.startswith(LAYER_PREFIX):
            self._handle_render_layer(state, key[len(LAYER_PREFIX):], value)

    def _handle_block_property(self, state: _ParseState, raw_id: str, value: str, line_number: int) -> None:
        if not _PROPERTY_ID_RE.fullmatch(raw_id):
            logger.warning("Line %d: Invalid property ID: %s", line_number, raw_id)
            return
        property_id = int(raw_id)

        for token in value.split():
            if token in state.tag_definitions:
                state.tag_to_property[token] = property_id
                logger.debug("Line %d: Tag %s -> property %d", line_number, token, property_id)
                continue

            block_id = normalize_block_id(token, self.namespace)
            if block_id is None:
                continue

            existing = state.block_to_property.get(block_id)
            if existing is not None and existing != property_id:
                seen = state.duplicate_blocks.setdefault(block_id, [])
                for pid in (existing, property_id):
                    if pid not in seen:
                        seen.append(pid)
                logger.debug(
                    "Line %d: Duplicate block %s already mapped to block.%d, now also to block.%d",
                    line_number, block_id, existing, property_id,
                )

            state.block_to_property[block_id] = property_id

    def _handle_render_layer(self, state: _ParseState, layer: str, value: str) -> None:
        for token in value.split():
            block_id = normalize_block_id(token, self.namespace)
            if block_id is not None:
                state.block_to_render_layer[block_id] = layer
