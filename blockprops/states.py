# -*- coding: utf-8 -*-
"""Blockstate completeness validation.

``furnace:lit=true`` maps only the lit furnace; if nothing in the file maps
``lit=false`` the unlit furnace silently falls through. Declared values are
gathered per block across every assignment line, then compared with the
values the catalog says each property can take.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Set

from blockprops.catalog import BlockCatalog
from blockprops.ids import DEFAULT_NAMESPACE, parse_block_state

__all__ = [
    "collect_declared_states",
    "validate_block_states",
]

logger = logging.getLogger(__name__)


def collect_declared_states(
    block_ids: Iterable[str],
    namespace: str = DEFAULT_NAMESPACE,
) -> Dict[str, Dict[str, Set[str]]]:
    """base block id -> property -> set of declared values."""
    declared: Dict[str, Dict[str, Set[str]]] = {}
    for full_id in block_ids:
        spec = parse_block_state(full_id, namespace)
        if spec is None:
            continue
        props = declared.setdefault(spec.block_id, {})
        for name, value in spec.properties.items():
            props.setdefault(name, set()).add(value)
    return declared


def validate_block_states(
    block_ids: Iterable[str],
    catalog: BlockCatalog,
    namespace: str = DEFAULT_NAMESPACE,
) -> Dict[str, Dict[str, List[str]]]:
    """block id -> property -> sorted missing values.

    Blocks unknown to the catalog, blocks whose declared properties don't
    exist on them, and complete blocks are omitted.
    """
    incomplete: Dict[str, Dict[str, List[str]]] = {}

    for block_id, declared in collect_declared_states(block_ids, namespace).items():
        if not catalog.item_exists(block_id):
            logger.debug("Skipping state validation for unknown block %s", block_id)
            continue

        possible = {}
        for name in declared:
            values = catalog.possible_values(block_id, name)
            if values:
                possible[name] = values
        if not possible:
            continue

        missing_by_prop: Dict[str, List[str]] = {}
        for name in sorted(possible):
            have = {v.lower() for v in declared.get(name, ())}
            missing = sorted(v for v in possible[name] if v.lower() not in have)
            if missing:
                missing_by_prop[name] = missing

        if missing_by_prop:
            incomplete[block_id] = missing_by_prop

    return {k: incomplete[k] for k in sorted(incomplete)}
