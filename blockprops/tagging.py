# -*- coding: utf-8 -*-
"""Tag alias resolution and coverage.

A ``#define ALIAS %tag_a %other:tag_b`` line names a group of blocks. Only
aliases actually assigned to a ``block.N`` property contribute coverage, and
coverage is first-claim-wins: blocks assigned directly, or claimed by an
alias assigned earlier in the file, are never handed to a later alias.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Mapping, Set

from blockprops.ids import DEFAULT_NAMESPACE, base_block_id

__all__ = [
    "TAG_MARKER",
    "TagMembers",
    "direct_block_ids",
    "resolve_tag_references",
    "resolve_tag_coverage",
    "covered_blocks",
]

logger = logging.getLogger(__name__)

TAG_MARKER = "%"

TagMembers = Callable[[str, str], Set[str]]


def direct_block_ids(block_ids: Iterable[str], namespace: str = DEFAULT_NAMESPACE) -> Set[str]:
    """Base ids (state qualifiers stripped) of directly assigned blocks."""
    return {base_block_id(bid, namespace) for bid in block_ids}


def resolve_tag_references(
    definition: str,
    tag_members: TagMembers,
    namespace: str = DEFAULT_NAMESPACE,
) -> Set[str]:
    """Union of blocks in every ``%tag`` token of an alias definition."""
    blocks: Set[str] = set()
    for ref in (definition or "").split():
        if not ref.startswith(TAG_MARKER):
            logger.warning("Tag reference doesn't start with %s: %s", TAG_MARKER, ref)
            continue

        name = ref[len(TAG_MARKER):]
        tag_ns, sep, tag = name.partition(":")
        if not sep:
            tag_ns, tag = namespace, name
        if not tag_ns or not tag:
            logger.warning("Invalid tag name format: %s", name)
            continue

        blocks |= set(tag_members(tag_ns, tag))
    return blocks


def resolve_tag_coverage(
    *,
    tag_definitions: Mapping[str, str],
    tag_to_property: Mapping[str, int],
    block_to_property: Mapping[str, int],
    tag_members: TagMembers,
    namespace: str = DEFAULT_NAMESPACE,
) -> Dict[str, Set[str]]:
    """Alias -> blocks it actually contributes, in assignment order.

    Aliases whose blocks are all claimed already are left out.
    """
    coverage: Dict[str, Set[str]] = {}
    claimed = direct_block_ids(block_to_property, namespace)

    for alias in tag_to_property:
        definition = tag_definitions.get(alias)
        if definition is None:
            logger.warning("Tag %s assigned to property but not defined", alias)
            continue

        blocks = resolve_tag_references(definition, tag_members, namespace) - claimed
        if not blocks:
            logger.debug("Tag %s (%s) fully covered by earlier definitions, skipping", alias, definition)
            continue

        coverage[alias] = blocks
        claimed |= blocks
        logger.debug("Resolved tag %s (%s) to %d blocks", alias, definition, len(blocks))

    return coverage


def covered_blocks(
    block_to_property: Mapping[str, int],
    tag_coverage: Mapping[str, Set[str]],
    namespace: str = DEFAULT_NAMESPACE,
) -> Set[str]:
    """Every base block id covered directly or by a surviving alias."""
    out = direct_block_ids(block_to_property, namespace)
    for blocks in tag_coverage.values():
        out |= blocks
    return out
