# -*- coding: utf-8 -*-
"""Block identifier helpers.

Identifiers in block.properties come in four shapes:

- ``cobweb``                                  bare name, default namespace
- ``furnace:lit=true``                        bare name with state qualifiers
- ``minecraft:stone``                         fully qualified
- ``create:andesite_casing:waterlogged=true`` fully qualified with qualifiers
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

__all__ = [
    "DEFAULT_NAMESPACE",
    "BlockStateSpec",
    "normalize_block_id",
    "parse_block_state",
    "base_block_id",
    "split_namespace",
]

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "minecraft"


@dataclass(frozen=True)
class BlockStateSpec:
    """A qualified identifier split into its base block and state qualifiers."""

    block_id: str
    properties: Dict[str, str] = field(default_factory=dict)


def normalize_block_id(block_id: Optional[str], namespace: str = DEFAULT_NAMESPACE) -> Optional[str]:
    """Add the default namespace when missing. Returns None for invalid ids."""
    if block_id is None or not block_id.strip():
        logger.warning("Empty or null block ID provided")
        return None

    trimmed = block_id.strip()
    if trimmed.startswith(":") or trimmed.endswith(":"):
        logger.warning("Invalid block ID format: %s", block_id)
        return None

    parts = trimmed.split(":")
    if len(parts) == 1:
        return f"{namespace}:{trimmed}"

    # "furnace:lit=true": the qualifier sits where a name would be
    if "=" in parts[1]:
        return f"{namespace}:{trimmed}"

    return trimmed


def parse_block_state(full_id: str, namespace: str = DEFAULT_NAMESPACE) -> Optional[BlockStateSpec]:
    """Split ``ns:name:prop=val:...`` into a BlockStateSpec.

    Returns None when the identifier carries no ``prop=value`` qualifier.
    """
    segments = full_id.split(":")
    if len(segments) < 2:
        return None

    if "=" in segments[1]:
        ns, name, start = namespace, segments[0], 1
    else:
        ns, name, start = segments[0], segments[1], 2

    props: Dict[str, str] = {}
    for seg in segments[start:]:
        key, sep, val = seg.partition("=")
        if sep:
            props[key] = val

    if not props:
        return None
    return BlockStateSpec(block_id=f"{ns}:{name}", properties=props)


def base_block_id(full_id: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    """Strip state qualifiers, leaving ``ns:name``."""
    spec = parse_block_state(full_id, namespace)
    return spec.block_id if spec is not None else full_id


def split_namespace(block_id: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    ns, sep, _ = block_id.partition(":")
    return ns if sep else namespace
