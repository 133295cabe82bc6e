# -*- coding: utf-8 -*-
"""Block catalog query interface.

The analyzer never talks to a game directly. It asks a BlockCatalog:

- which blocks exist (``all_items`` / ``item_exists``)
- which blocks a tag contains (``tag_members``)
- which values a state property can take (``possible_values``)
- per-block render metadata (``block_info``: block entity flag, states with
  luminance, opaque-full-cube and render layer)

JsonCatalog implements the interface from a JSON dump::

    {
      "namespace": "minecraft",
      "blocks": {
        "minecraft:redstone_lamp": {
          "block_entity": false,
          "properties": {"lit": ["false", "true"]},
          "default": {"luminance": 0, "opaque_full_cube": true, "render_layer": "solid"},
          "states": [
            {"luminance": 0, "opaque_full_cube": true, "render_layer": "solid"},
            {"luminance": 15, "opaque_full_cube": true, "render_layer": "solid"}
          ]
        }
      },
      "tags": {
        "minecraft:logs": ["minecraft:oak_log", "#minecraft:birch_logs"]
      }
    }

Tag entries starting with ``#`` reference another tag and are expanded.
"""

from __future__ import annotations

import abc
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from blockprops.errors import CatalogError
from blockprops.ids import DEFAULT_NAMESPACE, split_namespace

__all__ = [
    "TRANSLUCENT_LAYERS",
    "StateInfo",
    "BlockInfo",
    "BlockCatalog",
    "JsonCatalog",
]

logger = logging.getLogger(__name__)

# shaders treat tripwire like translucent
TRANSLUCENT_LAYERS = frozenset({"translucent", "tripwire"})


@dataclass(frozen=True)
class StateInfo:
    luminance: int = 0
    opaque_full_cube: bool = True
    render_layer: str = "solid"

    @property
    def translucent(self) -> bool:
        return self.render_layer.lower() in TRANSLUCENT_LAYERS

    @property
    def non_full(self) -> bool:
        return not self.opaque_full_cube

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "StateInfo":
        return cls(
            luminance=int(row.get("luminance") or 0),
            opaque_full_cube=bool(row.get("opaque_full_cube", True)),
            render_layer=str(row.get("render_layer") or "solid"),
        )


@dataclass(frozen=True)
class BlockInfo:
    block_id: str
    block_entity: bool = False
    properties: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    states: Tuple[StateInfo, ...] = (StateInfo(),)

    @property
    def namespace(self) -> str:
        return split_namespace(self.block_id)

    @property
    def default_state(self) -> StateInfo:
        return self.states[0] if self.states else StateInfo()


class BlockCatalog(abc.ABC):
    """Read-only view of the host game's block registry."""

    namespace: str = DEFAULT_NAMESPACE

    @abc.abstractmethod
    def all_items(self) -> Iterable[str]:
        """Every registered block id, ``namespace:name``."""

    @abc.abstractmethod
    def block_info(self, block_id: str) -> Optional[BlockInfo]:
        """Metadata for one block, None when unknown."""

    @abc.abstractmethod
    def tag_members(self, namespace: str, tag: str) -> Set[str]:
        """Block ids in ``namespace:tag``; empty for unknown tags."""

    def item_exists(self, block_id: str) -> bool:
        return self.block_info(block_id) is not None

    def possible_values(self, block_id: str, property_name: str) -> Tuple[str, ...]:
        info = self.block_info(block_id)
        if info is None:
            return ()
        return tuple(info.properties.get(property_name, ()))

    def size(self) -> int:
        return sum(1 for _ in self.all_items())


class JsonCatalog(BlockCatalog):
    """BlockCatalog backed by a JSON document (see module docstring)."""

    def __init__(self, doc: Mapping[str, Any], *, source: Optional[str] = None):
        if not isinstance(doc, Mapping):
            raise CatalogError("Catalog document must be a JSON object")
        self.source = source
        self.namespace = str(doc.get("namespace") or DEFAULT_NAMESPACE)

        blocks = doc.get("blocks") or {}
        if not isinstance(blocks, Mapping):
            raise CatalogError("Catalog 'blocks' must be an object")
        self._blocks: Dict[str, BlockInfo] = {}
        for bid, row in blocks.items():
            self._blocks[str(bid)] = self._parse_block(str(bid), row or {})

        tags = doc.get("tags") or {}
        if not isinstance(tags, Mapping):
            raise CatalogError("Catalog 'tags' must be an object")
        self._tags: Dict[str, List[str]] = {str(k): [str(x) for x in (v or [])] for k, v in tags.items()}

    @classmethod
    def load(cls, path: Path) -> "JsonCatalog":
        path = Path(path)
        try:
            doc = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise CatalogError(f"Cannot load catalog {path}: {exc}") from exc
        catalog = cls(doc, source=str(path))
        logger.info("Loaded catalog %s (%d blocks, %d tags)", path, len(catalog._blocks), len(catalog._tags))
        return catalog

    @staticmethod
    def _parse_block(block_id: str, row: Mapping[str, Any]) -> BlockInfo:
        props = {
            str(name): tuple(str(v) for v in (values or []))
            for name, values in (row.get("properties") or {}).items()
        }
        states = [StateInfo.from_dict(s) for s in (row.get("states") or []) if isinstance(s, Mapping)]
        default = row.get("default")
        if isinstance(default, Mapping):
            states.insert(0, StateInfo.from_dict(default))
        if not states:
            states.append(StateInfo())
        return BlockInfo(
            block_id=block_id,
            block_entity=bool(row.get("block_entity", False)),
            properties=MappingProxyType(props),
            states=tuple(states),
        )

    def all_items(self) -> Iterable[str]:
        return list(self._blocks)

    def block_info(self, block_id: str) -> Optional[BlockInfo]:
        return self._blocks.get(block_id)

    def size(self) -> int:
        return len(self._blocks)

    def tag_members(self, namespace: str, tag: str) -> Set[str]:
        out: Set[str] = set()
        self._expand_tag(f"{namespace}:{tag}", out, set())
        return out

    def _expand_tag(self, key: str, out: Set[str], seen: Set[str]) -> None:
        if key in seen:
            return
        seen.add(key)
        for entry in self._tags.get(key, ()):
            if entry.startswith("#"):
                ref = entry[1:]
                if ":" not in ref:
                    ref = f"{self.namespace}:{ref}"
                self._expand_tag(ref, out, seen)
            else:
                out.add(entry)
