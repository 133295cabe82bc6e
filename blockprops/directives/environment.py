# -*- coding: utf-8 -*-
"""Symbols visible to #ifdef / #if directives."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

__all__ = ["DirectiveEnvironment"]


@dataclass(frozen=True)
class DirectiveEnvironment:
    """Immutable set of boolean flags and integer variables.

    ``flags`` answer ``#ifdef`` / ``defined``; a name that is not a key is
    unsupported and never defined. ``variables`` are the only names a
    ``#if VAR OP INT`` comparison can see.
    """

    flags: Mapping[str, bool] = field(default_factory=dict)
    variables: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", MappingProxyType({str(k): bool(v) for k, v in self.flags.items()}))
        object.__setattr__(self, "variables", MappingProxyType({str(k): int(v) for k, v in self.variables.items()}))

    def knows_flag(self, symbol: str) -> bool:
        return symbol in self.flags

    def is_defined(self, symbol: str) -> bool:
        return bool(self.flags.get(symbol, False))

    def variable(self, name: str) -> Optional[int]:
        return self.variables.get(name)

    def to_dict(self) -> dict:
        return {"flags": dict(self.flags), "variables": dict(self.variables)}
