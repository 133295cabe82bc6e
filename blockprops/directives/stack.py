# -*- coding: utf-8 -*-
"""Conditional context stack for #if / #ifdef / #else / #endif."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

__all__ = [
    "ConditionalContext",
    "ConditionalStack",
]


@dataclass(frozen=True)
class ConditionalContext:
    """One nesting level.

    ``supported`` is False when the opening directive could not be evaluated;
    the matching ``#else`` then becomes the fallback branch.
    """

    supported: bool
    active: bool


class ConditionalStack:
    def __init__(self) -> None:
        self._frames: List[ConditionalContext] = []

    def __len__(self) -> int:
        return len(self._frames)

    def is_active(self) -> bool:
        return all(ctx.active for ctx in self._frames)

    def push(self, supported: bool, active: bool) -> ConditionalContext:
        ctx = ConditionalContext(supported=bool(supported), active=bool(active))
        self._frames.append(ctx)
        return ctx

    def pop(self) -> Optional[ConditionalContext]:
        if not self._frames:
            return None
        return self._frames.pop()

    def flip(self) -> Optional[ConditionalContext]:
        """Replace the top frame with its ``#else`` branch. None on empty stack."""
        current = self.pop()
        if current is None:
            return None
        parent_active = self.is_active()
        if current.supported:
            active = parent_active and not current.active
        else:
            active = parent_active
        return self.push(current.supported, active)
