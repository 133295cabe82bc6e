# -*- coding: utf-8 -*-
"""Three-valued evaluator for ``#if`` expressions.

Grammar (lowest precedence first)::

    or_expr  := and_expr ( "||" and_expr )*
    and_expr := leaf ( "&&" leaf )*
    leaf     := "defined" IDENT
              | IDENT OP INT          OP in == != < > <= >=

Operands are evaluated left to right with short-circuiting. A leaf that cannot
be evaluated yields UNKNOWN rather than FALSE; an UNKNOWN operand poisons its
OR/AND unless a decisive operand was already seen to its left.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence

from blockprops.directives.environment import DirectiveEnvironment

__all__ = [
    "Truth",
    "Token",
    "tokenize",
    "ExpressionEvaluator",
    "evaluate_expression",
]

logger = logging.getLogger(__name__)


class Truth(enum.Enum):
    TRUE = "true"
    FALSE = "false"
    UNKNOWN = "unknown"

    @classmethod
    def of(cls, value: bool) -> "Truth":
        return cls.TRUE if value else cls.FALSE

    @property
    def known(self) -> bool:
        return self is not Truth.UNKNOWN


# token kinds
OR = "or"
AND = "and"
DEFINED = "defined"
IDENT = "ident"
OP = "op"
INT = "int"
ERROR = "error"

_TOKEN_RE = re.compile(
    r"""
    (?P<or>\|\|)
  | (?P<and>&&)
  | (?P<op>[!=<>]+)
  | (?P<int>\d+)
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<error>\S)
    """,
    re.VERBOSE,
)

_COMPARATORS: Dict[str, Callable[[int, int], bool]] = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "<": lambda a, b: a < b,
    ">": lambda a, b: a > b,
    "<=": lambda a, b: a <= b,
    ">=": lambda a, b: a >= b,
}


@dataclass(frozen=True)
class Token:
    kind: str
    text: str


def tokenize(expression: str) -> List[Token]:
    tokens: List[Token] = []
    for m in _TOKEN_RE.finditer(expression or ""):
        kind = m.lastgroup or ERROR
        text = m.group(0)
        if kind == IDENT and text == "defined":
            kind = DEFINED
        tokens.append(Token(kind, text))
    return tokens


def _split(tokens: Sequence[Token], kind: str) -> List[List[Token]]:
    parts: List[List[Token]] = [[]]
    for tok in tokens:
        if tok.kind == kind:
            parts.append([])
        else:
            parts[-1].append(tok)
    return parts


class ExpressionEvaluator:
    """Evaluate ``#if`` expressions against a DirectiveEnvironment."""

    def __init__(self, environment: DirectiveEnvironment):
        self.environment = environment

    def evaluate(self, expression: str) -> Truth:
        tokens = tokenize(expression)
        result = self._or(tokens)
        logger.debug("Evaluated [%s] -> %s", expression, result.value)
        return result

    def _or(self, tokens: Sequence[Token]) -> Truth:
        for operand in _split(tokens, OR):
            res = self._and(operand)
            if res is Truth.UNKNOWN:
                return Truth.UNKNOWN
            if res is Truth.TRUE:
                return Truth.TRUE
        return Truth.FALSE

    def _and(self, tokens: Sequence[Token]) -> Truth:
        for operand in _split(tokens, AND):
            res = self._leaf(operand)
            if res is Truth.UNKNOWN:
                return Truth.UNKNOWN
            if res is Truth.FALSE:
                return Truth.FALSE
        return Truth.TRUE

    def _leaf(self, tokens: Sequence[Token]) -> Truth:
        kinds = [t.kind for t in tokens]

        if kinds == [DEFINED, IDENT]:
            return Truth.of(self.environment.is_defined(tokens[1].text))

        if kinds == [IDENT, OP, INT]:
            name, op, raw = (t.text for t in tokens)
            value = self.environment.variable(name)
            if value is None:
                logger.debug("Unknown #if variable: %s", name)
                return Truth.UNKNOWN
            compare = _COMPARATORS.get(op)
            if compare is None:
                logger.warning("Unknown operator: %s", op)
                return Truth.UNKNOWN
            return Truth.of(compare(value, int(raw)))

        logger.debug("Could not parse expression: [%s]", " ".join(t.text for t in tokens))
        return Truth.UNKNOWN


def evaluate_expression(expression: str, environment: DirectiveEnvironment) -> Truth:
    """Convenience wrapper around ExpressionEvaluator."""
    return ExpressionEvaluator(environment).evaluate(expression)
