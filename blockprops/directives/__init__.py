# -*- coding: utf-8 -*-
"""Preprocessor-style directive primitives used by the block.properties parser."""

from blockprops.directives.environment import DirectiveEnvironment
from blockprops.directives.expr import ExpressionEvaluator, Token, Truth, evaluate_expression, tokenize
from blockprops.directives.lines import CONTINUATION, iter_logical_lines
from blockprops.directives.stack import ConditionalContext, ConditionalStack

__all__ = [
    "CONTINUATION",
    "ConditionalContext",
    "ConditionalStack",
    "DirectiveEnvironment",
    "ExpressionEvaluator",
    "Token",
    "Truth",
    "evaluate_expression",
    "iter_logical_lines",
    "tokenize",
]
