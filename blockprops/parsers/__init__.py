# -*- coding: utf-8 -*-
"""Parsers for shader pack files."""

from blockprops.parsers.block_properties import BLOCK_PREFIX, LAYER_PREFIX, BlockPropertiesParser, ParseResult

__all__ = [
    "BLOCK_PREFIX",
    "LAYER_PREFIX",
    "BlockPropertiesParser",
    "ParseResult",
]
