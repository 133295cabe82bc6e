# -*- coding: utf-8 -*-
"""Logical line reader for block.properties (backslash continuation)."""

from __future__ import annotations

import zipfile
import zlib
from typing import Iterable, Iterator, List, Optional, Tuple

from blockprops.errors import BlockPropertiesReadError

__all__ = [
    "CONTINUATION",
    "iter_logical_lines",
]

CONTINUATION = "\\"

# a corrupt pack zip member fails mid-read with these
READ_ERRORS = (OSError, UnicodeDecodeError, zipfile.BadZipFile, zlib.error)


class _NumberedReader:
    """Pull physical lines one at a time, counting them and wrapping read failures."""

    def __init__(self, lines: Iterable[str], path: Optional[str]):
        self._it = iter(lines)
        self._path = path
        self.line_number = 0

    def next_line(self) -> Optional[str]:
        try:
            raw = next(self._it)
        except StopIteration:
            return None
        except READ_ERRORS as exc:
            raise BlockPropertiesReadError(self.line_number + 1, self._path) from exc
        self.line_number += 1
        return raw.strip()


def iter_logical_lines(lines: Iterable[str], path: Optional[str] = None) -> Iterator[Tuple[int, str]]:
    """
    Yield (line_number, text) for each logical line.

    - every physical line is trimmed
    - a trailing backslash joins the next line; each segment loses its own
      marker, segments empty after that are dropped, the rest join with a space
    - line_number is the last physical line consumed (1-based)
    """
    reader = _NumberedReader(lines, path)

    while True:
        line = reader.next_line()
        if line is None:
            return

        if line.endswith(CONTINUATION):
            parts: List[str] = []
            while line is not None and line.endswith(CONTINUATION):
                segment = line[:-1].strip()
                if segment:
                    parts.append(segment)
                line = reader.next_line()
            if line:
                parts.append(line)
            line = " ".join(parts)

        yield reader.line_number, line
