#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""PackSource

Mounts one shader pack and hands its block.properties to the parser.

Supported sources
- pack folder:  <pack>/shaders/block.properties
- pack zip:     shaders/block.properties (optionally under one top-level folder)
- plain file:   any *.properties path

Design notes
- No pack discovery: callers pass the exact path.
- Read failures surface as BlockPropertiesReadError with the line number.
"""

from __future__ import annotations

import io
import logging
import os
import zipfile
from pathlib import Path
from typing import List, Optional

from blockprops.errors import PackSourceError

__all__ = [
    "PROPERTIES_MEMBER",
    "PackSource",
]

logger = logging.getLogger(__name__)

PROPERTIES_MEMBER = "shaders/block.properties"


class PackSource:
    """One mounted shader pack.

    Parameters
    - path: pack folder, pack zip, or a block.properties file.
    - encoding: text encoding of block.properties.
    """

    def __init__(self, path: os.PathLike, *, encoding: str = "utf-8"):
        self.path = Path(os.path.expanduser(str(path)))
        self.encoding = encoding
        self.name = self.path.name

        self.mode: str = ""  # 'zip' | 'folder' | 'file'
        self._zip: Optional[zipfile.ZipFile] = None
        self._member: Optional[str] = None
        self._file: Optional[Path] = None

        self._mount()

    # --------------------------------------------------------
    # Context manager
    # --------------------------------------------------------

    def __enter__(self) -> "PackSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._zip is not None:
            self._zip.close()
            self._zip = None

    # --------------------------------------------------------
    # Mounting
    # --------------------------------------------------------

    def _mount(self) -> None:
        if not self.path.exists():
            raise PackSourceError(f"Shader pack not found: {self.path}")

        if self.path.is_dir():
            candidate = self.path / PROPERTIES_MEMBER
            if not candidate.is_file():
                raise PackSourceError(f"No {PROPERTIES_MEMBER} in {self.path}")
            self.mode = "folder"
            self._file = candidate
            logger.info("Mounted pack folder: %s", self.path)
            return

        if self.path.suffix.lower() == ".zip":
            try:
                self._zip = zipfile.ZipFile(self.path, "r")
            except (zipfile.BadZipFile, OSError) as exc:
                raise PackSourceError(f"File is not a valid ZIP: {self.path.name}") from exc
            member = self._find_member(self._zip.namelist())
            if member is None:
                self.close()
                raise PackSourceError(f"No {PROPERTIES_MEMBER} in {self.path.name}")
            self.mode = "zip"
            self._member = member
            logger.info("Mounted pack zip: %s (%s)", self.path, member)
            return

        self.mode = "file"
        self._file = self.path

    @staticmethod
    def _find_member(names: List[str]) -> Optional[str]:
        if PROPERTIES_MEMBER in names:
            return PROPERTIES_MEMBER
        # packs zipped together with their folder
        for name in names:
            parts = name.split("/")
            if len(parts) == 3 and "/".join(parts[1:]) == PROPERTIES_MEMBER:
                return name
        return None

    # --------------------------------------------------------
    # Reading
    # --------------------------------------------------------

    @property
    def display_path(self) -> str:
        if self.mode == "zip":
            return f"{self.path}!/{self._member}"
        return str(self._file)

    def open_text(self) -> io.TextIOBase:
        """Text stream over block.properties; caller closes it."""
        if self.mode == "zip" and self._zip is not None and self._member:
            raw = self._zip.open(self._member, "r")
            return io.TextIOWrapper(raw, encoding=self.encoding)
        if self._file is not None:
            return self._file.open("r", encoding=self.encoding)
        raise PackSourceError(f"Pack is closed: {self.path}")

