#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Unified CLI dispatcher for blockprops."""

from __future__ import annotations

import runpy
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from apps.cli.registry import get_tools

console = Console()


def _print_help() -> None:
    table = Table(title="blockprops commands", box=None, header_style="bold cyan")
    table.add_column("Command", style="bold")
    table.add_column("Type", style="dim")
    table.add_column("Description")
    table.add_column("Usage", style="green")
    for tool in get_tools():
        table.add_row(tool["alias"], tool["type"], tool["desc"], tool["usage"])
    console.print(table)


def _resolve_module(alias: str) -> Optional[str]:
    key = str(alias).strip()
    for tool in get_tools():
        if tool.get("alias") == key or tool.get("module") == key:
            return str(tool["module"])
    return None


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(argv) if argv is not None else list(sys.argv[1:])
    if not argv or argv[0] in ("-h", "--help", "help"):
        _print_help()
        return 0

    module = _resolve_module(argv[0])
    if module is None:
        console.print(f"[red]Unknown command: {argv[0]}[/red]")
        _print_help()
        return 2

    sys.argv = [module] + argv[1:]
    try:
        runpy.run_module(module, run_name="__main__", alter_sys=True)
    except SystemExit as exc:
        code = exc.code
        return code if isinstance(code, int) else (0 if code is None else 1)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
