#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from apps.cli.cli_common import default_catalog_path, file_info, human_mtime, human_size
from blockprops.catalog import JsonCatalog
from blockprops.config import DEFAULT_CONFIG_PATH, build_environment, resolve_config
from blockprops.errors import BlockPropsError
from blockprops.version import project_version

console = Console()


def _status(level: str) -> str:
    if level == "PASS":
        return "[green]PASS[/green]"
    if level == "WARN":
        return "[yellow]WARN[/yellow]"
    return "[red]FAIL[/red]"


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="blockprops doctor", description="blockprops doctor (settings + catalog health check)")
    p.add_argument("--catalog", default=None, help="Block catalog JSON dump")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="settings.ini path")
    p.add_argument("--enforce", action="store_true", help="exit non-zero on failures (CI)")
    p.add_argument("--strict", action="store_true", help="treat WARN as FAIL (only when --enforce)")
    args = p.parse_args(argv if argv is not None else sys.argv[1:])

    console.print(Panel(f"[bold cyan]blockprops doctor[/bold cyan]\nVersion: {project_version()}", border_style="cyan"))

    table = Table(title="Health Checks", box=None, show_header=True, header_style="bold cyan")
    table.add_column("Check", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Details", style="dim")
    table.add_column("Fix Hint", style="green")

    fail = 0
    warn = 0

    # 1) settings file (optional)
    config_path = Path(args.config)
    if config_path.is_file():
        table.add_row("settings.ini", _status("PASS"), str(config_path), "")
    else:
        table.add_row("settings.ini", _status("WARN"), str(config_path), "Optional: built-in defaults are used")
        warn += 1

    config = None
    try:
        config = resolve_config(config_path=config_path)
        table.add_row("parse settings", _status("PASS"), f"scan={config.scan_mode.value} tags={config.tag_support.value}", "")
    except BlockPropsError as e:
        table.add_row("parse settings", _status("FAIL"), str(e), "Fix the value in settings.ini or BLOCKPROPS_* env")
        fail += 1

    # 2) catalog dump
    catalog_path = Path(args.catalog) if args.catalog else default_catalog_path()
    if catalog_path is None:
        table.add_row("catalog", _status("WARN"), "not configured", "Pass --catalog or set BLOCKPROPS_CATALOG")
        warn += 1
    else:
        info = file_info(catalog_path)
        if not info["exists"]:
            table.add_row("catalog", _status("FAIL"), f"{catalog_path} (missing)", "Export a block catalog dump first")
            fail += 1
        else:
            try:
                catalog = JsonCatalog.load(catalog_path)
                details = f"{catalog.size()} blocks | {human_mtime(info['mtime'])} | {human_size(info['size'])}"
                table.add_row("catalog", _status("PASS"), details, "")
            except BlockPropsError as e:
                table.add_row("catalog", _status("FAIL"), str(e), "Re-export the catalog dump")
                fail += 1

    console.print(table)

    # 3) effective settings + directive environment
    if config is not None:
        settings = Table(title="Active Settings", box=None, show_header=False)
        settings.add_column("Key", style="bold")
        settings.add_column("Value")
        for key, val in config.to_dict().items():
            settings.add_row(key, "-" if val is None else str(val))
        console.print(settings)

        env = build_environment(config).to_dict()
        directives = Table(title="Directive Environment", box=None, show_header=True, header_style="bold cyan")
        directives.add_column("Name", style="bold")
        directives.add_column("Kind")
        directives.add_column("Value")
        for name, val in sorted(env.get("flags", {}).items()):
            directives.add_row(name, "flag", "defined" if val else "undefined")
        for name, val in sorted(env.get("variables", {}).items()):
            directives.add_row(name, "variable", str(val))
        console.print(directives)

    console.print(f"\nSummary: [red]{fail} FAIL[/red], [yellow]{warn} WARN[/yellow]")
    if args.enforce:
        if fail or (args.strict and warn):
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
