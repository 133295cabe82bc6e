#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""apps/cli/commands/analyze.py

Analyze one or more shader packs against a block catalog dump.

Notes
- Thin UI layer; every phase lives in blockprops.analyzer.
- Console output is a summary; --out-json writes the full reports.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from apps.cli.cli_common import LOG_LEVELS, default_catalog_path, setup_logging, write_json
from blockprops.analyzer import AnalysisReport, RunGuard, ShaderAnalyzer
from blockprops.catalog import JsonCatalog
from blockprops.config import DEFAULT_CONFIG_PATH, ScanMode, TagSupportMode, resolve_config
from blockprops.engine import PackSource
from blockprops.errors import BlockPropsError

console = Console()

# shared by every invocation in this process
RUN_GUARD = RunGuard()

SAMPLE_LIMIT = 8


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="blockprops analyze", description="Shader block.properties compatibility analysis")
    p.add_argument("packs", nargs="+", help="Pack folder, pack .zip, or a block.properties file")
    p.add_argument("--catalog", default=None, help="Block catalog JSON dump (env BLOCKPROPS_CATALOG)")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="settings.ini path")
    p.add_argument("--scan-mode", choices=[m.value for m in ScanMode], type=str.upper, default=None)
    p.add_argument("--tag-support", choices=[m.value for m in TagSupportMode], type=str.upper, default=None)
    p.add_argument("--mc-version", default=None, help="Game version for MC_VERSION, e.g. 1.21.1")
    p.add_argument("--iris-version", default=None, help="Shader loader version (tag support detection)")
    p.add_argument("--out-json", default=None, help="Write all reports to this JSON file")
    p.add_argument("--log-level", default="warning", choices=LOG_LEVELS)
    return p


def _sample(items: List[str], limit: int = SAMPLE_LIMIT) -> str:
    head = ", ".join(items[:limit])
    rest = len(items) - limit
    return f"{head}, ... (+{rest})" if rest > 0 else head


def render_report(report: AnalysisReport) -> None:
    stats = Table(box=None, show_header=False)
    stats.add_column("Key", style="bold")
    stats.add_column("Value")
    stats.add_row("Blocks in game", str(report.total_blocks_in_game))
    stats.add_row("Blocks defined in shader", str(report.total_blocks_in_shader))
    stats.add_row("Missing blocks", str(report.total_missing_blocks))
    stats.add_row("Coverage", f"{report.coverage_percent:.2f}%")
    stats.add_row("Tag support", "enabled" if report.tag_support_enabled else "disabled")
    if report.unmatched_conditionals:
        stats.add_row("Unmatched #if", f"[yellow]{report.unmatched_conditionals}[/yellow]")
    console.print(Panel(stats, title=f"[bold cyan]{report.pack_name}[/bold cyan]", border_style="cyan"))

    if report.missing_blocks_by_mod:
        table = Table(title="Missing blocks", box=box.SIMPLE, header_style="bold cyan")
        table.add_column("Mod", style="bold")
        table.add_column("Category")
        table.add_column("Count", justify="right")
        table.add_column("Sample", style="dim")
        for ns, cats in report.missing_blocks_by_mod.items():
            for cat, blocks in cats.items():
                table.add_row(ns, cat, str(len(blocks)), _sample(blocks))
        console.print(table)
    else:
        console.print("[green]No missing blocks found.[/green]")

    if report.tag_coverage:
        table = Table(title="Covered by tags", box=box.SIMPLE, header_style="bold cyan")
        table.add_column("Tag", style="bold")
        table.add_column("Definition", style="dim")
        table.add_column("Property")
        table.add_column("Blocks", justify="right")
        for tag, blocks in report.tag_coverage.items():
            pid = report.tag_to_property.get(tag)
            table.add_row(tag, report.tag_definitions.get(tag, "unknown"), f"block.{pid}", str(len(blocks)))
        console.print(table)

    if report.unused_tags:
        console.print(f"[yellow]Unused tag definitions:[/yellow] {', '.join(report.unused_tags)}")

    if report.incomplete_block_states:
        table = Table(title="Incomplete blockstates", box=box.SIMPLE, header_style="bold cyan")
        table.add_column("Block", style="bold")
        table.add_column("Property")
        table.add_column("Missing values", style="yellow")
        for block_id, props in report.incomplete_block_states.items():
            for prop, missing in props.items():
                table.add_row(block_id, prop, ", ".join(missing))
        console.print(table)

    if report.duplicate_definitions:
        table = Table(title="Duplicate definitions", box=box.SIMPLE, header_style="bold cyan")
        table.add_column("Block", style="bold")
        table.add_column("Properties", style="yellow")
        for block_id, pids in sorted(report.duplicate_definitions.items()):
            table.add_row(block_id, ", ".join(f"block.{p}" for p in pids))
        console.print(table)

    if report.render_layer_mismatches:
        table = Table(title="Render layer mismatches", box=box.SIMPLE, header_style="bold cyan")
        table.add_column("Block", style="bold")
        table.add_column("Declared")
        table.add_column("Actual", style="yellow")
        for block_id, mm in sorted(report.render_layer_mismatches.items()):
            table.add_row(block_id, mm.expected, mm.actual)
        console.print(table)


def run(args: argparse.Namespace) -> int:
    catalog_path = Path(args.catalog) if args.catalog else default_catalog_path()
    if catalog_path is None:
        console.print("[red]No catalog given (--catalog or BLOCKPROPS_CATALOG).[/red]")
        return 2

    try:
        config = resolve_config(
            config_path=Path(args.config) if args.config else None,
            scan_mode=args.scan_mode,
            tag_support=args.tag_support,
            mc_version=args.mc_version,
            iris_version=args.iris_version,
        )
        catalog = JsonCatalog.load(catalog_path)
        analyzer = ShaderAnalyzer(config, catalog)
    except BlockPropsError as e:
        console.print(f"[red]{e}[/red]")
        return 2

    reports: List[Dict[str, Any]] = []
    failed = 0

    for pack in args.packs:
        key = str(Path(pack).resolve())
        try:
            with RUN_GUARD.hold(key), PackSource(pack) as source:
                report = analyzer.analyze(source)
        except BlockPropsError as e:
            console.print(f"[red]Failed to analyze {pack}: {e}[/red]")
            failed += 1
            continue
        render_report(report)
        reports.append(report.to_dict())

    if args.out_json:
        out = Path(args.out_json)
        write_json(out, {"reports": reports})
        console.print(f"[dim]JSON written: {out}[/dim]")

    return 1 if failed else 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv if argv is not None else sys.argv[1:])
    setup_logging(args.log_level, console)
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
