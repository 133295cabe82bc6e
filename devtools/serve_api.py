#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Run the blockprops HTTP API (FastAPI + Uvicorn).

Usage:
  python3 devtools/serve_api.py --catalog data/catalog.json --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import argparse
import os
import socket
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import uvicorn  # type: ignore

from apps.web.app import create_app
from blockprops.config import DEFAULT_CONFIG_PATH, resolve_config
from blockprops.errors import BlockPropsError


def _detect_lan_ip() -> str:
    """Best-effort LAN IP discovery (no external network required)."""
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        # doesn't need to be reachable; used to pick outbound interface
        s.connect(("8.8.8.8", 80))
        ip = s.getsockname()[0]
        s.close()
        return ip
    except OSError:
        return "127.0.0.1"


def main() -> None:
    parser = argparse.ArgumentParser(description="blockprops analysis API (FastAPI) server.")
    parser.add_argument(
        "--catalog",
        default=os.environ.get("BLOCKPROPS_CATALOG", str(PROJECT_ROOT / "data" / "catalog.json")),
    )
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="settings.ini path")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--root-path", default="", help="Reverse proxy mount path, e.g. /blockprops")
    parser.add_argument("--log-level", default="info", choices=["critical", "error", "warning", "info", "debug", "trace"])
    parser.add_argument("--cors-allow-origin", action="append", default=[], help="CORS allow origin (repeatable)")
    args = parser.parse_args()

    catalog_path = Path(args.catalog).expanduser().resolve()
    if not catalog_path.exists():
        print(f"Catalog not found: {catalog_path}")
        sys.exit(2)

    try:
        app = create_app(
            catalog_path,
            config=resolve_config(config_path=Path(args.config)),
            root_path=args.root_path,
            cors_allow_origins=(args.cors_allow_origin or None),
        )
    except BlockPropsError as e:
        print(f"Cannot start API: {e}")
        sys.exit(2)

    host = str(args.host)
    port = int(args.port)

    rp = (args.root_path or "").rstrip("/")
    if host == "0.0.0.0":
        print(f"blockprops API: http://{_detect_lan_ip()}:{port}{rp}/docs")
        print(f"Open (local): http://127.0.0.1:{port}{rp}/docs")
    else:
        print(f"blockprops API: http://{host}:{port}{rp}/docs")
    print(f"Catalog: {catalog_path}")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=args.log_level,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    main()
