# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from blockprops.analyzer import RunGuard, ShaderAnalyzer
from blockprops.catalog import JsonCatalog
from blockprops.config import AnalysisConfig, resolve_config
from blockprops.version import project_version

from .api import router as api_router

logger = logging.getLogger(__name__)


def normalize_root_path(root_path: str) -> str:
    rp = (root_path or "").strip()
    if not rp:
        return ""
    if not rp.startswith("/"):
        rp = "/" + rp
    return rp.rstrip("/")


def create_app(
    catalog_path: Path,
    *,
    config: Optional[AnalysisConfig] = None,
    root_path: str = "",
    cors_allow_origins: Optional[Sequence[str]] = None,
    gzip_minimum_size: int = 800,
) -> FastAPI:
    """FastAPI app factory.

    The catalog is loaded once; CatalogError propagates so a bad dump fails
    at startup instead of on the first request.
    """

    app = FastAPI(
        title="blockprops API",
        version=project_version(),
        root_path=normalize_root_path(root_path),
        docs_url="/docs",
        redoc_url=None,
    )

    # state
    cfg = config if config is not None else resolve_config()
    catalog = JsonCatalog.load(Path(catalog_path))
    app.state.config = cfg
    app.state.catalog = catalog
    app.state.catalog_path = Path(catalog_path)
    app.state.analyzer = ShaderAnalyzer(cfg, catalog)
    app.state.guard = RunGuard()
    logger.info("API ready: %d blocks, scan=%s", catalog.size(), cfg.scan_mode.value)

    # middleware
    if gzip_minimum_size and gzip_minimum_size > 0:
        app.add_middleware(GZipMiddleware, minimum_size=int(gzip_minimum_size))

    if cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_allow_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # routes
    app.include_router(api_router)

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    return app
