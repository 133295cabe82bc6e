# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from blockprops.analyzer import REPORT_SCHEMA, RunGuard, ShaderAnalyzer
from blockprops.errors import AnalysisInProgressError, BlockPropsError
from blockprops.version import project_version

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")


def get_analyzer(request: Request) -> ShaderAnalyzer:
    return request.app.state.analyzer  # type: ignore[attr-defined]


def get_guard(request: Request) -> RunGuard:
    return request.app.state.guard  # type: ignore[attr-defined]


class AnalyzeRequest(BaseModel):
    name: str = Field(..., min_length=1)
    text: str = ""


@router.get("/meta")
def meta(request: Request, analyzer: ShaderAnalyzer = Depends(get_analyzer)):
    m: Dict[str, Any] = {
        "project_version": project_version(),
        "report_schema": REPORT_SCHEMA,
        "catalog": str(getattr(request.app.state, "catalog_path", "") or ""),
        "catalog_blocks": analyzer.catalog.size(),
        "config": analyzer.config.to_dict(),
        "environment": analyzer.environment.to_dict(),
    }
    return m


@router.post("/analyze")
def analyze(
    req: AnalyzeRequest,
    analyzer: ShaderAnalyzer = Depends(get_analyzer),
    guard: RunGuard = Depends(get_guard),
):
    try:
        with guard.hold(req.name):
            report = analyzer.analyze_lines(req.name, req.text.splitlines())
    except AnalysisInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except BlockPropsError as e:
        logger.warning("Analysis failed for %s: %s", req.name, e)
        raise HTTPException(status_code=400, detail=str(e)) from e
    return report.to_dict()
