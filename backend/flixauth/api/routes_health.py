"""Liveness probe. Database reachability lives at /api/test-db."""
from __future__ import annotations

from fastapi import APIRouter, Request

from flixauth.schemas.common import HealthStatus

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthStatus)
def health(request: Request) -> HealthStatus:
    return HealthStatus(status="ok", service=request.app.title, version=request.app.version)
