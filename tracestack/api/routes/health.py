from __future__ import annotations

from fastapi import APIRouter

from tracestack.core.config import get_settings

router = APIRouter()


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok", "service": get_settings().app_name}
