from fastapi import APIRouter
from quotify_api.core.config import settings
from quotify_api.core.db import ping_db


router = APIRouter(prefix="/healthz", tags=["health"])


@router.get("", summary="Liveness plus database reachability")
async def healthz():
    db_ok = await ping_db()
    return {
        "status": "ok" if db_ok else "degraded",
        "db": db_ok,
        "version": settings.APP_VERSION,
    }
