from fastapi import APIRouter
from fastapi.responses import JSONResponse

from beakdash.core.db import check_db

router = APIRouter(prefix="/utils", tags=["utils"])


@router.get("/health-check/", response_model=None)
async def health_check() -> bool | JSONResponse:
    """
    Readiness probe: is the registry database reachable?

    External connections are not checked; they are opened per request.
    """
    if not check_db():
        return JSONResponse(
            status_code=503,
            content={"success": False, "message": "Service Unavailable"},
        )
    return True
