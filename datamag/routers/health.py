from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from datamag.core.logging import app_logger
from datamag.repositories.protocols import SalesLedgerProtocol
from datamag.services.dependencies import get_repository

router = APIRouter(tags=["health"])

@router.get("/healthz")
def healthz():
    return {"status": "ok"}

@router.get("/readyz")
def readyz(repository: SalesLedgerProtocol = Depends(get_repository)):
    try:
        return {"status": "ready", "ledger": repository.health_check()}
    except Exception as exc:
        app_logger.error(f"Readiness check failed: {exc}")
        return JSONResponse(
            status_code=503,
            content={"status": "not ready", "error": str(exc)},
        )
