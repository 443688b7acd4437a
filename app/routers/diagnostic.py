from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.dashboard import DiagnosticResponse
from app.services.dashboard import dashboard_service

router = APIRouter()


@router.get("/diagnostic", response_model=DiagnosticResponse)
def diagnostic(db: Session = Depends(get_db)):
    """
    Server and database health snapshot with per-table row counts.
    """
    return dashboard_service.get_diagnostic(db=db)


@router.get("/cors-test")
def cors_test():
    return {
        "status": "ok",
        "message": "CORS ist korrekt konfiguriert",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
