from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.dashboard import DashboardStats
from app.services.dashboard import dashboard_service

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Session = Depends(get_db)):
    """
    Summary figures for the dashboard.

    Always answers 200; values that cannot be read are reported as zero.
    """
    return dashboard_service.get_stats(db=db)
