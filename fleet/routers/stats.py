# fleet/routers/stats.py
"""
Dashboard statistics endpoint.
Vehicle counts per status, client availability and active assignments.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fleet.database import get_db
from fleet.schemas.stats import FleetStatsOut
from fleet.services.projection_service import fleet_stats

router = APIRouter()


@router.get("/stats", response_model=FleetStatsOut, summary="Dashboard counters")
def get_stats(db: Session = Depends(get_db)):
    return fleet_stats(db)
