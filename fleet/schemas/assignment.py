# fleet/schemas/assignment.py
"""Assignment request/response models. startDate is always set by the server."""

from datetime import datetime
from pydantic import Field
from typing import Optional

from fleet.models.enums import AssignmentStatus
from fleet.schemas.common import CamelModel


class AssignmentCreate(CamelModel):
    vehicle_id: str = Field(min_length=1)
    client_id: str = Field(min_length=1)
    notes: Optional[str] = None


class AssignmentOut(CamelModel):
    id: str
    vehicle_id: str
    client_id: str
    start_date: datetime
    end_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    status: AssignmentStatus
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AssignmentWithDetails(AssignmentOut):
    client_name: str
    vehicle_plate: str
    vehicle_model: str
