# fleet/models/assignment.py
"""
Assignments table — a vehicle lent to a client for a time span.
Invariants (maintained by assignment_service):
  - end_date is NULL iff status == active
  - completed_at is set iff status == completed
  - at most one active row per vehicle_id and per client_id
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from fleet.database import Base
from fleet.models.enums import AssignmentStatus, enum_column_type


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    vehicle_id = Column(String(36), ForeignKey("vehicles.id"), nullable=False, index=True)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    end_date = Column(DateTime)
    completed_at = Column(DateTime)   # set by complete only; NULL on cancel
    status = Column(enum_column_type(AssignmentStatus, "assignment_status"), nullable=False,
                    default=AssignmentStatus.ACTIVE, index=True)
    notes = Column(Text)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    vehicle = relationship("Vehicle")
    client = relationship("Client")

    @property
    def is_active(self) -> bool:
        return self.status == AssignmentStatus.ACTIVE

    def __repr__(self):
        return f"<Assignment {self.id} vehicle={self.vehicle_id} client={self.client_id} status={self.status}>"
