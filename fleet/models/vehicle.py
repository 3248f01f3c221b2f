# fleet/models/vehicle.py
"""
Fleet vehicles table.
`status` is flipped to/from "assigned" only by assignment_service;
maintenance/out_of_service are set by direct edit.
"""

import uuid

from sqlalchemy import Column, String
from fleet.database import Base
from fleet.models.enums import VehicleStatus, VehicleType, enum_column_type


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    license_plate = Column(String(50), unique=True, nullable=False, index=True)  # stored upper-case
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    type = Column(enum_column_type(VehicleType, "vehicle_type"), nullable=False)
    location = Column(String(100), nullable=False)
    status = Column(enum_column_type(VehicleStatus, "vehicle_status"), nullable=False,
                    default=VehicleStatus.AVAILABLE, index=True)

    @property
    def description(self) -> str:
        return f"{self.make} {self.model} ({self.license_plate})"

    def __repr__(self):
        return f"<Vehicle {self.license_plate} status={self.status.value if self.status else None}>"
