# fleet/schemas/vehicle.py
"""Vehicle request/response models, plus the assignee projection row."""

from pydantic import Field, field_validator
from typing import Optional

from fleet.models.enums import VehicleStatus, VehicleType
from fleet.schemas.common import CamelModel


class VehicleCreate(CamelModel):
    license_plate: str = Field(min_length=1, max_length=50)
    make: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    type: VehicleType
    location: str = Field(min_length=1, max_length=100)
    status: Optional[VehicleStatus] = None      # defaults to available

    @field_validator("license_plate")
    @classmethod
    def upper_plate(cls, v: str) -> str:
        return v.upper()


class VehicleUpdate(CamelModel):
    license_plate: Optional[str] = Field(default=None, min_length=1, max_length=50)
    make: Optional[str] = Field(default=None, min_length=1, max_length=100)
    model: Optional[str] = Field(default=None, min_length=1, max_length=100)
    type: Optional[VehicleType] = None
    location: Optional[str] = Field(default=None, min_length=1, max_length=100)
    status: Optional[VehicleStatus] = None

    @field_validator("license_plate")
    @classmethod
    def upper_plate(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v


class VehicleOut(CamelModel):
    id: str
    license_plate: str
    make: str
    model: str
    type: VehicleType
    location: str
    status: VehicleStatus

    class Config:
        from_attributes = True


class VehicleWithAssignee(VehicleOut):
    assigned_to: Optional[str] = None    # "First Last" of the active assignee
