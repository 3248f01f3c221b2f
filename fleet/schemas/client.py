# fleet/schemas/client.py
"""Client request/response models, plus the assigned-vehicle projection row."""

from pydantic import Field
from typing import Optional

from fleet.models.enums import ClientType
from fleet.schemas.common import CamelModel


class ClientCreate(CamelModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    cin: str = Field(min_length=1, max_length=50)
    type: ClientType
    location: str = Field(min_length=1, max_length=100)
    phone: str = Field(min_length=1, max_length=30)
    cin_image: Optional[str] = None


class ClientUpdate(CamelModel):
    """`available` is deliberately absent: only assignment transitions flip it."""

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    cin: Optional[str] = Field(default=None, min_length=1, max_length=50)
    type: Optional[ClientType] = None
    location: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, min_length=1, max_length=30)
    cin_image: Optional[str] = None


class ClientOut(CamelModel):
    id: str
    first_name: str
    last_name: str
    cin: str
    type: ClientType
    location: str
    phone: str
    cin_image: Optional[str] = None
    available: bool

    class Config:
        from_attributes = True


class ClientWithVehicle(ClientOut):
    assigned_vehicle: Optional[str] = None   # "Make Model (PLATE)"
