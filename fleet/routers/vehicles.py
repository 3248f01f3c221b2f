# fleet/routers/vehicles.py
"""Vehicles — list with assignee projection + CRUD. Writes require a bearer token."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import Optional

from fleet.database import get_db
from fleet.dependencies import get_current_user
from fleet.exceptions import NotFoundError
from fleet.models.enums import VehicleStatus, VehicleType
from fleet.models.user import User
from fleet.schemas.vehicle import VehicleCreate, VehicleOut, VehicleUpdate, VehicleWithAssignee
from fleet.services import projection_service, vehicle_service

router = APIRouter()


@router.get("/vehicles", response_model=list[VehicleWithAssignee], summary="List vehicles with current assignee")
def list_vehicles(
    vehicle_status: Optional[VehicleStatus] = Query(None, alias="status"),
    vehicle_type: Optional[VehicleType] = Query(None, alias="type"),
    db: Session = Depends(get_db),
):
    return projection_service.list_vehicles_with_assignee(db, vehicle_status, vehicle_type)


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut)
def get_vehicle(vehicle_id: str, db: Session = Depends(get_db)):
    vehicle = vehicle_service.get_vehicle(db, vehicle_id)
    if not vehicle:
        raise NotFoundError("Vehicle not found")
    return vehicle


@router.post("/vehicles", response_model=VehicleOut, status_code=status.HTTP_201_CREATED,
             summary="Add a vehicle (status defaults to available)")
def create_vehicle(body: VehicleCreate, db: Session = Depends(get_db),
                   user: User = Depends(get_current_user)):
    return vehicle_service.create_vehicle(db, body.model_dump(exclude_none=True))


@router.patch("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Partial update")
def update_vehicle(vehicle_id: str, body: VehicleUpdate, db: Session = Depends(get_db),
                   user: User = Depends(get_current_user)):
    return vehicle_service.update_vehicle(db, vehicle_id, body.model_dump(exclude_unset=True))


@router.delete("/vehicles/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_vehicle(vehicle_id: str, db: Session = Depends(get_db),
                   user: User = Depends(get_current_user)):
    vehicle_service.delete_vehicle(db, vehicle_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
