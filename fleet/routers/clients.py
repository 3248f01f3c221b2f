# fleet/routers/clients.py
"""Clients — list with assigned-vehicle projection, CRUD, per-client assignment views."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import Optional

from fleet.database import get_db
from fleet.dependencies import get_current_user
from fleet.exceptions import NotFoundError
from fleet.models.user import User
from fleet.schemas.assignment import AssignmentWithDetails
from fleet.schemas.client import ClientCreate, ClientOut, ClientUpdate, ClientWithVehicle
from fleet.services import client_service, projection_service

router = APIRouter()


def _require_client(db: Session, client_id: str):
    client = client_service.get_client(db, client_id)
    if not client:
        raise NotFoundError("Client not found")
    return client


@router.get("/clients", response_model=list[ClientWithVehicle], summary="List clients with assigned vehicle")
def list_clients(available: Optional[bool] = None, db: Session = Depends(get_db)):
    return projection_service.list_clients_with_vehicle(db, available)


@router.get("/clients/{client_id}", response_model=ClientOut)
def get_client(client_id: str, db: Session = Depends(get_db)):
    return _require_client(db, client_id)


@router.post("/clients", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
def create_client(body: ClientCreate, db: Session = Depends(get_db),
                  user: User = Depends(get_current_user)):
    return client_service.create_client(db, body.model_dump())


@router.patch("/clients/{client_id}", response_model=ClientOut)
def update_client(client_id: str, body: ClientUpdate, db: Session = Depends(get_db),
                  user: User = Depends(get_current_user)):
    return client_service.update_client(db, client_id, body.model_dump(exclude_unset=True))


@router.delete("/clients/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(client_id: str, db: Session = Depends(get_db),
                  user: User = Depends(get_current_user)):
    client_service.delete_client(db, client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/clients/{client_id}/current-assignment", response_model=Optional[AssignmentWithDetails],
            summary="Active assignment of a client, or null")
def get_current_assignment(client_id: str, db: Session = Depends(get_db)):
    _require_client(db, client_id)
    return projection_service.get_active_assignment_for_client(db, client_id)


@router.get("/clients/{client_id}/assignment-history", response_model=list[AssignmentWithDetails],
            summary="Completed assignments of a client, newest first")
def get_assignment_history(client_id: str, db: Session = Depends(get_db)):
    _require_client(db, client_id)
    return projection_service.get_assignment_history_for_client(db, client_id)
