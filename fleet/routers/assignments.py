# fleet/routers/assignments.py
"""Assignments — denormalized list + lifecycle transitions (create / complete / cancel)."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from fleet.database import get_db
from fleet.dependencies import get_current_user
from fleet.exceptions import NotFoundError
from fleet.models.enums import AssignmentStatus
from fleet.models.user import User
from fleet.schemas.assignment import AssignmentCreate, AssignmentOut, AssignmentWithDetails
from fleet.services import assignment_service, projection_service

router = APIRouter()


@router.get("/assignments", response_model=list[AssignmentWithDetails],
            summary="All assignments, newest start date first")
def list_assignments(
    assignment_status: Optional[AssignmentStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    return projection_service.list_assignments_with_details(db, assignment_status)


@router.get("/assignments/{assignment_id}", response_model=AssignmentOut)
def get_assignment(assignment_id: str, db: Session = Depends(get_db)):
    assignment = assignment_service.get_assignment(db, assignment_id)
    if not assignment:
        raise NotFoundError("Assignment not found")
    return assignment


@router.post("/assignments", response_model=AssignmentOut, status_code=status.HTTP_201_CREATED,
             summary="Assign an available vehicle to an available client")
def create_assignment(body: AssignmentCreate, db: Session = Depends(get_db),
                      user: User = Depends(get_current_user)):
    return assignment_service.create_assignment(
        db, body.vehicle_id, body.client_id, notes=body.notes,
    )


@router.post("/assignments/{assignment_id}/complete", response_model=AssignmentOut)
def complete_assignment(assignment_id: str, db: Session = Depends(get_db),
                        user: User = Depends(get_current_user)):
    return assignment_service.complete_assignment(db, assignment_id)


@router.post("/assignments/{assignment_id}/cancel", response_model=AssignmentOut)
def cancel_assignment(assignment_id: str, db: Session = Depends(get_db),
                      user: User = Depends(get_current_user)):
    return assignment_service.cancel_assignment(db, assignment_id)
