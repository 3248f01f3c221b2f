# fleet/services/assignment_service.py
"""
Assignment lifecycle: create → active → completed | cancelled.

Every transition writes three rows (vehicle, client, assignment) inside one
unit of work; on any failure all three are rolled back.

Availability is claimed with conditional updates, e.g.
    UPDATE vehicles SET status='assigned' WHERE id=:id AND status='available'
and the transition only proceeds when exactly one row changed. The database
serializes writers on the same row, so of two concurrent requests for one
vehicle (or client, or assignment) only one sees it free and the other gets
ConflictError. On PostgreSQL the rows are also read FOR UPDATE so the
friendly pre-checks see committed state.

Vehicle/client side effects:
  create            vehicle.status = assigned,  client.available = False
  complete | cancel vehicle.status = available, client.available = True
Complete and cancel differ only in the status tag left on the assignment and
in completed_at, which only complete sets.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from fleet.exceptions import ConflictError, NotFoundError, ValidationError
from fleet.models.assignment import Assignment
from fleet.models.client import Client
from fleet.models.enums import AssignmentStatus, VehicleStatus
from fleet.models.vehicle import Vehicle
from fleet.services.transaction import unit_of_work
from fleet.utils.logger import get_logger

logger = get_logger(__name__)


def _locked(db: Session, model, row_id: str):
    """SELECT ... FOR UPDATE, bypassing any stale copy in the identity map."""
    return (
        db.query(model)
        .filter(model.id == row_id)
        .with_for_update()
        .populate_existing()
        .first()
    )


def _claim(db: Session, model, row_id: str, condition, values: dict) -> bool:
    """Conditional UPDATE of one row. True if the row matched `condition`."""
    changed = (
        db.query(model)
        .filter(model.id == row_id, condition)
        .update(values, synchronize_session=False)
    )
    return changed == 1


def get_assignment(db: Session, assignment_id: str) -> Optional[Assignment]:
    """Returns None if not found."""
    return db.get(Assignment, assignment_id)


def create_assignment(db: Session, vehicle_id: str, client_id: str,
                      notes: Optional[str] = None) -> Assignment:
    """Lend an available vehicle to an available client, starting now."""
    missing = [{"field": name, "message": "field required"}
               for name, value in (("vehicleId", vehicle_id), ("clientId", client_id)) if not value]
    if missing:
        raise ValidationError("Invalid assignment data", details=missing)

    with unit_of_work(db, "create assignment"):
        vehicle = _locked(db, Vehicle, vehicle_id)
        if not vehicle:
            raise NotFoundError("Vehicle not found")
        client = _locked(db, Client, client_id)
        if not client:
            raise NotFoundError("Client not found")
        plate, client_name = vehicle.license_plate, client.full_name

        if vehicle.status != VehicleStatus.AVAILABLE or not _claim(
                db, Vehicle, vehicle_id, Vehicle.status == VehicleStatus.AVAILABLE,
                {Vehicle.status: VehicleStatus.ASSIGNED}):
            logger.warning(f"[ASSIGN] refused: vehicle {plate} not available")
            raise ConflictError("Vehicle not available", details={"vehicleId": vehicle_id})

        if not client.available or not _claim(
                db, Client, client_id, Client.available.is_(True),
                {Client.available: False}):
            logger.warning(f"[ASSIGN] refused: client {client_id} already holds a vehicle")
            raise ConflictError("Client not available", details={"clientId": client_id})

        now = datetime.utcnow()
        assignment = Assignment(
            vehicle_id=vehicle_id,
            client_id=client_id,
            status=AssignmentStatus.ACTIVE,
            start_date=now,
            end_date=None,
            notes=(notes or "").strip() or None,
            created_at=now,
        )
        db.add(assignment)
        db.flush()
        assignment_id = assignment.id

    # Identity-map copies of the claimed rows predate the conditional updates
    db.expire_all()
    logger.info(f"[ASSIGN] {plate} → {client_name} (assignment {assignment_id})")
    return assignment


def _close_assignment(db: Session, assignment_id: str, target: AssignmentStatus) -> Assignment:
    action = "complete" if target == AssignmentStatus.COMPLETED else "cancel"
    now = datetime.utcnow()
    values = {Assignment.status: target, Assignment.end_date: now}
    if target == AssignmentStatus.COMPLETED:
        values[Assignment.completed_at] = now

    with unit_of_work(db, f"{action} assignment"):
        assignment = _locked(db, Assignment, assignment_id)
        if not assignment:
            raise NotFoundError("Assignment not found")
        vehicle_id, client_id = assignment.vehicle_id, assignment.client_id

        if assignment.status != AssignmentStatus.ACTIVE or not _claim(
                db, Assignment, assignment_id, Assignment.status == AssignmentStatus.ACTIVE,
                values):
            logger.warning(f"[ASSIGN] refused {action}: {assignment_id} is not active")
            raise ConflictError("Assignment not active", details={"assignmentId": assignment_id})

        if not _claim(db, Vehicle, vehicle_id, Vehicle.status == VehicleStatus.ASSIGNED,
                      {Vehicle.status: VehicleStatus.AVAILABLE}):
            logger.error(f"[ASSIGN] vehicle {vehicle_id} was not marked assigned while {assignment_id} was active")
        if not _claim(db, Client, client_id, Client.available.is_(False),
                      {Client.available: True}):
            logger.error(f"[ASSIGN] client {client_id} was not marked unavailable while {assignment_id} was active")

    db.expire_all()
    logger.info(f"[ASSIGN] {assignment_id} {target.value}: vehicle {vehicle_id} and client {client_id} released")
    return assignment


def complete_assignment(db: Session, assignment_id: str) -> Assignment:
    return _close_assignment(db, assignment_id, AssignmentStatus.COMPLETED)


def cancel_assignment(db: Session, assignment_id: str) -> Assignment:
    return _close_assignment(db, assignment_id, AssignmentStatus.CANCELLED)
