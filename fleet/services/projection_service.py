# fleet/services/projection_service.py
"""
Read-side views joining vehicles, clients and assignments.

Each projection is built from a single SELECT against current table state,
so a vehicle/client/assignment triad is always seen from one snapshot.
Nothing here writes or caches.

Rows are plain dicts keyed by column name plus the projected fields; the
routers validate them into the schemas in fleet.schemas.
"""

from typing import Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from fleet.models.assignment import Assignment
from fleet.models.client import Client
from fleet.models.enums import AssignmentStatus, VehicleStatus, VehicleType
from fleet.models.vehicle import Vehicle


def _columns(row) -> dict:
    return {c.key: getattr(row, c.key) for c in row.__table__.columns}


def _detailed(assignment: Assignment, client: Client, vehicle: Vehicle) -> dict:
    out = _columns(assignment)
    out["client_name"] = client.full_name
    out["vehicle_plate"] = vehicle.license_plate
    out["vehicle_model"] = f"{vehicle.make} {vehicle.model}"
    return out


def _assignment_join(db: Session):
    return (
        db.query(Assignment, Client, Vehicle)
        .join(Client, Assignment.client_id == Client.id)
        .join(Vehicle, Assignment.vehicle_id == Vehicle.id)
    )


def _newest_first(q):
    # created_at/id break ties so equal start dates still list deterministically
    return q.order_by(Assignment.start_date.desc(), Assignment.created_at.desc(), Assignment.id)


def list_vehicles_with_assignee(db: Session, status: Optional[VehicleStatus] = None,
                                vehicle_type: Optional[VehicleType] = None) -> list[dict]:
    """Every vehicle, with `assigned_to` = full name of its active assignee (or None)."""
    q = (
        db.query(Vehicle, Client)
        .outerjoin(Assignment, and_(Assignment.vehicle_id == Vehicle.id,
                                    Assignment.status == AssignmentStatus.ACTIVE))
        .outerjoin(Client, Client.id == Assignment.client_id)
    )
    if status:
        q = q.filter(Vehicle.status == status)
    if vehicle_type:
        q = q.filter(Vehicle.type == vehicle_type)

    rows = []
    for vehicle, client in q.order_by(Vehicle.license_plate).all():
        row = _columns(vehicle)
        row["assigned_to"] = client.full_name if client else None
        rows.append(row)
    return rows


def list_clients_with_vehicle(db: Session, available: Optional[bool] = None) -> list[dict]:
    """Every client, with `assigned_vehicle` = "Make Model (PLATE)" of the active assignment."""
    q = (
        db.query(Client, Vehicle)
        .outerjoin(Assignment, and_(Assignment.client_id == Client.id,
                                    Assignment.status == AssignmentStatus.ACTIVE))
        .outerjoin(Vehicle, Vehicle.id == Assignment.vehicle_id)
    )
    if available is not None:
        q = q.filter(Client.available == available)

    rows = []
    for client, vehicle in q.order_by(Client.last_name, Client.first_name).all():
        row = _columns(client)
        row["assigned_vehicle"] = vehicle.description if vehicle else None
        rows.append(row)
    return rows


def list_assignments_with_details(db: Session, status: Optional[AssignmentStatus] = None) -> list[dict]:
    """All assignments, denormalized, most recent start date first."""
    q = _assignment_join(db)
    if status:
        q = q.filter(Assignment.status == status)
    return [_detailed(a, c, v) for a, c, v in _newest_first(q).all()]


def get_active_assignment_for_client(db: Session, client_id: str) -> Optional[dict]:
    row = (
        _assignment_join(db)
        .filter(Assignment.client_id == client_id, Assignment.status == AssignmentStatus.ACTIVE)
        .first()
    )
    return _detailed(*row) if row else None


def get_assignment_history_for_client(db: Session, client_id: str) -> list[dict]:
    """Completed assignments of one client, newest first. Cancelled ones are not history."""
    q = _assignment_join(db).filter(
        Assignment.client_id == client_id,
        Assignment.status == AssignmentStatus.COMPLETED,
    )
    return [_detailed(a, c, v) for a, c, v in _newest_first(q).all()]


def fleet_stats(db: Session) -> dict:
    """Dashboard counters."""
    by_status = dict(db.query(Vehicle.status, func.count(Vehicle.id)).group_by(Vehicle.status).all())
    by_availability = dict(db.query(Client.available, func.count(Client.id)).group_by(Client.available).all())
    active = (
        db.query(func.count(Assignment.id))
        .filter(Assignment.status == AssignmentStatus.ACTIVE)
        .scalar()
    )
    return {
        "total_vehicles": sum(by_status.values()),
        "available_vehicles": by_status.get(VehicleStatus.AVAILABLE, 0),
        "assigned_vehicles": by_status.get(VehicleStatus.ASSIGNED, 0),
        "maintenance_vehicles": by_status.get(VehicleStatus.MAINTENANCE, 0)
        + by_status.get(VehicleStatus.OUT_OF_SERVICE, 0),
        "total_clients": sum(by_availability.values()),
        "available_clients": by_availability.get(True, 0),
        "active_assignments": active or 0,
    }
