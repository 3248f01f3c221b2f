# fleet/services/vehicle_service.py
"""
Entity store for vehicles: create / read / update / delete and simple filters.
The "assigned" status is never written here; see assignment_service.
"""

from typing import Optional

from sqlalchemy.orm import Session

from fleet.exceptions import ConflictError, NotFoundError, ValidationError
from fleet.models.assignment import Assignment
from fleet.models.enums import AssignmentStatus, VehicleStatus, VehicleType
from fleet.models.vehicle import Vehicle
from fleet.services.transaction import unit_of_work
from fleet.services.validation import clean_fields
from fleet.utils.logger import get_logger

logger = get_logger(__name__)

VEHICLE_FIELDS = {
    "license_plate": str,
    "make": str,
    "model": str,
    "type": VehicleType,
    "location": str,
    "status": VehicleStatus,
}
REQUIRED_FIELDS = ("license_plate", "make", "model", "type", "location")


def normalize_plate(plate: str) -> str:
    return plate.strip().upper()


def list_vehicles(db: Session, status: Optional[VehicleStatus] = None,
                  vehicle_type: Optional[VehicleType] = None):
    q = db.query(Vehicle)
    if status:
        q = q.filter(Vehicle.status == status)
    if vehicle_type:
        q = q.filter(Vehicle.type == vehicle_type)
    return q.order_by(Vehicle.license_plate).all()


def get_vehicle(db: Session, vehicle_id: str) -> Optional[Vehicle]:
    """Returns None if not found."""
    return db.get(Vehicle, vehicle_id)


def lookup_vehicle_by_plate(db: Session, plate: str) -> Optional[Vehicle]:
    """Find a vehicle by plate number, any case. Returns None if not found."""
    return db.query(Vehicle).filter(Vehicle.license_plate == normalize_plate(plate)).first()


def _check_manual_status(status: VehicleStatus):
    if status == VehicleStatus.ASSIGNED:
        raise ValidationError(
            "Invalid field values",
            details=[{"field": "status",
                      "message": "assigned is set by creating an assignment"}],
        )


def _check_plate_free(db: Session, plate: str, own_id: Optional[str] = None):
    existing = lookup_vehicle_by_plate(db, plate)
    if existing and existing.id != own_id:
        raise ConflictError(f"License plate {plate} already registered",
                            details={"field": "licensePlate"})


def create_vehicle(db: Session, fields: dict) -> Vehicle:
    data = clean_fields(fields, VEHICLE_FIELDS, required=REQUIRED_FIELDS)
    data["license_plate"] = normalize_plate(data["license_plate"])
    status = data.pop("status", None) or VehicleStatus.AVAILABLE
    _check_manual_status(status)

    with unit_of_work(db, "create vehicle"):
        _check_plate_free(db, data["license_plate"])
        vehicle = Vehicle(status=status, **data)
        db.add(vehicle)

    logger.info(f"Vehicle {vehicle.license_plate} added ({vehicle.id})")
    return vehicle


def update_vehicle(db: Session, vehicle_id: str, fields: dict) -> Vehicle:
    """Merge only the supplied fields into the vehicle."""
    data = clean_fields(fields, VEHICLE_FIELDS)
    if "license_plate" in data:
        data["license_plate"] = normalize_plate(data["license_plate"])
    if "status" in data:
        _check_manual_status(data["status"])

    with unit_of_work(db, "update vehicle"):
        vehicle = (
            db.query(Vehicle)
            .filter(Vehicle.id == vehicle_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not vehicle:
            raise NotFoundError("Vehicle not found")

        if "license_plate" in data:
            _check_plate_free(db, data["license_plate"], own_id=vehicle.id)

        new_status = data.pop("status", None)
        if new_status is not None:
            # Conditional write: an assignment may claim the vehicle concurrently
            changed = (
                db.query(Vehicle)
                .filter(Vehicle.id == vehicle_id, Vehicle.status != VehicleStatus.ASSIGNED)
                .update({Vehicle.status: new_status}, synchronize_session=False)
            )
            if changed != 1:
                raise ConflictError("Vehicle has an active assignment; complete or cancel it first")
            data["status"] = new_status

        for key, value in data.items():
            setattr(vehicle, key, value)

    logger.info(f"Vehicle {vehicle.id} updated: {sorted(data)}")
    return vehicle


def delete_vehicle(db: Session, vehicle_id: str) -> None:
    """
    Remove a vehicle. Refused while any assignment, active or historical,
    references it.
    """
    with unit_of_work(db, "delete vehicle"):
        vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).with_for_update().first()
        if not vehicle:
            raise NotFoundError("Vehicle not found")

        refs = db.query(Assignment.status).filter(Assignment.vehicle_id == vehicle_id).all()
        if any(status == AssignmentStatus.ACTIVE for (status,) in refs):
            raise ConflictError("Vehicle has an active assignment")
        if refs:
            raise ConflictError("Vehicle is referenced by assignment history",
                                details={"assignments": len(refs)})
        db.delete(vehicle)

    logger.info(f"Vehicle {vehicle_id} deleted")
