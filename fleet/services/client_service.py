# fleet/services/client_service.py
"""
Entity store for clients.
CIN is unique case-insensitively. `available` is owned by assignment_service
and cannot be written here.
"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from fleet.exceptions import ConflictError, NotFoundError
from fleet.models.assignment import Assignment
from fleet.models.client import Client
from fleet.models.enums import AssignmentStatus, ClientType
from fleet.services.transaction import unit_of_work
from fleet.services.validation import clean_fields
from fleet.utils.logger import get_logger

logger = get_logger(__name__)

CLIENT_FIELDS = {
    "first_name": str,
    "last_name": str,
    "cin": str,
    "type": ClientType,
    "location": str,
    "phone": str,
    "cin_image": str,
}
REQUIRED_FIELDS = ("first_name", "last_name", "cin", "type", "location", "phone")
NULLABLE_FIELDS = ("cin_image",)


def list_clients(db: Session, available: Optional[bool] = None):
    q = db.query(Client)
    if available is not None:
        q = q.filter(Client.available == available)
    return q.order_by(Client.last_name, Client.first_name).all()


def get_client(db: Session, client_id: str) -> Optional[Client]:
    """Returns None if not found."""
    return db.get(Client, client_id)


def lookup_client_by_cin(db: Session, cin: str) -> Optional[Client]:
    return db.query(Client).filter(func.lower(Client.cin) == func.lower(cin.strip())).first()


def _check_cin_free(db: Session, cin: str, own_id: Optional[str] = None):
    existing = lookup_client_by_cin(db, cin)
    if existing and existing.id != own_id:
        raise ConflictError(f"A client with CIN {cin} already exists",
                            details={"field": "cin"})


def create_client(db: Session, fields: dict) -> Client:
    data = clean_fields(fields, CLIENT_FIELDS, required=REQUIRED_FIELDS, nullable=NULLABLE_FIELDS)

    with unit_of_work(db, "create client"):
        _check_cin_free(db, data["cin"])
        client = Client(available=True, **data)
        db.add(client)

    logger.info(f"Client {client.full_name} added ({client.id})")
    return client


def update_client(db: Session, client_id: str, fields: dict) -> Client:
    """Merge only the supplied fields into the client."""
    data = clean_fields(fields, CLIENT_FIELDS, nullable=NULLABLE_FIELDS)

    with unit_of_work(db, "update client"):
        client = (
            db.query(Client)
            .filter(Client.id == client_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not client:
            raise NotFoundError("Client not found")
        if "cin" in data:
            _check_cin_free(db, data["cin"], own_id=client.id)

        for key, value in data.items():
            setattr(client, key, value)

    logger.info(f"Client {client.id} updated: {sorted(data)}")
    return client


def delete_client(db: Session, client_id: str) -> None:
    """Remove a client. Refused while any assignment references it."""
    with unit_of_work(db, "delete client"):
        client = db.query(Client).filter(Client.id == client_id).with_for_update().first()
        if not client:
            raise NotFoundError("Client not found")

        refs = db.query(Assignment.status).filter(Assignment.client_id == client_id).all()
        if any(status == AssignmentStatus.ACTIVE for (status,) in refs):
            raise ConflictError("Client has an active assignment")
        if refs:
            raise ConflictError("Client is referenced by assignment history",
                                details={"assignments": len(refs)})
        db.delete(client)

    logger.info(f"Client {client_id} deleted")
