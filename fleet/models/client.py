# fleet/models/client.py
"""
Clients table — the party a vehicle is lent to.
`available` is owned by assignment_service: False while the client holds an
active assignment.
"""

import uuid

from sqlalchemy import Boolean, Column, Index, String, Text, func
from fleet.database import Base
from fleet.models.enums import ClientType, enum_column_type


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    cin = Column(String(50), unique=True, nullable=False)   # unique case-insensitively, see index below
    type = Column(enum_column_type(ClientType, "client_type"), nullable=False)
    location = Column(String(100), nullable=False)
    phone = Column(String(30), nullable=False)
    cin_image = Column(Text)          # opaque reference / data URL of the ID document
    available = Column(Boolean, nullable=False, default=True, index=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Client {self.cin} available={self.available}>"


Index("uq_clients_cin_lower", func.lower(Client.cin), unique=True)
