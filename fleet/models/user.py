# fleet/models/user.py
"""Operator accounts. Identity behind every write on the API."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String
from fleet.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<User {self.username}>"
