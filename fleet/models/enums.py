# fleet/models/enums.py
"""
Closed value sets for enum columns.
Stored as their lower-case values (native_enum=False) so the same schema
works on PostgreSQL and SQLite.
"""

import enum

from sqlalchemy import Enum as SQLEnum


class VehicleType(str, enum.Enum):
    SEDAN = "sedan"
    SUV = "suv"
    TRUCK = "truck"
    VAN = "van"


class VehicleStatus(str, enum.Enum):
    AVAILABLE = "available"
    ASSIGNED = "assigned"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out_of_service"


class ClientType(str, enum.Enum):
    NEW = "new"
    EXISTING = "existing"


class AssignmentStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def enum_column_type(enum_cls, name: str) -> SQLEnum:
    return SQLEnum(
        enum_cls,
        name=name,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
