# Fleet database models
# Import all models here for SQLAlchemy discovery

from fleet.models.vehicle import Vehicle           # noqa
from fleet.models.client import Client             # noqa
from fleet.models.assignment import Assignment     # noqa
from fleet.models.user import User                 # noqa
