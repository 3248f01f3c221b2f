"""
Create the default operator account (ADMIN_USERNAME / ADMIN_PASSWORD from .env).
Does nothing if the account already exists.
Usage: python scripts/setup/seed_admin.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from fleet.config import settings
from fleet.database import SessionLocal, create_tables
from fleet.exceptions import FleetError
from fleet.services.user_service import create_user, get_user_by_username


def main():
    create_tables()
    db = SessionLocal()
    try:
        if get_user_by_username(db, settings.ADMIN_USERNAME):
            print(f"User '{settings.ADMIN_USERNAME}' already exists.")
            return
        print(f"Creating user '{settings.ADMIN_USERNAME}'...")
        create_user(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
        print(f"User '{settings.ADMIN_USERNAME}' created successfully.")
    except FleetError as e:
        print(f"Error seeding database: {e.message}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
