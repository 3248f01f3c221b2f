"""
Delete every assignment, vehicle and client. Operator accounts are kept.
Usage: python scripts/setup/clean_db.py [--yes]
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from fleet.database import SessionLocal
from fleet.models import Assignment, Client, Vehicle


def main():
    if "--yes" not in sys.argv:
        answer = input("This deletes all assignments, vehicles and clients. Continue? [y/N] ")
        if answer.strip().lower() != "y":
            print("Aborted.")
            return

    db = SessionLocal()
    try:
        # Children first: assignments reference vehicles and clients
        counts = {}
        for model in (Assignment, Vehicle, Client):
            counts[model.__tablename__] = db.query(model).delete()
        db.commit()
    except Exception as e:
        db.rollback()
        print(f"Error cleaning database: {e}")
        sys.exit(1)
    finally:
        db.close()

    for table, n in counts.items():
        print(f"   - {table}: {n} rows deleted")
    print("Database cleaned successfully!")


if __name__ == "__main__":
    main()
