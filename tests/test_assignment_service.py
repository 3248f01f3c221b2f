# tests/test_assignment_service.py
"""Unit tests for the assignment lifecycle (create / complete / cancel)."""

from datetime import datetime

import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from fleet.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from fleet.models import Assignment, Client, Vehicle
from fleet.models.enums import AssignmentStatus, VehicleStatus
from fleet.services import assignment_service, projection_service


def assert_consistent(session):
    """vehicle assigned / client unavailable  <=>  exactly one active assignment."""
    active = session.query(Assignment).filter(Assignment.status == AssignmentStatus.ACTIVE).all()
    for vehicle in session.query(Vehicle).all():
        n = sum(1 for a in active if a.vehicle_id == vehicle.id)
        assert (vehicle.status == VehicleStatus.ASSIGNED) == (n == 1), vehicle
        assert n <= 1
    for client in session.query(Client).all():
        n = sum(1 for a in active if a.client_id == client.id)
        assert (not client.available) == (n == 1), client
        assert n <= 1
    for a in session.query(Assignment).all():
        assert (a.end_date is None) == (a.status == AssignmentStatus.ACTIVE)
        assert (a.completed_at is not None) == (a.status == AssignmentStatus.COMPLETED)


def snapshot(session_factory, vehicle_id, client_id):
    s = session_factory()
    try:
        v, c = s.get(Vehicle, vehicle_id), s.get(Client, client_id)
        rows = sorted((a.id, a.status, a.end_date) for a in s.query(Assignment).all())
        return v.status, c.available, rows
    finally:
        s.close()


class TestCreateAssignment:
    def test_create_marks_vehicle_and_client(self, db, make_vehicle, make_client):
        vehicle, client = make_vehicle(), make_client()
        before = datetime.utcnow()

        a = assignment_service.create_assignment(db, vehicle.id, client.id, notes="  airport pickup ")

        assert a.status == AssignmentStatus.ACTIVE
        assert a.end_date is None
        assert before <= a.start_date <= datetime.utcnow()
        assert a.notes == "airport pickup"
        assert db.get(Vehicle, vehicle.id).status == VehicleStatus.ASSIGNED
        assert db.get(Client, client.id).available is False
        assert_consistent(db)

    def test_blank_notes_stored_as_null(self, db, make_assignment):
        assert make_assignment(notes="   ").notes is None

    def test_missing_vehicle(self, db, make_client):
        client = make_client()
        with pytest.raises(NotFoundError):
            assignment_service.create_assignment(db, "no-such-vehicle", client.id)
        assert db.get(Client, client.id).available is True

    def test_missing_client(self, db, make_vehicle):
        vehicle = make_vehicle()
        with pytest.raises(NotFoundError):
            assignment_service.create_assignment(db, vehicle.id, "no-such-client")
        assert db.get(Vehicle, vehicle.id).status == VehicleStatus.AVAILABLE

    def test_empty_ids_rejected(self, db):
        with pytest.raises(ValidationError) as exc:
            assignment_service.create_assignment(db, "", None)
        assert {d["field"] for d in exc.value.details} == {"vehicleId", "clientId"}

    def test_assigned_vehicle_conflict_leaves_state_unchanged(self, db, session_factory,
                                                               make_vehicle, make_client):
        vehicle, first, second = make_vehicle(), make_client(), make_client()
        assignment_service.create_assignment(db, vehicle.id, first.id)
        before = snapshot(session_factory, vehicle.id, second.id)

        with pytest.raises(ConflictError) as exc:
            assignment_service.create_assignment(db, vehicle.id, second.id)

        assert exc.value.message == "Vehicle not available"
        assert snapshot(session_factory, vehicle.id, second.id) == before
        assert_consistent(db)

    def test_unavailable_client_conflict_leaves_state_unchanged(self, db, session_factory,
                                                                make_vehicle, make_client):
        first, second, client = make_vehicle(), make_vehicle(), make_client()
        assignment_service.create_assignment(db, first.id, client.id)
        before = snapshot(session_factory, second.id, client.id)

        with pytest.raises(ConflictError) as exc:
            assignment_service.create_assignment(db, second.id, client.id)

        assert exc.value.message == "Client not available"
        assert snapshot(session_factory, second.id, client.id) == before
        assert db.get(Vehicle, second.id).status == VehicleStatus.AVAILABLE

    @pytest.mark.parametrize("status", ["maintenance", "out_of_service"])
    def test_vehicle_off_the_road_cannot_be_assigned(self, db, make_vehicle, make_client, status):
        vehicle, client = make_vehicle(status=status), make_client()
        with pytest.raises(ConflictError):
            assignment_service.create_assignment(db, vehicle.id, client.id)
        assert db.get(Client, client.id).available is True

    def test_commit_failure_rolls_back_everything(self, db, session_factory, make_vehicle, make_client):
        vehicle, client = make_vehicle(), make_client()

        with patch.object(db, "commit", side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error"))):
            with pytest.raises(InternalError):
                assignment_service.create_assignment(db, vehicle.id, client.id)

        status, available, rows = snapshot(session_factory, vehicle.id, client.id)
        assert status == VehicleStatus.AVAILABLE
        assert available is True
        assert rows == []


class TestCloseAssignment:
    def test_complete_round_trip(self, db, make_vehicle, make_client):
        vehicle, client = make_vehicle(), make_client()
        a = assignment_service.create_assignment(db, vehicle.id, client.id)

        done = assignment_service.complete_assignment(db, a.id)

        assert done.status == AssignmentStatus.COMPLETED
        assert done.end_date is not None
        assert done.completed_at == done.end_date
        assert db.get(Vehicle, vehicle.id).status == VehicleStatus.AVAILABLE
        assert db.get(Client, client.id).available is True

        history = projection_service.get_assignment_history_for_client(db, client.id)
        assert [h["id"] for h in history] == [a.id]
        assert history[0]["status"] == AssignmentStatus.COMPLETED
        assert history[0]["end_date"] is not None
        assert_consistent(db)

    def test_cancel_releases_like_complete(self, db, make_vehicle, make_client):
        vehicle, client = make_vehicle(), make_client()
        a = assignment_service.create_assignment(db, vehicle.id, client.id)

        cancelled = assignment_service.cancel_assignment(db, a.id)

        assert cancelled.status == AssignmentStatus.CANCELLED
        assert cancelled.end_date is not None
        assert cancelled.completed_at is None
        assert db.get(Vehicle, vehicle.id).status == VehicleStatus.AVAILABLE
        assert db.get(Client, client.id).available is True
        # cancelled assignments are not part of the completed history
        assert projection_service.get_assignment_history_for_client(db, client.id) == []

    def test_double_complete_fails_second_time(self, db, make_assignment):
        a = make_assignment()
        assignment_service.complete_assignment(db, a.id)
        first_end = db.get(Assignment, a.id).end_date

        with pytest.raises(ConflictError) as exc:
            assignment_service.complete_assignment(db, a.id)

        assert exc.value.message == "Assignment not active"
        assert db.get(Assignment, a.id).end_date == first_end

    def test_double_cancel_fails_second_time(self, db, make_assignment):
        a = make_assignment()
        assignment_service.cancel_assignment(db, a.id)
        with pytest.raises(ConflictError):
            assignment_service.cancel_assignment(db, a.id)

    def test_terminal_state_is_final(self, db, make_assignment):
        a = make_assignment()
        assignment_service.cancel_assignment(db, a.id)
        with pytest.raises(ConflictError):
            assignment_service.complete_assignment(db, a.id)
        assert db.get(Assignment, a.id).status == AssignmentStatus.CANCELLED

    def test_closing_terminal_assignment_does_not_free_reassigned_vehicle(self, db, make_vehicle, make_client):
        vehicle, c1, c2 = make_vehicle(), make_client(), make_client()
        a1 = assignment_service.create_assignment(db, vehicle.id, c1.id)
        assignment_service.complete_assignment(db, a1.id)
        assignment_service.create_assignment(db, vehicle.id, c2.id)

        with pytest.raises(ConflictError):
            assignment_service.complete_assignment(db, a1.id)

        assert db.get(Vehicle, vehicle.id).status == VehicleStatus.ASSIGNED
        assert db.get(Client, c2.id).available is False
        assert_consistent(db)

    def test_missing_assignment(self, db):
        with pytest.raises(NotFoundError):
            assignment_service.complete_assignment(db, "nope")
        with pytest.raises(NotFoundError):
            assignment_service.cancel_assignment(db, "nope")


class TestScenario:
    def test_vehicle_handover_between_clients(self, db, make_vehicle, make_client):
        v1, c1, c2 = make_vehicle(), make_client(), make_client()

        a1 = assignment_service.create_assignment(db, v1.id, c1.id)
        assert db.get(Vehicle, v1.id).status == VehicleStatus.ASSIGNED
        assert db.get(Client, c1.id).available is False

        with pytest.raises(ConflictError, match="Vehicle not available"):
            assignment_service.create_assignment(db, v1.id, c2.id)

        assignment_service.cancel_assignment(db, a1.id)
        assert db.get(Vehicle, v1.id).status == VehicleStatus.AVAILABLE
        assert db.get(Client, c1.id).available is True
        assert db.get(Assignment, a1.id).status == AssignmentStatus.CANCELLED

        a2 = assignment_service.create_assignment(db, v1.id, c2.id)
        assert a2.status == AssignmentStatus.ACTIVE
        assert_consistent(db)
