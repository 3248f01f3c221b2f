# tests/test_client_service.py
"""Unit tests for the client entity store."""

import pytest

from fleet.exceptions import ConflictError, NotFoundError, ValidationError
from fleet.models import Client
from fleet.models.enums import ClientType
from fleet.services import assignment_service, client_service


class TestCreateClient:
    def test_defaults(self, db, make_client):
        c = make_client(cin_image="data:image/png;base64,AAAA")
        assert c.available is True
        assert c.type == ClientType.NEW
        assert c.cin_image.startswith("data:image/png")

    def test_cin_image_optional(self, db, make_client):
        assert make_client().cin_image is None

    def test_cin_unique_case_insensitive(self, db, make_client):
        make_client(cin="AB123456")
        with pytest.raises(ConflictError):
            make_client(cin="ab123456")
        assert db.query(Client).count() == 1

    def test_non_ascii_cin_found_and_rejected(self, db, make_client):
        c = make_client(cin="ÉL7788")
        assert client_service.lookup_client_by_cin(db, " ÉL7788 ").id == c.id
        assert client_service.lookup_client_by_cin(db, "Él7788").id == c.id
        with pytest.raises(ConflictError, match="already exists"):
            make_client(cin="ÉL7788")

    def test_required_fields(self, db):
        with pytest.raises(ValidationError) as exc:
            client_service.create_client(db, {"first_name": "Sara", "type": "vip"})
        fields = {d["field"] for d in exc.value.details}
        assert fields == {"last_name", "cin", "location", "phone", "type"}

    def test_available_not_writable(self, db, make_client):
        with pytest.raises(ValidationError):
            make_client(available=False)


class TestUpdateClient:
    def test_partial_merge(self, db, make_client):
        c = make_client(first_name="Sara", phone="0600")
        updated = client_service.update_client(db, c.id, {"phone": "0700"})
        assert updated.first_name == "Sara"
        assert updated.phone == "0700"

    def test_clear_cin_image(self, db, make_client):
        c = make_client(cin_image="ref://doc/1")
        assert client_service.update_client(db, c.id, {"cin_image": None}).cin_image is None

    def test_cin_collision_on_update(self, db, make_client):
        make_client(cin="CD1")
        other = make_client(cin="CD2")
        with pytest.raises(ConflictError):
            client_service.update_client(db, other.id, {"cin": "cd1"})

    def test_availability_cannot_be_patched(self, db, make_client):
        c = make_client()
        with pytest.raises(ValidationError):
            client_service.update_client(db, c.id, {"available": False})

    def test_missing(self, db):
        with pytest.raises(NotFoundError):
            client_service.update_client(db, "missing", {"phone": "1"})


class TestDeleteClient:
    def test_delete(self, db, make_client):
        client_id = make_client().id
        client_service.delete_client(db, client_id)
        assert client_service.get_client(db, client_id) is None

    def test_active_assignment_blocks_delete(self, db, make_client, make_assignment):
        c = make_client()
        make_assignment(client=c)
        with pytest.raises(ConflictError, match="active assignment"):
            client_service.delete_client(db, c.id)

    def test_cancelled_history_blocks_delete(self, db, make_client, make_assignment):
        c = make_client()
        assignment_service.cancel_assignment(db, make_assignment(client=c).id)
        with pytest.raises(ConflictError):
            client_service.delete_client(db, c.id)

    def test_list_filter_by_availability(self, db, make_client, make_assignment):
        busy = make_client()
        make_client()
        make_assignment(client=busy)
        assert [c.id for c in client_service.list_clients(db, available=False)] == [busy.id]
        assert len(client_service.list_clients(db, available=True)) == 1
