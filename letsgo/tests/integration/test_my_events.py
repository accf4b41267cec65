"""Integration tests for event management and likes."""

import uuid
from datetime import timedelta
from types import SimpleNamespace

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

import letsgo.models as models
from letsgo.core.security import utcnow
from letsgo.services.events import EventService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16

EVENT_FORM = {
    "title": "Baile na Praça",
    "description": "Forró até o sol raiar",
    "category": "show",
    "address": "Rua da Aurora",
    "number": "100",
    "district": "Boa Vista",
    "city": "Recife",
    "state": "PE",
    "local": "Praça do Diario",
    "date": "2030-02-14T23:00:00Z",
    "hour": "20:00",
}


def png_upload(name="flyer.png"):
    return {"image": (name, PNG_BYTES, "image/png")}


@pytest.fixture
def owner(make_user):
    return make_user()


@pytest.fixture
def stranger(make_user):
    return make_user(email="bia@example.com", name="Bia")


class TestCreateEvent:
    """Test POST /criar-evento."""

    def test_create_with_image(self, client: TestClient, owner, auth_headers, storage, db_session):
        response = client.post(
            "/criar-evento", data=EVENT_FORM, files=png_upload(), headers=auth_headers(owner)
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["title"] == "Baile na Praça"
        assert body["userId"] == str(owner.id)
        assert body["date"].startswith("2030-02-14T23:00:00")

        image = body["image"]
        assert image["path"] == f"/assets/uploads/images/{image['filename']}"
        assert image["filename"].endswith(".png")
        assert (storage.upload_dir / image["filename"]).read_bytes() == PNG_BYTES
        assert db_session.query(models.Event).count() == 1

        fetched = client.get(f"/mostrar-evento/{body['id']}")

        assert fetched.status_code == status.HTTP_200_OK
        assert fetched.json()["event"]["image"] == image
        assert fetched.json()["event"]["image"]["path"].endswith(f"/{image['filename']}")

    def test_offset_date_is_stored_as_utc(self, client: TestClient, owner, auth_headers):
        form = dict(EVENT_FORM, date="2030-02-14T20:00:00-03:00")

        response = client.post(
            "/criar-evento", data=form, files=png_upload(), headers=auth_headers(owner)
        )

        assert response.json()["date"].startswith("2030-02-14T23:00:00")

    def test_missing_image(self, client: TestClient, owner, auth_headers, db_session):
        response = client.post("/criar-evento", data=EVENT_FORM, headers=auth_headers(owner))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Image not sent"
        assert db_session.query(models.Event).count() == 0

    def test_unsupported_image_type(self, client: TestClient, owner, auth_headers, storage):
        response = client.post(
            "/criar-evento",
            data=EVENT_FORM,
            files={"image": ("flyer.gif", b"GIF89a", "image/gif")},
            headers=auth_headers(owner),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not storage.upload_dir.exists() or not any(storage.upload_dir.iterdir())

    def test_missing_title_discards_the_upload(self, client: TestClient, owner, auth_headers, storage):
        form = {k: v for k, v in EVENT_FORM.items() if k != "title"}

        response = client.post(
            "/criar-evento", data=form, files=png_upload(), headers=auth_headers(owner)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert list(storage.upload_dir.iterdir()) == []


class TestOwnedEvents:
    """Test reads, updates and deletes restricted to the owner."""

    def test_list_my_events(self, client: TestClient, owner, stranger, auth_headers, make_event):
        make_event(owner, title="old", date=utcnow() + timedelta(days=1))
        make_event(owner, title="new", date=utcnow() + timedelta(days=5))
        make_event(stranger, title="theirs")

        response = client.get("/listar-meus-eventos", headers=auth_headers(owner))

        body = response.json()
        assert [e["title"] for e in body["events"]] == ["new", "old"]
        assert body["totalPages"] == 1

    def test_owner_reads_event(self, client: TestClient, owner, auth_headers, make_event):
        event = make_event(owner)

        response = client.get(f"/eventos/{event.id}", headers=auth_headers(owner))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == str(event.id)

    def test_stranger_cannot_read_for_editing(
        self, client: TestClient, owner, stranger, auth_headers, make_event
    ):
        event = make_event(owner)

        response = client.get(f"/eventos/{event.id}", headers=auth_headers(stranger))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["kind"] == "Forbidden"

    def test_partial_update_keeps_other_fields(
        self, client: TestClient, owner, auth_headers, make_event
    ):
        event = make_event(owner, title="Festa", city="Recife")

        response = client.put(
            f"/eventos/{event.id}", data={"title": "Festa Junina"}, headers=auth_headers(owner)
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["title"] == "Festa Junina"
        assert body["city"] == "Recife"
        assert body["image"]["filename"] == "seed.png"

    def test_stranger_update_changes_nothing(
        self, client: TestClient, db_session, owner, stranger, auth_headers, make_event
    ):
        event = make_event(owner, title="Festa")

        response = client.put(
            f"/eventos/{event.id}",
            data={"title": "Hijacked"},
            files=png_upload(),
            headers=auth_headers(stranger),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        db_session.expire_all()
        assert db_session.get(models.Event, event.id).title == "Festa"

    def test_new_image_replaces_old_file(
        self, client: TestClient, owner, auth_headers, make_event, storage
    ):
        storage.upload_dir.mkdir(parents=True)
        (storage.upload_dir / "old.png").write_bytes(PNG_BYTES)
        event = make_event(
            owner, image={"path": "/assets/uploads/images/old.png", "filename": "old.png"}
        )

        response = client.put(
            f"/eventos/{event.id}", files=png_upload("new.png"), headers=auth_headers(owner)
        )

        assert response.status_code == status.HTTP_200_OK
        new_name = response.json()["image"]["filename"]
        assert new_name != "old.png"
        assert (storage.upload_dir / new_name).exists()
        assert not (storage.upload_dir / "old.png").exists()

    def test_update_missing_event(self, client: TestClient, owner, auth_headers):
        response = client.put(
            f"/eventos/{uuid.uuid4()}", data={"title": "x"}, headers=auth_headers(owner)
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_owner_deletes_event_and_image(
        self, client: TestClient, db_session, owner, auth_headers, make_event, storage
    ):
        storage.upload_dir.mkdir(parents=True)
        (storage.upload_dir / "seed.png").write_bytes(PNG_BYTES)
        event = make_event(owner)

        response = client.delete(f"/eventos/{event.id}", headers=auth_headers(owner))

        assert response.status_code == status.HTTP_200_OK
        db_session.expire_all()
        assert db_session.get(models.Event, event.id) is None
        assert not (storage.upload_dir / "seed.png").exists()

    def test_stranger_cannot_delete(
        self, client: TestClient, db_session, owner, stranger, auth_headers, make_event
    ):
        event = make_event(owner)

        response = client.delete(f"/eventos/{event.id}", headers=auth_headers(stranger))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        db_session.expire_all()
        assert db_session.get(models.Event, event.id) is not None


class TestLikes:
    """Test like toggling, status and favorites."""

    def like_count(self, db_session, user, event):
        db_session.expire_all()
        return (
            db_session.query(models.Like)
            .filter(models.Like.user_id == user.id, models.Like.event_id == event.id)
            .count()
        )

    def test_toggle_twice(self, client: TestClient, db_session, owner, auth_headers, make_event):
        event = make_event(owner)

        first = client.post(f"/curtir-evento/{event.id}", headers=auth_headers(owner))
        assert first.status_code == status.HTTP_201_CREATED
        assert first.json()["liked"] is True
        assert self.like_count(db_session, owner, event) == 1

        second = client.post(f"/curtir-evento/{event.id}", headers=auth_headers(owner))
        assert second.status_code == status.HTTP_200_OK
        assert second.json() == {"message": "Like removed", "liked": False}
        assert self.like_count(db_session, owner, event) == 0

    def test_like_missing_event(self, client: TestClient, owner, auth_headers):
        response = client.post(f"/curtir-evento/{uuid.uuid4()}", headers=auth_headers(owner))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_pair_is_unique(self, db_session, owner, make_event):
        event = make_event(owner)
        db_session.add(models.Like(user_id=owner.id, event_id=event.id))
        db_session.commit()

        db_session.add(models.Like(user_id=owner.id, event_id=event.id))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_toggle_losing_insert_race_keeps_one_row(
        self, db_session, test_session_factory, owner, make_event, storage, monkeypatch
    ):
        """Another request likes the event between our delete and our insert."""
        event = make_event(owner)
        owner_id, event_id = owner.id, event.id
        real_execute = db_session.execute

        def execute_with_concurrent_like(statement, *args, **kwargs):
            if not getattr(statement, "is_delete", False):
                return real_execute(statement, *args, **kwargs)
            other = test_session_factory()
            try:
                other.add(models.Like(user_id=owner_id, event_id=event_id))
                other.commit()
            finally:
                other.close()
            return SimpleNamespace(rowcount=0)

        monkeypatch.setattr(db_session, "execute", execute_with_concurrent_like)

        liked = EventService(db_session, storage).toggle_like(owner_id, event_id)

        monkeypatch.undo()
        assert liked is True
        assert EventService(db_session, storage).is_liked(owner_id, event_id) is True
        assert (
            db_session.query(models.Like)
            .filter(models.Like.user_id == owner_id, models.Like.event_id == event_id)
            .count()
            == 1
        )

    def test_check_like(self, client: TestClient, owner, stranger, auth_headers, make_event):
        event = make_event(owner)
        client.post(f"/curtir-evento/{event.id}", headers=auth_headers(owner))

        mine = client.get(f"/verificar-curtida/{event.id}", headers=auth_headers(owner))
        theirs = client.get(f"/verificar-curtida/{event.id}", headers=auth_headers(stranger))

        assert mine.json() == {"liked": True}
        assert theirs.json() == {"liked": False}

    def test_unlike(self, client: TestClient, db_session, owner, auth_headers, make_event):
        event = make_event(owner)
        client.post(f"/curtir-evento/{event.id}", headers=auth_headers(owner))

        response = client.delete(f"/descurtir-evento/{event.id}", headers=auth_headers(owner))

        assert response.status_code == status.HTTP_200_OK
        assert self.like_count(db_session, owner, event) == 0

    def test_unlike_without_like(self, client: TestClient, owner, auth_headers, make_event):
        event = make_event(owner)

        response = client.delete(f"/descurtir-evento/{event.id}", headers=auth_headers(owner))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_favorites_most_recent_like_first(
        self, client: TestClient, db_session, owner, auth_headers, make_event
    ):
        events = [make_event(owner, title=f"fav-{i}") for i in range(3)]
        base = utcnow()
        for offset, event in enumerate(events):
            db_session.add(
                models.Like(
                    user_id=owner.id, event_id=event.id, created_at=base + timedelta(minutes=offset)
                )
            )
        db_session.commit()

        response = client.get("/listar-meus-favoritos", headers=auth_headers(owner))

        body = response.json()
        assert [e["title"] for e in body["events"]] == ["fav-2", "fav-1", "fav-0"]
        assert body["totalPages"] == 1

    def test_favorites_pagination(self, client: TestClient, db_session, owner, auth_headers, make_event):
        base = utcnow()
        for i in range(25):
            event = make_event(owner, title=f"fav-{i:02d}")
            db_session.add(
                models.Like(user_id=owner.id, event_id=event.id, created_at=base + timedelta(seconds=i))
            )
        db_session.commit()

        response = client.get(
            "/listar-meus-favoritos", params={"page": 2}, headers=auth_headers(owner)
        )

        body = response.json()
        assert body["totalPages"] == 2
        assert [e["title"] for e in body["events"]] == [f"fav-{i:02d}" for i in range(4, -1, -1)]

    def test_deleting_event_removes_its_likes(
        self, client: TestClient, db_session, owner, stranger, auth_headers, make_event
    ):
        event = make_event(owner)
        client.post(f"/curtir-evento/{event.id}", headers=auth_headers(stranger))

        client.delete(f"/eventos/{event.id}", headers=auth_headers(owner))

        db_session.expire_all()
        assert db_session.query(models.Like).count() == 0
