"""
Tests for how database failures surface through the API.
"""
from sqlalchemy import event
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError

from conftest import auth, create_journey, create_entry, decode
from journaloo.db.session import get_db
from journaloo.main import app


def test_unique_index_violation_reports_duplicate(client, user_token, monkeypatch):
    # Let the insert reach the unique index, as when two signups race
    monkeypatch.setattr(
        "journaloo.services.user_service._check_unique", lambda *args, **kwargs: None
    )

    response = client.post(
        "/user",
        json={"username": "jondoe", "email": "other@doe.com", "password": "asdf"}
    )
    assert response.status_code == 400
    assert response.json() == {"detail": "Username or email already exists"}

    response = client.post(
        "/user",
        json={"username": "someoneelse", "email": "someone@doe.com", "password": "asdf"}
    )
    assert response.status_code == 201


def test_failed_account_deletion_rolls_back(client, engine, user_token):
    user_id = decode(user_token)["id"]
    journey = create_journey(client, user_token)
    entry = create_entry(client, user_token, journey["id"], description="kept")

    def fail_journey_delete(conn, cursor, statement, parameters, context, executemany):
        if statement.startswith("DELETE FROM journeys"):
            raise OperationalError(statement, parameters, Exception("disk I/O error"))

    event.listen(engine, "before_cursor_execute", fail_journey_delete)
    try:
        response = client.delete("/user", headers=auth(user_token))
    finally:
        event.remove(engine, "before_cursor_execute", fail_journey_delete)

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}

    # The entries were deleted before the failure; the rollback restores them
    assert client.get(f"/user/{user_id}").status_code == 200
    assert client.get(f"/journey/{journey['id']}").status_code == 200
    restored = client.get(f"/entry/{entry['id']}")
    assert restored.status_code == 200
    assert restored.json()["description"] == "kept"


def test_exhausted_pool_returns_503(client):
    def exhausted_pool():
        raise PoolTimeoutError("QueuePool limit of size 5 overflow 10 reached")
        yield

    app.dependency_overrides[get_db] = exhausted_pool

    response = client.get("/user/1")
    assert response.status_code == 503
    assert response.json() == {"detail": "Service unavailable"}
