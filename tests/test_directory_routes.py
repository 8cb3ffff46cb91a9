import pytest

from tests.conftest import seed_event, seed_participant, seed_user


def create_user(client, email="ann@example.com", name="Ann", role=None):
    body = {"email": email, "password": "secret1", "name": name, "department": "Sales"}
    if role:
        body["role"] = role
    response = client.post("/api/users", json=body)
    assert response.status_code == 201
    return response.get_json()


def test_health(client):
    body = client.get("/health").get_json()
    assert body["status"] == "healthy"
    assert body["timestamp"].endswith("Z")


def test_create_user_assigns_short_code(client, store, identity):
    created = create_user(client)
    code = created["shortCode"]
    assert len(code) == 6 and code.isalnum() and code.upper() == code

    doc = store.get_user(created["userId"])
    assert doc["role"] == "participant"
    assert doc["shortCode"] == code
    assert identity.accounts[created["userId"]]["email"] == "ann@example.com"


def test_create_user_validation(client):
    response = client.post("/api/users", json={"email": "a@b.c", "name": "A"})
    assert response.status_code == 400
    assert response.get_json() == {"error": "Email, password, name, and department are required"}


def test_duplicate_email_surfaces_as_server_error(client):
    create_user(client)
    response = client.post("/api/users", json={
        "email": "ann@example.com", "password": "x", "name": "Ann", "department": "Sales"
    })
    assert response.status_code == 500
    assert "already exists" in response.get_json()["error"]


def test_lookup_by_short_code(client, store):
    seed_user(store, "u1", "Ann", short_code="AB12CD")
    response = client.get("/api/users/shortcode/ab12cd")
    assert response.status_code == 200
    assert response.get_json()["id"] == "u1"
    assert client.get("/api/users/shortcode/ZZZZZZ").status_code == 404


def test_get_user_backfills_short_code(client, store):
    store.set_user("old", {"name": "Legacy", "role": "participant"})
    body = client.get("/api/users/old").get_json()
    assert len(body["shortCode"]) == 6
    assert store.get_user("old")["shortCode"] == body["shortCode"]
    assert client.get("/api/users/missing").status_code == 404


def test_update_profile_and_role(client, store, identity):
    created = create_user(client)
    uid = created["userId"]

    response = client.put(f"/api/users/{uid}/profile", json={"hobbies": "surfing", "email": "new@example.com", "role": "admin"})
    assert response.status_code == 200
    doc = store.get_user(uid)
    assert doc["hobbies"] == "surfing"
    assert doc["email"] == "new@example.com"
    assert doc["role"] == "participant"
    assert "profileUpdatedAt" in doc
    assert identity.accounts[uid]["email"] == "new@example.com"

    assert client.put(f"/api/users/{uid}/role", json={"role": "owner"}).status_code == 400
    assert client.put(f"/api/users/{uid}/role", json={"role": "admin"}).status_code == 200
    assert store.get_user(uid)["role"] == "admin"


def test_delete_user_cascades(client, store, identity):
    uid = create_user(client)["userId"]
    seed_event(store, "e1")
    seed_event(store, "e2", active=False)
    seed_participant(store, "e1", uid, "Ann")
    seed_participant(store, "e2", uid, "Ann")

    assert client.delete(f"/api/users/{uid}").status_code == 200

    assert store.get_user(uid) is None
    assert store.get_participant("e1", uid) is None
    assert store.get_participant("e2", uid) is None
    assert uid not in identity.accounts


def test_event_lifecycle(client, store):
    response = client.post("/api/events", json={"eventName": "Summer Party"})
    assert response.status_code == 201
    event_id = response.get_json()["eventId"]

    event = store.get_event(event_id)
    assert event["isActive"] is True
    assert len(event["surveyQuestions"]) == 2

    assert client.get("/api/events/active").get_json()["id"] == event_id

    questions = [{"id": 1, "question": "Favourite snack"}]
    assert client.put(f"/api/events/{event_id}", json={"isActive": False, "surveyQuestions": questions}).status_code == 200
    assert store.get_event(event_id)["surveyQuestions"] == questions
    assert client.get("/api/events/active").status_code == 404

    assert client.put("/api/events/nope", json={"isActive": True}).status_code == 404
    assert client.delete(f"/api/events/{event_id}").status_code == 200
    assert store.get_event(event_id) is None


def test_create_event_requires_name(client):
    assert client.post("/api/events", json={}).status_code == 400


def test_several_active_events_returns_first(client, store):
    seed_event(store, "e1")
    seed_event(store, "e2")
    response = client.get("/api/events/active")
    assert response.status_code == 200
    assert response.get_json()["id"] in ("e1", "e2")


def test_list_events_counts_participants(client, store):
    seed_event(store, "e1")
    seed_participant(store, "e1", "u1", "A")
    seed_participant(store, "e1", "u2", "B")
    [event] = client.get("/api/events").get_json()
    assert event["participantCount"] == 2


def test_add_participant_admin_gets_default_board(client, store):
    seed_event(store)
    seed_user(store, "boss", "Boss", role="admin")
    seed_user(store, "ann", "Ann")

    assert client.post("/api/events/ev1/participants", json={"userId": "boss"}).status_code == 200
    assert client.post("/api/events/ev1/participants", json={"userId": "ann"}).status_code == 200
    assert client.post("/api/events/ev1/participants", json={"userId": "ghost"}).status_code == 404

    boss = store.get_participant("ev1", "boss")
    assert boss["bingoReady"] is True
    assert len(boss["bingoBoard"]) == 9
    ann = store.get_participant("ev1", "ann")
    assert ann["bingoReady"] is False
    assert ann["bingoBoard"] == []

    listed = client.get("/api/events/ev1/participants").get_json()
    assert sorted(p["userName"] for p in listed) == ["Ann", "Boss"]

    assert client.delete("/api/events/ev1/participants/ann").status_code == 200
    assert store.get_participant("ev1", "ann") is None


def test_save_answers_invalidates_board(client, store):
    seed_event(store)
    seed_user(store, "ann", "Ann")
    seed_participant(store, "ev1", "ann", "Ann", bingoReady=True)

    response = client.post("/api/events/ev1/participants/me/answers", json={
        "userId": "ann", "answers": [{"questionId": 1, "answer": "Jazz"}, {"questionId": 2, "answer": "Yoga"}]
    })
    assert response.status_code == 200
    doc = store.get_participant("ev1", "ann")
    assert doc["answers"] == {"answer1": "Jazz", "answer2": "Yoga"}
    assert doc["bingoReady"] is False


@pytest.mark.parametrize("body, status", [
    ({"userId": "ann"}, 400),
    ({"userId": "ann", "answers": "Jazz"}, 400),
    ({"userId": "nobody", "answers": []}, 404),
])
def test_save_answers_rejections(client, store, body, status):
    seed_event(store)
    seed_user(store, "ann", "Ann")
    assert client.post("/api/events/ev1/participants/me/answers", json=body).status_code == status


def test_admin_stats(client, store):
    seed_event(store, "e1")
    seed_event(store, "e2", active=False)
    seed_participant(store, "e1", "u1", "A")
    seed_participant(store, "e2", "u1", "A")
    seed_participant(store, "e2", "u2", "B")
    assert client.get("/api/admin/stats").get_json() == {"totalEvents": 2, "activeEvents": 1, "uniqueParticipants": 2}


def test_unknown_route_is_json_404(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert "error" in response.get_json()


def test_delete_user_enrolled_in_many_events(client, store, identity):
    uid = create_user(client)["userId"]
    event_ids = [f"e{i:03d}" for i in range(620)]
    for event_id in event_ids:
        seed_event(store, event_id, active=False)
        seed_participant(store, event_id, uid, "Ann")

    commits_before = store.db.batch_commits
    assert client.delete(f"/api/users/{uid}").status_code == 200

    assert store.get_user(uid) is None
    assert all(store.get_participant(event_id, uid) is None for event_id in event_ids)
    # 620 participant records plus the user document
    assert store.db.batch_commits - commits_before == 2


def test_delete_event_with_many_participants(store):
    seed_event(store, "big")
    store.create_participants("big", {f"u{i:03d}": {"userName": f"User {i}"} for i in range(450)})
    store.create_participants("big", {f"v{i:03d}": {"userName": f"Guest {i}"} for i in range(450)})

    store.delete_event_cascade("big")

    assert store.get_event("big") is None
    assert store.list_participants("big") == []
