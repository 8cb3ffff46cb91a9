import os
import tempfile

# Component loggers open their files at import time
os.environ.setdefault("ENQUEST_LOG_DIR", tempfile.mkdtemp(prefix="enquest-logs-"))

import pytest

from enquest.config import Config
from enquest.models import EventParticipant, User
from enquest.server import create_app
from enquest.services.content_generator import ContentGenerator
from enquest.utils.firestore_store import FirestoreStore
from tests.fakes import FakeFirestore, FakeIdentity, FakeTextClient


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def store(db):
    return FirestoreStore(db)


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def text_client():
    return FakeTextClient()


@pytest.fixture
def generator(text_client):
    return ContentGenerator(text_client)


@pytest.fixture
def app(store, identity, text_client):
    app = create_app(Config(), store=store, identity=identity, text_client=text_client)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def seed_user(store, user_id, name, role="participant", short_code=None, **profile):
    data = {
        "name": name,
        "email": f"{user_id}@example.com",
        "department": profile.pop("department", "Engineering"),
        "role": role,
        "shortCode": short_code or user_id.upper()[:6],
        "createdAt": "2026-01-01T00:00:00Z",
    }
    data.update(profile)
    store.set_user(user_id, data)
    return data


def seed_event(store, event_id="ev1", name="Spring Offsite", active=True, questions=None):
    data = {
        "eventName": name,
        "isActive": active,
        "surveyQuestions": questions if questions is not None else [
            {"id": 1, "question": "A song you've been listening to a lot lately"},
            {"id": 2, "question": "Something you're into lately"},
        ],
        "createdAt": "2026-01-01T00:00:00Z",
    }
    store.db.collection("events").document(event_id).set(data)
    return data


def seed_participant(store, event_id, user_id, name, **fields):
    doc = EventParticipant.new(User(id=user_id, name=name)).to_doc()
    doc.update(fields)
    store.set_participant(event_id, user_id, doc)
    return doc
