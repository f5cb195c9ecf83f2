"""Pytest configuration and fixtures for the Vismoh API tests."""
import os

import mongomock
import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("JWT_SECRET", "test-secret")

from config import Settings  # noqa: E402
from database import ACCOUNT, ROLE_COLLECTIONS, create_document  # noqa: E402
from main import create_app  # noqa: E402
from security import create_access_token  # noqa: E402


class FakeAI:
    """Records prompts and replays canned model replies."""

    def __init__(self):
        self.replies = []
        self.prompts = []

    def queue(self, *replies):
        self.replies.extend(replies)

    def generate(self, prompt, max_output_tokens=None):
        self.prompts.append(prompt)
        if self.replies:
            return self.replies.pop(0)
        return "{}"


class FakeMedia:
    """Stands in for the media host; every upload gets a predictable URL."""

    def __init__(self):
        self.uploads = []
        self.destroyed = []

    def upload(self, content, folder, resource_type="auto"):
        n = len(self.uploads) + 1
        public_id = f"VISMOH/{folder}/file{n}"
        self.uploads.append({"folder": folder, "resource_type": resource_type, "size": len(content)})
        return {
            "secure_url": f"https://res.cloudinary.com/demo/{resource_type}/upload/v1700000000/{public_id}.bin",
            "public_id": public_id,
            "format": "bin",
        }

    def destroy(self, public_id, resource_type="image"):
        self.destroyed.append((public_id, resource_type))


@pytest.fixture
def db():
    return mongomock.MongoClient()["vismoh_test"]


@pytest.fixture
def ai():
    return FakeAI()


@pytest.fixture
def media():
    return FakeMedia()


@pytest.fixture
def app(db, ai, media):
    return create_app(db=db, ai=ai, media=media)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def token(db):
    db[ACCOUNT].insert_one({"_id": "requester@vismoh.io", "uid": "requester", "password_hash": "", "displayName": "Requester"})
    return create_access_token({"id": "requester", "email": "requester@vismoh.io", "role": "Athlete"}, Settings)


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def seed_profile(db, role, user_id, **fields):
    doc = {
        "authId": user_id,
        "firstName": fields.pop("firstName", user_id.capitalize()),
        "lastName": fields.pop("lastName", "Test"),
        "role": role,
        "email": f"{user_id}@vismoh.io",
        "isVerified": False,
        **fields,
    }
    create_document(db, ROLE_COLLECTIONS[role], doc, doc_id=user_id)
    return doc


@pytest.fixture
def seed(db):
    def _seed(role, user_id, **fields):
        return seed_profile(db, role, user_id, **fields)
    return _seed
