"""
Спільні фікстури: Firestore у пам'яті та фейковий верифікатор токенів.
Жодних реальних викликів Firebase у тестах.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from google.cloud.firestore_v1 import DELETE_FIELD

from api.deps import get_identity_verifier
from core.config import Settings, get_settings
from core.firebase import IdentityError
from database import Database, get_db
from main import app


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self._collection.docs.get(self.id))

    def set(self, data):
        self._collection.docs[self.id] = dict(data)

    def update(self, data):
        self._collection.writes += 1
        doc = self._collection.docs[self.id]
        for key, value in data.items():
            if value is DELETE_FIELD:
                doc.pop(key, None)
            else:
                doc[key] = value

    def delete(self):
        self._collection.docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, collection, filters=()):
        self._collection = collection
        self._filters = list(filters)

    def where(self, filter):
        return FakeQuery(self._collection, self._filters + [filter])

    def limit(self, count):
        return self

    def stream(self):
        self._collection.reads += 1
        if self._collection.fail_with is not None:
            raise self._collection.fail_with
        for doc_id, data in list(self._collection.docs.items()):
            if all(f.op_string == "==" and data.get(f.field_path) == f.value for f in self._filters):
                yield FakeSnapshot(doc_id, data)


class FakeCollection(FakeQuery):
    def __init__(self):
        self.docs = {}
        self.writes = 0
        self.reads = 0
        self.fail_with = None
        super().__init__(self)

    def document(self, doc_id):
        return FakeDocumentRef(self, doc_id)

    def add(self, data):
        doc_ref = self.document(uuid4().hex[:20])
        doc_ref.set(data)
        return datetime.now(timezone.utc), doc_ref

    def seed(self, data, created_offset=0):
        """Додає сирий документ (як від старої версії сервісу)."""
        doc = dict(data)
        doc.setdefault("createdAt", datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=created_offset))
        _, doc_ref = self.add(doc)
        return doc_ref.id


class FakeFirestore:
    def __init__(self):
        self.collections = {}
        self.closed = False

    def close(self):
        self.closed = True

    def collection(self, name):
        return self.collections.setdefault(name, FakeCollection())


class FakeVerifier:
    tokens = {
        "token-alice": "alice@example.com",
        "token-bob": "bob@example.com",
    }

    def verify(self, token):
        if token not in self.tokens:
            raise IdentityError("Token invalid or expired")
        return self.tokens[token]


@pytest.fixture
def firestore_db():
    return FakeFirestore()


@pytest.fixture
def db(firestore_db):
    return Database(firestore_db)


@pytest.fixture
def settings():
    return Settings(MULTI_TENANT=False, _env_file=None)


@pytest.fixture
def tenant_settings():
    return Settings(MULTI_TENANT=True, _env_file=None)


def _client(db, settings):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_identity_verifier] = FakeVerifier
    return TestClient(app)


@pytest.fixture
def client(db, settings):
    yield _client(db, settings)
    app.dependency_overrides.clear()


@pytest.fixture
def tenant_client(db, tenant_settings):
    yield _client(db, tenant_settings)
    app.dependency_overrides.clear()
