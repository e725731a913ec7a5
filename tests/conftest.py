"""
Pytest configuration for portfolio API tests

The app is exercised through TestClient with in-memory stand-ins for the
document store, object store and token verifier.
"""

import itertools
import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from auth import InvalidToken, TokenVerifier, get_verifier
from database import DocumentStore
from dependencies import get_object_store, get_store
from main import app
from storage import ObjectStore, StoredObject

ADMIN_TOKEN = "valid-admin-token"
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryDocumentStore(DocumentStore):
    def __init__(self):
        self.collections = {}
        self._seq = itertools.count()

    def _col(self, collection):
        return self.collections.setdefault(collection, {})

    def add(self, collection, data):
        doc_id = uuid.uuid4().hex
        self._col(collection)[doc_id] = (next(self._seq), dict(data))
        return doc_id

    def list(self, collection, filter_dict=None):
        filter_dict = filter_dict or {}
        rows = [
            (seq, doc_id, doc)
            for doc_id, (seq, doc) in self._col(collection).items()
            if all(doc.get(k) == v for k, v in filter_dict.items())
        ]
        rows.sort(key=lambda r: (r[2].get("createdAt") or _EPOCH, r[0]), reverse=True)
        return [{"id": doc_id, **doc} for _, doc_id, doc in rows]

    def get(self, collection, doc_id):
        row = self._col(collection).get(doc_id)
        if row is None:
            return None
        return {"id": doc_id, **row[1]}

    def find_one(self, collection, filter_dict):
        for doc in self.list(collection, filter_dict):
            return doc
        return None

    def update(self, collection, doc_id, data):
        row = self._col(collection).get(doc_id)
        if row is None:
            return False
        row[1].update(data)
        return True

    def delete(self, collection, doc_id):
        return self._col(collection).pop(doc_id, None) is not None

    def ping(self):
        return list(self.collections)

    def count(self, collection):
        return len(self._col(collection))


class InMemoryObjectStore(ObjectStore):
    def __init__(self):
        self.objects = {}

    def put(self, name, data, content_type=None):
        self.objects[name] = StoredObject(name=name, data=data, content_type=content_type)
        return name

    def open(self, name):
        return self.objects.get(name)


class StaticTokenVerifier(TokenVerifier):
    def __init__(self, tokens):
        self.tokens = tokens
        self.calls = []

    def verify(self, token):
        self.calls.append(token)
        if token not in self.tokens:
            raise InvalidToken("unknown token")
        return self.tokens[token]


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def objects():
    return InMemoryObjectStore()


@pytest.fixture
def verifier():
    return StaticTokenVerifier({ADMIN_TOKEN: {"sub": "admin@portfolio.dev", "role": "admin"}})


@pytest.fixture
def client(store, objects, verifier):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_object_store] = lambda: objects
    app.dependency_overrides[get_verifier] = lambda: verifier
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
