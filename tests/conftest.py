import json
from unittest.mock import patch

import pytest

from formflow.settings import settings


class MemoryStore:
    """Dict-backed stand-in for the key-value store (get / set / delete)."""

    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.writes = []

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ttl_seconds=None):
        self.data[key] = value
        self.ttls[key] = ttl_seconds
        self.writes.append(key)

    def delete(self, key):
        self.data.pop(key, None)
        self.ttls.pop(key, None)


def _put_form(store, form_id, schema, title="Test Form"):
    store.set(
        f"{settings.FORM_KEY_PREFIX}{form_id}",
        json.dumps({"id": form_id, "title": title, "schema": schema}),
    )
    store.writes.clear()


QUESTIONNAIRE = {
    "nodes": [
        {"id": "q1", "type": "input", "data": {"questionText": "What is your name?", "required": True}},
        {
            "id": "q2",
            "type": "choice",
            "data": {
                "questionText": "Do you agree?",
                "required": True,
                "options": [{"label": "Yes", "value": "yes"}, {"label": "No", "value": "no"}],
            },
        },
    ],
    "edges": [{"id": "e1", "source": "q1", "target": "q2"}],
}


@pytest.fixture(autouse=True)
def plain_rendering():
    with patch.object(settings, "ACTIONS_BASE_URL", ""), patch.object(settings, "SESSION_TTL_SEC", 3600):
        yield


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def put_form():
    return _put_form


@pytest.fixture
def questionnaire(store):
    _put_form(store, "f1", QUESTIONNAIRE)
    return store


@pytest.fixture
def wired_store(store):
    """Routes every default get_store() lookup to the in-memory store."""
    with patch("formflow.store.form_repo.get_store", return_value=store), \
         patch("formflow.store.session_repo.get_store", return_value=store), \
         patch("formflow.core.orchestrator.get_store", return_value=store):
        yield store
