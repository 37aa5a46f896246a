import json
from dataclasses import asdict
from typing import Optional

from formflow.observability.logging import log
from formflow.settings import settings
from formflow.store.kv import KeyValueStore, get_store
from formflow.store.models import SessionPosition


def _key(form_id: str, participant_id: str) -> str:
    return f"{settings.SESSION_KEY_PREFIX}{form_id}:{participant_id}"


def _parse_position(raw: str) -> Optional[SessionPosition]:
    """
    Stored value -> SessionPosition, or None when it cannot be trusted.
    Older writers used `current_node_id`; both spellings are read.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    node_id = data.get("currentNodeId") or data.get("current_node_id")
    if not isinstance(node_id, str) or not node_id:
        return None
    return SessionPosition(currentNodeId=node_id)


def load_position(form_id: str, participant_id: str, store: KeyValueStore = None) -> Optional[SessionPosition]:
    """None when no session exists or the stored value is malformed."""
    if store is None:
        store = get_store()
    key = _key(form_id, participant_id)
    raw = store.get(key)
    if not raw:
        return None
    position = _parse_position(raw)
    if position is None:
        log("session_malformed", formId=form_id, key=key, length=len(raw))
    return position


def get_current_node(form_id: str, participant_id: str, entry_node_id: str, store: KeyValueStore = None) -> str:
    """
    Participant's current node id, falling back to `entry_node_id` when there is
    no session or the stored value is unusable. Store outages propagate.
    """
    position = load_position(form_id, participant_id, store=store)
    if position is None:
        return entry_node_id
    return position.currentNodeId


def advance(form_id: str, participant_id: str, node_id: str, store: KeyValueStore = None) -> None:
    if store is None:
        store = get_store()
    payload = json.dumps(asdict(SessionPosition(currentNodeId=node_id)))
    store.set(_key(form_id, participant_id), payload, ttl_seconds=settings.SESSION_TTL_SEC)
    log("session_advanced", formId=form_id, nodeId=node_id)


def reset(form_id: str, participant_id: str, store: KeyValueStore = None) -> None:
    if store is None:
        store = get_store()
    store.delete(_key(form_id, participant_id))
    log("session_reset", formId=form_id)
