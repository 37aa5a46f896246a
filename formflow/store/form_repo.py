import json
import time
import uuid
from dataclasses import asdict, fields as dc_fields
from typing import Any, Dict, List, Optional

from formflow.core.errors import FormNotFound
from formflow.observability.logging import log
from formflow.settings import settings
from formflow.store.kv import KeyValueStore, get_store
from formflow.store.models import FormRecord

_UPDATABLE = ("title", "description", "schema", "isActive")


def _key(form_id: str) -> str:
    return f"{settings.FORM_KEY_PREFIX}{form_id}"


def _creator_key(creator_address: str) -> str:
    return f"{settings.FORM_CREATOR_KEY_PREFIX}{creator_address}"


def _filter_record_kwargs(data: dict) -> dict:
    """Drop unknown fields so FormRecord(**kwargs) never explodes"""
    allowed = {f.name for f in dc_fields(FormRecord)}
    return {k: v for k, v in data.items() if k in allowed}


def load_form(form_id: str, store: KeyValueStore = None) -> FormRecord:
    """
    Whole form record or FormNotFound. A stored value that is not a JSON
    object is reported as not found rather than partially loaded.
    """
    if store is None:
        store = get_store()
    raw = store.get(_key(form_id))
    if not raw:
        raise FormNotFound(form_id)
    try:
        data = json.loads(raw)
    except ValueError:
        log("form_malformed", formId=form_id, length=len(raw))
        raise FormNotFound(form_id)
    if not isinstance(data, dict):
        log("form_malformed", formId=form_id, length=len(raw))
        raise FormNotFound(form_id)

    data["id"] = form_id
    data["title"] = data.get("title") or ""
    if not isinstance(data.get("schema"), dict):
        data["schema"] = {}
    return FormRecord(**_filter_record_kwargs(data))


def save_form(record: FormRecord, store: KeyValueStore = None) -> None:
    if store is None:
        store = get_store()
    record.updatedAtEpoch = int(time.time())
    store.set(_key(record.id), json.dumps(asdict(record)))
    log(
        "form_saved",
        formId=record.id,
        nodes=len(record.schema.get("nodes") or []),
        edges=len(record.schema.get("edges") or []),
    )


def _creator_form_ids(creator_address: str, store: KeyValueStore) -> List[str]:
    raw = store.get(_creator_key(creator_address))
    if not raw:
        return []
    try:
        ids = json.loads(raw)
    except ValueError:
        return []
    return [i for i in ids if isinstance(i, str)] if isinstance(ids, list) else []


def create_form(
    title: str,
    schema: Dict[str, Any],
    description: Optional[str] = None,
    creator_address: Optional[str] = None,
    store: KeyValueStore = None,
) -> FormRecord:
    if store is None:
        store = get_store()
    now = int(time.time())
    record = FormRecord(
        id=uuid.uuid4().hex,
        title=title,
        description=description,
        creatorAddress=creator_address or settings.DEFAULT_CREATOR_ADDRESS,
        schema=schema or {},
        createdAtEpoch=now,
    )
    save_form(record, store=store)

    # Creator index is last-write-wins, same as every other key here
    ids = _creator_form_ids(record.creatorAddress, store)
    ids.append(record.id)
    store.set(_creator_key(record.creatorAddress), json.dumps(ids))
    return record


def update_form(form_id: str, changes: Dict[str, Any], store: KeyValueStore = None) -> FormRecord:
    if store is None:
        store = get_store()
    record = load_form(form_id, store=store)
    for k in _UPDATABLE:
        if k in changes and changes[k] is not None:
            setattr(record, k, changes[k])
    save_form(record, store=store)
    return record


def list_forms_by_creator(creator_address: str, store: KeyValueStore = None) -> List[FormRecord]:
    """Newest first; ids whose document vanished are skipped."""
    if store is None:
        store = get_store()
    out = []
    for form_id in _creator_form_ids(creator_address, store):
        try:
            out.append(load_form(form_id, store=store))
        except FormNotFound:
            continue
    return sorted(out, key=lambda r: int(r.createdAtEpoch or 0), reverse=True)
