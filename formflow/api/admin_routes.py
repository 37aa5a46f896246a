from fastapi import APIRouter, Depends

from formflow.api.auth import require_admin
from formflow.core.errors import NodeNotFound
from formflow.core.navigator import entry_node
from formflow.core.schema import parse_schema
from formflow.store.form_repo import load_form
from formflow.store.session_repo import load_position, reset

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/session/{form_id}/{account}")
def get_session_snapshot(form_id: str, account: str, _=Depends(require_admin)):
    """Where a participant currently stands, and whether that is stored or the default."""
    form = load_form(form_id)
    entry = entry_node(parse_schema(form.schema))
    if entry is None:
        raise NodeNotFound(form_id)

    position = load_position(form_id, account)
    return {
        "formId": form_id,
        "account": account,
        "currentNodeId": position.currentNodeId if position else entry.id,
        "stored": position is not None,
    }


@router.delete("/session/{form_id}/{account}")
def reset_session(form_id: str, account: str, _=Depends(require_admin)):
    """Send a participant back to the entry node on their next request."""
    reset(form_id, account)
    return {"formId": form_id, "account": account, "reset": True}
