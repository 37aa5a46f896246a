from typing import Any, Optional, Tuple

from fastapi import APIRouter, Body, Query
from starlette.concurrency import run_in_threadpool

from formflow.api.schemas import ActionGetResponse
from formflow.core.orchestrator import NO_SUBMISSION, handle_action
from formflow.core.renderer import DEFAULT_COMPLETION_MESSAGE
from formflow.observability.logging import log

router = APIRouter()

# Served at the domain root so action clients can discover the API paths
ACTIONS_MANIFEST = {
    "rules": [
        {"pathPattern": "/api/actions/**", "apiPath": "/api/actions/**"},
    ]
}


def _extract_submission(
    payload: Any,
    account_q: Optional[str],
    input_q: Optional[str],
    choice_q: Optional[str],
    step_q: Optional[str] = None,
) -> Tuple[Optional[str], Any]:
    """
    Participant id and submitted value for a POST.
    Body wins over query; `input` wins over `choice`. A Start or Continue
    click (`next_node` / `next` only) submits None, which steps that
    collect nothing accept. The value stays NO_SUBMISSION when nothing was
    sent at all.
    """
    body = payload if isinstance(payload, dict) else {}

    account = body.get("account") if isinstance(body.get("account"), str) else None
    account = account or account_q

    if "input" in body:
        return account, body["input"]
    if input_q is not None:
        return account, input_q
    if choice_q is not None:
        return account, choice_q
    if step_q is not None:
        return account, None
    return account, NO_SUBMISSION


@router.get("/actions.json")
def actions_manifest():
    return ACTIONS_MANIFEST


@router.get("/api/actions/complete")
def action_complete():
    return {"message": DEFAULT_COMPLETION_MESSAGE}


@router.get(
    "/api/actions/{form_id}",
    response_model=ActionGetResponse,
    response_model_exclude_none=True,
)
async def get_action(form_id: str, account: Optional[str] = Query(None)):
    out = await run_in_threadpool(handle_action, form_id, account)
    return out.response


@router.post(
    "/api/actions/{form_id}",
    response_model=ActionGetResponse,
    response_model_exclude_none=True,
)
async def post_action(
    form_id: str,
    payload: Any = Body(None),
    account: Optional[str] = Query(None),
    input_value: Optional[str] = Query(None, alias="input"),
    choice: Optional[str] = Query(None),
    node: Optional[str] = Query(None),
    next_node: Optional[str] = Query(None),
    next_hint: Optional[str] = Query(None, alias="next"),
):
    participant, submission = _extract_submission(
        payload, account, input_value, choice, next_node if next_node is not None else next_hint
    )
    out = await run_in_threadpool(handle_action, form_id, participant, submission)

    # Hints describe what the client rendered; the stored position is authoritative
    if node and participant and node != out.fromNodeId:
        log(
            "node_hint_mismatch",
            formId=form_id,
            nodeHint=node,
            evaluatedNodeId=out.fromNodeId,
            nextHint=next_hint,
        )
    return out.response
