import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from formflow.core import flow_states as fs
from formflow.core.errors import NodeNotFound
from formflow.core.navigator import entry_node, find_node, next_node, next_node_id
from formflow.core.renderer import render, render_completion
from formflow.core.schema import parse_schema
from formflow.core.validator import is_acceptable, rejection_message
from formflow.observability.logging import log
from formflow.store.form_repo import load_form
from formflow.store.kv import KeyValueStore, get_store
from formflow.store.session_repo import advance, get_current_node


class _NoSubmission:
    def __repr__(self):
        return "NO_SUBMISSION"


# Distinguishes "nothing submitted" from a submitted null/empty value
NO_SUBMISSION = _NoSubmission()


@dataclass
class FlowOutcome:
    state: str
    nodeId: Optional[str]
    response: Dict[str, Any]
    # Node the request was evaluated against (before any advance)
    fromNodeId: Optional[str] = None


def handle_action(
    form_id: str,
    account: Optional[str] = None,
    submission: Any = NO_SUBMISSION,
    store: KeyValueStore = None,
) -> FlowOutcome:
    """
    Serve one action request: render the participant's current step, or
    validate a submission against it and move along the first outgoing edge.

    Without an account the request is anonymous and always sits at the entry
    node; nothing is validated or stored. A stored position missing from the
    schema raises NodeNotFound. FormNotFound / StoreUnavailable propagate to
    the caller untouched.
    """
    start_time = time.time()
    if store is None:
        store = get_store()

    form = load_form(form_id, store=store)
    schema = parse_schema(form.schema)

    entry = entry_node(schema)
    if entry is None:
        raise NodeNotFound(form_id)

    if not account:
        outcome = FlowOutcome(
            state=fs.AT_ENTRY,
            nodeId=entry.id,
            response=render(form.title, entry, next_node_id(schema, entry.id), form_id=form_id),
            fromNodeId=entry.id,
        )
        _log_outcome(form_id, account, outcome, submission, start_time)
        return outcome

    current_id = get_current_node(form_id, account, entry.id, store=store)
    current = find_node(schema, current_id)
    if current is None:
        # Schema edited after the session began; never rewrite the stored position
        log("session_stale", formId=form_id, nodeId=current_id)
        raise NodeNotFound(form_id, current_id)

    if submission is NO_SUBMISSION:
        state = fs.AT_ENTRY if current.id == entry.id else fs.AWAITING_INPUT
        outcome = FlowOutcome(
            state=state,
            nodeId=current.id,
            response=render(form.title, current, next_node_id(schema, current.id), form_id=form_id),
        )
    elif not is_acceptable(current, submission):
        outcome = FlowOutcome(
            state=fs.INVALID,
            nodeId=current.id,
            response=render(
                form.title,
                current,
                next_node_id(schema, current.id),
                form_id=form_id,
                error=rejection_message(current),
            ),
        )
    else:
        target = next_node(schema, current.id)
        if target is None:
            outcome = FlowOutcome(
                state=fs.TERMINAL,
                nodeId=current.id,
                response=render_completion(form.title),
            )
        else:
            advance(form_id, account, target.id, store=store)
            outcome = FlowOutcome(
                state=fs.ADVANCED,
                nodeId=target.id,
                response=render(form.title, target, next_node_id(schema, target.id), form_id=form_id),
            )

    outcome.fromNodeId = current.id
    _log_outcome(form_id, account, outcome, submission, start_time)
    return outcome


def _log_outcome(form_id, account, outcome: FlowOutcome, submission, start_time: float) -> None:
    log(
        "action_processed",
        formId=form_id,
        hasAccount=bool(account),
        submitted=submission is not NO_SUBMISSION,
        state=outcome.state,
        nodeId=outcome.nodeId,
        total_latency_ms=int((time.time() - start_time) * 1000),
    )
