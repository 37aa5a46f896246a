"""
Node -> action descriptor rendering.

Output shape (consumed by action clients, keep keys stable):

    {
      "icon": str, "title": str, "description": str, "label": str,
      "links": {"actions": [{"label": str, "href": str, ...}]},
      "error": {"message": str}          # only on re-prompts
    }

Query parameter names in hrefs are part of the wire contract:
`next_node` (start), `node` (input), `choice` + `next` (choice), `next` (default).
"""
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlencode

from formflow.core.schema import CHOICE, END, INPUT, START, ChoiceNode, Node
from formflow.settings import settings

END_SENTINEL = "end"

DEFAULT_DESCRIPTION = "Complete the form"
DEFAULT_INPUT_LABEL = "Enter your response"
DEFAULT_COMPLETION_MESSAGE = "Thank you for your response!"

LABEL_START = "Start"
LABEL_CONTINUE = "Continue"
LABEL_COMPLETE = "Complete"
LABEL_FINISH = "Finish"


def _actions_path(form_id: str) -> str:
    return f"{settings.ACTIONS_BASE_URL}/api/actions/{quote(str(form_id), safe='')}"


def action_href(form_id: str, **params: Any) -> str:
    query = urlencode({k: v for k, v in params.items() if v is not None})
    path = _actions_path(form_id)
    return f"{path}?{query}" if query else path


def completion_href() -> str:
    return f"{settings.ACTIONS_BASE_URL}/api/actions/complete"


def _base(form_title: str, description: str, label: str) -> Dict[str, Any]:
    return {
        "icon": settings.ACTION_ICON_URL,
        "title": form_title,
        "description": description,
        "label": label,
        "links": {"actions": []},
    }


def _start_actions(form_id: str, node: Node, next_node_id: Optional[str]) -> List[Dict[str, Any]]:
    return [{"label": LABEL_START, "href": action_href(form_id, next_node=next_node_id or END_SENTINEL)}]


def _input_actions(form_id: str, node: Node, next_node_id: Optional[str]) -> List[Dict[str, Any]]:
    return [{
        "label": node.prompt or DEFAULT_INPUT_LABEL,
        "href": action_href(form_id, node=node.id),
        "parameters": [{
            "name": "input",
            "label": node.prompt or DEFAULT_INPUT_LABEL,
            "required": bool(getattr(node, "required", False)),
        }],
    }]


def _choice_actions(form_id: str, node: ChoiceNode, next_node_id: Optional[str]) -> List[Dict[str, Any]]:
    return [
        {
            "label": opt.label or str(opt.value),
            "href": action_href(form_id, choice=opt.value, next=next_node_id or END_SENTINEL),
        }
        for opt in node.options
    ]


def _default_actions(form_id: str, node: Node, next_node_id: Optional[str]) -> List[Dict[str, Any]]:
    return [{"label": LABEL_CONTINUE, "href": action_href(form_id, next=next_node_id or END_SENTINEL)}]


_ACTION_BUILDERS = {
    START: _start_actions,
    INPUT: _input_actions,
    CHOICE: _choice_actions,
}


def render_completion(form_title: str, message: Optional[str] = None) -> Dict[str, Any]:
    out = _base(form_title, message or DEFAULT_COMPLETION_MESSAGE, LABEL_COMPLETE)
    out["links"]["actions"] = [{"label": LABEL_FINISH, "href": completion_href()}]
    return out


def render(
    form_title: str,
    node: Node,
    next_node_id: Optional[str] = None,
    form_id: str = "",
    error: Optional[str] = None,
) -> Dict[str, Any]:
    """Pure: the same (node, next_node_id) always yields the same descriptor."""
    if node.kind == END:
        out = render_completion(form_title, getattr(node, "message", None))
    else:
        label = LABEL_START if node.kind == START else LABEL_CONTINUE
        out = _base(form_title, node.prompt or DEFAULT_DESCRIPTION, label)
        build = _ACTION_BUILDERS.get(node.kind, _default_actions)
        out["links"]["actions"] = build(form_id, node, next_node_id)

    if error:
        out["error"] = {"message": error}
    return out
