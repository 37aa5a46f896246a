from typing import Any, Optional

from formflow.core.schema import ChoiceNode, InputNode, Node

REQUIRED_MESSAGE = "This field is required"
UNLISTED_CHOICE_MESSAGE = "Please pick one of the listed options"


def is_required(node: Node) -> bool:
    return bool(getattr(node, "required", False))


def is_acceptable(node: Node, value: Any) -> bool:
    """
    Decide whether `value` may be recorded against `node`.

    Nodes are optional unless marked required, and then any value (absent
    included) passes. Required input nodes need a non-blank string; required
    choice nodes need the exact `value` of one declared option, same type
    included (True does not match 1). Kinds that collect nothing always pass. Wrong-shaped values fail instead of raising.
    """
    if not is_required(node):
        return True

    if isinstance(node, InputNode):
        return isinstance(value, str) and len(value.strip()) > 0

    if isinstance(node, ChoiceNode):
        if value is None or value == "":
            return False
        return any(type(opt.value) is type(value) and opt.value == value for opt in node.options)

    return True


def rejection_message(node: Node) -> Optional[str]:
    if isinstance(node, InputNode):
        return REQUIRED_MESSAGE
    if isinstance(node, ChoiceNode):
        return UNLISTED_CHOICE_MESSAGE
    return None
