"""
Form schema model.

A schema is the authored directed graph of a form: ordered nodes and ordered
edges. Document order matters (first node is the entry node, first matching
edge wins), so both collections are kept as lists.

Nodes are parsed into one dataclass per kind. Kinds the engine does not
execute (transaction, logic, anything unknown) become `ExtensionNode` and keep
their payload untouched. Every parsed entry keeps the raw `data` mapping and any
unknown top-level keys so `to_document` reproduces what the editor saved.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from formflow.observability.logging import log

# Node kinds interpreted by the engine
START = "start"
INPUT = "input"
CHOICE = "choice"
END = "end"
# Everything else (transaction, logic, future editor kinds)
EXTENSION = "extension"

# Editor writes collecting nodes as type "question" + data.questionType
QUESTION = "question"

_NODE_KEYS = ("id", "type", "data")
_EDGE_KEYS = ("id", "source", "target", "data")


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _required_flag(data: Dict[str, Any]) -> bool:
    if data.get("required"):
        return True
    rules = data.get("validation")
    return isinstance(rules, dict) and bool(rules.get("required"))


@dataclass
class Node:
    id: str
    type: str
    data: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    kind = EXTENSION

    @property
    def prompt(self) -> Optional[str]:
        return _text(self.data.get("questionText"))


@dataclass
class StartNode(Node):
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None

    kind = START

    @property
    def prompt(self) -> Optional[str]:
        return self.description or _text(self.data.get("questionText"))


@dataclass
class InputNode(Node):
    question_text: Optional[str] = None
    required: bool = False
    placeholder: Optional[str] = None
    input_type: Optional[str] = None

    kind = INPUT

    @property
    def prompt(self) -> Optional[str]:
        return self.question_text


@dataclass
class ChoiceOption:
    value: Any
    label: Optional[str] = None


@dataclass
class ChoiceNode(Node):
    question_text: Optional[str] = None
    required: bool = False
    options: List[ChoiceOption] = field(default_factory=list)

    kind = CHOICE

    @property
    def prompt(self) -> Optional[str]:
        return self.question_text


@dataclass
class EndNode(Node):
    message: Optional[str] = None
    label: Optional[str] = None

    kind = END


@dataclass
class ExtensionNode(Node):
    """Node kind the engine passes through without interpreting."""


@dataclass
class EdgeCondition:
    operator: Optional[str] = None
    value: Any = None
    expected_answer: Optional[str] = None


@dataclass
class Edge:
    id: str
    source: str
    target: str
    # Carried for the editor; navigation does not evaluate it.
    condition: Optional[EdgeCondition] = None
    data: Optional[Dict[str, Any]] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class FormSchema:
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None

    def iter_nodes(self):
        return iter(self.nodes)

    def iter_edges(self):
        return iter(self.edges)


def _parse_options(raw: Any) -> List[ChoiceOption]:
    if not isinstance(raw, list):
        return []
    options = []
    for opt in raw:
        if isinstance(opt, dict) and "value" in opt:
            options.append(ChoiceOption(value=opt.get("value"), label=_text(opt.get("label"))))
    return options


def _collecting_kind(node_type: str, data: Dict[str, Any]) -> Optional[str]:
    if node_type in (INPUT, CHOICE):
        return node_type
    if node_type == QUESTION and data.get("questionType") in (INPUT, CHOICE):
        return data["questionType"]
    return None


def parse_node(raw: Dict[str, Any]) -> Node:
    node_id = raw["id"]
    node_type = raw.get("type") if isinstance(raw.get("type"), str) else ""
    data = raw.get("data") if isinstance(raw.get("data"), dict) else {}
    extra = {k: v for k, v in raw.items() if k not in _NODE_KEYS}
    base = dict(id=node_id, type=node_type, data=data, extra=extra)

    collecting = _collecting_kind(node_type, data)
    if collecting == INPUT:
        return InputNode(
            **base,
            question_text=_text(data.get("questionText")),
            required=_required_flag(data),
            placeholder=_text(data.get("placeholder")),
            input_type=_text(data.get("inputType")),
        )
    if collecting == CHOICE:
        return ChoiceNode(
            **base,
            question_text=_text(data.get("questionText")),
            required=_required_flag(data),
            options=_parse_options(data.get("options")),
        )
    if node_type == START:
        return StartNode(
            **base,
            title=_text(data.get("title")),
            description=_text(data.get("description")),
            image_url=_text(data.get("imageUrl")),
        )
    if node_type == END:
        return EndNode(**base, message=_text(data.get("message")), label=_text(data.get("label")))
    return ExtensionNode(**base)


def parse_edge(raw: Dict[str, Any]) -> Edge:
    data = raw.get("data") if isinstance(raw.get("data"), dict) else None
    condition = None
    cond = (data or {}).get("condition")
    if isinstance(cond, dict):
        condition = EdgeCondition(
            operator=_text(cond.get("operator")),
            value=cond.get("value"),
            expected_answer=_text(cond.get("expectedAnswer")),
        )
    edge_id = raw.get("id")
    return Edge(
        id=edge_id if isinstance(edge_id, str) else f"{raw['source']}->{raw['target']}",
        source=raw["source"],
        target=raw["target"],
        condition=condition,
        data=data,
        extra={k: v for k, v in raw.items() if k not in _EDGE_KEYS},
    )


def parse_schema(doc: Any) -> FormSchema:
    """
    Build a FormSchema from the stored JSON document.
    Never raises: entries that cannot be interpreted are skipped and logged.
    """
    if not isinstance(doc, dict):
        return FormSchema()

    nodes: List[Node] = []
    raw_nodes = doc.get("nodes") if isinstance(doc.get("nodes"), list) else []
    for i, raw in enumerate(raw_nodes):
        if not isinstance(raw, dict) or not isinstance(raw.get("id"), str):
            log("schema_entry_skipped", entry="node", position=i)
            continue
        nodes.append(parse_node(raw))

    edges: List[Edge] = []
    raw_edges = doc.get("edges") if isinstance(doc.get("edges"), list) else []
    for i, raw in enumerate(raw_edges):
        if (
            not isinstance(raw, dict)
            or not isinstance(raw.get("source"), str)
            or not isinstance(raw.get("target"), str)
        ):
            log("schema_entry_skipped", entry="edge", position=i)
            continue
        edges.append(parse_edge(raw))

    metadata = doc.get("metadata") if isinstance(doc.get("metadata"), dict) else None
    return FormSchema(nodes=nodes, edges=edges, metadata=metadata)


def node_to_document(node: Node) -> Dict[str, Any]:
    out = {"id": node.id, "type": node.type}
    out.update(node.extra)
    out["data"] = node.data
    return out


def edge_to_document(edge: Edge) -> Dict[str, Any]:
    out = {"id": edge.id, "source": edge.source, "target": edge.target}
    out.update(edge.extra)
    if edge.data is not None:
        out["data"] = edge.data
    return out


def to_document(schema: FormSchema) -> Dict[str, Any]:
    doc = {
        "nodes": [node_to_document(n) for n in schema.nodes],
        "edges": [edge_to_document(e) for e in schema.edges],
    }
    if schema.metadata is not None:
        doc["metadata"] = schema.metadata
    return doc
