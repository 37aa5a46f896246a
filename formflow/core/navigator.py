from typing import List, Optional

from formflow.core.schema import Edge, FormSchema, Node


def find_node(schema: FormSchema, node_id: Optional[str]) -> Optional[Node]:
    """None is an expected outcome (stale id, schema edited mid-session)."""
    if not node_id:
        return None
    return next((n for n in schema.nodes if n.id == node_id), None)


def entry_node(schema: FormSchema) -> Optional[Node]:
    """The first node in document order; None only for an empty schema."""
    if not schema.nodes:
        return None
    return schema.nodes[0]


def outgoing_edges(schema: FormSchema, node_id: str) -> List[Edge]:
    return [e for e in schema.edges if e.source == node_id]


def next_node(schema: FormSchema, current_node_id: str) -> Optional[Node]:
    """
    Follow the first edge (document order) leaving `current_node_id`.

    Authors express the default branch through declaration order, so the
    first edge wins even when several share the source. Edge conditions are
    not evaluated here; a condition-aware branch resolver would replace the
    `[0]` pick below.
    """
    edges = outgoing_edges(schema, current_node_id)
    if not edges:
        return None
    return find_node(schema, edges[0].target)


def next_node_id(schema: FormSchema, current_node_id: str) -> Optional[str]:
    node = next_node(schema, current_node_id)
    return node.id if node else None
