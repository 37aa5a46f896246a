from dataclasses import dataclass, field
from typing import Any, Dict, Optional

@dataclass
class SessionPosition:
    # Only persisted engine state: one node id per (form, participant)
    currentNodeId: str = ""

@dataclass
class FormRecord:
    id: str = ""
    title: str = ""
    description: Optional[str] = None
    creatorAddress: str = ""

    # Opaque authored graph document ({nodes, edges, metadata})
    schema: Dict[str, Any] = field(default_factory=dict)
    isActive: bool = True

    createdAtEpoch: Optional[int] = None
    updatedAtEpoch: Optional[int] = None
