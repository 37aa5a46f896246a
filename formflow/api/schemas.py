from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

class ActionParameter(BaseModel):
    name: str
    label: Optional[str] = None
    required: Optional[bool] = None

class ActionLink(BaseModel):
    label: str
    href: str
    parameters: Optional[List[ActionParameter]] = None

class ActionLinks(BaseModel):
    actions: List[ActionLink] = Field(default_factory=list)

class ActionError(BaseModel):
    message: str

class ActionGetResponse(BaseModel):
    icon: str
    title: str
    description: str
    label: str
    links: ActionLinks
    error: Optional[ActionError] = None

class FormCreateRequest(BaseModel):
    title: str
    description: Optional[str] = None
    schema_: Dict[str, Any] = Field(default_factory=dict, alias="schema")
    creatorAddress: Optional[str] = None

class FormUpdateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    schema_: Optional[Dict[str, Any]] = Field(default=None, alias="schema")
    isActive: Optional[bool] = None

class FormCreatedResponse(BaseModel):
    id: str
