from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Literal, Optional

from .errors import ConfigurationError

Role = Literal["system", "user", "assistant"]

class ContentPart(BaseModel):
    type: str = "input_text"
    text: str

class Message(BaseModel):
    role: Role
    content: List[ContentPart]

    @classmethod
    def of(cls, role: Role, text: str) -> "Message":
        # Responses API input: assistant turns are output_text, everything else input_text
        part_type = "output_text" if role == "assistant" else "input_text"
        return cls(role=role, content=[ContentPart(type=part_type, text=text)])

    @property
    def text(self) -> str:
        return "".join(part.text for part in self.content)

class AgentConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = "Agent"
    instructions: Optional[str] = Field(default=None, validate_default=True)
    model: str = "gpt-4o-mini"
    api_key: Optional[str] = None

    @field_validator("instructions", mode="before")
    @classmethod
    def _require_instructions(cls, value):
        # ConfigurationError is not a ValueError, so pydantic lets it propagate as-is
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError("Agent instructions are required.")
        return value

class HostedAgentOptions(BaseModel):
    """
    Identifiers for a call to a hosted (Agent Builder) agent.

    session_id: reused across calls so the service recalls prior turns.
    workflow_id: correlates the call with a workflow trace.
    """
    model_config = ConfigDict(frozen=True)

    agent_id: str
    session_id: Optional[str] = None
    workflow_id: Optional[str] = None

    def request_fields(self) -> Dict[str, Any]:
        fields = {"agent_id": self.agent_id}
        if self.session_id:
            fields["session_id"] = self.session_id
        if self.workflow_id:
            fields["workflow_id"] = self.workflow_id
        return fields

# HTTP request bodies

class RequestBody(BaseModel):
    # Non-string values are treated as absent, same as a missing field
    @field_validator("*", mode="before")
    @classmethod
    def _strings_only(cls, value):
        return value if isinstance(value, str) else None

class JokeRequest(RequestBody):
    topic: Optional[str] = None

class AgentJokeRequest(RequestBody):
    topic: Optional[str] = None
    agentId: Optional[str] = None
    sessionId: Optional[str] = None
    workflowId: Optional[str] = None

class ChatRequest(RequestBody):
    topic: Optional[str] = None
    conversationId: Optional[str] = None

class ResetRequest(RequestBody):
    conversationId: Optional[str] = None
