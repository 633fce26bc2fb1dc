"""All shared types, enums, and data shapes. Everything imports from here."""

from enum import Enum
from typing import Any, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
import uuid


# ── Enums ──────────────────────────────────────────────────────────────

class LogStatus(str, Enum):
    ERROR = "error"
    INFO = "info"
    SUCCESS = "success"

class CredentialType(str, Enum):
    HINOVA = "hinova"
    BEARER_TOKEN = "bearer_token"


# ── Variables & session ────────────────────────────────────────────────

class Variable(BaseModel):
    """Named, identified slot for a value within a session."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    value: Optional[str] = None         # None = never set

class VariableUpdate(BaseModel):
    """New value for one variable, always serialized as text."""
    model_config = ConfigDict(frozen=True)

    variable_id: str
    value: str

class SetVariableHistoryItem(BaseModel):
    """Audit record of one applied variable update."""
    model_config = ConfigDict(frozen=True)

    result_id: Optional[str] = None
    index: int                          # position in the session-wide history
    block_id: str                       # block that produced the value
    variable_id: str
    value: str

class TypebotInQueue(BaseModel):
    """One active sub-workflow context. The head of the queue is current."""
    model_config = ConfigDict(frozen=True)

    typebot_id: str
    result_id: Optional[str] = None
    variables: tuple[Variable, ...] = ()

class SessionState(BaseModel):
    """Immutable snapshot of a conversation. Replaced wholesale on mutation."""
    model_config = ConfigDict(frozen=True)

    workspace_id: str
    typebots_queue: tuple[TypebotInQueue, ...] = Field(min_length=1)
    current_set_variable_history_index: int = 0

    @property
    def head(self) -> TypebotInQueue:
        return self.typebots_queue[0]

    @property
    def variables(self) -> tuple[Variable, ...]:
        """Variable set of the currently relevant sub-workflow."""
        return self.head.variables


# ── Logs & results ─────────────────────────────────────────────────────

class LogEntry(BaseModel):
    """One entry of a block's execution trace."""
    status: LogStatus
    description: str
    details: Optional[str] = None       # raw upstream payload or error message

class ExecutionResult(BaseModel):
    """Uniform outcome of one block invocation.

    ``new_session_state`` is None when the block changed nothing; the caller
    keeps its prior state in that case.
    """
    outgoing_edge_id: Optional[str] = None
    new_session_state: Optional[SessionState] = None
    new_set_variable_history: list[SetVariableHistoryItem] = Field(default_factory=list)
    logs: list[LogEntry] = Field(default_factory=list)


# ── Blocks ─────────────────────────────────────────────────────────────

class Block(BaseModel):
    """One configured step in a workflow graph.

    ``options`` stays loosely typed here; each block type validates it
    against its own discriminated options schema.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: str
    outgoing_edge_id: Optional[str] = None
    options: Optional[dict[str, Any]] = None


# ── Credentials ────────────────────────────────────────────────────────

class CredentialRecord(BaseModel):
    """Encrypted credential as kept by the vault. ``data`` + ``iv`` are base64."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    workspace_id: str
    name: str
    credential_type: CredentialType
    data: str
    iv: str
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
