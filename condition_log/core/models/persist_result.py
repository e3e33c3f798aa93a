"""
StoreState and PersistResult: what the record store hands back to its caller.
"""

from enum import Enum

from pydantic import BaseModel, Field


class StoreState(str, Enum):
    """States of the record store, one pass per submission."""

    IDLE = "idle"
    VALIDATING = "validating"
    REJECTED = "rejected"
    PERSISTING = "persisting"
    PERSISTED = "persisted"
    PERSIST_FAILED = "persist_failed"


class PersistResult(BaseModel):
    """
    Outcome of one persist call.

    Attributes:
        ok: True when every configured sink was written
        state: Terminal state the submission reached
        record_id: Identifier stamped on the record (None if rejected)
        error_detail: Failure description for PERSIST_FAILED
        messages_by_field: Validation messages for REJECTED
        warnings: Operator-facing warnings (e.g. a malformed JSON document was replaced)
        sinks_written: Sinks that received the record, in write order
    """

    ok: bool
    state: StoreState
    record_id: str | None = None
    error_detail: str | None = None
    messages_by_field: dict[str, str] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    sinks_written: list[str] = Field(default_factory=list)
