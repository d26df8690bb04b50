from __future__ import annotations

import json
from typing import Any, Dict, Optional
from enum import Enum
from datetime import datetime, timezone
from uuid import uuid4, UUID

from pydantic import BaseModel, Field, ConfigDict


# ----------------------------------------------------------------------
# Event Types (Finite and Versioned)
# ----------------------------------------------------------------------
class AuditEventType(str, Enum):
    """
    Progression events emitted during the audit lifecycle.

    NOTE:
    This enum is finite and versioned.
    New entries must preserve observational semantics.
    """

    # ------------------------------------------------------------------
    # Global Audit Lifecycle
    # ------------------------------------------------------------------
    AUDIT_STARTED = "audit_started"
    AUDIT_COMPLETED = "audit_completed"
    AUDIT_FAILED = "audit_failed"

    # ------------------------------------------------------------------
    # Autocomplete audit
    # ------------------------------------------------------------------
    AUTOCOMPLETE_AUDIT_STARTED = "autocomplete_audit_started"
    AUTOCOMPLETE_AUDIT_COMPLETED = "autocomplete_audit_completed"

    # ------------------------------------------------------------------
    # Legacy presence audit
    # ------------------------------------------------------------------
    LEGACY_AUDIT_STARTED = "legacy_audit_started"
    LEGACY_AUDIT_COMPLETED = "legacy_audit_completed"


# ----------------------------------------------------------------------
# Event Model
# ----------------------------------------------------------------------
class AuditEvent(BaseModel):
    """
    An immutable observation of a phase transition within the Auditor.

    Events are strictly observational and transport-agnostic.
    """

    event_id: UUID = Field(default_factory=uuid4)
    audit_id: str = Field(..., description="The audit run identifier")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    event_type: AuditEventType

    # Optional contextual metadata (counts, scores, errors)
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    def to_sse_payload(self) -> str:
        """Serialize as a single Server-Sent Events message."""
        data = json.dumps(self.model_dump(mode="json"), ensure_ascii=False)
        return f"event: {self.event_type.value}\ndata: {data}\n\n"
