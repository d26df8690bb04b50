"""
Audit report schemas.

Defines the product of a single audit run and the combined result returned
by the coordinator.

A report captures:
- the pass/fail score,
- whether the audit applied to the page at all,
- the findings table,
- advisory warnings (rendered text and raw message instances).

Reports are created once per run and are never mutated afterwards.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from autocomplete_auditor.app.messages import MessageInstance
from autocomplete_auditor.app.schemas.findings import (
    FindingRow,
    LegacyFindingRow,
    TableDetails,
)


# ---------------------------------------------------------------------------
# Audit metadata
# ---------------------------------------------------------------------------

class AuditMeta(BaseModel):
    """Static description of an audit rule."""

    id: str
    title: str
    failure_title: str
    description: str
    required_artifacts: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Per-audit report (PUBLIC, FROZEN CONTRACT)
# ---------------------------------------------------------------------------

class AutocompleteAuditReport(BaseModel):
    """
    Product of one audit rule over one form collection.

    score is binary: 0 when any finding exists, 1 otherwise.
    """

    audit_id: str = Field(
        ...,
        description="Identifier of the audit rule that produced the report",
    )

    score: Literal[0, 1] = Field(
        ...,
        description="Binary score: 0 if any finding exists, else 1",
    )

    not_applicable: bool = Field(
        ...,
        description="True when no input carried an actionable signal",
    )

    display_value: Optional[str] = Field(
        None,
        description="Pluralized finding count, present only when findings exist",
    )

    details: TableDetails = Field(
        default_factory=TableDetails,
        description="Findings table",
    )

    warnings: List[str] = Field(
        default_factory=list,
        description="Rendered advisory warnings, in source input order",
    )

    warning_messages: List[MessageInstance] = Field(
        default_factory=list,
        description="Raw warning message instances for localizing renderers",
    )

    inputs_count: int = Field(
        0,
        ge=0,
        description="Number of inputs examined",
    )

    not_applicable_count: int = Field(
        0,
        ge=0,
        description="Number of inputs without an actionable signal",
    )

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def enforce_report_invariants(self):
        """
        - score is 0 if and only if the findings table is non-empty
        - display_value is present if and only if findings exist
        - warnings and warning_messages are parallel sequences
        """
        has_findings = bool(self.details.items)

        if (self.score == 0) != has_findings:
            raise ValueError(
                "score must be 0 exactly when the findings table is non-empty"
            )

        if (self.display_value is not None) != has_findings:
            raise ValueError(
                "display_value must be set exactly when findings exist"
            )

        if len(self.warnings) != len(self.warning_messages):
            raise ValueError(
                "warnings and warning_messages must have the same length"
            )

        if self.not_applicable_count > self.inputs_count:
            raise ValueError(
                "not_applicable_count cannot exceed inputs_count"
            )

        return self

    @property
    def findings(self) -> List[FindingRow | LegacyFindingRow]:
        return self.details.items

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )


# ---------------------------------------------------------------------------
# Coordinator result
# ---------------------------------------------------------------------------

class AuditRunResult(BaseModel):
    """
    Combined result of one coordinator run.

    The legacy presence report is present only when that audit is enabled.
    """

    run_id: str = Field(
        ...,
        description="Unique identifier for this audit execution",
    )

    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp when the result was generated (UTC)",
    )

    tables_version: str = Field(
        ...,
        description="Version label of the lookup tables used",
    )

    autocomplete: AutocompleteAuditReport

    legacy_presence: Optional[AutocompleteAuditReport] = None

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
