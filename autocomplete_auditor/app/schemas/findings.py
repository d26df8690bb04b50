"""
Standardized finding row schemas.

Defines the rows accumulated into an audit's findings table. Rows are
created once by an audit, are immutable afterwards, and are owned by the
final report.

This schema is:
- immutable once created
- ordered by source input position (form-then-input)
- presentation-agnostic (rendering is the reporting layer's concern)
"""

from typing import List, Literal

from pydantic import BaseModel, Field
from pydantic import ConfigDict


# ---------------------------------------------------------------------------
# Node reference
# ---------------------------------------------------------------------------


class NodeValue(BaseModel):
    """
    Display reference to a page element.

    Carries only what the reporting layer needs to identify the element.
    """

    type: Literal["node"] = "node"

    snippet: str = Field(
        ...,
        description="Display snippet of the element's opening tag",
    )

    node_label: str = Field(
        ...,
        description="Human-readable identifier of the element",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )


# ---------------------------------------------------------------------------
# Finding rows (PUBLIC, FROZEN)
# ---------------------------------------------------------------------------


class FindingRow(BaseModel):
    """
    Autocomplete audit finding.

    One row per input whose autocomplete state is missing or invalid and
    for which the autofill prediction yields a suggestion.
    """

    node: NodeValue = Field(
        ...,
        description="The failing element",
    )

    current: str = Field(
        ...,
        description="Current autocomplete attribute value (empty when absent)",
    )

    suggestion: str = Field(
        ...,
        description=(
            "Suggested autocomplete value derived from the autofill "
            "prediction, or the manual review marker"
        ),
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )


class LegacyFindingRow(BaseModel):
    """Presence-only finding: an input without any autocomplete attribute."""

    failing_elements: NodeValue

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )


# ---------------------------------------------------------------------------
# Table details
# ---------------------------------------------------------------------------


class TableHeading(BaseModel):
    key: str
    item_type: Literal["node", "text"]
    text: str

    model_config = ConfigDict(frozen=True, extra="forbid")


class TableDetails(BaseModel):
    """
    Findings table handed to the reporting layer.

    Column order follows ``headings``; row order follows source input order.
    """

    type: Literal["table"] = "table"
    headings: List[TableHeading] = Field(default_factory=list)
    items: List[FindingRow | LegacyFindingRow] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")
