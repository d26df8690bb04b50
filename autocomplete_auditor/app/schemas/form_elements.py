"""
Form element input schemas.

Defines the read-only descriptors of page forms and their inputs as
supplied by the page-collection layer. The Auditor never inspects a live
page: these records are the sole source of truth for an audit run.

Two wire shapes are accepted for an input:

- flat, using either snake_case names or the camelCase aliases
  (``autocompleteAttribute``, ``autocompleteProperty``,
  ``autocompletePrediction``, ``nodeLabel``)
- nested, as emitted by the collector artifact::

      {"autocomplete": {"attribute": ..., "property": ..., "prediction": ...},
       "snippet": ..., "nodeLabel": ...}
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class FormInput(BaseModel):
    """
    A single form control.

    INVARIANT (guaranteed by the collector, not re-derived here):
    ``autocomplete_property`` is non-empty only if every token of
    ``autocomplete_attribute`` is individually valid AND correctly ordered.
    """

    autocomplete_attribute: Optional[str] = Field(
        None,
        description="Raw autocomplete attribute value as written in the markup",
    )

    autocomplete_property: Optional[str] = Field(
        None,
        description=(
            "Browser-resolved autocomplete value. Empty when the attribute "
            "is syntactically invalid or its tokens are out of order."
        ),
    )

    autocomplete_prediction: Optional[str] = Field(
        None,
        description="External autofill classifier field-type code",
    )

    snippet: str = Field(
        "",
        description="Serialized opening tag of the element, for display",
    )

    node_label: str = Field(
        "",
        description="Human-readable identifier of the element, for display",
    )

    @model_validator(mode="before")
    @classmethod
    def flatten_autocomplete_artifact(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        nested = data.get("autocomplete")
        if not isinstance(nested, dict):
            return data

        flattened = {k: v for k, v in data.items() if k != "autocomplete"}
        flattened.setdefault("autocomplete_attribute", nested.get("attribute"))
        flattened.setdefault("autocomplete_property", nested.get("property"))
        flattened.setdefault("autocomplete_prediction", nested.get("prediction"))
        return flattened

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Form(BaseModel):
    """An ordered sequence of inputs belonging to one form."""

    inputs: List[FormInput] = Field(default_factory=list)

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )


def count_inputs(forms: List[Form]) -> int:
    return sum(len(form.inputs) for form in forms)
