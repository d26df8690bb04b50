"""
Autofill prediction to autocomplete suggestion mapping.

Maps an external classifier's field-type code to the autocomplete value a
developer should use instead. The mapping is table data; this module only
defines the lookup and its miss behavior.
"""

from __future__ import annotations

import enum
from typing import Literal, Optional, Union

from autocomplete_auditor.app.tables import AutocompleteTables


class _NoSuggestion(enum.Enum):
    NO_SUGGESTION = "no_suggestion"

    def __repr__(self) -> str:
        return "NO_SUGGESTION"


# Sentinel: the prediction yields no automated suggestion.
NO_SUGGESTION = _NoSuggestion.NO_SUGGESTION

Suggestion = Union[str, Literal[_NoSuggestion.NO_SUGGESTION]]


class SuggestionMapper:
    """
    Prediction lookup over the autocomplete tables.

    ``suggest`` answers only "is there a mapped suggestion for this code".
    The rule that a no-signal code on an input without an attribute makes
    the input inapplicable depends on both signals and is applied by the
    audit, not here.
    """

    def __init__(self, tables: AutocompleteTables) -> None:
        self._tables = tables

    def suggest(self, prediction_code: Optional[str]) -> Suggestion:
        if not prediction_code:
            return NO_SUGGESTION

        suggestion = self._tables.lookup_suggestion(prediction_code)
        if suggestion is None:
            return NO_SUGGESTION

        return suggestion

    def is_no_signal(self, prediction_code: Optional[str]) -> bool:
        return bool(prediction_code) and self._tables.is_no_prediction(
            prediction_code
        )

    def requires_manual_review(self, suggestion: Suggestion) -> bool:
        return suggestion == self._tables.manual_review_suggestion
