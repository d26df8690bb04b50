"""
Autocomplete lookup tables.

The permitted-token vocabulary and the autofill prediction mapping are
data, not logic. They ship as a versioned JSON asset next to this package
(``data/autocomplete_tables.json``) and may be replaced by an operator via
configuration without touching validation code.

Sources:
- permitted tokens: WHATWG autofill field names, contact tokens and
  address-type tokens
  https://html.spec.whatwg.org/multipage/form-control-infrastructure.html#autofill
- prediction codes: Chromium autofill field types
  (components/autofill/core/browser/field_types.h)
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from autocomplete_auditor.app.errors import TableLoadError

logger = logging.getLogger(__name__)


DEFAULT_TABLES_PATH = Path(__file__).parent / "data" / "autocomplete_tables.json"


class AutocompleteTables(BaseModel):
    """
    Validated lookup tables.

    Membership checks go through explicit set and mapping lookups; a miss
    is always reported as a miss, never as a default value.
    """

    version: str = Field(
        ...,
        description="Revision label of the table snapshot",
    )

    section_prefix: str = Field(
        "section-",
        min_length=1,
        description="Literal prefix of developer-defined autofill scopes",
    )

    manual_review_suggestion: str = Field(
        ...,
        min_length=1,
        description="Suggestion literal meaning no automated suggestion exists",
    )

    valid_tokens: FrozenSet[str] = Field(
        ...,
        description="Permitted literal autocomplete tokens",
    )

    no_prediction_codes: FrozenSet[str] = Field(
        ...,
        description="Prediction codes that carry no usable field-type signal",
    )

    suggestions: Dict[str, str] = Field(
        ...,
        description="Prediction code -> suggested autocomplete value",
    )

    @model_validator(mode="after")
    def enforce_table_consistency(self):
        missing = sorted(self.no_prediction_codes - set(self.suggestions))
        if missing:
            raise ValueError(
                f"No-prediction codes missing from suggestions: {missing}"
            )

        for code, suggestion in self.suggestions.items():
            if suggestion == self.manual_review_suggestion:
                continue
            unknown = [
                token
                for token in suggestion.split(" ")
                if token not in self.valid_tokens
            ]
            if unknown:
                raise ValueError(
                    f"Suggestion for {code} uses unknown tokens: {unknown}"
                )

        return self

    def is_valid_token(self, token: str) -> bool:
        return token in self.valid_tokens

    def is_no_prediction(self, code: str) -> bool:
        return code in self.no_prediction_codes

    def lookup_suggestion(self, code: str) -> Optional[str]:
        """Return the suggestion for ``code``, or None when it is unmapped."""
        return self.suggestions.get(code)

    model_config = ConfigDict(frozen=True, extra="forbid")


@lru_cache(maxsize=8)
def _load(path: Path) -> AutocompleteTables:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TableLoadError(
            f"Autocomplete tables not readable: {path}"
        ) from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise TableLoadError(
            f"Autocomplete tables are not valid JSON: {path}"
        ) from exc

    try:
        tables = AutocompleteTables.model_validate(data)
    except ValidationError as exc:
        logger.warning("Autocomplete tables failed validation: %s", path)
        raise TableLoadError(
            f"Autocomplete tables failed validation: {path}"
        ) from exc

    logger.info(
        "Loaded autocomplete tables version=%s tokens=%d predictions=%d",
        tables.version,
        len(tables.valid_tokens),
        len(tables.suggestions),
    )
    return tables


def load_autocomplete_tables(path: Optional[Path] = None) -> AutocompleteTables:
    """
    Load the lookup tables from ``path`` or from the bundled asset.

    Results are cached per resolved path.
    """
    return _load(Path(path or DEFAULT_TABLES_PATH).resolve())
