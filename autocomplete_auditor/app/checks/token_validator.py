"""
Autocomplete token validation.

The autocomplete attribute can hold several tokens. All tokens must be
valid AND appear in the canonical order:

    [section-*] [shipping|billing] [home|work|mobile|fax|pager] <field name>

``cc-namez`` is an invalid token. ``tel mobile shipping section-foo`` are
valid tokens, but out of order. In either case the browser resolves the
autocomplete property to an empty string; when every token is individually
valid, an empty property therefore means the order is wrong.

These checks are pure and MUST NOT consult the autofill prediction.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from autocomplete_auditor.app.schemas.form_elements import FormInput
from autocomplete_auditor.app.tables import AutocompleteTables

logger = logging.getLogger(__name__)


class ValidationResult(BaseModel):
    """Per-input validation outcome. Transient, never persisted."""

    is_valid: bool
    order_warning: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


_INVALID = ValidationResult(is_valid=False, order_warning=False)
_MISORDERED = ValidationResult(is_valid=False, order_warning=True)
_VALID = ValidationResult(is_valid=True, order_warning=False)


def is_valid_token(token: str, tables: AutocompleteTables) -> bool:
    # A section- prefix marks a developer-defined autofill scope.
    if token.startswith(tables.section_prefix):
        return True
    return tables.is_valid_token(token)


def validate_autocomplete(
    form_input: FormInput,
    tables: AutocompleteTables,
) -> ValidationResult:
    """
    Classify an input's declared autocomplete state.

    Returns:
        is_valid=False, order_warning=False  attribute missing, or an
                                             invalid token was found
        is_valid=False, order_warning=True   tokens valid, order wrong
        is_valid=True                        fully valid

    Tokens are split on single spaces. Repeated, leading or trailing spaces
    produce empty tokens, which are never valid.
    """
    attribute = form_input.autocomplete_attribute
    if not attribute:
        return _INVALID

    for token in attribute.split(" "):
        if not is_valid_token(token, tables):
            logger.debug("Invalid autocomplete token %r in %r", token, attribute)
            return _INVALID

    if not form_input.autocomplete_property:
        return _MISORDERED

    return _VALID
