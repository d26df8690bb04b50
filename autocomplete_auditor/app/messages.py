"""
UI string table and message instances.

Audits do not localize. They emit message instances: a template identifier
plus the values to fill in. The reporting layer may re-render instances
through its own localized catalogue; ``render()`` produces the default
English text.

Plural templates use a reduced ICU form::

    {nodeCount, plural, =1 {1 element found} other {# elements found}}

Only the ``=N`` and ``other`` selectors are supported.
"""

from __future__ import annotations

import re
from typing import Dict, Union

from pydantic import BaseModel, ConfigDict, Field


UIStrings: Dict[str, str] = {
    # ------------------------------------------------------------------
    # Autocomplete audit
    # ------------------------------------------------------------------
    "autocomplete.title": "Input elements use autocomplete",
    "autocomplete.failureTitle": (
        "Input elements do not have correct attributes for autocomplete"
    ),
    "autocomplete.description": (
        "Autocomplete helps users submit forms quicker. To reduce user "
        "effort, consider enabling autocomplete by setting the `autocomplete` "
        "attribute to a valid value. [Learn more]"
        "(https://developers.google.com/web/fundamentals/design-and-ux/input/"
        "forms#use_metadata_to_enable_auto-complete)"
    ),
    "autocomplete.columnAutocompleteSuggestions": "Autocomplete Suggested Token",
    "autocomplete.columnAutocompleteCurrent": "Autocomplete Current Value",
    "autocomplete.warningInvalid": (
        'Autocomplete token(s): "{token}" is invalid in {snippet}'
    ),
    "autocomplete.warningOrder": 'Review order of tokens: "{tokens}" in {snippet}',
    # ------------------------------------------------------------------
    # Legacy presence audit
    # ------------------------------------------------------------------
    "legacy.title": "Input elements use metadata to enable autocomplete",
    "legacy.failureTitle": (
        "Input elements do not have correct attributes for autocomplete"
    ),
    "legacy.description": (
        "To reduce user manual input work, each input element should have the "
        'appropriate "autocomplete" attribute. Consider enabling autocomplete '
        "by setting the autocomplete attribute to a valid name to ensure that "
        "the user has the best form filling experience. [Learn more]"
        "(https://html.spec.whatwg.org/multipage/"
        "form-control-infrastructure.html#autofill)"
    ),
    "legacy.failingElements": "Failing Elements",
    # ------------------------------------------------------------------
    # Shared
    # ------------------------------------------------------------------
    "shared.columnFailingElem": "Failing Elements",
    "shared.displayValueElementsFound": (
        "{nodeCount, plural, =1 {1 element found} other {# elements found}}"
    ),
}


_PLURAL_RE = re.compile(
    r"\{(?P<name>\w+),\s*plural,\s*(?P<cases>(?:[=\w]+\s*\{[^{}]*\}\s*)+)\}"
)
_CASE_RE = re.compile(r"(?P<selector>[=\w]+)\s*\{(?P<text>[^{}]*)\}")


def _render_plural(match: re.Match, values: Dict[str, Union[str, int]]) -> str:
    name = match.group("name")
    count = values[name]
    cases = {
        case.group("selector"): case.group("text")
        for case in _CASE_RE.finditer(match.group("cases"))
    }
    text = cases.get(f"={count}", cases["other"])
    return text.replace("#", str(count))


def format_message(template: str, values: Dict[str, Union[str, int]]) -> str:
    """
    Fill ``template`` with ``values``.

    Plural blocks are resolved first, then simple ``{name}`` placeholders.
    A missing value raises ``KeyError``.
    """
    text = _PLURAL_RE.sub(lambda m: _render_plural(m, values), template)
    return re.sub(r"\{(\w+)\}", lambda m: str(values[m.group(1)]), text)


class MessageInstance(BaseModel):
    """A UI string reference with its fill-in values."""

    message_id: str = Field(
        ...,
        description="Identifier of the template in the UI string table",
    )

    values: Dict[str, Union[str, int]] = Field(
        default_factory=dict,
        description="Placeholder values (e.g. token, snippet, tokens, nodeCount)",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    def render(self) -> str:
        return format_message(UIStrings[self.message_id], self.values)


def message(message_id: str, **values: Union[str, int]) -> MessageInstance:
    if message_id not in UIStrings:
        raise KeyError(f"Unknown UI string: {message_id}")
    return MessageInstance(message_id=message_id, values=values)
