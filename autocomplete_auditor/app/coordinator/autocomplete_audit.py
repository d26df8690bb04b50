"""
Autocomplete audit.

Walks every input of every form, validates its declared autocomplete
tokens, and for inputs that fail consults the autofill prediction to decide
whether the input is inapplicable or a finding with a suggested value.

Decision order per input (FROZEN):
    1. valid tokens, valid order          -> skip
    2. no prediction                      -> not applicable
    3. no-signal prediction, no attribute -> not applicable
    4. mapped prediction                  -> finding (+ warnings)
    5. unmapped prediction                -> ignored, no finding, no warning

Fully deterministic. Findings and warnings follow source input order.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from autocomplete_auditor.app.checks.suggestion_mapper import (
    NO_SUGGESTION,
    SuggestionMapper,
)
from autocomplete_auditor.app.checks.token_validator import validate_autocomplete
from autocomplete_auditor.app.messages import MessageInstance, message
from autocomplete_auditor.app.schemas.audit_report import (
    AuditMeta,
    AutocompleteAuditReport,
)
from autocomplete_auditor.app.schemas.findings import (
    FindingRow,
    NodeValue,
    TableDetails,
    TableHeading,
)
from autocomplete_auditor.app.schemas.form_elements import Form, FormInput
from autocomplete_auditor.app.tables import AutocompleteTables

logger = logging.getLogger(__name__)


SNIPPET_TRUNCATION_MARKER = " title="


def display_snippet(snippet: str) -> str:
    """
    Shorten an element snippet for display.

    Everything from the first `` title=`` onward is dropped and the tag is
    re-closed. Snippets without a title are re-closed as-is.
    """
    return snippet.split(SNIPPET_TRUNCATION_MARKER, 1)[0] + ">"


def display_value_for(count: int) -> Optional[str]:
    if count == 0:
        return None
    return message("shared.displayValueElementsFound", nodeCount=count).render()


class AutocompleteAudit:
    """
    Autocomplete audit rule.

    Stateless between runs: counters and accumulators are local to ``run``.
    """

    meta = AuditMeta(
        id="autocomplete",
        title=message("autocomplete.title").render(),
        failure_title=message("autocomplete.failureTitle").render(),
        description=message("autocomplete.description").render(),
        required_artifacts=["FormElements"],
    )

    def __init__(self, tables: AutocompleteTables) -> None:
        self._tables = tables
        self._mapper = SuggestionMapper(tables)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, forms: Sequence[Form]) -> AutocompleteAuditReport:
        findings: List[FindingRow] = []
        warnings: List[MessageInstance] = []
        inputs_count = 0
        not_applicable_count = 0

        for form in forms:
            for form_input in form.inputs:
                inputs_count += 1

                if not self._evaluate_input(form_input, findings, warnings):
                    not_applicable_count += 1

        logger.info(
            "Autocomplete audit: inputs=%d findings=%d not_applicable=%d",
            inputs_count,
            len(findings),
            not_applicable_count,
        )

        return AutocompleteAuditReport(
            audit_id=self.meta.id,
            score=0 if findings else 1,
            not_applicable=not_applicable_count == inputs_count,
            display_value=display_value_for(len(findings)),
            details=TableDetails(
                headings=self._headings(),
                items=findings,
            ),
            warnings=[w.render() for w in warnings],
            warning_messages=warnings,
            inputs_count=inputs_count,
            not_applicable_count=not_applicable_count,
        )

    # ------------------------------------------------------------------
    # Per-input evaluation
    # ------------------------------------------------------------------

    def _evaluate_input(
        self,
        form_input: FormInput,
        findings: List[FindingRow],
        warnings: List[MessageInstance],
    ) -> bool:
        """
        Evaluate one input, appending to ``findings`` and ``warnings``.

        Returns False when the input is not applicable.
        """
        result = validate_autocomplete(form_input, self._tables)
        if result.is_valid:
            return True

        prediction = form_input.autocomplete_prediction
        attribute = form_input.autocomplete_attribute or ""

        if not prediction:
            return False

        if self._mapper.is_no_signal(prediction) and not attribute:
            return False

        suggestion = self._mapper.suggest(prediction)
        if suggestion is NO_SUGGESTION:
            # Unmapped predictions are dropped without a finding.
            logger.debug(
                "Unmapped autofill prediction %r for %s",
                prediction,
                form_input.node_label,
            )
            return True

        snippet = display_snippet(form_input.snippet)

        if attribute:
            warnings.append(
                message(
                    "autocomplete.warningInvalid",
                    token=attribute,
                    snippet=snippet,
                )
            )

        if result.order_warning:
            warnings.append(
                message(
                    "autocomplete.warningOrder",
                    tokens=attribute,
                    snippet=snippet,
                )
            )

        findings.append(
            FindingRow(
                node=NodeValue(
                    snippet=snippet,
                    node_label=form_input.node_label,
                ),
                current=attribute,
                suggestion=suggestion,
            )
        )
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _headings() -> List[TableHeading]:
        return [
            TableHeading(
                key="node",
                item_type="node",
                text=message("shared.columnFailingElem").render(),
            ),
            TableHeading(
                key="current",
                item_type="text",
                text=message("autocomplete.columnAutocompleteCurrent").render(),
            ),
            TableHeading(
                key="suggestion",
                item_type="text",
                text=message("autocomplete.columnAutocompleteSuggestions").render(),
            ),
        ]
