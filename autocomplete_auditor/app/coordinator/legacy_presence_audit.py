"""
Legacy autocomplete presence audit.

The earlier, simpler form of the autocomplete rule: every input must carry
an autocomplete attribute. Token validity, ordering and autofill
predictions are not consulted.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from autocomplete_auditor.app.coordinator.autocomplete_audit import (
    display_value_for,
)
from autocomplete_auditor.app.messages import message
from autocomplete_auditor.app.schemas.audit_report import (
    AuditMeta,
    AutocompleteAuditReport,
)
from autocomplete_auditor.app.schemas.findings import (
    LegacyFindingRow,
    NodeValue,
    TableDetails,
    TableHeading,
)
from autocomplete_auditor.app.schemas.form_elements import Form

logger = logging.getLogger(__name__)


class LegacyPresenceAudit:
    meta = AuditMeta(
        id="autocomplete-presence",
        title=message("legacy.title").render(),
        failure_title=message("legacy.failureTitle").render(),
        description=message("legacy.description").render(),
        required_artifacts=["FormElements"],
    )

    def run(self, forms: Sequence[Form]) -> AutocompleteAuditReport:
        failing: List[LegacyFindingRow] = []
        inputs_count = 0

        for form in forms:
            for form_input in form.inputs:
                inputs_count += 1
                if form_input.autocomplete_attribute:
                    continue
                failing.append(
                    LegacyFindingRow(
                        failing_elements=NodeValue(
                            snippet=form_input.snippet,
                            node_label=form_input.node_label,
                        )
                    )
                )

        logger.info(
            "Legacy presence audit: inputs=%d failing=%d",
            inputs_count,
            len(failing),
        )

        return AutocompleteAuditReport(
            audit_id=self.meta.id,
            score=0 if failing else 1,
            not_applicable=False,
            display_value=display_value_for(len(failing)),
            details=TableDetails(
                headings=[
                    TableHeading(
                        key="failing_elements",
                        item_type="node",
                        text=message("legacy.failingElements").render(),
                    )
                ],
                items=failing,
            ),
            inputs_count=inputs_count,
        )
