"""
Audit coordinator.

The coordinator is a thin authority. It MUST NOT inspect autocomplete
tokens or predictions itself.

Its sole responsibilities are:
- enforcing resource limits before any audit runs
- enforcing execution order
- emitting observational progress events
- assembling the final AuditRunResult
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from autocomplete_auditor.app.config import AuditorConfig
from autocomplete_auditor.app.coordinator.autocomplete_audit import (
    AutocompleteAudit,
)
from autocomplete_auditor.app.coordinator.legacy_presence_audit import (
    LegacyPresenceAudit,
)
from autocomplete_auditor.app.errors import InputLimitExceeded
from autocomplete_auditor.app.schemas.audit_report import AuditRunResult
from autocomplete_auditor.app.schemas.form_elements import Form, count_inputs
from autocomplete_auditor.app.tables import (
    AutocompleteTables,
    load_autocomplete_tables,
)

# Events (observational only)
from autocomplete_auditor.app.events import (
    AuditEvent,
    AuditEventType,
    AuditEventEmitter,
    NullEventEmitter,
)

logger = logging.getLogger(__name__)


class AuditorCoordinator:
    """
    Central audit coordinator.

    Execution order:
        1. Input limit gate
        2. Autocomplete audit (mandatory)
        3. Legacy presence audit (optional)
    """

    def __init__(
        self,
        config: AuditorConfig,
        tables: Optional[AutocompleteTables] = None,
        legacy_presence_audit: Optional[LegacyPresenceAudit] = None,
    ) -> None:
        """
        Direct constructor.

        Intended for tests and explicit wiring. Tables are loaded from
        configuration when not injected.
        """
        self._config = config
        self._tables = (
            tables
            if tables is not None
            else load_autocomplete_tables(config.TABLES_PATH)
        )
        self._autocomplete_audit = AutocompleteAudit(self._tables)

        if legacy_presence_audit is None and config.ENABLE_LEGACY_PRESENCE_AUDIT:
            legacy_presence_audit = LegacyPresenceAudit()
        self._legacy_presence_audit = legacy_presence_audit

    @classmethod
    def from_config(cls, config: AuditorConfig) -> "AuditorCoordinator":
        return cls(config=config)

    @property
    def tables(self) -> AutocompleteTables:
        return self._tables

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check_limits(self, forms: Sequence[Form]) -> None:
        inputs_count = count_inputs(list(forms))
        if inputs_count > self._config.MAX_INPUTS:
            raise InputLimitExceeded(inputs_count, self._config.MAX_INPUTS)

    async def run_audit(
        self,
        *,
        forms: Sequence[Form],
        audit_id: str,
        emitter: Optional[AuditEventEmitter] = None,
    ) -> AuditRunResult:
        """
        Execute all enabled audits over one form collection.

        The emitter is strictly observational: events never influence
        control flow.
        """
        emitter = emitter or NullEventEmitter()

        await emitter.emit(
            AuditEvent(
                audit_id=audit_id,
                event_type=AuditEventType.AUDIT_STARTED,
                details={"forms_count": len(forms)},
            )
        )

        try:
            # ----------------------------------------------------------
            # 1. Input limit gate (HARD GATE)
            # ----------------------------------------------------------
            self.check_limits(forms)

            # ----------------------------------------------------------
            # 2. Autocomplete audit
            # ----------------------------------------------------------
            await emitter.emit(
                AuditEvent(
                    audit_id=audit_id,
                    event_type=AuditEventType.AUTOCOMPLETE_AUDIT_STARTED,
                )
            )

            autocomplete = self._autocomplete_audit.run(forms)

            await emitter.emit(
                AuditEvent(
                    audit_id=audit_id,
                    event_type=AuditEventType.AUTOCOMPLETE_AUDIT_COMPLETED,
                    details={
                        "score": autocomplete.score,
                        "not_applicable": autocomplete.not_applicable,
                        "findings_count": len(autocomplete.findings),
                        "warnings_count": len(autocomplete.warnings),
                    },
                )
            )

            # ----------------------------------------------------------
            # 3. Legacy presence audit (OPTIONAL)
            # ----------------------------------------------------------
            legacy_presence = None

            if self._legacy_presence_audit is not None:
                await emitter.emit(
                    AuditEvent(
                        audit_id=audit_id,
                        event_type=AuditEventType.LEGACY_AUDIT_STARTED,
                    )
                )

                legacy_presence = self._legacy_presence_audit.run(forms)

                await emitter.emit(
                    AuditEvent(
                        audit_id=audit_id,
                        event_type=AuditEventType.LEGACY_AUDIT_COMPLETED,
                        details={
                            "score": legacy_presence.score,
                            "findings_count": len(legacy_presence.findings),
                        },
                    )
                )

            result = AuditRunResult(
                run_id=audit_id,
                tables_version=self._tables.version,
                autocomplete=autocomplete,
                legacy_presence=legacy_presence,
            )

            await emitter.emit(
                AuditEvent(
                    audit_id=audit_id,
                    event_type=AuditEventType.AUDIT_COMPLETED,
                    details={"result": result.model_dump(mode="json")},
                )
            )

            return result

        except Exception as exc:
            logger.warning("Audit %s failed: %s", audit_id, exc)
            await emitter.emit(
                AuditEvent(
                    audit_id=audit_id,
                    event_type=AuditEventType.AUDIT_FAILED,
                    details={
                        "error": str(exc),
                        "exception_type": type(exc).__name__,
                    },
                )
            )
            raise
