from __future__ import annotations

from typing import Protocol

from autocomplete_auditor.app.events.models import AuditEvent


class AuditEventEmitter(Protocol):
    """
    Interface for broadcasting audit progress.

    Implementations must be:
    - non-blocking (or minimally blocking)
    - fail-safe (emission failures must not crash the audit)
    - observational only
    """

    async def emit(self, event: AuditEvent) -> None:
        ...


class NullEventEmitter:
    """
    A no-op emitter.

    Used when streaming is disabled and in tests that do not inspect events.
    """

    async def emit(self, event: AuditEvent) -> None:
        return
