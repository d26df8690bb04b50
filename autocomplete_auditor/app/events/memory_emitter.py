from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator

from autocomplete_auditor.app.events.models import AuditEvent, AuditEventType
from autocomplete_auditor.app.events.emitter import AuditEventEmitter

logger = logging.getLogger(__name__)


class MemoryQueueEventEmitter(AuditEventEmitter):
    """
    In-memory async event emitter for SSE streaming.

    Properties:
    - single-consumer
    - deterministic ordering
    - closes itself on AUDIT_COMPLETED or AUDIT_FAILED
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[AuditEvent | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def emit(self, event: AuditEvent) -> None:
        if self._closed:
            return

        try:
            await self._queue.put(event)
        except RuntimeError as exc:
            # Observability must never break the audit.
            logger.warning("Dropped audit event %s: %s", event.event_type, exc)
            return

        if event.event_type in {
            AuditEventType.AUDIT_COMPLETED,
            AuditEventType.AUDIT_FAILED,
        }:
            await self.close()

    async def close(self) -> None:
        if not self._closed:
            self._closed = True
            await self._queue.put(None)

    async def stream(self) -> AsyncIterator[AuditEvent]:
        """
        Async generator yielding emitted events in order.
        """
        while True:
            event = await self._queue.get()
            if event is None:
                break
            yield event
