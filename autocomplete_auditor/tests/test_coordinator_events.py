import anyio
import pytest

from autocomplete_auditor.app.config import AuditorConfig
from autocomplete_auditor.app.coordinator.coordinator import AuditorCoordinator
from autocomplete_auditor.app.errors import InputLimitExceeded
from autocomplete_auditor.app.events import (
    AuditEvent,
    AuditEventType,
    MemoryQueueEventEmitter,
)
from autocomplete_auditor.tests.fixtures.form_factory import (
    make_form,
    make_input,
    valid_input,
)

pytestmark = pytest.mark.anyio


class ListEmitter:
    def __init__(self):
        self.events: list[AuditEvent] = []

    async def emit(self, event: AuditEvent) -> None:
        self.events.append(event)


def _forms():
    return [
        make_form(
            make_input("cc-namez", prediction="CREDIT_CARD_NAME_FULL"),
            make_input(None),
            valid_input("email"),
        )
    ]


async def test_autocomplete_only_run_emits_lifecycle_events():
    emitter = ListEmitter()
    coordinator = AuditorCoordinator(AuditorConfig())

    result = await coordinator.run_audit(
        forms=_forms(),
        audit_id="run-001",
        emitter=emitter,
    )

    assert result.run_id == "run-001"
    assert result.tables_version == coordinator.tables.version
    assert result.autocomplete.score == 0
    assert result.legacy_presence is None

    assert [e.event_type for e in emitter.events] == [
        AuditEventType.AUDIT_STARTED,
        AuditEventType.AUTOCOMPLETE_AUDIT_STARTED,
        AuditEventType.AUTOCOMPLETE_AUDIT_COMPLETED,
        AuditEventType.AUDIT_COMPLETED,
    ]
    completed = emitter.events[2]
    assert completed.details["findings_count"] == 1
    assert completed.details["warnings_count"] == 1


async def test_legacy_presence_audit_runs_when_enabled():
    emitter = ListEmitter()
    coordinator = AuditorCoordinator(
        AuditorConfig(ENABLE_LEGACY_PRESENCE_AUDIT=True)
    )

    result = await coordinator.run_audit(
        forms=_forms(),
        audit_id="run-002",
        emitter=emitter,
    )

    assert result.legacy_presence is not None
    assert result.legacy_presence.score == 0
    assert len(result.legacy_presence.findings) == 1
    assert AuditEventType.LEGACY_AUDIT_COMPLETED in {
        e.event_type for e in emitter.events
    }


async def test_input_limit_fails_audit_before_running():
    emitter = ListEmitter()
    coordinator = AuditorCoordinator(AuditorConfig(MAX_INPUTS=2))

    with pytest.raises(InputLimitExceeded):
        await coordinator.run_audit(
            forms=_forms(),
            audit_id="run-003",
            emitter=emitter,
        )

    assert [e.event_type for e in emitter.events] == [
        AuditEventType.AUDIT_STARTED,
        AuditEventType.AUDIT_FAILED,
    ]
    assert emitter.events[-1].details["exception_type"] == "InputLimitExceeded"


async def test_runs_without_emitter():
    coordinator = AuditorCoordinator(AuditorConfig())

    result = await coordinator.run_audit(forms=[], audit_id="run-004")

    assert result.autocomplete.not_applicable is True
    assert result.autocomplete.score == 1


async def test_memory_emitter_streams_until_completion():
    emitter = MemoryQueueEventEmitter()
    coordinator = AuditorCoordinator(AuditorConfig())
    received: list[AuditEvent] = []

    async def consume():
        async for event in emitter.stream():
            received.append(event)

    async with anyio.create_task_group() as tg:
        tg.start_soon(consume)
        await coordinator.run_audit(
            forms=_forms(),
            audit_id="run-005",
            emitter=emitter,
        )

    assert emitter.closed is True
    assert received[-1].event_type == AuditEventType.AUDIT_COMPLETED
    assert received[-1].details["result"]["autocomplete"]["score"] == 0

    # Emission after close is dropped silently.
    await emitter.emit(
        AuditEvent(audit_id="run-005", event_type=AuditEventType.AUDIT_STARTED)
    )


def test_sse_payload_format():
    event = AuditEvent(
        audit_id="run-006",
        event_type=AuditEventType.AUDIT_STARTED,
        details={"forms_count": 2},
    )

    payload = event.to_sse_payload()

    assert payload.startswith("event: audit_started\ndata: {")
    assert payload.endswith("\n\n")
    assert '"forms_count": 2' in payload
