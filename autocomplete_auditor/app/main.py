"""
FastAPI entrypoint for the Autocomplete Auditor.

This module defines the HTTP interface for autocomplete audits. It accepts
pre-extracted form element descriptors, invokes the coordinator, and
returns a structured AuditRunResult.

The application is stateless: the submitted form descriptors are the sole
source of truth. Pages are never fetched or rendered here.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, List
from uuid import uuid4

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.responses import Response

from autocomplete_auditor.app.config import AuditorConfig, configure_logging
from autocomplete_auditor.app.coordinator.coordinator import AuditorCoordinator
from autocomplete_auditor.app.errors import InputLimitExceeded
from autocomplete_auditor.app.schemas.audit_report import AuditRunResult
from autocomplete_auditor.app.schemas.form_elements import Form

# Events / streaming
from autocomplete_auditor.app.events import MemoryQueueEventEmitter

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Presentation helpers (presentation-only)
# ---------------------------------------------------------------------------

def pretty_json(data: Any) -> str:
    """Pretty-print JSON for human-readable output."""
    return json.dumps(
        data,
        ensure_ascii=False,
        allow_nan=False,
        indent=2,
        separators=(", ", ": "),
    )


class PrettyJSONResponse(Response):
    """Pretty-printed JSON response for human-readable console output."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        return pretty_json(content).encode("utf-8")


# ---------------------------------------------------------------------------
# Request schema
# ---------------------------------------------------------------------------

class AuditRequest(BaseModel):
    """Form element descriptors collected from one page."""

    forms: List[Form] = Field(
        default_factory=list,
        description="Forms in document order, each with its inputs",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Application setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Autocomplete Auditor",
    description="Deterministic autocomplete attribute audit for form inputs",
    version="0.1.0",
)


@app.on_event("startup")
def startup_event() -> None:
    """
    Application startup hook.

    Configuration and lookup tables are loaded once and treated as
    immutable for the lifetime of the process.
    """
    config = AuditorConfig.from_env()
    configure_logging(config.LOG_LEVEL)

    coordinator = AuditorCoordinator.from_config(config)

    logger.info(
        "Autocomplete Auditor started (tables=%s, legacy_presence=%s)",
        coordinator.tables.version,
        config.ENABLE_LEGACY_PRESENCE_AUDIT,
    )

    app.state.config = config
    app.state.coordinator = coordinator


def _checked_coordinator(request: AuditRequest) -> AuditorCoordinator:
    if not request.forms:
        raise HTTPException(
            status_code=400,
            detail="Request contains no forms",
        )

    coordinator: AuditorCoordinator = app.state.coordinator

    # Hard resource limit, checked before the audit runs.
    try:
        coordinator.check_limits(request.forms)
    except InputLimitExceeded as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from exc

    return coordinator


# ---------------------------------------------------------------------------
# API Routes
# ---------------------------------------------------------------------------

@app.post(
    "/audit",
    response_model=AuditRunResult,
    response_class=PrettyJSONResponse,
    summary="Audit form inputs for autocomplete attributes",
)
async def audit_forms(request: AuditRequest) -> AuditRunResult:
    coordinator = _checked_coordinator(request)

    return await coordinator.run_audit(
        forms=request.forms,
        audit_id=str(uuid4()),
    )


@app.post(
    "/audit/stream",
    summary="Audit form inputs (streaming progress)",
)
async def audit_forms_stream(request: AuditRequest):
    """
    Perform an audit while streaming progress events.

    - Client disconnects do NOT cancel the audit
    - The final AUDIT_COMPLETED event carries the AuditRunResult
    """
    coordinator = _checked_coordinator(request)
    audit_id = str(uuid4())
    emitter = MemoryQueueEventEmitter()

    async def run_audit_task() -> None:
        try:
            await coordinator.run_audit(
                forms=request.forms,
                audit_id=audit_id,
                emitter=emitter,
            )
        except Exception:
            # The coordinator already emitted AUDIT_FAILED.
            logger.exception("Streaming audit %s failed", audit_id)

    asyncio.create_task(run_audit_task())

    async def event_stream():
        try:
            async for event in emitter.stream():
                yield event.to_sse_payload()
        except asyncio.CancelledError:
            # Client disconnected; audit continues
            pass

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )


@app.get(
    "/health",
    summary="Service health check",
)
def health_check() -> JSONResponse:
    """Simple health check endpoint."""
    return JSONResponse(
        content={
            "status": "ok",
            "service": "autocomplete-auditor",
        }
    )
