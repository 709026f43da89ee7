"""Summary: FastAPI application for SupportTriage.

Importance: Exposes classification and triage history to UI clients over HTTP.
Alternatives: Use a CLI-only workflow or a different web framework.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from supporttriage.ai import AiProvider
from supporttriage.app import build_services
from supporttriage.config import AppConfig
from supporttriage.response_templates import list_templates
from supporttriage.services import format_export
from supporttriage.storage.sqlite_store import StoredTriageRecord


class MessageRequest(BaseModel):
    """Summary: Request payload carrying a customer support message.

    Importance: Keeps classification inputs explicit for API clients.
    Alternatives: Accept the message as a query parameter.
    """

    message: str


def _record_payload(record: StoredTriageRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "message": record.message,
        "category": record.category,
        "sentiment": record.sentiment,
        "priority_score": record.priority_score,
        "urgency": record.urgency,
        "recommended_action": record.recommended_action,
        "reasoning": record.reasoning,
        "source": record.source,
        "timestamp": record.timestamp,
    }


def create_app(config: AppConfig, ai_provider: AiProvider | None = None) -> FastAPI:
    """Summary: Create a FastAPI app wired to SupportTriage services.

    Importance: Ensures the API layer shares the same configuration and storage.
    Alternatives: Instantiate services globally outside the factory.
    """

    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = FastAPI(title="SupportTriage API", version="0.1.0")
    services = build_services(config, ai_provider=ai_provider)

    def require_api_key(x_api_key: str | None = Header(default=None)) -> None:
        """Summary: Enforce API key authentication when configured.

        Importance: Adds a minimal security layer for local and private deployments.
        Alternatives: Use OAuth or session-based authentication.
        """

        if not config.api_key:
            return
        if x_api_key != config.api_key:
            raise HTTPException(status_code=401, detail="Invalid API key")

    def _get_record_or_404(record_id: int) -> StoredTriageRecord:
        record = services.history.get_record(record_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Triage record not found")
        return record

    @app.get("/health")
    def health() -> dict[str, str]:
        """Summary: Health check endpoint.

        Importance: Supports uptime checks in local and cloud deployments.
        Alternatives: Use a metrics endpoint only.
        """

        return {"status": "ok"}

    @app.post("/classify", dependencies=[Depends(require_api_key)])
    def classify(payload: MessageRequest) -> dict[str, Any]:
        """Summary: Classify a message without logging it.

        Importance: Lets integrations reuse the verdict without touching history.
        Alternatives: Always go through the full analyze workflow.
        """

        outcome = services.classifier.classify_detailed(payload.message)
        return {**outcome.result.to_dict(), "source": outcome.source}

    @app.post("/analyze", dependencies=[Depends(require_api_key)])
    def analyze(payload: MessageRequest) -> dict[str, Any]:
        """Summary: Classify a message, derive urgency and action, and log it.

        Importance: Primary workflow for the support dashboard.
        Alternatives: Split classification and logging into two calls.
        """

        try:
            record = services.triage.analyze(payload.message)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _record_payload(record)

    @app.get("/history", dependencies=[Depends(require_api_key)])
    def list_history(limit: int = 50) -> list[dict[str, Any]]:
        """Summary: List recent analyses, newest first.

        Importance: Backs the history page of UI clients.
        Alternatives: Keep history only in browser storage.
        """

        return [_record_payload(record) for record in services.history.list_history(limit)]

    @app.get("/history/stats", dependencies=[Depends(require_api_key)])
    def history_stats() -> dict[str, Any]:
        """Summary: Return triage log statistics.

        Importance: Shows volume and mix at a glance.
        Alternatives: Compute statistics client-side from the full history.
        """

        return services.history.snapshot()

    @app.get("/history/{record_id}", dependencies=[Depends(require_api_key)])
    def get_history_record(record_id: int) -> dict[str, Any]:
        """Summary: Fetch a single analysis.

        Importance: Allows clients to reopen a past result.
        Alternatives: Filter the history listing client-side.
        """

        return _record_payload(_get_record_or_404(record_id))

    @app.get(
        "/history/{record_id}/export",
        response_class=PlainTextResponse,
        dependencies=[Depends(require_api_key)],
    )
    def export_history_record(record_id: int) -> str:
        """Summary: Render an analysis as plain text for copying.

        Importance: Agents paste the export straight into ticket notes.
        Alternatives: Format the export in the browser.
        """

        return format_export(_get_record_or_404(record_id))

    @app.delete("/history", dependencies=[Depends(require_api_key)])
    def clear_history() -> dict[str, int]:
        """Summary: Clear the triage log.

        Importance: Explicit reset of local history.
        Alternatives: Delete entries one by one.
        """

        return {"deleted": services.history.clear_history()}

    @app.get("/templates", dependencies=[Depends(require_api_key)])
    def list_response_templates() -> list[dict[str, str]]:
        """Summary: List recommended actions per category.

        Importance: Lets clients display the canned guidance table.
        Alternatives: Maintain templates only in docs.
        """

        return [
            {"category": template.category, "action": template.action}
            for template in list_templates()
        ]

    @app.get("/ai/requests", dependencies=[Depends(require_api_key)])
    def list_ai_requests(limit: int = 20) -> list[dict[str, Any]]:
        """Summary: List recent AI requests.

        Importance: Supports auditing prompts sent to providers.
        Alternatives: Inspect the database directly.
        """

        return services.ai_audit.list_requests(limit)

    @app.get("/ai/responses", dependencies=[Depends(require_api_key)])
    def list_ai_responses(limit: int = 20) -> list[dict[str, Any]]:
        """Summary: List recent AI responses.

        Importance: Supports auditing raw replies and latency.
        Alternatives: Inspect the database directly.
        """

        return services.ai_audit.list_responses(limit)

    return app


def app_factory() -> FastAPI:
    """Summary: Build the API from environment configuration.

    Importance: Entry point for uvicorn's factory mode.
    Alternatives: Create the app at import time.
    """

    return create_app(AppConfig.from_env())
