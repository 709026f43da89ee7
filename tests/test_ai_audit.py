"""Summary: Tests for AI audit logs.

Importance: Ensures AI request and response listing works.
Alternatives: Inspect AI logs manually.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from supporttriage.models import AiRequest, AiResponse
from supporttriage.services import AiAuditService
from supporttriage.storage.sqlite_store import SqliteStore


def test_ai_audit_listings(tmp_path: Path) -> None:
    """Summary: Verify AI audit lists return data.

    Importance: Confirms AI audit endpoints have data to serve.
    Alternatives: Use raw SQL for audits.
    """

    store = SqliteStore(str(tmp_path / "test.db"))
    store.initialize()
    request_id = store.log_ai_request(
        AiRequest(
            provider="groq",
            model="llama-3.3-70b-versatile",
            prompt="Classify",
            purpose="support_classification",
            timestamp=datetime.now(timezone.utc),
        )
    )
    store.log_ai_response(
        AiResponse(request_id=request_id, response_text="{}", latency_ms=12, token_estimate=1)
    )
    audit = AiAuditService(store=store)
    requests = audit.list_requests(limit=5)
    responses = audit.list_responses(limit=5)
    assert requests[0]["provider"] == "groq"
    assert requests[0]["purpose"] == "support_classification"
    assert responses[0]["request_id"] == request_id
    assert responses[0]["latency_ms"] == 12
