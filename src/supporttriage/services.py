"""Summary: Core services for SupportTriage workflows.

Importance: Encapsulates classification, triage logging, and audit access.
Alternatives: Implement logic directly in CLI or API handlers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import time
from datetime import datetime, timezone

from supporttriage.ai import AiProvider, estimate_tokens
from supporttriage.classifier import HeuristicClassifier
from supporttriage.models import (
    SOURCE_HEURISTIC,
    SOURCE_REMOTE,
    AiRequest,
    ClassificationOutcome,
    ClassificationResult,
    TriageRecord,
)
from supporttriage.parsing import normalize_result, parse_reply
from supporttriage.response_templates import recommended_action
from supporttriage.storage.sqlite_store import SqliteStore, StoredTriageRecord

logger = logging.getLogger(__name__)

CLASSIFICATION_PURPOSE = "support_classification"

PROMPT_TEMPLATE = """Analyze this customer support message and respond with ONLY a valid JSON object (no markdown, no code fences, no extra text).

Required JSON shape:
{{
  "category": "one of: Billing Issue, Technical Problem, Feature Request, General Inquiry, Unknown",
  "sentiment": "Neutral or Angry",
  "priority_score": number from 1 to 5 (1=lowest, 5=highest priority),
  "reasoning": "brief explanation of your classification"
}}

Customer message:
{message}"""


def build_prompt(message: str) -> str:
    """Summary: Embed a message verbatim into the classification instructions.

    Importance: The model sees one fixed prompt shape for every request.
    Alternatives: Split instructions into a separate system message.
    """

    return PROMPT_TEMPLATE.format(message=message)


def urgency_for_priority(priority_score: int) -> str:
    """Summary: Map a 1-5 priority score onto an urgency tier.

    Importance: Gives agents a coarse High/Medium/Low signal for queues.
    Alternatives: Show the raw score only.
    """

    if priority_score >= 4:
        return "High"
    if priority_score == 3:
        return "Medium"
    return "Low"


@dataclass(frozen=True)
class MessageClassifier:
    """Summary: Classifies messages with a remote model and a heuristic fallback.

    Importance: Always returns a valid verdict; no failure reaches the caller.
    Alternatives: Surface provider errors and let the UI decide what to show.
    """

    ai_provider: AiProvider
    provider_name: str
    model_name: str
    store: SqliteStore | None = None
    strict_categories: bool = False
    fallback: HeuristicClassifier = field(default_factory=HeuristicClassifier)

    def classify(self, message: str) -> ClassificationResult:
        """Summary: Produce a verdict for a support message.

        Importance: The single entry point used by triage, the API, and the CLI.
        Alternatives: Expose the remote and heuristic paths separately.
        """

        return self.classify_detailed(message).result

    def classify_detailed(self, message: str) -> ClassificationOutcome:
        """Summary: Produce a verdict and report which path produced it.

        Importance: Exactly one remote attempt is made before falling back.
        Alternatives: Retry the provider with backoff before falling back.
        """

        started = time.time()
        try:
            result = self._classify_remote(message)
        except Exception as exc:
            logger.warning("Remote classification failed, using heuristics: %s", exc)
            result = self.fallback.classify(message)
            source = SOURCE_HEURISTIC
        else:
            source = SOURCE_REMOTE
        latency_ms = int((time.time() - started) * 1000)
        logger.info(
            "Classified message as %s (%s, priority %s) via %s.",
            result.category,
            result.sentiment,
            result.priority_score,
            source,
        )
        return ClassificationOutcome(result=result, source=source, latency_ms=latency_ms)

    def _classify_remote(self, message: str) -> ClassificationResult:
        """Summary: Ask the provider for a verdict and normalize whatever comes back.

        Importance: A malformed reply still yields a result through normalization defaults.
        Alternatives: Treat malformed replies as failures.
        """

        prompt = build_prompt(message)
        response_text, latency_ms = self.ai_provider.generate_text(
            prompt, purpose=CLASSIFICATION_PURPOSE
        )
        if self.store is not None:
            try:
                self._audit(prompt, response_text, latency_ms)
            except Exception as exc:
                logger.warning("Failed to record AI audit entry: %s", exc)
        return normalize_result(parse_reply(response_text), strict_categories=self.strict_categories)

    def _audit(self, prompt: str, response_text: str, latency_ms: int) -> None:
        self.store.log_ai_exchange(
            AiRequest(
                provider=self.provider_name,
                model=self.model_name,
                prompt=prompt,
                purpose=CLASSIFICATION_PURPOSE,
                timestamp=datetime.now(timezone.utc),
            ),
            response_text=response_text,
            latency_ms=latency_ms,
            token_estimate=estimate_tokens(response_text),
        )


@dataclass(frozen=True)
class TriageService:
    """Summary: Runs the full analyze workflow for a message.

    Importance: Combines the verdict with urgency and a recommended action, then logs it.
    Alternatives: Let each client derive urgency and actions itself.
    """

    classifier: MessageClassifier
    store: SqliteStore

    def analyze(self, message: str) -> StoredTriageRecord:
        """Summary: Classify a message and append the analysis to the triage log.

        Importance: Blank input is rejected before any provider call.
        Alternatives: Classify blank messages and let the fallback decide.
        """

        if not message.strip():
            raise ValueError("Message must not be empty")
        outcome = self.classifier.classify_detailed(message)
        result = outcome.result
        record = TriageRecord(
            message=message,
            category=result.category,
            sentiment=result.sentiment,
            priority_score=result.priority_score,
            urgency=urgency_for_priority(result.priority_score),
            recommended_action=recommended_action(result.category),
            reasoning=result.reasoning,
            source=outcome.source,
            timestamp=datetime.now(timezone.utc),
        )
        record_id = self.store.append_record(record)
        logger.info("Logged triage record %s.", record_id)
        stored = self.store.get_record(record_id)
        if stored is None:
            raise RuntimeError(f"Triage record {record_id} was not persisted")
        return stored


def format_export(record: StoredTriageRecord) -> str:
    """Summary: Render a triage record as shareable plain text.

    Importance: Matches the copy-to-clipboard format agents paste into tickets.
    Alternatives: Export JSON and let the agent reformat it.
    """

    return (
        f"Category: {record.category}\n"
        f"Sentiment: {record.sentiment}\n"
        f"Priority Score: {record.priority_score}/5\n"
        f"Urgency: {record.urgency}\n"
        f"Recommendation: {record.recommended_action}\n"
        f"\n"
        f"Reasoning: {record.reasoning}"
    )


@dataclass(frozen=True)
class HistoryService:
    """Summary: Read and clear access to the local triage log.

    Importance: Keeps history concerns out of the classification path.
    Alternatives: Query the store directly from each entrypoint.
    """

    store: SqliteStore

    def list_history(self, limit: int = 50) -> list[StoredTriageRecord]:
        """Summary: Return recent analyses, newest first.

        Importance: Powers the history views.
        Alternatives: Return the full log every time.
        """

        return self.store.list_records(limit)

    def get_record(self, record_id: int) -> StoredTriageRecord | None:
        return self.store.get_record(record_id)

    def clear_history(self) -> int:
        """Summary: Remove every entry from the triage log.

        Importance: Explicit, user-initiated reset of local history.
        Alternatives: Archive entries instead of deleting them.
        """

        deleted = self.store.clear_records()
        logger.info("Cleared %s triage records.", deleted)
        return deleted

    def snapshot(self) -> dict[str, object]:
        """Summary: Summarize the triage log.

        Importance: Provides a quick view of volume and mix by category, sentiment, and urgency.
        Alternatives: Compute dashboards in an external BI tool.
        """

        return {
            "total": self.store.count_records(),
            "by_category": self.store.count_records_by("category"),
            "by_sentiment": self.store.count_records_by("sentiment"),
            "by_urgency": self.store.count_records_by("urgency"),
        }


@dataclass(frozen=True)
class AiAuditService:
    """Summary: Provides access to AI audit logs.

    Importance: Enables review of prompts sent and raw replies received.
    Alternatives: Use raw database queries or log files.
    """

    store: SqliteStore

    def list_requests(self, limit: int = 20) -> list[dict[str, str | int]]:
        """Summary: Return recent AI requests.

        Importance: Supports auditing prompts and purposes.
        Alternatives: Skip AI request storage.
        """

        return [
            {
                "id": request.id,
                "provider": request.provider,
                "model": request.model,
                "purpose": request.purpose,
                "timestamp": request.timestamp,
            }
            for request in self.store.list_ai_requests(limit)
        ]

    def list_responses(self, limit: int = 20) -> list[dict[str, str | int]]:
        """Summary: Return recent AI responses.

        Importance: Supports auditing outputs and latency.
        Alternatives: Skip AI response storage.
        """

        return [
            {
                "id": response.id,
                "request_id": response.request_id,
                "response_text": response.response_text,
                "latency_ms": response.latency_ms,
                "token_estimate": response.token_estimate,
            }
            for response in self.store.list_ai_responses(limit)
        ]
