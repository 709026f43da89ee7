"""Summary: Domain model dataclasses for SupportTriage.

Importance: Defines the verdict and log entities shared across services and storage.
Alternatives: Use Pydantic models or ORM classes directly.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

BILLING_ISSUE = "Billing Issue"
TECHNICAL_PROBLEM = "Technical Problem"
FEATURE_REQUEST = "Feature Request"
GENERAL_INQUIRY = "General Inquiry"
UNKNOWN_CATEGORY = "Unknown"

CANONICAL_CATEGORIES = (
    BILLING_ISSUE,
    TECHNICAL_PROBLEM,
    FEATURE_REQUEST,
    GENERAL_INQUIRY,
    UNKNOWN_CATEGORY,
)

SENTIMENT_NEUTRAL = "Neutral"
SENTIMENT_ANGRY = "Angry"

DEFAULT_PRIORITY = 3
MIN_PRIORITY = 1
MAX_PRIORITY = 5

SOURCE_REMOTE = "remote"
SOURCE_HEURISTIC = "heuristic"


@dataclass(frozen=True)
class ClassificationResult:
    """Summary: Structured verdict for a single support message.

    Importance: The one value every classification path must produce.
    Alternatives: Return loosely-typed dictionaries from each path.
    """

    category: str
    sentiment: str
    priority_score: int
    reasoning: str

    def to_dict(self) -> dict[str, Any]:
        """Summary: Convert the verdict into a plain dictionary.

        Importance: Feeds JSON responses and re-normalization.
        Alternatives: Serialize fields manually at each call site.
        """

        return asdict(self)


@dataclass(frozen=True)
class ClassificationOutcome:
    """Summary: Verdict paired with the path that produced it.

    Importance: Lets callers record whether the remote model or the fallback answered.
    Alternatives: Add a source field to ClassificationResult itself.
    """

    result: ClassificationResult
    source: str
    latency_ms: int = 0


@dataclass(frozen=True)
class TriageRecord:
    """Summary: Represents one analyzed message in the local triage log.

    Importance: Captures the verdict together with its derived urgency and action.
    Alternatives: Store only the raw verdict and recompute derived fields on read.
    """

    message: str
    category: str
    sentiment: str
    priority_score: int
    urgency: str
    recommended_action: str
    reasoning: str
    source: str
    timestamp: datetime


@dataclass(frozen=True)
class AiRequest:
    """Summary: Records an AI request for audit and traceability.

    Importance: Provides visibility into prompts and provider usage.
    Alternatives: Log requests only in observability logs.
    """

    provider: str
    model: str
    prompt: str
    purpose: str
    timestamp: datetime


@dataclass(frozen=True)
class AiResponse:
    """Summary: Records an AI response paired to a request.

    Importance: Enables audit trails for raw model replies.
    Alternatives: Store only the normalized verdict in the triage log.
    """

    request_id: int
    response_text: str
    latency_ms: int
    token_estimate: int
