"""Summary: Keyword heuristics for support message classification.

Importance: Provides a deterministic verdict when the remote model is unavailable.
Alternatives: Use a supervised ML classifier trained on past tickets.
"""

from __future__ import annotations

from dataclasses import dataclass

from supporttriage.models import (
    BILLING_ISSUE,
    FEATURE_REQUEST,
    GENERAL_INQUIRY,
    MAX_PRIORITY,
    SENTIMENT_ANGRY,
    SENTIMENT_NEUTRAL,
    TECHNICAL_PROBLEM,
    ClassificationResult,
)

ANGER_INDICATORS = (
    "angry",
    "furious",
    "outraged",
    "unacceptable",
    "worst",
    "terrible",
    "horrible",
    "!!!",
    "urgent",
    "asap",
    "immediately",
)
BILLING_KEYWORDS = ("bill", "payment", "charge", "invoice", "subscription", "refund")
TECHNICAL_KEYWORDS = (
    "bug",
    "error",
    "broken",
    "not working",
    "crash",
    "down",
    "server",
    "loading",
    "issue",
)
FEATURE_KEYWORDS = ("feature", "improve", "suggestion", "would like to see", "enhancement")
GRATITUDE_KEYWORDS = ("thank", "thanks", "appreciate")
CONTRAST_KEYWORDS = ("but", "however")
QUESTION_KEYWORDS = ("how", "what", "?", "can i", "is there")

REASONING = {
    "billing": (
        "Based on keywords related to payments and billing, "
        "this appears to be a billing-related inquiry."
    ),
    "technical": (
        "This message describes technical difficulties or system errors "
        "that may require engineering review."
    ),
    "feature": "The customer is requesting enhancements or new functionality.",
    "inquiry": "This appears to be a general question about the product or service.",
    "positive": "The customer is expressing satisfaction or gratitude.",
    "ambiguous": (
        "The message doesn't contain clear indicators for automatic categorization. "
        "Manual review recommended."
    ),
}


@dataclass(frozen=True)
class HeuristicClassifier:
    """Summary: Ordered keyword rule chain producing a full verdict.

    Importance: Offers deterministic, dependency-free classification as the fallback path.
    Alternatives: Return a fixed Unknown verdict whenever the model fails.
    """

    def classify(self, message: str) -> ClassificationResult:
        """Summary: Classify a message by keyword and punctuation matching.

        Importance: Rules are evaluated in precedence order and the first match wins.
        Alternatives: Score every bucket and pick the highest.
        """

        text = message.lower()
        angry = is_angry(text)
        sentiment = SENTIMENT_ANGRY if angry else SENTIMENT_NEUTRAL
        base_priority = 4 if angry else 2

        if _contains_any(text, BILLING_KEYWORDS):
            return ClassificationResult(
                category=BILLING_ISSUE,
                sentiment=sentiment,
                priority_score=min(MAX_PRIORITY, base_priority + 1),
                reasoning=REASONING["billing"],
            )
        if _contains_any(text, TECHNICAL_KEYWORDS):
            return ClassificationResult(
                category=TECHNICAL_PROBLEM,
                sentiment=sentiment,
                priority_score=MAX_PRIORITY if angry else min(MAX_PRIORITY, base_priority + 2),
                reasoning=REASONING["technical"],
            )
        if _contains_any(text, FEATURE_KEYWORDS):
            return ClassificationResult(
                category=FEATURE_REQUEST,
                sentiment=sentiment,
                priority_score=base_priority,
                reasoning=REASONING["feature"],
            )
        if _contains_any(text, GRATITUDE_KEYWORDS) and not _contains_any(text, CONTRAST_KEYWORDS):
            # gratitude overrides anger indicators such as "!!"
            return ClassificationResult(
                category=GENERAL_INQUIRY,
                sentiment=SENTIMENT_NEUTRAL,
                priority_score=1,
                reasoning=REASONING["positive"],
            )
        if _contains_any(text, QUESTION_KEYWORDS):
            return ClassificationResult(
                category=GENERAL_INQUIRY,
                sentiment=sentiment,
                priority_score=base_priority,
                reasoning=REASONING["inquiry"],
            )
        return ClassificationResult(
            category=GENERAL_INQUIRY,
            sentiment=sentiment,
            priority_score=base_priority,
            reasoning=REASONING["ambiguous"],
        )


def is_angry(text: str) -> bool:
    """Summary: Detect an angry tone from indicator words or repeated exclamation marks.

    Importance: Drives both sentiment and the base priority of every rule.
    Alternatives: Use a sentiment lexicon such as VADER.
    """

    lowered = text.lower()
    return _contains_any(lowered, ANGER_INDICATORS) or lowered.count("!") >= 2


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)
