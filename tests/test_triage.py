"""Summary: Tests for the triage workflow and history.

Importance: Ensures analyses are enriched, logged, and exported correctly.
Alternatives: Validate triage manually through the API.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from supporttriage.ai import MockAiProvider, OfflineProvider
from supporttriage.response_templates import recommended_action
from supporttriage.services import (
    HistoryService,
    MessageClassifier,
    TriageService,
    format_export,
    urgency_for_priority,
)
from supporttriage.storage.sqlite_store import SqliteStore


def _services(tmp_path: Path, provider=None) -> tuple[TriageService, HistoryService]:
    store = SqliteStore(str(tmp_path / "test.db"))
    store.initialize()
    classifier = MessageClassifier(
        ai_provider=provider or OfflineProvider(),
        provider_name="offline",
        model_name="offline",
        store=store,
    )
    return TriageService(classifier=classifier, store=store), HistoryService(store=store)


@pytest.mark.parametrize("score,urgency", [(1, "Low"), (2, "Low"), (3, "Medium"), (4, "High"), (5, "High")])
def test_urgency_tiers(score: int, urgency: str) -> None:
    """Summary: Priority scores map onto Low, Medium, and High.

    Importance: Agents sort queues by urgency tier.
    Alternatives: Show raw scores only.
    """

    assert urgency_for_priority(score) == urgency


def test_analyze_logs_enriched_record(tmp_path: Path) -> None:
    """Summary: Analyze stores the verdict with urgency and action.

    Importance: Confirms the full workflow with the heuristic path.
    Alternatives: Store only the classification verdict.
    """

    triage, history = _services(tmp_path)
    record = triage.analyze("The server is down, this is unacceptable")
    assert record.id > 0
    assert record.category == "Technical Problem"
    assert record.priority_score == 5
    assert record.urgency == "High"
    assert record.recommended_action == recommended_action("Technical Problem")
    assert record.source == "heuristic"
    assert history.list_history(5)[0].id == record.id


def test_analyze_rejects_blank_message(tmp_path: Path) -> None:
    """Summary: Blank messages are rejected before classification.

    Importance: Avoids logging empty analyses.
    Alternatives: Let the fallback classify blank messages.
    """

    triage, history = _services(tmp_path)
    with pytest.raises(ValueError):
        triage.analyze("   ")
    assert history.list_history(5) == []


def test_unknown_remote_category_gets_manual_review_action(tmp_path: Path) -> None:
    """Summary: Novel categories from the model receive the Unknown action.

    Importance: Every logged record has an actionable recommendation.
    Alternatives: Leave the action empty.
    """

    triage, _ = _services(tmp_path, MockAiProvider(reply='{"category": "Shipping", "priority_score": 3}'))
    record = triage.analyze("Where is my parcel?")
    assert record.category == "Shipping"
    assert record.urgency == "Medium"
    assert record.recommended_action == recommended_action("Unknown")
    assert record.source == "remote"


def test_history_is_newest_first_and_clearable(tmp_path: Path) -> None:
    """Summary: History lists newest entries first and clears explicitly.

    Importance: The log is append-only until the user resets it.
    Alternatives: Expire entries automatically.
    """

    triage, history = _services(tmp_path)
    first = triage.analyze("hello there")
    second = triage.analyze("I need a refund")
    assert [record.id for record in history.list_history(10)] == [second.id, first.id]
    assert history.list_history(1)[0].id == second.id
    assert history.clear_history() == 2
    assert history.list_history(10) == []


def test_history_snapshot_counts(tmp_path: Path) -> None:
    """Summary: Snapshot counts records by category, sentiment, and urgency.

    Importance: Powers the statistics view.
    Alternatives: Compute counts in the client.
    """

    triage, history = _services(tmp_path)
    triage.analyze("I need a refund")
    triage.analyze("Refund me now!!")
    triage.analyze("hello there")
    snapshot = history.snapshot()
    assert snapshot["total"] == 3
    assert snapshot["by_category"] == {"Billing Issue": 2, "General Inquiry": 1}
    assert snapshot["by_sentiment"] == {"Angry": 1, "Neutral": 2}
    assert snapshot["by_urgency"] == {"High": 1, "Low": 1, "Medium": 1}


def test_format_export_matches_clipboard_layout(tmp_path: Path) -> None:
    """Summary: Exported text follows the copy-results layout.

    Importance: Agents paste the export into ticket notes.
    Alternatives: Export JSON.
    """

    triage, _ = _services(tmp_path)
    record = triage.analyze("I need a refund")
    text = format_export(record)
    assert text.splitlines()[:5] == [
        "Category: Billing Issue",
        "Sentiment: Neutral",
        "Priority Score: 3/5",
        "Urgency: Medium",
        f"Recommendation: {record.recommended_action}",
    ]
    assert text.endswith(f"\n\nReasoning: {record.reasoning}")
