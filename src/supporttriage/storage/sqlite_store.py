"""Summary: SQLite storage implementation for SupportTriage.

Importance: Provides the local append-only triage log and AI audit tables.
Alternatives: Write JSON lines to a flat file.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from supporttriage.models import AiRequest, AiResponse, TriageRecord

_TRIAGE_COLUMNS = (
    "id, message, category, sentiment, priority_score, urgency, "
    "recommended_action, reasoning, source, timestamp"
)
_GROUPABLE_COLUMNS = {"category", "sentiment", "urgency", "source"}


@dataclass(frozen=True)
class StoredTriageRecord:
    """Summary: Triage log entry with database identifier.

    Importance: Lets clients fetch and export a single past analysis.
    Alternatives: Address entries by timestamp only.
    """

    id: int
    message: str
    category: str
    sentiment: str
    priority_score: int
    urgency: str
    recommended_action: str
    reasoning: str
    source: str
    timestamp: str


@dataclass(frozen=True)
class StoredAiRequest:
    """Summary: AI request record with database identifier.

    Importance: Supports listing prompts sent to providers.
    Alternatives: Keep prompts only in application logs.
    """

    id: int
    provider: str
    model: str
    prompt: str
    purpose: str
    timestamp: str


@dataclass(frozen=True)
class StoredAiResponse:
    """Summary: AI response record with database identifier.

    Importance: Supports reviewing raw model replies and latency.
    Alternatives: Keep replies only in application logs.
    """

    id: int
    request_id: int
    response_text: str
    latency_ms: int
    token_estimate: int


class SqliteStore:
    """Summary: SQLite-backed storage for SupportTriage.

    Importance: Enables local-first persistence with minimal dependencies.
    Alternatives: Use Postgres and SQLAlchemy from day one.
    """

    def __init__(self, db_path: str) -> None:
        """Summary: Initialize the storage with a database path.

        Importance: Allows configurable database location per environment.
        Alternatives: Hardcode a default path in the class.
        """

        self._db_path = Path(db_path)

    def initialize(self) -> None:
        """Summary: Create tables if they do not exist.

        Importance: Ensures the database is ready before the first analysis.
        Alternatives: Run migrations using a dedicated migration tool.
        """

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS triage_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    message TEXT NOT NULL,
                    category TEXT NOT NULL,
                    sentiment TEXT NOT NULL,
                    priority_score INTEGER NOT NULL,
                    urgency TEXT NOT NULL,
                    recommended_action TEXT NOT NULL,
                    reasoning TEXT NOT NULL,
                    source TEXT NOT NULL,
                    timestamp TEXT NOT NULL
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS ai_requests (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    provider TEXT NOT NULL,
                    model TEXT NOT NULL,
                    prompt TEXT NOT NULL,
                    purpose TEXT NOT NULL,
                    timestamp TEXT NOT NULL
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS ai_responses (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    request_id INTEGER NOT NULL,
                    response_text TEXT NOT NULL,
                    latency_ms INTEGER NOT NULL,
                    token_estimate INTEGER NOT NULL
                )
                """
            )
            connection.commit()

    def append_record(self, record: TriageRecord) -> int:
        """Summary: Append an analysis to the triage log.

        Importance: The log only grows; entries are never updated in place.
        Alternatives: Upsert records keyed by message text.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                INSERT INTO triage_history (
                    message, category, sentiment, priority_score, urgency,
                    recommended_action, reasoning, source, timestamp
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.message,
                    record.category,
                    record.sentiment,
                    record.priority_score,
                    record.urgency,
                    record.recommended_action,
                    record.reasoning,
                    record.source,
                    record.timestamp.isoformat(),
                ),
            )
            record_id = cursor.lastrowid
            connection.commit()
        return int(record_id)

    def list_records(self, limit: int) -> list[StoredTriageRecord]:
        """Summary: Retrieve recent triage log entries, newest first.

        Importance: Backs the history listing in the CLI and API.
        Alternatives: Page through entries with an offset cursor.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                f"SELECT {_TRIAGE_COLUMNS} FROM triage_history ORDER BY id DESC LIMIT ?",
                (limit,),
            )
            rows = cursor.fetchall()
        return [StoredTriageRecord(*row) for row in rows]

    def get_record(self, record_id: int) -> StoredTriageRecord | None:
        """Summary: Fetch a single triage log entry.

        Importance: Supports exporting one past analysis.
        Alternatives: Filter the full listing client-side.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                f"SELECT {_TRIAGE_COLUMNS} FROM triage_history WHERE id = ?",
                (record_id,),
            )
            row = cursor.fetchone()
        return StoredTriageRecord(*row) if row else None

    def clear_records(self) -> int:
        """Summary: Delete every triage log entry.

        Importance: The only removal path for the append-only log.
        Alternatives: Expire entries automatically by age.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute("DELETE FROM triage_history")
            deleted = cursor.rowcount
            connection.commit()
        return int(deleted)

    def count_records(self) -> int:
        """Return the number of triage log entries."""

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute("SELECT COUNT(*) FROM triage_history")
            row = cursor.fetchone()
        return int(row[0]) if row else 0

    def count_records_by(self, column: str) -> dict[str, int]:
        """Summary: Count triage log entries grouped by a column.

        Importance: Feeds history statistics without loading every row.
        Alternatives: Aggregate in Python after a full scan.
        """

        if column not in _GROUPABLE_COLUMNS:
            raise ValueError(f"Cannot group triage history by {column}")
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                f"SELECT {column}, COUNT(*) FROM triage_history GROUP BY {column} ORDER BY {column}"
            )
            rows = cursor.fetchall()
        return {str(value): int(count) for value, count in rows}

    def log_ai_request(self, request: AiRequest) -> int:
        """Summary: Persist an AI request for auditing.

        Importance: Tracks prompts and providers used by the system.
        Alternatives: Use structured logs instead of database storage.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                INSERT INTO ai_requests (provider, model, prompt, purpose, timestamp)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    request.provider,
                    request.model,
                    request.prompt,
                    request.purpose,
                    request.timestamp.isoformat(),
                ),
            )
            request_id = cursor.lastrowid
            connection.commit()
        return int(request_id)

    def log_ai_response(self, response: AiResponse) -> int:
        """Summary: Persist an AI response for auditing.

        Importance: Enables traceability of AI outputs and latency.
        Alternatives: Store responses in a flat log file.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                INSERT INTO ai_responses (request_id, response_text, latency_ms, token_estimate)
                VALUES (?, ?, ?, ?)
                """,
                (
                    response.request_id,
                    response.response_text,
                    response.latency_ms,
                    response.token_estimate,
                ),
            )
            response_id = cursor.lastrowid
            connection.commit()
        return int(response_id)

    def log_ai_exchange(
        self, request: AiRequest, response_text: str, latency_ms: int, token_estimate: int
    ) -> int:
        """Summary: Persist an AI request and its reply in one transaction.

        Importance: A failed write never leaves a request row without its response.
        Alternatives: Call log_ai_request and log_ai_response separately.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                INSERT INTO ai_requests (provider, model, prompt, purpose, timestamp)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    request.provider,
                    request.model,
                    request.prompt,
                    request.purpose,
                    request.timestamp.isoformat(),
                ),
            )
            request_id = cursor.lastrowid
            cursor.execute(
                """
                INSERT INTO ai_responses (request_id, response_text, latency_ms, token_estimate)
                VALUES (?, ?, ?, ?)
                """,
                (request_id, response_text, latency_ms, token_estimate),
            )
            connection.commit()
        return int(request_id)

    def list_ai_requests(self, limit: int) -> list[StoredAiRequest]:
        """Summary: Retrieve recent AI requests, newest first.

        Importance: Supports auditing prompts and purposes.
        Alternatives: Query the table directly with sqlite3.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                SELECT id, provider, model, prompt, purpose, timestamp
                FROM ai_requests
                ORDER BY id DESC
                LIMIT ?
                """,
                (limit,),
            )
            rows = cursor.fetchall()
        return [StoredAiRequest(*row) for row in rows]

    def list_ai_responses(self, limit: int) -> list[StoredAiResponse]:
        """Summary: Retrieve recent AI responses, newest first.

        Importance: Supports auditing raw replies and latency.
        Alternatives: Query the table directly with sqlite3.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                SELECT id, request_id, response_text, latency_ms, token_estimate
                FROM ai_responses
                ORDER BY id DESC
                LIMIT ?
                """,
                (limit,),
            )
            rows = cursor.fetchall()
        return [StoredAiResponse(*row) for row in rows]

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Summary: Context manager for SQLite connections.

        Importance: Ensures connections are closed cleanly after use.
        Alternatives: Keep a single long-lived connection.
        """

        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
        finally:
            connection.close()
