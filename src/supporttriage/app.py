"""Summary: Application factory wiring core services.

Importance: Centralizes dependency creation for the CLI and API layers.
Alternatives: Instantiate services manually in each entrypoint.
"""

from __future__ import annotations

from dataclasses import dataclass

from supporttriage.ai import AiProvider, AiProviderFactory
from supporttriage.config import AppConfig
from supporttriage.services import (
    AiAuditService,
    HistoryService,
    MessageClassifier,
    TriageService,
)
from supporttriage.storage.sqlite_store import SqliteStore


@dataclass(frozen=True)
class AppServices:
    """Summary: Bundle of core services for SupportTriage.

    Importance: Simplifies passing dependencies to UI or API layers.
    Alternatives: Use a dependency injection container.
    """

    classifier: MessageClassifier
    triage: TriageService
    history: HistoryService
    ai_audit: AiAuditService
    store: SqliteStore


def build_services(config: AppConfig, ai_provider: AiProvider | None = None) -> AppServices:
    """Summary: Build core services from configuration.

    Importance: Provides a single construction path; tests may inject a provider.
    Alternatives: Instantiate services directly within each entrypoint.
    """

    store = SqliteStore(config.db_path)
    store.initialize()
    provider = ai_provider or AiProviderFactory(config).build()
    classifier = MessageClassifier(
        ai_provider=provider,
        provider_name=config.ai_provider,
        model_name=config.model_name,
        store=store,
        strict_categories=config.strict_categories,
    )
    return AppServices(
        classifier=classifier,
        triage=TriageService(classifier=classifier, store=store),
        history=HistoryService(store=store),
        ai_audit=AiAuditService(store=store),
        store=store,
    )
