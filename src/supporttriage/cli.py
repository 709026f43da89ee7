"""Summary: Command-line interface for SupportTriage.

Importance: Provides a local entry point for classifying and reviewing messages.
Alternatives: Build a web UI or desktop client first.
"""

from __future__ import annotations

import argparse
import logging
import sys

from supporttriage.app import build_services
from supporttriage.config import AppConfig
from supporttriage.response_templates import list_templates
from supporttriage.services import format_export


def build_parser() -> argparse.ArgumentParser:
    """Summary: Build the CLI argument parser.

    Importance: Defines supported commands for local operation.
    Alternatives: Use a CLI framework like Typer or Click.
    """

    parser = argparse.ArgumentParser(description="SupportTriage CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    classify = subparsers.add_parser("classify", help="Classify a message without logging it")
    classify.add_argument("message", type=str, help="Message text, or - to read stdin")

    analyze = subparsers.add_parser("analyze", help="Analyze a message and log the result")
    analyze.add_argument("message", type=str, help="Message text, or - to read stdin")

    history = subparsers.add_parser("history", help="List past analyses")
    history.add_argument("--limit", type=int, default=20)

    show = subparsers.add_parser("show", help="Show a past analysis")
    show.add_argument("record_id", type=int)

    export = subparsers.add_parser("export", help="Print a past analysis as plain text")
    export.add_argument("record_id", type=int)

    subparsers.add_parser("clear-history", help="Delete all past analyses")
    subparsers.add_parser("stats", help="Show triage log statistics")
    subparsers.add_parser("list-templates", help="List recommended actions per category")

    ai_requests = subparsers.add_parser("ai-requests", help="List recent AI requests")
    ai_requests.add_argument("--limit", type=int, default=20)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=None)
    serve.add_argument("--port", type=int, default=None)

    return parser


def _read_message(value: str) -> str:
    if value == "-":
        return sys.stdin.read()
    return value


def run_cli(argv: list[str] | None = None) -> int:
    """Summary: Execute CLI commands based on arguments.

    Importance: Drives local workflows without the HTTP API.
    Alternatives: Invoke services via an HTTP API.
    """

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)
    config = AppConfig.from_env()

    if args.command == "serve":
        import uvicorn

        uvicorn.run(
            "supporttriage.api:app_factory",
            factory=True,
            host=args.host or config.api_host,
            port=args.port or config.api_port,
        )
        return 0

    if args.command == "list-templates":
        for template in list_templates():
            print(f"{template.category}: {template.action}")
        return 0

    services = build_services(config)

    if args.command == "classify":
        outcome = services.classifier.classify_detailed(_read_message(args.message))
        result = outcome.result
        print(f"Category: {result.category}")
        print(f"Sentiment: {result.sentiment}")
        print(f"Priority Score: {result.priority_score}/5")
        print(f"Reasoning: {result.reasoning}")
        print(f"Source: {outcome.source}")
        return 0

    if args.command == "analyze":
        try:
            record = services.triage.analyze(_read_message(args.message))
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        print(f"Saved analysis #{record.id} ({record.source}).")
        print(format_export(record))
        return 0

    if args.command == "history":
        for record in services.history.list_history(args.limit):
            preview = record.message.replace("\n", " ")[:60]
            print(
                f"#{record.id} {record.timestamp} {record.urgency}: "
                f"{record.category} / {record.sentiment} - {preview}"
            )
        return 0

    if args.command in {"show", "export"}:
        record = services.history.get_record(args.record_id)
        if record is None:
            print(f"Error: no analysis with id {args.record_id}", file=sys.stderr)
            return 1
        if args.command == "show":
            print(f"Message: {record.message}")
            print(f"Timestamp: {record.timestamp}")
            print(f"Source: {record.source}")
        print(format_export(record))
        return 0

    if args.command == "clear-history":
        deleted = services.history.clear_history()
        print(f"Deleted {deleted} analyses.")
        return 0

    if args.command == "stats":
        snapshot = services.history.snapshot()
        for key, value in snapshot.items():
            print(f"{key}: {value}")
        return 0

    if args.command == "ai-requests":
        for request in services.ai_audit.list_requests(limit=args.limit):
            print(
                f"#{request['id']} {request['timestamp']} "
                f"{request['provider']}/{request['model']} ({request['purpose']})"
            )
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 2


def main() -> None:
    """Console script entry point."""

    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
