"""Summary: Canned response actions per message category.

Importance: Turns a classification into a concrete next step for the support agent.
Alternatives: Ask the language model to draft an action for every message.
"""

from __future__ import annotations

from dataclasses import dataclass

from supporttriage.models import (
    BILLING_ISSUE,
    FEATURE_REQUEST,
    GENERAL_INQUIRY,
    TECHNICAL_PROBLEM,
    UNKNOWN_CATEGORY,
)


@dataclass(frozen=True)
class ResponseTemplate:
    """Summary: Associates a category with its recommended action.

    Importance: Keeps canned guidance reviewable in one place.
    Alternatives: Store templates in JSON files outside the codebase.
    """

    category: str
    action: str


def list_templates() -> list[ResponseTemplate]:
    """Summary: Return the available response templates.

    Importance: Powers CLI and API discovery of canned actions.
    Alternatives: Use a plugin system to discover templates dynamically.
    """

    return [
        ResponseTemplate(
            category=BILLING_ISSUE,
            action=(
                "Route to the billing team. Verify recent charges and invoices, "
                "and confirm refund eligibility before replying."
            ),
        ),
        ResponseTemplate(
            category=TECHNICAL_PROBLEM,
            action=(
                "Escalate to technical support. Ask for steps to reproduce, device and "
                "browser details, and any error messages or screenshots."
            ),
        ),
        ResponseTemplate(
            category=FEATURE_REQUEST,
            action=(
                "Thank the customer, log the request in the product feedback tracker, "
                "and share it with the product team."
            ),
        ),
        ResponseTemplate(
            category=GENERAL_INQUIRY,
            action=(
                "Reply with the relevant help-center article or FAQ entry and offer "
                "further assistance."
            ),
        ),
        ResponseTemplate(
            category=UNKNOWN_CATEGORY,
            action="Assign to a support agent for manual review and categorization.",
        ),
    ]


def recommended_action(category: str) -> str:
    """Summary: Look up the recommended action for a category.

    Importance: Unrecognized labels from the model still receive actionable guidance.
    Alternatives: Raise for categories without a template.
    """

    templates = {template.category: template.action for template in list_templates()}
    if category in templates:
        return templates[category]
    folded = {name.lower(): action for name, action in templates.items()}
    return folded.get(category.strip().lower(), templates[UNKNOWN_CATEGORY])
