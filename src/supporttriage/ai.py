"""Summary: AI provider abstraction and implementations.

Importance: Keeps the classifier independent of any single model vendor.
Alternatives: Call provider SDKs directly inside the classifier.
"""

from __future__ import annotations

import json
import time
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from supporttriage.config import AppConfig


class AiProviderError(RuntimeError):
    """Summary: Base error for failed remote generation.

    Importance: Gives callers one type to catch for every provider failure.
    Alternatives: Let urllib and JSON errors leak to callers.
    """


class NetworkError(AiProviderError):
    """Summary: Raised when the provider endpoint cannot be reached.

    Importance: Separates connectivity problems from rejected requests.
    Alternatives: Fold all failures into a single error type.
    """


class ApiError(AiProviderError):
    """Summary: Raised when the provider rejects a request or replies unusably.

    Importance: Covers authentication, rate limits, and malformed envelopes.
    Alternatives: Return None and let callers guess what went wrong.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AiProvider(ABC):
    """Summary: Abstract interface for AI text generation.

    Importance: Allows switching between hosted and local LLMs without refactors.
    Alternatives: Use a single vendor SDK and accept lock-in risk.
    """

    @abstractmethod
    def generate_text(self, prompt: str, purpose: str) -> tuple[str, int]:
        """Summary: Generate a response for a prompt.

        Importance: Standardizes AI outputs for downstream parsing.
        Alternatives: Return provider-specific response objects directly.
        """


DEFAULT_MOCK_REPLY = json.dumps(
    {
        "category": "General Inquiry",
        "sentiment": "Neutral",
        "priority_score": 2,
        "reasoning": "Mock provider reply.",
    }
)


class MockAiProvider(AiProvider):
    """Summary: Deterministic AI provider for local testing.

    Importance: Enables offline workflows and repeatable tests.
    Alternatives: Use a small local LLM for all development tasks.
    """

    def __init__(self, reply: str = DEFAULT_MOCK_REPLY) -> None:
        self._reply = reply
        self.prompts: list[str] = []

    def generate_text(self, prompt: str, purpose: str) -> tuple[str, int]:
        """Summary: Return the canned reply and remember the prompt.

        Importance: Lets tests inspect the prompt that would have been sent.
        Alternatives: Use fixture-based responses loaded from files.
        """

        started = time.time()
        self.prompts.append(prompt)
        latency_ms = int((time.time() - started) * 1000)
        return self._reply, latency_ms


class OfflineProvider(AiProvider):
    """Summary: Provider that always fails.

    Importance: Forces the heuristic fallback when no remote model should be used.
    Alternatives: Special-case a missing provider inside the classifier.
    """

    def generate_text(self, prompt: str, purpose: str) -> tuple[str, int]:
        raise ApiError("Remote classification is disabled (offline provider)")


class ChatCompletionProvider(AiProvider):
    """Summary: AI provider for OpenAI-compatible chat completion endpoints.

    Importance: One implementation serves Groq, OpenAI, and compatible gateways.
    Alternatives: Maintain a separate HTTP client per vendor.
    """

    name = "chat"

    def __init__(
        self,
        api_key: str | None,
        model: str,
        base_url: str,
        temperature: float = 0.3,
        timeout: float = 60.0,
    ) -> None:
        """Summary: Initialize the provider.

        Importance: Stores credentials and endpoint details for repeated requests.
        Alternatives: Pass the API key per request from a caller.
        """

        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._temperature = temperature
        self._timeout = timeout

    def generate_text(self, prompt: str, purpose: str) -> tuple[str, int]:
        """Summary: Generate text using a single user-role chat completion.

        Importance: Sends exactly one request with no retries.
        Alternatives: Stream tokens and assemble the reply incrementally.
        """

        if not self._api_key:
            raise ApiError(f"{self.name} API key is not configured")
        payload = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self._temperature,
        }
        request = urllib.request.Request(
            url=f"{self._base_url}/chat/completions",
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._api_key}",
            },
            method="POST",
        )
        started = time.time()
        raw = _post_json(request, self._timeout, self.name)
        latency_ms = int((time.time() - started) * 1000)
        try:
            content = raw["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ApiError(f"{self.name} response missing message content") from exc
        if not isinstance(content, str):
            raise ApiError(f"{self.name} response content is not text")
        return content.strip(), latency_ms


class GroqProvider(ChatCompletionProvider):
    """Summary: Chat completion provider targeting Groq's hosted models.

    Importance: Default remote classifier backend.
    Alternatives: Use the groq SDK client.
    """

    name = "groq"


class OpenAiProvider(ChatCompletionProvider):
    """Summary: Chat completion provider targeting OpenAI.

    Importance: Drop-in alternative when Groq is unavailable.
    Alternatives: Use the responses API or a different provider.
    """

    name = "openai"


class OllamaProvider(AiProvider):
    """Summary: AI provider that targets a local Ollama server.

    Importance: Supports classifying messages without sending them off the machine.
    Alternatives: Use llama.cpp directly with a Python binding.
    """

    def __init__(self, base_url: str, model: str, temperature: float = 0.3, timeout: float = 60.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._temperature = temperature
        self._timeout = timeout

    def generate_text(self, prompt: str, purpose: str) -> tuple[str, int]:
        """Summary: Generate text using the Ollama HTTP API.

        Importance: Enables local inference for classification.
        Alternatives: Use Ollama's CLI and parse its output.
        """

        payload = json.dumps(
            {
                "model": self._model,
                "prompt": prompt,
                "stream": False,
                "options": {"temperature": self._temperature},
            }
        )
        request = urllib.request.Request(
            url=f"{self._base_url}/api/generate",
            data=payload.encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        started = time.time()
        raw = _post_json(request, self._timeout, "ollama")
        latency_ms = int((time.time() - started) * 1000)
        response = raw.get("response") if isinstance(raw, dict) else None
        if not isinstance(response, str):
            raise ApiError("ollama response missing text")
        return response, latency_ms


def _post_json(request: urllib.request.Request, timeout: float, provider: str) -> Any:
    """Summary: Send a prepared request and decode the JSON envelope.

    Importance: Maps transport failures onto the provider error hierarchy.
    Alternatives: Use requests or httpx with their own exception types.
    """

    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            body = response.read().decode("utf-8")
    except urllib.error.HTTPError as exc:
        raise ApiError(f"{provider} request rejected: HTTP {exc.code}", status_code=exc.code) from exc
    except OSError as exc:
        raise NetworkError(f"{provider} request failed: {exc}") from exc
    try:
        return json.loads(body)
    except ValueError as exc:
        raise ApiError(f"{provider} returned a non-JSON envelope") from exc


@dataclass(frozen=True)
class AiProviderFactory:
    """Summary: Factory for selecting AI providers from configuration.

    Importance: Keeps provider selection logic centralized.
    Alternatives: Wire providers manually at the application entrypoint.
    """

    config: AppConfig

    def build(self) -> AiProvider:
        """Summary: Construct the configured AI provider.

        Importance: Missing API keys surface as call-time failures, not startup crashes.
        Alternatives: Refuse to start without credentials.
        """

        name = self.config.ai_provider
        if name == "groq":
            return GroqProvider(
                self.config.groq_api_key,
                self.config.groq_model,
                self.config.groq_base_url,
                temperature=self.config.temperature,
                timeout=self.config.request_timeout_seconds,
            )
        if name == "openai":
            return OpenAiProvider(
                self.config.openai_api_key,
                self.config.openai_model,
                self.config.openai_base_url,
                temperature=self.config.temperature,
                timeout=self.config.request_timeout_seconds,
            )
        if name == "ollama":
            return OllamaProvider(
                self.config.ollama_url,
                self.config.ollama_model,
                temperature=self.config.temperature,
                timeout=self.config.request_timeout_seconds,
            )
        if name == "mock":
            return MockAiProvider()
        if name == "offline":
            return OfflineProvider()
        raise ValueError(f"Unknown AI provider: {name}")


def estimate_tokens(text: str) -> int:
    """Summary: Estimate tokens from text length.

    Importance: Provides a rough metric for AI usage auditing.
    Alternatives: Use provider token counters or tiktoken.
    """

    return max(1, len(text) // 4)
