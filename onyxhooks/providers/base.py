"""Abstract base for all completion providers."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from onyxhooks.models import Completion

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Raised when a provider call fails."""

    def __init__(self, provider_name: str, message: str) -> None:
        self.provider_name = provider_name
        super().__init__(f"[{provider_name}] {message}")


class CompletionProvider(ABC):
    """Abstract base for all completion providers."""

    @abstractmethod
    def name(self) -> str:
        """Return the short provider name (e.g. 'openai', 'claude')."""
        ...

    @abstractmethod
    def model_string(self) -> str:
        """Return the actual model identifier string."""
        ...

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        json_mode: bool = False,
        label: str = "",
    ) -> Completion:
        """Run one completion.

        Args:
            prompt: The user prompt.
            system: Optional system prompt.
            json_mode: Ask the API to constrain output to a JSON object.
            label: Call-site tag used in logs (e.g. "review:sabien").

        Returns:
            Completion dataclass with content and metadata.

        Raises:
            ProviderError: On API failure, timeout, or empty response.
        """
        ...


def parse_json_object(text: str | None) -> dict[str, Any]:
    """Parse a completion body into a dict.

    Tolerates code fences or chatter around the object by retrying on the
    span between the first "{" and the last "}". Anything that does not yield
    a JSON object returns {}.
    """
    if not text:
        return {}
    candidates = [text.strip()]
    start, end = text.find("{"), text.rfind("}")
    if 0 <= start < end:
        candidates.append(text[start:end + 1])
    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(parsed, dict):
            return parsed
    logger.debug("Unparseable JSON completion: %.120s", text)
    return {}
