"""Provider interface shared by every model SDK client."""

from typing import Protocol, runtime_checkable

from council.models import Completion


class ProviderError(Exception):
    """Raised when a provider call fails."""

    def __init__(self, provider_name: str, message: str) -> None:
        self.provider_name = provider_name
        super().__init__(f"[{provider_name}] {message}")


@runtime_checkable
class AIProvider(Protocol):
    """What the executor needs from a model client. Implemented per SDK."""

    def name(self) -> str:
        """Return the short provider name (e.g. 'gemini', 'anthropic')."""
        ...

    def model_string(self) -> str:
        """Return the actual model identifier string."""
        ...

    async def generate(self, prompt: str, system_prompt: str, temperature: float) -> Completion:
        """Generate a completion for the given prompt.

        Args:
            prompt: The user-turn prompt text.
            system_prompt: The agent's system prompt.
            temperature: Sampling temperature for this agent.

        Returns:
            Completion dataclass with content and metadata.

        Raises:
            ProviderError: On API failure, timeout, or empty output.
        """
        ...
