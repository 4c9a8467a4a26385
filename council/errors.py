"""Errors surfaced by the orchestration engine to its callers."""


class ConfigurationError(ValueError):
    """Raised for an unknown strategy, unknown agent, or invalid settings.

    Always raised before any agent is called.
    """


class SynthesisError(RuntimeError):
    """Raised when the chair agent cannot produce the final answer."""

    def __init__(self, agent_id: str, message: str) -> None:
        self.agent_id = agent_id
        super().__init__(f"[{agent_id}] {message}")
