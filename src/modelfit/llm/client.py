"""Inference engine protocols and data types."""

from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import Protocol

# (fraction complete, status text)
ProgressCallback = Callable[[float, str], None]


class EngineLoadError(Exception):
    """The inference engine could not load a model."""


@dataclass
class Message:
    """A message in the conversation."""

    role: str  # "system", "user", "assistant"
    content: str


class ChatEngine(Protocol):
    """A loaded model that streams chat completions."""

    model_id: str

    def stream_chat(
        self,
        messages: list[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Stream a reply.

        Args:
            messages: Conversation history
            temperature: Sampling temperature override
            max_tokens: Maximum tokens to generate

        Yields:
            Content deltas as they arrive
        """
        ...


class InferenceEngine(Protocol):
    """Loads models by identifier."""

    async def load(
        self, model_id: str, progress: ProgressCallback | None = None
    ) -> ChatEngine:
        """Load a model, reporting progress.

        Raises:
            EngineLoadError: If the model cannot be loaded
        """
        ...
