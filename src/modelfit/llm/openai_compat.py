"""Inference engine backed by an OpenAI-compatible server."""

import logging
from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from modelfit.llm.client import EngineLoadError, Message, ProgressCallback

logger = logging.getLogger(__name__)


def _ignore_progress(fraction: float, text: str) -> None:
    pass


class OpenAICompatibleChat:
    """Streams chat completions for one model served by the backend."""

    def __init__(
        self,
        model_id: str,
        client: AsyncOpenAI,
        temperature: float = 0.7,
        max_tokens: int = 256,
    ) -> None:
        self.model_id = model_id
        self.client = client
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _convert_messages(self, messages: list[Message]) -> list[dict[str, Any]]:
        return [{"role": msg.role, "content": msg.content} for msg in messages]

    async def stream_chat(
        self,
        messages: list[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Stream a reply.

        Args:
            messages: Conversation history.
            temperature: Sampling temperature override.
            max_tokens: Maximum tokens override.

        Yields:
            Content deltas as strings.
        """
        params: dict[str, Any] = {
            "model": self.model_id,
            "messages": self._convert_messages(messages),
            "temperature": temperature if temperature is not None else self.temperature,
            "max_tokens": max_tokens or self.max_tokens,
            "stream": True,
        }

        stream = await self.client.chat.completions.create(**params)

        async for chunk in stream:
            if chunk.choices and chunk.choices[0].delta.content:
                yield chunk.choices[0].delta.content


class OpenAICompatibleEngine:
    """Loads models from any OpenAI-compatible inference server.

    vLLM, SGLang, Ollama, llama.cpp and MLC's own server all expose
    ``/v1/models`` and ``/v1/chat/completions``. Loading a model means
    confirming the server is reachable and serves it.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "none",
        timeout: int = 120,
        max_retries: int = 2,
        temperature: float = 0.7,
        max_tokens: int = 256,
    ) -> None:
        """Initialise the engine.

        Args:
            base_url: OpenAI-compatible endpoint (must include ``/v1``).
            api_key: API key (many backends ignore this but the SDK requires one).
            timeout: Request timeout in seconds.
            max_retries: SDK retries on connection errors.
            temperature: Default sampling temperature.
            max_tokens: Default reply length limit.
        """
        self.base_url = base_url
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = AsyncOpenAI(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
        )

    async def served_models(self) -> list[str]:
        """Model identifiers the server currently serves.

        Raises:
            EngineLoadError: If the server cannot be reached
        """
        try:
            page = await self.client.models.list()
        except OpenAIError as e:
            raise EngineLoadError(f"Inference server at {self.base_url} unavailable: {e}") from e
        return [model.id for model in page.data]

    async def load(
        self, model_id: str, progress: ProgressCallback | None = None
    ) -> OpenAICompatibleChat:
        """Load ``model_id``, reporting progress along the way.

        Raises:
            EngineLoadError: If the server is down or does not serve the model
        """
        report = progress or _ignore_progress

        report(0.0, f"Connecting to {self.base_url}...")
        served = await self.served_models()

        report(0.5, f"Checking {len(served)} served models...")
        if model_id not in served:
            raise EngineLoadError(f"Model {model_id} is not served by {self.base_url}")

        report(1.0, f"Loaded {model_id}")
        logger.info("Engine ready with %s", model_id)
        return OpenAICompatibleChat(
            model_id,
            self.client,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
