"""Per-session state: selected model, engine handle and status."""

import logging
from collections.abc import AsyncIterator, Callable

from modelfit.catalog.candidate import TradeoffMode
from modelfit.config.schema import ModelfitConfig
from modelfit.llm.client import ChatEngine, EngineLoadError, InferenceEngine, Message
from modelfit.selection.policy import SelectionPolicy, SelectionResult
from modelfit.session.chats import ChatMessage, ChatStore

logger = logging.getLogger(__name__)

STATUS_READY = "Ready."

# (status text, progress fraction or None when idle)
StatusListener = Callable[[str, float | None], None]


class SessionContext:
    """Explicit state for one chat session.

    Each call to ``initialize`` or ``load_model`` starts a new generation.
    Work belonging to an older generation is discarded when it completes,
    so a superseded selection or load never overwrites a newer one.
    """

    def __init__(
        self,
        config: ModelfitConfig,
        policy: SelectionPolicy,
        engine: InferenceEngine,
        on_status: StatusListener | None = None,
    ):
        self.config = config
        self.policy = policy
        self.engine = engine
        self.on_status = on_status

        self.status = "Initializing..."
        self.progress: float | None = None
        self.selection: SelectionResult | None = None
        self.model_id: str | None = None
        self.chat: ChatEngine | None = None
        self._generation = 0

    @property
    def ready(self) -> bool:
        return self.chat is not None

    def _set_status(self, status: str, progress: float | None = None) -> None:
        self.status = status
        self.progress = progress
        logger.debug("Session status: %s", status)
        if self.on_status is not None:
            self.on_status(status, progress)

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def initialize(
        self,
        gpu_name: str,
        tier: int,
        mode: TradeoffMode | str | None = None,
    ) -> SelectionResult | None:
        """Select a model for the GPU and load it.

        Args:
            gpu_name: GPU identifier from the hardware probe
            tier: Performance tier from the hardware probe
            mode: Trade-off mode (configured mode if None)

        Returns:
            The selection, or None if a later call superseded this one
        """
        generation = self._next_generation()
        mode = mode if mode is not None else self.config.selection.mode

        self._set_status("Selecting best model...")
        result = await self.policy.select(gpu_name, tier, mode)

        if not self._is_current(generation):
            logger.debug("Discarding superseded selection for %r", gpu_name)
            return None

        self.selection = result
        if result.insufficient:
            self._set_status(result.status)
            return result

        await self._load(result.chosen_model_id, generation)
        return result

    async def load_model(self, model_id: str) -> bool:
        """Load a specific model, superseding any selection in flight.

        Returns:
            True if the model is loaded and current
        """
        return await self._load(model_id, self._next_generation())

    async def _load(self, model_id: str, generation: int) -> bool:
        self._set_status(f"Loading {model_id}...", 0.0)

        def on_progress(fraction: float, text: str) -> None:
            if self._is_current(generation):
                self._set_status(text, fraction)

        try:
            chat = await self.engine.load(model_id, on_progress)
        except EngineLoadError as e:
            logger.error("Failed to load %s: %s", model_id, e)
            if self._is_current(generation):
                self._set_status(f"Error: {e}")
            return False

        if not self._is_current(generation):
            logger.debug("Discarding superseded load of %s", model_id)
            return False

        self.chat = chat
        self.model_id = model_id
        self._set_status(STATUS_READY)
        return True

    async def send(self, store: ChatStore, text: str) -> AsyncIterator[str]:
        """Send a user message in the current chat and stream the reply.

        Both turns are stored together once the reply completes, so a failed
        stream leaves the chat unchanged.

        Yields:
            Reply deltas

        Raises:
            RuntimeError: If no model is loaded
        """
        if self.chat is None:
            raise RuntimeError("No model loaded")

        chat = store.current
        history = [Message(role="system", content=self.config.engine.system_prompt)]
        history.extend(Message(role=m.role, content=m.content) for m in chat.messages)
        history.append(Message(role="user", content=text))

        reply = ""
        async for delta in self.chat.stream_chat(
            history,
            temperature=self.config.engine.temperature,
            max_tokens=self.config.engine.max_tokens,
        ):
            reply += delta
            yield delta

        store.append_messages(
            [
                ChatMessage(role="user", content=text),
                ChatMessage(role="assistant", content=reply),
            ],
            chat_id=chat.id,
        )
