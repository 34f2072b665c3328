"""Inference engine integration."""

from modelfit.llm.client import (
    ChatEngine,
    EngineLoadError,
    InferenceEngine,
    Message,
    ProgressCallback,
)
from modelfit.llm.openai_compat import OpenAICompatibleChat, OpenAICompatibleEngine

__all__ = [
    "ChatEngine",
    "EngineLoadError",
    "InferenceEngine",
    "Message",
    "OpenAICompatibleChat",
    "OpenAICompatibleEngine",
    "ProgressCallback",
]
