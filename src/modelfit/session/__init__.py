"""Chat session state and history."""

from modelfit.session.chats import Chat, ChatMessage, ChatStore
from modelfit.session.context import SessionContext

__all__ = ["Chat", "ChatMessage", "ChatStore", "SessionContext"]
