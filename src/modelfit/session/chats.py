"""Persistent chat history."""

import json
import logging
import time
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CHAT_ID = "1"
DEFAULT_TITLE = "New Chat"


class ChatMessage(BaseModel):
    """One turn of a conversation."""

    role: Literal["system", "user", "assistant"]
    content: str


class Chat(BaseModel):
    """A titled conversation."""

    id: str
    title: str = DEFAULT_TITLE
    messages: list[ChatMessage] = Field(default_factory=list)


_CHAT_LIST = TypeAdapter(list[Chat])


def default_chats() -> list[Chat]:
    return [Chat(id=DEFAULT_CHAT_ID)]


class ChatStore:
    """Ordered chats, read once at start and written on every change.

    With ``path=None`` the store lives only in memory.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path).expanduser() if path is not None else None
        self.chats = self._load()
        self.current_id = self.chats[0].id

    def _load(self) -> list[Chat]:
        if self.path is None or not self.path.exists():
            return default_chats()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            chats = _CHAT_LIST.validate_python(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Could not read chat history from %s, starting fresh: %s", self.path, e)
            return default_chats()

        return chats or default_chats()

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = [chat.model_dump() for chat in self.chats]
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, chat_id: str) -> Chat | None:
        for chat in self.chats:
            if chat.id == chat_id:
                return chat
        return None

    @property
    def current(self) -> Chat:
        """The selected chat, or the first one if the selection is gone."""
        return self.get(self.current_id) or self.chats[0]

    def select(self, chat_id: str) -> Chat:
        """Make ``chat_id`` the current chat.

        Raises:
            KeyError: If no such chat exists
        """
        chat = self.get(chat_id)
        if chat is None:
            raise KeyError(f"No chat with id {chat_id!r}")
        self.current_id = chat_id
        return chat

    def new_chat(self) -> Chat:
        """Append an empty chat and make it current."""
        chat_id = str(int(time.time() * 1000))
        while self.get(chat_id) is not None:
            chat_id = str(int(chat_id) + 1)

        chat = Chat(id=chat_id)
        self.chats.append(chat)
        self.current_id = chat_id
        self.save()
        return chat

    def update_chat(self, updated: Chat) -> None:
        """Replace the stored chat with the same id.

        Raises:
            KeyError: If no such chat exists
        """
        for i, chat in enumerate(self.chats):
            if chat.id == updated.id:
                self.chats[i] = updated
                self.save()
                return
        raise KeyError(f"No chat with id {updated.id!r}")

    def append_message(self, role: str, content: str, chat_id: str | None = None) -> Chat:
        """Add a message to a chat (the current one by default)."""
        return self.append_messages([ChatMessage(role=role, content=content)], chat_id)

    def append_messages(
        self, messages: list[ChatMessage], chat_id: str | None = None
    ) -> Chat:
        """Add several messages to a chat with a single write."""
        chat = self.get(chat_id) if chat_id is not None else self.current
        if chat is None:
            raise KeyError(f"No chat with id {chat_id!r}")

        updated = chat.model_copy(update={"messages": [*chat.messages, *messages]})
        self.update_chat(updated)
        return updated
