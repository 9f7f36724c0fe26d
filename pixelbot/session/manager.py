"""Per-chat session context and subscription tracking."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pixelbot.scheduler.playlist import PlaylistState


def chat_key(chat: Any) -> str:
    """Derive the session identity from a raw chat reference."""
    if isinstance(chat, Mapping):
        for key in ("id", "chat_id", "chatId"):
            value = chat.get(key)
            if value not in (None, ""):
                return str(value).strip()
        return ""
    if chat is None:
        return ""
    return str(chat).strip()


@dataclass(slots=True, eq=False)
class Session:
    """Conversation endpoint and everything the bot remembers about it."""

    chat_id: str
    chat: Any = None
    subscriptions: set[str] = field(default_factory=set)
    device_state: dict[str, Any] = field(default_factory=dict)
    playlist: PlaylistState = field(default_factory=PlaylistState)
    state: dict[str, Any] = field(default_factory=dict)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def is_subscribed(self, topic: str) -> bool:
        return topic in self.subscriptions


class SessionManager:
    """Creates sessions on first reference and keeps them for the process lifetime."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def get_or_create(self, chat: Any) -> Session:
        key = chat_key(chat)
        if not key:
            raise ValueError("chat id is required")
        session = self._sessions.get(key)
        if session is None:
            session = Session(chat_id=key, chat=chat)
            self._sessions[key] = session
        elif chat is not None and isinstance(chat, Mapping):
            session.chat = chat
        return session

    def get(self, chat_id: str) -> Session | None:
        return self._sessions.get(str(chat_id))

    def __len__(self) -> int:
        return len(self._sessions)


class SubscriptionRegistry:
    """At most one subscribed session per topic; subscribing replaces the holder."""

    def __init__(self) -> None:
        self._holders: dict[str, Session] = {}

    def set(self, topic: str, session: Session, subscribed: bool) -> None:
        current = self._holders.get(topic)
        if subscribed:
            if current is not None and current is not session:
                current.subscriptions.discard(topic)
            self._holders[topic] = session
            session.subscriptions.add(topic)
            return
        session.subscriptions.discard(topic)
        if current is session:
            self._holders.pop(topic, None)

    def subscriber(self, topic: str) -> Session | None:
        return self._holders.get(topic)

    def topics(self) -> list[str]:
        return sorted(self._holders)
