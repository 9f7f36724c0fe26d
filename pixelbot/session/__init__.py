"""Per-chat session state."""

from pixelbot.session.manager import Session, SessionManager, SubscriptionRegistry, chat_key

__all__ = ["Session", "SessionManager", "SubscriptionRegistry", "chat_key"]
