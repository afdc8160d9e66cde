"""
In-process notification center.

One instance per application (kept on ``app.state``), holding a separate
notification list per user. Handlers publish after a status change has been
accepted; users read and dismiss their own entries.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import UTC, datetime
from threading import Lock
from typing import Optional
from uuid import UUID, uuid4

from medclaims.core.enums import NotificationKind
from medclaims.utils.logging import get_logger

logger = get_logger(__name__)

# Oldest entries are dropped beyond this many per user
MAX_NOTIFICATIONS_PER_USER = 100


@dataclass
class Notification:
    title: str
    message: str
    kind: NotificationKind = NotificationKind.INFO
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    read: bool = False


class NotificationCenter:
    """Per-user notification lists."""

    def __init__(self, max_per_user: int = MAX_NOTIFICATIONS_PER_USER):
        self.max_per_user = max_per_user
        self._items: dict[UUID, list[Notification]] = defaultdict(list)
        self._lock = Lock()

    def publish(
        self,
        user_id: UUID,
        title: str,
        message: str,
        kind: NotificationKind = NotificationKind.INFO,
    ) -> Notification:
        notification = Notification(title=title, message=message, kind=kind)
        with self._lock:
            items = self._items[user_id]
            items.insert(0, notification)
            del items[self.max_per_user:]
        logger.debug(f"Notification {notification.id} published to {user_id}: {title}")
        return notification

    def list_for(self, user_id: UUID) -> list[Notification]:
        """Newest first."""
        with self._lock:
            return list(self._items.get(user_id, []))

    def unread_count(self, user_id: UUID) -> int:
        return sum(1 for n in self.list_for(user_id) if not n.read)

    def _find(self, user_id: UUID, notification_id: str) -> Optional[Notification]:
        for notification in self._items.get(user_id, []):
            if notification.id == notification_id:
                return notification
        return None

    def mark_read(self, user_id: UUID, notification_id: str) -> bool:
        with self._lock:
            notification = self._find(user_id, notification_id)
            if notification is None:
                return False
            notification.read = True
            return True

    def mark_all_read(self, user_id: UUID) -> int:
        with self._lock:
            unread = [n for n in self._items.get(user_id, []) if not n.read]
            for notification in unread:
                notification.read = True
            return len(unread)

    def remove(self, user_id: UUID, notification_id: str) -> bool:
        with self._lock:
            notification = self._find(user_id, notification_id)
            if notification is None:
                return False
            self._items[user_id].remove(notification)
            return True

    def clear(self, user_id: UUID) -> None:
        with self._lock:
            self._items.pop(user_id, None)
