import logging
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Dict, List, Optional

from dualpane.config import MAX_NOTICES
from dualpane.schemas.events import Notice, NoticeLevel

logger = logging.getLogger(__name__)

Broadcast = Callable[[str, Dict[str, Any]], Awaitable[None]]


class Notifier:
    """
    Raises user-visible notices and forwards shell messages.

    Notices are kept in a bounded history and, when a broadcast sink is
    configured (the WebSocket connection manager), pushed to clients.
    """

    def __init__(
        self,
        broadcast: Optional[Broadcast] = None,
        duration_ms: int = 3000,
        max_notices: int = MAX_NOTICES
    ):
        self.broadcast = broadcast
        self.duration_ms = duration_ms
        self.notices: Deque[Notice] = deque(maxlen=max_notices)

    async def notify(self, level: NoticeLevel, message: str) -> Notice:
        notice = Notice(level=level, message=message, duration_ms=self.duration_ms)
        self.notices.append(notice)

        logger.info(f"Notice ({level}): {message}")

        await self.publish("notice", notice.model_dump())
        return notice

    async def publish(self, message_type: str, data: Dict[str, Any]):
        if self.broadcast is None:
            return
        try:
            await self.broadcast(message_type, data)
        except Exception as e:
            logger.error(f"Failed to broadcast {message_type}: {e}")

    def recent(self) -> List[Notice]:
        return list(self.notices)

    def messages(self) -> List[str]:
        return [notice.message for notice in self.notices]
