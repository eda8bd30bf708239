import structlog
from sqlalchemy.ext.asyncio import async_sessionmaker

from shared.config.database import AsyncSessionLocal
from shared.observability import ecomm_notification_failures_total

from .models import Notification
from .repository import NotificationRepository
from .schemas import NotificationCreate
from .templates import render

logger = structlog.get_logger(__name__)


class Notifier:
    """Writes the notifications for a domain event, one row at a time.

    Each row gets its own session, so a failed insert never touches the
    caller's transaction or the other rows. Failures are logged and dropped.
    """

    def __init__(self, session_factory: async_sessionmaker = AsyncSessionLocal):
        self.session_factory = session_factory

    async def publish(self, event) -> int:
        """Delivers every row the event renders to. Returns how many were stored."""
        try:
            drafts = render(event)
        except Exception:
            logger.exception("notification_render_failed", event_type=type(event).__name__)
            return 0

        delivered = 0
        for draft in drafts:
            if await self._deliver(draft):
                delivered += 1
        return delivered

    async def publish_all(self, events) -> int:
        delivered = 0
        for event in events:
            delivered += await self.publish(event)
        return delivered

    async def _deliver(self, draft: NotificationCreate) -> bool:
        try:
            async with self.session_factory() as session:
                notification = Notification(**draft.model_dump())
                notification.type = draft.type.value
                await NotificationRepository.create(session, notification)
        except Exception as e:
            # A failing notification MUST NOT fail the operation that raised it
            ecomm_notification_failures_total.labels(type=draft.type.value).inc()
            logger.error(
                "notification_dropped",
                type=draft.type.value,
                recipient=draft.user_id,
                error=str(e),
            )
            return False

        logger.info("notification_created", type=draft.type.value, recipient=draft.user_id, title=draft.title)
        return True


def get_notifier() -> Notifier:
    return Notifier()
