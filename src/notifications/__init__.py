from src.config.settings import settings
from src.notifications.sink import (
    NoOpNotificationSink,
    NotificationSink,
    WebhookNotificationSink,
    WebSocketNotificationSink,
    publish_safely,
)
from src.notifications.websocket_manager import ConnectionManager, connection_manager


def get_notification_sink() -> NotificationSink:
    if settings.notification_webhook_url:
        return WebhookNotificationSink(url=settings.notification_webhook_url)
    return WebSocketNotificationSink(manager=connection_manager)


__all__ = [
    "ConnectionManager",
    "NoOpNotificationSink",
    "NotificationSink",
    "WebSocketNotificationSink",
    "WebhookNotificationSink",
    "connection_manager",
    "get_notification_sink",
    "publish_safely",
]
