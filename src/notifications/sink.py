import logging
from abc import ABC, abstractmethod

import httpx

from src.events import DomainEvent
from src.notifications.websocket_manager import ConnectionManager

logger = logging.getLogger(__name__)


class NotificationSink(ABC):
    """Best-effort fan-out of certificate run summaries."""

    @abstractmethod
    async def publish(self, event_name: str, payload: dict) -> None:
        pass


class NoOpNotificationSink(NotificationSink):
    """Used when no sink is configured."""

    async def publish(self, event_name: str, payload: dict) -> None:
        pass


class WebSocketNotificationSink(NotificationSink):
    def __init__(self, manager: ConnectionManager) -> None:
        self._manager = manager

    async def publish(self, event_name: str, payload: dict) -> None:
        delivered = await self._manager.broadcast({"event": event_name, "data": payload})
        logger.debug(f"Notification {event_name} delivered to {delivered} client(s)")


class WebhookNotificationSink(NotificationSink):
    """POSTs notifications as JSON to a configured URL."""

    def __init__(
        self,
        url: str,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
        timeout: float = 5.0,
    ) -> None:
        self._url = url
        self._http_client_class = http_client_class
        self._timeout = timeout

    async def publish(self, event_name: str, payload: dict) -> None:
        async with self._http_client_class(timeout=self._timeout) as client:
            response = await client.post(self._url, json={"event": event_name, "data": payload})
            response.raise_for_status()


async def publish_safely(sink: NotificationSink | None, event: DomainEvent) -> None:
    """Publish `event` without ever raising into the caller."""
    if sink is None:
        return
    try:
        await sink.publish(event.event_type, event.to_payload())
    except Exception as e:
        logger.warning(f"Notification {event.event_type} could not be published: {e}")
