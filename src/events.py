"""
Domain events for the certificate lifecycle.

These are published to the notification sink after each generation or
dispatch run. The payload keys are what connected clients consume.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import ClassVar
from uuid import UUID


@dataclass(kw_only=True)
class DomainEvent:
    """Base domain event."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    event_type: str = ""

    def to_payload(self) -> dict:
        return {"timestamp": self.timestamp.isoformat()}


@dataclass(kw_only=True)
class CertificateRunEvent(DomainEvent):
    event_id: UUID
    event_name: str
    total: int
    successful: int
    failed: int

    action: ClassVar[str] = "processed"

    @property
    def message(self) -> str:
        return f"Certificates {self.action} for {self.event_name}. {self.successful} successful."

    def to_payload(self) -> dict:
        return {
            **super().to_payload(),
            "message": self.message,
            "eventId": str(self.event_id),
            "eventName": self.event_name,
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
        }


@dataclass(kw_only=True)
class CertificatesGeneratedEvent(CertificateRunEvent):
    """Fired after certificates were rendered for an event."""

    event_type: str = "certificatesGenerated"
    action: ClassVar[str] = "generated"


@dataclass(kw_only=True)
class CertificatesSentEvent(CertificateRunEvent):
    """Fired after generated certificates were e-mailed for an event."""

    event_type: str = "certificatesSent"
    action: ClassVar[str] = "sent"
