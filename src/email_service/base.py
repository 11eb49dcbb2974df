from abc import ABC, abstractmethod
from pathlib import Path

from src.certificates.dtos import EventDTO, ParticipantDTO, SendResult
from src.email_service.templates import EmailTemplates


class EmailServiceBase(ABC):
    @abstractmethod
    async def send_certificate_email(
        self,
        participant: ParticipantDTO,
        certificate_path: str,
        event: EventDTO,
    ) -> SendResult:
        """Send the rendered certificate to the participant. Never raises for delivery errors."""
        pass


def certificate_attachment_name(participant_name: str) -> str:
    return f"Certificate_{'_'.join(participant_name.split())}.pdf"


def build_certificate_message(
    participant: ParticipantDTO, event: EventDTO
) -> tuple[str, str, str]:
    """Return (subject, html_body, text_body) for a certificate e-mail."""
    event_name = event.name or "Event"
    description = event.description or ""
    subject = EmailTemplates.CERTIFICATE_SUBJECT.format(event_name=event_name)
    html_body = EmailTemplates.CERTIFICATE_HTML.format(
        participant_name=participant.name,
        event_name=event_name,
        event_description=(
            EmailTemplates.CERTIFICATE_DESCRIPTION_HTML.format(event_description=description)
            if description
            else ""
        ),
    )
    text_body = EmailTemplates.CERTIFICATE_TEXT.format(
        participant_name=participant.name,
        event_name=event_name,
        event_description=f"{description}\n" if description else "",
    )
    return subject, html_body, text_body


def read_certificate(certificate_path: str) -> bytes:
    return Path(certificate_path).resolve().read_bytes()
