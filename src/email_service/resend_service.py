import base64
import logging
from typing import Protocol

import httpx

from src.certificates.dtos import EventDTO, ParticipantDTO, SendResult
from src.email_service.base import (
    EmailServiceBase,
    build_certificate_message,
    certificate_attachment_name,
    read_certificate,
)
from src.email_service.email_logger import EmailLogger, NoOpEmailLogger

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


class ResendEmailConfig(Protocol):
    resend_api_key: str
    emails_from: str
    emails_from_name: str


class ResendEmailService(EmailServiceBase):
    def __init__(
        self,
        config: ResendEmailConfig,
        email_logger: EmailLogger | None = None,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self.email_logger = email_logger or NoOpEmailLogger()
        self._http_client_class = http_client_class

    @property
    def from_address(self) -> str:
        return f"{self._config.emails_from_name} <{self._config.emails_from}>"

    async def send_certificate_email(
        self,
        participant: ParticipantDTO,
        certificate_path: str,
        event: EventDTO,
    ) -> SendResult:
        subject, html_body, text_body = build_certificate_message(participant, event)
        attachment_name = certificate_attachment_name(participant.name)

        try:
            content = read_certificate(certificate_path)
        except OSError as e:
            logger.warning(f"Certificate file {certificate_path} unreadable: {e}")
            return SendResult(success=False, message=str(e))

        # Log attempt before sending
        log_uuid = await self.email_logger.log_email_attempt(
            to_address=participant.email,
            from_address=self.from_address,
            subject=subject,
            html_body=html_body,
            attachment_name=attachment_name,
            email_type="certificate",
            participant_id=participant.id,
            event_id=event.id,
        )

        try:
            async with self._http_client_class() as client:
                response = await client.post(
                    RESEND_EMAILS_URL,
                    headers={
                        "Authorization": f"Bearer {self._config.resend_api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "from": self.from_address,
                        "to": [participant.email],
                        "subject": subject,
                        "html": html_body,
                        "text": text_body,
                        "attachments": [
                            {
                                "filename": attachment_name,
                                "content": base64.b64encode(content).decode("utf-8"),
                                "content_type": "application/pdf",
                            }
                        ],
                    },
                )
                response.raise_for_status()
                resend_email_id = response.json().get("id")
        except httpx.HTTPError as e:
            await self.email_logger.log_email_failure(
                log_uuid=log_uuid,
                error_message=str(e),
            )
            logger.warning(f"Resend delivery to {participant.email} failed: {e}")
            return SendResult(success=False, message=str(e))

        await self.email_logger.log_email_success(
            log_uuid=log_uuid,
            resend_email_id=resend_email_id,
        )
        return SendResult(success=True, message="Certificate email sent successfully")
