import asyncio
import logging
import smtplib
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from src.certificates.dtos import EventDTO, ParticipantDTO, SendResult
from src.config.settings import settings
from src.email_service.base import (
    EmailServiceBase,
    build_certificate_message,
    certificate_attachment_name,
    read_certificate,
)

logger = logging.getLogger(__name__)


class SMTPEmailService(EmailServiceBase):
    def __init__(self):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_user
        self.password = settings.smtp_password
        self.from_address = formataddr((settings.emails_from_name, settings.emails_from))

    def _create_message(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
        attachment: bytes,
        attachment_name: str,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("mixed")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_address

        body = MIMEMultipart("alternative")
        body.attach(MIMEText(text_body, "plain"))
        body.attach(MIMEText(html_body, "html"))
        msg.attach(body)

        pdf = MIMEApplication(attachment, _subtype="pdf")
        pdf.add_header("Content-Disposition", "attachment", filename=attachment_name)
        msg.attach(pdf)

        return msg

    def _send(self, msg: MIMEMultipart) -> None:
        if self.username and self.password:
            with smtplib.SMTP(self.host, self.port, timeout=30) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.send_message(msg)
        else:
            with smtplib.SMTP(self.host, self.port, timeout=30) as server:
                server.send_message(msg)

    async def send_certificate_email(
        self,
        participant: ParticipantDTO,
        certificate_path: str,
        event: EventDTO,
    ) -> SendResult:
        subject, html_body, text_body = build_certificate_message(participant, event)
        try:
            msg = self._create_message(
                to_address=participant.email,
                subject=subject,
                html_body=html_body,
                text_body=text_body,
                attachment=read_certificate(certificate_path),
                attachment_name=certificate_attachment_name(participant.name),
            )
            await asyncio.to_thread(self._send, msg)
        except (OSError, smtplib.SMTPException) as e:
            logger.warning(f"SMTP delivery to {participant.email} failed: {e}")
            return SendResult(success=False, message=str(e))
        return SendResult(success=True, message="Certificate email sent successfully")
