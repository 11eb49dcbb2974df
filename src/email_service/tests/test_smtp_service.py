"""Tests for SMTPEmailService message building and error handling."""

import smtplib
from datetime import date
from uuid import uuid4

from src.certificates.dtos import EventDTO, ParticipantDTO
from src.email_service.smtp_service import SMTPEmailService


def make_event(description=None):
    return EventDTO(id=uuid4(), name="Data Day", date=date(2026, 3, 14), description=description)


def make_participant(event):
    return ParticipantDTO(id=uuid4(), name="Grace Hopper", email="grace@example.com", event_id=event.id)


async def test_send_certificate_email_builds_pdf_attachment(tmp_path):
    path = tmp_path / "cert.pdf"
    path.write_bytes(b"%PDF")
    event = make_event()
    participant = make_participant(event)
    service = SMTPEmailService()
    sent = []
    service._send = sent.append

    result = await service.send_certificate_email(participant, str(path), event)

    assert result.success is True
    (msg,) = sent
    assert msg["Subject"] == "Your Certificate for Data Day"
    assert msg["To"] == "grace@example.com"
    attachment = msg.get_payload()[1]
    assert attachment.get_content_type() == "application/pdf"
    assert attachment.get_filename() == "Certificate_Grace_Hopper.pdf"
    assert attachment.get_payload(decode=True) == b"%PDF"


async def test_send_certificate_email_smtp_failure(tmp_path):
    path = tmp_path / "cert.pdf"
    path.write_bytes(b"%PDF")
    event = make_event()
    service = SMTPEmailService()

    def refuse(msg):
        raise smtplib.SMTPRecipientsRefused({"grace@example.com": (550, b"No such user")})

    service._send = refuse

    result = await service.send_certificate_email(make_participant(event), str(path), event)

    assert result.success is False


async def test_send_certificate_email_missing_file(tmp_path):
    event = make_event()

    result = await SMTPEmailService().send_certificate_email(
        make_participant(event), str(tmp_path / "missing.pdf"), event
    )

    assert result.success is False
