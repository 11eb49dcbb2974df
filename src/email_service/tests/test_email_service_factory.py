"""Tests for picking the certificate e-mail transport from settings."""

from src.config.settings import Settings
from src.email_service import get_email_logger, get_email_service
from src.email_service.email_logger import NoOpEmailLogger, SQLEmailLogger
from src.email_service.resend_service import ResendEmailService
from src.email_service.smtp_service import SMTPEmailService


def test_smtp_without_resend_key():
    config = Settings(resend_api_key="")

    assert isinstance(get_email_service(config), SMTPEmailService)
    assert isinstance(get_email_logger(config), NoOpEmailLogger)


def test_resend_with_api_key_logs_to_database():
    config = Settings(resend_api_key="re_test_key", emails_from="certs@example.com")

    service = get_email_service(config)

    assert isinstance(service, ResendEmailService)
    assert isinstance(service.email_logger, SQLEmailLogger)
    assert service.from_address.endswith("<certs@example.com>")
