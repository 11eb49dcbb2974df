from src.config.settings import Settings, settings
from src.email_service.base import EmailServiceBase
from src.email_service.email_logger import EmailLogger, NoOpEmailLogger, SQLEmailLogger
from src.email_service.resend_service import ResendEmailService
from src.email_service.smtp_service import SMTPEmailService


def get_email_logger(config: Settings = settings) -> EmailLogger:
    """Certificate e-mails are only logged when they go out through Resend."""
    if config.resend_api_key:
        return SQLEmailLogger()
    return NoOpEmailLogger()


def get_email_service(config: Settings = settings) -> EmailServiceBase:
    """Transport for certificate e-mails: Resend when an API key is set, SMTP otherwise."""
    if config.resend_api_key:
        return ResendEmailService(config=config, email_logger=get_email_logger(config))
    return SMTPEmailService()


__all__ = [
    "EmailServiceBase",
    "ResendEmailService",
    "SMTPEmailService",
    "get_email_logger",
    "get_email_service",
]
