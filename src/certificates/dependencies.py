"""Factories wiring the certificate steps and triggers to their collaborators."""

from datetime import timedelta

from src.certificates.activity_logger import ActivityLogger, SQLActivityLogger
from src.certificates.features.dispatch_certificates.write_model import CertificateDispatchStep
from src.certificates.features.generate_certificates.write_model import CertificateGenerationStep
from src.certificates.repository.read_models import CertificateReadModel, SqlCertificateReadModel
from src.certificates.repository.write_models import CertificateWriteModel, SqlCertificateWriteModel
from src.certificates.scheduling.jobs import JobScheduler
from src.certificates.scheduling.one_shot import EventCertificateScheduler
from src.certificates.scheduling.recurring import RecurringCertificateTrigger
from src.certificates.time_window import TimeWindowPolicy
from src.config.settings import Settings, settings
from src.email_service import get_email_service
from src.notifications import get_notification_sink
from src.rendering import get_certificate_renderer


def build_time_window_policy(config: Settings = settings) -> TimeWindowPolicy:
    return TimeWindowPolicy(
        timezone=config.scheduler_timezone,
        tolerance=timedelta(minutes=config.scheduler_fire_tolerance_minutes),
    )


def get_certificate_read_model() -> CertificateReadModel:
    return SqlCertificateReadModel()


def get_certificate_write_model() -> CertificateWriteModel:
    return SqlCertificateWriteModel()


def get_activity_logger() -> ActivityLogger:
    return SQLActivityLogger()


def build_generation_step() -> CertificateGenerationStep:
    return CertificateGenerationStep(
        read_model=get_certificate_read_model(),
        write_model=get_certificate_write_model(),
        renderer=get_certificate_renderer(),
        policy=build_time_window_policy(),
        notification_sink=get_notification_sink(),
    )


def build_dispatch_step() -> CertificateDispatchStep:
    return CertificateDispatchStep(
        read_model=get_certificate_read_model(),
        write_model=get_certificate_write_model(),
        email_service=get_email_service(),
        policy=build_time_window_policy(),
        notification_sink=get_notification_sink(),
    )


def build_recurring_trigger(config: Settings = settings) -> RecurringCertificateTrigger:
    return RecurringCertificateTrigger(
        read_model=get_certificate_read_model(),
        generation_step=build_generation_step(),
        dispatch_step=build_dispatch_step(),
        policy=build_time_window_policy(config),
        generation_time=config.certificate_generation_time,
        send_time=config.certificate_send_time,
        activity_logger=get_activity_logger(),
        catch_up_days=config.catch_up_days if config.catch_up_past_events else 0,
    )


def build_event_scheduler(
    scheduler: JobScheduler, config: Settings = settings
) -> EventCertificateScheduler:
    return EventCertificateScheduler(
        scheduler=scheduler,
        generation_step=build_generation_step(),
        dispatch_step=build_dispatch_step(),
        policy=build_time_window_policy(config),
        generation_time=config.certificate_generation_time,
        send_time=config.certificate_send_time,
        activity_logger=get_activity_logger(),
        misfire_grace_time=config.scheduler_misfire_grace_seconds,
    )
