"""Per-event one-shot certificate trigger.

Covers events created after the daily trigger already ran. Each event owns one
schedule record holding two independently cancellable jobs: generation at the
generation time on the event day, then sending at the send time.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, time
from uuid import UUID

from apscheduler.jobstores.base import JobLookupError
from apscheduler.triggers.date import DateTrigger

from src.certificates.activity_logger import ActivityLogger, record_step_run
from src.certificates.dtos import EventDTO, StepResult
from src.certificates.features.dispatch_certificates.write_model import CertificateDispatchStep
from src.certificates.features.generate_certificates.write_model import CertificateGenerationStep
from src.certificates.scheduling.jobs import (
    JobScheduler,
    event_generation_job_id,
    event_send_job_id,
)
from src.certificates.time_window import TimeWindowPolicy

logger = logging.getLogger(__name__)


@dataclass
class EventCertificateSchedule:
    event_id: UUID
    generation_run_at: datetime
    generation_job_id: str | None = None
    send_run_at: datetime | None = None
    send_job_id: str | None = None

    @property
    def active(self) -> bool:
        return self.generation_job_id is not None or self.send_job_id is not None


class EventCertificateScheduler:
    def __init__(
        self,
        scheduler: JobScheduler,
        generation_step: CertificateGenerationStep,
        dispatch_step: CertificateDispatchStep,
        policy: TimeWindowPolicy,
        generation_time: time,
        send_time: time,
        activity_logger: ActivityLogger | None = None,
        misfire_grace_time: int = 300,
    ) -> None:
        self.scheduler = scheduler
        self.generation_step = generation_step
        self.dispatch_step = dispatch_step
        self.policy = policy
        self.generation_time = generation_time
        self.send_time = send_time
        self.activity_logger = activity_logger
        self.misfire_grace_time = misfire_grace_time
        self._schedules: dict[UUID, EventCertificateSchedule] = {}

    def get_schedule(self, event_id: UUID) -> EventCertificateSchedule | None:
        return self._schedules.get(event_id)

    def schedule_event(
        self, event: EventDTO, now: datetime | None = None
    ) -> EventCertificateSchedule | None:
        """Schedule generation for the event day.

        Returns None when the generation time on the event day has already
        passed; the daily trigger covers such events.
        """
        run_at = self.policy.at_local_time(self.policy.civil_date(event.date), self.generation_time)
        if self.policy.delay_until(run_at, now) is None:
            logger.info(f"Generation time for event {event.name} ({event.id}) has passed, not scheduling")
            return None

        self.cancel(event.id)
        job_id = event_generation_job_id(event.id)
        self.scheduler.add_job(
            self._fire_generation,
            trigger=DateTrigger(run_date=run_at),
            id=job_id,
            name=f"Certificate generation for {event.name}",
            kwargs={"event_id": event.id},
            replace_existing=True,
            misfire_grace_time=self.misfire_grace_time,
        )
        schedule = EventCertificateSchedule(
            event_id=event.id,
            generation_run_at=run_at,
            generation_job_id=job_id,
        )
        self._schedules[event.id] = schedule
        logger.info(f"Certificate generation for event {event.name} scheduled at {run_at.isoformat()}")
        return schedule

    def reschedule(
        self, event: EventDTO, now: datetime | None = None
    ) -> EventCertificateSchedule | None:
        """Replace the event's pending jobs, e.g. after its date changed."""
        self.cancel(event.id)
        return self.schedule_event(event, now)

    def cancel(self, event_id: UUID) -> bool:
        """Remove the event's pending jobs. A firing already in progress is not interrupted."""
        schedule = self._schedules.pop(event_id, None)
        if schedule is None:
            return False
        for job_id in (schedule.generation_job_id, schedule.send_job_id):
            if job_id is None:
                continue
            try:
                self.scheduler.remove_job(job_id)
            except JobLookupError:
                logger.debug(f"Job {job_id} already gone")
        logger.info(f"Certificate schedule for event {event_id} cancelled")
        return True

    async def _fire_generation(self, event_id: UUID, now: datetime | None = None) -> StepResult:
        now = now or self.policy.now()
        schedule = self._schedules.get(event_id)
        if schedule is not None:
            schedule.generation_job_id = None

        result = await self.generation_step.generate(event_id, now=now)
        await record_step_run(self.activity_logger, "event_certificate_generation", event_id, result)
        if result.not_found:
            logger.info(f"One-shot generation for event {event_id}: {result.message}, nothing to do")
            self._schedules.pop(event_id, None)
            return result

        send_at = self.policy.at_local_time(self.policy.today(now), self.send_time)
        if self.policy.delay_until(send_at, now) is None:
            logger.info(f"Send time for event {event_id} already passed, sending now")
            await self._fire_send(event_id, now)
            return result

        job_id = event_send_job_id(event_id)
        self.scheduler.add_job(
            self._fire_send,
            trigger=DateTrigger(run_date=send_at),
            id=job_id,
            name=f"Certificate sending for event {event_id}",
            kwargs={"event_id": event_id},
            replace_existing=True,
            misfire_grace_time=self.misfire_grace_time,
        )
        if schedule is None:
            schedule = EventCertificateSchedule(event_id=event_id, generation_run_at=now)
            self._schedules[event_id] = schedule
        schedule.send_run_at = send_at
        schedule.send_job_id = job_id
        logger.info(f"Certificate sending for event {event_id} scheduled at {send_at.isoformat()}")
        return result

    async def _fire_send(self, event_id: UUID, now: datetime | None = None) -> StepResult:
        self._schedules.pop(event_id, None)
        result = await self.dispatch_step.dispatch(event_id, now=now)
        await record_step_run(self.activity_logger, "event_certificate_sending", event_id, result)
        if result.not_found:
            logger.info(f"One-shot sending for event {event_id}: {result.message}, nothing to do")
        return result
