"""Daily recurring certificate trigger.

Fires twice a day, at the generation time and at the send time, and runs the
matching step over every qualifying event. Each firing re-derives the event
list from storage, so re-firing or restarting is harmless.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, time
from uuid import UUID

from apscheduler.triggers.cron import CronTrigger

from src.certificates.activity_logger import ActivityLogger, record_step_run
from src.certificates.dtos import EventDTO, StepResult, TriggerResult, TriggerState
from src.certificates.features.dispatch_certificates.write_model import CertificateDispatchStep
from src.certificates.features.generate_certificates.write_model import CertificateGenerationStep
from src.certificates.repository.read_models import CertificateReadModel
from src.certificates.scheduling.jobs import DISPATCH_JOB_ID, GENERATION_JOB_ID, JobScheduler
from src.certificates.time_window import TimeWindowPolicy

logger = logging.getLogger(__name__)

StepRunner = Callable[[UUID, datetime], Awaitable[StepResult]]


class RecurringCertificateTrigger:
    def __init__(
        self,
        read_model: CertificateReadModel,
        generation_step: CertificateGenerationStep,
        dispatch_step: CertificateDispatchStep,
        policy: TimeWindowPolicy,
        generation_time: time,
        send_time: time,
        activity_logger: ActivityLogger | None = None,
        catch_up_days: int = 0,
    ) -> None:
        self.read_model = read_model
        self.generation_step = generation_step
        self.dispatch_step = dispatch_step
        self.policy = policy
        self.generation_time = generation_time
        self.send_time = send_time
        self.activity_logger = activity_logger
        self.catch_up_days = catch_up_days
        self._state = TriggerState.IDLE

    @property
    def state(self) -> TriggerState:
        return self._state

    async def qualifying_events(self, now: datetime) -> list[EventDTO]:
        """Events dated today, plus recent past events when catch-up is enabled."""
        events = await self.read_model.list_events()
        return [
            event
            for event in events
            if self.policy.qualifies_today(event.date, now)
            or (self.catch_up_days > 0 and self.policy.is_recent_past(event.date, self.catch_up_days, now))
        ]

    async def fire_generation(self, now: datetime | None = None, force: bool = False) -> TriggerResult:
        return await self._fire(
            state=TriggerState.FIRING_GENERATION,
            cutoff=self.generation_time,
            action="scheduled_certificate_generation",
            run_step=lambda event_id, at: self.generation_step.generate(event_id, now=at),
            now=now,
            force=force,
        )

    async def fire_dispatch(self, now: datetime | None = None, force: bool = False) -> TriggerResult:
        return await self._fire(
            state=TriggerState.FIRING_DISPATCH,
            cutoff=self.send_time,
            action="scheduled_certificate_sending",
            run_step=lambda event_id, at: self.dispatch_step.dispatch(event_id, now=at),
            now=now,
            force=force,
        )

    async def _fire(
        self,
        state: TriggerState,
        cutoff: time,
        action: str,
        run_step: StepRunner,
        now: datetime | None,
        force: bool,
    ) -> TriggerResult:
        now = now or self.policy.now()
        if not force and not self.policy.is_at_or_past(now, cutoff):
            logger.info(f"{action}: waiting for {cutoff.strftime('%H:%M')} {self.policy.timezone.key}")
            return TriggerResult(
                success=True,
                message=f"Waiting until {cutoff.strftime('%H:%M')}",
                waiting=True,
            )

        self._state = state
        try:
            try:
                events = await self.qualifying_events(now)
            except Exception as e:
                logger.exception(f"{action}: could not list events")
                return TriggerResult(success=False, message=f"Could not list events: {e}")

            logger.info(f"{action}: {len(events)} qualifying event(s) on {self.policy.today(now)}")
            event_results: dict[UUID, StepResult] = {}
            for event in events:
                try:
                    result = await run_step(event.id, now)
                except Exception as e:
                    logger.exception(f"{action}: event {event.id} failed")
                    result = StepResult(success=False, message=str(e))
                event_results[event.id] = result
                await record_step_run(self.activity_logger, action, event.id, result, event)
        finally:
            self._state = TriggerState.IDLE

        total = sum(result.total for result in event_results.values())
        successful = sum(result.successful for result in event_results.values())
        failed = sum(result.failed for result in event_results.values())
        logger.info(
            f"{action}: processed {len(event_results)} event(s), "
            f"{successful}/{total} successful, {failed} failed"
        )
        return TriggerResult(
            success=all(result.success or result.not_found for result in event_results.values()),
            message=f"Processed {len(event_results)} event(s)",
            events_processed=len(event_results),
            total_processed=total,
            total_successful=successful,
            total_failed=failed,
            event_results=event_results,
        )

    def register(self, scheduler: JobScheduler, misfire_grace_time: int = 300) -> None:
        """Add both daily jobs to `scheduler` and log when they will run next."""
        for job_id, func, at in (
            (GENERATION_JOB_ID, self.fire_generation, self.generation_time),
            (DISPATCH_JOB_ID, self.fire_dispatch, self.send_time),
        ):
            scheduler.add_job(
                func,
                trigger=CronTrigger(hour=at.hour, minute=at.minute, timezone=self.policy.timezone),
                id=job_id,
                name=f"Daily {job_id} at {at.strftime('%H:%M')}",
                replace_existing=True,
                coalesce=True,
                max_instances=1,
                misfire_grace_time=misfire_grace_time,
            )
        self.log_next_runs()

    def next_runs(self, now: datetime | None = None) -> dict[str, datetime]:
        return {
            GENERATION_JOB_ID: self.policy.next_run(self.generation_time, now),
            DISPATCH_JOB_ID: self.policy.next_run(self.send_time, now),
        }

    def log_next_runs(self, now: datetime | None = None) -> None:
        runs = self.next_runs(now)
        logger.info(
            f"Certificate scheduler ({self.policy.timezone.key}): generation daily at "
            f"{self.generation_time.strftime('%H:%M')}, sending daily at {self.send_time.strftime('%H:%M')}"
        )
        logger.info(f"Next generation run: {runs[GENERATION_JOB_ID].isoformat()}")
        logger.info(f"Next sending run: {runs[DISPATCH_JOB_ID].isoformat()}")
