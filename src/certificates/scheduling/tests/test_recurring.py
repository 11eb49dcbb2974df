"""Tests for the daily recurring certificate trigger."""

from datetime import UTC, date, datetime, time
from unittest.mock import AsyncMock

from apscheduler.triggers.cron import CronTrigger

from src.certificates.activity_logger import ActivityLogger
from src.certificates.dtos import StepResult, TriggerState
from src.certificates.features.dispatch_certificates.write_model import CertificateDispatchStep
from src.certificates.features.generate_certificates.write_model import CertificateGenerationStep
from src.certificates.scheduling.jobs import DISPATCH_JOB_ID, GENERATION_JOB_ID
from src.certificates.scheduling.recurring import RecurringCertificateTrigger
from src.certificates.tests.inmemory_models import (
    FakeJobScheduler,
    InMemoryCertificateReadModel,
    InMemoryCertificateRenderer,
    InMemoryCertificateWriteModel,
    InMemoryEmailService,
    add_event,
    new_memory,
    participants_of,
)
from src.certificates.time_window import TimeWindowPolicy

# 17:41 and 17:46 in Asia/Kolkata on 2026-03-14
AFTER_GENERATION = datetime(2026, 3, 14, 12, 11, tzinfo=UTC)
AFTER_SEND = datetime(2026, 3, 14, 12, 16, tzinfo=UTC)
# 09:30 local
MORNING = datetime(2026, 3, 14, 4, 0, tzinfo=UTC)


class RecordingActivityLogger(ActivityLogger):
    def __init__(self):
        self.entries = []

    async def log_activity(self, user_id, action, details, status=200):
        self.entries.append({"user_id": user_id, "action": action, "details": details, "status": status})


def build_trigger(memory, renderer=None, email_service=None, catch_up_days=0, activity_logger=None):
    policy = TimeWindowPolicy("Asia/Kolkata")
    read_model = InMemoryCertificateReadModel(memory)
    write_model = InMemoryCertificateWriteModel(memory)
    return RecurringCertificateTrigger(
        read_model=read_model,
        generation_step=CertificateGenerationStep(
            read_model, write_model, renderer or InMemoryCertificateRenderer(), policy
        ),
        dispatch_step=CertificateDispatchStep(
            read_model, write_model, email_service or InMemoryEmailService(), policy
        ),
        policy=policy,
        generation_time=time(17, 40),
        send_time=time(17, 45),
        activity_logger=activity_logger,
        catch_up_days=catch_up_days,
    )


async def test_generation_only_processes_todays_events():
    memory = new_memory()
    today = add_event(memory, name="Today", event_date=date(2026, 3, 14))
    add_event(memory, name="Tomorrow", event_date=date(2026, 3, 15))
    add_event(memory, name="Last month", event_date=date(2026, 2, 14))

    result = await build_trigger(memory).fire_generation(now=AFTER_GENERATION)

    assert result.success is True
    assert result.events_processed == 1
    assert list(result.event_results) == [today.id]
    assert (result.total_processed, result.total_successful) == (2, 2)


async def test_event_stored_with_time_of_day_still_qualifies():
    memory = new_memory()
    add_event(memory, event_date=datetime(2026, 3, 14, 23, 30))

    result = await build_trigger(memory).fire_generation(now=AFTER_GENERATION)

    assert result.events_processed == 1


async def test_generation_then_dispatch_sends_certificates():
    memory = new_memory()
    event = add_event(memory, event_date=date(2026, 3, 14))
    email_service = InMemoryEmailService()
    trigger = build_trigger(memory, email_service=email_service)

    await trigger.fire_generation(now=AFTER_GENERATION)
    result = await trigger.fire_dispatch(now=AFTER_SEND)

    assert (result.total_processed, result.total_successful) == (2, 2)
    assert all(p.certificate_sent for p in participants_of(memory, event))
    assert trigger.state == TriggerState.IDLE


async def test_refiring_is_idempotent():
    memory = new_memory()
    add_event(memory, event_date=date(2026, 3, 14))
    email_service = InMemoryEmailService()
    trigger = build_trigger(memory, email_service=email_service)

    await trigger.fire_generation(now=AFTER_GENERATION)
    await trigger.fire_dispatch(now=AFTER_SEND)
    await trigger.fire_generation(now=AFTER_SEND)
    second = await trigger.fire_dispatch(now=AFTER_SEND)

    assert second.total_processed == 0
    assert len(email_service.sent) == 2


async def test_firing_before_cutoff_waits():
    memory = new_memory()
    add_event(memory, event_date=date(2026, 3, 14))
    renderer = InMemoryCertificateRenderer()

    result = await build_trigger(memory, renderer=renderer).fire_generation(now=MORNING)

    assert result.waiting is True
    assert result.events_processed == 0
    assert renderer.rendered == []


async def test_firing_within_tolerance_runs():
    memory = new_memory()
    add_event(memory, event_date=date(2026, 3, 14))

    # 17:39 local, one minute early
    result = await build_trigger(memory).fire_generation(now=datetime(2026, 3, 14, 12, 9, tzinfo=UTC))

    assert result.waiting is False
    assert result.events_processed == 1


async def test_force_skips_cutoff():
    memory = new_memory()
    add_event(memory, event_date=date(2026, 3, 14))

    result = await build_trigger(memory).fire_generation(now=MORNING, force=True)

    assert result.waiting is False
    assert result.total_successful == 2


async def test_catch_up_includes_recent_past_events():
    memory = new_memory()
    add_event(memory, name="Yesterday", event_date=date(2026, 3, 13))
    add_event(memory, name="Long ago", event_date=date(2026, 1, 1))

    result = await build_trigger(memory, catch_up_days=7).fire_generation(now=AFTER_GENERATION)

    assert result.events_processed == 1
    assert result.total_successful == 2


async def test_one_failing_event_does_not_stop_the_others():
    memory = new_memory()
    broken = add_event(memory, name="Broken", event_date=date(2026, 3, 14))
    healthy = add_event(memory, name="Healthy", event_date=date(2026, 3, 14))
    trigger = build_trigger(memory)

    original = trigger.generation_step.generate

    async def generate(event_id, participant_ids=None, now=None):
        if event_id == broken.id:
            raise RuntimeError("storage unreachable")
        return await original(event_id, participant_ids, now)

    trigger.generation_step.generate = generate

    result = await trigger.fire_generation(now=AFTER_GENERATION)

    assert result.success is False
    assert result.events_processed == 2
    assert result.event_results[broken.id].success is False
    assert result.event_results[healthy.id].successful == 2
    assert trigger.state == TriggerState.IDLE


async def test_event_without_template_is_reported_not_fatal():
    memory = new_memory()
    missing = add_event(memory, name="No template", event_date=date(2026, 3, 14), with_template=False)
    add_event(memory, name="Ready", event_date=date(2026, 3, 14))

    result = await build_trigger(memory).fire_generation(now=AFTER_GENERATION)

    assert result.success is True
    assert result.event_results[missing.id].not_found is True
    assert result.total_successful == 2


async def test_listing_failure_returns_failed_result():
    memory = new_memory()
    trigger = build_trigger(memory)
    trigger.read_model = InMemoryCertificateReadModel(memory, fail_with=ConnectionError("db down"))

    result = await trigger.fire_generation(now=AFTER_GENERATION)

    assert result.success is False
    assert "db down" in result.message
    assert trigger.state == TriggerState.IDLE


async def test_each_event_run_is_written_to_activity_log():
    memory = new_memory()
    event = add_event(memory, event_date=date(2026, 3, 14))
    activity_logger = RecordingActivityLogger()

    await build_trigger(memory, activity_logger=activity_logger).fire_generation(now=AFTER_GENERATION)

    (entry,) = activity_logger.entries
    assert entry["action"] == "scheduled_certificate_generation"
    assert entry["user_id"] == event.created_by
    assert entry["details"]["eventId"] == str(event.id)
    assert entry["details"]["successful"] == 2
    assert entry["status"] == 200


async def test_activity_log_failure_is_ignored():
    memory = new_memory()
    add_event(memory, event_date=date(2026, 3, 14))
    activity_logger = AsyncMock(spec=ActivityLogger)
    activity_logger.log_activity.side_effect = ConnectionError("db down")

    result = await build_trigger(memory, activity_logger=activity_logger).fire_generation(
        now=AFTER_GENERATION
    )

    assert result.total_successful == 2


def test_register_adds_daily_cron_jobs():
    scheduler = FakeJobScheduler()
    trigger = build_trigger(new_memory())

    trigger.register(scheduler)

    assert set(scheduler.jobs) == {GENERATION_JOB_ID, DISPATCH_JOB_ID}
    generation_job = scheduler.jobs[GENERATION_JOB_ID]
    assert isinstance(generation_job.trigger, CronTrigger)
    assert str(generation_job.trigger.timezone) == "Asia/Kolkata"


def test_next_runs_roll_over_to_tomorrow():
    trigger = build_trigger(new_memory())

    runs = trigger.next_runs(now=AFTER_SEND)

    assert runs[GENERATION_JOB_ID].date() == date(2026, 3, 15)
    assert runs[DISPATCH_JOB_ID].date() == date(2026, 3, 15)
    assert (runs[GENERATION_JOB_ID].hour, runs[GENERATION_JOB_ID].minute) == (17, 40)
