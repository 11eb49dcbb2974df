"""Overlapping generation and dispatch runs on the same event."""

import asyncio
from datetime import UTC, date, datetime

from src.certificates.features.dispatch_certificates.write_model import CertificateDispatchStep
from src.certificates.features.generate_certificates.write_model import CertificateGenerationStep
from src.certificates.locks import EventLocks
from src.certificates.tests.inmemory_models import (
    InMemoryCertificateReadModel,
    InMemoryCertificateRenderer,
    InMemoryCertificateWriteModel,
    InMemoryEmailService,
    add_event,
    new_memory,
    participants_of,
)
from src.certificates.time_window import TimeWindowPolicy

EVENT_DAY = date(2026, 3, 14)
# 17:45 local
SEND_AT = datetime(2026, 3, 14, 12, 15, tzinfo=UTC)


def dispatch_step(memory, email_service, locks):
    return CertificateDispatchStep(
        InMemoryCertificateReadModel(memory),
        InMemoryCertificateWriteModel(memory),
        email_service,
        TimeWindowPolicy("Asia/Kolkata"),
        locks=locks,
    )


def generation_step(memory, renderer, locks):
    return CertificateGenerationStep(
        InMemoryCertificateReadModel(memory),
        InMemoryCertificateWriteModel(memory),
        renderer,
        TimeWindowPolicy("Asia/Kolkata"),
        locks=locks,
    )


async def generate_all(memory, event):
    step = generation_step(memory, InMemoryCertificateRenderer(), EventLocks())
    result = await step.generate(event.id, now=SEND_AT)
    assert result.successful == len(participants_of(memory, event))


def test_same_event_shares_one_lock():
    locks = EventLocks()
    memory = new_memory()
    first = add_event(memory, event_date=EVENT_DAY)
    second = add_event(memory, event_date=EVENT_DAY)

    assert locks.for_event(first.id) is locks.for_event(first.id)
    assert locks.for_event(first.id) is not locks.for_event(second.id)


async def test_concurrent_dispatch_runs_send_each_certificate_once():
    memory = new_memory()
    event = add_event(memory, event_date=EVENT_DAY, participant_names=("Asha", "Ravi", "Meera"))
    await generate_all(memory, event)
    email_service = InMemoryEmailService(delay=0.01)
    locks = EventLocks()
    daily = dispatch_step(memory, email_service, locks)
    per_event = dispatch_step(memory, email_service, locks)

    first, second = await asyncio.gather(
        daily.dispatch(event.id, now=SEND_AT),
        per_event.dispatch(event.id, now=SEND_AT),
    )

    assert first.successful + second.successful == 3
    assert len(email_service.sent) == 3
    for participant in participants_of(memory, event):
        assert email_service.sent_to(participant.id) == 1
        assert participant.certificate_sent


async def test_concurrent_generation_runs_render_each_participant_once():
    memory = new_memory()
    event = add_event(memory, event_date=EVENT_DAY, participant_names=("Asha", "Ravi"))
    renderer = InMemoryCertificateRenderer(delay=0.01)
    locks = EventLocks()

    first, second = await asyncio.gather(
        generation_step(memory, renderer, locks).generate(event.id, now=SEND_AT),
        generation_step(memory, renderer, locks).generate(event.id, now=SEND_AT),
    )

    assert first.successful + second.successful == 2
    assert len(renderer.rendered) == 2
    template = memory["templates"][event.id]
    participant_ids = [record.participant_id for record in template.generated_certificates]
    assert sorted(participant_ids) == sorted(p.id for p in participants_of(memory, event))


async def test_different_events_are_not_serialized():
    memory = new_memory()
    first = add_event(memory, event_date=EVENT_DAY, participant_names=("Asha",))
    second = add_event(memory, event_date=EVENT_DAY, participant_names=("Ravi",))
    renderer = InMemoryCertificateRenderer(delay=0.01)
    step = generation_step(memory, renderer, EventLocks())

    results = await asyncio.gather(
        step.generate(first.id, now=SEND_AT),
        step.generate(second.id, now=SEND_AT),
    )

    assert [result.successful for result in results] == [1, 1]
