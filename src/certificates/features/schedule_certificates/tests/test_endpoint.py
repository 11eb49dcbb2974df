"""Tests for the per-event schedule endpoints."""

from datetime import date, time, timedelta
from uuid import uuid4

from src.certificates.dependencies import get_certificate_read_model
from src.certificates.features.dispatch_certificates.write_model import CertificateDispatchStep
from src.certificates.features.generate_certificates.write_model import CertificateGenerationStep
from src.certificates.features.schedule_certificates.router import get_event_certificate_scheduler
from src.certificates.scheduling.jobs import event_generation_job_id
from src.certificates.scheduling.one_shot import EventCertificateScheduler
from src.certificates.tests.inmemory_models import (
    FakeJobScheduler,
    InMemoryCertificateReadModel,
    InMemoryCertificateRenderer,
    InMemoryCertificateWriteModel,
    InMemoryEmailService,
    add_event,
    new_memory,
)
from src.certificates.time_window import TimeWindowPolicy
from src.certificates.urls import SCHEDULE_CERTIFICATES_URL


def build(memory):
    policy = TimeWindowPolicy("Asia/Kolkata")
    read_model = InMemoryCertificateReadModel(memory)
    write_model = InMemoryCertificateWriteModel(memory)
    jobs = FakeJobScheduler()
    scheduler = EventCertificateScheduler(
        scheduler=jobs,
        generation_step=CertificateGenerationStep(
            read_model, write_model, InMemoryCertificateRenderer(), policy
        ),
        dispatch_step=CertificateDispatchStep(read_model, write_model, InMemoryEmailService(), policy),
        policy=policy,
        generation_time=time(17, 40),
        send_time=time(17, 45),
    )
    overrides = {
        get_certificate_read_model: lambda: read_model,
        get_event_certificate_scheduler: lambda: scheduler,
    }
    return overrides, jobs


async def test_schedule_future_event(client_factory):
    memory = new_memory()
    event = add_event(memory, event_date=date.today() + timedelta(days=30))
    overrides, jobs = build(memory)

    async with client_factory(overrides) as client:
        response = await client.post(SCHEDULE_CERTIFICATES_URL.format(event_id=event.id))

    assert response.status_code == 200
    data = response.json()
    assert data["scheduled"] is True
    assert data["generation_run_at"] is not None
    assert event_generation_job_id(event.id) in jobs.jobs


async def test_schedule_past_event_is_declined(client_factory):
    memory = new_memory()
    event = add_event(memory, event_date=date.today() - timedelta(days=30))
    overrides, jobs = build(memory)

    async with client_factory(overrides) as client:
        response = await client.post(SCHEDULE_CERTIFICATES_URL.format(event_id=event.id))

    assert response.status_code == 200
    assert response.json()["scheduled"] is False
    assert jobs.jobs == {}


async def test_schedule_unknown_event(client_factory):
    overrides, _ = build(new_memory())

    async with client_factory(overrides) as client:
        response = await client.post(SCHEDULE_CERTIFICATES_URL.format(event_id=uuid4()))

    assert response.status_code == 404


async def test_cancel_schedule(client_factory):
    memory = new_memory()
    event = add_event(memory, event_date=date.today() + timedelta(days=30))
    overrides, jobs = build(memory)

    async with client_factory(overrides) as client:
        await client.post(SCHEDULE_CERTIFICATES_URL.format(event_id=event.id))
        response = await client.delete(SCHEDULE_CERTIFICATES_URL.format(event_id=event.id))
        again = await client.delete(SCHEDULE_CERTIFICATES_URL.format(event_id=event.id))

    assert response.json() == {"cancelled": True}
    assert again.json() == {"cancelled": False}
    assert jobs.jobs == {}


async def test_schedule_without_running_scheduler(client_factory):
    memory = new_memory()
    event = add_event(memory)

    async with client_factory({get_certificate_read_model: lambda: InMemoryCertificateReadModel(memory)}) as client:
        response = await client.post(SCHEDULE_CERTIFICATES_URL.format(event_id=event.id))

    assert response.status_code == 503
