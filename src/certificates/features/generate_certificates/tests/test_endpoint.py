"""Tests for the manual certificate generation endpoint."""

from uuid import uuid4

from src.certificates.activity_logger import NoOpActivityLogger
from src.certificates.dependencies import get_activity_logger
from src.certificates.features.generate_certificates.router import get_generation_step
from src.certificates.features.generate_certificates.write_model import CertificateGenerationStep
from src.certificates.tests.inmemory_models import (
    InMemoryCertificateReadModel,
    InMemoryCertificateRenderer,
    InMemoryCertificateWriteModel,
    add_event,
    new_memory,
    participants_of,
)
from src.certificates.time_window import TimeWindowPolicy
from src.certificates.urls import GENERATE_CERTIFICATES_URL


def overrides_for(memory, renderer=None):
    step = CertificateGenerationStep(
        read_model=InMemoryCertificateReadModel(memory),
        write_model=InMemoryCertificateWriteModel(memory),
        renderer=renderer or InMemoryCertificateRenderer(),
        policy=TimeWindowPolicy("Asia/Kolkata"),
    )
    return {
        get_generation_step: lambda: step,
        get_activity_logger: lambda: NoOpActivityLogger(),
    }


async def test_generate_certificates(client_factory):
    memory = new_memory()
    event = add_event(memory)

    async with client_factory(overrides_for(memory)) as client:
        response = await client.post(GENERATE_CERTIFICATES_URL.format(event_id=event.id))

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["total"] == 2
    assert data["successful"] == 2
    assert {item["participant_name"] for item in data["results"]} == {"Ada Lovelace", "Alan Turing"}


async def test_generate_certificates_for_selected_participants(client_factory):
    memory = new_memory()
    event = add_event(memory)
    target = participants_of(memory, event)[0]

    async with client_factory(overrides_for(memory)) as client:
        response = await client.post(
            GENERATE_CERTIFICATES_URL.format(event_id=event.id),
            json={"participant_ids": [str(target.id)]},
        )

    assert response.status_code == 200
    assert response.json()["total"] == 1
    assert response.json()["results"][0]["participant_id"] == str(target.id)


async def test_generate_certificates_unknown_event(client_factory):
    async with client_factory(overrides_for(new_memory())) as client:
        response = await client.post(GENERATE_CERTIFICATES_URL.format(event_id=uuid4()))

    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


async def test_generate_certificates_without_template(client_factory):
    memory = new_memory()
    event = add_event(memory, with_template=False)

    async with client_factory(overrides_for(memory)) as client:
        response = await client.post(GENERATE_CERTIFICATES_URL.format(event_id=event.id))

    assert response.status_code == 404


async def test_generate_certificates_invalid_event_id(client_factory):
    async with client_factory(overrides_for(new_memory())) as client:
        response = await client.post(GENERATE_CERTIFICATES_URL.format(event_id="not-a-uuid"))

    assert response.status_code == 422
