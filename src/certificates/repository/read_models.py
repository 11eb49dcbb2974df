import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.certificates.dtos import (
    CertificateTemplateDTO,
    EventDTO,
    GenerationRecordDTO,
    ParticipantDTO,
)
from src.certificates.repository.orm_models import (
    CertificateTemplate,
    Event,
    Participant,
)
from src.config.database import async_session_manager


class CertificateReadModel(abc.ABC):
    """Queries used by the certificate steps and triggers. Returns DTOs, never ORM models."""

    @abc.abstractmethod
    async def list_events(self) -> list[EventDTO]:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_event(self, event_id: UUID) -> EventDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_participants(
        self,
        event_id: UUID,
        participant_ids: list[UUID] | None = None,
    ) -> list[ParticipantDTO]:
        """Participants of an event, optionally restricted to `participant_ids`."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_template(self, event_id: UUID) -> CertificateTemplateDTO | None:
        raise NotImplementedError


def event_to_dto(event: Event) -> EventDTO:
    return EventDTO(
        id=event.uuid,
        name=event.name,
        date=event.date,
        description=event.description,
        created_by=event.created_by,
        participant_ids=[participant.uuid for participant in event.participants],
    )


def participant_to_dto(participant: Participant) -> ParticipantDTO:
    return ParticipantDTO(
        id=participant.uuid,
        name=participant.name,
        email=participant.email,
        event_id=participant.event_id,
        certificate_sent=participant.certificate_sent,
        certificate_sent_at=participant.certificate_sent_at,
    )


def template_to_dto(template: CertificateTemplate) -> CertificateTemplateDTO:
    return CertificateTemplateDTO(
        id=template.uuid,
        event_id=template.event_id,
        template_type=template.template_type,
        generated_certificates=[
            GenerationRecordDTO(
                participant_id=record.participant_id,
                certificate_path=record.certificate_path,
                certificate_url=record.certificate_url,
                generated_at=record.generated_at,
                sent_at=record.sent_at,
            )
            for record in template.generated_certificates
        ],
    )


class SqlCertificateReadModel(CertificateReadModel):
    """SQL implementation of the certificate read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def list_events(self) -> list[EventDTO]:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            stmt = (
                select(Event)
                .options(selectinload(Event.participants))
                .order_by(Event.date)
                .execution_options(populate_existing=True)
            )
            result = await session.execute(stmt)
            return [event_to_dto(event) for event in result.scalars().all()]

    async def get_event(self, event_id: UUID) -> EventDTO | None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            stmt = (
                select(Event)
                .options(selectinload(Event.participants))
                .where(Event.uuid == event_id)
                .execution_options(populate_existing=True)
            )
            result = await session.execute(stmt)
            event = result.scalar_one_or_none()
            return event_to_dto(event) if event else None

    async def get_participants(
        self,
        event_id: UUID,
        participant_ids: list[UUID] | None = None,
    ) -> list[ParticipantDTO]:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            stmt = select(Participant).where(Participant.event_id == event_id)
            if participant_ids:
                stmt = stmt.where(Participant.uuid.in_(participant_ids))
            stmt = stmt.order_by(Participant.created_at, Participant.name)
            result = await session.execute(stmt)
            return [participant_to_dto(p) for p in result.scalars().all()]

    async def get_template(self, event_id: UUID) -> CertificateTemplateDTO | None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            stmt = (
                select(CertificateTemplate)
                .options(selectinload(CertificateTemplate.generated_certificates))
                .where(CertificateTemplate.event_id == event_id)
                .execution_options(populate_existing=True)
            )
            result = await session.execute(stmt)
            template = result.scalar_one_or_none()
            return template_to_dto(template) if template else None
