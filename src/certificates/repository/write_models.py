"""Certificate write models - persist DTOs produced by the generation and dispatch steps."""

from abc import ABC, abstractmethod

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.certificates.dtos import CertificateTemplateDTO, ParticipantDTO
from src.certificates.repository.orm_models import (
    CertificateTemplate,
    GenerationRecord,
    Participant,
)
from src.config.database import async_session_manager


class CertificateWriteModel(ABC):
    @abstractmethod
    async def save_template(self, template: CertificateTemplateDTO) -> None:
        """Upsert the template's generation records, keyed by participant."""
        raise NotImplementedError

    @abstractmethod
    async def save_participant(self, participant: ParticipantDTO) -> None:
        """Persist the participant's certificate-sent state."""
        raise NotImplementedError


class SqlCertificateWriteModel(CertificateWriteModel):
    """SQL implementation of certificate write operations."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def save_template(self, template: CertificateTemplateDTO) -> None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            template_row = await session.get(CertificateTemplate, template.id)
            if template_row is None:
                template_row = CertificateTemplate(
                    uuid=template.id,
                    event_id=template.event_id,
                    template_type=template.template_type,
                )
                session.add(template_row)
                await session.flush()

            result = await session.execute(
                select(GenerationRecord).where(GenerationRecord.template_id == template.id)
            )
            existing = {record.participant_id: record for record in result.scalars().all()}

            for record in template.generated_certificates:
                row = existing.get(record.participant_id)
                if row is None:
                    session.add(
                        GenerationRecord(
                            template_id=template.id,
                            participant_id=record.participant_id,
                            certificate_path=record.certificate_path,
                            certificate_url=record.certificate_url,
                            generated_at=record.generated_at,
                            sent_at=record.sent_at,
                        )
                    )
                else:
                    row.certificate_path = record.certificate_path
                    row.certificate_url = record.certificate_url
                    row.generated_at = record.generated_at
                    row.sent_at = record.sent_at

            await session.flush()

    async def save_participant(self, participant: ParticipantDTO) -> None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            row = await session.get(Participant, participant.id)
            if row is None:
                row = Participant(
                    uuid=participant.id,
                    event_id=participant.event_id,
                    name=participant.name,
                    email=participant.email,
                )
                session.add(row)
            row.certificate_sent = participant.certificate_sent
            row.certificate_sent_at = participant.certificate_sent_at
            await session.flush()
