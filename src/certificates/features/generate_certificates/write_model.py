"""Certificate generation step.

Renders a certificate for every participant of an event that does not have one
yet and records a generation record per participant. Never sends e-mail and
never touches the participant's sent flag.
"""

import logging
from datetime import datetime
from uuid import UUID

from src.certificates.dtos import (
    CertificateError,
    CertificateTemplateDTO,
    EventDTO,
    EventNotFoundError,
    GenerationRecordDTO,
    ParticipantDTO,
    ParticipantOutcome,
    StepResult,
    TemplateNotFoundError,
)
from src.certificates.locks import EventLocks, event_locks
from src.certificates.repository.read_models import CertificateReadModel
from src.certificates.repository.write_models import CertificateWriteModel
from src.certificates.time_window import TimeWindowPolicy
from src.events import CertificatesGeneratedEvent
from src.notifications.sink import NotificationSink, publish_safely
from src.rendering.base import CertificateRenderer

logger = logging.getLogger(__name__)


def pending_generation(
    participants: list[ParticipantDTO],
    template: CertificateTemplateDTO,
) -> list[ParticipantDTO]:
    """Participants without a generation record and not yet marked as sent."""
    return [
        participant
        for participant in participants
        if not participant.certificate_sent and template.record_for(participant.id) is None
    ]


class CertificateGenerationStep:
    def __init__(
        self,
        read_model: CertificateReadModel,
        write_model: CertificateWriteModel,
        renderer: CertificateRenderer,
        policy: TimeWindowPolicy,
        notification_sink: NotificationSink | None = None,
        locks: EventLocks | None = None,
    ) -> None:
        self.read_model = read_model
        self.write_model = write_model
        self.renderer = renderer
        self.policy = policy
        self.notification_sink = notification_sink
        self.locks = locks or event_locks

    async def generate(
        self,
        event_id: UUID,
        participant_ids: list[UUID] | None = None,
        now: datetime | None = None,
    ) -> StepResult:
        """Generate the missing certificates of an event.

        Args:
            event_id: The event to process
            participant_ids: Optional subset of the event's participants
            now: Reference instant, defaults to the policy clock

        Returns:
            StepResult with total/successful/failed counts and one outcome per
            processed participant. Missing event or template is reported with
            not_found=True; nothing is written in that case.
        """
        now = now or self.policy.now()
        try:
            async with self.locks.for_event(event_id):
                return await self._generate(event_id, participant_ids, now)
        except CertificateError as e:
            logger.info(f"Certificate generation skipped: {e}")
            return StepResult.missing(e)
        except Exception as e:
            logger.exception(f"Certificate generation failed for event {event_id}")
            return StepResult(success=False, message=f"Certificate generation failed: {e}")

    async def _generate(
        self,
        event_id: UUID,
        participant_ids: list[UUID] | None,
        now: datetime,
    ) -> StepResult:
        event = await self.read_model.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        template = await self.read_model.get_template(event_id)
        if template is None:
            raise TemplateNotFoundError(event_id)

        if self.policy.is_future(event.date, now):
            logger.info(f"Event {event.name} ({event_id}) is in the future, generation deferred")
            return StepResult(
                success=True,
                message="Certificates will be generated on the event day",
                scheduled=True,
            )

        participants = await self.read_model.get_participants(event_id, participant_ids)
        pending = pending_generation(participants, template)
        if not pending:
            logger.info(f"No pending certificates to generate for event {event.name}")
            return StepResult.from_outcomes("No pending certificates to generate", [])

        outcomes = []
        for participant in pending:
            outcome = await self._render(participant, event, template, now)
            outcomes.append(outcome)

        await self.write_model.save_template(template)

        result = StepResult.from_outcomes(f"Certificates generated for {event.name}", outcomes)
        logger.info(
            f"Generation for event {event.name}: "
            f"{result.successful}/{result.total} successful, {result.failed} failed"
        )
        await publish_safely(
            self.notification_sink,
            CertificatesGeneratedEvent(
                event_id=event.id,
                event_name=event.name,
                total=result.total,
                successful=result.successful,
                failed=result.failed,
            ),
        )
        return result

    async def _render(
        self,
        participant: ParticipantDTO,
        event: EventDTO,
        template: CertificateTemplateDTO,
        now: datetime,
    ) -> ParticipantOutcome:
        try:
            rendered = await self.renderer.render_certificate(participant, event, template.template_type)
        except Exception as e:
            rendered = None
            error = str(e)
        else:
            error = rendered.message

        if rendered is None or not rendered.success or not rendered.certificate_path:
            logger.warning(f"Certificate rendering failed for participant {participant.id}: {error}")
            return ParticipantOutcome(
                participant_id=participant.id,
                participant_name=participant.name,
                success=False,
                error=error or "Rendering failed",
            )

        template.add_record(
            GenerationRecordDTO(
                participant_id=participant.id,
                certificate_path=rendered.certificate_path,
                certificate_url=rendered.certificate_url,
                generated_at=now,
            )
        )
        return ParticipantOutcome(
            participant_id=participant.id,
            participant_name=participant.name,
            success=True,
            certificate_path=rendered.certificate_path,
        )
