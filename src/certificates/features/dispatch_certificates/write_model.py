"""Certificate dispatch step.

E-mails every generated but unsent certificate of an event. A participant
counts as handled as soon as either the record's sent_at or the participant's
certificate_sent flag is set; the other signal is back-filled without sending.
"""

import logging
from dataclasses import dataclass, field
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
from src.email_service.base import EmailServiceBase
from src.events import CertificatesSentEvent
from src.notifications.sink import NotificationSink, publish_safely

logger = logging.getLogger(__name__)


@dataclass
class DispatchPlan:
    pending: list[tuple[GenerationRecordDTO, ParticipantDTO]] = field(default_factory=list)
    repaired_records: int = 0
    repaired_participants: list[ParticipantDTO] = field(default_factory=list)

    @property
    def has_repairs(self) -> bool:
        return bool(self.repaired_records or self.repaired_participants)


def plan_dispatch(
    template: CertificateTemplateDTO,
    participants: list[ParticipantDTO],
) -> DispatchPlan:
    """Compute the pending-dispatch set and reconcile the two sent signals in place."""
    by_id = {participant.id: participant for participant in participants}
    plan = DispatchPlan()

    for record in template.generated_certificates:
        participant = by_id.get(record.participant_id)
        if participant is None:
            logger.warning(
                f"Generation record for unknown participant {record.participant_id} "
                f"on template {template.id}, skipping"
            )
            continue

        if record.is_sent and not participant.certificate_sent:
            participant.certificate_sent = True
            participant.certificate_sent_at = record.sent_at
            plan.repaired_participants.append(participant)
        elif participant.certificate_sent and not record.is_sent:
            record.sent_at = participant.certificate_sent_at or record.generated_at
            plan.repaired_records += 1
        elif record.awaiting_dispatch and not participant.certificate_sent:
            plan.pending.append((record, participant))

    return plan


class CertificateDispatchStep:
    def __init__(
        self,
        read_model: CertificateReadModel,
        write_model: CertificateWriteModel,
        email_service: EmailServiceBase,
        policy: TimeWindowPolicy,
        notification_sink: NotificationSink | None = None,
        locks: EventLocks | None = None,
    ) -> None:
        self.read_model = read_model
        self.write_model = write_model
        self.email_service = email_service
        self.policy = policy
        self.notification_sink = notification_sink
        self.locks = locks or event_locks

    async def dispatch(self, event_id: UUID, now: datetime | None = None) -> StepResult:
        """E-mail the pending certificates of an event.

        Failed sends stay pending and are retried by the next dispatch run.
        """
        now = now or self.policy.now()
        try:
            async with self.locks.for_event(event_id):
                return await self._dispatch(event_id, now)
        except CertificateError as e:
            logger.info(f"Certificate dispatch skipped: {e}")
            return StepResult.missing(e)
        except Exception as e:
            logger.exception(f"Certificate dispatch failed for event {event_id}")
            return StepResult(success=False, message=f"Certificate dispatch failed: {e}")

    async def _dispatch(self, event_id: UUID, now: datetime) -> StepResult:
        event = await self.read_model.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        template = await self.read_model.get_template(event_id)
        if template is None:
            raise TemplateNotFoundError(event_id)

        participants = await self.read_model.get_participants(event_id)
        plan = plan_dispatch(template, participants)
        for participant in plan.repaired_participants:
            logger.info(f"Back-filling sent flag of participant {participant.id} from its record")
            await self.write_model.save_participant(participant)
        if plan.repaired_records:
            logger.info(f"Back-filled sent_at on {plan.repaired_records} record(s) of event {event.name}")

        if not plan.pending:
            if plan.has_repairs:
                await self.write_model.save_template(template)
            logger.info(f"No pending certificates to send for event {event.name}")
            return StepResult.from_outcomes("No pending certificates to send", [])

        outcomes = []
        for record, participant in plan.pending:
            outcome = await self._send(record, participant, event, now)
            outcomes.append(outcome)

        await self.write_model.save_template(template)

        result = StepResult.from_outcomes(f"Certificates sent for {event.name}", outcomes)
        logger.info(
            f"Dispatch for event {event.name}: "
            f"{result.successful}/{result.total} sent, {result.failed} failed"
        )
        await publish_safely(
            self.notification_sink,
            CertificatesSentEvent(
                event_id=event.id,
                event_name=event.name,
                total=result.total,
                successful=result.successful,
                failed=result.failed,
            ),
        )
        return result

    async def _send(
        self,
        record: GenerationRecordDTO,
        participant: ParticipantDTO,
        event: EventDTO,
        now: datetime,
    ) -> ParticipantOutcome:
        try:
            sent = await self.email_service.send_certificate_email(
                participant, record.certificate_path, event
            )
        except Exception as e:
            success, error = False, str(e)
        else:
            success, error = sent.success, sent.message

        if not success:
            logger.warning(f"Certificate e-mail to participant {participant.id} failed: {error}")
            return ParticipantOutcome(
                participant_id=participant.id,
                participant_name=participant.name,
                success=False,
                certificate_path=record.certificate_path,
                error=error or "Sending failed",
            )

        record.sent_at = now
        participant.certificate_sent = True
        participant.certificate_sent_at = now
        await self.write_model.save_participant(participant)
        return ParticipantOutcome(
            participant_id=participant.id,
            participant_name=participant.name,
            success=True,
            certificate_path=record.certificate_path,
        )
