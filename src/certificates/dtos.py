from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import UUID


class CertificateError(Exception):
    """Base class for certificate lifecycle errors."""


class EventNotFoundError(CertificateError):
    """Raised when an event cannot be found."""

    def __init__(self, event_id: UUID) -> None:
        self.event_id = event_id
        super().__init__(f"Event '{event_id}' not found")


class TemplateNotFoundError(CertificateError):
    """Raised when an event has no certificate template configured."""

    def __init__(self, event_id: UUID) -> None:
        self.event_id = event_id
        super().__init__(f"Certificate template not found for event '{event_id}'")


class TemplateType(str, Enum):
    SISTEC = "sistec"
    CLASSIC = "classic"


class TriggerState(str, Enum):
    IDLE = "idle"
    FIRING_GENERATION = "firing_generation"
    FIRING_DISPATCH = "firing_dispatch"


@dataclass
class EventDTO:
    """Event as seen by the scheduler. Only the civil date matters for scheduling."""

    id: UUID
    name: str
    date: date | datetime
    description: str | None = None
    created_by: UUID | None = None
    participant_ids: list[UUID] = field(default_factory=list)


@dataclass
class ParticipantDTO:
    id: UUID
    name: str
    email: str
    event_id: UUID
    certificate_sent: bool = False
    certificate_sent_at: datetime | None = None


@dataclass
class GenerationRecordDTO:
    participant_id: UUID
    certificate_path: str
    certificate_url: str | None
    generated_at: datetime | None
    sent_at: datetime | None = None

    @property
    def is_sent(self) -> bool:
        return self.sent_at is not None

    @property
    def awaiting_dispatch(self) -> bool:
        return self.generated_at is not None and self.sent_at is None


@dataclass
class CertificateTemplateDTO:
    """Active certificate template of an event with its generation records."""

    id: UUID
    event_id: UUID
    template_type: str = TemplateType.SISTEC.value
    generated_certificates: list[GenerationRecordDTO] = field(default_factory=list)

    def record_for(self, participant_id: UUID) -> GenerationRecordDTO | None:
        for record in self.generated_certificates:
            if record.participant_id == participant_id:
                return record
        return None

    def add_record(self, record: GenerationRecordDTO) -> bool:
        """Append a record unless the participant already has one. Returns True if added."""
        if self.record_for(record.participant_id) is not None:
            return False
        self.generated_certificates.append(record)
        return True


@dataclass(frozen=True)
class RenderResult:
    success: bool
    certificate_path: str | None = None
    certificate_url: str | None = None
    message: str = ""


@dataclass(frozen=True)
class SendResult:
    success: bool
    message: str = ""


@dataclass(frozen=True)
class ParticipantOutcome:
    participant_id: UUID
    participant_name: str
    success: bool
    certificate_path: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class StepResult:
    """Aggregate outcome of a generation or dispatch run on one event."""

    success: bool
    message: str
    total: int = 0
    successful: int = 0
    failed: int = 0
    results: list[ParticipantOutcome] = field(default_factory=list)
    not_found: bool = False
    scheduled: bool = False

    @classmethod
    def from_outcomes(cls, message: str, outcomes: list[ParticipantOutcome]) -> "StepResult":
        successful = sum(1 for outcome in outcomes if outcome.success)
        return cls(
            success=True,
            message=message,
            total=len(outcomes),
            successful=successful,
            failed=len(outcomes) - successful,
            results=list(outcomes),
        )

    @classmethod
    def missing(cls, error: CertificateError) -> "StepResult":
        return cls(success=False, message=str(error), not_found=True)


@dataclass(frozen=True)
class TriggerResult:
    """Totals of one recurring trigger firing across all qualifying events."""

    success: bool
    message: str
    events_processed: int = 0
    total_processed: int = 0
    total_successful: int = 0
    total_failed: int = 0
    waiting: bool = False
    event_results: dict[UUID, StepResult] = field(default_factory=dict)
