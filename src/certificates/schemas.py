from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.certificates.dtos import StepResult


class ParticipantOutcomeResponse(BaseModel):
    participant_id: UUID
    participant_name: str
    success: bool
    certificate_path: str | None = None
    error: str | None = None


class StepResultResponse(BaseModel):
    """Summary of a generation or dispatch run on one event."""

    success: bool
    message: str
    total: int
    successful: int
    failed: int
    scheduled: bool = False
    results: list[ParticipantOutcomeResponse] = []

    @classmethod
    def from_result(cls, result: StepResult) -> "StepResultResponse":
        return cls(
            success=result.success,
            message=result.message,
            total=result.total,
            successful=result.successful,
            failed=result.failed,
            scheduled=result.scheduled,
            results=[
                ParticipantOutcomeResponse(
                    participant_id=outcome.participant_id,
                    participant_name=outcome.participant_name,
                    success=outcome.success,
                    certificate_path=outcome.certificate_path,
                    error=outcome.error,
                )
                for outcome in result.results
            ],
        )


class GenerateCertificatesRequest(BaseModel):
    participant_ids: list[UUID] | None = None


class ScheduleResponse(BaseModel):
    scheduled: bool
    message: str
    generation_run_at: datetime | None = None


class CancelScheduleResponse(BaseModel):
    cancelled: bool
