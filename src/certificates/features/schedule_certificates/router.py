from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status

from src.certificates.dependencies import get_certificate_read_model
from src.certificates.dtos import EventNotFoundError
from src.certificates.repository.read_models import CertificateReadModel
from src.certificates.schemas import CancelScheduleResponse, ScheduleResponse
from src.certificates.scheduling.one_shot import EventCertificateScheduler
from src.certificates.urls import SCHEDULE_CERTIFICATES_URL

router = APIRouter()


def get_event_certificate_scheduler(request: Request) -> EventCertificateScheduler:
    """Dependency returning the scheduler started by the application lifespan."""
    scheduler = getattr(request.app.state, "event_certificate_scheduler", None)
    if scheduler is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Certificate scheduler is not running",
        )
    return scheduler


@router.post(SCHEDULE_CERTIFICATES_URL, response_model=ScheduleResponse)
async def schedule_certificates(
    event_id: UUID,
    read_model: CertificateReadModel = Depends(get_certificate_read_model),
    scheduler: EventCertificateScheduler = Depends(get_event_certificate_scheduler),
) -> ScheduleResponse:
    """
    Schedule certificate generation and sending for one event.

    Replaces any existing schedule of the event. Returns `scheduled: false`
    when the generation time on the event day has already passed.
    """
    event = await read_model.get_event(event_id)
    if event is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(EventNotFoundError(event_id))
        )

    schedule = scheduler.reschedule(event)
    if schedule is None:
        return ScheduleResponse(scheduled=False, message="Generation time has already passed")
    return ScheduleResponse(
        scheduled=True,
        message="Certificate generation scheduled",
        generation_run_at=schedule.generation_run_at,
    )


@router.delete(SCHEDULE_CERTIFICATES_URL, response_model=CancelScheduleResponse)
async def cancel_certificate_schedule(
    event_id: UUID,
    scheduler: EventCertificateScheduler = Depends(get_event_certificate_scheduler),
) -> CancelScheduleResponse:
    return CancelScheduleResponse(cancelled=scheduler.cancel(event_id))
