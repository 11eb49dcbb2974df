from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from src.certificates.activity_logger import ActivityLogger, record_step_run
from src.certificates.dependencies import build_dispatch_step, get_activity_logger
from src.certificates.features.dispatch_certificates.write_model import CertificateDispatchStep
from src.certificates.schemas import StepResultResponse
from src.certificates.urls import SEND_CERTIFICATES_URL

router = APIRouter()


def get_dispatch_step() -> CertificateDispatchStep:
    """Dependency to get the certificate dispatch step."""
    return build_dispatch_step()


@router.post(SEND_CERTIFICATES_URL, response_model=StepResultResponse)
async def send_certificates(
    event_id: UUID,
    step: CertificateDispatchStep = Depends(get_dispatch_step),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
) -> StepResultResponse:
    """
    E-mail every generated but unsent certificate of an event.
    """
    result = await step.dispatch(event_id)
    await record_step_run(activity_logger, "manual_certificate_sending", event_id, result)
    if result.not_found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.message)
    return StepResultResponse.from_result(result)
