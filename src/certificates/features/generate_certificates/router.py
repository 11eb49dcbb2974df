from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, status

from src.certificates.activity_logger import ActivityLogger, record_step_run
from src.certificates.dependencies import build_generation_step, get_activity_logger
from src.certificates.features.generate_certificates.write_model import CertificateGenerationStep
from src.certificates.schemas import GenerateCertificatesRequest, StepResultResponse
from src.certificates.urls import GENERATE_CERTIFICATES_URL

router = APIRouter()


def get_generation_step() -> CertificateGenerationStep:
    """Dependency to get the certificate generation step."""
    return build_generation_step()


@router.post(GENERATE_CERTIFICATES_URL, response_model=StepResultResponse)
async def generate_certificates(
    event_id: UUID,
    request: GenerateCertificatesRequest | None = Body(default=None),
    step: CertificateGenerationStep = Depends(get_generation_step),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
) -> StepResultResponse:
    """
    Generate the missing certificates of an event right away.

    Participants that already have a certificate are skipped. Optionally
    restricted to `participant_ids`.
    """
    participant_ids = request.participant_ids if request else None
    result = await step.generate(event_id, participant_ids=participant_ids)
    await record_step_run(activity_logger, "manual_certificate_generation", event_id, result)
    if result.not_found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.message)
    return StepResultResponse.from_result(result)
