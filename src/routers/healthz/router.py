from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str = "0.1.0"
    scheduler: str = "stopped"


@router.get("/", response_model=HealthCheckResponse)
async def health_check(request: Request) -> HealthCheckResponse:
    """
    Health check endpoint to verify the API and the certificate scheduler are up.
    """
    running = getattr(request.app.state, "event_certificate_scheduler", None) is not None
    return HealthCheckResponse(status="healthy", scheduler="running" if running else "stopped")
