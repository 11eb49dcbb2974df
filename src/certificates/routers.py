from fastapi import APIRouter

from .features.dispatch_certificates.router import router as dispatch_certificates_router
from .features.generate_certificates.router import router as generate_certificates_router
from .features.schedule_certificates.router import router as schedule_certificates_router

router = APIRouter()

router.include_router(generate_certificates_router)
router.include_router(dispatch_certificates_router)
router.include_router(schedule_certificates_router)
