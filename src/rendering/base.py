from abc import ABC, abstractmethod

from src.certificates.dtos import EventDTO, ParticipantDTO, RenderResult


class CertificateRenderer(ABC):
    @abstractmethod
    async def render_certificate(
        self,
        participant: ParticipantDTO,
        event: EventDTO,
        template_type: str,
    ) -> RenderResult:
        """Render one participant's certificate. Reports failures in the result instead of raising."""
        pass
