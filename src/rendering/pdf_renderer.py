"""
Certificate renderer backed by WeasyPrint.

Fills the HTML layout of the template type, converts it to PDF and stores it
under the certificates directory, where it is served from the public URL.
"""

import asyncio
import logging
from pathlib import Path

from src.certificates.dtos import EventDTO, ParticipantDTO, RenderResult
from src.rendering.base import CertificateRenderer
from src.rendering.templates import PAGE_CSS, get_template_html, replace_template_variables

logger = logging.getLogger(__name__)


def html_to_pdf_bytes(html_content: str) -> bytes:
    """
    Convert HTML to PDF bytes using WeasyPrint.
    """
    from weasyprint import CSS, HTML

    return HTML(string=html_content).write_pdf(stylesheets=[CSS(string=PAGE_CSS)])


class WeasyPrintCertificateRenderer(CertificateRenderer):
    def __init__(
        self,
        output_dir: str | Path,
        public_url: str,
        default_template_type: str = "sistec",
    ) -> None:
        self.output_dir = Path(output_dir)
        self.public_url = public_url.rstrip("/")
        self.default_template_type = default_template_type

    def certificate_filename(self, participant: ParticipantDTO, event: EventDTO) -> str:
        return f"{event.id}_{participant.id}.pdf"

    def build_html(self, participant: ParticipantDTO, event: EventDTO, template_type: str) -> str:
        return replace_template_variables(
            get_template_html(template_type, self.default_template_type),
            {
                "participant_name": participant.name,
                "event_name": event.name,
                "event_date": event.date.strftime("%B %d, %Y"),
                "event_description": event.description or "",
            },
        )

    def _write_pdf(self, html_content: str, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(html_to_pdf_bytes(html_content))

    async def render_certificate(
        self,
        participant: ParticipantDTO,
        event: EventDTO,
        template_type: str,
    ) -> RenderResult:
        logger.info(f"Rendering {template_type} certificate for participant {participant.id}, event {event.id}")
        filename = self.certificate_filename(participant, event)
        path = self.output_dir / filename
        html_content = self.build_html(participant, event, template_type)
        try:
            await asyncio.to_thread(self._write_pdf, html_content, path)
        except Exception as e:
            logger.error(f"Error rendering certificate for participant {participant.id}: {e}")
            return RenderResult(success=False, message=str(e))

        return RenderResult(
            success=True,
            certificate_path=str(path),
            certificate_url=f"{self.public_url}/{filename}",
            message="Certificate generated",
        )
