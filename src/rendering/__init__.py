from src.config.settings import settings
from src.rendering.base import CertificateRenderer
from src.rendering.pdf_renderer import WeasyPrintCertificateRenderer


def get_certificate_renderer() -> CertificateRenderer:
    return WeasyPrintCertificateRenderer(
        output_dir=settings.certificates_dir,
        public_url=settings.certificates_public_url,
        default_template_type=settings.default_template_type,
    )


__all__ = [
    "CertificateRenderer",
    "WeasyPrintCertificateRenderer",
    "get_certificate_renderer",
]
