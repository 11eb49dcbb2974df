from datetime import UTC, datetime
from typing import Any

from src.certificates.dtos import TemplateType

PAGE_CSS = """
    @page {
        size: A4 landscape;
        margin: 0;
    }
    body {
        font-family: 'Arial', 'Helvetica', sans-serif;
        line-height: 1.6;
        color: #333;
        margin: 0;
        padding: 0;
    }
    * {
        box-sizing: border-box;
    }
"""

SISTEC_HTML = """
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body>
    <div style="border: 12px solid #1d3557; height: 100vh; padding: 60px; text-align: center;">
        <h1 style="color: #1d3557; font-size: 48px; margin-bottom: 0;">Certificate of Participation</h1>
        <p style="font-size: 20px;">This is to certify that</p>
        <h2 style="font-size: 40px; color: #e63946;">{{participantName}}</h2>
        <p style="font-size: 20px;">has successfully participated in</p>
        <h3 style="font-size: 30px;">{{eventName}}</h3>
        <p>{{eventDescription}}</p>
        <p style="margin-top: 60px;">Held on {{eventDate}} &middot; Issued on {{issueDate}}</p>
    </div>
</body>
</html>
"""

CLASSIC_HTML = """
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body>
    <div style="border: 4px double #8d6e63; height: 100vh; padding: 80px; text-align: center; font-family: Georgia, serif;">
        <h1 style="font-size: 44px; letter-spacing: 4px;">CERTIFICATE</h1>
        <p style="font-size: 18px;">awarded to</p>
        <h2 style="font-size: 38px;">{{participantName}}</h2>
        <p style="font-size: 18px;">for attending {{eventName}} on {{eventDate}}</p>
        <p style="margin-top: 80px; font-size: 14px;">{{issueDate}}</p>
    </div>
</body>
</html>
"""

TEMPLATES = {
    TemplateType.SISTEC.value: SISTEC_HTML,
    TemplateType.CLASSIC.value: CLASSIC_HTML,
}


def get_template_html(template_type: str | None, default: str = TemplateType.SISTEC.value) -> str:
    """HTML for `template_type`, falling back to `default` for unknown types."""
    return TEMPLATES.get(template_type or default) or TEMPLATES.get(default, SISTEC_HTML)


def replace_template_variables(template_html: str, data: dict[str, Any]) -> str:
    """
    Replace {{variable}} placeholders with actual data.
    """
    today = datetime.now(UTC).strftime("%B %d, %Y")
    variables = {
        "participantName": data.get("participant_name", ""),
        "eventName": data.get("event_name", ""),
        "eventDate": data.get("event_date", ""),
        "eventDescription": data.get("event_description", ""),
        "issueDate": data.get("issue_date", today),
    }

    result = template_html
    for key, value in variables.items():
        result = result.replace(f"{{{{{key}}}}}", str(value))
    return result
