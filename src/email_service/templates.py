from dataclasses import dataclass


@dataclass
class EmailTemplates:
    CERTIFICATE_SUBJECT = "Your Certificate for {event_name}"
    CERTIFICATE_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2>Congratulations {participant_name}!</h2>
        <p>Thank you for participating in <strong>{event_name}</strong>.</p>
        {event_description}
        <p>Please find your certificate attached to this email.</p>
        <p>Best regards,<br>Task Automation System</p>
    </body>
    </html>
    """
    CERTIFICATE_DESCRIPTION_HTML = "<p>{event_description}</p>"

    CERTIFICATE_TEXT = """
    Congratulations {participant_name}!

    Thank you for participating in {event_name}.
    {event_description}
    Please find your certificate attached to this email.

    Best regards,
    Task Automation System
    """
