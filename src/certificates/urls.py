CERTIFICATES_URL = "/api/v1/events/{event_id}/certificates"
GENERATE_CERTIFICATES_URL = f"{CERTIFICATES_URL}/generate"
SEND_CERTIFICATES_URL = f"{CERTIFICATES_URL}/send"
SCHEDULE_CERTIFICATES_URL = f"{CERTIFICATES_URL}/schedule"
