from enum import Enum


class TableNames(str, Enum):
    USERS = "users"
    EVENTS = "events"
    PARTICIPANTS = "participants"
    CERTIFICATE_TEMPLATES = "certificate_templates"
    GENERATION_RECORDS = "generation_records"
    ACTIVITY_LOGS = "activity_logs"
    EMAIL_LOGS = "email_logs"
