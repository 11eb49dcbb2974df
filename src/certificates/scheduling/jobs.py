from typing import Any, Protocol

GENERATION_JOB_ID = "certificate-generation"
DISPATCH_JOB_ID = "certificate-dispatch"


class JobScheduler(Protocol):
    """The subset of the APScheduler scheduler API the triggers rely on."""

    def add_job(self, func, trigger=None, **kwargs: Any) -> Any: ...

    def remove_job(self, job_id: str, jobstore: str | None = None) -> None: ...


def event_generation_job_id(event_id) -> str:
    return f"certificate-generation:{event_id}"


def event_send_job_id(event_id) -> str:
    return f"certificate-send:{event_id}"
