import logging
from abc import ABC, abstractmethod
from uuid import UUID

from src.certificates.dtos import EventDTO, StepResult

logger = logging.getLogger(__name__)


class ActivityLogger(ABC):
    """Abstract base class for recording certificate runs in the activity log."""

    @abstractmethod
    async def log_activity(
        self,
        user_id: UUID | None,
        action: str,
        details: dict,
        status: int = 200,
    ) -> None:
        pass


class SQLActivityLogger(ActivityLogger):
    """SQL database implementation of ActivityLogger."""

    async def log_activity(
        self,
        user_id: UUID | None,
        action: str,
        details: dict,
        status: int = 200,
    ) -> None:
        from src.config.database import async_session_manager
        from src.models.activity_log import ActivityLog

        async with async_session_manager() as session:
            session.add(
                ActivityLog(
                    user_id=user_id,
                    action=action,
                    details=details,
                    status=status,
                )
            )


class NoOpActivityLogger(ActivityLogger):
    """No-op implementation for testing or when the activity log is disabled."""

    async def log_activity(
        self,
        user_id: UUID | None,
        action: str,
        details: dict,
        status: int = 200,
    ) -> None:
        pass


def result_status(result: StepResult) -> int:
    if result.not_found:
        return 404
    return 200 if result.success else 500


async def record_step_run(
    activity_logger: ActivityLogger | None,
    action: str,
    event_id: UUID,
    result: StepResult,
    event: EventDTO | None = None,
) -> None:
    """Write one activity log row for a step run. Never raises."""
    if activity_logger is None:
        return
    try:
        await activity_logger.log_activity(
            user_id=event.created_by if event else None,
            action=action,
            details={
                "eventId": str(event_id),
                "eventName": event.name if event else None,
                "message": result.message,
                "total": result.total,
                "successful": result.successful,
                "failed": result.failed,
            },
            status=result_status(result),
        )
    except Exception as e:
        logger.warning(f"Activity log entry '{action}' for event {event_id} failed: {e}")
