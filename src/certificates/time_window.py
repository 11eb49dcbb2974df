"""Time window policy for certificate scheduling.

All civil-date and cutoff decisions go through TimeWindowPolicy so that every
trigger and step agrees on what "today" means in the configured timezone.
"""

from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo


class TimeWindowPolicy:
    def __init__(
        self,
        timezone: str | ZoneInfo,
        tolerance: timedelta = timedelta(minutes=2),
    ) -> None:
        self.timezone = ZoneInfo(timezone) if isinstance(timezone, str) else timezone
        self.tolerance = tolerance

    def now(self) -> datetime:
        return datetime.now(UTC)

    def to_local(self, instant: datetime) -> datetime:
        """Convert an instant to local time. Naive instants are taken as UTC."""
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        return instant.astimezone(self.timezone)

    def civil_date(self, value: date | datetime) -> date:
        """Calendar date of a stored event date.

        Plain dates are already civil dates. Aware datetimes are converted to the
        local timezone first; naive datetimes keep their own calendar date.
        """
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.date()
            return value.astimezone(self.timezone).date()
        return value

    def today(self, now: datetime | None = None) -> date:
        return self.to_local(now or self.now()).date()

    def qualifies_today(self, event_date: date | datetime, now: datetime | None = None) -> bool:
        return self.civil_date(event_date) == self.today(now)

    def is_future(self, event_date: date | datetime, now: datetime | None = None) -> bool:
        return self.civil_date(event_date) > self.today(now)

    def is_recent_past(
        self, event_date: date | datetime, days: int, now: datetime | None = None
    ) -> bool:
        """True for events dated within the last `days` days, today excluded."""
        today = self.today(now)
        return today - timedelta(days=days) <= self.civil_date(event_date) < today

    def at_local_time(self, civil_date: date, target: time) -> datetime:
        return datetime.combine(civil_date, target, tzinfo=self.timezone)

    def is_at_or_past(self, now: datetime, target: time) -> bool:
        """Whether local time-of-day has reached `target`, allowing `tolerance` of early firing."""
        local_now = self.to_local(now)
        cutoff = self.at_local_time(local_now.date(), target)
        return local_now >= cutoff - self.tolerance

    def delay_until(self, target: datetime, now: datetime | None = None) -> timedelta | None:
        """Positive delay until `target`, or None when the target is not in the future."""
        delay = self.to_local(target) - self.to_local(now or self.now())
        if delay <= timedelta(0):
            return None
        return delay

    def next_run(self, target: time, now: datetime | None = None) -> datetime:
        """Next local instant at which a daily job at `target` will fire."""
        local_now = self.to_local(now or self.now())
        candidate = self.at_local_time(local_now.date(), target)
        if candidate <= local_now:
            candidate = self.at_local_time(local_now.date() + timedelta(days=1), target)
        return candidate
