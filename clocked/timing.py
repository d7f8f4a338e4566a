"""Wall-clock helpers shared by the event manager and the actions.

Target times are naive local datetimes, the same wall clock the user types
into the form.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

DEFAULT_HORIZON = timedelta(hours=24)

MSG_ALREADY_PASSED = "O horário selecionado já passou"
MSG_TOO_FAR = "O horário não pode ser mais de 24 horas no futuro"

TIME_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"


def parse_time_of_day(value: str) -> time:
    """Parse an ``HH:MM`` string. Raises ValueError on malformed input."""
    return datetime.strptime(value.strip(), TIME_FORMAT).time()


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string. Raises ValueError on malformed input."""
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


def compute_target_datetime(
    time_of_day: str, on_date: Optional[str], now: datetime
) -> datetime:
    """Resolve the absolute moment an event should fire.

    With an explicit date the date and time are combined literally, even when
    the result is in the past. Without one, today's date is used and the
    result is rolled forward by exactly one calendar day when it is not
    strictly after ``now``.
    """
    clock_time = parse_time_of_day(time_of_day)
    if on_date:
        return datetime.combine(parse_date(on_date), clock_time)

    target = datetime.combine(now.date(), clock_time)
    if target <= now:
        target += timedelta(days=1)
    return target


def seconds_until(target: datetime, now: datetime) -> float:
    return (target - now).total_seconds()


def check_horizon(
    target: datetime, now: datetime, horizon: timedelta = DEFAULT_HORIZON
) -> Optional[str]:
    """Return the rejection message for ``target``, or None when it is schedulable."""
    if target <= now:
        return MSG_ALREADY_PASSED
    if target - now > horizon:
        return too_far_message(horizon)
    return None


def too_far_message(horizon: timedelta = DEFAULT_HORIZON) -> str:
    if horizon == DEFAULT_HORIZON:
        return MSG_TOO_FAR
    hours = horizon.total_seconds() / 3600
    label = f"{hours:g}"
    return f"O horário não pode ser mais de {label} horas no futuro"


def format_when(moment: datetime) -> str:
    """Format a datetime the way pt-BR users read it: ``18/10/2026, 14:30:00``."""
    return moment.strftime("%d/%m/%Y, %H:%M:%S")
