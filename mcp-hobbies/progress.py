"""Goal progress for a single hobby.

Daily goals count logs on the same calendar day as ``now``. Weekly and
monthly goals use rolling windows of 7 and 30 days ending at ``now``, and a
log has to be strictly after the window start to count.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from models import FrequencyType, Hobby

WINDOW_LABELS = {
    FrequencyType.daily: "Today",
    FrequencyType.weekly: "Past 7 Days",
    FrequencyType.monthly: "Past 30 Days",
}

ROLLING_WINDOWS = {
    FrequencyType.weekly: timedelta(days=7),
    FrequencyType.monthly: timedelta(days=30),
}

GOAL_MET = "Goal Met"
ON_TRACK = "On Track"
FALLING_BEHIND = "Falling Behind"


@dataclass(frozen=True)
class Progress:
    completed_count: int
    percent: int
    window_label: str
    window_start: datetime
    target: int
    status: str


def classify_status(percent: float) -> str:
    if percent >= 100:
        return GOAL_MET
    if percent >= 50:
        return ON_TRACK
    return FALLING_BEHIND


def _percent(count: int, target: int) -> int:
    # Floor, so a goal only reads 100 once it is actually reached.
    if target <= 0:
        return 100 if count > 0 else 0
    return min(100, count * 100 // target)


def evaluate_progress(hobby: Hobby, now: datetime) -> Progress:
    """Count the logs inside the hobby's current window.

    Naive datetimes are read as local time; calendar days are compared in
    ``now``'s timezone.
    """
    if now.tzinfo is None:
        now = now.astimezone()
    tz = now.tzinfo
    dates = [log.date.astimezone(tz) for log in hobby.logs]

    if hobby.frequency_type == FrequencyType.daily:
        window_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        today = now.date()
        count = sum(1 for d in dates if d.date() == today)
    else:
        span = ROLLING_WINDOWS.get(hobby.frequency_type, ROLLING_WINDOWS[FrequencyType.monthly])
        window_start = now - span
        count = sum(1 for d in dates if d > window_start)

    percent = _percent(count, hobby.target_frequency)
    return Progress(
        completed_count=count,
        percent=percent,
        window_label=WINDOW_LABELS.get(hobby.frequency_type, WINDOW_LABELS[FrequencyType.monthly]),
        window_start=window_start,
        target=hobby.target_frequency,
        status=classify_status(percent),
    )
