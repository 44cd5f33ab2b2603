from dataclasses import dataclass
from typing import Iterable

from models import Hobby, Log


@dataclass(frozen=True)
class AggregateStats:
    total_logs: int
    total_hours: float


def compute_aggregate_stats(hobbies: Iterable[Hobby]) -> AggregateStats:
    """Session count and hours across every hobby."""
    total_logs = 0
    total_minutes = 0
    for h in hobbies:
        total_logs += len(h.logs)
        total_minutes += sum(l.duration_minutes for l in h.logs)
    # Minutes are summed as ints, so the result does not depend on order.
    return AggregateStats(total_logs=total_logs, total_hours=total_minutes / 60)


def history(logs: list[Log]) -> list[Log]:
    """Newest first."""
    return sorted(logs, key=lambda l: l.date, reverse=True)


def activity_series(logs: list[Log]) -> list[dict]:
    """Chart points in date order: one per log with minutes and rating."""
    return [
        {
            "date": f"{l.date:%b} {l.date.day}",
            "minutes": l.duration_minutes,
            "rating": l.rating,
        }
        for l in sorted(logs, key=lambda l: l.date)
    ]
