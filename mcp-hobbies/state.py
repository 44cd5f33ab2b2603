"""Snapshot transitions for the hobby collection.

Every function here takes the current collection (or a single hobby) and
returns a new one. Inputs are never mutated, so callers decide when a
snapshot gets persisted.
"""

import uuid
from datetime import datetime
from typing import Optional

from models import DEFAULT_ICON, FrequencyType, Hobby, Log


def new_id() -> str:
    return str(uuid.uuid4())


def create_hobby(
    name: str,
    description: str = "",
    category: str = "Creative",
    icon: str = DEFAULT_ICON,
    target_frequency: int = 3,
    frequency_type: FrequencyType = FrequencyType.weekly,
    now: Optional[datetime] = None,
) -> Hobby:
    """Build a new hobby with a fresh id and no logs."""
    return Hobby(
        id=new_id(),
        name=name,
        description=description,
        category=category,
        icon=icon,
        target_frequency=target_frequency,
        frequency_type=FrequencyType(frequency_type),
        logs=[],
        created_at=now or datetime.now().astimezone(),
    )


def create_log(
    date: datetime,
    duration_minutes: int,
    notes: str = "",
    rating: int = 3,
) -> Log:
    return Log(
        id=new_id(),
        date=date,
        duration_minutes=duration_minutes,
        notes=notes,
        rating=rating,
    )


def find_hobby(hobbies: list[Hobby], hobby_id: str) -> Optional[Hobby]:
    for h in hobbies:
        if h.id == hobby_id:
            return h
    return None


def add_hobby(hobbies: list[Hobby], hobby: Hobby) -> list[Hobby]:
    return [*hobbies, hobby]


def add_log(hobby: Hobby, log: Log) -> Hobby:
    return hobby.model_copy(update={"logs": [*hobby.logs, log]})


def add_log_to(hobbies: list[Hobby], hobby_id: str, log: Log) -> list[Hobby]:
    return [add_log(h, log) if h.id == hobby_id else h for h in hobbies]


def delete_log(hobbies: list[Hobby], hobby_id: str, log_id: str) -> list[Hobby]:
    """Remove one log from one hobby. The log is gone for good."""
    result = []
    for h in hobbies:
        if h.id == hobby_id:
            h = h.model_copy(update={"logs": [l for l in h.logs if l.id != log_id]})
        result.append(h)
    return result


def delete_hobby(hobbies: list[Hobby], hobby_id: str) -> list[Hobby]:
    """Remove a hobby together with all of its logs."""
    return [h for h in hobbies if h.id != hobby_id]
