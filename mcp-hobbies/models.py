from datetime import datetime, timezone
from enum import Enum

from sqlmodel import Field, SQLModel


SUGGESTED_CATEGORIES = ["Creative", "Physical", "Educational", "Social", "Relaxation"]

DEFAULT_ICON = "🎨"


class FrequencyType(str, Enum):
    daily = "Daily"
    weekly = "Weekly"
    monthly = "Monthly"


GOAL_UNITS = {
    FrequencyType.daily: "day",
    FrequencyType.weekly: "wk",
    FrequencyType.monthly: "mo",
}


class Log(SQLModel):
    id: str
    date: datetime
    duration_minutes: int = Field(ge=1)
    notes: str = ""
    rating: int = Field(ge=1, le=5)


class Hobby(SQLModel):
    id: str
    name: str
    description: str = ""
    category: str = "Creative"  # open set, see SUGGESTED_CATEGORIES
    icon: str = DEFAULT_ICON
    target_frequency: int = Field(ge=1)
    frequency_type: FrequencyType = FrequencyType.weekly
    logs: list[Log] = Field(default_factory=list)
    created_at: datetime


class AIAdvice(SQLModel):
    tip: str
    motivation: str
    challenge: str


class AISuggestion(SQLModel):
    name: str
    description: str
    reason: str


class KeyValue(SQLModel, table=True):
    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def goal_label(hobby: Hobby) -> str:
    """Compact goal text, e.g. "3/wk"."""
    return f"{hobby.target_frequency}/{GOAL_UNITS.get(hobby.frequency_type, 'mo')}"
