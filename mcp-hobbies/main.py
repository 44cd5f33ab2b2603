import logging
import os
from datetime import datetime
from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from sqlmodel import create_engine
from starlette.requests import Request
from starlette.responses import JSONResponse

import state
from coach import CoachClient
from models import DEFAULT_ICON, SUGGESTED_CATEGORIES, FrequencyType, Hobby, goal_label
from progress import evaluate_progress
from stats import activity_series, compute_aggregate_stats, history
from store import STORAGE_KEY, HobbyStore, init_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# --- Database setup ---

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:////data/hobbies.db")
engine = create_engine(DATABASE_URL, echo=False)
init_db(engine)

store = HobbyStore(engine, key=os.getenv("STORAGE_KEY", STORAGE_KEY))
coach = CoachClient()


# --- MCP server ---

INSTRUCTIONS = """You help the user keep up with their hobbies.

Use list_hobbies() to see every hobby with its current goal progress, and
log_session() whenever the user tells you they spent time on one. Deleting a
hobby or a log cannot be undone, so confirm with the user first.
For ideas, get_coaching() gives tips for an existing hobby and
suggest_hobbies() proposes new ones from the user's interests."""

_security = TransportSecuritySettings(allowed_hosts=["localhost"])
mcp = FastMCP(
    "mcp-hobbies",
    stateless_http=True,
    transport_security=_security,
    instructions=INSTRUCTIONS,
)


# --- Helper functions ---


def _now() -> datetime:
    return datetime.now().astimezone()


def _parse_date(value: Optional[str]) -> datetime:
    """ISO date or datetime; naive values are local time."""
    if not value:
        return _now()
    return datetime.fromisoformat(value).astimezone()


def _not_found(hobby_id: str) -> dict:
    return {"error": f"Hobby {hobby_id} not found"}


def _save_failed() -> dict:
    return {"error": "Could not save hobbies, nothing was changed"}


def _progress_dict(hobby: Hobby, now: datetime) -> dict:
    p = evaluate_progress(hobby, now)
    return {
        "count": p.completed_count,
        "target": p.target,
        "percent": p.percent,
        "label": p.window_label,
        "status": p.status,
    }


def _log_to_dict(log) -> dict:
    return {
        "id": log.id,
        "date": log.date.isoformat(),
        "duration_minutes": log.duration_minutes,
        "notes": log.notes,
        "rating": log.rating,
    }


def _hobby_summary(hobby: Hobby, now: datetime) -> dict:
    return {
        "id": hobby.id,
        "name": hobby.name,
        "description": hobby.description,
        "category": hobby.category,
        "icon": hobby.icon,
        "goal": goal_label(hobby),
        "target_frequency": hobby.target_frequency,
        "frequency_type": hobby.frequency_type.value,
        "sessions": len(hobby.logs),
        "progress": _progress_dict(hobby, now),
        "created_at": hobby.created_at.isoformat(),
    }


# --- Tools ---


@mcp.tool()
def list_hobbies() -> list[dict]:
    """List all hobbies with session count and progress toward the current goal."""
    now = _now()
    return [_hobby_summary(h, now) for h in store.load()]


@mcp.tool()
def get_hobby(hobby_id: str) -> dict:
    """Get one hobby with progress, log history (newest first) and chart data."""
    hobby = state.find_hobby(store.load(), hobby_id)
    if not hobby:
        return _not_found(hobby_id)
    result = _hobby_summary(hobby, _now())
    result["history"] = [_log_to_dict(l) for l in history(hobby.logs)]
    result["activity"] = activity_series(hobby.logs)
    return result


@mcp.tool()
def add_hobby(
    name: str,
    description: str = "",
    category: str = "Creative",
    icon: str = DEFAULT_ICON,
    target_frequency: int = 3,
    frequency_type: str = "Weekly",
) -> dict:
    """Create a new hobby. frequency_type is Daily, Weekly or Monthly.

    Suggested categories: Creative, Physical, Educational, Social, Relaxation.
    """
    try:
        hobby = state.create_hobby(
            name=name,
            description=description,
            category=category,
            icon=icon,
            target_frequency=target_frequency,
            frequency_type=FrequencyType(frequency_type),
        )
    except ValueError as e:
        return {"error": str(e)}
    if not store.save(state.add_hobby(store.load(), hobby)):
        return _save_failed()
    logger.info("Created hobby %s (%s)", hobby.name, hobby.id)
    return {"id": hobby.id, "name": hobby.name, "status": "created"}


@mcp.tool()
def delete_hobby(hobby_id: str) -> dict:
    """Permanently delete a hobby and all of its logs."""
    hobbies = store.load()
    hobby = state.find_hobby(hobbies, hobby_id)
    if not hobby:
        return _not_found(hobby_id)
    if not store.save(state.delete_hobby(hobbies, hobby_id)):
        return _save_failed()
    logger.info("Deleted hobby %s with %d logs", hobby_id, len(hobby.logs))
    return {"id": hobby.id, "name": hobby.name, "status": "deleted"}


@mcp.tool()
def log_session(
    hobby_id: str,
    duration_minutes: int = 30,
    rating: int = 3,
    notes: str = "",
    date: Optional[str] = None,
) -> dict:
    """Log a session. date defaults to now (ISO date or datetime if provided). rating is 1-5."""
    hobbies = store.load()
    hobby = state.find_hobby(hobbies, hobby_id)
    if not hobby:
        return _not_found(hobby_id)
    try:
        log = state.create_log(
            date=_parse_date(date),
            duration_minutes=duration_minutes,
            notes=notes,
            rating=rating,
        )
    except ValueError as e:
        return {"error": str(e)}
    if not store.save(state.add_log_to(hobbies, hobby_id, log)):
        return _save_failed()
    return {
        "id": log.id,
        "hobby_id": hobby_id,
        "hobby_name": hobby.name,
        "date": log.date.isoformat(),
        "status": "logged",
    }


@mcp.tool()
def delete_log(hobby_id: str, log_id: str) -> dict:
    """Permanently delete a single log from a hobby."""
    hobbies = store.load()
    hobby = state.find_hobby(hobbies, hobby_id)
    if not hobby:
        return _not_found(hobby_id)
    if not any(l.id == log_id for l in hobby.logs):
        return {"error": f"Log {log_id} not found"}
    if not store.save(state.delete_log(hobbies, hobby_id, log_id)):
        return _save_failed()
    return {"id": log_id, "hobby_id": hobby_id, "status": "deleted"}


@mcp.tool()
def get_dashboard() -> dict:
    """Totals across all hobbies: active hobbies, sessions logged and hours spent."""
    hobbies = store.load()
    stats = compute_aggregate_stats(hobbies)
    return {
        "active_hobbies": len(hobbies),
        "total_logs": stats.total_logs,
        "total_hours": round(stats.total_hours, 1),
        "categories": SUGGESTED_CATEGORIES,
    }


@mcp.tool()
def get_coaching(hobby_id: str) -> dict:
    """AI coaching for a hobby: a tip, a motivational line and a small challenge."""
    hobby = state.find_hobby(store.load(), hobby_id)
    if not hobby:
        return _not_found(hobby_id)
    advice = coach.get_hobby_coaching(hobby, _now())
    return {"hobby_id": hobby.id, "hobby_name": hobby.name, **advice.model_dump()}


@mcp.tool()
def suggest_hobbies(interests: str) -> list[dict]:
    """Suggest new hobbies from a free-text description of the user's interests."""
    return [s.model_dump() for s in coach.suggest_new_hobbies(interests)]


@mcp.custom_route("/health", methods=["GET"])
async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


# --- App setup ---

app = mcp.streamable_http_app()

if __name__ == "__main__":
    mcp.run()
