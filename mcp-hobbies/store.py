"""Hobby collection persisted as one JSON document in a key-value table.

Records are read one by one: a hobby or log that fails validation is skipped
with a warning instead of hiding the rest of the collection. A stored
document that could not be read completely is copied to a backup key before
the next save replaces it.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel

from models import Hobby, KeyValue, Log

logger = logging.getLogger(__name__)

STORAGE_KEY = "hobbyzen_data_v1"


def init_db(engine):
    SQLModel.metadata.create_all(engine)


def _parse_log(item: Any) -> Optional[Log]:
    try:
        return Log.model_validate(item)
    except ValidationError as e:
        logger.warning("Skipping unreadable log %r: %s", item, e)
        return None


def _parse_hobby(item: Any) -> tuple[Optional[Hobby], bool]:
    """Return the hobby (or None) and whether it was read without losses.

    An out-of-range target_frequency is kept as stored; progress handles it.
    """
    if not isinstance(item, dict):
        logger.warning("Skipping hobby record that is not an object: %r", item)
        return None, False
    raw_logs = item.get("logs") or []
    complete = isinstance(raw_logs, list)
    if not complete:
        logger.warning("Ignoring logs of hobby %s: not a list", item.get("id"))
        raw_logs = []
    try:
        target = int(item.get("target_frequency"))
        hobby = Hobby.model_validate({**item, "logs": [], "target_frequency": 1})
    except (TypeError, ValueError) as e:
        logger.warning("Skipping unreadable hobby %s: %s", item.get("id"), e)
        return None, False
    if target < 1:
        logger.warning("Hobby %s has target_frequency %d", hobby.id, target)
    logs = [log for log in map(_parse_log, raw_logs) if log is not None]
    hobby = hobby.model_copy(update={"logs": logs, "target_frequency": target})
    return hobby, complete and len(logs) == len(raw_logs)


def parse_document(raw: Optional[str]) -> tuple[list[Hobby], bool]:
    """Parse a stored document into hobbies and whether nothing was dropped."""
    if not raw:
        return [], True
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning("Stored hobby data is not valid JSON: %s", e)
        return [], False
    if not isinstance(data, list):
        logger.warning("Stored hobby data is a %s, expected a list", type(data).__name__)
        return [], False
    hobbies = []
    complete = True
    for item in data:
        hobby, ok = _parse_hobby(item)
        complete = complete and ok
        if hobby is not None:
            hobbies.append(hobby)
    return hobbies, complete


class HobbyStore:
    def __init__(self, engine, key: str = STORAGE_KEY):
        self.engine = engine
        self.key = key

    def backup_key(self, now: datetime) -> str:
        return f"{self.key}.unreadable.{now:%Y%m%dT%H%M%S%f}"

    def load(self) -> list[Hobby]:
        """Return the saved hobbies that could be read; [] if none."""
        try:
            with Session(self.engine) as session:
                row = session.get(KeyValue, self.key)
                raw = row.value if row else None
        except SQLAlchemyError as e:
            logger.error("Failed to read %s: %s", self.key, e)
            return []
        hobbies, _ = parse_document(raw)
        return hobbies

    def save(self, hobbies: list[Hobby]) -> bool:
        """Replace the stored collection. Returns False if the write failed."""
        payload = json.dumps(
            [h.model_dump(mode="json") for h in hobbies], ensure_ascii=False
        )
        now = datetime.now(timezone.utc)
        try:
            with Session(self.engine) as session:
                row = session.get(KeyValue, self.key)
                if row is None:
                    row = KeyValue(key=self.key, value=payload, updated_at=now)
                else:
                    _, complete = parse_document(row.value)
                    if not complete:
                        backup = self.backup_key(now)
                        session.add(KeyValue(key=backup, value=row.value, updated_at=now))
                        logger.warning("Kept unreadable data under %s before saving", backup)
                    row.value = payload
                    row.updated_at = now
                session.add(row)
                session.commit()
        except SQLAlchemyError as e:
            logger.error("Failed to save %d hobbies under %s: %s", len(hobbies), self.key, e)
            return False
        logger.info("Saved %d hobbies under %s", len(hobbies), self.key)
        return True
