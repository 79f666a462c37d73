"""Read-through cache of day logs keyed by ``workout-log-<formatted date>``."""
from __future__ import annotations

import json
import logging
from datetime import date
from typing import Callable, Dict, Iterable, List, MutableMapping, Optional

import pydantic

from workout_tracker_api.models import DayLog, LoggedExercise
from workout_tracker_api.utils import storage_key

logger = logging.getLogger(__name__)

DayLogLoader = Callable[[List[date]], Dict[date, DayLog]]


class WorkoutLogCache:
    """
    Day logs for a single user, serialized as JSON strings in ``storage``.

    ``storage`` is any string mapping (a dict, a session store). Saves go
    through ``ProgressService.save_day``, which refreshes the saved day.
    Values that fail to parse are treated as absent and the caller's default
    is returned.
    """

    def __init__(self, storage: Optional[MutableMapping[str, str]] = None):
        self.storage: MutableMapping[str, str] = storage if storage is not None else {}

    def get(self, day: date, default: Optional[DayLog] = None) -> Optional[DayLog]:
        key = storage_key(day)
        raw = self.storage.get(key)
        if not raw:
            return default
        try:
            data = json.loads(raw)
            return {exercise_id: LoggedExercise.model_validate(item) for exercise_id, item in data.items()}
        except (json.JSONDecodeError, AttributeError, pydantic.ValidationError) as e:
            logger.error(f"Error parsing cached log {key}: {e}")
            return default

    def set(self, day: date, log: DayLog) -> None:
        self.storage[storage_key(day)] = json.dumps(
            {exercise_id: item.model_dump() for exercise_id, item in log.items()}
        )

    def read_through(self, days: Iterable[date], loader: DayLogLoader) -> Dict[date, DayLog]:
        """
        Return the log of every day, loading cache misses with one ``loader`` call.

        Days the loader has nothing for are cached as empty logs.
        """
        days = list(days)
        logs: Dict[date, DayLog] = {}
        missing: List[date] = []
        for day in days:
            cached = self.get(day)
            if cached is None:
                missing.append(day)
            else:
                logs[day] = cached

        if missing:
            logger.debug(f"Log cache MISS for {len(missing)} of {len(days)} days")
            loaded = loader(missing)
            for day in missing:
                log = loaded.get(day, {})
                self.set(day, log)
                logs[day] = log
        return logs
