"""
Workout log store backed by the Supabase ``workout_logs`` and ``exercise_logs`` tables.

A day's log is one parent row per (user, date) plus one child row per
exercise. Saves are upserts: the last full submission for a day wins and
nothing is merged.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from supabase import Client

from workout_tracker_api.exceptions import PersistenceError, UpstreamError
from workout_tracker_api.models import DayLog, ExerciseLogEntry, LoggedExercise, WorkoutLogRecord
from workout_tracker_api.utils import parse_weight

logger = logging.getLogger(__name__)


def _format_weight(value: Any) -> str:
    """Render a stored weight the way the user typed it: 60.0 -> '60'."""
    try:
        weight = float(value)
    except (TypeError, ValueError):
        return ""
    return str(int(weight)) if weight.is_integer() else str(weight)


def entry_from_row(row: Dict[str, Any]) -> ExerciseLogEntry:
    """Convert an ``exercise_logs`` row into an ExerciseLogEntry."""
    return ExerciseLogEntry(
        exercise_id=row.get("exercise_id", ""),
        completed=bool(row.get("completed")),
        weights=[_format_weight(w) for w in row.get("weight_used") or []],
        sets_completed=row.get("sets_completed"),
        reps_completed=row.get("reps_completed"),
    )


def to_day_log(entries: Iterable[ExerciseLogEntry]) -> DayLog:
    """Key a day's entries by exercise id in the ``{completed, weights}`` shape."""
    return {
        entry.exercise_id: LoggedExercise(completed=entry.completed, weights=list(entry.weights))
        for entry in entries
    }


class WorkoutLogService:
    """Read and write per-day workout logs for a user."""

    LOGS_TABLE = "workout_logs"
    EXERCISE_LOGS_TABLE = "exercise_logs"

    def __init__(self, client: Client):
        self.client = client

    def get(self, user_id: str, date_key: str) -> Optional[List[ExerciseLogEntry]]:
        """
        Fetch every exercise entry logged by a user on a date.

        Args:
            user_id: Owner of the log
            date_key: Formatted date key, e.g. "Monday, October 19, 2026"

        Returns:
            The day's entries, or None if nothing was logged that day
        """
        try:
            result = self.client.table(self.LOGS_TABLE) \
                .select("id, date, exercise_logs(*)") \
                .eq("user_id", user_id) \
                .eq("date", date_key) \
                .execute()
        except Exception as e:
            logger.error(f"Error fetching workout log for {user_id} on {date_key}: {e}")
            raise UpstreamError("Failed to fetch workout log") from e

        rows = result.data or []
        if not rows:
            logger.debug(f"No workout log for {user_id} on {date_key}")
            return None
        return [entry_from_row(r) for r in rows[0].get("exercise_logs") or []]

    def get_many(self, user_id: str, date_keys: List[str]) -> Dict[str, List[ExerciseLogEntry]]:
        """
        Fetch the logs for several dates in one request.

        Dates with no log are left out of the result.
        """
        if not date_keys:
            return {}
        try:
            result = self.client.table(self.LOGS_TABLE) \
                .select("id, date, exercise_logs(*)") \
                .eq("user_id", user_id) \
                .in_("date", date_keys) \
                .execute()
        except Exception as e:
            logger.error(f"Error fetching workout logs for {user_id}: {e}")
            raise UpstreamError("Failed to fetch workout logs") from e

        logs: Dict[str, List[ExerciseLogEntry]] = {}
        for row in result.data or []:
            logs[row["date"]] = [entry_from_row(r) for r in row.get("exercise_logs") or []]
        return logs

    def save(
        self,
        user_id: str,
        date_key: str,
        workout_day_id: str,
        entries: Iterable[ExerciseLogEntry],
    ) -> WorkoutLogRecord:
        """
        Upsert a day's log: the parent row first, then each exercise row.

        ``completed_at`` is stamped only when every entry is completed. An
        empty batch counts as completed. When an exercise id appears more
        than once, its last entry is the one saved.

        Raises:
            PersistenceError: if either write fails. A failed parent write
                aborts before any exercise row is written.
        """
        # One exercise_logs row per (workout_log_id, exercise_id)
        entries = list({entry.exercise_id: entry for entry in entries}.values())
        completed_at = (
            datetime.now(timezone.utc).isoformat()
            if all(entry.completed for entry in entries)
            else None
        )

        try:
            result = self.client.table(self.LOGS_TABLE) \
                .upsert({
                    "user_id": user_id,
                    "date": date_key,
                    "workout_day_id": workout_day_id,
                    "completed_at": completed_at,
                }, on_conflict="user_id,date") \
                .execute()
        except Exception as e:
            logger.error(f"Error saving workout log for {user_id} on {date_key}: {e}")
            raise PersistenceError("Failed to save workout log") from e

        if not result.data:
            logger.error(f"Workout log upsert for {user_id} on {date_key} returned no row")
            raise PersistenceError("Failed to save workout log")
        workout_log = result.data[0]

        exercise_rows = [
            {
                "workout_log_id": workout_log["id"],
                "exercise_id": entry.exercise_id,
                "sets_completed": entry.sets_completed or 0,
                "reps_completed": entry.reps_completed or [],
                "weight_used": [parse_weight(w) for w in entry.weights],
                "completed": entry.completed,
            }
            for entry in entries
        ]
        if exercise_rows:
            try:
                self.client.table(self.EXERCISE_LOGS_TABLE) \
                    .upsert(exercise_rows, on_conflict="workout_log_id,exercise_id") \
                    .execute()
            except Exception as e:
                logger.error(f"Error saving exercise logs for {user_id} on {date_key}: {e}")
                raise PersistenceError("Failed to save exercise logs") from e

        logger.info(f"Saved workout log for {user_id} on {date_key} ({len(exercise_rows)} exercises)")
        return WorkoutLogRecord(**workout_log)
