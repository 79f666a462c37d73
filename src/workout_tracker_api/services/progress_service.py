"""Weekly progress: completed exercises per day of the current week."""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from workout_tracker_api.models import DayLog, DayStats, ExerciseLogEntry, WeeklyProgress, WorkoutLogRecord
from workout_tracker_api.services.log_cache import WorkoutLogCache
from workout_tracker_api.services.workout_log_service import WorkoutLogService, to_day_log
from workout_tracker_api.utils import current_week, format_key, is_rest_day

logger = logging.getLogger(__name__)

# 3 completed exercises a day, 7 days a week
WEEKLY_TARGET = 21


def total_completed(stats: List[DayStats]) -> int:
    return sum(day.completed_count for day in stats)


def target_ratio(total: int) -> float:
    """Share of the weekly target reached, capped at 1."""
    return min(max(total, 0) / WEEKLY_TARGET, 1.0)


def navigation_target(day_name: str) -> Optional[str]:
    """Route of a day's detail view; rest days have none."""
    if is_rest_day(day_name):
        return None
    return f"/workout/{day_name.lower()}"


class ProgressService:
    """Combines the current week with the user's stored day logs."""

    def __init__(self, log_service: WorkoutLogService, cache: Optional[WorkoutLogCache] = None):
        self.log_service = log_service
        self.cache = cache

    def _load_logs(self, user_id: str, days: List[date]) -> Dict[date, DayLog]:
        def loader(missing: List[date]) -> Dict[date, DayLog]:
            by_key = self.log_service.get_many(user_id, [format_key(d) for d in missing])
            return {d: to_day_log(by_key.get(format_key(d), [])) for d in missing}

        if self.cache is None:
            return loader(days)
        return self.cache.read_through(days, loader)

    def save_day(
        self,
        user_id: str,
        day: date,
        workout_day_id: str,
        entries: Iterable[ExerciseLogEntry],
    ) -> WorkoutLogRecord:
        """Save a day's log and write it through to the cache."""
        entries = list(entries)
        record = self.log_service.save(user_id, format_key(day), workout_day_id, entries)
        if self.cache is not None:
            self.cache.set(day, to_day_log(entries))
        return record

    def weekly_stats(self, user_id: str, today: Optional[date] = None) -> List[DayStats]:
        """
        Count completed exercises for each of the 7 days of the current week.

        Rest days are always present in the result and counted like any other
        day when something was logged on them.
        """
        week = current_week(today)
        logs = self._load_logs(user_id, [wd.date for wd in week])

        stats = []
        for wd in week:
            log = logs.get(wd.date, {})
            stats.append(
                DayStats(
                    day=wd.day_name,
                    date=format_key(wd.date),
                    completed_count=sum(1 for item in log.values() if item.completed),
                    original_date=wd.date,
                    is_rest_day=is_rest_day(wd.day_name),
                    route=navigation_target(wd.day_name),
                )
            )
        return stats

    def weekly_progress(self, user_id: str, today: Optional[date] = None) -> WeeklyProgress:
        stats = self.weekly_stats(user_id, today)
        total = total_completed(stats)
        logger.info(f"Weekly progress for {user_id}: {total}/{WEEKLY_TARGET}")
        return WeeklyProgress(
            days=stats,
            total_completed=total,
            weekly_target=WEEKLY_TARGET,
            target_ratio=target_ratio(total),
        )
