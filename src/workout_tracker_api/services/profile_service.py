"""User profiles and body-progress entries."""

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from supabase import Client

from workout_tracker_api.exceptions import PersistenceError, UpstreamError, ValidationError
from workout_tracker_api.models import ProfileUpdate, ProgressEntryUpdate

logger = logging.getLogger(__name__)


class ProfileService:
    """Partial updates of ``user_profiles`` and ``progress_tracking`` rows."""

    PROFILES_TABLE = "user_profiles"
    PROGRESS_TABLE = "progress_tracking"

    def __init__(self, client: Client):
        self.client = client

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.client.table(self.PROFILES_TABLE) \
                .select("*") \
                .eq("id", user_id) \
                .execute()
        except Exception as e:
            logger.error(f"Error fetching user profile {user_id}: {e}")
            raise UpstreamError("Failed to fetch profile") from e
        return result.data[0] if result.data else None

    def update_profile(self, user_id: str, update: ProfileUpdate) -> Dict[str, Any]:
        """Upsert only the fields set on ``update``."""
        fields = update.model_dump(exclude_unset=True)
        if not fields:
            raise ValidationError("No profile fields to update")

        try:
            result = self.client.table(self.PROFILES_TABLE) \
                .upsert({
                    "id": user_id,
                    **fields,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                }) \
                .execute()
        except Exception as e:
            logger.error(f"Error updating user profile {user_id}: {e}")
            raise PersistenceError("Failed to update profile") from e

        logger.info(f"Updated profile {user_id}: {sorted(fields)}")
        return result.data[0] if result.data else {"id": user_id, **fields}

    def save_progress_entry(
        self,
        user_id: str,
        entry: ProgressEntryUpdate,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        """Upsert today's progress entry (one per user per day)."""
        fields = entry.model_dump(exclude_unset=True)
        if not fields:
            raise ValidationError("No progress fields to save")
        entry_date = (today or date.today()).isoformat()

        try:
            result = self.client.table(self.PROGRESS_TABLE) \
                .upsert({
                    "user_id": user_id,
                    **fields,
                    "date": entry_date,
                }, on_conflict="user_id,date") \
                .execute()
        except Exception as e:
            logger.error(f"Error saving progress for {user_id} on {entry_date}: {e}")
            raise PersistenceError("Failed to save progress") from e

        return result.data[0] if result.data else {"user_id": user_id, "date": entry_date, **fields}
