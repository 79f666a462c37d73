"""Supabase client construction.

The client is built once by the application entry point and handed to each
service; nothing in the package keeps its own module-level client.
"""

import logging
from typing import Optional

from supabase import Client, create_client

from workout_tracker_api.config import Settings

logger = logging.getLogger(__name__)


def create_supabase_client(settings: Settings) -> Optional[Client]:
    """Create a Supabase client from settings, or None when not configured."""
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        logger.warning("Supabase credentials not configured. Workout logs and payments are disabled.")
        return None

    try:
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None
