"""Services backing the workout tracker API."""
from .log_cache import WorkoutLogCache
from .payment_service import PaymentService, create_stripe_client
from .profile_service import ProfileService
from .progress_service import ProgressService
from .supabase_client import create_supabase_client
from .workout_log_service import WorkoutLogService

__all__ = [
    "PaymentService",
    "ProfileService",
    "ProgressService",
    "WorkoutLogCache",
    "WorkoutLogService",
    "create_stripe_client",
    "create_supabase_client",
]
