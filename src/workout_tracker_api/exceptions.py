"""Errors raised by the workout tracker services.

Each error carries the HTTP status the API answers with. Lookups that find
nothing are not errors: services return ``None`` or an empty result instead.
"""


class WorkoutTrackerError(Exception):
    """Base class for service errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WorkoutTrackerError):
    """Required request fields are missing or malformed."""

    status_code = 400


class UpstreamError(WorkoutTrackerError):
    """An external service (Supabase, Stripe) call failed."""

    status_code = 502


class PersistenceError(WorkoutTrackerError):
    """A write to the log or payment tables failed."""

    status_code = 500
