"""API routes for the weekly workout tracker."""

from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from workout_tracker_api.auth import get_current_user
from workout_tracker_api.catalog import DAILY, WORKOUTS, get_workout_for_day, get_workout_for_slug
from workout_tracker_api.models import (
    ExerciseLogEntry,
    ProfileUpdate,
    ProgressEntryUpdate,
    WeeklyProgress,
    WorkoutLogRecord,
)
from workout_tracker_api.services import (
    PaymentService,
    ProfileService,
    ProgressService,
    WorkoutLogService,
)
from workout_tracker_api.services.workout_log_service import to_day_log
from workout_tracker_api.api.dependencies import (
    get_log_service,
    get_payment_service,
    get_profile_service,
    get_progress_service,
)
from workout_tracker_api.utils import current_week, current_weekday, day_name, format_key

router = APIRouter()

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SaveLogRequest(BaseModel):
    """A full day's log; every exercise of the day is sent on each save."""
    workout_day_id: Optional[str] = None
    entries: List[ExerciseLogEntry] = Field(default_factory=list)


class CheckoutSessionRequest(BaseModel):
    amount: Optional[float] = None
    post_id: Optional[str] = Field(default=None, alias="postId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    user_email: Optional[str] = Field(default=None, alias="userEmail")

    class Config:
        populate_by_name = True


class VerifyPaymentRequest(BaseModel):
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    post_id: Optional[str] = Field(default=None, alias="postId")
    user_id: Optional[str] = Field(default=None, alias="userId")

    class Config:
        populate_by_name = True


class PendingPaymentRequest(BaseModel):
    post_id: str = Field(alias="postId")
    amount: float = Field(default=0, ge=0)

    class Config:
        populate_by_name = True


# ---------------------------------------------------------------------------
# Catalog and calendar
# ---------------------------------------------------------------------------


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/workouts")
async def list_workouts():
    """The whole weekly plan, keyed by weekday name."""
    return {day: workout.model_dump() for day, workout in WORKOUTS.items()}


@router.get("/workouts/today")
async def todays_workout(today: Optional[date] = Query(None)):
    """Today's workout (None on rest days) plus the Daily routine."""
    weekday = current_weekday(today)
    workout = get_workout_for_day(weekday)
    return {
        "day": weekday,
        "workout": workout.model_dump() if workout else None,
        "daily": get_workout_for_day(DAILY).model_dump(),
    }


@router.get("/workouts/{day}")
async def workout_for_day(day: str):
    workout = get_workout_for_slug(day)
    if workout is None:
        raise HTTPException(status_code=404, detail="No workout found for this day")
    return workout.model_dump()


@router.get("/week")
async def week(today: Optional[date] = Query(None)):
    """The Monday-first week containing today."""
    return [
        {**wd.model_dump(), "date_key": format_key(wd.date)}
        for wd in current_week(today)
    ]


# ---------------------------------------------------------------------------
# Workout logs and progress
# ---------------------------------------------------------------------------


@router.get("/logs/{log_date}")
def get_log(
    log_date: date,
    user_id: str = Depends(get_current_user),
    log_service: WorkoutLogService = Depends(get_log_service),
):
    """A day's log as ``{exerciseId: {completed, weights}}``; empty when nothing was logged."""
    date_key = format_key(log_date)
    entries = log_service.get(user_id, date_key) or []
    return {
        "date": date_key,
        "log": {k: v.model_dump() for k, v in to_day_log(entries).items()},
    }


@router.put("/logs/{log_date}", response_model=WorkoutLogRecord)
def save_log(
    log_date: date,
    payload: SaveLogRequest,
    user_id: str = Depends(get_current_user),
    progress_service: ProgressService = Depends(get_progress_service),
):
    return progress_service.save_day(
        user_id,
        log_date,
        payload.workout_day_id or day_name(log_date),
        payload.entries,
    )


@router.get("/progress/weekly", response_model=WeeklyProgress)
def weekly_progress(
    today: Optional[date] = Query(None),
    user_id: str = Depends(get_current_user),
    progress_service: ProgressService = Depends(get_progress_service),
):
    return progress_service.weekly_progress(user_id, today)


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@router.get("/profile")
def get_profile(
    user_id: str = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    profile = profile_service.get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.patch("/profile")
def update_profile(
    payload: ProfileUpdate,
    user_id: str = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    return profile_service.update_profile(user_id, payload)


@router.post("/progress-entries")
def save_progress_entry(
    payload: ProgressEntryUpdate,
    user_id: str = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    return profile_service.save_progress_entry(user_id, payload)


# ---------------------------------------------------------------------------
# Premium payments
# ---------------------------------------------------------------------------


@router.post("/create-checkout-session")
def create_checkout_session(
    payload: CheckoutSessionRequest,
    payment_service: PaymentService = Depends(get_payment_service),
) -> Dict[str, str]:
    session_id = payment_service.create_session(
        payload.amount,
        payload.post_id,
        payload.user_id,
        payload.user_email,
    )
    return {"sessionId": session_id}


@router.post("/verify-payment")
def verify_payment(
    payload: VerifyPaymentRequest,
    payment_service: PaymentService = Depends(get_payment_service),
):
    status = payment_service.verify(payload.session_id, payload.post_id, payload.user_id)
    return {"status": status}


@router.post("/payments/pending", status_code=201)
def record_pending_payment(
    payload: PendingPaymentRequest,
    user_id: str = Depends(get_current_user),
    payment_service: PaymentService = Depends(get_payment_service),
):
    return payment_service.record_pending(payload.post_id, user_id, payload.amount)


@router.delete("/payments/pending/{post_id}")
def cancel_pending_payment(
    post_id: str,
    user_id: str = Depends(get_current_user),
    payment_service: PaymentService = Depends(get_payment_service),
):
    return {"deleted": payment_service.cancel_pending(post_id, user_id)}


@router.get("/payments/purchased")
def purchased_posts(
    user_id: str = Depends(get_current_user),
    payment_service: PaymentService = Depends(get_payment_service),
):
    return {"post_ids": payment_service.purchased_posts(user_id)}


@router.post("/webhooks/stripe")
async def stripe_webhook(
    request: Request,
    payment_service: PaymentService = Depends(get_payment_service),
):
    """Stripe webhook for ``checkout.session.completed`` and ``checkout.session.expired``."""
    payload = await request.body()
    event = payment_service.construct_event(payload, request.headers.get("stripe-signature"))
    await run_in_threadpool(payment_service.handle_webhook_event, event)
    return {"received": True}
