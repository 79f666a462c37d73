"""FastAPI dependencies handing the app's clients to services."""
import stripe
from fastapi import Depends, Request
from supabase import Client

from workout_tracker_api.config import Settings
from workout_tracker_api.exceptions import UpstreamError
from workout_tracker_api.services import (
    PaymentService,
    ProfileService,
    ProgressService,
    WorkoutLogCache,
    WorkoutLogService,
)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_supabase(request: Request) -> Client:
    client = request.app.state.supabase
    if client is None:
        raise UpstreamError("Database not configured")
    return client


def get_stripe(request: Request) -> stripe.StripeClient:
    client = request.app.state.stripe
    if client is None:
        raise UpstreamError("Payments not configured")
    return client


def get_log_service(client: Client = Depends(get_supabase)) -> WorkoutLogService:
    return WorkoutLogService(client)


def get_progress_service(log_service: WorkoutLogService = Depends(get_log_service)) -> ProgressService:
    # Cache lives for one request only
    return ProgressService(log_service, WorkoutLogCache())


def get_profile_service(client: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(client)


def get_payment_service(
    client: Client = Depends(get_supabase),
    stripe_client: stripe.StripeClient = Depends(get_stripe),
    settings: Settings = Depends(get_settings),
) -> PaymentService:
    return PaymentService(client, stripe_client, settings)
