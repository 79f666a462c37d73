"""Main FastAPI application."""
import logging
from typing import Optional

import stripe
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from supabase import Client

from workout_tracker_api.api.routes import router
from workout_tracker_api.config import Settings, settings as default_settings
from workout_tracker_api.exceptions import WorkoutTrackerError
from workout_tracker_api.services import create_stripe_client, create_supabase_client

logger = logging.getLogger(__name__)


async def handle_service_error(request: Request, exc: WorkoutTrackerError) -> JSONResponse:
    """Turn service errors into ``{"error": message}`` responses."""
    logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


def create_app(
    settings: Optional[Settings] = None,
    supabase_client: Optional[Client] = None,
    stripe_client: Optional[stripe.StripeClient] = None,
) -> FastAPI:
    """
    Build the application and the clients it shares across requests.

    Clients not passed in are created from settings; a missing configuration
    leaves the matching endpoints answering with an error.
    """
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Workout Tracker API")
    app.state.settings = settings
    app.state.supabase = supabase_client if supabase_client is not None else create_supabase_client(settings)
    app.state.stripe = stripe_client if stripe_client is not None else create_stripe_client(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(WorkoutTrackerError, handle_service_error)
    app.include_router(router)
    return app


app = create_app()
