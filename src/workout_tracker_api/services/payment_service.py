"""
Premium content payments through Stripe Checkout.

Each (post, user) pair moves through ``pending -> succeeded | expired``. The
pending row is written before the user is sent to Stripe; it is resolved
either by the client calling verify after the redirect or by the Stripe
webhook. Both paths only update rows whose status is still ``pending``, so
whichever arrives second changes nothing.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import stripe
from supabase import Client

from workout_tracker_api.config import Settings
from workout_tracker_api.exceptions import PersistenceError, UpstreamError, ValidationError
from workout_tracker_api.models import PaymentStatus

logger = logging.getLogger(__name__)

PRODUCT_NAME = "Premium Content Access"
PRODUCT_DESCRIPTION = "One-time access to premium content"
CURRENCY = "usd"


def create_stripe_client(settings: Settings) -> Optional[stripe.StripeClient]:
    """Create a Stripe client from settings, or None when not configured."""
    if not settings.STRIPE_SECRET_KEY:
        logger.warning("STRIPE_SECRET_KEY not configured. Payments are disabled.")
        return None
    return stripe.StripeClient(settings.STRIPE_SECRET_KEY)


def to_minor_units(amount: float) -> int:
    """Dollars to cents, rounding halves up."""
    return math.floor(amount * 100 + 0.5)


def _as_dict(obj: Any) -> Dict[str, Any]:
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return obj
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return dict(obj)


def _payment_intent_id(session: Dict[str, Any]) -> Optional[str]:
    intent = session.get("payment_intent")
    if isinstance(intent, dict):
        return intent.get("id")
    return intent


class PaymentService:
    """Checkout session creation, verification and webhook reconciliation."""

    TABLE_NAME = "premium_payments"

    def __init__(self, client: Client, stripe_client: stripe.StripeClient, settings: Settings):
        self.client = client
        self.stripe_client = stripe_client
        self.settings = settings

    # ------------------------------------------------------------------
    # Pending records
    # ------------------------------------------------------------------

    def record_pending(self, post_id: str, user_id: str, amount: float) -> Dict[str, Any]:
        """Insert the pending payment row written before checkout starts."""
        if not post_id or not user_id:
            raise ValidationError("Missing required parameters")

        try:
            result = self.client.table(self.TABLE_NAME) \
                .insert({
                    "user_id": user_id,
                    "post_id": post_id,
                    "amount": amount or 0,
                    "payment_id": "pending",
                    "status": "pending",
                }) \
                .execute()
        except Exception as e:
            logger.error(f"Error creating payment record for {post_id}/{user_id}: {e}")
            raise PersistenceError("Failed to create payment record") from e

        return result.data[0] if result.data else {}

    def cancel_pending(self, post_id: str, user_id: str) -> bool:
        """Drop a pending row when checkout could not be started."""
        try:
            result = self.client.table(self.TABLE_NAME) \
                .delete() \
                .match({"post_id": post_id, "user_id": user_id, "status": "pending"}) \
                .execute()
        except Exception as e:
            logger.error(f"Error removing pending payment for {post_id}/{user_id}: {e}")
            raise PersistenceError("Failed to remove pending payment") from e
        return bool(result.data)

    def purchased_posts(self, user_id: str) -> List[str]:
        """Ids of the posts the user has paid for."""
        try:
            result = self.client.table(self.TABLE_NAME) \
                .select("post_id") \
                .eq("user_id", user_id) \
                .eq("status", "succeeded") \
                .execute()
        except Exception as e:
            logger.error(f"Error fetching payments for {user_id}: {e}")
            raise UpstreamError("Failed to fetch payments") from e
        return [row["post_id"] for row in result.data or []]

    def _resolve_pending(
        self,
        post_id: str,
        user_id: str,
        status: PaymentStatus,
        payment_id: Optional[str] = None,
    ) -> bool:
        """
        Move the pending row for (post, user) to ``status``.

        Returns False when no pending row matched, i.e. the payment was
        already resolved by the other path.
        """
        update: Dict[str, Any] = {
            "status": status,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        if payment_id:
            update["payment_id"] = payment_id

        try:
            result = self.client.table(self.TABLE_NAME) \
                .update(update) \
                .match({"post_id": post_id, "user_id": user_id, "status": "pending"}) \
                .execute()
        except Exception as e:
            raise PersistenceError("Failed to update payment status") from e

        if not result.data:
            logger.info(f"No pending payment for {post_id}/{user_id}; already resolved")
            return False
        logger.info(f"Payment for {post_id}/{user_id} marked {status}")
        return True

    # ------------------------------------------------------------------
    # Checkout round trip
    # ------------------------------------------------------------------

    def create_session(
        self,
        amount: Optional[float],
        post_id: Optional[str],
        user_id: Optional[str],
        user_email: Optional[str] = None,
    ) -> str:
        """
        Open a hosted Checkout session for one premium post.

        Returns:
            The Stripe session id the client redirects with.

        Raises:
            ValidationError: amount, post_id or user_id missing.
            UpstreamError: Stripe rejected the request.
        """
        if not amount or not post_id or not user_id:
            raise ValidationError("Missing required parameters")

        app_url = self.settings.APP_URL
        params: Dict[str, Any] = {
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": CURRENCY,
                        "product_data": {
                            "name": PRODUCT_NAME,
                            "description": PRODUCT_DESCRIPTION,
                        },
                        "unit_amount": to_minor_units(amount),
                    },
                    "quantity": 1,
                }
            ],
            "mode": "payment",
            "success_url": (
                f"{app_url}/social/share-progress?success=true&postId={post_id}"
                "&session_id={CHECKOUT_SESSION_ID}"
            ),
            "cancel_url": f"{app_url}/social/share-progress?canceled=true&postId={post_id}",
            "metadata": {
                "post_id": post_id,
                "user_id": user_id,
            },
        }
        if user_email:
            params["customer_email"] = user_email

        try:
            session = self.stripe_client.checkout.sessions.create(params=params)
        except stripe.StripeError as e:
            logger.error(f"Error creating checkout session for {post_id}/{user_id}: {e}")
            raise UpstreamError("Failed to create checkout session") from e

        logger.info(f"Created checkout session {session.id} for {post_id}/{user_id}")
        return session.id

    def verify(self, session_id: Optional[str], post_id: Optional[str], user_id: Optional[str]) -> str:
        """
        Check a Checkout session and record the payment if it was paid.

        Calling this again after success is a no-op that still reports
        ``succeeded``.

        Returns:
            "succeeded" when paid, otherwise Stripe's ``payment_status``.

        Raises:
            ValidationError: a required field is missing.
            UpstreamError: the session could not be retrieved.
            PersistenceError: the payment is confirmed but could not be recorded.
        """
        if not session_id or not post_id or not user_id:
            raise ValidationError("Missing required parameters")

        try:
            session = _as_dict(self.stripe_client.checkout.sessions.retrieve(session_id))
        except stripe.StripeError as e:
            logger.error(f"Error retrieving checkout session {session_id}: {e}")
            raise UpstreamError("Failed to verify payment") from e

        payment_status = session.get("payment_status")
        if payment_status != "paid":
            return payment_status

        try:
            self._resolve_pending(post_id, user_id, "succeeded", _payment_intent_id(session))
        except PersistenceError as e:
            # Paid at Stripe but not recorded here
            logger.critical(
                f"Confirmed payment {session_id} for {post_id}/{user_id} not recorded: {e.__cause__}"
            )
            raise
        return "succeeded"

    # ------------------------------------------------------------------
    # Webhook
    # ------------------------------------------------------------------

    def construct_event(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """Verify a webhook payload's signature and return the event."""
        if not signature:
            raise ValidationError("No signature provided")
        if not self.settings.STRIPE_WEBHOOK_SECRET:
            logger.error("STRIPE_WEBHOOK_SECRET not configured")
            raise UpstreamError("Webhook verification not configured")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self.settings.STRIPE_WEBHOOK_SECRET)
        except ValueError as e:
            logger.error(f"Invalid Stripe webhook payload: {e}")
            raise ValidationError(f"Webhook Error: {e}") from e
        except stripe.SignatureVerificationError as e:
            logger.error(f"Webhook signature verification failed: {e}")
            raise ValidationError(f"Webhook Error: {e}") from e
        return _as_dict(event)

    def handle_webhook_event(self, event: Dict[str, Any]) -> None:
        """Apply ``checkout.session.completed`` / ``checkout.session.expired`` events."""
        event_type = event.get("type")
        session = _as_dict(_as_dict(event.get("data")).get("object"))
        metadata = _as_dict(session.get("metadata"))
        post_id = metadata.get("post_id")
        user_id = metadata.get("user_id")

        logger.info(f"Stripe webhook received: {event_type}")

        if event_type == "checkout.session.completed":
            if not post_id or not user_id:
                logger.error(f"Missing metadata in session: {session.get('id')}")
                raise ValidationError("Missing metadata")
            try:
                self._resolve_pending(post_id, user_id, "succeeded", _payment_intent_id(session))
            except PersistenceError as e:
                logger.critical(
                    f"Confirmed payment {session.get('id')} for {post_id}/{user_id} not recorded: {e.__cause__}"
                )
                raise

        elif event_type == "checkout.session.expired":
            if post_id and user_id:
                try:
                    self._resolve_pending(post_id, user_id, "expired")
                except PersistenceError as e:
                    logger.error(f"Error updating expired payment for {post_id}/{user_id}: {e.__cause__}")
