"""
Authentication module for Supabase JWT and API key validation.
Provides FastAPI dependencies for securing endpoints.

Sign-up and sign-in happen against Supabase Auth directly; this API only
checks the access tokens it issues. API keys are for server-side callers
with no Supabase session, such as admin scripts and the Supabase edge
functions, which act for a user with a "key:user_id" key.
"""
import os
import jwt
from fastapi import HTTPException, Header
from typing import Optional
import logging

logger = logging.getLogger(__name__)

SUPABASE_JWT_AUDIENCE = "authenticated"


async def get_current_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key")
) -> str:
    """
    Authenticate via API key OR Supabase JWT.
    Returns user_id string.

    Usage:
        @router.get("/protected")
        async def protected_route(user_id: str = Depends(get_current_user)):
            return {"user_id": user_id}
    """
    # Option 1: API Key authentication
    if x_api_key:
        return validate_api_key(x_api_key)

    # Option 2: Supabase JWT authentication
    if authorization:
        return validate_jwt(authorization)

    raise HTTPException(
        status_code=401,
        detail="Missing authentication. Provide Authorization header or X-API-Key."
    )


def validate_api_key(api_key: str) -> str:
    """
    Validate a server-side API key and return the user it acts for.

    - "sk_test_abc123" -> "admin" (maintenance scripts, no user scope)
    - "sk_test_abc123:<supabase user id>" -> that user, so logs and payments
      land under the same user_id a JWT would give
    """
    valid_keys = [k.strip() for k in os.getenv("API_KEYS", "").split(",") if k.strip()]

    if not valid_keys:
        logger.warning("No API keys configured (API_KEYS env var empty)")
        raise HTTPException(status_code=401, detail="API key authentication not configured")

    key_part = api_key.split(":")[0]

    if key_part not in valid_keys:
        raise HTTPException(status_code=401, detail="Invalid API key")

    # Extract user_id if provided (format: "key:user_id")
    if ":" in api_key:
        return api_key.split(":", 1)[1]

    return "admin"


def validate_jwt(authorization: str) -> str:
    """Validate a Supabase access token and return its user id."""
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    token = authorization.split(" ", 1)[1]
    secret = os.getenv("SUPABASE_JWT_SECRET")

    if not secret:
        raise HTTPException(
            status_code=500,
            detail="JWT validation not configured (missing SUPABASE_JWT_SECRET)"
        )

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            audience=SUPABASE_JWT_AUDIENCE,
        )
        user_id = payload.get("sub")
        if not user_id:
            raise HTTPException(status_code=401, detail="Token missing user ID")
        return user_id
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}")
