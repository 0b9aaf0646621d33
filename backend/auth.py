"""
API key authentication.
Provides FastAPI dependencies for securing endpoints.

The X-API-Key header carries either a bare key or ``key:user_id``; the user
id scopes every session query.
"""
from fastapi import HTTPException, Header
from typing import Optional
import logging

from backend.settings import get_settings

logger = logging.getLogger(__name__)


async def get_current_user(
    x_api_key: Optional[str] = Header(None, alias="X-API-Key")
) -> str:
    """
    Authenticate via API key.
    Returns user_id string.

    Usage:
        @app.get("/protected")
        async def protected_route(user_id: str = Depends(get_current_user)):
            return {"user_id": user_id}
    """
    if not x_api_key:
        raise HTTPException(
            status_code=401,
            detail="Missing authentication. Provide X-API-Key."
        )
    return validate_api_key(x_api_key)


def validate_api_key(api_key: str) -> str:
    """
    Validate API key and return user_id.

    API key format options:
    - Simple: "sk_test_abc123" -> returns "admin"
    - With user: "sk_test_abc123:user_12345" -> returns "user_12345"
    """
    valid_keys = get_settings().api_keys_list

    if not valid_keys:
        logger.warning("No API keys configured (API_KEYS env var empty)")
        raise HTTPException(status_code=401, detail="API key authentication not configured")

    key_part = api_key.split(":")[0]

    if key_part not in valid_keys:
        raise HTTPException(status_code=401, detail="Invalid API key")

    # Extract user_id if provided (format: "key:user_id")
    if ":" in api_key:
        user_id = api_key.split(":", 1)[1]
        if not user_id:
            raise HTTPException(status_code=401, detail="Invalid API key")
        return user_id

    return "admin"
