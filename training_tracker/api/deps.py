"""Shared FastAPI dependencies."""

from fastapi import Header

from training_tracker.core.config import get_settings


async def get_owner_id(x_user_id: int | None = Header(None, ge=1)) -> int:
    """Owner of the request. The auth proxy in front of the API sets X-User-Id."""
    if x_user_id is None:
        return get_settings().default_user_id
    return x_user_id
