"""
API key authentication for the analytics HTTP adapter.
"""

from typing import Optional, Set
from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader
import os

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)

# Keys registered at runtime in addition to STOCKWISE_API_KEY
_api_keys: Set[str] = set()


def get_api_key_from_env() -> Optional[str]:
    """Get API key from environment variable."""
    return os.getenv("STOCKWISE_API_KEY")


def add_api_key(key: str):
    """Add an API key."""
    _api_keys.add(key)


def revoke_api_key(key: str):
    """Remove a previously added API key."""
    _api_keys.discard(key)


def is_valid_api_key(key: Optional[str]) -> bool:
    """Check if API key is valid."""
    if not key:
        return False

    env_key = get_api_key_from_env()
    if env_key and key == env_key:
        return True

    return key in _api_keys


async def verify_api_key(api_key: str = Security(API_KEY_HEADER)) -> str:
    """
    Verify API key from header.

    Raises:
        HTTPException: If API key is invalid
    """
    if not is_valid_api_key(api_key):
        raise HTTPException(
            status_code=401,
            detail="Invalid or missing API key"
        )
    return api_key
