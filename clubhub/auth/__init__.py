"""Authentication utilities for the notification API."""

from clubhub.auth.session import (
    Principal,
    create_session_token,
    decode_session_token,
    get_principal,
    require_sender,
)

__all__ = [
    "Principal",
    "create_session_token",
    "decode_session_token",
    "get_principal",
    "require_sender",
]
