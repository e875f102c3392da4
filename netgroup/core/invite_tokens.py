"""Invite Tokens — opaque, cryptographically random, time-limited registration tokens."""

import secrets
from datetime import datetime, timedelta

# 32 bytes -> 43 url-safe chars; fits the 64-char invite_token column
TOKEN_BYTES = 32


def generate_invite_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


def compute_token_expiry(now: datetime, ttl_days: int) -> datetime:
    return now + timedelta(days=ttl_days)
