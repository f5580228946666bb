"""
security.py - Input hygiene for the account endpoints.
"""

import re
import time

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def sanitize_input(value: str) -> str:
    """Strip angle brackets, javascript: URLs and inline on*= handlers."""
    value = re.sub(r"[<>]", "", value)
    value = re.sub(r"javascript:", "", value, flags=re.IGNORECASE)
    value = re.sub(r"on\w+=", "", value, flags=re.IGNORECASE)
    return value.strip()


def validate_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email or ""))


def validate_password(password: str) -> list[str]:
    """Returns the rule violations; an empty list means the password is acceptable."""
    password = password or ""
    errors = []
    if len(password) < 6:
        errors.append("Password must be at least 6 characters long")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"\d", password):
        errors.append("Password must contain at least one number")
    return errors


class RateLimiter:
    """In-process sliding window of attempt timestamps per key."""

    def __init__(self):
        self._attempts: dict[str, list[float]] = {}

    def is_allowed(self, key: str, max_attempts: int, window_seconds: float) -> bool:
        now = time.monotonic()
        self._evict(now, window_seconds)
        attempts = self._attempts.get(key, [])
        if len(attempts) >= max_attempts:
            return False
        attempts.append(now)
        self._attempts[key] = attempts
        return True

    def _evict(self, now: float, window_seconds: float):
        # keys whose window has emptied are dropped
        for key in list(self._attempts):
            live = [t for t in self._attempts[key] if now - t < window_seconds]
            if live:
                self._attempts[key] = live
            else:
                del self._attempts[key]

    def reset(self, key: str):
        self._attempts.pop(key, None)


rate_limiter = RateLimiter()
