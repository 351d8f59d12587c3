"""
Login lockout policy.

Tracks consecutive failed logins for an admin and decides when the account
is locked. The policy is pure: it takes the stored counters and returns new
ones, and the caller persists them.

The read-increment-write of the counter is not atomic. Concurrent failed
logins against the same account can overwrite each other's increment, so
the lock may trigger later than ``max_attempts``.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional


@dataclass(frozen=True)
class LockState:
    """Failed-attempt counter and lock expiry for one admin."""
    attempts: int = 0
    lock_until: Optional[datetime] = None


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes coming back from storage as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class LockoutPolicy:
    """
    unlocked (attempts < max) -> locked (lock_until in future)
    -> unlocked again once lock_until has passed, with attempts reset.
    """

    def __init__(self, max_attempts: int = 5, lock_duration: timedelta = timedelta(minutes=15)):
        """
        Args:
            max_attempts: Consecutive failures that trigger a lock
            lock_duration: How long a lock lasts
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.max_attempts = max_attempts
        self.lock_duration = lock_duration

    @classmethod
    def from_record(cls, admin: dict) -> LockState:
        """Read the lock counters off an admin record."""
        return LockState(
            attempts=admin.get("loginAttempts") or 0,
            lock_until=as_utc(admin.get("lockUntil")),
        )

    def is_locked(self, state: LockState, now: datetime) -> bool:
        return state.lock_until is not None and state.lock_until > now

    def retry_after(self, state: LockState, now: datetime) -> int:
        """Whole seconds until the lock lifts (0 if not locked)."""
        if not self.is_locked(state, now):
            return 0
        return max(1, math.ceil((state.lock_until - now).total_seconds()))

    def register_failure(self, state: LockState, now: datetime) -> LockState:
        """Count one failed password check; lock once the threshold is reached."""
        attempts = state.attempts
        if state.lock_until is not None and state.lock_until <= now:
            # Previous lock has run out: start a fresh window
            attempts = 0

        attempts += 1

        if attempts >= self.max_attempts:
            return LockState(attempts=attempts, lock_until=now + self.lock_duration)

        return LockState(attempts=attempts, lock_until=None)

    def register_success(self) -> LockState:
        return LockState(attempts=0, lock_until=None)
