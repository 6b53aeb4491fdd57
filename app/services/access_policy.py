"""Session admission rules for paid interviews.

``evaluate_access`` is a pure function of an interview snapshot and the
current time. It never touches the store; ``interview_access`` applies its
verdict and records the admission.

The budget is piecewise by the ordinal of the session being requested:

* the first ``full_access_sessions`` sessions may use whatever is left of
  ``max_allowed_minutes``;
* later sessions are only admitted while no more than
  ``extra_session_budget_minutes`` have been used in total, and each one is
  advised to stay under ``extra_session_cap_minutes``.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Union

from app.core.config import settings
from app.utils.enums import AccessReason, PaymentStatus


@dataclass(frozen=True)
class AccessPolicy:
    default_max_allowed_minutes: int = 45
    stale_session_minutes: int = 10
    full_access_sessions: int = 2
    extra_session_budget_minutes: int = 15
    extra_session_cap_minutes: int = 5

    @classmethod
    def from_settings(cls) -> "AccessPolicy":
        return cls(
            default_max_allowed_minutes=settings.DEFAULT_MAX_ALLOWED_MINUTES,
            stale_session_minutes=settings.STALE_SESSION_MINUTES,
            full_access_sessions=settings.FULL_ACCESS_SESSIONS,
            extra_session_budget_minutes=settings.EXTRA_SESSION_BUDGET_MINUTES,
            extra_session_cap_minutes=settings.EXTRA_SESSION_CAP_MINUTES,
        )


@dataclass(frozen=True)
class SessionSnapshot:
    is_conducted: bool
    payment_status: str
    total_time_spent_minutes: float = 0
    session_count: int = 0
    last_session_start: Optional[datetime] = None
    last_session_end: Optional[datetime] = None
    max_allowed_minutes: Optional[int] = None

    @classmethod
    def from_record(cls, interview) -> "SessionSnapshot":
        return cls(
            is_conducted=bool(interview.is_conducted),
            payment_status=interview.payment_status,
            total_time_spent_minutes=interview.total_time_spent_minutes or 0,
            session_count=interview.session_count or 0,
            last_session_start=interview.last_session_start,
            last_session_end=interview.last_session_end,
            max_allowed_minutes=interview.max_allowed_minutes,
        )


@dataclass(frozen=True)
class AccessRejection:
    reason: AccessReason
    error: str
    details: dict = field(default_factory=dict)

    def to_payload(self) -> dict:
        return {
            "error": self.error,
            "canAccess": False,
            "reason": self.reason.value,
            **self.details,
        }


@dataclass(frozen=True)
class AccessGrant:
    session_number: int
    total_time_spent_minutes: float
    remaining_time_minutes: float
    max_allowed_minutes: int
    max_session_time: float
    recommendation: dict
    warning_message: str


def _num(value: Union[int, float]) -> Union[int, float]:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _plural(count: Any, word: str) -> str:
    return word if count == 1 else f"{word}s"


def evaluate_access(
    snapshot: SessionSnapshot,
    now: datetime,
    policy: Optional[AccessPolicy] = None,
) -> Union[AccessGrant, AccessRejection]:
    policy = policy or AccessPolicy()

    if snapshot.is_conducted:
        return AccessRejection(AccessReason.COMPLETED, "Interview already completed")

    if snapshot.payment_status != PaymentStatus.COMPLETED.value:
        return AccessRejection(AccessReason.PAYMENT_REQUIRED, "Payment required")

    max_allowed = snapshot.max_allowed_minutes or policy.default_max_allowed_minutes
    total = _num(snapshot.total_time_spent_minutes or 0)
    session_number = (snapshot.session_count or 0) + 1

    # An opened session that was never closed may only be resumed shortly after
    if snapshot.last_session_start and not snapshot.last_session_end:
        since_start = (now - snapshot.last_session_start).total_seconds() / 60
        if since_start > policy.stale_session_minutes:
            return AccessRejection(
                AccessReason.SESSION_EXPIRED,
                "Interview session expired. You can only restart within "
                f"{policy.stale_session_minutes} minutes of starting.",
                {
                    "timeSinceStart": round(since_start),
                    "maxRestartTime": policy.stale_session_minutes,
                },
            )

    if session_number <= policy.full_access_sessions:
        return _full_access_grant(session_number, total, max_allowed, policy)
    return _extra_session_grant(session_number, total, policy)


def _full_access_grant(session_number, total, max_allowed, policy):
    if total >= max_allowed:
        return AccessRejection(
            AccessReason.TIME_LIMIT_REACHED,
            f"Maximum interview time ({max_allowed} minutes) reached. "
            "You cannot start another session.",
            {
                "totalTimeSpent": total,
                "maxAllowedMinutes": max_allowed,
                "sessionNumber": session_number,
            },
        )

    remaining = _num(max_allowed - total)

    if remaining <= 5:
        recommendation = {
            "maxRecommendedDuration": remaining,
            "message": f"Session {session_number}: Only {remaining} "
                       f"{_plural(remaining, 'minute')} remaining. Use time wisely.",
        }
        warning = "This will be your final session if you use all remaining time."
    else:
        sessions_left = policy.full_access_sessions - session_number
        recommendation = {
            "maxRecommendedDuration": min(remaining, 20),
            "message": f"Session {session_number}: {remaining} minutes remaining. "
                       f"You can use up to {remaining} minutes in this session.",
        }
        warning = (
            f"You have {sessions_left} more {_plural(sessions_left, 'session')} "
            "with full time access."
        )

    return AccessGrant(
        session_number=session_number,
        total_time_spent_minutes=total,
        remaining_time_minutes=remaining,
        max_allowed_minutes=max_allowed,
        max_session_time=remaining,
        recommendation=recommendation,
        warning_message=warning,
    )


def _extra_session_grant(session_number, total, policy):
    budget = policy.extra_session_budget_minutes

    if total > budget:
        return AccessRejection(
            AccessReason.SESSION_LIMIT_EXCEEDED,
            f"Session {session_number} not allowed. You can only start additional "
            f"sessions if total time spent is {budget} minutes or less. "
            f"Current time spent: {total} minutes.",
            {
                "totalTimeSpent": total,
                "maxAllowedMinutes": budget,
                "sessionNumber": session_number,
                "allowedSessions": policy.full_access_sessions,
            },
        )

    remaining = _num(budget - total)
    if remaining <= 0:
        return AccessRejection(
            AccessReason.NO_TIME_REMAINING,
            f"No time remaining for session {session_number}. You can only start "
            f"additional sessions if total time spent is {budget} minutes or less.",
            {
                "totalTimeSpent": total,
                "maxAllowedMinutes": budget,
                "sessionNumber": session_number,
            },
        )

    max_session_time = min(remaining, policy.extra_session_cap_minutes)

    return AccessGrant(
        session_number=session_number,
        total_time_spent_minutes=total,
        remaining_time_minutes=remaining,
        max_allowed_minutes=budget,
        max_session_time=max_session_time,
        recommendation={
            "maxRecommendedDuration": max_session_time,
            "message": f"Session {session_number}: {remaining} minutes remaining. "
                       f"Maximum {max_session_time} minutes per session.",
        },
        warning_message=(
            f"Additional sessions are limited to {budget} minutes total time spent."
        ),
    )
