from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from app.core.security import AuthenticatedCaller
from app.models.interview import Interview
from app.schemas.interview import (
    InterviewConclude,
    InterviewCreate,
    PaymentUpdate,
    SessionEnd,
)
from app.services.exceptions import (
    InterviewForbidden,
    InterviewNotFound,
    InterviewStateError,
)
from app.utils.enums import PaymentStatus

SETTLED_PAYMENT_STATUSES = {"SETTLED", PaymentStatus.COMPLETED.value}


def create_interview(
    db: Session, caller: AuthenticatedCaller, data: InterviewCreate
) -> Interview:
    interview = Interview(
        id=str(uuid4()),
        user_id=caller.id,
        candidate_name=data.candidate_name,
        email=data.email or (caller.email if caller.email != "unknown" else None),
        language=data.language,
        interview_questions=data.interview_questions,
        max_allowed_minutes=data.max_allowed_minutes,
        is_conducted=False,
        payment_status=PaymentStatus.NOT_COMPLETED.value,
        total_time_spent_minutes=0,
        session_count=0,
    )
    db.add(interview)
    db.commit()
    db.refresh(interview)
    return interview


def get_owned_interview(
    db: Session, interview_id: str, caller: AuthenticatedCaller
) -> Interview:
    interview = db.query(Interview).filter_by(id=interview_id).first()
    if not interview:
        raise InterviewNotFound("Interview not found")

    if interview.user_id != caller.id:
        raise InterviewForbidden("You are not authorized to access this interview")

    return interview


def list_interviews(db: Session, caller: AuthenticatedCaller) -> list[Interview]:
    return (
        db.query(Interview)
        .filter(Interview.user_id == caller.id)
        .order_by(Interview.created_at.desc())
        .all()
    )


def end_session(
    db: Session,
    interview_id: str,
    caller: AuthenticatedCaller,
    data: SessionEnd,
    now: Optional[datetime] = None,
) -> Interview:
    interview = get_owned_interview(db, interview_id, caller)

    if interview.is_conducted:
        raise InterviewStateError("Interview already completed")

    interview.total_time_spent_minutes = (
        (interview.total_time_spent_minutes or 0) + data.minutes
    )
    interview.last_session_end = now or datetime.utcnow()
    db.commit()
    db.refresh(interview)
    return interview


def conclude_interview(
    db: Session,
    interview_id: str,
    caller: AuthenticatedCaller,
    data: InterviewConclude,
) -> Interview:
    interview = get_owned_interview(db, interview_id, caller)

    interview.transcript = data.transcript
    interview.feedback = data.feedback
    interview.duration = data.duration
    interview.tone = data.tone
    interview.is_conducted = True
    db.commit()
    db.refresh(interview)
    return interview


def record_payment(
    db: Session,
    interview_id: str,
    caller: AuthenticatedCaller,
    data: PaymentUpdate,
) -> Interview:
    interview = get_owned_interview(db, interview_id, caller)

    # A completed payment is never rolled back by a later gateway status
    if data.status in SETTLED_PAYMENT_STATUSES:
        interview.payment_status = PaymentStatus.COMPLETED.value
        db.commit()
        db.refresh(interview)
    return interview
