import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.security import AuthenticatedCaller
from app.models.interview import Interview
from app.services.access_policy import (
    AccessGrant,
    AccessPolicy,
    AccessRejection,
    SessionSnapshot,
    evaluate_access,
)
from app.services.exceptions import AccessDenied
from app.services.interview_service import get_owned_interview
from app.utils.questions import normalize_questions

logger = logging.getLogger(__name__)


def check_interview_access(
    db: Session,
    interview_id: str,
    caller: AuthenticatedCaller,
    now: Optional[datetime] = None,
    policy: Optional[AccessPolicy] = None,
) -> dict:
    now = now or datetime.utcnow()
    interview = get_owned_interview(db, interview_id, caller)

    verdict = evaluate_access(
        SessionSnapshot.from_record(interview),
        now,
        policy or AccessPolicy.from_settings(),
    )

    if isinstance(verdict, AccessRejection):
        logger.info(
            "Access to interview %s denied: %s", interview_id, verdict.reason.value
        )
        raise AccessDenied(verdict)

    payload = build_access_payload(interview, verdict)
    mark_session_started(db, interview_id, now)
    logger.info(
        "Interview %s admitted to session %s (%s minutes remaining)",
        interview_id,
        verdict.session_number,
        verdict.remaining_time_minutes,
    )
    return payload


def mark_session_started(db: Session, interview_id: str, now: datetime) -> None:
    # Bookkeeping only: a failed write must not keep the candidate out.
    # After rollback the loaded row is expired, so nothing here may read it.
    try:
        db.query(Interview).filter(Interview.id == interview_id).update(
            {
                Interview.last_session_start: now,
                Interview.session_count: func.coalesce(Interview.session_count, 0) + 1,
            },
            synchronize_session=False,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating session tracking for interview %s", interview_id)


def build_access_payload(interview: Interview, grant: AccessGrant) -> dict:
    return {
        "success": True,
        "canAccess": True,
        "interview": {
            "id": interview.id,
            "candidate_name": interview.candidate_name,
            "language": interview.language,
            "interview_questions": normalize_questions(interview.interview_questions),
            "total_time_spent_minutes": grant.total_time_spent_minutes,
            "remaining_time_minutes": grant.remaining_time_minutes,
            "session_count": grant.session_number,
            "max_allowed_minutes": grant.max_allowed_minutes,
            "sessionRecommendation": grant.recommendation,
            "warningMessage": grant.warning_message,
            "sessionNumber": grant.session_number,
            "maxSessionTime": grant.max_session_time,
        },
    }
