import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import AuthenticatedCaller, get_current_caller
from app.schemas.interview import (
    InterviewConclude,
    InterviewCreate,
    InterviewResponse,
    PaymentUpdate,
    SessionEnd,
)
from app.services.exceptions import (
    InterviewForbidden,
    InterviewNotFound,
    InterviewStateError,
)
from app.services.interview_service import (
    conclude_interview,
    create_interview,
    end_session,
    get_owned_interview,
    list_interviews,
    record_payment,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _raise_for(e: ValueError):
    if isinstance(e, InterviewNotFound):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, InterviewForbidden):
        raise HTTPException(status_code=403, detail=str(e))
    raise HTTPException(status_code=400, detail=str(e))


@router.post("/interviews", status_code=201)
async def create_interview_record(
    data: InterviewCreate,
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_caller),
):
    interview = create_interview(db, caller, data)
    logger.info("Created interview %s for user %s", interview.id, caller.id)
    return {"interview": InterviewResponse.model_validate(interview)}


@router.get("/interviews")
async def list_interview_records(
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_caller),
):
    interviews = list_interviews(db, caller)
    return {
        "interviews": [InterviewResponse.model_validate(i) for i in interviews]
    }


@router.get("/interviews/{interview_id}")
async def get_interview_record(
    interview_id: str,
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_caller),
):
    try:
        interview = get_owned_interview(db, interview_id, caller)
    except ValueError as e:
        _raise_for(e)
    return {"interview": InterviewResponse.model_validate(interview)}


@router.post("/interviews/{interview_id}/session-end")
async def end_interview_session(
    interview_id: str,
    data: SessionEnd,
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_caller),
):
    try:
        interview = end_session(db, interview_id, caller, data)
    except (InterviewNotFound, InterviewForbidden, InterviewStateError) as e:
        _raise_for(e)
    return {
        "interview_id": interview.id,
        "total_time_spent_minutes": interview.total_time_spent_minutes,
        "last_session_end": interview.last_session_end,
    }


@router.put("/interviews/{interview_id}")
async def conclude_interview_record(
    interview_id: str,
    data: InterviewConclude,
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_caller),
):
    try:
        conclude_interview(db, interview_id, caller, data)
    except (InterviewNotFound, InterviewForbidden) as e:
        _raise_for(e)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update interview %s", interview_id)
        raise HTTPException(status_code=500, detail="Failed to update interview")
    return {"success": True}


@router.post("/interviews/{interview_id}/payment")
async def record_interview_payment(
    interview_id: str,
    data: PaymentUpdate,
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_caller),
):
    try:
        interview = record_payment(db, interview_id, caller, data)
    except (InterviewNotFound, InterviewForbidden) as e:
        _raise_for(e)
    return {
        "interview_id": interview.id,
        "payment_status": interview.payment_status,
    }
