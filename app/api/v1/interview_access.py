from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import AuthenticatedCaller, get_current_caller
from app.schemas.interview import InterviewAccessRequest
from app.services.exceptions import AccessDenied, InterviewForbidden, InterviewNotFound
from app.services.interview_access import check_interview_access

router = APIRouter()


def require_interview_id(payload: Optional[InterviewAccessRequest] = None) -> str:
    # Checked before the caller is authenticated
    interview_id = payload.interviewId if payload else None
    if not interview_id or not isinstance(interview_id, str):
        raise HTTPException(status_code=400, detail="Interview ID is required")
    return interview_id


@router.post("/interview-access")
async def validate_interview_access(
    interview_id: str = Depends(require_interview_id),
    caller: AuthenticatedCaller = Depends(get_current_caller),
    db: Session = Depends(get_db),
):
    try:
        return check_interview_access(db, interview_id, caller)
    except InterviewNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InterviewForbidden as e:
        raise HTTPException(status_code=403, detail=str(e))
    except AccessDenied as e:
        return JSONResponse(status_code=400, content=e.rejection.to_payload())
