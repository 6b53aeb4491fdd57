from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Any, Optional, Union

from app.utils.questions import normalize_questions


class InterviewAccessRequest(BaseModel):
    interviewId: Optional[Any] = None


class InterviewCreate(BaseModel):
    candidate_name: Optional[str] = None
    email: Optional[str] = None
    language: str = "en"
    interview_questions: Optional[Union[str, list[str]]] = None
    max_allowed_minutes: Optional[int] = Field(default=None, gt=0)


class SessionEnd(BaseModel):
    minutes: float = Field(ge=0)


class InterviewConclude(BaseModel):
    transcript: Optional[str] = Field(default=None, max_length=100_000)
    feedback: Optional[Any] = None
    duration: Optional[str] = None
    tone: Optional[Any] = None


class PaymentUpdate(BaseModel):
    status: str


class InterviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    candidate_name: Optional[str]
    email: Optional[str]
    language: Optional[str]
    interview_questions: list[str]
    is_conducted: bool
    payment_status: str
    total_time_spent_minutes: float
    session_count: int
    last_session_start: Optional[datetime]
    last_session_end: Optional[datetime]
    max_allowed_minutes: Optional[int]
    transcript: Optional[str]
    feedback: Optional[Any]
    duration: Optional[str]
    tone: Optional[Any]
    created_at: Optional[datetime]

    @field_validator("interview_questions", mode="before")
    @classmethod
    def _normalize_questions(cls, value):
        return normalize_questions(value)

    @field_validator("total_time_spent_minutes", "session_count", mode="before")
    @classmethod
    def _zero_if_unset(cls, value):
        return value or 0
