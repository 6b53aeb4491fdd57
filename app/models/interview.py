from sqlalchemy import Column, String, DateTime, Integer, Float, Boolean, Text, JSON
from datetime import datetime
from app.core.database import Base
from app.utils.enums import PaymentStatus


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)

    candidate_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    language = Column(String, default="en")
    interview_questions = Column(JSON, nullable=True)  # str or list[str]

    is_conducted = Column(Boolean, default=False, nullable=False)
    payment_status = Column(String, default=PaymentStatus.NOT_COMPLETED.value)

    # Session bookkeeping
    total_time_spent_minutes = Column(Float, default=0)
    session_count = Column(Integer, default=0)
    last_session_start = Column(DateTime, nullable=True)
    last_session_end = Column(DateTime, nullable=True)
    max_allowed_minutes = Column(Integer, nullable=True)

    transcript = Column(Text, nullable=True)
    feedback = Column(JSON, nullable=True)
    duration = Column(String, nullable=True)
    tone = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
