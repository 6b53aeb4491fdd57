from enum import Enum


class PaymentStatus(str, Enum):
    NOT_COMPLETED = "not_completed"
    COMPLETED = "completed"


class AccessReason(str, Enum):
    COMPLETED = "completed"
    PAYMENT_REQUIRED = "payment_required"
    SESSION_EXPIRED = "session_expired"
    TIME_LIMIT_REACHED = "time_limit_reached"
    SESSION_LIMIT_EXCEEDED = "session_limit_exceeded"
    NO_TIME_REMAINING = "no_time_remaining"
