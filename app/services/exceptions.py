class InterviewNotFound(ValueError):
    pass


class InterviewForbidden(ValueError):
    pass


class InterviewStateError(ValueError):
    pass


class AccessDenied(ValueError):
    """Raised when the access policy turns a session request down."""

    def __init__(self, rejection):
        super().__init__(rejection.error)
        self.rejection = rejection
