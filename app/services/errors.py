"""Domain errors raised by services; routers map them to HTTP responses."""


class ServiceError(Exception):
    """Base class for expected, user-facing failures."""


class UserNotFound(ServiceError):
    def __init__(self, user_id: str):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class TrialNotStarted(ServiceError):
    """The user exists but has no trial start date, so no metrics window exists."""

    def __init__(self, user_id: str):
        super().__init__(f"Trial not started for user {user_id}")
        self.user_id = user_id


class ViolationNotFound(ServiceError):
    def __init__(self, violation_id: int):
        super().__init__(f"Violation {violation_id} not found")
        self.violation_id = violation_id


class ViolationAlreadyResolved(ServiceError):
    def __init__(self, violation_id: int):
        super().__init__(f"Violation {violation_id} is already resolved")
        self.violation_id = violation_id


class TerminationNotPending(ServiceError):
    """No pending termination record: the choice was already submitted or never offered."""

    def __init__(self, user_id: str):
        super().__init__(f"No pending termination record for user {user_id}")
        self.user_id = user_id
