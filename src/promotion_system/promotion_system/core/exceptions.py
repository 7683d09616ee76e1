class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "C000"
    default_message = "Business rule violated"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "C001"
    default_message = "Invalid input value"


class NotFoundError(DomainError):
    """Raised when a referenced plan, detail, candidate or master record is absent."""

    code = "C004"
    default_message = "Resource not found"


class StateConflictError(DomainError):
    """Raised when the current state does not allow the requested transition."""

    code = "C409"
    default_message = "State conflict"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "C009"
    default_message = "Access denied"


# -------- validation --------
class InvalidPromotionTargetGradeError(ValidationError):
    code = "PR002"
    default_message = "A promotion plan cannot target this grade"


class SelfNominationNotAllowedError(ValidationError):
    code = "PR006"
    default_message = "Employees cannot nominate themselves"


class InvalidPayloadError(ValidationError):
    code = "PR010"
    default_message = "Approval payload is malformed"


# -------- not found --------
class PlanNotFoundError(NotFoundError):
    code = "PR001"
    default_message = "Promotion plan not found"


class CandidateNotFoundError(NotFoundError):
    code = "PR003"
    default_message = "Promotion candidate not found"


class DetailNotFoundError(NotFoundError):
    code = "PR007"
    default_message = "Promotion detail not found"


class DepartmentNotFoundError(NotFoundError):
    code = "E001"
    default_message = "Department not found"


class GradeNotFoundError(NotFoundError):
    code = "E002"
    default_message = "Grade not found"


class JobTitleNotFoundError(NotFoundError):
    code = "E003"
    default_message = "Job title not found"


class EmployeeNotFoundError(NotFoundError):
    code = "E008"
    default_message = "Employee not found"


# -------- state conflict --------
class NominationPeriodExpiredError(StateConflictError):
    code = "PR004"
    default_message = "The nomination period has ended"


class PlanFinishedError(StateConflictError):
    code = "PR005"
    default_message = "The promotion plan is already finished"


class InvalidStateError(StateConflictError):
    code = "PR008"
    default_message = "Candidate is not in a state that allows this action"


class QuotaExceededError(StateConflictError):
    code = "PR009"
    default_message = "The promotion quota for this detail is already filled"


# -------- access --------
class AccessDeniedError(AuthorizationError):
    code = "C009"
    default_message = "Only the nominator can cancel this nomination"
