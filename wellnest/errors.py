"""
Error taxonomy shared by services and routes.

Every error carries the HTTP status the API answers with, so routes can let
them propagate and the handlers in ``wellnest.main`` shape the response.
"""
from typing import Dict, List, Optional


class WellnestError(Exception):
    """Base class for all handled application errors"""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_content(self) -> dict:
        return {"status": "error", "detail": self.detail, "error_type": type(self).__name__}


class ValidationError(WellnestError):
    """Missing or out-of-range input, raised before any network call"""

    status_code = 422


class InvalidDateError(ValidationError):
    """A date string could not be parsed or is not acceptable"""

    def __init__(self, value: Optional[str], reason: str = "Invalid date"):
        super().__init__(f"{reason}: {value!r}")
        self.value = value


class IncompleteAssessmentError(ValidationError):
    """EPDS submission attempted with unanswered questions"""

    def __init__(self, unanswered: List[str]):
        count = len(unanswered)
        super().__init__(
            f"Please answer all questions before submitting. "
            f"{count} question{'s' if count != 1 else ''} remaining."
        )
        self.unanswered = list(unanswered)

    @property
    def first_unanswered(self) -> Optional[str]:
        return self.unanswered[0] if self.unanswered else None

    def to_content(self) -> dict:
        content = super().to_content()
        content["unanswered"] = self.unanswered
        content["first_unanswered"] = self.first_unanswered
        return content


class VitalsValidationError(ValidationError):
    """One or more physical check-in fields failed validation"""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("Please correct the highlighted fields")
        self.errors = dict(errors)

    def to_content(self) -> dict:
        content = super().to_content()
        content["errors"] = self.errors
        return content


class NetworkError(WellnestError):
    """The model service could not be reached"""

    status_code = 503


class ScoringTimeoutError(NetworkError):
    """The model service did not answer within the configured timeout"""

    status_code = 504


class SchemaError(WellnestError):
    """The model service answered with an error status or an unusable body"""

    status_code = 502


class PersistenceError(WellnestError):
    """The database rejected a statement"""

    status_code = 500


class DatabaseUnavailableError(PersistenceError):
    status_code = 503

    def __init__(self, detail: str = "Database not configured"):
        super().__init__(detail)


class RecordNotFoundError(PersistenceError):
    status_code = 404

    def __init__(self, record_id: str):
        super().__init__(f"Record {record_id} not found")
        self.record_id = record_id


class SubmissionInProgressError(WellnestError):
    """A submission for the same form is already waiting on the model service"""

    status_code = 409

    def __init__(self, detail: str = "A submission is already in progress"):
        super().__init__(detail)
