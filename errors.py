from typing import Any, Dict, Optional


class SurveyError(Exception):
    """Base error; rendered as a JSON body with an ``error`` field."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(SurveyError):
    status_code = 400


class NotFoundError(SurveyError):
    status_code = 404


class StorageError(SurveyError):
    pass


class PersistenceError(SurveyError):
    pass
