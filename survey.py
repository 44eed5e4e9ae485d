import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional
import pydantic
from csv_export import CsvProjector
from errors import NotFoundError, PersistenceError, StorageError, ValidationError
from models import SurveySubmission
from storage import ResponseStore

logger = logging.getLogger(__name__)

INVALID_DATE = "Invalid Date"


def _validate(payload: Any) -> SurveySubmission:
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    if not payload.get("userType"):
        raise ValidationError("User type is required")
    try:
        return SurveySubmission(**payload)
    except pydantic.ValidationError as ve:
        raise ValidationError(
            "Invalid survey response",
            details=ve.errors(include_url=False, include_context=False),
        ) from ve


def submit_survey(
    store: ResponseStore, projector: CsvProjector, payload: Any
) -> Dict[str, Any]:
    submission = _validate(payload)
    try:
        record = submission.to_storage_record()
        total = store.append(record, on_commit=projector.write)
    except Exception as exc:
        logger.exception("Error saving survey response")
        cause = exc.details if isinstance(exc, StorageError) and exc.details else str(exc)
        raise PersistenceError("Failed to save survey response", details=cause) from exc
    logger.info("Saved survey response %s (%d total)", record["id"], total)
    return {"responseId": record["id"], "totalResponses": total}


def get_all_responses(store: ResponseStore) -> Dict[str, Any]:
    responses = store.read_all()
    return {"count": len(responses), "data": responses}


def calendar_day(timestamp: Any) -> str:
    """Local calendar day of an ISO-8601 timestamp, e.g. ``Thu Oct 16 2026``."""
    if not isinstance(timestamp, str):
        return INVALID_DATE
    try:
        moment = datetime.fromisoformat(timestamp)
    except ValueError:
        return INVALID_DATE
    return moment.astimezone().strftime("%a %b %d %Y")


def responses_by_date(responses: List[Mapping[str, Any]]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for response in responses:
        day = calendar_day(response.get("timestamp"))
        counts[day] = counts.get(day, 0) + 1
    return counts


def _count_user_type(responses: List[Mapping[str, Any]], user_type: str) -> int:
    return sum(1 for r in responses if r.get("userType") == user_type)


def get_stats(store: ResponseStore) -> Dict[str, Any]:
    responses = store.read_all()
    latest: Optional[str] = responses[-1].get("timestamp") if responses else None
    return {
        "totalResponses": len(responses),
        "stakeholderResponses": _count_user_type(responses, "stakeholder"),
        "participantResponses": _count_user_type(responses, "participant"),
        "responsesByDate": responses_by_date(responses),
        "latestResponse": latest,
    }


def get_csv_artifact(projector: CsvProjector) -> Path:
    if not projector.exists():
        raise NotFoundError(
            "CSV file not found", details=f"no such file: {projector.path.name}"
        )
    return projector.path
