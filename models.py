import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

_BASE36 = string.digits + string.ascii_lowercase


def new_response_id(now_ms: Optional[int] = None) -> str:
    """``<epoch millis>_<9 random base-36 chars>``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{now_ms}_{suffix}"


def utc_now_iso(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SurveySubmission(BaseModel):
    """One survey payload. Question answers ride along as extra fields."""

    model_config = ConfigDict(extra="allow")

    userType: str = Field(..., min_length=1)
    timestamp: Optional[str] = None
    id: Any = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _blank_timestamp(cls, v: Any) -> Any:
        return v or None

    def to_storage_record(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        record = self.model_dump()
        if not record.get("timestamp"):
            record["timestamp"] = utc_now_iso(now)
        record["id"] = new_response_id()
        return record
