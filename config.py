import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

DEFAULT_CORS_ORIGINS = (
    "https://atul-k-m.github.io,http://127.0.0.1:5500,http://localhost:3000"
)


def settings_from_env() -> dict:
    return {
        "RESPONSES_DIR": os.getenv("RESPONSES_DIR", "responses"),
        "RESPONSES_JSON": os.getenv("RESPONSES_JSON", "survey_responses.json"),
        "RESPONSES_CSV": os.getenv("RESPONSES_CSV", "survey_responses.csv"),
        "QUESTIONS_FILE": os.getenv("QUESTIONS_FILE", "questions.json"),
        "CORS_ORIGINS": os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        "LOCK_TIMEOUT": float(os.getenv("LOCK_TIMEOUT", "10")),
        "MAX_CONTENT_LENGTH": 10 * 1024 * 1024,
    }


@dataclass(frozen=True)
class StoreConfig:
    """Where the response log and its CSV projection live."""

    base_dir: Path
    json_name: str = "survey_responses.json"
    csv_name: str = "survey_responses.csv"
    lock_timeout: float = 10.0

    @property
    def json_path(self) -> Path:
        return self.base_dir / self.json_name

    @property
    def csv_path(self) -> Path:
        return self.base_dir / self.csv_name

    @property
    def lock_path(self) -> Path:
        return self.base_dir / (self.json_name + ".lock")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "StoreConfig":
        return cls(
            base_dir=Path(config["RESPONSES_DIR"]),
            json_name=config.get("RESPONSES_JSON", cls.json_name),
            csv_name=config.get("RESPONSES_CSV", cls.csv_name),
            lock_timeout=float(config.get("LOCK_TIMEOUT", cls.lock_timeout)),
        )
