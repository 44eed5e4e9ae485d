import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)

DEFAULT_QUESTIONS: Dict[str, Any] = {
    "stakeholder": {
        "year_question": {
            "question": "Which year are you in?",
            "options": ["1st Year", "2nd Year", "3rd Year", "4th Year", "Graduate"],
        },
        "role_question": {
            "question": "What is your role with E-Cell?",
            "options": [
                "Team Member",
                "Alumni",
                "Faculty",
                "Industry Partner",
                "Investor",
            ],
        },
        "rating_questions": [
            {
                "question": "How satisfied are you with E-Cell's current initiatives?",
                "scale": 5,
            },
            {"question": "How likely are you to recommend E-Cell to others?", "scale": 5},
        ],
        "open_ended": [
            {"question": "What suggestions do you have for improving E-Cell?"},
            {"question": "What new initiatives would you like to see from E-Cell?"},
        ],
    },
    "participant": {
        "event_question": {
            "question": "Which E-Cell event did you participate in?",
            "options": [
                "Workshop",
                "Seminar",
                "Competition",
                "Networking Event",
                "Startup Pitch",
                "Other",
            ],
        },
        "rating_questions": [
            {"question": "How would you rate your overall experience?", "scale": 5},
            {"question": "How valuable was the content presented?", "scale": 5},
        ],
        "open_ended": [
            {"question": "What did you learn from the E-Cell event?"},
            {"question": "How can we improve future events?"},
        ],
    },
}


def load_questions(path: Union[str, Path]) -> Any:
    """Return the catalog file's content, or the built-in default."""
    path = Path(path)
    if not path.is_file():
        return DEFAULT_QUESTIONS
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Falling back to default questions, %s unreadable: %s", path, exc)
        return DEFAULT_QUESTIONS
