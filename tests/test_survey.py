from datetime import datetime, timezone

import pytest

from errors import NotFoundError, PersistenceError, ValidationError
from models import new_response_id, SurveySubmission
import survey


def test_ids_are_unique():
    ids = {new_response_id() for _ in range(1000)}
    assert len(ids) == 1000


def test_ids_unique_across_rapid_submissions(store, projector):
    ids = set()
    for n in range(1, 1001):
        result = survey.submit_survey(store, projector, {"userType": "participant"})
        assert result["totalResponses"] == n
        ids.add(result["responseId"])
    assert len(ids) == 1000
    assert len(store.read_all()) == 1000


def test_id_shape():
    prefix, suffix = new_response_id(now_ms=1700000000000).split("_")
    assert prefix == "1700000000000"
    assert len(suffix) == 9
    assert suffix.isalnum() and suffix.lower() == suffix


def test_storage_record_keeps_answers():
    sub = SurveySubmission(userType="participant", event_question="Workshop", rating=5)
    record = sub.to_storage_record(now=datetime(2024, 5, 1, 12, tzinfo=timezone.utc))
    assert record["event_question"] == "Workshop"
    assert record["rating"] == 5
    assert record["timestamp"] == "2024-05-01T12:00:00.000Z"
    assert record["id"]


def test_blank_timestamp_is_defaulted():
    record = SurveySubmission(userType="stakeholder", timestamp="").to_storage_record()
    assert record["timestamp"]


@pytest.mark.parametrize("payload", [{}, {"userType": ""}, {"userType": None}])
def test_missing_user_type(store, projector, payload):
    with pytest.raises(ValidationError) as exc:
        survey.submit_survey(store, projector, payload)
    assert exc.value.message == "User type is required"
    assert not store.exists()


def test_wrong_user_type_kind(store, projector):
    with pytest.raises(ValidationError) as exc:
        survey.submit_survey(store, projector, {"userType": ["participant"]})
    assert exc.value.details


def test_submit_writes_json_and_csv(store, projector):
    result = survey.submit_survey(store, projector, {"userType": "participant"})
    assert result["totalResponses"] == 1
    assert store.read_all()[0]["id"] == result["responseId"]
    assert projector.exists()


def test_submit_wraps_storage_failures(store, projector, monkeypatch):
    def fail(records):
        raise OSError("disk full")

    monkeypatch.setattr(projector, "write", fail)
    with pytest.raises(PersistenceError) as exc:
        survey.submit_survey(store, projector, {"userType": "participant"})
    assert exc.value.details == "disk full"


def test_calendar_day_uses_local_date():
    stamp = "2026-10-16T12:00:00+00:00"
    expected = datetime(2026, 10, 16, 12, tzinfo=timezone.utc).astimezone().strftime("%a %b %d %Y")
    assert survey.calendar_day(stamp) == expected


def test_invalid_timestamps_are_bucketed():
    counts = survey.responses_by_date([{"timestamp": "yesterday"}, {}])
    assert counts == {survey.INVALID_DATE: 2}


def test_stats_on_empty_log(store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text("[]", encoding="utf-8")
    stats = survey.get_stats(store)
    assert stats["totalResponses"] == 0
    assert stats["latestResponse"] is None
    assert stats["responsesByDate"] == {}


def test_csv_artifact_missing(projector):
    with pytest.raises(NotFoundError):
        survey.get_csv_artifact(projector)


def test_unexpected_failures_after_validation_are_persistence_errors(store, projector, monkeypatch):
    def fail(records):
        raise AttributeError("'int' object has no attribute 'keys'")

    monkeypatch.setattr(projector, "write", fail)
    with pytest.raises(PersistenceError) as exc:
        survey.submit_survey(store, projector, {"userType": "participant"})
    assert "no attribute" in exc.value.details
