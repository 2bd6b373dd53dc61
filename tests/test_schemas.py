"""Tests for the detection record schema."""

import pytest
from pydantic import ValidationError

from stream_anomaly.schemas import CURRENT_RECORD_SCHEMA_VERSION, DetectionRecord


def _record(**overrides):
    fields = {
        "value": 10.0,
        "anomalous": True,
        "score": 2.6,
        "threshold": 2.0,
        "strategy": "zscore",
        "window_size": 8,
        "baseline_mean": 2.1,
        "baseline_std_dev": 2.9,
    }
    fields.update(overrides)
    return DetectionRecord(**fields)


def test_defaults_and_json_payload():
    """Optional fields are omitted from the JSON-ready payload."""
    payload = _record().model_dump_json_ready()
    assert payload["kind"] == "stream_anomaly"
    assert payload["schema_version"] == CURRENT_RECORD_SCHEMA_VERSION
    assert "stream_id" not in payload
    assert "baseline_min" not in payload


def test_record_is_frozen():
    """Records cannot be mutated after construction."""
    record = _record()
    with pytest.raises(ValidationError):
        record.score = 0.0


def test_unknown_fields_rejected():
    """Extra keys are a validation error."""
    with pytest.raises(ValidationError):
        _record(extra_field=1)


@pytest.mark.parametrize(
    "overrides",
    [
        {"strategy": "forest"},
        {"score": -1.0},
        {"window_size": -1},
        {"sequence": -1},
        {"stream_id": ""},
    ],
)
def test_invalid_values_rejected(overrides):
    """Out-of-range values fail validation."""
    with pytest.raises(ValidationError):
        _record(**overrides)
