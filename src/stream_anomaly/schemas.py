"""Pydantic models handed to downstream alerting layers."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from stream_anomaly.types import StrategyName

SchemaVersionLiteral = Literal["1.0.0"]
CURRENT_RECORD_SCHEMA_VERSION: SchemaVersionLiteral = "1.0.0"


class DetectionRecord(BaseModel):
    """Immutable, versioned description of a single detection step."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["stream_anomaly"] = Field(
        default="stream_anomaly",
        description="Namespace of the record producer.",
    )
    schema_version: SchemaVersionLiteral = Field(
        default=CURRENT_RECORD_SCHEMA_VERSION,
        description="Semantic version of the record schema.",
    )
    stream_id: str | None = Field(
        default=None,
        description="Identifier of the monitored stream, when known.",
        min_length=1,
    )
    sequence: int | None = Field(
        default=None,
        ge=0,
        description="Zero-based position of the observation in its stream.",
    )

    value: float = Field(..., description="Observation that was evaluated.")
    anomalous: bool = Field(..., description="Verdict of the strategy.")
    score: float = Field(
        ...,
        ge=0.0,
        description=(
            "Continuous anomaly magnitude (z-score, isolation score or "
            "MAD-normalised deviation, depending on the strategy)."
        ),
    )
    threshold: float = Field(
        ..., ge=0.0, description="Threshold the score was compared against."
    )
    strategy: StrategyName = Field(..., description="Strategy that produced the verdict.")
    window_size: int = Field(
        ..., ge=0, description="Number of observations in the window."
    )

    baseline_mean: float = Field(..., description="Window mean.")
    baseline_std_dev: float = Field(
        ..., ge=0.0, description="Population standard deviation of the window."
    )
    baseline_min: float | None = Field(
        default=None, description="Smallest observation in the window."
    )
    baseline_max: float | None = Field(
        default=None, description="Largest observation in the window."
    )

    def model_dump_json_ready(self) -> dict[str, object]:
        """Return a JSON-serialisable payload with ``None`` values removed."""

        return self.model_dump(mode="json", exclude_none=True)
