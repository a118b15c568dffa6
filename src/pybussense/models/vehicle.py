"""Vehicle position model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pybussense.ingestion.normalize import safe_float, safe_line_id, safe_str
from pybussense.models.spot import Spot


class Vehicle(BaseModel):
    """One telemetry sample of a bus.

    Fields are mapped from the provider's positions feed columns
    (``DATAHORA, ORDEM, LINHA, LATITUDE, LONGITUDE, VELOCIDADE, DIRECAO``).
    Instances are frozen; inference returns a copy with ``sense`` set.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    id: str = Field(validation_alias=AliasChoices("id", "ORDEM", "order"))
    """Vehicle order code."""
    line_id: str = Field(default="", validation_alias=AliasChoices("line_id", "lineId", "LINHA", "line"))
    """Line the vehicle is serving (may be blank in the feed)."""
    speed: float = Field(default=0.0, validation_alias=AliasChoices("speed", "VELOCIDADE"))
    """Reported speed in km/h."""
    raw_direction: float = Field(
        default=0.0,
        validation_alias=AliasChoices("raw_direction", "rawDirection", "DIRECAO", "direction"),
    )
    """Heading reported by the on-board unit, in degrees."""
    latitude: float = Field(validation_alias=AliasChoices("latitude", "LATITUDE"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "LONGITUDE"))
    timestamp: str = Field(default="", validation_alias=AliasChoices("timestamp", "DATAHORA"))
    """Provider timestamp, kept as sent."""
    sense: str = Field(default="")
    """Inferred direction label (``"A X B"``) or a sentinel."""

    @property
    def position(self) -> Spot:
        return Spot(latitude=self.latitude, longitude=self.longitude)

    @property
    def observation_key(self) -> tuple[Any, ...]:
        """Identity of this observed state, used to avoid duplicate history entries."""
        return (
            self.timestamp,
            self.line_id,
            self.latitude,
            self.longitude,
            self.speed,
            self.raw_direction,
            self.sense,
        )

    def with_sense(self, sense: str) -> Vehicle:
        return self.model_copy(update={"sense": sense})

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        text = safe_str(value)
        if text is None:
            raise ValueError("vehicle id must be non-empty")
        return text

    @field_validator("line_id", mode="before")
    @classmethod
    def _coerce_line_id(cls, value: Any) -> str:
        return safe_line_id(value)

    @field_validator("speed", "raw_direction", mode="before")
    @classmethod
    def _coerce_optional_floats(cls, value: Any) -> float:
        parsed = safe_float(value)
        return 0.0 if parsed is None else parsed

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_coordinates(cls, value: Any) -> float | None:
        # None fails float validation, rejecting rows without a position.
        return safe_float(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> str:
        return safe_str(value) or ""
