"""Geographic point models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pybussense.ingestion.normalize import safe_bool


class Spot(BaseModel):
    """A latitude/longitude pair treated as a planar coordinate."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    latitude: float
    longitude: float

    def as_spot(self) -> Spot:
        """Return a plain :class:`Spot` carrying only the coordinates."""
        return Spot(latitude=self.latitude, longitude=self.longitude)


class RouteSpot(Spot):
    """A route waypoint, tagged with the leg it belongs to."""

    returning: bool = Field(default=False)
    """``True`` if the waypoint lies on the return leg of the route."""

    @field_validator("returning", mode="before")
    @classmethod
    def _coerce_returning(cls, value: Any) -> bool:
        return safe_bool(value)
