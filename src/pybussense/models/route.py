"""Route (itinerary) model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pybussense.models.spot import RouteSpot


class Route(BaseModel):
    """Geometry and description of one bus line.

    ``description`` follows the ``"<origin> X <destination>"`` form used
    by the provider. It is not validated here; splitting it is the job of
    :func:`pybussense.sense.resolver.swap_description`.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    line_id: str
    description: str
    spots: tuple[RouteSpot, ...] = Field(default_factory=tuple)

    @property
    def start_point(self) -> RouteSpot | None:
        """First waypoint of the route, or ``None`` when it has no geometry."""
        return self.spots[0] if self.spots else None
