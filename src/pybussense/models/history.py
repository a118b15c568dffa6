"""Per-vehicle position history record.

The JSON form of :class:`HistoryRecord` is the only artifact the library
persists on its own, so it must stay stable across releases::

    {
        "startPoint": {"latitude": -22.9, "longitude": -43.2},
        "timeline": [{"latitude": -22.9, "longitude": -43.2}, ...]
    }

An unset start point is written as ``{"latitude": null, "longitude": null}``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from pybussense.models.spot import Spot

_UNSET_POINT: dict[str, None] = {"latitude": None, "longitude": None}


class HistoryRecord(BaseModel):
    """Fixed reference start point plus the recent samples of one vehicle."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    start_point: Spot | None = None
    timeline: tuple[Spot, ...] = Field(default_factory=tuple)

    @field_validator("start_point", mode="before")
    @classmethod
    def _unset_start_point(cls, value: Any) -> Any:
        if isinstance(value, dict) and (value.get("latitude") is None or value.get("longitude") is None):
            return None
        return value

    @field_serializer("start_point")
    def _serialize_start_point(self, value: Spot | None) -> dict[str, Any]:
        if value is None:
            return dict(_UNSET_POINT)
        return {"latitude": value.latitude, "longitude": value.longitude}

    def to_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes | str) -> HistoryRecord:
        return cls.model_validate_json(data)
