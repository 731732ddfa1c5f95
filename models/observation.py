"""Canonical observation records handed to the delivery layer."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class CanonicalObservation(BaseModel):
    """A network/site/type/method/time/value tuple expected by FITS."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    network_id: str = Field(..., min_length=1, serialization_alias="NetworkID")
    site_id: str = Field(..., serialization_alias="SiteID")
    type_id: str = Field(..., serialization_alias="TypeID")
    method_id: str = Field(..., min_length=1, serialization_alias="MethodID")
    date_time: datetime = Field(..., serialization_alias="DateTime")
    value: float = Field(..., allow_inf_nan=False, serialization_alias="Value")
    error: float = Field(default=0.0, serialization_alias="Error")

    @field_validator("date_time")
    @classmethod
    def _require_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("date_time must be timezone aware")
        return value

    @field_serializer("date_time")
    def _serialize_date_time(self, value: datetime) -> str:
        return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")

    def encode(self) -> bytes:
        """Serialize to the JSON message body delivered to the queue."""
        return self.model_dump_json(by_alias=True).encode("utf-8")
