# tenders_map/schemas/common.py
from __future__ import annotations
from typing import Annotated, Any
from pydantic import BaseModel, Field

from tenders_map.models.point import DEFAULT_STATUS

# planned, tender, in progress, stale
STATUSES = ("planowany", "przetarg", "realizacja", "nieaktualny")

Latitude = Annotated[float, Field(ge=-90, le=90, allow_inf_nan=False)]
Longitude = Annotated[float, Field(ge=-180, le=180, allow_inf_nan=False)]


def normalize_status(value: Any) -> str:
    """Unknown or missing statuses fall back to the default instead of failing."""
    if isinstance(value, str):
        value = value.strip().lower()
        if value in STATUSES:
            return value
    return DEFAULT_STATUS


class LatLng(BaseModel):
    lat: Latitude
    lng: Longitude


class OkResponse(BaseModel):
    ok: bool = True
