# tenders_map/schemas/point.py
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator

from tenders_map.schemas.common import Latitude, Longitude, normalize_status


class PointCreate(BaseModel):
    title: Optional[str] = None
    director: Optional[str] = None
    winner: Optional[str] = None
    note: Optional[str] = None
    status: Optional[str] = None
    lat: Latitude
    lng: Longitude

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status_field(cls, v):
        return normalize_status(v)


class PointUpdate(BaseModel):
    # lat/lng are not accepted here: a point never moves once placed
    title: Optional[str] = None
    director: Optional[str] = None
    winner: Optional[str] = None
    note: Optional[str] = None
    status: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status_field(cls, v):
        return normalize_status(v)


class PhotoRead(BaseModel):
    id: int
    point_id: int
    url: str
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class PhotoUploaded(BaseModel):
    ok: bool = True
    url: str
    photo: PhotoRead


class PointRead(BaseModel):
    id: int
    title: str
    director: Optional[str] = None
    winner: Optional[str] = None
    note: Optional[str] = None
    status: str
    lat: float
    lng: float
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
