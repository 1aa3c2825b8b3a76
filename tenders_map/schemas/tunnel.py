# tenders_map/schemas/tunnel.py
from __future__ import annotations
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from tenders_map.schemas.common import LatLng, normalize_status


class TunnelCreate(BaseModel):
    name: Optional[str] = None
    director: Optional[str] = None
    winner: Optional[str] = None
    note: Optional[str] = None
    status: Optional[str] = None
    path: List[LatLng] = Field(..., min_length=1)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status_field(cls, v):
        return normalize_status(v)


class TunnelUpdate(BaseModel):
    name: Optional[str] = None
    director: Optional[str] = None
    winner: Optional[str] = None
    note: Optional[str] = None
    status: Optional[str] = None
    # when sent, replaces the whole polyline
    path: Optional[List[LatLng]] = Field(None, min_length=1)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status_field(cls, v):
        return normalize_status(v)

    @field_validator("path")
    @classmethod
    def path_not_null(cls, v):
        if v is None:
            raise ValueError("path cannot be null")
        return v


class TunnelRead(BaseModel):
    id: int
    name: str
    director: Optional[str] = None
    winner: Optional[str] = None
    note: Optional[str] = None
    status: str
    path: List[LatLng]
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
