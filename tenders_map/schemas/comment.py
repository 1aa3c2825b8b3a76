# tenders_map/schemas/comment.py
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_COMMENT_LENGTH = 5000


class CommentWrite(BaseModel):
    body: str = Field(..., max_length=MAX_COMMENT_LENGTH)

    @field_validator("body")
    @classmethod
    def body_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment body cannot be empty")
        return v


class CommentRead(BaseModel):
    id: int
    entity_kind: str
    entity_id: int
    user_id: int
    user_email: str
    body: str
    edited: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)
