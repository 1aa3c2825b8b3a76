from __future__ import annotations
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from tenders_map.core.deps import CurrentUser, get_current_user
from tenders_map.db.session import get_db
from tenders_map.models.comment import Comment, EntityKind
from tenders_map.schemas.comment import CommentWrite, CommentRead
from tenders_map.schemas.common import OkResponse
from tenders_map.services.entities import get_entity_or_404

# Journal entries hang off /api/points/{id}/comments and /api/tunnels/{id}/comments
router = APIRouter(prefix="/api", tags=["comments"], dependencies=[Depends(get_current_user)])


def _get_comment_or_404(db: Session, kind: EntityKind, entity_id: int, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if not comment or comment.entity_kind != kind.value or comment.entity_id != entity_id:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment


def _ensure_author(comment: Comment, user) -> None:
    # Anyone may edit points and tunnels, but only the author may touch a comment
    if comment.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your comment")


@router.get("/{kind}/{entity_id}/comments", response_model=List[CommentRead])
def list_comments(kind: EntityKind, entity_id: int, db: Session = Depends(get_db)):
    get_entity_or_404(db, kind, entity_id)
    return (
        db.query(Comment)
        .filter(Comment.entity_kind == kind.value, Comment.entity_id == entity_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )


@router.post("/{kind}/{entity_id}/comments", response_model=CommentRead, status_code=201)
def create_comment(
    kind: EntityKind,
    entity_id: int,
    payload: CommentWrite,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    get_entity_or_404(db, kind, entity_id)
    comment = Comment(
        entity_kind=kind.value,
        entity_id=entity_id,
        user_id=current_user.id,
        user_email=current_user.email,
        body=payload.body,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


@router.put("/{kind}/{entity_id}/comments/{comment_id}", response_model=CommentRead)
def update_comment(
    kind: EntityKind,
    entity_id: int,
    comment_id: int,
    payload: CommentWrite,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    comment = _get_comment_or_404(db, kind, entity_id, comment_id)
    _ensure_author(comment, current_user)

    comment.body = payload.body
    comment.edited = True
    comment.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(comment)
    return comment


@router.delete("/{kind}/{entity_id}/comments/{comment_id}", response_model=OkResponse)
def delete_comment(
    kind: EntityKind,
    entity_id: int,
    comment_id: int,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    comment = _get_comment_or_404(db, kind, entity_id, comment_id)
    _ensure_author(comment, current_user)

    db.delete(comment)
    db.commit()
    return OkResponse()
