from __future__ import annotations
from typing import Type, Union

from fastapi import HTTPException
from sqlalchemy.orm import Session

from tenders_map.models.comment import Comment, EntityKind
from tenders_map.models.point import Point
from tenders_map.models.tunnel import Tunnel

Entity = Union[Point, Tunnel]

MODELS: dict[EntityKind, Type[Entity]] = {
    EntityKind.POINTS: Point,
    EntityKind.TUNNELS: Tunnel,
}

NOT_FOUND = {
    EntityKind.POINTS: "Point not found",
    EntityKind.TUNNELS: "Tunnel not found",
}


def get_entity_or_404(db: Session, kind: EntityKind, entity_id: int) -> Entity:
    entity = db.get(MODELS[kind], entity_id)
    if not entity:
        raise HTTPException(status_code=404, detail=NOT_FOUND[kind])
    return entity


def delete_entity(db: Session, kind: EntityKind, entity: Entity) -> int:
    """
    Remove an entity together with its journal.
    Comments reference their parent by (kind, id) only, so nothing in the
    database cascades them; they go in the same transaction here.
    Returns the number of comments removed. Caller commits.
    """
    removed = (
        db.query(Comment)
        .filter(Comment.entity_kind == kind.value, Comment.entity_id == entity.id)
        .delete(synchronize_session=False)
    )
    db.delete(entity)
    return removed
