from __future__ import annotations
import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from tenders_map.core.config import settings
from tenders_map.core.deps import get_current_user
from tenders_map.db.session import get_db
from tenders_map.models.comment import EntityKind
from tenders_map.models.photo import Photo
from tenders_map.models.point import Point
from tenders_map.schemas.common import OkResponse, normalize_status
from tenders_map.schemas.point import PointCreate, PointUpdate, PointRead, PhotoRead, PhotoUploaded
from tenders_map.services.entities import get_entity_or_404, delete_entity
from tenders_map.services.uploads import UploadRejected, read_limited, remove_upload, save_upload, stored_name
from tenders_map.utils.strings import norm_str, or_default

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/points", tags=["points"], dependencies=[Depends(get_current_user)])

DEFAULT_TITLE = "Nowy punkt"


@router.get("", response_model=List[PointRead])
def list_points(db: Session = Depends(get_db)):
    return db.query(Point).order_by(Point.created_at.desc(), Point.id.desc()).all()


@router.post("", response_model=PointRead, status_code=201)
def create_point(payload: PointCreate, db: Session = Depends(get_db)):
    point = Point(
        title=or_default(payload.title, DEFAULT_TITLE),
        director=norm_str(payload.director),
        winner=norm_str(payload.winner),
        note=norm_str(payload.note),
        status=normalize_status(payload.status),
        lat=payload.lat,
        lng=payload.lng,
    )
    db.add(point)
    db.commit()
    db.refresh(point)
    logger.info("Created point %s at (%s, %s)", point.id, point.lat, point.lng)
    return point


@router.get("/{point_id}", response_model=PointRead)
def get_point(point_id: int, db: Session = Depends(get_db)):
    return get_entity_or_404(db, EntityKind.POINTS, point_id)


@router.put("/{point_id}", response_model=PointRead)
def update_point(point_id: int, payload: PointUpdate, db: Session = Depends(get_db)):
    point = get_entity_or_404(db, EntityKind.POINTS, point_id)

    # Partial update: only fields present in the body are touched
    fields = payload.model_dump(exclude_unset=True)
    if "title" in fields:
        point.title = or_default(fields["title"], DEFAULT_TITLE)
    for key in ("director", "winner", "note"):
        if key in fields:
            setattr(point, key, norm_str(fields[key]))
    if "status" in fields:
        point.status = normalize_status(fields["status"])

    db.commit()
    db.refresh(point)
    return point


@router.delete("/{point_id}", response_model=OkResponse)
def delete_point(point_id: int, db: Session = Depends(get_db)):
    point = get_entity_or_404(db, EntityKind.POINTS, point_id)
    urls = [p.url for p in point.photos]
    removed = delete_entity(db, EntityKind.POINTS, point)
    db.commit()
    for url in urls:
        remove_upload(url)
    logger.info("Deleted point %s (%s comments, %s photos)", point_id, removed, len(urls))
    return OkResponse()


@router.post("/{point_id}/photo", response_model=PhotoUploaded)
def upload_photo(point_id: int, photo: UploadFile = File(...), db: Session = Depends(get_db)):
    point = get_entity_or_404(db, EntityKind.POINTS, point_id)

    try:
        name = stored_name(photo.filename, photo.content_type)
        blob = read_limited(photo.file, settings.max_upload_mb * 1024 * 1024)
    except UploadRejected as e:
        raise HTTPException(400, str(e))

    url = save_upload(blob, name)
    row = Photo(point_id=point.id, url=url)
    db.add(row)
    db.commit()
    db.refresh(row)
    return PhotoUploaded(url=url, photo=PhotoRead.model_validate(row))


@router.get("/{point_id}/photos", response_model=List[PhotoRead])
def list_photos(point_id: int, db: Session = Depends(get_db)):
    get_entity_or_404(db, EntityKind.POINTS, point_id)
    return (
        db.query(Photo)
        .filter(Photo.point_id == point_id)
        .order_by(Photo.id.desc())
        .all()
    )
