from __future__ import annotations
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tenders_map.core.deps import get_current_user
from tenders_map.db.session import get_db
from tenders_map.models.comment import EntityKind
from tenders_map.models.tunnel import Tunnel
from tenders_map.schemas.common import LatLng, OkResponse, normalize_status
from tenders_map.schemas.tunnel import TunnelCreate, TunnelUpdate, TunnelRead
from tenders_map.services.entities import get_entity_or_404, delete_entity
from tenders_map.utils.strings import norm_str, or_default

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tunnels", tags=["tunnels"], dependencies=[Depends(get_current_user)])

DEFAULT_NAME = "Nowy tunel"


def _dump_path(path: List[LatLng]) -> list[dict]:
    # keep vertex order exactly as drawn
    return [{"lat": v.lat, "lng": v.lng} for v in path]


@router.get("", response_model=List[TunnelRead])
def list_tunnels(db: Session = Depends(get_db)):
    return db.query(Tunnel).order_by(Tunnel.created_at.desc(), Tunnel.id.desc()).all()


@router.post("", response_model=TunnelRead, status_code=201)
def create_tunnel(payload: TunnelCreate, db: Session = Depends(get_db)):
    tunnel = Tunnel(
        name=or_default(payload.name, DEFAULT_NAME),
        director=norm_str(payload.director),
        winner=norm_str(payload.winner),
        note=norm_str(payload.note),
        status=normalize_status(payload.status),
        path=_dump_path(payload.path),
    )
    db.add(tunnel)
    db.commit()
    db.refresh(tunnel)
    logger.info("Created tunnel %s with %s vertices", tunnel.id, len(tunnel.path))
    return tunnel


@router.get("/{tunnel_id}", response_model=TunnelRead)
def get_tunnel(tunnel_id: int, db: Session = Depends(get_db)):
    return get_entity_or_404(db, EntityKind.TUNNELS, tunnel_id)


@router.put("/{tunnel_id}", response_model=TunnelRead)
def update_tunnel(tunnel_id: int, payload: TunnelUpdate, db: Session = Depends(get_db)):
    tunnel = get_entity_or_404(db, EntityKind.TUNNELS, tunnel_id)

    fields = payload.model_fields_set
    if "name" in fields:
        tunnel.name = or_default(payload.name, DEFAULT_NAME)
    for key in ("director", "winner", "note"):
        if key in fields:
            setattr(tunnel, key, norm_str(getattr(payload, key)))
    if "status" in fields:
        tunnel.status = normalize_status(payload.status)
    if "path" in fields:
        # Replace-all semantics
        tunnel.path = _dump_path(payload.path)

    db.commit()
    db.refresh(tunnel)
    return tunnel


@router.delete("/{tunnel_id}", response_model=OkResponse)
def delete_tunnel(tunnel_id: int, db: Session = Depends(get_db)):
    tunnel = get_entity_or_404(db, EntityKind.TUNNELS, tunnel_id)
    removed = delete_entity(db, EntityKind.TUNNELS, tunnel)
    db.commit()
    logger.info("Deleted tunnel %s (%s comments)", tunnel_id, removed)
    return OkResponse()
