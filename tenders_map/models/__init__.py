from tenders_map.models.user import User
from tenders_map.models.point import Point, DEFAULT_STATUS
from tenders_map.models.photo import Photo
from tenders_map.models.tunnel import Tunnel
from tenders_map.models.comment import Comment, EntityKind

__all__ = ["User", "Point", "Photo", "Tunnel", "Comment", "EntityKind", "DEFAULT_STATUS"]
