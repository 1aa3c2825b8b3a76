"""
View state of the map client.

All UI state lives in one immutable ViewState; every change goes through
reduce(state, action). Actions are plain dicts with a "type" key.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Tuple

from tenders_map.schemas.common import STATUSES

MODES = ("checking", "login", "app")
DRAW_MODES = ("none", "add_point", "draw_tunnel", "edit")
KINDS = ("points", "tunnels")

SEARCH_FIELDS = ("title", "name", "director", "winner", "note")

SESSION_EXPIRED_MESSAGE = "Session expired, please log in again"


@dataclass(frozen=True)
class ViewState:
    mode: str = "checking"
    user: Optional[Mapping[str, Any]] = None
    selected: Optional[Tuple[str, int]] = None
    status_filter: FrozenSet[str] = field(default_factory=frozenset)
    search: str = ""
    draw_mode: str = "none"
    message: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "mode": self.mode,
            "user": dict(self.user) if self.user is not None else None,
            "selected": list(self.selected) if self.selected else None,
            "status_filter": sorted(self.status_filter),
            "search": self.search,
            "draw_mode": self.draw_mode,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ViewState":
        selected = data.get("selected")
        return cls(
            mode=data.get("mode", "checking"),
            user=data.get("user"),
            selected=(selected[0], int(selected[1])) if selected else None,
            status_filter=frozenset(data.get("status_filter") or ()),
            search=data.get("search") or "",
            draw_mode=data.get("draw_mode", "none"),
            message=data.get("message"),
        )


def _require(action: Mapping[str, Any], key: str) -> Any:
    if key not in action:
        raise ValueError(f"Action {action.get('type')!r} needs {key!r}")
    return action[key]


def reduce(state: ViewState, action: Mapping[str, Any]) -> ViewState:
    kind = action.get("type")

    if kind == "login_required":
        return ViewState(mode="login")

    if kind == "logged_in":
        return replace(state, mode="app", user=_require(action, "user"), message=None)

    if kind == "session_expired":
        # drop everything tied to the old session
        return ViewState(mode="login", message=SESSION_EXPIRED_MESSAGE)

    if kind == "logged_out":
        return ViewState(mode="login")

    if kind == "select":
        entity_kind = _require(action, "kind")
        if entity_kind not in KINDS:
            raise ValueError(f"Unknown entity kind: {entity_kind!r}")
        return replace(state, selected=(entity_kind, int(_require(action, "id"))))

    if kind == "clear_selection":
        return replace(state, selected=None)

    if kind == "toggle_status":
        status = _require(action, "status")
        if status not in STATUSES:
            raise ValueError(f"Unknown status: {status!r}")
        return replace(state, status_filter=state.status_filter ^ {status})

    if kind == "set_search":
        return replace(state, search=str(_require(action, "query")))

    if kind == "clear_filters":
        return replace(state, status_filter=frozenset(), search="")

    if kind == "set_draw_mode":
        draw_mode = _require(action, "draw_mode")
        if draw_mode not in DRAW_MODES:
            raise ValueError(f"Unknown draw mode: {draw_mode!r}")
        selected = None if draw_mode in ("add_point", "draw_tunnel") else state.selected
        return replace(state, draw_mode=draw_mode, selected=selected)

    if kind == "entity_deleted":
        target = (_require(action, "kind"), int(_require(action, "id")))
        if state.selected == target:
            return replace(state, selected=None)
        return state

    if kind == "error":
        return replace(state, message=str(_require(action, "message")))

    if kind == "dismiss_message":
        return replace(state, message=None)

    raise ValueError(f"Unknown action: {kind!r}")


def matches(entity: Mapping[str, Any], state: ViewState) -> bool:
    if state.status_filter and entity.get("status") not in state.status_filter:
        return False
    query = state.search.strip().lower()
    if not query:
        return True
    return any(query in str(entity.get(f) or "").lower() for f in SEARCH_FIELDS)


def visible(entities: Iterable[Mapping[str, Any]], state: ViewState) -> list:
    """Entities shown in the sidebar and on the map under the current filters."""
    return [e for e in entities if matches(e, state)]
