"""
HTTP client for the map API with a local entity cache.

The cache is only ever patched with rows the server sends back, so server-side
normalization (status coercion, default titles) is what the caller sees.
Any 401 drops the token and the cache and raises SessionExpired.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)

KINDS = ("points", "tunnels")


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class SessionExpired(ApiError):
    """Token missing, invalid or expired; the caller must log in again."""


class BatchError(ApiError):
    def __init__(self, message: str, failed: dict[int, str]):
        super().__init__(0, message)
        self.failed = failed


def _check_kind(kind: str) -> str:
    if kind not in KINDS:
        raise ValueError(f"Unknown entity kind: {kind!r}")
    return kind


def to_path(vertices: Iterable[Any]) -> list[dict]:
    """Accept {lat, lng} mappings or (lat, lng) pairs."""
    out = []
    for v in vertices:
        if isinstance(v, Mapping):
            out.append({"lat": float(v["lat"]), "lng": float(v["lng"])})
        else:
            lat, lng = v
            out.append({"lat": float(lat), "lng": float(lng)})
    return out


@dataclass
class EntityCache:
    points: list[dict] = field(default_factory=list)
    tunnels: list[dict] = field(default_factory=list)

    def items(self, kind: str) -> list[dict]:
        return getattr(self, _check_kind(kind))

    def replace(self, kind: str, rows: list[dict]) -> None:
        setattr(self, _check_kind(kind), list(rows))

    def get(self, kind: str, entity_id: int) -> Optional[dict]:
        return next((r for r in self.items(kind) if r["id"] == entity_id), None)

    def upsert(self, kind: str, row: dict) -> None:
        rows = self.items(kind)
        for i, existing in enumerate(rows):
            if existing["id"] == row["id"]:
                rows[i] = row
                return
        # newest first, same as the server's listing
        rows.insert(0, row)

    def remove(self, kind: str, entity_id: int) -> None:
        self.replace(kind, [r for r in self.items(kind) if r["id"] != entity_id])

    def clear(self) -> None:
        self.points = []
        self.tunnels = []


class TendersMapClient:
    def __init__(
        self,
        base_url: str = "",
        *,
        http: httpx.Client | None = None,
        token: str | None = None,
        timeout: float = 15.0,
        on_session_expired: Callable[[], None] | None = None,
    ):
        if http is None:
            http = httpx.Client(base_url=self.normalize_base_url(base_url), timeout=timeout)
        self.http = http
        self.token = token
        self.user: dict | None = None
        self.cache = EntityCache()
        self.on_session_expired = on_session_expired

    @staticmethod
    def normalize_base_url(url: str) -> str:
        # "https://host/api/" and "https://host" address the same API
        url = (url or "").rstrip("/")
        if url.endswith("/api"):
            url = url[: -len("/api")]
        return url

    # ----------------- transport -----------------
    def _expire(self) -> None:
        self.token = None
        self.user = None
        self.cache.clear()
        if self.on_session_expired:
            self.on_session_expired()

    def _request(self, method: str, path: str, *, auth: bool = True, **kwargs) -> Any:
        headers = dict(kwargs.pop("headers", None) or {})
        if auth:
            if not self.token:
                self._expire()
                raise SessionExpired(401, "Missing token")
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            resp = self.http.request(method, path, headers=headers, **kwargs)
        except httpx.RequestError as e:
            raise ApiError(0, f"Network error: {e}") from e

        try:
            data = resp.json() if resp.content else {}
        except ValueError:
            data = None

        if resp.status_code == 401 and auth:
            logger.info("Session expired on %s %s", method, path)
            self._expire()
            raise SessionExpired(401, "Session expired, please log in again")
        if resp.is_error:
            message = data.get("error") if isinstance(data, dict) else None
            raise ApiError(resp.status_code, message or f"HTTP {resp.status_code}")
        if data is None:
            raise ApiError(resp.status_code, "Server returned an invalid response")
        return data

    # ----------------- session -----------------
    def login(self, email: str, password: str) -> dict:
        data = self._request(
            "POST", "/api/auth/login", auth=False,
            json={"email": email, "login": email, "password": password},
        )
        self.token = data["token"]
        self.user = data["user"]
        self.refresh()
        return self.user

    def restore_session(self) -> dict:
        """Validate a stored token and load entities."""
        data = self._request("GET", "/api/auth/me")
        self.user = data["user"]
        self.refresh()
        return self.user

    def logout(self) -> None:
        # nothing to revoke server-side
        self.token = None
        self.user = None
        self.cache.clear()

    def refresh(self) -> EntityCache:
        for kind in KINDS:
            self.cache.replace(kind, self._request("GET", f"/api/{kind}"))
        return self.cache

    # ----------------- entities -----------------
    def create(self, kind: str, fields: Mapping[str, Any]) -> dict:
        row = self._request("POST", f"/api/{_check_kind(kind)}", json=dict(fields))
        self.cache.upsert(kind, row)
        return row

    def update(self, kind: str, entity_id: int, fields: Mapping[str, Any]) -> dict:
        row = self._request("PUT", f"/api/{_check_kind(kind)}/{entity_id}", json=dict(fields))
        self.cache.upsert(kind, row)
        return row

    def delete(self, kind: str, entity_id: int) -> None:
        self._request("DELETE", f"/api/{_check_kind(kind)}/{entity_id}")
        self.cache.remove(kind, entity_id)

    def create_point(self, lat: float, lng: float, **fields) -> dict:
        return self.create("points", {**fields, "lat": lat, "lng": lng})

    def update_point(self, point_id: int, **fields) -> dict:
        return self.update("points", point_id, fields)

    def delete_point(self, point_id: int) -> None:
        self.delete("points", point_id)

    def create_tunnel(self, path: Iterable[Any], **fields) -> dict:
        return self.create("tunnels", {**fields, "path": to_path(path)})

    def update_tunnel(self, tunnel_id: int, **fields) -> dict:
        if "path" in fields:
            fields["path"] = to_path(fields["path"])
        return self.update("tunnels", tunnel_id, fields)

    def delete_tunnel(self, tunnel_id: int) -> None:
        self.delete("tunnels", tunnel_id)

    # ----------------- batches -----------------
    def _run_batch(self, items: Iterable[tuple[int, Callable[[], Any]]], what: str) -> None:
        # One request at a time; a failure does not stop the rest
        failed: dict[int, str] = {}
        for entity_id, call in items:
            try:
                call()
            except SessionExpired:
                raise
            except ApiError as e:
                failed[entity_id] = e.message
        if failed:
            logger.warning("%s failed for %s, reloading", what, sorted(failed))
            self.refresh()
            ids = ", ".join(str(i) for i in sorted(failed))
            raise BatchError(f"{what} failed for {len(failed)} item(s): {ids}", failed)

    def save_tunnel_paths(self, edits: Mapping[int, Iterable[Any]]) -> None:
        """Push edited polylines, one PUT per tunnel."""
        self._run_batch(
            ((tid, lambda tid=tid, path=path: self.update_tunnel(tid, path=path)) for tid, path in edits.items()),
            "Saving geometry",
        )

    def delete_many(self, kind: str, ids: Iterable[int]) -> None:
        _check_kind(kind)
        self._run_batch(
            ((eid, lambda eid=eid: self.delete(kind, eid)) for eid in ids),
            "Deleting",
        )

    # ----------------- journal -----------------
    def comments(self, kind: str, entity_id: int) -> list[dict]:
        return self._request("GET", f"/api/{_check_kind(kind)}/{entity_id}/comments")

    def add_comment(self, kind: str, entity_id: int, body: str) -> dict:
        return self._request("POST", f"/api/{_check_kind(kind)}/{entity_id}/comments", json={"body": body})

    def edit_comment(self, kind: str, entity_id: int, comment_id: int, body: str) -> dict:
        return self._request(
            "PUT", f"/api/{_check_kind(kind)}/{entity_id}/comments/{comment_id}", json={"body": body}
        )

    def delete_comment(self, kind: str, entity_id: int, comment_id: int) -> None:
        self._request("DELETE", f"/api/{_check_kind(kind)}/{entity_id}/comments/{comment_id}")

    # ----------------- photos -----------------
    def upload_photo(self, point_id: int, filename: str, content: bytes, content_type: str = "image/jpeg") -> dict:
        return self._request(
            "POST", f"/api/points/{point_id}/photo",
            files={"photo": (filename, content, content_type)},
        )

    def photos(self, point_id: int) -> list[dict]:
        return self._request("GET", f"/api/points/{point_id}/photos")
