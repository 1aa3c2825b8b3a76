import pytest


@pytest.fixture()
def point(client, alice):
    resp = client.post("/api/points", json={"title": "Nowy punkt", "lat": 52.0, "lng": 21.0}, headers=alice)
    return resp.json()


@pytest.fixture()
def tunnel(client, alice):
    resp = client.post("/api/tunnels", json={"name": "T1", "path": [{"lat": 52.0, "lng": 21.0}]}, headers=alice)
    return resp.json()


def _url(kind, entity_id, comment_id=None):
    base = f"/api/{kind}/{entity_id}/comments"
    return f"{base}/{comment_id}" if comment_id is not None else base


def test_comment_is_stamped_with_author(client, alice, point):
    resp = client.post(_url("points", point["id"]), json={"body": "  Przetarg ogłoszony  "}, headers=alice)

    assert resp.status_code == 201
    comment = resp.json()
    assert comment["body"] == "Przetarg ogłoszony"
    assert comment["user_email"] == "alice@example.com"
    assert comment["entity_kind"] == "points"
    assert comment["entity_id"] == point["id"]
    assert comment["edited"] is False


def test_only_author_may_change_a_comment(client, alice, bob, point):
    comment = client.post(_url("points", point["id"]), json={"body": "mine"}, headers=alice).json()
    url = _url("points", point["id"], comment["id"])

    assert client.put(url, json={"body": "hijacked"}, headers=bob).status_code == 403
    assert client.delete(url, headers=bob).status_code == 403

    # still readable by everyone, and untouched
    listed = client.get(_url("points", point["id"]), headers=bob).json()
    assert [c["body"] for c in listed] == ["mine"]
    assert listed[0]["edited"] is False


def test_author_edit_sets_flag(client, alice, point):
    comment = client.post(_url("points", point["id"]), json={"body": "draft"}, headers=alice).json()

    resp = client.put(_url("points", point["id"], comment["id"]), json={"body": "final"}, headers=alice)

    assert resp.status_code == 200
    assert resp.json()["body"] == "final"
    assert resp.json()["edited"] is True
    assert resp.json()["updated_at"] is not None


def test_author_can_delete(client, alice, point):
    comment = client.post(_url("points", point["id"]), json={"body": "oops"}, headers=alice).json()

    resp = client.delete(_url("points", point["id"], comment["id"]), headers=alice)

    assert resp.json() == {"ok": True}
    assert client.get(_url("points", point["id"]), headers=alice).json() == []


@pytest.mark.parametrize("body", ["", "   ", None])
def test_blank_comment_is_bad_request(client, alice, point, body):
    resp = client.post(_url("points", point["id"]), json={"body": body}, headers=alice)
    assert resp.status_code == 400


def test_blank_edit_is_bad_request(client, alice, point):
    comment = client.post(_url("points", point["id"]), json={"body": "x"}, headers=alice).json()
    resp = client.put(_url("points", point["id"], comment["id"]), json={"body": " "}, headers=alice)
    assert resp.status_code == 400


def test_comments_listed_newest_first(client, alice, bob, tunnel):
    client.post(_url("tunnels", tunnel["id"]), json={"body": "one"}, headers=alice)
    client.post(_url("tunnels", tunnel["id"]), json={"body": "two"}, headers=bob)

    listed = client.get(_url("tunnels", tunnel["id"]), headers=alice).json()

    assert [c["body"] for c in listed] == ["two", "one"]
    assert [c["user_email"] for c in listed] == ["bob@example.com", "alice@example.com"]


def test_comments_need_existing_parent(client, alice):
    assert client.get(_url("points", 999), headers=alice).status_code == 404
    assert client.post(_url("tunnels", 999), json={"body": "x"}, headers=alice).status_code == 404


def test_comment_is_scoped_to_its_parent_kind(client, alice, point, tunnel):
    comment = client.post(_url("points", point["id"]), json={"body": "on the point"}, headers=alice).json()

    # same ids, other kind: not the same journal
    assert client.get(_url("tunnels", tunnel["id"]), headers=alice).json() == []
    resp = client.put(_url("tunnels", tunnel["id"], comment["id"]), json={"body": "x"}, headers=alice)
    assert resp.status_code == 404


def test_unknown_kind_is_rejected(client, alice):
    assert client.get(_url("photos", 1), headers=alice).status_code == 400


def test_comments_require_token(client, point):
    assert client.get(_url("points", point["id"])).status_code == 401
    assert client.post(_url("points", point["id"]), json={"body": "x"}).status_code == 401


def test_deleting_tunnel_clears_journal(client, alice, tunnel):
    client.post(_url("tunnels", tunnel["id"]), json={"body": "note"}, headers=alice)
    client.delete(f"/api/tunnels/{tunnel['id']}", headers=alice)

    again = client.post(
        "/api/tunnels", json={"name": "T2", "path": [{"lat": 50.0, "lng": 19.0}]}, headers=alice
    ).json()
    # SQLite may hand the old id out again; the old journal must not come back with it
    assert client.get(_url("tunnels", again["id"]), headers=alice).json() == []
