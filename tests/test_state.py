import pytest

from tenders_map.client.state import SESSION_EXPIRED_MESSAGE, ViewState, reduce, visible

POINTS = [
    {"id": 1, "title": "Obwodnica Kielc", "director": "GDDKiA", "winner": None, "note": None, "status": "planowany"},
    {"id": 2, "title": "Tunel pod Świną", "director": None, "winner": "Porr", "note": "etap 2", "status": "realizacja"},
    {"id": 3, "title": "Rail Baltica", "director": "PKP PLK", "winner": "Budimex", "note": None, "status": "przetarg"},
]


@pytest.fixture()
def logged_in():
    return reduce(ViewState(), {"type": "logged_in", "user": {"id": 1, "email": "alice@example.com"}})


def test_initial_state_is_checking():
    state = ViewState()
    assert state.mode == "checking"
    assert state.selected is None
    assert state.draw_mode == "none"


def test_login_switches_to_app(logged_in):
    assert logged_in.mode == "app"
    assert logged_in.user["email"] == "alice@example.com"


def test_session_expiry_resets_everything(logged_in):
    state = reduce(logged_in, {"type": "select", "kind": "points", "id": 2})
    state = reduce(state, {"type": "toggle_status", "status": "przetarg"})

    state = reduce(state, {"type": "session_expired"})

    assert state.mode == "login"
    assert state.user is None
    assert state.selected is None
    assert state.status_filter == frozenset()
    assert state.message == SESSION_EXPIRED_MESSAGE


def test_reducer_does_not_mutate(logged_in):
    after = reduce(logged_in, {"type": "set_search", "query": "tunel"})
    assert logged_in.search == ""
    assert after.search == "tunel"


def test_toggle_status_twice_restores_filter(logged_in):
    once = reduce(logged_in, {"type": "toggle_status", "status": "realizacja"})
    twice = reduce(once, {"type": "toggle_status", "status": "realizacja"})
    assert once.status_filter == {"realizacja"}
    assert twice.status_filter == frozenset()


def test_entering_draw_mode_drops_selection(logged_in):
    state = reduce(logged_in, {"type": "select", "kind": "tunnels", "id": 5})
    assert reduce(state, {"type": "set_draw_mode", "draw_mode": "edit"}).selected == ("tunnels", 5)
    assert reduce(state, {"type": "set_draw_mode", "draw_mode": "add_point"}).selected is None


def test_deleting_selected_entity_clears_selection(logged_in):
    state = reduce(logged_in, {"type": "select", "kind": "points", "id": 2})
    assert reduce(state, {"type": "entity_deleted", "kind": "points", "id": 3}).selected == ("points", 2)
    assert reduce(state, {"type": "entity_deleted", "kind": "points", "id": 2}).selected is None


def test_error_message_can_be_dismissed(logged_in):
    state = reduce(logged_in, {"type": "error", "message": "HTTP 500"})
    assert state.message == "HTTP 500"
    assert reduce(state, {"type": "dismiss_message"}).message is None


@pytest.mark.parametrize(
    "action",
    [
        {"type": "teleport"},
        {"type": "toggle_status", "status": "done"},
        {"type": "set_draw_mode", "draw_mode": "polygon"},
        {"type": "select", "kind": "photos", "id": 1},
        {"type": "select", "kind": "points"},
    ],
)
def test_invalid_actions_raise(logged_in, action):
    with pytest.raises(ValueError):
        reduce(logged_in, action)


def test_state_survives_serialization(logged_in):
    state = reduce(logged_in, {"type": "select", "kind": "points", "id": 2})
    state = reduce(state, {"type": "toggle_status", "status": "przetarg"})
    state = reduce(state, {"type": "toggle_status", "status": "planowany"})

    data = state.to_dict()

    assert data["status_filter"] == ["planowany", "przetarg"]
    assert data["selected"] == ["points", 2]
    assert ViewState.from_dict(data) == state


def test_visible_filters_by_status_and_search(logged_in):
    assert [p["id"] for p in visible(POINTS, logged_in)] == [1, 2, 3]

    by_status = reduce(logged_in, {"type": "toggle_status", "status": "realizacja"})
    assert [p["id"] for p in visible(POINTS, by_status)] == [2]

    by_text = reduce(logged_in, {"type": "set_search", "query": "  BUDIMEX "})
    assert [p["id"] for p in visible(POINTS, by_text)] == [3]

    both = reduce(by_text, {"type": "toggle_status", "status": "planowany"})
    assert visible(POINTS, both) == []

    cleared = reduce(both, {"type": "clear_filters"})
    assert len(visible(POINTS, cleared)) == 3
