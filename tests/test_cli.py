from tenders_map import cli


def test_create_user_then_login(client, capsys):
    assert cli.main(["create", "Ops@Example.com", "--password", "Provisioned1"]) == 0
    assert "<ops@example.com>" in capsys.readouterr().out

    resp = client.post("/api/auth/login", json={"email": "ops@example.com", "password": "Provisioned1"})
    assert resp.status_code == 200


def test_duplicate_and_short_password_fail(client, capsys):
    cli.main(["create", "ops@example.com", "--password", "Provisioned1"])

    assert cli.main(["create", "OPS@example.com", "--password", "Provisioned1"]) == 1
    assert cli.main(["create", "new@example.com", "--password", "short"]) == 1
    assert "already exists" in capsys.readouterr().err


def test_set_password(client, user_factory):
    user_factory("ops@example.com", "OldPassword1")

    assert cli.main(["set-password", "ops@example.com", "--password", "NewPassword1"]) == 0

    old = client.post("/api/auth/login", json={"email": "ops@example.com", "password": "OldPassword1"})
    new = client.post("/api/auth/login", json={"email": "ops@example.com", "password": "NewPassword1"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_set_password_for_unknown_user(client):
    assert cli.main(["set-password", "ghost@example.com", "--password", "NewPassword1"]) == 1


def test_list_users(client, user_factory, capsys):
    user_factory("a@example.com")
    user_factory("b@example.com")

    assert cli.main(["list"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert [line.split("\t")[1] for line in lines] == ["a@example.com", "b@example.com"]


def test_admin_seed_is_idempotent(client, monkeypatch):
    from tenders_map.core import config
    from tenders_map.db.session import SessionLocal
    from tenders_map.main import seed_admin
    from tenders_map.models import User

    monkeypatch.setattr(config.settings, "admin_email", "Admin@Example.com")
    monkeypatch.setattr(config.settings, "admin_password", "AdminPass123!")

    with SessionLocal() as db:
        first = seed_admin(db)
        second = seed_admin(db)
        assert first.id == second.id
        assert db.query(User).count() == 1

    resp = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "AdminPass123!"})
    assert resp.status_code == 200
