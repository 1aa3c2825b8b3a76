"""
Account provisioning.

Self-registration is off by default, so accounts are created here:

    tenders-map-users create jan@example.com
    tenders-map-users set-password jan@example.com
    tenders-map-users list
"""
from __future__ import annotations
import argparse
import getpass
import sys

from tenders_map.core.security import hash_password, normalize_email
from tenders_map.db.session import SessionLocal, init_models
from tenders_map.models.user import User

MIN_PASSWORD_LENGTH = 8


class ProvisioningError(Exception):
    pass


def _read_password(given: str | None) -> str:
    password = given if given is not None else getpass.getpass("Password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ProvisioningError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return password


def create_user(db, email: str, password: str) -> User:
    email = normalize_email(email)
    if "@" not in email:
        raise ProvisioningError(f"Not an email address: {email!r}")
    if db.query(User).filter(User.email == email).first():
        raise ProvisioningError(f"User {email} already exists")
    user = User(email=email, password_hash=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_password(db, email: str, password: str) -> User:
    email = normalize_email(email)
    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise ProvisioningError(f"User {email} not found")
    user.password_hash = hash_password(password)
    db.commit()
    return user


def list_users(db) -> list[User]:
    return db.query(User).order_by(User.id.asc()).all()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tenders-map-users", description="Manage map user accounts")
    sub = parser.add_subparsers(dest="command", required=True)

    p_create = sub.add_parser("create", help="create an account")
    p_create.add_argument("email")
    p_create.add_argument("--password", help="prompted for when omitted")

    p_pw = sub.add_parser("set-password", help="reset a password")
    p_pw.add_argument("email")
    p_pw.add_argument("--password", help="prompted for when omitted")

    sub.add_parser("list", help="list accounts")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    init_models()

    with SessionLocal() as db:
        try:
            if args.command == "create":
                user = create_user(db, args.email, _read_password(args.password))
                print(f"Created user {user.id} <{user.email}>")
            elif args.command == "set-password":
                user = set_password(db, args.email, _read_password(args.password))
                print(f"Password updated for <{user.email}>")
            else:
                for user in list_users(db):
                    print(f"{user.id}\t{user.email}\t{user.created_at:%Y-%m-%d %H:%M}")
        except ProvisioningError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
