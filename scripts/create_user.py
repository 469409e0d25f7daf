#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from usrmgr.config import load_config
from usrmgr.errors import ValidationError
from usrmgr.infra.db import init_db, make_engine
from usrmgr.infra.user_repo import UserRepository
from usrmgr.auth.passwords import hash_password
from usrmgr.models import DEFAULT_BIO, DEFAULT_DOB, UserDraft
from usrmgr.services.account_service import parse_category


def main() -> None:
    engine = make_engine(load_config().database_url)
    init_db(engine)
    users = UserRepository(engine)

    name = input("Name: ").strip()
    email = input("Email: ").strip()
    category = parse_category(input("Category [0]: "))

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")
    if not (name and email and pw1):
        raise SystemExit("Name, email and password are required")

    draft = UserDraft(
        email=email,
        password_hash=hash_password(pw1),
        name=name,
        category=category,
        dob=DEFAULT_DOB,
        bio=DEFAULT_BIO,
    )
    try:
        user = users.create(draft)
    except ValidationError as e:
        raise SystemExit("; ".join(e.messages))
    print(f"OK -> {user.id} <{user.email}>")


if __name__ == "__main__":
    main()
