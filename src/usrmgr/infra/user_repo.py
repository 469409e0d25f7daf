# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import uuid
from typing import Any, List

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from usrmgr.errors import DuplicateEmailError, NotFoundError, PersistenceError
from usrmgr.infra.db import users_table
from usrmgr.models import ProfileUpdate, User, UserDraft

_COLUMNS = (
    users_table.c.id,
    users_table.c.email,
    users_table.c.password,
    users_table.c.name,
    users_table.c.category,
    users_table.c.dob,
    users_table.c.bio,
    users_table.c.avatar,
)


def _row_to_user(row: Any) -> User:
    return User(
        id=str(row.id),
        email=row.email,
        password_hash=row.password,
        name=row.name,
        category=int(row.category or 0),
        dob=row.dob,
        bio=row.bio or "",
        avatar=row.avatar or "",
    )


def _is_email_conflict(err: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed: users.email"; postgres: "users_email_key"
    msg = str(err.orig or err).lower()
    return "email" in msg and ("unique" in msg or "duplicate" in msg)


class UserRepository:
    """Credential store over the single ``users`` table.

    Every database failure surfaces as ``PersistenceError``; reads are fully
    materialised before returning.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def _fetch_one(self, where, missing: str) -> User:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(select(*_COLUMNS).where(where)).first()
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e
        if row is None:
            raise NotFoundError(missing)
        return _row_to_user(row)

    def find_by_id(self, user_id: str) -> User:
        return self._fetch_one(users_table.c.id == str(user_id), f"No user with id '{user_id}'")

    def find_by_email(self, email: str) -> User:
        return self._fetch_one(users_table.c.email == email, f"No user with email '{email}'")

    def create(self, draft: UserDraft) -> User:
        user = User(
            id=str(uuid.uuid4()),
            email=draft.email,
            password_hash=draft.password_hash,
            name=draft.name,
            category=draft.category,
            dob=draft.dob,
            bio=draft.bio,
            avatar=draft.avatar,
        )
        stmt = insert(users_table).values(
            id=user.id,
            email=user.email,
            password=user.password_hash,
            name=user.name,
            category=user.category,
            dob=user.dob,
            bio=user.bio,
            avatar=user.avatar,
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(stmt)
        except IntegrityError as e:
            if _is_email_conflict(e):
                raise DuplicateEmailError(draft.email) from e
            raise PersistenceError(str(e)) from e
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e
        return user

    def _execute(self, stmt) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e

    def update_profile(self, user_id: str, profile: ProfileUpdate) -> None:
        # email, password and avatar are left untouched
        self._execute(
            update(users_table)
            .where(users_table.c.id == str(user_id))
            .values(name=profile.name, category=profile.category, dob=profile.dob, bio=profile.bio)
        )

    def update_avatar(self, user_id: str, avatar: str) -> None:
        self._execute(update(users_table).where(users_table.c.id == str(user_id)).values(avatar=avatar))

    def list_all(self) -> List[User]:
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(select(*_COLUMNS).order_by(users_table.c.email)).all()
            return [_row_to_user(r) for r in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e

    def delete(self, user_id: str) -> None:
        self._execute(delete(users_table).where(users_table.c.id == str(user_id)))
