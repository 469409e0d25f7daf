# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import Response

from usrmgr.auth.passwords import hash_password, verify_password
from usrmgr.auth.session import SessionManager
from usrmgr.errors import HashingError, NotFoundError, PersistenceError, ValidationError
from usrmgr.infra.user_repo import UserRepository
from usrmgr.models import DEFAULT_BIO, DEFAULT_DOB, User, UserDraft

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def parse_category(value: object) -> int:
    """Numeric category from a form value; anything unparseable is 0."""
    try:
        return int(str(value or "").strip())
    except ValueError:
        return 0


class AccountService:
    def __init__(self, users: UserRepository, sessions: SessionManager):
        self.users = users
        self.sessions = sessions

    def register(self, *, name: str, email: str, password: str, category: int = 0) -> User:
        name = (name or "").strip()
        email = (email or "").strip()
        password = password or ""

        errors: List[str] = []
        if not name:
            errors.append("Name is required")
        if not email:
            errors.append("Email is required")
        if not password:
            errors.append("Password is required")
        if errors:
            raise ValidationError(errors)

        try:
            password_hash = hash_password(password)
        except HashingError as e:
            logger.error("Password hashing failed: %s", e)
            raise ValidationError(["Failed to hash password"]) from e

        draft = UserDraft(
            email=email,
            password_hash=password_hash,
            name=name,
            category=int(category or 0),
            dob=DEFAULT_DOB,
            bio=DEFAULT_BIO,
            avatar="",
        )
        try:
            return self.users.create(draft)
        except PersistenceError as e:
            logger.error("Could not create user %s: %s", email, e)
            raise ValidationError(["Failed to create user"]) from e

    def login(self, *, email: str, password: str, response: Optional[Response] = None) -> str:
        """Check credentials and issue a session token.

        Unknown email and wrong password produce the same message.
        """
        email = (email or "").strip()
        password = password or ""

        errors: List[str] = []
        if not email:
            errors.append("Email is required")
        if not password:
            errors.append("Password is required")
        if errors:
            raise ValidationError(errors)

        try:
            user = self.users.find_by_email(email)
        except NotFoundError:
            raise ValidationError([INVALID_CREDENTIALS]) from None

        if not verify_password(user.password_hash, password):
            raise ValidationError([INVALID_CREDENTIALS])

        return self.sessions.create(user.id, response)
