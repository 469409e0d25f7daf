# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from fastapi import Request

from usrmgr.auth.session import SessionManager
from usrmgr.errors import NotFoundError
from usrmgr.infra.user_repo import UserRepository
from usrmgr.models import User

logger = logging.getLogger(__name__)

NO_SESSION = "no_session"
STALE_SESSION = "stale_session"


@dataclass(frozen=True)
class Authenticated:
    user: User


@dataclass(frozen=True)
class Rejected:
    reason: str

    @property
    def clear_session(self) -> bool:
        return self.reason == STALE_SESSION


AuthResult = Union[Authenticated, Rejected]


class AuthGate:
    """Resolve who is making a request.

    Returns a tagged result and never writes HTTP itself; see
    ``usrmgr.permissions`` for how rejections become responses.
    """

    def __init__(self, sessions: SessionManager, users: UserRepository):
        self.sessions = sessions
        self.users = users

    def resolve_current_user(self, request: Request) -> AuthResult:
        user_id = self.sessions.resolve(request)
        if not user_id:
            logger.debug("No valid session on %s", request.url.path)
            return Rejected(NO_SESSION)
        try:
            user = self.users.find_by_id(user_id)
        except NotFoundError:
            logger.info("Session references missing user %s, clearing it", user_id)
            return Rejected(STALE_SESSION)
        return Authenticated(user)
