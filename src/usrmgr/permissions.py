# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from fastapi import Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from usrmgr.auth.gate import Authenticated, AuthGate, Rejected
from usrmgr.models import User

LOGIN_URL = "/login"


class LoginRequired(Exception):
    """Raised by the auth dependencies; turned into a response by the app."""

    def __init__(self, rejection: Rejected, *, action: bool = False):
        self.rejection = rejection
        self.action = action
        super().__init__(rejection.reason)


def _gate(request: Request) -> AuthGate:
    return request.app.state.gate


def _resolve(request: Request, *, action: bool) -> User:
    result = _gate(request).resolve_current_user(request)
    if isinstance(result, Authenticated):
        return result.user
    raise LoginRequired(result, action=action)


def require_user(request: Request) -> User:
    """Dependency for pages: anonymous visitors are redirected to the login page."""
    return _resolve(request, action=False)


def require_user_action(request: Request) -> User:
    """Dependency for mutating actions: anonymous callers get a 401."""
    return _resolve(request, action=True)


def login_required_response(request: Request, exc: LoginRequired) -> Response:
    if exc.action:
        resp: Response = PlainTextResponse("User not logged in", status_code=401)
    else:
        resp = RedirectResponse(url=LOGIN_URL, status_code=303)
    if exc.rejection.clear_session:
        _gate(request).sessions.invalidate(resp)
    return resp
