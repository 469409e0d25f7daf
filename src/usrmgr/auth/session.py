# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Request, Response
from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

from usrmgr.config import DEFAULT_SESSION_MAX_AGE


@dataclass(frozen=True)
class SessionData:
    user_id: str

    @classmethod
    def from_payload(cls, data: Any) -> Optional["SessionData"]:
        if not isinstance(data, dict):
            return None
        uid = data.get("uid")
        if not isinstance(uid, str) or not uid.strip():
            return None
        return cls(user_id=uid.strip())


class SessionManager:
    """Signed session cookie bound to a user id.

    The cookie payload is ``{"uid": <user id>}``; it is only trusted after the
    signature and the age check pass.
    """

    def __init__(
        self,
        secret: Optional[str],
        *,
        cookie_name: str = "logged-in-user",
        max_age: int = DEFAULT_SESSION_MAX_AGE,
        salt: str = "usrmgr.session.v1",
        secure: bool = False,
    ):
        if not secret:
            raise RuntimeError("Missing SECRET_KEY (or USRMGR_SECRET_KEY) in environment")
        self._serializer = URLSafeTimedSerializer(secret_key=secret, salt=salt)
        self.cookie_name = cookie_name
        self.max_age = int(max_age)
        self.secure = secure

    def _cookie_kwargs(self) -> dict:
        return {"httponly": True, "samesite": "lax", "secure": self.secure, "path": "/"}

    def create(self, user_id: str, response: Optional[Response] = None) -> str:
        token = self._serializer.dumps({"uid": str(user_id)})
        if response is not None:
            response.set_cookie(self.cookie_name, token, max_age=self.max_age, **self._cookie_kwargs())
        return token

    def load(self, token: Optional[str]) -> Optional[SessionData]:
        if not token:
            return None
        try:
            data = self._serializer.loads(token, max_age=self.max_age)
        except (BadSignature, BadTimeSignature):
            return None
        return SessionData.from_payload(data)

    def resolve(self, request: Request) -> Optional[str]:
        sess = self.load(request.cookies.get(self.cookie_name, ""))
        return sess.user_id if sess else None

    def invalidate(self, response: Response) -> None:
        response.set_cookie(self.cookie_name, "", max_age=0, **self._cookie_kwargs())
