# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from sqlalchemy.engine import Engine
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from usrmgr.auth.gate import Authenticated, AuthGate
from usrmgr.auth.session import SessionManager
from usrmgr.config import AppConfig, load_config
from usrmgr.errors import MalformedHashError, PersistenceError, StorageError, ValidationError
from usrmgr.infra.avatar_store import AvatarStore
from usrmgr.infra.db import init_db, make_engine
from usrmgr.infra.user_repo import UserRepository
from usrmgr.models import User
from usrmgr.permissions import LoginRequired, login_required_response, require_user, require_user_action
from usrmgr.services.account_service import AccountService, parse_category
from usrmgr.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def _render(request: Request, template_name: str, ctx: Optional[dict] = None, status_code: int = 200):
    """TemplateResponse wrapper injecting the request."""
    return templates.TemplateResponse(request, template_name, {"request": request, **(ctx or {})}, status_code=status_code)


def _errors(request: Request, messages) -> HTMLResponse:
    # 200 so htmx swaps the fragment into the form
    return _render(request, "_errors.html", {"errors": list(messages)})


def _hx_redirect(location: str) -> Response:
    return Response(status_code=204, headers={"HX-Location": location})


def _uploaded(form, field: str) -> Optional[UploadFile]:
    f = form.get(field)
    return f if isinstance(f, UploadFile) else None


# ------------------ Routes ------------------


def _register_routes(app: FastAPI) -> None:
    @app.get("/healthz")
    def healthz():
        return JSONResponse({"ok": True})

    @app.get("/", response_class=HTMLResponse)
    def home(request: Request, user: User = Depends(require_user)):
        return _render(request, "home.html", {"user": user})

    @app.get("/register", response_class=HTMLResponse)
    def register_get(request: Request):
        return _render(request, "register.html", {"user": None})

    @app.post("/register")
    def register_post(
        request: Request,
        name: str = Form(""),
        email: str = Form(""),
        password: str = Form(""),
        category: str = Form(""),
    ):
        accounts: AccountService = request.app.state.accounts
        try:
            accounts.register(name=name, email=email, password=password, category=parse_category(category))
        except ValidationError as e:
            return _errors(request, e.messages)
        return _hx_redirect("/login")

    @app.get("/login", response_class=HTMLResponse)
    def login_get(request: Request):
        gate: AuthGate = request.app.state.gate
        result = gate.resolve_current_user(request)
        if isinstance(result, Authenticated):
            return RedirectResponse(url="/", status_code=303)
        resp = _render(request, "login.html", {"user": None})
        if result.clear_session:
            gate.sessions.invalidate(resp)
        return resp

    @app.post("/login")
    def login_post(request: Request, email: str = Form(""), password: str = Form("")):
        accounts: AccountService = request.app.state.accounts
        resp = _hx_redirect("/")
        try:
            accounts.login(email=email, password=password, response=resp)
        except ValidationError as e:
            return _errors(request, e.messages)
        return resp

    @app.post("/logout")
    def logout_post(request: Request):
        resp = _hx_redirect("/login")
        request.app.state.sessions.invalidate(resp)
        return resp

    @app.get("/edit", response_class=HTMLResponse)
    def edit_get(request: Request, user: User = Depends(require_user)):
        return _render(request, "edit_profile.html", {"user": user})

    @app.post("/edit")
    def edit_post(
        request: Request,
        name: str = Form(""),
        bio: str = Form(""),
        dob: str = Form(""),
        user: User = Depends(require_user_action),
    ):
        profiles: ProfileService = request.app.state.profiles
        try:
            profiles.update_profile(user, name=name, bio=bio, dob=dob)
        except ValidationError as e:
            return _errors(request, e.messages)
        return _hx_redirect("/")

    @app.get("/avatar", response_class=HTMLResponse)
    def avatar_get(request: Request, user: User = Depends(require_user)):
        return _render(request, "upload_avatar.html", {"user": user})

    @app.post("/avatar")
    async def avatar_post(request: Request, user: User = Depends(require_user_action)):
        profiles: ProfileService = request.app.state.profiles
        form = await request.form()
        upload = _uploaded(form, "avatar")
        filename, content = None, None
        if upload is not None:
            # one byte past the limit is enough to reject
            content = await upload.read(profiles.max_avatar_bytes + 1)
            filename = upload.filename or ""
            await upload.close()
        try:
            # file write and UPDATE block; keep them off the event loop
            await run_in_threadpool(profiles.update_avatar, user, filename=filename, content=content)
        except ValidationError as e:
            return _errors(request, e.messages)
        return _hx_redirect("/")


def _server_error(request: Request, exc: Exception) -> Response:
    logger.exception("Request to %s failed", request.url.path, exc_info=exc)
    return PlainTextResponse("Internal Server Error", status_code=500)


def create_app(config: Optional[AppConfig] = None, *, engine: Optional[Engine] = None) -> FastAPI:
    """Build the application and its process-wide collaborators.

    The engine, signing secret and services are created once here and kept
    read-only on ``app.state``.
    """
    cfg = config or load_config()
    engine = engine or make_engine(cfg.database_url)
    init_db(engine)

    users = UserRepository(engine)
    sessions = SessionManager(
        cfg.secret_key,
        cookie_name=cfg.cookie_name,
        max_age=cfg.session_max_age,
        salt=cfg.session_salt,
        secure=cfg.cookie_secure,
    )
    avatars = AvatarStore(cfg.uploads_dir)
    avatars.ensure_dir()

    app = FastAPI(title="usrmgr")
    app.state.config = cfg
    app.state.users = users
    app.state.sessions = sessions
    app.state.gate = AuthGate(sessions, users)
    app.state.accounts = AccountService(users, sessions)
    app.state.profiles = ProfileService(users, avatars, max_avatar_bytes=cfg.max_avatar_bytes)

    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
    app.mount("/uploads", StaticFiles(directory=str(avatars.directory)), name="uploads")

    app.add_exception_handler(LoginRequired, login_required_response)
    for exc_type in (PersistenceError, StorageError, MalformedHashError):
        app.add_exception_handler(exc_type, _server_error)

    _register_routes(app)
    return app
