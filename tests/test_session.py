from types import SimpleNamespace

import pytest
from fastapi.responses import Response

from usrmgr.auth.session import SessionData, SessionManager

SECRET = "test-secret-key-for-testing-purposes-only"


def _request(cookies: dict):
    return SimpleNamespace(cookies=cookies)


def test_create_then_resolve_returns_user_id():
    mgr = SessionManager(SECRET)
    token = mgr.create("user-1")
    assert mgr.resolve(_request({mgr.cookie_name: token})) == "user-1"


def test_create_sets_http_only_cookie_with_three_hour_expiry():
    mgr = SessionManager(SECRET)
    resp = Response()
    token = mgr.create("user-1", resp)
    header = resp.headers["set-cookie"]
    assert header.startswith(f"{mgr.cookie_name}={token}")
    assert "HttpOnly" in header
    assert "Max-Age=10800" in header


def test_missing_cookie_resolves_to_none():
    mgr = SessionManager(SECRET)
    assert mgr.resolve(_request({})) is None


def test_tampered_token_is_rejected():
    mgr = SessionManager(SECRET)
    token = mgr.create("user-1")
    forged = token[:-2] + ("AA" if not token.endswith("AA") else "BB")
    assert mgr.resolve(_request({mgr.cookie_name: forged})) is None


def test_token_from_other_secret_is_rejected():
    token = SessionManager("another-secret").create("user-1")
    mgr = SessionManager(SECRET)
    assert mgr.resolve(_request({mgr.cookie_name: token})) is None


def test_expired_token_is_rejected():
    mgr = SessionManager(SECRET, max_age=-1)
    token = mgr.create("user-1")
    assert mgr.load(token) is None


@pytest.mark.parametrize("payload", [["user-1"], {"uid": 5}, {"uid": "  "}, {"user": "x"}, "user-1"])
def test_unexpected_payload_shape_fails_closed(payload):
    mgr = SessionManager(SECRET)
    token = mgr._serializer.dumps(payload)
    assert mgr.load(token) is None


def test_invalidate_expires_cookie_immediately():
    mgr = SessionManager(SECRET)
    resp = Response()
    mgr.invalidate(resp)
    header = resp.headers["set-cookie"].lower()
    assert header.startswith(mgr.cookie_name)
    assert "max-age=0" in header


def test_missing_secret_is_an_error():
    with pytest.raises(RuntimeError):
        SessionManager("")


def test_session_data_strips_user_id():
    assert SessionData.from_payload({"uid": " abc "}) == SessionData(user_id="abc")
