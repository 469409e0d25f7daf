from types import SimpleNamespace

from usrmgr.auth.gate import NO_SESSION, STALE_SESSION, Authenticated, AuthGate, Rejected


def _request(cookies: dict):
    return SimpleNamespace(cookies=cookies, url=SimpleNamespace(path="/"))


def test_valid_session_resolves_user(users, sessions, make_user):
    u = make_user()
    gate = AuthGate(sessions, users)
    result = gate.resolve_current_user(_request({sessions.cookie_name: sessions.create(u.id)}))
    assert result == Authenticated(u)


def test_no_session_is_rejected(users, sessions):
    result = AuthGate(sessions, users).resolve_current_user(_request({}))
    assert result == Rejected(NO_SESSION)
    assert result.clear_session is False


def test_session_for_deleted_user_is_stale(users, sessions, make_user):
    u = make_user()
    token = sessions.create(u.id)
    users.delete(u.id)

    result = AuthGate(sessions, users).resolve_current_user(_request({sessions.cookie_name: token}))
    assert isinstance(result, Rejected)
    assert result.reason == STALE_SESSION
    assert result.clear_session is True
