import pytest

from usrmgr.auth.passwords import hash_password, verify_password
from usrmgr.errors import MalformedHashError


def test_hash_is_not_plaintext_and_verifies():
    h = hash_password("correct horse")
    assert h != "correct horse"
    assert h.startswith("$argon2")
    assert verify_password(h, "correct horse") is True
    assert verify_password(h, "wrong") is False


def test_hashes_are_salted():
    assert hash_password("same") != hash_password("same")


def test_empty_inputs_do_not_verify():
    h = hash_password("pw")
    assert verify_password("", "pw") is False
    assert verify_password(h, "") is False


def test_empty_password_cannot_be_hashed():
    with pytest.raises(ValueError):
        hash_password("")


def test_malformed_hash_raises():
    with pytest.raises(MalformedHashError):
        verify_password("not-an-argon2-hash", "pw")
