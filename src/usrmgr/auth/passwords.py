# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from argon2 import PasswordHasher
from argon2 import exceptions as argon2_exc

from usrmgr.errors import HashingError, MalformedHashError

_PH = PasswordHasher()


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Password is empty")
    try:
        return _PH.hash(plain)
    except argon2_exc.HashingError as e:
        raise HashingError(str(e)) from e


def verify_password(hash_value: str, plain: str) -> bool:
    """Constant-time check of ``plain`` against an argon2 hash.

    A mismatch is ``False``; only a hash argon2 cannot parse raises.
    """
    if not hash_value or not plain:
        return False
    try:
        return _PH.verify(hash_value, plain)
    except argon2_exc.VerifyMismatchError:
        return False
    except argon2_exc.InvalidHashError as e:
        raise MalformedHashError("Stored password hash is not a valid argon2 hash") from e
