# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by the store, the services and the web layer."""

from __future__ import annotations

from typing import Iterable, List


class ValidationError(ValueError):
    """User input problem. Always carries the full list of messages."""

    def __init__(self, messages: Iterable[str]):
        self.messages: List[str] = [str(m) for m in messages]
        super().__init__("; ".join(self.messages))


class DuplicateEmailError(ValidationError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(["Failed to create user: email already registered"])


class NotFoundError(LookupError):
    pass


class PersistenceError(RuntimeError):
    pass


class StorageError(OSError):
    pass


class HashingError(RuntimeError):
    pass


class MalformedHashError(ValueError):
    pass
