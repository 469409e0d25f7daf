# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

DOB_FORMAT = "%Y-%m-%d"
DEFAULT_DOB = date(2001, 1, 1)
DEFAULT_BIO = "Bio goes here"


@dataclass(frozen=True)
class UserDraft:
    """A user not yet persisted. ``password_hash`` is already hashed."""

    email: str
    password_hash: str = field(repr=False)
    name: str
    category: int = 0
    dob: date = DEFAULT_DOB
    bio: str = DEFAULT_BIO
    avatar: str = ""


@dataclass(frozen=True)
class User:
    id: str
    email: str
    password_hash: str = field(repr=False)
    name: str
    category: int = 0
    dob: date = DEFAULT_DOB
    bio: str = ""
    avatar: str = ""

    @property
    def dob_formatted(self) -> str:
        return self.dob.strftime(DOB_FORMAT)


@dataclass(frozen=True)
class ProfileUpdate:
    name: str
    category: int
    dob: date
    bio: str
