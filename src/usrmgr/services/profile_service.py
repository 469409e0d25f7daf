# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import re
import uuid
from datetime import date, datetime
from pathlib import PurePath
from typing import List, Optional

from usrmgr.config import DEFAULT_MAX_AVATAR_BYTES
from usrmgr.errors import StorageError, ValidationError
from usrmgr.infra.avatar_store import AvatarStore
from usrmgr.infra.user_repo import UserRepository
from usrmgr.models import DOB_FORMAT, ProfileUpdate, User

logger = logging.getLogger(__name__)

AVATAR_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}
_EXT_RE = re.compile(r"^\.[a-z0-9]{1,10}$")


def parse_dob(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` date. Raises ``ValueError`` otherwise."""
    s = str(value or "").strip()
    if len(s) != 10:
        raise ValueError(f"'{value}' is not a YYYY-MM-DD date")
    return datetime.strptime(s, DOB_FORMAT).date()


def avatar_extension(original: str) -> str:
    """Lower-cased extension of an upload name, or "" when it is not a plain one."""
    ext = PurePath(str(original or "")).suffix.lower()
    return ext if _EXT_RE.match(ext) else ""


def avatar_filename(original: str) -> str:
    """Fresh unique filename keeping only the extension of the upload."""
    return uuid.uuid4().hex + avatar_extension(original)


class ProfileService:
    """Profile and avatar mutations for the authenticated user.

    Every operation takes the user resolved by the auth gate and only ever
    writes that user's row.
    """

    def __init__(self, users: UserRepository, avatars: AvatarStore, *, max_avatar_bytes: int = DEFAULT_MAX_AVATAR_BYTES):
        self.users = users
        self.avatars = avatars
        self.max_avatar_bytes = int(max_avatar_bytes)

    def update_profile(self, current_user: User, *, name: str, bio: str, dob: str) -> None:
        name = (name or "").strip()
        dob_raw = (dob or "").strip()

        errors: List[str] = []
        if not name:
            errors.append("Name is required")
        if not dob_raw:
            errors.append("Date of Birth is required")

        parsed: Optional[date] = None
        if dob_raw:
            try:
                parsed = parse_dob(dob_raw)
            except ValueError:
                errors.append("Invalid date format")

        if errors:
            raise ValidationError(errors)

        self.users.update_profile(
            current_user.id,
            ProfileUpdate(name=name, category=current_user.category, dob=parsed, bio=bio or ""),
        )

    def update_avatar(self, current_user: User, *, filename: Optional[str], content: Optional[bytes]) -> str:
        """Store a new avatar and drop the previous file. Returns the new name."""
        if not filename and not content:
            raise ValidationError(["No file Submitted"])
        data = content or b""
        if len(data) > self.max_avatar_bytes:
            raise ValidationError(["File exceeds the 10 MB limit"])
        if avatar_extension(filename or "") not in AVATAR_EXTENSIONS:
            raise ValidationError(["Unsupported file type, use PNG, JPEG, GIF or WebP"])

        new_name = avatar_filename(filename or "")
        self.avatars.write(new_name, data)

        try:
            self.users.update_avatar(current_user.id, new_name)
        except Exception:
            self._discard(new_name)
            raise

        old_name = current_user.avatar
        if old_name and old_name != new_name:
            self._discard(old_name)
        return new_name

    def _discard(self, name: str) -> None:
        try:
            self.avatars.delete(name)
        except (StorageError, ValueError) as e:
            logger.warning("Failed to delete avatar file %s: %s", name, e)
