#!/usr/bin/env python3
from __future__ import annotations

import sys

from usrmgr.config import load_config
from usrmgr.errors import NotFoundError, StorageError
from usrmgr.infra.avatar_store import AvatarStore
from usrmgr.infra.db import make_engine
from usrmgr.infra.user_repo import UserRepository


def main() -> None:
    if len(sys.argv) != 2:
        raise SystemExit("Usage: delete_user.py <email>")
    cfg = load_config()
    users = UserRepository(make_engine(cfg.database_url))
    try:
        user = users.find_by_email(sys.argv[1].strip())
    except NotFoundError as e:
        raise SystemExit(str(e))

    users.delete(user.id)
    if user.avatar:
        try:
            AvatarStore(cfg.uploads_dir).delete(user.avatar)
        except StorageError as e:
            print(f"Warning: {e}")
    print(f"Deleted {user.id} <{user.email}>")


if __name__ == "__main__":
    main()
