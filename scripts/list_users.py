#!/usr/bin/env python3
from __future__ import annotations

from usrmgr.config import load_config
from usrmgr.infra.db import make_engine
from usrmgr.infra.user_repo import UserRepository


def main() -> None:
    users = UserRepository(make_engine(load_config().database_url))
    for u in users.list_all():
        print(f"{u.id}\t{u.email}\t{u.name}\tcategory={u.category}\tavatar={u.avatar or '-'}")


if __name__ == "__main__":
    main()
