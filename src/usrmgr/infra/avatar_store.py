# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from pathlib import Path

from usrmgr.errors import StorageError


class AvatarStore:
    """Directory-backed blob store keyed by generated filename."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def ensure_dir(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def path(self, name: str) -> Path:
        n = str(name or "")
        if not n or "/" in n or "\\" in n or n in {".", ".."}:
            raise ValueError(f"Invalid avatar filename '{name}'")
        return self.directory / n

    def write(self, name: str, data: bytes) -> None:
        p = self.path(name)
        try:
            self.ensure_dir()
            p.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Could not write avatar '{name}': {e}") from e

    def delete(self, name: str) -> None:
        p = self.path(name)
        try:
            p.unlink()
        except OSError as e:
            raise StorageError(f"Could not delete avatar '{name}': {e}") from e

    def exists(self, name: str) -> bool:
        return self.path(name).is_file()
