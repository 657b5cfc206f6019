"""JSON-based repository for warcouncil world snapshots."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import TypeAdapter

from warcouncil.services.world import WorldSnapshot

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class JsonWorldRepository:
    """Persist world snapshots as JSON files on disk."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._adapter: TypeAdapter[WorldSnapshot] = TypeAdapter(WorldSnapshot)

    def _path_for(self, name: str) -> Path:
        if not _NAME_PATTERN.match(name):
            raise ValueError(f"invalid snapshot name {name!r}")
        return self.base_path / f"world_{name}.json"

    def save(self, name: str, snapshot: WorldSnapshot) -> Path:
        """Serialize a snapshot to disk and return its path."""

        path = self._path_for(name)
        payload = self._adapter.dump_json(snapshot, indent=2)
        path.write_bytes(payload)
        return path

    def load(self, name: str) -> WorldSnapshot:
        """Load a previously saved snapshot; raises ``FileNotFoundError`` if absent."""

        path = self._path_for(name)
        data = path.read_bytes()
        return self._adapter.validate_json(data)

    def list_worlds(self) -> list[str]:
        """Return every snapshot name currently persisted, sorted."""

        prefix = "world_"
        suffix = ".json"
        names: list[str] = []
        for path in self.base_path.glob("world_*.json"):
            stem = path.name
            if stem.startswith(prefix) and stem.endswith(suffix):
                names.append(stem[len(prefix) : -len(suffix)])
        return sorted(names)

    def delete(self, name: str) -> None:
        """Remove a snapshot if it exists."""

        path = self._path_for(name)
        if path.exists():
            path.unlink()
