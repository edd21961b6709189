"""Datasource registry capability used to translate between uids and names."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol

from .errors import RegistryLookupMiss


class DatasourceRegistry(Protocol):
    """Read-only lookups between datasource uids and display names."""

    def resolve_by_uid(self, uid: str) -> Optional[str]:
        ...

    def resolve_by_name(self, name: str) -> Optional[str]:
        ...


class InMemoryDatasourceRegistry:
    """Registry backed by a ``name -> uid`` mapping."""

    def __init__(self, datasources: Optional[Mapping[str, str]] = None) -> None:
        self._uid_by_name: Dict[str, str] = dict(datasources or {})
        self._name_by_uid: Dict[str, str] = {uid: name for name, uid in self._uid_by_name.items()}

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryDatasourceRegistry":
        """Load a ``{"<name>": "<uid>"}`` JSON document."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Datasource file {path} must contain a JSON object")
        return cls({str(name): str(uid) for name, uid in data.items()})

    def resolve_by_uid(self, uid: str) -> Optional[str]:
        return self._name_by_uid.get(uid)

    def resolve_by_name(self, name: str) -> Optional[str]:
        return self._uid_by_name.get(name)

    def get_name(self, uid: str) -> str:
        name = self.resolve_by_uid(uid)
        if name is None:
            raise RegistryLookupMiss(uid, "uid")
        return name

    def get_uid(self, name: str) -> str:
        uid = self.resolve_by_name(name)
        if uid is None:
            raise RegistryLookupMiss(name, "name")
        return uid

    def __len__(self) -> int:
        return len(self._uid_by_name)
