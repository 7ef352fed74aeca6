"""Snapshot: the already-deserialized collections one view is computed from."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from coolify_lens.deployments import normalize_list
from coolify_lens.models import (
    Application,
    Database,
    Deployment,
    Project,
    ProjectEnvironment,
    Service,
    parse_records,
)
from coolify_lens.relations import flatten_environments

_COLLECTIONS: dict[str, type[BaseModel]] = {
    "projects": Project,
    "environments": ProjectEnvironment,
    "applications": Application,
    "services": Service,
    "databases": Database,
    "deployments": Deployment,
}


class Snapshot(BaseModel):
    """Input collections for one engine invocation.

    ``environments`` holds environments fetched per project and already tagged
    with their owner; environments nested inside ``projects`` are flattened
    in as well.
    """

    projects: list[Project] = Field(default_factory=list)
    environments: list[ProjectEnvironment] = Field(default_factory=list)
    applications: list[Application] = Field(default_factory=list)
    services: list[Service] = Field(default_factory=list)
    databases: list[Database] = Field(default_factory=list)
    deployments: list[Deployment] = Field(default_factory=list)

    def project_environments(self) -> list[ProjectEnvironment]:
        # Tagged per-project fetches come last so they win key collisions.
        return [*flatten_environments(self.projects), *self.environments]

    @classmethod
    def from_dict(cls, data: Any) -> Snapshot:
        """Build a snapshot from raw API payloads of any recognized list shape."""
        if not isinstance(data, dict):
            return cls()
        return cls(**{key: parse_records(model, normalize_list(data.get(key))) for key, model in _COLLECTIONS.items()})

    @classmethod
    def from_file(cls, path: str | Path) -> Snapshot:
        p = Path(path)
        text = p.read_text()
        if p.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            try:
                data = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON in {p.name}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Snapshot file {p.name} must contain an object of collections")
        return cls.from_dict(data)
