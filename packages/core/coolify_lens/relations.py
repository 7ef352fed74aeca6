"""Environment relationship builder: joins environments to their projects.

Resources point at environments by numeric id on some endpoints and by UUID
on others, so every lookup map is keyed redundantly by both. Maps are plain
key overwrite: when two environments claim the same key, the later one in
iteration order wins. ``find_collisions`` reports such keys without
changing that behaviour.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from coolify_lens.ids import first_id, id_keys, normalize_id
from coolify_lens.models import Environment, Project, ProjectEnvironment

logger = logging.getLogger(__name__)

UNNAMED_PROJECT = "Unnamed Project"
UNNAMED_ENVIRONMENT = "Unnamed Environment"


def _join(env: Environment, owner_id: str | None, owner_name: str, owner_uuid: str | None) -> ProjectEnvironment:
    data = env.model_dump()
    for alias in ("projectId", "projectName", "projectUuid"):
        data.pop(alias, None)
    data.update(owner_id=owner_id, owner_name=owner_name, owner_uuid=owner_uuid)
    return ProjectEnvironment.model_validate(data)


def flatten_environments(projects: Iterable[Project]) -> list[ProjectEnvironment]:
    """Flatten nested project -> environments into joined environment records.

    The owning project's identity (id, else uuid) wins over the environment's
    own ``project_id``/``project_uuid`` fields.
    """
    items: list[ProjectEnvironment] = []
    for project in projects:
        project_key = first_id(project, "id", "uuid")
        owner_uuid = normalize_id(project.uuid)
        owner_name = project.name if project.name is not None else UNNAMED_PROJECT
        for env in project.environments:
            owner_id = project_key or first_id(env, "project_id", "project_uuid")
            items.append(_join(env, owner_id, owner_name, owner_uuid))
    return items


def tag_environments(project: Project, environments: Iterable[Environment]) -> list[ProjectEnvironment]:
    """Tag a flat environment list fetched under ``project`` with its owner."""
    project_key = first_id(project, "id", "uuid")
    owner_uuid = normalize_id(project.uuid)
    owner_name = project.name if project.name is not None else UNNAMED_PROJECT
    return [
        _join(env, project_key or first_id(env, "project_id", "project_uuid"), owner_name, owner_uuid)
        for env in environments
    ]


def _env_name(env: Environment) -> str:
    return env.name if env.name is not None else UNNAMED_ENVIRONMENT


def build_env_to_project_map(envs: Iterable[ProjectEnvironment]) -> dict[str, str]:
    result: dict[str, str] = {}
    for env in envs:
        project_id = first_id(env, "owner_id", "project_uuid", "project_id")
        if not project_id:
            continue
        for key in id_keys(env):
            result[key] = project_id
    return result


def build_env_name_map(envs: Iterable[ProjectEnvironment]) -> dict[str, str]:
    result: dict[str, str] = {}
    for env in envs:
        for key in id_keys(env):
            result[key] = _env_name(env)
    return result


def build_env_lookup(envs: Iterable[ProjectEnvironment]) -> dict[str, ProjectEnvironment]:
    result: dict[str, ProjectEnvironment] = {}
    for env in envs:
        for key in id_keys(env):
            result[key] = env
    return result


def build_env_name_to_ids_map(envs: Iterable[ProjectEnvironment]) -> dict[str, set[str]]:
    """Display name -> every id and uuid registered under that name.

    Environments in different projects often share a name ("production"),
    so one name maps to the keys of all of them.
    """
    result: dict[str, set[str]] = {}
    for env in envs:
        keys = id_keys(env)
        if not keys:
            continue
        result.setdefault(_env_name(env), set()).update(keys)
    return result


def find_collisions(envs: Iterable[ProjectEnvironment]) -> list[str]:
    """Keys claimed by more than one distinct environment, in first-seen order."""
    owners: dict[str, tuple[str | None, str | None]] = {}
    collisions: list[str] = []
    for env in envs:
        identity = (normalize_id(env.id), normalize_id(env.uuid))
        for key in id_keys(env):
            seen = owners.setdefault(key, identity)
            if seen != identity and key not in collisions:
                collisions.append(key)
    return collisions


@dataclass(frozen=True)
class EnvironmentIndex:
    """The four environment lookup maps, rebuilt from scratch per snapshot."""

    env_to_project: dict[str, str] = field(default_factory=dict)
    env_names: dict[str, str] = field(default_factory=dict)
    env_lookup: dict[str, ProjectEnvironment] = field(default_factory=dict)
    env_name_to_ids: dict[str, set[str]] = field(default_factory=dict)

    @classmethod
    def build(cls, envs: Iterable[ProjectEnvironment]) -> EnvironmentIndex:
        envs = list(envs)
        collisions = find_collisions(envs)
        if collisions:
            logger.debug("Environment keys with more than one owner (last one wins): %s", ", ".join(collisions))
        return cls(
            env_to_project=build_env_to_project_map(envs),
            env_names=build_env_name_map(envs),
            env_lookup=build_env_lookup(envs),
            env_name_to_ids=build_env_name_to_ids_map(envs),
        )

    def get(self, env_key: str | None) -> ProjectEnvironment | None:
        return self.env_lookup.get(env_key or "")

    def project_of(self, env_key: str | None) -> str | None:
        return self.env_to_project.get(env_key or "")

    def name_of(self, env_key: str | None) -> str | None:
        return self.env_names.get(env_key or "")

    def ids_named(self, name: str) -> frozenset[str]:
        return frozenset(self.env_name_to_ids.get(name, ()))

    def names(self) -> list[str]:
        return list(self.env_name_to_ids)
