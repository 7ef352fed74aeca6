"""Sort and bucket filtered resources by project, environment, type and name."""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass, field

from coolify_lens.ids import normalize_id
from coolify_lens.models import ResourceItem
from coolify_lens.relations import EnvironmentIndex

UNASSIGNED = "Unassigned"
UNKNOWN_ENVIRONMENT = "Unknown"

TYPE_ORDER: dict[str, int] = {"application": 1, "service": 2, "database": 3}


def type_order(resource_type: str) -> int:
    return TYPE_ORDER.get(resource_type, 99)


def collation_key(text: str) -> tuple[str, str]:
    """Case- and accent-insensitive ordering with a deterministic tie-break.

    "Émile" sorts with "emile", between "alpha" and "Zed", regardless of the
    process locale.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), text)


@dataclass
class ResourceEntry:
    item: ResourceItem
    project_name: str
    env_name: str


@dataclass
class ResourceGroup:
    project_name: str
    entries: list[ResourceEntry] = field(default_factory=list)


def _entry(item: ResourceItem, index: EnvironmentIndex) -> ResourceEntry:
    env_key = normalize_id(item.environment_id)
    env = index.get(env_key)
    project_name = env.owner_name if env and env.owner_name is not None else UNASSIGNED
    env_name = index.name_of(env_key)
    return ResourceEntry(
        item=item,
        project_name=project_name,
        env_name=env_name if env_name is not None else UNKNOWN_ENVIRONMENT,
    )


def _sort_key(entry: ResourceEntry):
    return (
        collation_key(entry.project_name),
        collation_key(entry.env_name),
        type_order(entry.item.type),
        collation_key(entry.item.name),
    )


def sort_resources(items: Iterable[ResourceItem], index: EnvironmentIndex) -> list[ResourceEntry]:
    return sorted((_entry(item, index) for item in items), key=_sort_key)


def group_resources(items: Iterable[ResourceItem], index: EnvironmentIndex) -> list[ResourceGroup]:
    """Bucket sorted resources by project name, keeping the sort order inside each bucket."""
    groups: dict[str, ResourceGroup] = {}
    for entry in sort_resources(items, index):
        group = groups.get(entry.project_name)
        if group is None:
            group = groups[entry.project_name] = ResourceGroup(project_name=entry.project_name)
        group.entries.append(entry)
    return list(groups.values())
