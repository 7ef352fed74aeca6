"""Filter engine: one selector plus free-text search over resources and deployments.

Selectors are the strings a single filter dropdown produces:

    all | project:<id> | env:<name> | type:<tag> | status:active

Search runs after the selector and is a case-insensitive substring match
against a per-record field set.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from coolify_lens.deployments import is_active, resolve_environment_id
from coolify_lens.ids import first_id, normalize_id
from coolify_lens.models import RESOURCE_TYPES, Deployment, Project, ProjectEnvironment, ResourceItem
from coolify_lens.relations import UNNAMED_PROJECT, EnvironmentIndex

_PREFIXED_KINDS = ("project", "env", "type", "status")


@dataclass(frozen=True)
class Selector:
    kind: str  # all | project | env | type | status | unknown
    value: str = ""

    def __str__(self) -> str:
        if self.kind == "all":
            return "all"
        return f"{self.kind}:{self.value}"


ALL = Selector("all")


def parse_selector(text: str | None) -> Selector:
    """Parse a selector string. Anything unrecognized filters nothing out."""
    if text is None:
        return ALL
    raw = text.strip()
    if raw in ("", "all"):
        return ALL
    kind, sep, value = raw.partition(":")
    if sep and kind in _PREFIXED_KINDS:
        return Selector(kind, value)
    return Selector("unknown", raw)


def _as_selector(selector: Selector | str) -> Selector:
    return selector if isinstance(selector, Selector) else parse_selector(selector)


def _env_of(item: ResourceItem) -> str:
    return normalize_id(item.environment_id) or ""


def _resource_active(status: str | None) -> bool:
    # applications report "<state>:<health>", e.g. "running:healthy"
    return is_active((status or "").split(":", 1)[0])


def apply_filter(
    items: Sequence[ResourceItem],
    selector: Selector | str,
    env_to_project: Mapping[str, str],
    env_name_to_ids: Mapping[str, set[str]],
) -> list[ResourceItem]:
    """Apply one selector to the unified resource collection."""
    sel = _as_selector(selector)
    if sel.kind == "project":
        return [item for item in items if env_to_project.get(_env_of(item)) == sel.value]
    if sel.kind == "env":
        env_ids = env_name_to_ids.get(sel.value)
        if not env_ids:
            return []
        return [item for item in items if _env_of(item) in env_ids]
    if sel.kind == "type":
        return [item for item in items if item.type == sel.value]
    if sel.kind == "status" and sel.value == "active":
        return [item for item in items if _resource_active(item.status)]
    return list(items)


def apply_deployment_filter(
    items: Sequence[Deployment],
    selector: Selector | str,
    env_to_project: Mapping[str, str],
    env_name_to_ids: Mapping[str, set[str]],
    app_env_map: Mapping[str, str],
) -> list[Deployment]:
    """Apply one selector to deployments, attributing each to an environment first."""
    sel = _as_selector(selector)
    if sel.kind == "status" and sel.value == "active":
        return [d for d in items if is_active(d.status)]
    if sel.kind == "project":
        return [d for d in items if env_to_project.get(resolve_environment_id(d, app_env_map)) == sel.value]
    if sel.kind == "env":
        env_ids = env_name_to_ids.get(sel.value)
        if not env_ids:
            return []
        return [d for d in items if resolve_environment_id(d, app_env_map) in env_ids]
    return list(items)


def apply_filters(
    items: Sequence[ResourceItem],
    selectors: Iterable[Selector | str],
    env_to_project: Mapping[str, str],
    env_name_to_ids: Mapping[str, set[str]],
) -> list[ResourceItem]:
    """Narrow by several selectors at once (logical AND)."""
    result = list(items)
    for selector in selectors:
        result = apply_filter(result, selector, env_to_project, env_name_to_ids)
    return result


def _matches(fields: Iterable[Any], needle: str) -> bool:
    haystack = " ".join(str(f) for f in fields if f).lower()
    return needle in haystack


def search_resources(items: Iterable[ResourceItem], text: str | None) -> list[ResourceItem]:
    needle = (text or "").strip().lower()
    if not needle:
        return list(items)
    return [i for i in items if _matches((i.name, i.subtitle, i.repo, i.kind, i.type), needle)]


def search_deployments(items: Iterable[Deployment], text: str | None) -> list[Deployment]:
    needle = (text or "").strip().lower()
    if not needle:
        return list(items)
    return [d for d in items if _matches((d.application_name, d.commit_message, d.commit, d.status), needle)]


def search_environments(items: Iterable[ProjectEnvironment], text: str | None) -> list[ProjectEnvironment]:
    needle = (text or "").strip().lower()
    if not needle:
        return list(items)
    return [e for e in items if _matches((e.name, e.owner_name, e.uuid, e.id), needle)]


def filter_environments(items: Iterable[ProjectEnvironment], selector: Selector | str) -> list[ProjectEnvironment]:
    """Environments of one project; every other selector keeps them all."""
    sel = _as_selector(selector)
    if sel.kind != "project":
        return list(items)
    return [e for e in items if normalize_id(e.owner_id) == sel.value]


@dataclass(frozen=True)
class FilterOption:
    section: str
    title: str
    value: str


def filter_options(
    projects: Iterable[Project],
    index: EnvironmentIndex,
    include_types: bool = True,
    include_status: bool = False,
    all_title: str = "All Resources",
) -> list[FilterOption]:
    """The selector vocabulary for the current snapshot, in dropdown order."""
    options = [FilterOption("", all_title, "all")]
    if include_status:
        options.append(FilterOption("Status", "Active (Running/Queued/In Progress)", "status:active"))
    for project in projects:
        project_id = first_id(project, "id", "uuid")
        if not project_id:
            continue
        title = project.name if project.name is not None else UNNAMED_PROJECT
        options.append(FilterOption("Projects", title, f"project:{project_id}"))
    for name in index.names():
        options.append(FilterOption("Environments", name, f"env:{name}"))
    if include_types:
        for tag in RESOURCE_TYPES:
            options.append(FilterOption("Types", f"{tag.capitalize()}s", f"type:{tag}"))
    return options
