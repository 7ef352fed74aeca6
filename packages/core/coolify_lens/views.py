"""View models: the full correlation pipeline from a Snapshot to rendered rows.

    snapshot -> environment index -> unified resources -> filter -> search
             -> sort/group -> URLs

The instance URL is an explicit argument; nothing here reads configuration
or touches the network.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

from coolify_lens.deployments import (
    build_app_env_map,
    build_app_lookup,
    deployment_key,
    format_status,
    is_active,
    resolve_app_key,
    resolve_environment_id,
    resolve_pr_url,
    resolve_repo_url,
    sort_deployments,
)
from coolify_lens.filters import (
    Selector,
    apply_deployment_filter,
    apply_filter,
    apply_filters,
    filter_environments,
    search_deployments,
    search_environments,
    search_resources,
)
from coolify_lens.grouping import group_resources
from coolify_lens.ids import first_present, normalize_id
from coolify_lens.models import ProjectEnvironment
from coolify_lens.relations import UNNAMED_ENVIRONMENT, EnvironmentIndex
from coolify_lens.resources import build_resources, resources_in_environment
from coolify_lens.snapshot import Snapshot
from coolify_lens.urls import (
    DEFAULT_BASE_URL,
    application_url,
    console_logs_url,
    deployment_url,
    environment_url,
    get_instance_url,
    resolve_deploy_url,
    resolve_logs_url,
    resource_url,
)

DEFAULT_INSTANCE_URL = get_instance_url(DEFAULT_BASE_URL)

SelectorArg = Selector | str | Sequence[Selector | str]


@dataclass
class ResourceRow:
    id: str
    type: str
    name: str
    project_name: str
    env_name: str
    uuid: str | None = None
    subtitle: str | None = None
    kind: str | None = None
    status: str | None = None
    url: str | None = None
    repo: str | None = None
    resource_url: str | None = None
    environment_url: str = ""
    console_logs_url: str | None = None


@dataclass
class ResourceGroupView:
    project_name: str
    rows: list[ResourceRow] = field(default_factory=list)


@dataclass
class ResourceView:
    selector: str
    search: str
    total: int
    matched: int
    groups: list[ResourceGroupView] = field(default_factory=list)

    @property
    def rows(self) -> list[ResourceRow]:
        return [row for group in self.groups for row in group.rows]

    def to_dict(self) -> dict[str, Any]:
        return {
            "selector": self.selector,
            "search": self.search,
            "total": self.total,
            "matched": self.matched,
            "groups": [{"project_name": g.project_name, "rows": [asdict(r) for r in g.rows]} for g in self.groups],
        }


@dataclass
class DeploymentRow:
    key: str | None
    application_name: str | None
    status: str
    status_label: str
    project_name: str
    env_name: str
    created_at: str | None = None
    commit: str | None = None
    commit_message: str | None = None
    branch: str | None = None
    application_uuid: str | None = None
    deployment_url: str | None = None
    console_logs_url: str | None = None
    environment_url: str = ""
    application_url: str = ""
    deploy_url: str | None = None
    logs_url: str | None = None
    repo_url: str | None = None
    pr_url: str | None = None
    can_cancel: bool = False


@dataclass
class DeploymentView:
    selector: str
    search: str
    total: int
    rows: list[DeploymentRow] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "selector": self.selector,
            "search": self.search,
            "total": self.total,
            "matched": len(self.rows),
            "rows": [asdict(r) for r in self.rows],
        }


@dataclass
class EnvironmentRow:
    name: str
    project_name: str
    id: str | None
    uuid: str | None
    environment_url: str
    resource_count: int = 0


@dataclass
class EnvironmentView:
    selector: str
    search: str
    total: int
    rows: list[EnvironmentRow] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "selector": self.selector,
            "search": self.search,
            "total": self.total,
            "matched": len(self.rows),
            "rows": [asdict(r) for r in self.rows],
        }


def _selector_label(selector: SelectorArg) -> str:
    if isinstance(selector, (str, Selector)):
        return str(selector)
    return ",".join(str(s) for s in selector) or "all"


def build_resource_view(
    snapshot: Snapshot,
    selector: SelectorArg = "all",
    search: str = "",
    instance_url: str = DEFAULT_INSTANCE_URL,
) -> ResourceView:
    index = EnvironmentIndex.build(snapshot.project_environments())
    resources = build_resources(snapshot.applications, snapshot.services, snapshot.databases)

    if isinstance(selector, (str, Selector)):
        filtered = apply_filter(resources, selector, index.env_to_project, index.env_name_to_ids)
    else:
        filtered = apply_filters(resources, selector, index.env_to_project, index.env_name_to_ids)
    matched = search_resources(filtered, search)

    view = ResourceView(selector=_selector_label(selector), search=search, total=len(resources), matched=len(matched))
    for group in group_resources(matched, index):
        group_view = ResourceGroupView(project_name=group.project_name)
        for entry in group.entries:
            item = entry.item
            env = index.get(normalize_id(item.environment_id))
            project_uuid = env.owner_uuid if env else None
            env_uuid = env.uuid if env else None
            group_view.rows.append(
                ResourceRow(
                    id=item.id,
                    type=item.type,
                    name=item.name,
                    project_name=entry.project_name,
                    env_name=entry.env_name,
                    uuid=item.uuid,
                    subtitle=item.subtitle,
                    kind=item.kind,
                    status=item.status,
                    url=item.url,
                    repo=item.repo,
                    resource_url=resource_url(instance_url, project_uuid, env_uuid, item.uuid, item.type),
                    environment_url=environment_url(instance_url, project_uuid, env_uuid) or instance_url,
                    console_logs_url=(
                        console_logs_url(instance_url, project_uuid, env_uuid, item.uuid)
                        if item.type == "application"
                        else None
                    ),
                )
            )
        view.groups.append(group_view)
    return view


def build_deployment_view(
    snapshot: Snapshot,
    selector: Selector | str = "all",
    search: str = "",
    instance_url: str = DEFAULT_INSTANCE_URL,
) -> DeploymentView:
    index = EnvironmentIndex.build(snapshot.project_environments())
    app_env_map = build_app_env_map(snapshot.applications)
    apps = build_app_lookup(snapshot.applications)

    filtered = apply_deployment_filter(
        snapshot.deployments, selector, index.env_to_project, index.env_name_to_ids, app_env_map
    )
    matched = search_deployments(sort_deployments(filtered), search)

    view = DeploymentView(selector=str(selector), search=search, total=len(snapshot.deployments))
    for deployment in matched:
        app_key = resolve_app_key(deployment)
        app = apps.get(app_key)
        env_id = resolve_environment_id(deployment, app_env_map, app_key)
        env = index.get(env_id)
        project_uuid = env.owner_uuid if env else None
        env_uuid = env.uuid if env else None
        app_uuid = first_present(app, "uuid") or first_present(deployment, "source_app_uuid", "application_uuid")
        env_link = environment_url(instance_url, project_uuid, env_uuid) or instance_url
        status = deployment.status or "unknown"
        view.rows.append(
            DeploymentRow(
                key=deployment_key(deployment),
                application_name=deployment.application_name or (app.name if app else None),
                status=status,
                status_label=format_status(deployment.status),
                project_name=(env.owner_name or "") if env else "",
                env_name=index.name_of(env_id) or "",
                created_at=deployment.created_at,
                commit=deployment.commit,
                commit_message=deployment.commit_message,
                branch=app.git_branch if app else None,
                application_uuid=app_uuid,
                deployment_url=deployment_url(
                    instance_url, project_uuid, env_uuid, app_uuid, deployment.deployment_uuid
                ),
                console_logs_url=console_logs_url(instance_url, project_uuid, env_uuid, app_uuid),
                environment_url=env_link,
                application_url=application_url(instance_url, project_uuid, env_uuid, app_uuid) or env_link,
                deploy_url=resolve_deploy_url(deployment.deployment_url, instance_url),
                logs_url=resolve_logs_url(deployment.logs, instance_url),
                repo_url=resolve_repo_url(deployment),
                pr_url=resolve_pr_url(deployment),
                can_cancel=bool(deployment.deployment_uuid) and is_active(status),
            )
        )
    return view


def _unique(envs: list[ProjectEnvironment]) -> list[ProjectEnvironment]:
    # Same environment seen nested and per-project: keep one row, latest data.
    seen: dict[tuple[str | None, str | None], ProjectEnvironment] = {}
    for env in envs:
        seen[(normalize_id(env.id), normalize_id(env.uuid))] = env
    return list(seen.values())


def build_environment_view(
    snapshot: Snapshot,
    selector: Selector | str = "all",
    search: str = "",
    instance_url: str = DEFAULT_INSTANCE_URL,
) -> EnvironmentView:
    envs = _unique(snapshot.project_environments())
    resources = build_resources(snapshot.applications, snapshot.services, snapshot.databases)
    matched = search_environments(filter_environments(envs, selector), search)

    view = EnvironmentView(selector=str(selector), search=search, total=len(envs))
    for env in matched:
        view.rows.append(
            EnvironmentRow(
                name=env.name if env.name is not None else UNNAMED_ENVIRONMENT,
                project_name=env.owner_name or "",
                id=normalize_id(env.id),
                uuid=env.uuid,
                environment_url=environment_url(instance_url, env.owner_uuid, env.uuid) or instance_url,
                resource_count=len(resources_in_environment(resources, env.id, env.uuid)),
            )
        )
    return view
