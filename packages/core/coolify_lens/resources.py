"""Resource unifier: applications, services and databases as one collection."""

from __future__ import annotations

from collections.abc import Iterable

from coolify_lens.ids import first_id, first_present, normalize_id
from coolify_lens.models import Application, Database, ResourceItem, Service

SUBTITLE_SEPARATOR = " • "


def get_primary_url(fqdn: str | None) -> str | None:
    """First entry of a comma-separated fqdn list, as an absolute URL."""
    if not fqdn:
        return None
    raw = fqdn.split(",")[0].strip()
    if not raw:
        return None
    if raw.startswith(("http://", "https://")):
        return raw
    return f"https://{raw}"


def _item_id(record, fallback: str) -> str:
    value = first_present(record, "id", "uuid", "name")
    return str(value) if value is not None else fallback


def _env_ref(record) -> str:
    return first_id(record, "environment_id", "environment_uuid") or ""


def _uuid(record) -> str | None:
    return str(record.uuid) if record.uuid else None


def application_item(app: Application) -> ResourceItem:
    url = get_primary_url(app.fqdn)
    subtitle = SUBTITLE_SEPARATOR.join(part for part in (app.git_branch, url) if part)
    return ResourceItem(
        id=_item_id(app, "app"),
        uuid=_uuid(app),
        type="application",
        name=app.name if app.name is not None else "Unnamed Application",
        subtitle=subtitle,
        environment_id=_env_ref(app),
        repo=app.git_repository,
        url=url,
        status=first_present(app, "status", "deployment_status", "last_deployment_status"),
    )


def service_item(service: Service) -> ResourceItem:
    return ResourceItem(
        id=_item_id(service, "service"),
        uuid=_uuid(service),
        type="service",
        name=service.name if service.name is not None else "Unnamed Service",
        subtitle=service.description,
        environment_id=_env_ref(service),
        kind=service.service_type,
    )


def database_item(database: Database) -> ResourceItem:
    return ResourceItem(
        id=_item_id(database, "db"),
        uuid=_uuid(database),
        type="database",
        name=database.name if database.name is not None else "Unnamed Database",
        subtitle=database.description,
        environment_id=_env_ref(database),
        kind=database.db_type,
    )


def build_resources(
    applications: Iterable[Application],
    services: Iterable[Service],
    databases: Iterable[Database],
) -> list[ResourceItem]:
    """One ResourceItem per source record: applications, then services, then databases."""
    return [
        *(application_item(a) for a in applications),
        *(service_item(s) for s in services),
        *(database_item(d) for d in databases),
    ]


def resources_in_environment(
    items: Iterable[ResourceItem], env_id: str | int | None, env_uuid: str | None
) -> list[ResourceItem]:
    """Resources attached to one environment, matched by either of its identities."""
    keys = {k for k in (normalize_id(env_id), normalize_id(env_uuid)) if k}
    if not keys:
        return []
    return [item for item in items if normalize_id(item.environment_id) in keys]
