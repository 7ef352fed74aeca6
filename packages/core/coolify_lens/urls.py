"""Canonical UI URLs for projects, environments, resources and deployments.

Every builder is all-or-nothing: if any identifying UUID is missing it
returns None instead of a partial URL.
"""

from __future__ import annotations

import re

DEFAULT_BASE_URL = "https://app.coolify.io/api/v1"

_API_SUFFIX = "/api/v1"


def normalize_base_url(value: str | None) -> str:
    """API base URL from user input: trailing slashes dropped, ``/api/v1`` ensured."""
    trimmed = (value or "").strip().rstrip("/")
    if not trimmed:
        return DEFAULT_BASE_URL
    if trimmed.endswith(_API_SUFFIX):
        return trimmed
    return f"{trimmed}{_API_SUFFIX}"


def get_instance_url(base_url: str) -> str:
    return re.sub(r"/api/v1$", "", base_url)


def _base(instance_url: str) -> str:
    return instance_url.rstrip("/")


def _all_present(*values: str | None) -> bool:
    return all(values)


def environment_url(instance_url: str, project_uuid: str | None, environment_uuid: str | None) -> str | None:
    if not _all_present(project_uuid, environment_uuid):
        return None
    return f"{_base(instance_url)}/project/{project_uuid}/environment/{environment_uuid}"


def resource_url(
    instance_url: str,
    project_uuid: str | None,
    environment_uuid: str | None,
    resource_uuid: str | None,
    resource_type: str,
) -> str | None:
    if not _all_present(project_uuid, environment_uuid, resource_uuid):
        return None
    env = environment_url(instance_url, project_uuid, environment_uuid)
    return f"{env}/{resource_type}/{resource_uuid}"


def application_url(
    instance_url: str,
    project_uuid: str | None,
    environment_uuid: str | None,
    application_uuid: str | None,
) -> str | None:
    return resource_url(instance_url, project_uuid, environment_uuid, application_uuid, "application")


def console_logs_url(
    instance_url: str,
    project_uuid: str | None,
    environment_uuid: str | None,
    application_uuid: str | None,
) -> str | None:
    app = application_url(instance_url, project_uuid, environment_uuid, application_uuid)
    return f"{app}/logs" if app else None


def deployment_url(
    instance_url: str,
    project_uuid: str | None,
    environment_uuid: str | None,
    application_uuid: str | None,
    deployment_uuid: str | None,
) -> str | None:
    app = application_url(instance_url, project_uuid, environment_uuid, application_uuid)
    if not app or not deployment_uuid:
        return None
    return f"{app}/deployment/{deployment_uuid}"


def resolve_deploy_url(url: str | None, instance_url: str) -> str | None:
    """Absolute URL for a ``deployment_url`` field, which may be relative to the instance."""
    if not url:
        return None
    if url.startswith(("http://", "https://")):
        return url
    if url.startswith("/"):
        return f"{_base(instance_url)}{url}"
    if url.startswith("project/"):
        return f"{_base(instance_url)}/{url}"
    return f"https://{url}"


def resolve_logs_url(value: object, instance_url: str) -> str | None:
    """Like ``resolve_deploy_url`` but for the untyped ``logs`` field."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    return resolve_deploy_url(trimmed, instance_url)
