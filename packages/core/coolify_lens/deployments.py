"""Deployment list normalization and environment attribution.

The deployments endpoints don't agree on a response shape, and individual
records don't reliably say which environment they belong to. Attribution
goes through the application collection first and falls back to the
record's own environment fields.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from coolify_lens.ids import first_id, first_present, normalize_id

if TYPE_CHECKING:
    from coolify_lens.filters import Selector
    from coolify_lens.models import Application, Deployment
    from coolify_lens.relations import EnvironmentIndex

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = frozenset({"running", "queued", "pending", "in_progress", "deploying", "building"})

# Default number of applications whose deployments are fetched when no
# project or environment narrows the selection.
DEFAULT_APP_LIMIT = 20

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _nested(*path: str) -> Callable[[Any], Any]:
    def match(response: Any) -> Any:
        node = response
        for key in path:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key)
        return node if isinstance(node, list) else None

    return match


# Recognized list shapes, in priority order. First match wins.
_LIST_SHAPES: list[tuple[str, Callable[[Any], Any]]] = [
    ("array", lambda response: response if isinstance(response, list) else None),
    ("rows", _nested("rows")),
    ("data", _nested("data")),
    ("deployments", _nested("deployments")),
    ("data.rows", _nested("data", "rows")),
    ("data.data", _nested("data", "data")),
]


def normalize_list(response: Any) -> list:
    """Extract the record list from any recognized response shape, else []."""
    for shape, match in _LIST_SHAPES:
        found = match(response)
        if found is not None:
            logger.debug("List response matched shape %r (%d records)", shape, len(found))
            return found
    return []


def normalize_status(status: str | None) -> str:
    value = (status or "").lower()
    value = re.sub(r"\s+", "_", value)
    return re.sub(r"-+", "_", value)


def is_active(status: str | None) -> bool:
    return normalize_status(status) in ACTIVE_STATUSES


def format_status(status: str | None) -> str:
    """``"in_progress"`` -> ``"In Progress"``."""
    if not status:
        return "unknown"
    spaced = re.sub(r"[_-]", " ", status)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def deployment_key(deployment: Deployment) -> str | None:
    return first_id(deployment, "deployment_uuid", "id")


def resolve_app_key(deployment: Deployment) -> str:
    """Application reference of a deployment: source_app_uuid, application_uuid, application_id."""
    return first_id(deployment, "source_app_uuid", "application_uuid", "application_id") or ""


def build_app_env_map(applications: Iterable[Application]) -> dict[str, str]:
    """Application id and uuid -> environment id."""
    result: dict[str, str] = {}
    for app in applications:
        env_id = first_id(app, "environment_id", "environment_uuid")
        if not env_id:
            continue
        for key in (normalize_id(app.id), normalize_id(app.uuid)):
            if key:
                result[key] = env_id
    return result


def build_app_lookup(applications: Iterable[Application]) -> dict[str, Application]:
    result: dict[str, Application] = {}
    for app in applications:
        for key in (normalize_id(app.id), normalize_id(app.uuid)):
            if key:
                result[key] = app
    return result


def resolve_environment_id(
    deployment: Deployment, app_env_map: Mapping[str, str], app_key: str | None = None
) -> str:
    """Environment of a deployment, via its application first, then its own fields."""
    key = resolve_app_key(deployment) if app_key is None else app_key
    from_app = app_env_map.get(key) if key else None
    if from_app:
        return from_app
    return first_id(deployment, "environment_id", "environment_uuid") or ""


def _created_at(deployment: Deployment) -> datetime:
    raw = deployment.created_at
    if not raw:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_deployments(deployments: Iterable[Deployment]) -> list[Deployment]:
    """Newest first. Records without a usable timestamp sink to the bottom."""
    return sorted(deployments, key=_created_at, reverse=True)


def resolve_repo_url(deployment: Deployment) -> str | None:
    return first_present(deployment, "repo_url", "git_repository")


def resolve_pr_url(deployment: Deployment) -> str | None:
    return deployment.pull_request_url


def select_application_uuids(
    applications: Iterable[Application],
    selector: Selector | str,
    index: EnvironmentIndex,
    limit: int = DEFAULT_APP_LIMIT,
) -> list[str]:
    """Pick the applications whose deployments should be fetched one by one.

    A project or environment selector narrows to the apps living there;
    anything else takes the first ``limit`` apps to keep fan-out bounded.
    """
    from coolify_lens.filters import parse_selector

    sel = parse_selector(selector) if isinstance(selector, str) else selector
    apps = list(applications)
    if not apps:
        return []

    if sel.kind == "project":
        env_keys = {env for env, project in index.env_to_project.items() if project == sel.value}
    elif sel.kind == "env":
        env_keys = index.ids_named(sel.value)
        if not env_keys:
            return []
    else:
        return [str(a.uuid) for a in apps[:limit] if a.uuid]

    return [
        str(a.uuid) for a in apps if a.uuid and first_id(a, "environment_id", "environment_uuid") in env_keys
    ]
