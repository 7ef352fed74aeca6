"""HTTP client for the Coolify REST API.

This is the transport collaborator of the engine: it issues requests and
hands back deserialized JSON. Nothing is retried or cached here.
"""

from __future__ import annotations

import json
import logging
import ssl
import urllib.error
import urllib.request
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import certifi

from coolify_lens.deployments import normalize_list, select_application_uuids
from coolify_lens.filters import Selector
from coolify_lens.models import (
    Application,
    Database,
    Deployment,
    Environment,
    Project,
    ProjectEnvironment,
    Service,
    parse_records,
)
from coolify_lens.relations import EnvironmentIndex, tag_environments
from coolify_lens.snapshot import Snapshot
from coolify_lens.urls import normalize_base_url

logger = logging.getLogger(__name__)

_TIMEOUT = 30  # seconds

# Deployments per application and overall, for the paced per-app fetch.
DEFAULT_TAKE = 5
DEFAULT_CAP = 200


class CoolifyAPIError(RuntimeError):
    """Non-2xx response from the API."""

    def __init__(self, status: int, path: str, detail: str = ""):
        self.status = status
        self.path = path
        self.detail = detail
        msg = f"Coolify API error: {status} ({path})"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


def _ssl_context() -> ssl.SSLContext:
    return ssl.create_default_context(cafile=certifi.where())


def urlopen_safe(req: urllib.request.Request, timeout: int = _TIMEOUT) -> bytes:
    """urlopen with the certifi CA bundle."""
    with urllib.request.urlopen(req, timeout=timeout, context=_ssl_context()) as resp:
        return resp.read()


class CoolifyClient:
    """Thin JSON-over-HTTP client with bearer-token auth."""

    def __init__(self, base_url: str, token: str, timeout: int = _TIMEOUT):
        self.base_url = normalize_base_url(base_url)
        self._token = token.strip()
        self._timeout = timeout

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def request(self, path: str, method: str = "GET", body: Any = None) -> Any:
        """Send one request and decode the response: JSON, plain text, or None when empty."""
        headers = {"Authorization": f"Bearer {self._token}", "Accept": "application/json"}
        data = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            data = json.dumps(body).encode("utf-8")

        logger.debug("%s %s", method, path)
        raw = self._send(method, f"{self.base_url}{path}", data, headers)
        if not raw or not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            # /health and /version answer with plain text
            return raw.decode("utf-8", errors="replace")

    def _send(self, method: str, url: str, data: bytes | None, headers: dict[str, str]) -> bytes:
        req = urllib.request.Request(url, data=data, headers=headers, method=method)
        try:
            return urlopen_safe(req, timeout=self._timeout)
        except urllib.error.HTTPError as exc:
            path = url[len(self.base_url) :] if url.startswith(self.base_url) else url
            raise CoolifyAPIError(exc.code, path, str(exc.reason or "")) from exc

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def fetch_projects(self) -> list[Project]:
        return parse_records(Project, normalize_list(self.request("/projects")))

    def fetch_applications(self) -> list[Application]:
        return parse_records(Application, normalize_list(self.request("/applications")))

    def fetch_services(self) -> list[Service]:
        return parse_records(Service, normalize_list(self.request("/services")))

    def fetch_databases(self) -> list[Database]:
        return parse_records(Database, normalize_list(self.request("/databases")))

    def _fetch_environments_of(self, project: Project) -> list[ProjectEnvironment]:
        payload = self.request(f"/projects/{project.uuid}/environments")
        return tag_environments(project, parse_records(Environment, normalize_list(payload)))

    def fetch_project_environments(
        self, projects: Iterable[Project], max_workers: int = 8
    ) -> list[ProjectEnvironment]:
        """Fetch every project's environments in parallel, tagged with their project.

        Projects without a uuid are skipped. A project whose request fails is
        logged and left out; the others still come back, in project order.
        """
        targets = [p for p in projects if p.uuid]
        if not targets:
            return []

        results: list[ProjectEnvironment] = []
        with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(targets)))) as pool:
            futures = [(p, pool.submit(self._fetch_environments_of, p)) for p in targets]
            for project, future in futures:
                try:
                    results.extend(future.result())
                except (CoolifyAPIError, OSError) as exc:
                    logger.warning("Skipping environments of project %s: %s", project.uuid, exc)
        return results

    def fetch_deployments(
        self,
        application_uuids: Iterable[str] = (),
        take: int = DEFAULT_TAKE,
        cap: int = DEFAULT_CAP,
    ) -> list[Deployment]:
        """Recent deployments, one application at a time, up to ``cap`` records.

        Each row is tagged with the ``source_app_uuid`` it was fetched for. When
        no applications are given, or none of them return anything, falls back
        to the global deployments list.
        """
        collected: list[Deployment] = []
        for uuid in application_uuids:
            payload = self.request(f"/deployments/applications/{uuid}?take={take}")
            rows = parse_records(Deployment, normalize_list(payload))
            collected.extend(row.model_copy(update={"source_app_uuid": uuid}) for row in rows)
            if len(collected) >= cap:
                logger.debug("Deployment cap of %d reached", cap)
                break

        if collected:
            return collected

        payload = self.request("/deployments")
        return parse_records(Deployment, normalize_list(payload))[:cap]

    def fetch_snapshot(
        self,
        selector: Selector | str = "all",
        include_deployments: bool = False,
        take: int = DEFAULT_TAKE,
        cap: int = DEFAULT_CAP,
    ) -> Snapshot:
        """Fetch every collection a view needs."""
        projects = self.fetch_projects()
        environments = self.fetch_project_environments(projects)
        applications = self.fetch_applications()
        snapshot = Snapshot(
            projects=projects,
            environments=environments,
            applications=applications,
            services=self.fetch_services(),
            databases=self.fetch_databases(),
        )
        if include_deployments:
            index = EnvironmentIndex.build(snapshot.project_environments())
            uuids = select_application_uuids(applications, selector, index)
            snapshot.deployments = self.fetch_deployments(uuids, take=take, cap=cap)
        return snapshot

    # ------------------------------------------------------------------
    # Instance
    # ------------------------------------------------------------------

    def fetch_health(self) -> str:
        payload = self.request("/health")
        if isinstance(payload, dict):
            return str(payload.get("status") or payload.get("message") or "unknown")
        if isinstance(payload, str) and payload.strip():
            return payload.strip()
        return "unknown"

    def fetch_version(self) -> str:
        payload = self.request("/version")
        if isinstance(payload, dict):
            return str(payload.get("version") or "unknown")
        if isinstance(payload, str) and payload.strip():
            return payload.strip()
        return "unknown"
