"""Shared fixtures for core tests."""

from __future__ import annotations

from typing import Any

import pytest
from coolify_lens.relations import EnvironmentIndex
from coolify_lens.resources import build_resources
from coolify_lens.snapshot import Snapshot


def demo_payload() -> dict[str, Any]:
    """Two projects, three environments (two named "staging"), mixed id flavors."""
    return {
        "projects": [
            {
                "id": 1,
                "uuid": "p1",
                "name": "Demo",
                "environments": [
                    {"id": 10, "uuid": "e1", "name": "production"},
                    {"id": 11, "uuid": "e2", "name": "staging"},
                ],
            },
            {
                "id": 2,
                "uuid": "p2",
                "name": "Shop",
                "environments": [{"id": 20, "uuid": "e3", "name": "staging"}],
            },
        ],
        "applications": [
            {
                "id": 100,
                "uuid": "a1",
                "name": "web",
                "environment_id": 10,
                "fqdn": "web.example.com",
                "git_branch": "main",
                "git_repository": "https://github.com/acme/web",
                "status": "running",
            },
            {
                "id": 101,
                "uuid": "a2",
                "name": "api",
                "environment_uuid": "e2",
                "fqdn": "http://api.example.com,https://alt.example.com",
                "git_branch": "develop",
                "status": "exited",
            },
            {"id": 102, "uuid": "a3", "name": "store", "environment_id": "20"},
        ],
        "services": [
            {
                "id": 200,
                "uuid": "s1",
                "name": "plausible",
                "description": "Analytics",
                "environment_id": 20,
                "service_type": "plausible",
            }
        ],
        "databases": [
            {"id": 300, "uuid": "d1", "name": "pg", "environment_id": 10, "db_type": "postgresql"},
            {"id": 301, "name": "orphan", "environment_id": 99},
        ],
        "deployments": {
            "data": [
                {
                    "deployment_uuid": "dep1",
                    "application_uuid": "a1",
                    "status": "finished",
                    "created_at": "2026-01-02T10:00:00Z",
                    "commit": "abc1234def",
                    "commit_message": "Fix login redirect",
                },
                {
                    "deployment_uuid": "dep2",
                    "application_id": 102,
                    "status": "in-progress",
                    "created_at": "2026-01-03T10:00:00Z",
                    "deployment_url": "/project/p2/environment/e3/application/a3/deployment/dep2",
                },
                {"id": 7, "status": "queued", "environment_uuid": "e2"},
            ]
        },
    }


@pytest.fixture
def payload() -> dict[str, Any]:
    return demo_payload()


@pytest.fixture
def snapshot() -> Snapshot:
    return Snapshot.from_dict(demo_payload())


@pytest.fixture
def index(snapshot: Snapshot) -> EnvironmentIndex:
    return EnvironmentIndex.build(snapshot.project_environments())


@pytest.fixture
def resources(snapshot: Snapshot):
    return build_resources(snapshot.applications, snapshot.services, snapshot.databases)
