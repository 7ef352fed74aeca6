"""Tests for the unified resource collection."""

from __future__ import annotations

import pytest
from coolify_lens.models import Application, Database, Service
from coolify_lens.resources import (
    application_item,
    build_resources,
    database_item,
    get_primary_url,
    resources_in_environment,
    service_item,
)


class TestPrimaryUrl:
    @pytest.mark.parametrize(
        "fqdn,expected",
        [
            (None, None),
            ("", None),
            (" ,https://b", None),
            ("web.example.com", "https://web.example.com"),
            ("http://a.example.com,https://b.example.com", "http://a.example.com"),
            (" https://a.example.com , b", "https://a.example.com"),
        ],
    )
    def test_first_entry(self, fqdn, expected):
        assert get_primary_url(fqdn) == expected


class TestApplicationItem:
    def test_full_record(self):
        item = application_item(
            Application(
                id=100,
                uuid="a1",
                name="web",
                environment_id=10,
                fqdn="web.example.com",
                git_branch="main",
                git_repository="https://github.com/acme/web",
                status="running",
            )
        )
        assert item.id == "100"
        assert item.type == "application"
        assert item.subtitle == "main • https://web.example.com"
        assert item.url == "https://web.example.com"
        assert item.repo == "https://github.com/acme/web"
        assert item.environment_id == "10"
        assert item.status == "running"

    def test_subtitle_skips_missing_parts(self):
        assert application_item(Application(id=1, git_branch="main")).subtitle == "main"
        assert application_item(Application(id=1)).subtitle == ""

    def test_id_fallbacks(self):
        assert application_item(Application(uuid="a1")).id == "a1"
        assert application_item(Application(name="solo")).id == "solo"
        assert application_item(Application()).id == "app"

    def test_defaults(self):
        item = application_item(Application())
        assert item.name == "Unnamed Application"
        assert item.environment_id == ""

    def test_environment_uuid_fallback(self):
        assert application_item(Application(environment_uuid="e2")).environment_id == "e2"

    def test_status_fallback_chain(self):
        app = Application(deployment_status="queued", last_deployment_status="failed")
        assert application_item(app).status == "queued"


class TestServiceAndDatabase:
    def test_service(self):
        item = service_item(Service(id=200, name="plausible", description="Analytics", service_type="plausible"))
        assert (item.type, item.subtitle, item.kind) == ("service", "Analytics", "plausible")
        assert service_item(Service()).id == "service"
        assert service_item(Service()).name == "Unnamed Service"

    def test_database(self):
        item = database_item(Database(id=300, name="pg", db_type="postgresql", environment_id=10))
        assert (item.type, item.kind, item.environment_id) == ("database", "postgresql", "10")
        assert database_item(Database()).id == "db"
        assert database_item(Database()).name == "Unnamed Database"


class TestBuildResources:
    def test_one_item_per_record_in_type_order(self, snapshot):
        items = build_resources(snapshot.applications, snapshot.services, snapshot.databases)
        assert [i.name for i in items] == ["web", "api", "store", "plausible", "pg", "orphan"]
        assert [i.type for i in items] == ["application"] * 3 + ["service"] + ["database"] * 2

    def test_empty(self):
        assert build_resources([], [], []) == []


class TestResourcesInEnvironment:
    def test_matches_id_or_uuid(self, resources):
        assert [i.name for i in resources_in_environment(resources, 10, "e1")] == ["web", "pg"]
        assert [i.name for i in resources_in_environment(resources, 11, "e2")] == ["api"]
        assert [i.name for i in resources_in_environment(resources, "20", None)] == ["store", "plausible"]

    def test_no_identity(self, resources):
        assert resources_in_environment(resources, None, "") == []
