"""End-to-end view tests: Snapshot in, rendered rows and links out."""

from __future__ import annotations

import json

from coolify_lens.snapshot import Snapshot
from coolify_lens.views import build_deployment_view, build_environment_view, build_resource_view

INSTANCE = "https://instance"


class TestResourceView:
    def test_project_filter_with_links(self, snapshot):
        view = build_resource_view(snapshot, "project:1", instance_url=INSTANCE)
        assert view.total == 6
        assert view.matched == 3
        assert [g.project_name for g in view.groups] == ["Demo"]

        web = view.rows[0]
        assert web.name == "web"
        assert web.env_name == "production"
        assert web.resource_url == f"{INSTANCE}/project/p1/environment/e1/application/a1"
        assert web.console_logs_url == f"{INSTANCE}/project/p1/environment/e1/application/a1/logs"
        assert web.environment_url == f"{INSTANCE}/project/p1/environment/e1"
        assert web.url == "https://web.example.com"

    def test_environment_name_spans_projects(self, snapshot):
        view = build_resource_view(snapshot, "env:staging", instance_url=INSTANCE)
        assert [g.project_name for g in view.groups] == ["Demo", "Shop"]
        assert [r.name for r in view.rows] == ["api", "store", "plausible"]

    def test_database_link_and_no_console_logs(self, snapshot):
        view = build_resource_view(snapshot, "type:database", instance_url=INSTANCE)
        pg, orphan = view.rows
        assert pg.resource_url == f"{INSTANCE}/project/p1/environment/e1/database/d1"
        assert pg.console_logs_url is None
        assert orphan.project_name == "Unassigned"
        assert orphan.env_name == "Unknown"
        assert orphan.resource_url is None
        assert orphan.environment_url == INSTANCE

    def test_search_after_selector(self, snapshot):
        view = build_resource_view(snapshot, "project:1", search="postgres", instance_url=INSTANCE)
        assert [r.name for r in view.rows] == ["pg"]
        assert view.total == 6

    def test_multiple_selectors(self, snapshot):
        view = build_resource_view(snapshot, ["project:2", "type:service"], instance_url=INSTANCE)
        assert view.selector == "project:2,type:service"
        assert [r.name for r in view.rows] == ["plausible"]

    def test_empty_snapshot(self):
        view = build_resource_view(Snapshot())
        assert view.total == 0
        assert view.groups == []

    def test_to_dict_is_json_serializable(self, snapshot):
        data = json.loads(json.dumps(build_resource_view(snapshot, instance_url=INSTANCE).to_dict()))
        assert data["matched"] == 6
        assert data["groups"][0]["rows"][0]["name"] == "web"

    def test_unknown_selector_is_identity(self, snapshot):
        assert build_resource_view(snapshot, "bogus").matched == 6

    def test_mistyped_optional_fields_still_listed(self):
        snap = Snapshot.from_dict(
            {
                "applications": [{"id": 1, "name": "web", "git_branch": False, "fqdn": ["a", "b"]}],
                "services": [{"id": 2, "name": "plausible", "description": {"en": "x"}}],
                "databases": [{"id": 3, "name": "pg", "db_type": 5}],
            }
        )
        assert build_resource_view(snap).total == 3


class TestDeploymentView:
    def test_sorted_with_links(self, snapshot):
        view = build_deployment_view(snapshot, instance_url=INSTANCE)
        assert [r.key for r in view.rows] == ["dep2", "dep1", "7"]

        dep2, dep1, undated = view.rows
        assert dep2.application_name == "store"
        assert dep2.project_name == "Shop"
        assert dep2.env_name == "staging"
        assert dep2.status_label == "In Progress"
        assert dep2.can_cancel is True
        assert dep2.deployment_url == f"{INSTANCE}/project/p2/environment/e3/application/a3/deployment/dep2"
        assert dep2.deploy_url == f"{INSTANCE}/project/p2/environment/e3/application/a3/deployment/dep2"

        assert dep1.branch == "main"
        assert dep1.can_cancel is False
        assert dep1.console_logs_url == f"{INSTANCE}/project/p1/environment/e1/application/a1/logs"

        assert undated.application_uuid is None
        assert undated.deployment_url is None
        assert undated.env_name == "staging"
        assert undated.application_url == f"{INSTANCE}/project/p1/environment/e2"
        assert undated.can_cancel is False

    def test_project_filter(self, snapshot):
        view = build_deployment_view(snapshot, "project:1", instance_url=INSTANCE)
        assert [r.key for r in view.rows] == ["dep1", "7"]
        assert view.total == 3

    def test_status_active(self, snapshot):
        view = build_deployment_view(snapshot, "status:active")
        assert [r.key for r in view.rows] == ["dep2", "7"]

    def test_search(self, snapshot):
        view = build_deployment_view(snapshot, search="redirect")
        assert [r.key for r in view.rows] == ["dep1"]
        assert view.to_dict()["matched"] == 1

    def test_unattributed_deployment_links_to_instance(self):
        snap = Snapshot.from_dict({"deployments": [{"deployment_uuid": "x", "status": "failed"}]})
        (row,) = build_deployment_view(snap, instance_url=INSTANCE).rows
        assert row.project_name == ""
        assert row.environment_url == INSTANCE
        assert row.application_url == INSTANCE


class TestEnvironmentView:
    def test_rows_and_counts(self, snapshot):
        view = build_environment_view(snapshot, instance_url=INSTANCE)
        assert [(r.project_name, r.name, r.resource_count) for r in view.rows] == [
            ("Demo", "production", 2),
            ("Demo", "staging", 1),
            ("Shop", "staging", 2),
        ]
        assert view.rows[2].environment_url == f"{INSTANCE}/project/p2/environment/e3"

    def test_project_filter_and_search(self, snapshot):
        assert [r.uuid for r in build_environment_view(snapshot, "project:2").rows] == ["e3"]
        assert [r.uuid for r in build_environment_view(snapshot, search="prod").rows] == ["e1"]

    def test_duplicates_are_collapsed(self, payload):
        payload["environments"] = [{"id": 10, "uuid": "e1", "name": "production", "projectName": "Demo"}]
        view = build_environment_view(Snapshot.from_dict(payload))
        assert view.total == 3
        assert [r.uuid for r in view.rows].count("e1") == 1
