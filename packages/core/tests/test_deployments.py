"""Tests for deployment list normalization and environment attribution."""

from __future__ import annotations

import pytest
from coolify_lens.deployments import (
    build_app_env_map,
    build_app_lookup,
    deployment_key,
    format_status,
    is_active,
    normalize_list,
    normalize_status,
    resolve_app_key,
    resolve_environment_id,
    resolve_pr_url,
    resolve_repo_url,
    select_application_uuids,
    sort_deployments,
)
from coolify_lens.models import Application, Deployment

ROWS = [{"id": 1}, {"id": 2}]


class TestNormalizeList:
    @pytest.mark.parametrize(
        "response",
        [
            ROWS,
            {"rows": ROWS},
            {"data": ROWS},
            {"deployments": ROWS},
            {"data": {"rows": ROWS}},
            {"data": {"data": ROWS}},
        ],
    )
    def test_recognized_shapes(self, response):
        assert normalize_list(response) == ROWS

    @pytest.mark.parametrize("response", [None, "", "not json", 42, {}, {"data": None}, {"data": {"items": ROWS}}])
    def test_unrecognized_is_empty(self, response):
        assert normalize_list(response) == []

    def test_first_shape_wins(self):
        assert normalize_list({"rows": [{"id": "r"}], "data": [{"id": "d"}]}) == [{"id": "r"}]

    def test_non_list_value_falls_through(self):
        assert normalize_list({"rows": "nope", "data": ROWS}) == ROWS


class TestStatus:
    @pytest.mark.parametrize(
        "status,expected",
        [("In Progress", "in_progress"), ("in-progress", "in_progress"), ("QUEUED", "queued"), (None, "")],
    )
    def test_normalize(self, status, expected):
        assert normalize_status(status) == expected

    @pytest.mark.parametrize("status", ["running", "Queued", "in-progress", "In Progress", "building"])
    def test_active(self, status):
        assert is_active(status)

    @pytest.mark.parametrize("status", ["finished", "failed", "cancelled-by-user", "", None])
    def test_inactive(self, status):
        assert not is_active(status)

    def test_format(self):
        assert format_status("in_progress") == "In Progress"
        assert format_status("cancelled-by-user") == "Cancelled By User"
        assert format_status(None) == "unknown"


class TestKeys:
    def test_deployment_key(self):
        assert deployment_key(Deployment(deployment_uuid="dep1", id=7)) == "dep1"
        assert deployment_key(Deployment(id=7)) == "7"
        assert deployment_key(Deployment()) is None

    def test_app_key_priority(self):
        dep = Deployment(source_app_uuid="s", application_uuid="u", application_id=3)
        assert resolve_app_key(dep) == "s"
        assert resolve_app_key(Deployment(application_uuid="u", application_id=3)) == "u"
        assert resolve_app_key(Deployment(application_id=3)) == "3"
        assert resolve_app_key(Deployment()) == ""


class TestAttribution:
    @pytest.fixture
    def app_env_map(self, snapshot):
        return build_app_env_map(snapshot.applications)

    def test_app_env_map_keys_by_id_and_uuid(self, app_env_map):
        assert app_env_map["a1"] == "10"
        assert app_env_map["100"] == "10"
        assert app_env_map["a2"] == "e2"
        assert app_env_map["102"] == "20"

    def test_app_without_environment_is_skipped(self):
        assert build_app_env_map([Application(id=1, uuid="x")]) == {}

    def test_app_lookup(self, snapshot):
        lookup = build_app_lookup(snapshot.applications)
        assert lookup["a3"].name == "store"
        assert lookup["102"] is lookup["a3"]

    def test_via_application(self, app_env_map):
        assert resolve_environment_id(Deployment(application_uuid="a1"), app_env_map) == "10"
        assert resolve_environment_id(Deployment(application_id=102), app_env_map) == "20"

    def test_application_beats_own_fields(self, app_env_map):
        dep = Deployment(application_uuid="a1", environment_id=99)
        assert resolve_environment_id(dep, app_env_map) == "10"

    def test_own_fields_fallback(self, app_env_map):
        assert resolve_environment_id(Deployment(application_uuid="gone", environment_id=11), app_env_map) == "11"
        assert resolve_environment_id(Deployment(environment_uuid="e2"), app_env_map) == "e2"
        assert resolve_environment_id(Deployment(), app_env_map) == ""

    def test_explicit_app_key(self, app_env_map):
        assert resolve_environment_id(Deployment(), app_env_map, app_key="a2") == "e2"


class TestSort:
    def test_newest_first_and_undated_last(self):
        deps = [
            Deployment(id=1, created_at="2026-01-01T00:00:00Z"),
            Deployment(id=2),
            Deployment(id=3, created_at="2026-01-03T00:00:00+00:00"),
            Deployment(id=4, created_at="garbage"),
            Deployment(id=5, created_at="2026-01-02T00:00:00"),
        ]
        assert [d.id for d in sort_deployments(deps)] == [3, 5, 1, 2, 4]

    def test_stable_for_ties(self):
        deps = [Deployment(id=i, created_at="2026-01-01T00:00:00Z") for i in range(3)]
        assert [d.id for d in sort_deployments(deps)] == [0, 1, 2]


class TestLinks:
    def test_repo_url(self):
        assert resolve_repo_url(Deployment(repo_url="r", git_repository="g")) == "r"
        assert resolve_repo_url(Deployment(git_repository="g")) == "g"
        assert resolve_repo_url(Deployment()) is None

    def test_pr_url(self):
        assert resolve_pr_url(Deployment(pull_request_url="https://pr/1")) == "https://pr/1"


class TestSelectApplications:
    def test_project_selector(self, snapshot, index):
        assert select_application_uuids(snapshot.applications, "project:1", index) == ["a1", "a2"]
        assert select_application_uuids(snapshot.applications, "project:2", index) == ["a3"]

    def test_env_selector(self, snapshot, index):
        assert select_application_uuids(snapshot.applications, "env:staging", index) == ["a2", "a3"]
        assert select_application_uuids(snapshot.applications, "env:qa", index) == []

    def test_other_selectors_take_the_first_apps(self, snapshot, index):
        assert select_application_uuids(snapshot.applications, "all", index) == ["a1", "a2", "a3"]
        assert select_application_uuids(snapshot.applications, "status:active", index, limit=2) == ["a1", "a2"]

    def test_no_applications(self, index):
        assert select_application_uuids([], "project:1", index) == []
