"""Wire records and the unified resource model.

The platform's JSON is loosely typed: ids arrive as ints or strings, most
fields are optional and unknown fields are common. Every record model keeps
unknown fields (``extra="allow"``) and defaults everything to None.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

logger = logging.getLogger(__name__)

IdValue = int | str | None

ResourceType = Literal["application", "service", "database"]

RESOURCE_TYPES: tuple[str, ...] = ("application", "service", "database")


# A record without a usable identity is rejected; any other malformed field
# falls back to its default.
IDENTITY_FIELDS = frozenset({"id", "uuid"})


class Record(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    @field_validator("*", mode="wrap")
    @classmethod
    def _degrade_malformed(cls, v: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        try:
            return handler(v)
        except ValidationError:
            if info.field_name in IDENTITY_FIELDS:
                raise
            logger.debug("Ignoring malformed %s.%s: %r", cls.__name__, info.field_name, v)
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)


class Environment(Record):
    id: IdValue = None
    uuid: str | None = None
    name: str | None = None
    project_id: IdValue = None
    project_uuid: str | None = None


class ProjectEnvironment(Environment):
    """An environment joined to the project it belongs to."""

    owner_id: str | None = Field(default=None, alias="projectId")
    owner_name: str | None = Field(default=None, alias="projectName")
    owner_uuid: str | None = Field(default=None, alias="projectUuid")


class Project(Record):
    id: IdValue = None
    uuid: str | None = None
    name: str | None = None
    description: str | None = None
    environments: list[Environment] = Field(default_factory=list)

    @field_validator("environments", mode="before")
    @classmethod
    def _drop_bad_environments(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [e for e in v if isinstance(e, (dict, Environment))]
        return []


class Application(Record):
    id: IdValue = None
    uuid: str | None = None
    name: str | None = None
    fqdn: str | None = None
    git_repository: str | None = None
    git_branch: str | None = None
    environment_id: IdValue = None
    environment_uuid: str | None = None
    status: str | None = None
    deployment_status: str | None = None
    last_deployment_status: str | None = None


class Service(Record):
    id: IdValue = None
    uuid: str | None = None
    name: str | None = None
    description: str | None = None
    environment_id: IdValue = None
    environment_uuid: str | None = None
    service_type: str | None = None


class Database(Record):
    id: IdValue = None
    uuid: str | None = None
    name: str | None = None
    description: str | None = None
    environment_id: IdValue = None
    environment_uuid: str | None = None
    db_type: str | None = None


class Deployment(Record):
    id: IdValue = None
    deployment_uuid: str | None = None
    status: str | None = None
    application_id: IdValue = None
    application_uuid: str | None = None
    application_name: str | None = None
    name: str | None = None
    deployment_url: str | None = None
    commit_message: str | None = None
    commit: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    source_app_uuid: str | None = None
    environment_id: IdValue = None
    environment_uuid: str | None = None
    server_name: str | None = None
    logs: Any = None
    git_type: str | None = None
    git_repository: str | None = None
    repo_url: str | None = None
    pull_request_url: str | None = None
    pull_request_id: IdValue = None


class ResourceItem(BaseModel):
    """One application, service or database in the unified collection."""

    id: str
    uuid: str | None = None
    type: ResourceType
    name: str
    subtitle: str | None = None
    environment_id: str = ""
    repo: str | None = None
    kind: str | None = None
    url: str | None = None
    status: str | None = None


M = TypeVar("M", bound=BaseModel)


def parse_records(model: type[M], items: Any) -> list[M]:
    """Validate raw dicts into ``model``, dropping anything that doesn't fit."""
    if not isinstance(items, list):
        return []
    records: list[M] = []
    for i, raw in enumerate(items):
        if isinstance(raw, model):
            records.append(raw)
            continue
        if isinstance(raw, BaseModel):
            raw = raw.model_dump()
        if not isinstance(raw, dict):
            logger.warning("Skipping %s #%d: expected an object, got %s", model.__name__, i, type(raw).__name__)
            continue
        try:
            records.append(model.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Skipping %s #%d: %d validation error(s)", model.__name__, i, exc.error_count())
    return records
