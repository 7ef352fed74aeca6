"""coolify-lens: correlate, filter and link resources of a Coolify instance."""

from coolify_lens.ids import first_id, first_present, normalize_id
from coolify_lens.models import (
    Application,
    Database,
    Deployment,
    Environment,
    Project,
    ProjectEnvironment,
    ResourceItem,
    Service,
)
from coolify_lens.snapshot import Snapshot

__version__ = "0.1.0"

__all__ = [
    "Application",
    "build_deployment_view",
    "build_environment_view",
    "build_resource_view",
    "CoolifyAPIError",
    "CoolifyClient",
    "Database",
    "Deployment",
    "Environment",
    "EnvironmentIndex",
    "first_id",
    "first_present",
    "LensConfig",
    "load_config",
    "normalize_id",
    "Project",
    "ProjectEnvironment",
    "ResourceItem",
    "Service",
    "Snapshot",
]


def __getattr__(name: str):
    # Lazy imports keep the transport layer out of plain engine use
    if name == "CoolifyClient":
        from coolify_lens.client import CoolifyClient

        return CoolifyClient
    if name == "CoolifyAPIError":
        from coolify_lens.client import CoolifyAPIError

        return CoolifyAPIError
    if name == "LensConfig":
        from coolify_lens.config import LensConfig

        return LensConfig
    if name == "load_config":
        from coolify_lens.config import load_config

        return load_config
    if name == "EnvironmentIndex":
        from coolify_lens.relations import EnvironmentIndex

        return EnvironmentIndex
    if name == "build_resource_view":
        from coolify_lens.views import build_resource_view

        return build_resource_view
    if name == "build_deployment_view":
        from coolify_lens.views import build_deployment_view

        return build_deployment_view
    if name == "build_environment_view":
        from coolify_lens.views import build_environment_view

        return build_environment_view
    raise AttributeError(f"module 'coolify_lens' has no attribute {name!r}")
