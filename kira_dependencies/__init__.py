"""kira-dependencies: dependency-update merge requests for GitLab projects."""

__version__ = "0.1.0"

from kira_dependencies.backends.registry import (
    PackageManagerDescriptor,
    PackageManagerRegistry,
    create_default_registry,
)
from kira_dependencies.core.config import Settings, load_settings
from kira_dependencies.models import (
    Credential,
    Dependency,
    DependencyFile,
    RequirementsUpdateStrategy,
    Source,
    UnlockStrategy,
    UpdatedDependency,
)
from kira_dependencies.updater import RunResult, UpdateRunner

__all__ = [
    "Credential",
    "Dependency",
    "DependencyFile",
    "PackageManagerDescriptor",
    "PackageManagerRegistry",
    "RequirementsUpdateStrategy",
    "RunResult",
    "Settings",
    "Source",
    "UnlockStrategy",
    "UpdateRunner",
    "UpdatedDependency",
    "create_default_registry",
    "load_settings",
]
