"""Dependency-management backends — contract and registry."""

from kira_dependencies.backends.base import (
    FileFetcher,
    FileParser,
    FileUpdater,
    PullRequestCreator,
    UpdateChecker,
)
from kira_dependencies.backends.registry import (
    PackageManagerDescriptor,
    PackageManagerRegistry,
    create_default_registry,
)

__all__ = [
    "FileFetcher",
    "FileParser",
    "FileUpdater",
    "PackageManagerDescriptor",
    "PackageManagerRegistry",
    "PullRequestCreator",
    "UpdateChecker",
    "create_default_registry",
]
