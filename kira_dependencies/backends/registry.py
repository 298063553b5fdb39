"""Package-manager registry — plugin-style backend discovery and lookup."""

from __future__ import annotations

from dataclasses import dataclass
from importlib.metadata import entry_points
from typing import Any, Callable

import structlog

from kira_dependencies.backends.base import (
    FileFetcher,
    FileParser,
    FileUpdater,
    PullRequestCreator,
    UpdateChecker,
)
from kira_dependencies.exceptions import (
    PackageManagerNotFoundError,
    PullRequestCreatorNotFoundError,
)

log = structlog.get_logger("kira_dependencies.backends")

PACKAGE_MANAGER_GROUP = "kira_dependencies.package_managers"
PULL_REQUEST_CREATOR_GROUP = "kira_dependencies.pull_request_creators"

PullRequestCreatorFactory = Callable[..., PullRequestCreator]


@dataclass(frozen=True)
class PackageManagerDescriptor:
    """The four factories a backend provides for one package manager."""

    name: str
    file_fetcher: Callable[..., FileFetcher]
    file_parser: Callable[..., FileParser]
    update_checker: Callable[..., UpdateChecker]
    file_updater: Callable[..., FileUpdater]


class PackageManagerRegistry:
    """Backend registration center."""

    def __init__(self) -> None:
        self._managers: dict[str, PackageManagerDescriptor] = {}
        self._pr_creators: dict[str, PullRequestCreatorFactory] = {}

    def register(self, descriptor: PackageManagerDescriptor) -> None:
        self._managers[descriptor.name] = descriptor
        log.debug("registry.package_manager_registered", name=descriptor.name)

    def get(self, name: str) -> PackageManagerDescriptor | None:
        return self._managers.get(name)

    def list_all(self) -> list[PackageManagerDescriptor]:
        return sorted(self._managers.values(), key=lambda d: d.name)

    def resolve(self, name: str) -> PackageManagerDescriptor:
        """Like :meth:`get`, but a missing manager is a configuration error."""
        descriptor = self._managers.get(name)
        if descriptor is None:
            raise PackageManagerNotFoundError(name, sorted(self._managers))
        return descriptor

    def register_pull_request_creator(
        self, provider: str, factory: PullRequestCreatorFactory
    ) -> None:
        self._pr_creators[provider] = factory
        log.debug("registry.pull_request_creator_registered", provider=provider)

    def pull_request_providers(self) -> list[str]:
        return sorted(self._pr_creators)

    def resolve_pull_request_creator(self, provider: str) -> PullRequestCreatorFactory:
        factory = self._pr_creators.get(provider)
        if factory is None:
            raise PullRequestCreatorNotFoundError(provider, sorted(self._pr_creators))
        return factory

    # ── plugin discovery ───────────────────────────────────────────────────

    def load_entry_points(self) -> None:
        """Register every backend and pull-request creator installed as a plugin.

        A ``kira_dependencies.package_managers`` entry point may point at a
        :class:`PackageManagerDescriptor` or at a zero-argument callable
        returning one. A ``kira_dependencies.pull_request_creators`` entry
        point points at the creator factory; its name is the provider.
        A plugin that fails to load is logged and skipped.
        """
        for ep in entry_points(group=PACKAGE_MANAGER_GROUP):
            try:
                loaded = ep.load()
                descriptor = _as_descriptor(loaded)
            except Exception:
                log.exception(
                    "registry.plugin_load_failed", group=PACKAGE_MANAGER_GROUP, name=ep.name
                )
                continue
            self.register(descriptor)

        for ep in entry_points(group=PULL_REQUEST_CREATOR_GROUP):
            try:
                factory = ep.load()
            except Exception:
                log.exception(
                    "registry.plugin_load_failed", group=PULL_REQUEST_CREATOR_GROUP, name=ep.name
                )
                continue
            self.register_pull_request_creator(ep.name, factory)


def _as_descriptor(obj: Any) -> PackageManagerDescriptor:
    if isinstance(obj, PackageManagerDescriptor):
        return obj
    if callable(obj):
        produced = obj()
        if isinstance(produced, PackageManagerDescriptor):
            return produced
    raise TypeError(f"entry point did not provide a PackageManagerDescriptor: {obj!r}")


def create_default_registry() -> PackageManagerRegistry:
    """Create a registry populated from installed plugins."""
    registry = PackageManagerRegistry()
    registry.load_entry_points()
    return registry
