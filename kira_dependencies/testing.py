"""Test doubles for kira_dependencies — in-memory backend and merge-request creator.

Usage::

    from kira_dependencies.testing import FakeBackend, FakeCheck, FakePullRequests, make_dependency

    backend = FakeBackend(
        dependencies=[make_dependency("ft-core")],
        checks={"ft-core": FakeCheck(supported={"own"})},
    )
    pull_requests = FakePullRequests()
    registry = backend.registry(pull_requests)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from kira_dependencies.backends.registry import PackageManagerDescriptor, PackageManagerRegistry
from kira_dependencies.models import Dependency, DependencyFile, UpdatedDependency

CheckStage = Literal[
    "construct",
    "up_to_date",
    "requirements_unlocked_or_can_be",
    "can_update",
    "updated_dependencies",
]


def make_dependency(
    name: str,
    version: str = "1.0.0",
    *,
    package_manager: str = "bundler",
    top_level: bool = True,
) -> Dependency:
    return Dependency(
        name=name,
        version=version,
        package_manager=package_manager,
        requirements=[{"file": "Gemfile", "requirement": f"~> {version}", "groups": []}],
        top_level=top_level,
    )


@dataclass
class FakeCheck:
    """Scripted update-checker answers for one dependency.

    Parameters
    ----------
    up_to_date:
        What ``up_to_date()`` returns.
    unlocked:
        What ``requirements_unlocked_or_can_be()`` returns.
    supported:
        Unlock strategies (``"none"``, ``"own"``, ``"all"``) ``can_update`` accepts.
    target_version:
        Version reported by ``updated_dependencies``.
    error:
        Raised when set, from the stage named by *raise_in*.
    raise_in:
        Where *error* is raised: ``"construct"`` (building the checker),
        ``"up_to_date"``, ``"requirements_unlocked_or_can_be"``, ``"can_update"``
        or ``"updated_dependencies"``.
    """

    up_to_date: bool = False
    unlocked: bool = True
    supported: set[str] = field(default_factory=lambda: {"none", "own", "all"})
    target_version: str = "2.0.0"
    error: Exception | None = None
    raise_in: CheckStage = "up_to_date"


class FakeUpdateChecker:
    def __init__(self, backend: FakeBackend, **kwargs: Any) -> None:
        self.kwargs = kwargs
        self.dependency: Dependency = kwargs["dependency"]
        self.check = backend.checks.get(self.dependency.name, FakeCheck())
        self.can_update_calls: list[str] = []
        self.updated_calls: list[str] = []

    def fail_at(self, stage: CheckStage) -> None:
        if self.check.error is not None and self.check.raise_in == stage:
            raise self.check.error

    def up_to_date(self) -> bool:
        self.fail_at("up_to_date")
        return self.check.up_to_date

    def requirements_unlocked_or_can_be(self) -> bool:
        self.fail_at("requirements_unlocked_or_can_be")
        return self.check.unlocked

    def can_update(self, *, requirements_to_unlock: str) -> bool:
        self.can_update_calls.append(requirements_to_unlock)
        self.fail_at("can_update")
        return requirements_to_unlock in self.check.supported

    def updated_dependencies(self, *, requirements_to_unlock: str) -> list[UpdatedDependency]:
        self.updated_calls.append(requirements_to_unlock)
        self.fail_at("updated_dependencies")
        return [
            UpdatedDependency(
                name=self.dependency.name,
                version=self.check.target_version,
                previous_version=self.dependency.version,
                package_manager=self.dependency.package_manager,
                requirements=list(self.dependency.requirements),
                previous_requirements=list(self.dependency.requirements),
            )
        ]


class _FakeFetcher:
    def __init__(self, backend: FakeBackend) -> None:
        self._backend = backend

    def files(self) -> list[DependencyFile]:
        return list(self._backend.files)

    def commit(self) -> str:
        return self._backend.commit


class _FakeParser:
    def __init__(self, backend: FakeBackend) -> None:
        self._backend = backend

    def parse(self) -> list[Dependency]:
        return list(self._backend.dependencies)


class _FakeFileUpdater:
    def __init__(self, backend: FakeBackend, dependencies: list[UpdatedDependency]) -> None:
        self._backend = backend
        self._dependencies = dependencies

    def updated_dependency_files(self) -> list[DependencyFile]:
        if self._backend.update_error is not None:
            raise self._backend.update_error
        body = "\n".join(f"{d.name} {d.version}" for d in self._dependencies)
        return [
            DependencyFile(name=f.name, content=body, directory=f.directory)
            for f in self._backend.files
        ]


class FakeBackend:
    """Drop-in backend for one package manager; records every construction.

    ``checks`` maps dependency names to :class:`FakeCheck`; dependencies
    without an entry get the default (outdated, every strategy supported).
    """

    def __init__(
        self,
        *,
        name: str = "bundler",
        files: list[DependencyFile] | None = None,
        commit: str = "0a1b2c3",
        dependencies: list[Dependency] | None = None,
        checks: dict[str, FakeCheck] | None = None,
        update_error: Exception | None = None,
    ) -> None:
        self.name = name
        self.files = files if files is not None else [DependencyFile("Gemfile", "gem 'ft-core'\n")]
        self.commit = commit
        self.dependencies = dependencies or []
        self.checks = checks or {}
        self.update_error = update_error
        self.fetcher_calls: list[dict[str, Any]] = []
        self.parser_calls: list[dict[str, Any]] = []
        self.checkers: list[FakeUpdateChecker] = []
        self.updater_calls: list[dict[str, Any]] = []

    @property
    def checked_names(self) -> list[str]:
        """Dependencies a checker was built for — useful for assertions in tests."""
        return [c.dependency.name for c in self.checkers]

    def descriptor(self) -> PackageManagerDescriptor:
        return PackageManagerDescriptor(
            name=self.name,
            file_fetcher=self._fetcher,
            file_parser=self._parser,
            update_checker=self._checker,
            file_updater=self._updater,
        )

    def registry(self, pull_requests: FakePullRequests | None = None) -> PackageManagerRegistry:
        registry = PackageManagerRegistry()
        registry.register(self.descriptor())
        if pull_requests is not None:
            registry.register_pull_request_creator("gitlab", pull_requests)
        return registry

    def _fetcher(self, **kwargs: Any) -> _FakeFetcher:
        self.fetcher_calls.append(kwargs)
        return _FakeFetcher(self)

    def _parser(self, **kwargs: Any) -> _FakeParser:
        self.parser_calls.append(kwargs)
        return _FakeParser(self)

    def _checker(self, **kwargs: Any) -> FakeUpdateChecker:
        checker = FakeUpdateChecker(self, **kwargs)
        self.checkers.append(checker)
        checker.fail_at("construct")
        return checker

    def _updater(self, **kwargs: Any) -> _FakeFileUpdater:
        self.updater_calls.append(kwargs)
        return _FakeFileUpdater(self, kwargs["dependencies"])


class _FakePullRequest:
    def __init__(self, owner: FakePullRequests, kwargs: dict[str, Any]) -> None:
        self._owner = owner
        self._kwargs = kwargs

    def create(self) -> dict[str, Any]:
        if self._owner.error is not None:
            raise self._owner.error
        self._owner.created.append(self._kwargs)
        names = ", ".join(d.name for d in self._kwargs["dependencies"])
        return {"iid": len(self._owner.created), "title": f"Update {names}"}


class FakePullRequests:
    """Pull-request creator factory that keeps opened requests in memory."""

    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.created: list[dict[str, Any]] = []

    def __call__(self, **kwargs: Any) -> _FakePullRequest:
        self.calls.append(kwargs)
        return _FakePullRequest(self, kwargs)
