"""Collaborator contract for dependency-management backends.

A backend supplies, per package manager, a file fetcher, a file parser, an
update checker and a file updater; a pull-request creator is supplied per
source provider. The updater only ever talks to these protocols.

Construction keywords (what each factory is called with):

* fetcher: ``source``, ``credentials``
* parser: ``dependency_files``, ``source``, ``credentials``
* checker: ``dependency``, ``dependency_files``, ``credentials``,
  ``requirements_update_strategy``, ``ignored_versions``
* updater: ``dependencies``, ``dependency_files``, ``credentials``
* pull-request creator: ``source``, ``base_commit``, ``dependencies``,
  ``files``, ``credentials``, ``label_language``, ``assignees``

Credentials are passed as plain dicts, unlock strategies and update
strategies as their string values.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from kira_dependencies.models import Dependency, DependencyFile, UpdatedDependency


@runtime_checkable
class FileFetcher(Protocol):
    def files(self) -> list[DependencyFile]: ...

    def commit(self) -> str: ...


@runtime_checkable
class FileParser(Protocol):
    def parse(self) -> list[Dependency]: ...


@runtime_checkable
class UpdateChecker(Protocol):
    """Per-dependency update decision."""

    def up_to_date(self) -> bool: ...

    def requirements_unlocked_or_can_be(self) -> bool: ...

    def can_update(self, *, requirements_to_unlock: str) -> bool: ...

    def updated_dependencies(self, *, requirements_to_unlock: str) -> list[UpdatedDependency]: ...


@runtime_checkable
class FileUpdater(Protocol):
    def updated_dependency_files(self) -> list[DependencyFile]: ...


@runtime_checkable
class PullRequestCreator(Protocol):
    def create(self) -> Any:
        """Open the merge request and return whatever the provider hands back."""
        ...
