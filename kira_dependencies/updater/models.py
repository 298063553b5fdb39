"""Data models for the updater engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal, Union

from kira_dependencies.models import UpdatedDependency

RunStatus = Literal["up_to_date", "pull_request_created", "publish_failed"]


@dataclass(frozen=True)
class DependencyFailure:
    """A dependency whose check raised and was skipped."""

    dependency: str
    error: str


@dataclass(frozen=True)
class Accumulation:
    """State threaded through the per-dependency check loop.

    Every step returns a new value; nothing is mutated in place.
    """

    updated: tuple[UpdatedDependency, ...] = ()
    checked: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()
    failures: tuple[DependencyFailure, ...] = ()

    def with_updates(self, name: str, dependencies: list[UpdatedDependency]) -> Accumulation:
        return replace(
            self,
            updated=self.updated + tuple(dependencies),
            checked=self.checked + (name,),
        )

    def with_skip(self, name: str) -> Accumulation:
        return replace(self, checked=self.checked + (name,), skipped=self.skipped + (name,))

    def with_failure(self, name: str, error: Exception) -> Accumulation:
        return replace(
            self,
            checked=self.checked + (name,),
            failures=self.failures + (DependencyFailure(dependency=name, error=str(error)),),
        )


@dataclass(frozen=True)
class Abort:
    """Short-circuit signal: stop the loop and re-raise *error*."""

    dependency: str
    error: Exception


Step = Union[Accumulation, Abort]


@dataclass
class RunResult:
    """Summary of a single update run."""

    package_manager: str
    repo: str
    checked: list[str] = field(default_factory=list)
    updated: list[UpdatedDependency] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failures: list[DependencyFailure] = field(default_factory=list)
    published: bool = False
    pull_request: Any = None
    publish_error: str | None = None

    @property
    def status(self) -> RunStatus:
        if self.publish_error is not None:
            return "publish_failed"
        if self.published:
            return "pull_request_created"
        return "up_to_date"
