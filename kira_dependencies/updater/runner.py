"""UpdateRunner — sequences backend calls into a single merge request."""

from __future__ import annotations

from typing import Any

import structlog

from kira_dependencies.backends.registry import (
    PackageManagerDescriptor,
    PackageManagerRegistry,
    PullRequestCreatorFactory,
)
from kira_dependencies.core.config import Settings
from kira_dependencies.models import Dependency, DependencyFile, UpdatedDependency
from kira_dependencies.updater.models import Abort, Accumulation, RunResult, Step
from kira_dependencies.updater.selection import choose_unlock_strategy, select_dependencies

log = structlog.get_logger("kira_dependencies.updater")


class UpdateRunner:
    """Fetch → parse → check each dependency → publish one merge request.

    Per-dependency errors and publish errors are logged and skipped unless
    ``settings.fail_on_exception`` is set, in which case the original error
    propagates and nothing is published.
    """

    def __init__(
        self,
        settings: Settings,
        package_manager: PackageManagerDescriptor,
        pull_request_creator: PullRequestCreatorFactory,
    ) -> None:
        self._settings = settings
        self._manager = package_manager
        self._create_pull_request = pull_request_creator
        self._source = settings.source()
        self._credentials = [c.as_dict() for c in settings.credentials()]

    @classmethod
    def from_registry(cls, settings: Settings, registry: PackageManagerRegistry) -> UpdateRunner:
        """Resolve both backends up front; a missing one is a ConfigurationError."""
        manager = registry.resolve(settings.package_manager)
        creator = registry.resolve_pull_request_creator(settings.source().provider)
        return cls(settings, manager, creator)

    def run(self) -> RunResult:
        log.info(
            "update.fetch_files",
            package_manager=self._manager.name,
            repo=self._source.repo,
            directory=self._source.directory,
            branch=self._source.branch,
        )
        fetcher = self._manager.file_fetcher(source=self._source, credentials=self._credentials)
        files = fetcher.files()
        commit = fetcher.commit()

        log.info("update.parse_dependencies", files=[f.name for f in files])
        parser = self._manager.file_parser(
            dependency_files=files,
            source=self._source,
            credentials=self._credentials,
        )
        dependencies = select_dependencies(parser.parse(), self._settings.dependency_filter)
        log.info(
            "update.dependencies_selected",
            count=len(dependencies),
            name_filter=self._settings.dependency_filter,
        )

        acc = Accumulation()
        for dependency in dependencies:
            step = self.step(acc, dependency, files)
            if isinstance(step, Abort):
                log.error("update.aborted", dependency=step.dependency)
                raise step.error
            acc = step

        result = RunResult(
            package_manager=self._manager.name,
            repo=self._source.repo,
            checked=list(acc.checked),
            updated=list(acc.updated),
            skipped=list(acc.skipped),
            failures=list(acc.failures),
        )
        if not result.updated:
            log.info("update.up_to_date", checked=len(result.checked))
            return result

        self._publish(result, files, commit)
        return result

    def step(
        self,
        acc: Accumulation,
        dependency: Dependency,
        files: list[DependencyFile],
    ) -> Step:
        """One fold step: the next accumulation, or an Abort under fail-fast."""
        try:
            updated = self._check(dependency, files)
        except Exception as exc:
            if self._settings.fail_on_exception:
                return Abort(dependency=dependency.name, error=exc)
            log.exception("update.dependency_failed", dependency=dependency.name)
            return acc.with_failure(dependency.name, exc)

        if updated is None:
            return acc.with_skip(dependency.name)
        return acc.with_updates(dependency.name, updated)

    # ── internal ───────────────────────────────────────────────────────────

    def _check(
        self,
        dependency: Dependency,
        files: list[DependencyFile],
    ) -> list[UpdatedDependency] | None:
        strategy = self._settings.update_strategy
        checker = self._manager.update_checker(
            dependency=dependency,
            dependency_files=files,
            credentials=self._credentials,
            requirements_update_strategy=strategy.value if strategy else None,
            ignored_versions=list(self._settings.ignored_versions.get(dependency.name, [])),
        )

        if checker.up_to_date():
            log.debug("update.dependency_up_to_date", dependency=dependency.name)
            return None

        unlock = choose_unlock_strategy(checker, self._settings.excluded_requirements)
        if unlock is None:
            log.info("update.dependency_not_updatable", dependency=dependency.name)
            return None

        updated = checker.updated_dependencies(requirements_to_unlock=unlock.value)
        log.info(
            "update.dependency_updatable",
            dependency=dependency.name,
            requirements_to_unlock=unlock.value,
            updated=[f"{d.name} {d.previous_version} -> {d.version}" for d in updated],
        )
        return list(updated)

    def _publish(self, result: RunResult, files: list[DependencyFile], commit: str) -> None:
        names = [d.name for d in result.updated]
        try:
            updater = self._manager.file_updater(
                dependencies=list(result.updated),
                dependency_files=files,
                credentials=self._credentials,
            )
            updated_files = updater.updated_dependency_files()

            creator = self._create_pull_request(
                source=self._source,
                base_commit=commit,
                dependencies=list(result.updated),
                files=updated_files,
                credentials=self._credentials,
                label_language=True,
                assignees=self._settings.assignees,
            )
            pull_request: Any = creator.create()
        except Exception as exc:
            if self._settings.fail_on_exception:
                raise
            log.exception("publish.failed", dependencies=names)
            result.publish_error = str(exc)
            return

        result.published = True
        result.pull_request = pull_request
        log.info("publish.pull_request_created", dependencies=names)
