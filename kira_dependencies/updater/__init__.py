"""Updater engine — check dependencies and publish a single merge request."""

from kira_dependencies.updater.models import Abort, Accumulation, DependencyFailure, RunResult
from kira_dependencies.updater.runner import UpdateRunner
from kira_dependencies.updater.selection import choose_unlock_strategy, select_dependencies

__all__ = [
    "Abort",
    "Accumulation",
    "DependencyFailure",
    "RunResult",
    "UpdateRunner",
    "choose_unlock_strategy",
    "select_dependencies",
]
