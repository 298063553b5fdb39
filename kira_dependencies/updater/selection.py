"""Which dependencies to look at, and how far each may be unlocked."""

from __future__ import annotations

from collections.abc import Collection, Iterable

from kira_dependencies.backends.base import UpdateChecker
from kira_dependencies.models import Dependency, UnlockStrategy

# Least invasive edit first.
UNLOCK_ORDER = (UnlockStrategy.NONE, UnlockStrategy.OWN, UnlockStrategy.ALL)


def select_dependencies(
    dependencies: Iterable[Dependency],
    name_filter: Collection[str] | None,
) -> list[Dependency]:
    """Keep dependencies matching the name filter, or top-level ones when there is none.

    Filter entries are substrings matched case-insensitively against the name.
    """
    if not name_filter:
        return [d for d in dependencies if d.top_level]
    needles = [n.lower() for n in name_filter]
    return [d for d in dependencies if any(n in d.name.lower() for n in needles)]


def choose_unlock_strategy(
    checker: UpdateChecker,
    excluded: Collection[UnlockStrategy] = (),
) -> UnlockStrategy | None:
    """First strategy in :data:`UNLOCK_ORDER` that is allowed and supported.

    ``own`` and ``all`` edit requirement strings, so they are only considered
    when the checker says requirements are (or can be) unlocked. Returns
    ``None`` when the dependency cannot be updated at all.
    """
    unlockable: bool | None = None
    for strategy in UNLOCK_ORDER:
        if strategy in excluded:
            continue
        if strategy is not UnlockStrategy.NONE:
            if unlockable is None:
                unlockable = checker.requirements_unlocked_or_can_be()
            if not unlockable:
                return None
        if checker.can_update(requirements_to_unlock=strategy.value):
            return strategy
    return None
