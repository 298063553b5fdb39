"""Tests for dependency selection and unlock-strategy choice."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from kira_dependencies.models import UnlockStrategy
from kira_dependencies.testing import make_dependency
from kira_dependencies.updater.selection import (
    UNLOCK_ORDER,
    choose_unlock_strategy,
    select_dependencies,
)


def _checker(supported=("none", "own", "all"), unlocked=True):
    checker = MagicMock()
    checker.requirements_unlocked_or_can_be.return_value = unlocked
    checker.can_update.side_effect = lambda *, requirements_to_unlock: (
        requirements_to_unlock in supported
    )
    return checker


def _tried(checker):
    return [c.kwargs["requirements_to_unlock"] for c in checker.can_update.call_args_list]


# ── select_dependencies ──────────────────────────────────────────────────


class TestSelectDependencies:
    @pytest.fixture
    def dependencies(self):
        return [
            make_dependency("FT-Core"),
            make_dependency("rails"),
            make_dependency("phplib-utils"),
            make_dependency("ft-transitive", top_level=False),
            make_dependency("ecom-client"),
        ]

    def test_substring_match_is_case_insensitive(self, dependencies):
        selected = select_dependencies(dependencies, ["ft"])
        assert [d.name for d in selected] == ["FT-Core", "ft-transitive"]

    def test_filter_includes_transitive_matches(self, dependencies):
        selected = select_dependencies(dependencies, ["transitive"])
        assert [d.name for d in selected] == ["ft-transitive"]

    def test_several_needles_keep_parse_order(self, dependencies):
        selected = select_dependencies(dependencies, ["ecom", "phplib", "FT"])
        assert [d.name for d in selected] == [
            "FT-Core",
            "phplib-utils",
            "ft-transitive",
            "ecom-client",
        ]

    @pytest.mark.parametrize("name_filter", [None, []])
    def test_no_filter_keeps_top_level(self, dependencies, name_filter):
        selected = select_dependencies(dependencies, name_filter)
        assert [d.name for d in selected] == ["FT-Core", "rails", "phplib-utils", "ecom-client"]

    def test_no_match(self, dependencies):
        assert select_dependencies(dependencies, ["django"]) == []


# ── choose_unlock_strategy ───────────────────────────────────────────────


class TestChooseUnlockStrategy:
    def test_order(self):
        assert UNLOCK_ORDER == (UnlockStrategy.NONE, UnlockStrategy.OWN, UnlockStrategy.ALL)

    def test_least_invasive_first(self):
        checker = _checker()
        assert choose_unlock_strategy(checker) is UnlockStrategy.NONE
        assert _tried(checker) == ["none"]
        checker.requirements_unlocked_or_can_be.assert_not_called()

    def test_falls_through_to_own(self):
        checker = _checker(supported={"own", "all"})
        assert choose_unlock_strategy(checker) is UnlockStrategy.OWN
        assert _tried(checker) == ["none", "own"]

    def test_falls_through_to_all(self):
        checker = _checker(supported={"all"})
        assert choose_unlock_strategy(checker) is UnlockStrategy.ALL
        assert _tried(checker) == ["none", "own", "all"]

    def test_excluded_strategies_are_never_tried(self):
        checker = _checker()
        excluded = {UnlockStrategy.NONE}
        assert choose_unlock_strategy(checker, excluded) is UnlockStrategy.OWN
        assert _tried(checker) == ["own"]

    def test_all_excluded(self):
        checker = _checker()
        assert choose_unlock_strategy(checker, set(UNLOCK_ORDER)) is None
        checker.can_update.assert_not_called()

    def test_nothing_supported(self):
        checker = _checker(supported=())
        assert choose_unlock_strategy(checker) is None
        assert _tried(checker) == ["none", "own", "all"]

    def test_locked_requirements_only_allow_none(self):
        checker = _checker(supported={"own", "all"}, unlocked=False)
        assert choose_unlock_strategy(checker) is None
        assert _tried(checker) == ["none"]
        checker.requirements_unlocked_or_can_be.assert_called_once_with()

    def test_locked_requirements_with_none_supported(self):
        checker = _checker(supported={"none"}, unlocked=False)
        assert choose_unlock_strategy(checker) is UnlockStrategy.NONE
