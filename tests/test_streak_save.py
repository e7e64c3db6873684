"""
tests/test_streak_save.py — Streak-Save Allowance State Machine
=================================================================
Pure tests of :mod:`wordstreak.engine.streak_save`.
"""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

from wordstreak.engine.streak_save import (
    AllowanceAction,
    can_use_save,
    evaluate_allowance,
)


def _counter(days: int) -> MagicMock:
    return MagicMock(return_value=days)


class TestEvaluateAllowance:
    def test_bootstrap_stamps_month_without_granting(self):
        count = _counter(31)
        decision = evaluate_allowance(
            last_streak_save_month=None,
            saves_available=0,
            today=date(2024, 1, 15),
            count_days_in_month=count,
        )
        assert decision.action is AllowanceAction.BOOTSTRAP
        assert decision.saves_available == 0
        assert decision.last_streak_save_month == "2024-01-01"
        assert decision.changed
        count.assert_not_called()

    def test_same_month_is_noop(self):
        count = _counter(31)
        decision = evaluate_allowance(
            last_streak_save_month="2024-01-01",
            saves_available=1,
            today=date(2024, 1, 31),
            count_days_in_month=count,
        )
        assert decision.action is AllowanceAction.NOOP
        assert decision.saves_available == 1
        assert not decision.changed
        count.assert_not_called()

    def test_new_month_at_threshold_grants(self):
        count = _counter(20)
        decision = evaluate_allowance(
            last_streak_save_month="2024-01-01",
            saves_available=0,
            today=date(2024, 2, 1),
            count_days_in_month=count,
        )
        assert decision.action is AllowanceAction.REEVALUATE
        assert decision.saves_available == 1
        assert decision.last_streak_save_month == "2024-02-01"
        assert decision.previous_month_days == 20
        count.assert_called_once_with(date(2024, 1, 1))

    def test_new_month_below_threshold_revokes(self):
        decision = evaluate_allowance(
            last_streak_save_month="2024-01-01",
            saves_available=1,
            today=date(2024, 2, 10),
            count_days_in_month=_counter(19),
        )
        assert decision.saves_available == 0

    def test_grants_never_accumulate(self):
        decision = evaluate_allowance(
            last_streak_save_month="2024-01-01",
            saves_available=1,
            today=date(2024, 2, 10),
            count_days_in_month=_counter(31),
        )
        assert decision.saves_available == 1

    def test_skipped_months_look_only_at_previous_month(self):
        count = _counter(0)
        evaluate_allowance(
            last_streak_save_month="2023-10-01",
            saves_available=0,
            today=date(2024, 1, 5),
            count_days_in_month=count,
        )
        count.assert_called_once_with(date(2023, 12, 1))

    def test_custom_threshold(self):
        decision = evaluate_allowance(
            last_streak_save_month="2024-01-01",
            saves_available=0,
            today=date(2024, 2, 1),
            count_days_in_month=_counter(5),
            threshold=5,
        )
        assert decision.saves_available == 1


class TestCanUseSave:
    def test_available_and_unused(self):
        assert can_use_save(
            saves_available=1,
            last_streak_save_month="2024-02-01",
            streak_save_used_month=None,
            today=date(2024, 2, 3),
        )

    def test_nothing_available(self):
        assert not can_use_save(
            saves_available=0,
            last_streak_save_month="2024-02-01",
            streak_save_used_month=None,
            today=date(2024, 2, 3),
        )

    def test_already_used_this_month(self):
        assert not can_use_save(
            saves_available=1,
            last_streak_save_month="2024-02-01",
            streak_save_used_month="2024-02-01",
            today=date(2024, 2, 20),
        )

    def test_used_in_an_earlier_month(self):
        assert can_use_save(
            saves_available=1,
            last_streak_save_month="2024-02-01",
            streak_save_used_month="2024-01-01",
            today=date(2024, 2, 20),
        )

    def test_save_from_an_earlier_month_does_not_carry_over(self):
        assert not can_use_save(
            saves_available=1,
            last_streak_save_month="2024-02-01",
            streak_save_used_month=None,
            today=date(2024, 3, 10),
        )

    def test_never_evaluated(self):
        assert not can_use_save(
            saves_available=1,
            last_streak_save_month=None,
            streak_save_used_month=None,
            today=date(2024, 3, 10),
        )
