"""Tests for order-independent core metrics."""

from __future__ import annotations

import itertools
from datetime import date, timedelta

import pytest

from journal_analytics.analysis.metrics import (
    calculate_core_metrics,
    calculate_core_metrics_from_pnls,
    calculate_profit_factor,
    calculate_trade_expectancy,
    calculate_win_rate,
)
from journal_analytics.core.normalizer import normalize_trades
from journal_analytics.core.types import NormalizedTradeSet, Trade

_BASE_DATE = date(2024, 1, 1)


def _make_trade_set(pnls: list[float]) -> NormalizedTradeSet:
    trades = [
        Trade(id=f"t{i}", trade_date=_BASE_DATE + timedelta(days=i), pnl=float(p))
        for i, p in enumerate(pnls)
    ]
    return normalize_trades(trades)


class TestWinRate:
    def test_basic(self) -> None:
        """3 wins, 2 losses -> 0.6."""
        assert calculate_win_rate([10, 5, 3, -8, -2]) == pytest.approx(0.6)

    def test_all_wins(self) -> None:
        assert calculate_win_rate([10, 5]) == pytest.approx(1.0)

    def test_all_losses(self) -> None:
        assert calculate_win_rate([-10, -5]) == pytest.approx(0.0)

    def test_with_breakeven(self) -> None:
        """Break-even (pnl=0) is NOT a win, counts in denominator."""
        assert calculate_win_rate([10, 0, -5]) == pytest.approx(1 / 3)

    def test_empty(self) -> None:
        assert calculate_win_rate([]) == 0.0


class TestProfitFactor:
    def test_basic(self) -> None:
        """350 profit / 125 loss = 2.8."""
        assert calculate_profit_factor([200, 150, -75, -50]) == pytest.approx(2.8)

    def test_no_losses(self) -> None:
        assert calculate_profit_factor([10, 5]) == float("inf")

    def test_no_wins(self) -> None:
        assert calculate_profit_factor([-10, -5]) == 0.0

    def test_empty(self) -> None:
        assert calculate_profit_factor([]) == 0.0

    def test_only_breakeven(self) -> None:
        assert calculate_profit_factor([0, 0]) == 0.0

    def test_breakeven_trades(self) -> None:
        """Break-even trades are excluded from both gross profit and loss."""
        assert calculate_profit_factor([10, 0, 0, -5]) == pytest.approx(2.0)


class TestTradeExpectancy:
    def test_equals_mean(self) -> None:
        pnls = [100, -50, 200, -300, 150]
        assert calculate_trade_expectancy(pnls) == pytest.approx(sum(pnls) / len(pnls))

    def test_with_breakeven(self) -> None:
        pnls = [30, 0, -10, 0]
        assert calculate_trade_expectancy(pnls) == pytest.approx(5.0)

    def test_empty(self) -> None:
        assert calculate_trade_expectancy([]) == 0.0


class TestCoreMetrics:
    def test_scenario(self) -> None:
        core = calculate_core_metrics(_make_trade_set([100, -50, 200, -300, 150]))
        assert core.total_trades == 5
        assert core.winning_trades == 3
        assert core.losing_trades == 2
        assert core.breakeven_trades == 0
        assert core.win_rate == pytest.approx(0.6)
        assert core.loss_rate == pytest.approx(0.4)
        assert core.gross_profit == pytest.approx(450)
        assert core.gross_loss == pytest.approx(350)
        assert core.profit_factor == pytest.approx(450 / 350)
        assert core.average_win == pytest.approx(150)
        assert core.average_loss == pytest.approx(175)
        assert core.average_win_loss_ratio == pytest.approx(150 / 175)
        assert core.trade_expectancy == pytest.approx(20)
        assert core.largest_win == pytest.approx(200)
        assert core.largest_loss == pytest.approx(300)

    def test_empty(self) -> None:
        core = calculate_core_metrics(NormalizedTradeSet())
        assert core.total_trades == 0
        assert core.winning_trades == 0
        assert core.losing_trades == 0
        assert core.win_rate == 0.0
        assert core.loss_rate == 0.0
        assert core.profit_factor == 0.0
        assert core.average_win == 0.0
        assert core.average_loss == 0.0
        assert core.average_win_loss_ratio == 0.0
        assert core.trade_expectancy == 0.0

    def test_no_losses(self) -> None:
        core = calculate_core_metrics_from_pnls([10.0, 20.0])
        assert core.profit_factor == float("inf")
        assert core.average_loss == 0.0
        assert core.average_win_loss_ratio == float("inf")
        assert core.largest_loss == 0.0

    def test_no_wins(self) -> None:
        core = calculate_core_metrics_from_pnls([-10.0, -20.0])
        assert core.profit_factor == 0.0
        assert core.average_win_loss_ratio == 0.0
        assert core.largest_win == 0.0
        assert core.trade_expectancy == pytest.approx(-15.0)

    def test_breakeven_counts_only_in_total(self) -> None:
        core = calculate_core_metrics_from_pnls([10.0, 0.0, 0.0, -10.0])
        assert core.total_trades == 4
        assert core.breakeven_trades == 2
        assert core.win_rate == pytest.approx(0.25)
        assert core.loss_rate == pytest.approx(0.25)

    @pytest.mark.parametrize(
        "pnls",
        [
            [],
            [0.0],
            [5.0],
            [-5.0],
            [1.5, -2.25, 0.0, 7.0, -0.5, 3.0],
            [-1.0] * 7 + [12.0],
        ],
    )
    def test_rate_bounds(self, pnls: list[float]) -> None:
        core = calculate_core_metrics_from_pnls(pnls)
        assert 0.0 <= core.win_rate <= 1.0
        assert 0.0 <= core.loss_rate <= 1.0
        assert core.win_rate + core.loss_rate <= 1.0

    def test_invariant_to_input_order(self) -> None:
        pnls = [100.0, -50.0, 200.0, -300.0, 150.0]
        baseline = calculate_core_metrics_from_pnls(pnls)
        for perm in itertools.permutations(pnls):
            core = calculate_core_metrics_from_pnls(list(perm))
            assert core.total_trades == baseline.total_trades
            assert core.winning_trades == baseline.winning_trades
            assert core.win_rate == pytest.approx(baseline.win_rate)
            assert core.profit_factor == pytest.approx(baseline.profit_factor)
            assert core.trade_expectancy == pytest.approx(baseline.trade_expectancy)
            assert core.average_win == pytest.approx(baseline.average_win)
            assert core.average_loss == pytest.approx(baseline.average_loss)
