"""Tests for core data types."""

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from journal_analytics.core.types import (
    OVERALL_SCOPE,
    CoreMetrics,
    DrawdownAnalysis,
    DrawdownPeriod,
    EquityPoint,
    MetricsReport,
    NormalizedTradeSet,
    RiskAdjustedMetrics,
    SkippedTrade,
    SkipReason,
    Trade,
)


class TestTrade:
    def _make(self, **overrides) -> Trade:
        defaults = dict(id="t1", trade_date=date(2024, 1, 1), pnl=10.0)
        defaults.update(overrides)
        return Trade(**defaults)

    def test_is_win(self):
        t = self._make(pnl=5.0)
        assert t.is_win is True
        assert t.is_loss is False

    def test_is_loss(self):
        t = self._make(pnl=-5.0)
        assert t.is_loss is True
        assert t.is_win is False

    def test_breakeven_neither(self):
        t = self._make(pnl=0.0)
        assert t.is_win is False
        assert t.is_loss is False

    def test_missing_pnl_neither(self):
        t = self._make(pnl=None)
        assert t.is_win is False
        assert t.is_loss is False

    def test_defaults(self):
        t = self._make()
        assert t.symbol == ""
        assert t.market == ""
        assert t.side is None
        assert t.strategy_id is None

    def test_frozen(self):
        t = self._make()
        with pytest.raises(FrozenInstanceError):
            t.pnl = 99.0  # type: ignore[misc]


class TestNormalizedTradeSet:
    def test_empty(self):
        ts = NormalizedTradeSet()
        assert len(ts) == 0
        assert ts.skipped_count == 0
        assert ts.pnls == []

    def test_skipped_count(self):
        ts = NormalizedTradeSet(
            skipped=(
                SkippedTrade(position=0, trade_id="a", reason=SkipReason.MISSING_PNL),
                SkippedTrade(position=3, trade_id=None, reason=SkipReason.INVALID_RECORD),
            )
        )
        assert ts.skipped_count == 2

    def test_subset_keeps_order_and_drops_skips(self):
        trades = (
            Trade(id="a", trade_date=date(2024, 1, 1), pnl=1.0),
            Trade(id="b", trade_date=date(2024, 1, 2), pnl=2.0),
        )
        ts = NormalizedTradeSet(
            trades=trades,
            skipped=(SkippedTrade(position=2, trade_id="c", reason=SkipReason.MISSING_PNL),),
        )
        sub = ts.subset([trades[1]])
        assert sub.pnls == [2.0]
        assert sub.skipped_count == 0


class TestDrawdownAnalysis:
    def _period(self, recovery_time_days: int | None) -> DrawdownPeriod:
        return DrawdownPeriod(
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 2),
            magnitude=10.0,
            peak_equity=100.0,
            start_index=0,
            end_index=1,
            recovered=recovery_time_days is not None,
            recovery_time_days=recovery_time_days,
        )

    def test_longest_recovery_days(self):
        analysis = DrawdownAnalysis(periods=(self._period(3), self._period(None), self._period(7)))
        assert analysis.longest_recovery_days == 7

    def test_longest_recovery_none_when_nothing_recovered(self):
        analysis = DrawdownAnalysis(periods=(self._period(None),))
        assert analysis.longest_recovery_days is None


class TestMetricsReport:
    def test_default_report_is_zero_valued(self):
        report = MetricsReport(scope=OVERALL_SCOPE)
        assert report.total_trades == 0
        assert report.win_rate == 0.0
        assert report.profit_factor == 0.0
        assert report.max_drawdown == 0.0
        assert report.sharpe_ratio == 0.0
        assert report.recovery_factor == 0.0
        assert report.drawdown_periods == ()

    def test_to_dict_flattens_and_formats_dates(self):
        period = DrawdownPeriod(
            start_date=date(2024, 1, 2),
            end_date=date(2024, 1, 3),
            magnitude=50.0,
            peak_equity=100.0,
            start_index=1,
            end_index=2,
        )
        point = EquityPoint(
            index=0,
            trade_date=date(2024, 1, 1),
            trade_id="t1",
            running_equity=100.0,
            peak_so_far=100.0,
            drawdown=0.0,
        )
        report = MetricsReport(
            scope="breakout",
            core=CoreMetrics(total_trades=1, winning_trades=1, win_rate=1.0),
            drawdown=DrawdownAnalysis(max_drawdown=50.0, periods=(period,)),
            risk=RiskAdjustedMetrics(total_pnl=100.0, recovery_factor=2.0),
            equity_curve=(point,),
            skipped_count=2,
        )
        data = report.to_dict()
        assert data["scope"] == "breakout"
        assert data["total_trades"] == 1
        assert data["win_rate"] == 1.0
        assert data["max_drawdown"] == 50.0
        assert data["total_pnl"] == 100.0
        assert data["recovery_factor"] == 2.0
        assert data["skipped_count"] == 2
        assert data["drawdown_periods"][0]["start_date"] == "2024-01-02"
        assert data["drawdown_periods"][0]["recovered"] is False
        assert data["drawdown_periods"][0]["recovery_date"] is None
        assert data["equity_curve"][0]["trade_date"] == "2024-01-01"

    def test_frozen(self):
        report = MetricsReport(scope=OVERALL_SCOPE)
        with pytest.raises(FrozenInstanceError):
            report.scope = "other"  # type: ignore[misc]
