"""Equity curve reconstruction from chronologically ordered trades."""

from __future__ import annotations

from journal_analytics.core.types import EquityPoint, NormalizedTradeSet


def build_equity_curve(trade_set: NormalizedTradeSet) -> tuple[EquityPoint, ...]:
    """Running equity, running peak and drawdown after each trade.

    Equity and peak both start at 0, so a losing first trade opens a
    drawdown immediately. Relies on the trade set already being in
    ascending trade_date order.
    """
    points: list[EquityPoint] = []
    running_equity = 0.0
    peak = 0.0

    for index, trade in enumerate(trade_set.trades):
        running_equity += trade.pnl  # type: ignore[operator]
        if running_equity > peak:
            peak = running_equity
        points.append(
            EquityPoint(
                index=index,
                trade_date=trade.trade_date,  # type: ignore[arg-type]
                trade_id=trade.id,
                running_equity=running_equity,
                peak_so_far=peak,
                drawdown=peak - running_equity,
            )
        )

    return tuple(points)
