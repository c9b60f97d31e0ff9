"""Core data structures shared by the normalizer and the analytics pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Literal

OVERALL_SCOPE = "__overall__"
UNGROUPED_SCOPE = "__ungrouped__"


@dataclass(frozen=True, slots=True)
class Trade:
    """A journaled trade. Only ``pnl`` and ``trade_date`` feed the metrics."""

    id: str
    trade_date: date | None
    pnl: float | None
    symbol: str = ""
    market: str = ""
    side: Literal["Buy", "Sell"] | None = None
    quantity: float | None = None
    entry_price: float | None = None
    exit_price: float | None = None
    strategy_id: str | None = None

    @property
    def is_win(self) -> bool:
        return self.pnl is not None and self.pnl > 0

    @property
    def is_loss(self) -> bool:
        return self.pnl is not None and self.pnl < 0


class SkipReason(str, Enum):
    """Why a record was left out of the computation."""

    MISSING_PNL = "missing_pnl"
    NON_FINITE_PNL = "non_finite_pnl"
    INVALID_PNL = "invalid_pnl"
    INVALID_TRADE_DATE = "invalid_trade_date"
    INVALID_RECORD = "invalid_record"


@dataclass(frozen=True, slots=True)
class SkippedTrade:
    """A record rejected at the validation boundary."""

    position: int  # Index in the raw input
    trade_id: str | None
    reason: SkipReason


@dataclass(frozen=True, slots=True)
class NormalizedTradeSet:
    """Trades with a finite pnl, sorted ascending by trade_date."""

    trades: tuple[Trade, ...] = ()
    skipped: tuple[SkippedTrade, ...] = ()

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def pnls(self) -> list[float]:
        return [t.pnl for t in self.trades]  # type: ignore[misc]

    def __len__(self) -> int:
        return len(self.trades)

    def subset(self, trades: list[Trade] | tuple[Trade, ...]) -> NormalizedTradeSet:
        """A set over already-normalized trades, keeping their order. Carries no skips."""
        return NormalizedTradeSet(trades=tuple(trades))


# --- Result types ---


@dataclass(frozen=True, slots=True)
class EquityPoint:
    """Running equity after one trade."""

    index: int
    trade_date: date
    trade_id: str
    running_equity: float
    peak_so_far: float
    drawdown: float


@dataclass(frozen=True, slots=True)
class DrawdownPeriod:
    """A contiguous run of points with drawdown above zero."""

    start_date: date
    end_date: date
    magnitude: float
    peak_equity: float
    start_index: int
    end_index: int
    recovered: bool = False
    recovery_date: date | None = None
    recovery_time_days: int | None = None


@dataclass(frozen=True, slots=True)
class DrawdownAnalysis:
    max_drawdown: float = 0.0
    current_drawdown: float = 0.0
    periods: tuple[DrawdownPeriod, ...] = ()

    @property
    def longest_recovery_days(self) -> int | None:
        """Longest recovery among closed periods, or None if nothing recovered."""
        days = [p.recovery_time_days for p in self.periods if p.recovery_time_days is not None]
        return max(days) if days else None


@dataclass(frozen=True, slots=True)
class CoreMetrics:
    """Order-independent aggregates over a trade set."""

    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    breakeven_trades: int = 0
    win_rate: float = 0.0
    loss_rate: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    profit_factor: float = 0.0
    average_win: float = 0.0
    average_loss: float = 0.0
    average_win_loss_ratio: float = 0.0
    trade_expectancy: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0


@dataclass(frozen=True, slots=True)
class RiskAdjustedMetrics:
    total_pnl: float = 0.0
    standard_deviation: float = 0.0
    sharpe_ratio: float = 0.0
    recovery_factor: float = 0.0
    edge_ratio: float = 0.0


@dataclass(frozen=True, slots=True)
class MetricsReport:
    """Full performance report for one scope (overall or a strategy)."""

    scope: str
    core: CoreMetrics = field(default_factory=CoreMetrics)
    drawdown: DrawdownAnalysis = field(default_factory=DrawdownAnalysis)
    risk: RiskAdjustedMetrics = field(default_factory=RiskAdjustedMetrics)
    equity_curve: tuple[EquityPoint, ...] = ()
    skipped_count: int = 0

    @property
    def total_trades(self) -> int:
        return self.core.total_trades

    @property
    def win_rate(self) -> float:
        return self.core.win_rate

    @property
    def profit_factor(self) -> float:
        return self.core.profit_factor

    @property
    def trade_expectancy(self) -> float:
        return self.core.trade_expectancy

    @property
    def max_drawdown(self) -> float:
        return self.drawdown.max_drawdown

    @property
    def drawdown_periods(self) -> tuple[DrawdownPeriod, ...]:
        return self.drawdown.periods

    @property
    def total_pnl(self) -> float:
        return self.risk.total_pnl

    @property
    def sharpe_ratio(self) -> float:
        return self.risk.sharpe_ratio

    @property
    def recovery_factor(self) -> float:
        return self.risk.recovery_factor

    @property
    def edge_ratio(self) -> float:
        return self.risk.edge_ratio

    def to_dict(self) -> dict[str, Any]:
        """Flatten into plain numbers, bools, ISO date strings and lists.

        Infinite ratios are kept as ``float("inf")``; callers that need
        strict JSON must decide how to encode them.
        """
        return {
            "scope": self.scope,
            **asdict(self.core),
            "max_drawdown": self.drawdown.max_drawdown,
            "current_drawdown": self.drawdown.current_drawdown,
            "longest_recovery_days": self.drawdown.longest_recovery_days,
            "drawdown_periods": [_isoformat_dates(asdict(p)) for p in self.drawdown.periods],
            **asdict(self.risk),
            "skipped_count": self.skipped_count,
            "equity_curve": [_isoformat_dates(asdict(p)) for p in self.equity_curve],
        }


def _isoformat_dates(row: dict[str, Any]) -> dict[str, Any]:
    return {k: v.isoformat() if isinstance(v, date) else v for k, v in row.items()}
