"""Journal Analytics — CLI entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from journal_analytics.config import settings, setup_logging

if TYPE_CHECKING:
    from journal_analytics.analysis.aggregator import StrategyAggregator
    from journal_analytics.core.types import MetricsReport

logger = logging.getLogger(__name__)


def _format_ratio(value: float, spec: str = ".2f") -> str:
    return "inf" if value == float("inf") else format(value, spec)


def format_summary(report: MetricsReport) -> str:
    """Human-readable summary of one metrics report."""
    core = report.core
    open_periods = sum(1 for p in report.drawdown_periods if not p.recovered)
    lines = [
        "=" * 50,
        f"PERFORMANCE: {report.scope}",
        "=" * 50,
        f"Total Trades:    {core.total_trades} (skipped {report.skipped_count})",
        f"Win / Loss:      {core.winning_trades} / {core.losing_trades}",
        f"Win Rate:        {core.win_rate:.1%}",
        f"Total P&L:       {report.total_pnl:+,.2f}",
        f"Profit Factor:   {_format_ratio(core.profit_factor)}",
        f"Expectancy:      {core.trade_expectancy:+,.2f}",
        f"Max Drawdown:    {report.max_drawdown:,.2f}",
        f"DD Periods:      {len(report.drawdown_periods)} ({open_periods} open)",
        f"Sharpe Ratio:    {report.sharpe_ratio:.4f}",
        f"Recovery Factor: {_format_ratio(report.recovery_factor)}",
        f"Edge Ratio:      {report.edge_ratio:.2f}",
        "=" * 50,
    ]
    return "\n".join(lines)


def _make_aggregator(args: argparse.Namespace) -> StrategyAggregator:
    from journal_analytics.analysis.aggregator import StrategyAggregator

    return StrategyAggregator(
        annualization_factor=args.annualization_factor,
        average_risk_per_trade=args.risk_per_trade,
        max_workers=args.workers,
    )


def _load(path: str) -> list[dict[str, Any]]:
    from journal_analytics.data.loader import TradeFileError, load_trades

    try:
        return load_trades(path)
    except TradeFileError as e:
        print(f"Error: {e}")
        sys.exit(1)


def _check_metric_options(args: argparse.Namespace) -> None:
    if args.risk_per_trade < 0:
        print("Error: --risk-per-trade must not be negative")
        sys.exit(1)
    if args.annualization_factor is not None and args.annualization_factor <= 0:
        print("Error: --annualization-factor must be positive")
        sys.exit(1)


def cmd_report(args: argparse.Namespace) -> None:
    """Overall and per-strategy reports, optionally written as JSON."""
    from journal_analytics.analysis.report import reports_to_json
    from journal_analytics.core.types import OVERALL_SCOPE

    _check_metric_options(args)
    if args.workers < 1:
        print("Error: --workers must be at least 1")
        sys.exit(1)

    records = _load(args.trades)
    reports = _make_aggregator(args).aggregate(records, known_strategies=args.strategy or ())

    # Overall first, then strategies in a stable order
    print(format_summary(reports[OVERALL_SCOPE]))
    for scope in sorted(s for s in reports if s != OVERALL_SCOPE):
        print()
        print(format_summary(reports[scope]))

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(reports_to_json(reports))
        print(f"\nReport JSON: {output_path}")

    logger.info("Report complete: %d scopes", len(reports))


def cmd_summary(args: argparse.Namespace) -> None:
    """Overall report only."""
    from journal_analytics.analysis.report import build_report
    from journal_analytics.core.normalizer import normalize_trades

    _check_metric_options(args)
    records = _load(args.trades)
    overall_report = build_report(
        normalize_trades(records),
        annualization_factor=args.annualization_factor,
        average_risk_per_trade=args.risk_per_trade,
    )
    print(format_summary(overall_report))


def _add_metric_options(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("--trades", required=True, help="Trade file (.csv, .json or .parquet)")
    sub.add_argument(
        "--annualization-factor",
        type=float,
        default=settings.annualization_factor,
        help="Multiply the per-trade Sharpe ratio by sqrt(N) (default: none)",
    )
    sub.add_argument(
        "--risk-per-trade",
        type=float,
        default=settings.average_risk_per_trade,
        help=f"Average risk per trade for the edge ratio (default: {settings.average_risk_per_trade})",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="journal-analytics",
        description="Journal Analytics — trade performance metrics",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # report
    rp = subparsers.add_parser(
        "report",
        help="Overall and per-strategy performance report",
        description="Compute performance metrics for all trades and for each strategy.",
    )
    _add_metric_options(rp)
    rp.add_argument(
        "--strategy",
        action="append",
        default=None,
        help="Known strategy id; reported even with no trades (repeatable)",
    )
    rp.add_argument(
        "--workers",
        type=int,
        default=settings.max_workers,
        help=f"Worker threads for per-strategy reports (default: {settings.max_workers})",
    )
    rp.add_argument("--output", default=None, help="Write the full report as JSON to this file")

    # summary
    sm = subparsers.add_parser(
        "summary",
        help="Overall performance summary",
        description="Print the overall performance metrics for a trade file.",
    )
    _add_metric_options(sm)

    return parser


def main() -> None:
    """Main entry point."""
    setup_logging(settings.log_level)

    parser = build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    command_map = {
        "report": cmd_report,
        "summary": cmd_summary,
    }

    handler = command_map[args.command]
    handler(args)


if __name__ == "__main__":
    main()
