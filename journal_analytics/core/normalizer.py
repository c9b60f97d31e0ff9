"""Validation boundary between loosely typed trade records and the analytics core."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date, datetime
from typing import Any

from journal_analytics.core.types import NormalizedTradeSet, SkippedTrade, SkipReason, Trade

logger = logging.getLogger(__name__)

_TRADE_FIELDS = (
    "symbol",
    "market",
    "side",
    "quantity",
    "entry_price",
    "exit_price",
    "strategy_id",
)


def parse_trade_date(value: Any) -> date | None:
    """Coerce a date, datetime or ISO string to a calendar date.

    Returns None when the value is missing or cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return None
    return None


def _parse_pnl(value: Any) -> float | SkipReason:
    if value is None or (isinstance(value, str) and not value.strip()):
        return SkipReason.MISSING_PNL
    # bool is an int subclass, but True/False is never a P&L
    if isinstance(value, bool):
        return SkipReason.INVALID_PNL
    try:
        pnl = float(value)
    except (TypeError, ValueError):
        return SkipReason.INVALID_PNL
    if not math.isfinite(pnl):
        return SkipReason.NON_FINITE_PNL
    return pnl


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _normalize_side(value: Any) -> str | None:
    text = _optional_str(value)
    if text is None:
        return None
    side = text.capitalize()
    return side if side in ("Buy", "Sell") else None


def validate_trade(record: Trade | Mapping[str, Any], position: int = 0) -> Trade | SkippedTrade:
    """Validate a single record.

    Returns a ``Trade`` with a finite float ``pnl`` and a parsed
    ``trade_date``, or a ``SkippedTrade`` naming why it was rejected.
    """
    if isinstance(record, Trade):
        raw: Mapping[str, Any] = {
            "id": record.id,
            "trade_date": record.trade_date,
            "pnl": record.pnl,
        }
    elif isinstance(record, Mapping):
        raw = record
    else:
        return SkippedTrade(position=position, trade_id=None, reason=SkipReason.INVALID_RECORD)

    trade_id = _optional_str(raw.get("id"))

    pnl = _parse_pnl(raw.get("pnl"))
    if isinstance(pnl, SkipReason):
        return SkippedTrade(position=position, trade_id=trade_id, reason=pnl)

    trade_date = parse_trade_date(raw.get("trade_date"))
    if trade_date is None:
        return SkippedTrade(
            position=position, trade_id=trade_id, reason=SkipReason.INVALID_TRADE_DATE
        )

    if isinstance(record, Trade):
        if type(record.pnl) is float and type(record.trade_date) is date:
            return record
        return replace(record, pnl=pnl, trade_date=trade_date)

    extras = {name: raw.get(name) for name in _TRADE_FIELDS}
    return Trade(
        id=trade_id if trade_id is not None else str(position),
        trade_date=trade_date,
        pnl=pnl,
        symbol=_optional_str(extras["symbol"]) or "",
        market=_optional_str(extras["market"]) or "",
        side=_normalize_side(extras["side"]),  # type: ignore[arg-type]
        quantity=_optional_float(extras["quantity"]),
        entry_price=_optional_float(extras["entry_price"]),
        exit_price=_optional_float(extras["exit_price"]),
        strategy_id=_optional_str(extras["strategy_id"]),
    )


def normalize_trades(records: Iterable[Trade | Mapping[str, Any]]) -> NormalizedTradeSet:
    """Filter invalid records and sort the rest ascending by trade_date.

    The sort is stable, so trades sharing a date keep their input order.
    Every rejected record is kept in ``skipped``; nothing is dropped
    silently.
    """
    valid: list[Trade] = []
    skipped: list[SkippedTrade] = []

    for position, record in enumerate(records):
        result = validate_trade(record, position)
        if isinstance(result, SkippedTrade):
            logger.debug(
                "Skipping record %d (id=%s): %s",
                result.position,
                result.trade_id,
                result.reason.value,
            )
            skipped.append(result)
        else:
            valid.append(result)

    valid.sort(key=lambda t: t.trade_date)  # type: ignore[arg-type,return-value]

    if skipped:
        logger.info(
            "Normalized %d trades, skipped %d invalid records",
            len(valid),
            len(skipped),
        )

    return NormalizedTradeSet(trades=tuple(valid), skipped=tuple(skipped))
