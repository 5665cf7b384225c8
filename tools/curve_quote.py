#!/usr/bin/env python3
"""
Quote trades against a configured linear bonding curve.

Single quote:
    python3 tools/curve_quote.py --curve rly_cc --direction a_to_b --amount 240000000000

Replay (one ``direction,amount`` per stdin line, pool state printed after each):
    printf 'a_to_b,240000000000\\nb_to_a,3000000000\\n' | python3 tools/curve_quote.py --curve rly_cc --replay
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bondcurve.core.curve_state import try_trade
from bondcurve.core.errors import BondingCurveError
from bondcurve.core.types import TradeDirection, TradeOutcome
from bondcurve.integration.config import ConfigError, load_curve_configs
from bondcurve.state.pools import PoolSnapshot

DEFAULT_CONFIG = ROOT / "configs" / "linear_curves.yaml"

logger = logging.getLogger("curve_quote")


def _parse_direction(raw: str) -> TradeDirection:
    try:
        return TradeDirection(raw.strip().lower())
    except ValueError as exc:
        raise ValueError(f"unknown direction: {raw!r} (expected a_to_b or b_to_a)") from exc


def _parse_replay_lines(lines: Iterable[str]) -> Iterable[Tuple[int, TradeDirection, int]]:
    for lineno, line in enumerate(lines, start=1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 2:
            raise ValueError(f"line {lineno}: expected 'direction,amount', got {text!r}")
        try:
            amount = int(parts[1])
        except ValueError as exc:
            raise ValueError(f"line {lineno}: amount must be an int: {parts[1]!r}") from exc
        yield lineno, _parse_direction(parts[0]), amount


def _outcome_to_dict(outcome: TradeOutcome) -> Dict[str, Any]:
    if not outcome.accepted or outcome.result is None:
        return {"accepted": False, "code": outcome.code, "rejection": outcome.rejection}
    r = outcome.result
    return {
        "accepted": True,
        "direction": r.direction.value,
        "actual_amount_in": r.actual_amount_in,
        "amount_out": r.amount_out,
        "capped": r.capped,
    }


def _quote(pool: PoolSnapshot, direction: TradeDirection, amount: int, min_out: int) -> TradeOutcome:
    return try_trade(pool.curve, direction, pool.collateral_balance, pool.bonded_balance, amount, min_out)


def _emit(obj: Dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(obj, sort_keys=True) + "\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Quote trades against a linear bonding curve")
    ap.add_argument("--config", type=str, default=str(DEFAULT_CONFIG))
    ap.add_argument("--curve", type=str, required=True)
    ap.add_argument("--collateral", type=int, default=None, help="pool collateral balance (default: genesis)")
    ap.add_argument("--bonded", type=int, default=None, help="pool bonded balance (default: genesis)")
    ap.add_argument("--direction", type=str, default="a_to_b")
    ap.add_argument("--amount", type=int, default=None)
    ap.add_argument("--min-out", type=int, default=0)
    ap.add_argument("--replay", action="store_true", help="read direction,amount lines from stdin")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        configs = load_curve_configs(args.config)
    except (OSError, ConfigError) as exc:
        raise SystemExit(f"config error: {exc}")
    cfg = configs.get(args.curve)
    if cfg is None:
        raise SystemExit(f"unknown curve: {args.curve} (available: {', '.join(sorted(configs))})")

    pool = cfg.genesis()
    if args.collateral is not None or args.bonded is not None:
        try:
            pool = PoolSnapshot(
                curve=pool.curve,
                collateral_balance=pool.collateral_balance if args.collateral is None else args.collateral,
                bonded_balance=pool.bonded_balance if args.bonded is None else args.bonded,
            )
        except BondingCurveError as exc:
            raise SystemExit(f"invalid balances: {exc}")
    logger.debug("curve %s id=%s", cfg.name, pool.curve_id)

    if args.replay:
        rejected = 0
        try:
            for lineno, direction, amount in _parse_replay_lines(sys.stdin):
                outcome = _quote(pool, direction, amount, 0)
                record = _outcome_to_dict(outcome)
                record["line"] = lineno
                if outcome.accepted and outcome.result is not None:
                    pool = pool.apply(outcome.result)
                else:
                    rejected += 1
                record["collateral_balance"] = pool.collateral_balance
                record["bonded_balance"] = pool.bonded_balance
                _emit(record)
        except ValueError as exc:
            raise SystemExit(f"replay error: {exc}")
        return 1 if rejected else 0

    if args.amount is None:
        raise SystemExit("--amount is required unless --replay is given")
    try:
        direction = _parse_direction(args.direction)
    except ValueError as exc:
        raise SystemExit(str(exc))

    outcome = _quote(pool, direction, args.amount, args.min_out)
    _emit(_outcome_to_dict(outcome))
    return 0 if outcome.accepted else 1


if __name__ == "__main__":
    raise SystemExit(main())
