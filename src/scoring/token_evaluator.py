"""Per-token evaluation: multiplier, rug check and entry score.

Only the average buy price is known per token, so the entry is placed at
the candle whose close is nearest to it and that one score stands in for
every buy of the token.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from src.parsers.okx.models import TradeRecord
from src.scoring.config import DEFAULT_CONFIG, ScoringConfig
from src.scoring.entry_context import score_entry
from src.scoring.types import Candle, TokenResult


@dataclass(frozen=True)
class RugCheck:
    is_rugged: bool
    rug_pct: float  # % below the observed peak
    current_price: float | None = None
    peak_price: float | None = None


def compute_multiplier(buy_volume: float, sell_volume: float, balance_usd: float) -> float:
    """Value returned (sold + still held) per unit invested."""
    if buy_volume <= 0:
        return 0.0
    return max((sell_volume + balance_usd) / buy_volume, 0.0)


def detect_rug(candles: Sequence[Candle], config: ScoringConfig = DEFAULT_CONFIG) -> RugCheck:
    """Compare the latest close against the highest high in the series."""
    if not candles:
        return RugCheck(is_rugged=False, rug_pct=0.0)

    latest = max(candles, key=lambda c: c.timestamp)
    peak = max(c.high for c in candles)
    if peak <= 0:
        return RugCheck(False, 0.0, latest.close, peak)

    rug_pct = (peak - latest.close) / peak * 100
    return RugCheck(
        is_rugged=rug_pct >= config.rug_drop_pct,
        rug_pct=rug_pct,
        current_price=latest.close,
        peak_price=peak,
    )


def find_entry_candle(candles: Sequence[Candle], avg_price: float) -> Candle | None:
    """Candle whose close is nearest to ``avg_price``; first one wins ties."""
    best: Candle | None = None
    best_diff = float("inf")
    for candle in candles:
        diff = abs(candle.close - avg_price)
        if diff < best_diff:
            best, best_diff = candle, diff
    return best


def evaluate_token(
    record: TradeRecord,
    candles: Sequence[Candle],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> TokenResult:
    multiplier = compute_multiplier(record.buy_volume, record.sell_volume, record.balance_usd)
    rug = detect_rug(candles, config)

    score = 0
    before = after = None
    scored = False
    if candles and record.buy_count > 0 and record.buy_avg_price > 0:
        entry = find_entry_candle(candles, record.buy_avg_price)
        if entry is not None:
            score, before, after = score_entry(
                record.buy_avg_price, entry.timestamp, candles, config
            )
            scored = True

    return TokenResult(
        symbol=record.symbol,
        address=record.token_address,
        buy_count=record.buy_count,
        sell_count=record.sell_count,
        score=score,
        pnl=record.total_pnl,
        balance_usd=record.balance_usd,
        multiplier=multiplier,
        is_rugged=rug.is_rugged,
        holding=record.balance > 0,
        rug_pct=rug.rug_pct,
        scored=scored,
        before_context=before,
        after_context=after,
    )
