"""Entry context analysis: how a buy sits against the candles around it.

Three steps, all pure:
  1. ``window_extremes`` cuts the candle series into the lookback window
     before the entry and the lookforward window after it.
  2. ``classify_before`` / ``classify_after`` turn each window's range into
     a price-movement label relative to the entry price.
  3. ``score_buy`` looks the label pair up in ``ENTRY_SCORE_MATRIX``.

Buying into weakness that then recovers scores high, buying into strength
that then reverses scores low.
"""

from collections.abc import Sequence

from src.scoring.config import DEFAULT_CONFIG, ScoringConfig
from src.scoring.types import AfterContext, BeforeContext, Candle, WindowExtremes

_WEAK_ENTRY_ROW: dict[AfterContext, int] = {
    AfterContext.MOON: 2,
    AfterContext.PUMP: 1,
    AfterContext.FLAT: 0,
    AfterContext.DIP: -1,
    AfterContext.DUMP: -2,
}

ENTRY_SCORE_MATRIX: dict[BeforeContext, dict[AfterContext, int]] = {
    BeforeContext.DUMPED_TO: _WEAK_ENTRY_ROW,
    BeforeContext.FELL_TO: _WEAK_ENTRY_ROW,
    BeforeContext.FLAT: _WEAK_ENTRY_ROW,
    BeforeContext.ROSE_TO: {
        AfterContext.MOON: 1,
        AfterContext.PUMP: 0,
        AfterContext.FLAT: -1,
        AfterContext.DIP: -2,
        AfterContext.DUMP: -2,
    },
    BeforeContext.PUMPED_TO: {
        AfterContext.MOON: 0,
        AfterContext.PUMP: -1,
        AfterContext.FLAT: -1,
        AfterContext.DIP: -2,
        AfterContext.DUMP: -2,
    },
}


def window_extremes(
    entry_price: float,
    entry_time: int,
    candles: Sequence[Candle],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> WindowExtremes:
    """Low/high of the candles before and after ``entry_time``.

    The entry candle itself belongs to neither window. An empty window
    reports the entry price as both its min and max.
    """
    window_start = entry_time - config.lookback_ms
    window_end = entry_time + config.lookforward_ms

    before = [c for c in candles if window_start <= c.timestamp < entry_time]
    after = [c for c in candles if entry_time < c.timestamp <= window_end]

    return WindowExtremes(
        before_min=min((c.low for c in before), default=entry_price),
        before_max=max((c.high for c in before), default=entry_price),
        after_min=min((c.low for c in after), default=entry_price),
        after_max=max((c.high for c in after), default=entry_price),
        before_count=len(before),
        after_count=len(after),
    )


def classify_before(
    entry_price: float,
    before_min: float,
    before_max: float,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> BeforeContext:
    if before_min <= 0 or before_max <= 0:
        return BeforeContext.FLAT

    rise_to_entry = (entry_price - before_min) / before_min * 100
    fall_to_entry = (before_max - entry_price) / before_max * 100

    if rise_to_entry > config.strong_move_pct and rise_to_entry > fall_to_entry:
        return BeforeContext.PUMPED_TO
    if rise_to_entry > config.move_pct and rise_to_entry > fall_to_entry:
        return BeforeContext.ROSE_TO
    if fall_to_entry > config.strong_move_pct and fall_to_entry > rise_to_entry:
        return BeforeContext.DUMPED_TO
    if fall_to_entry > config.move_pct and fall_to_entry > rise_to_entry:
        return BeforeContext.FELL_TO
    return BeforeContext.FLAT


def classify_after(
    entry_price: float,
    after_min: float,
    after_max: float,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> AfterContext:
    if entry_price <= 0:
        return AfterContext.FLAT

    pct_up = (after_max - entry_price) / entry_price * 100
    pct_down = (entry_price - after_min) / entry_price * 100

    if pct_up > config.strong_move_pct and pct_up > pct_down:
        return AfterContext.MOON
    if pct_up > config.move_pct and pct_up > pct_down:
        return AfterContext.PUMP
    if pct_down > config.strong_move_pct and pct_down > pct_up:
        return AfterContext.DUMP
    if pct_down > config.move_pct and pct_down > pct_up:
        return AfterContext.DIP
    return AfterContext.FLAT


def score_buy(before: BeforeContext | str, after: AfterContext | str) -> int:
    """Matrix lookup; unknown labels score 0."""
    row = ENTRY_SCORE_MATRIX.get(before)  # type: ignore[call-overload]
    if row is None:
        return 0
    return row.get(after, 0)  # type: ignore[call-overload]


def score_entry(
    entry_price: float,
    entry_time: int,
    candles: Sequence[Candle],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> tuple[int, BeforeContext, AfterContext]:
    """Classify both windows around an entry and score the pair."""
    ext = window_extremes(entry_price, entry_time, candles, config)
    before = classify_before(entry_price, ext.before_min, ext.before_max, config)
    after = classify_after(entry_price, ext.after_min, ext.after_max, config)
    return score_buy(before, after), before, after
