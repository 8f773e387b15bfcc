"""Value types shared by the scoring pipeline.

Candles come in from the market API, everything else is built once per
wallet-scoring call and handed back to the front ends.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

from src.parsers.okx.models import DevSummary, KolProfile


@dataclass(frozen=True)
class Candle:
    timestamp: int  # epoch ms, bar open
    open: float
    high: float
    low: float
    close: float


class BeforeContext(StrEnum):
    """How price moved into the entry over the lookback window."""

    PUMPED_TO = "pumped_to"
    ROSE_TO = "rose_to"
    FLAT = "flat"
    FELL_TO = "fell_to"
    DUMPED_TO = "dumped_to"


class AfterContext(StrEnum):
    """How price moved away from the entry over the lookforward window."""

    MOON = "moon"
    PUMP = "pump"
    FLAT = "flat"
    DIP = "dip"
    DUMP = "dump"


@dataclass(frozen=True)
class WindowExtremes:
    """Price range of the candles flanking an entry."""

    before_min: float
    before_max: float
    after_min: float
    after_max: float
    before_count: int = 0
    after_count: int = 0


@dataclass(frozen=True)
class TokenResult:
    symbol: str
    address: str
    buy_count: int
    sell_count: int
    score: int
    pnl: float
    balance_usd: float
    multiplier: float
    is_rugged: bool
    holding: bool
    rug_pct: float = 0.0
    scored: bool = False  # False when no candles / buys / avg price
    before_context: BeforeContext | None = None
    after_context: AfterContext | None = None

    @property
    def entry_scores(self) -> list[int]:
        """Per-buy score population: the token score repeated buy_count times."""
        if not self.scored:
            return []
        return [self.score] * self.buy_count


@dataclass
class ScoreDistribution:
    excellent: int = 0  # +2
    good: int = 0  # +1
    neutral: int = 0  # 0, also unscored tokens
    poor: int = 0  # -1
    terrible: int = 0  # -2

    def add(self, score: int) -> None:
        if score == 2:
            self.excellent += 1
        elif score == 1:
            self.good += 1
        elif score == 0:
            self.neutral += 1
        elif score == -1:
            self.poor += 1
        elif score == -2:
            self.terrible += 1

    @property
    def total(self) -> int:
        return self.excellent + self.good + self.neutral + self.poor + self.terrible


@dataclass
class WalletStats:
    total_tokens: int = 0
    total_buys: int = 0
    avg_score: float = 0.0
    distribution: ScoreDistribution = field(default_factory=ScoreDistribution)
    realized_pnl: float = 0.0
    unrealized_pnl: float = 0.0
    total_bags_value: float = 0.0
    rugged: int = 0
    held: int = 0


@dataclass
class WalletReport:
    wallet: str
    chain_id: int
    chain: str
    timestamp: str  # UTC ISO-8601
    kol: KolProfile | None = None
    dev: DevSummary | None = None
    stats: WalletStats = field(default_factory=WalletStats)
    tokens: list[TokenResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict (enums as their values, pydantic parts dumped)."""
        return {
            "wallet": self.wallet,
            "chain": self.chain,
            "chain_id": self.chain_id,
            "timestamp": self.timestamp,
            "kol": self.kol.model_dump() if self.kol else None,
            "dev": self.dev.model_dump() if self.dev else None,
            "stats": asdict(self.stats),
            "tokens": [
                {
                    **asdict(t),
                    "before_context": t.before_context.value if t.before_context else None,
                    "after_context": t.after_context.value if t.after_context else None,
                }
                for t in self.tokens
            ],
        }
