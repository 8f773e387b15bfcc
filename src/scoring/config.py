"""Immutable scoring configuration and the supported-chain registry.

Components receive a ``ScoringConfig`` explicitly instead of reading
module globals, so the scoring core can be exercised with any windows
or thresholds in tests.
"""

from __future__ import annotations

from dataclasses import dataclass

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS


@dataclass(frozen=True)
class Explorer:
    name: str
    wallet_url: str
    token_url: str


@dataclass(frozen=True)
class ChainInfo:
    chain_id: int
    name: str
    aliases: tuple[str, ...]
    explorer: Explorer


CHAINS: dict[int, ChainInfo] = {
    501: ChainInfo(
        chain_id=501,
        name="Solana",
        aliases=("sol", "solana"),
        explorer=Explorer("Solscan", "https://solscan.io/account/", "https://solscan.io/token/"),
    ),
    1: ChainInfo(
        chain_id=1,
        name="Ethereum",
        aliases=("eth", "ethereum"),
        explorer=Explorer("Etherscan", "https://etherscan.io/address/", "https://etherscan.io/token/"),
    ),
    56: ChainInfo(
        chain_id=56,
        name="BSC",
        aliases=("bsc", "bnb"),
        explorer=Explorer("BscScan", "https://bscscan.com/address/", "https://bscscan.com/token/"),
    ),
    8453: ChainInfo(
        chain_id=8453,
        name="Base",
        aliases=("base",),
        explorer=Explorer("Basescan", "https://basescan.org/address/", "https://basescan.org/token/"),
    ),
}

CHAIN_ALIASES: dict[str, int] = {
    alias: info.chain_id for info in CHAINS.values() for alias in info.aliases
}

DEFAULT_CHAIN_ID = 501


def resolve_chain(arg: str | None) -> int | None:
    """Map a user-supplied chain name ("sol", "ETH", ...) to its chain id."""
    if not arg:
        return DEFAULT_CHAIN_ID
    return CHAIN_ALIASES.get(arg.strip().lower())


def chain_name(chain_id: int) -> str:
    info = CHAINS.get(chain_id)
    return info.name if info else f"Chain {chain_id}"


def explorer_for(chain_id: int) -> Explorer:
    """Explorer links for a chain, Solscan for unknown ids."""
    info = CHAINS.get(chain_id) or CHAINS[DEFAULT_CHAIN_ID]
    return info.explorer


@dataclass(frozen=True)
class ScoringConfig:
    lookback_ms: int = 8 * HOUR_MS
    lookforward_ms: int = 24 * HOUR_MS
    strong_move_pct: float = 25.0  # pumped_to / dumped_to / moon / dump
    move_pct: float = 10.0  # rose_to / fell_to / pump / dip
    rug_drop_pct: float = 90.0
    recency_window_ms: int = 7 * DAY_MS
    max_tokens: int = 30
    candle_bar: str = "15m"
    candle_limit: int = 500

    @classmethod
    def from_settings(cls, settings) -> ScoringConfig:
        return cls(
            recency_window_ms=settings.recency_days * DAY_MS,
            max_tokens=settings.score_max_tokens,
            candle_bar=settings.candle_bar,
            candle_limit=settings.candle_limit,
        )


DEFAULT_CONFIG = ScoringConfig()
