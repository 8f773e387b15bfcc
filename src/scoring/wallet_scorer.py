"""Wallet scoring pipeline.

profile + dev analysis (concurrent) -> trade history -> 7d recency filter
-> per token: candles -> evaluate -> accumulate -> finalize.

Candle requests run one token at a time through the client's rate limiter;
that sequencing is what keeps the upstream within its request budget.
"""

import asyncio
import time
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from loguru import logger

from src.parsers.okx.client import OkxClient
from src.parsers.okx.models import TradeRecord
from src.scoring.config import DEFAULT_CONFIG, ScoringConfig, chain_name
from src.scoring.token_evaluator import evaluate_token
from src.scoring.types import TokenResult, WalletReport, WalletStats


def filter_recent(
    records: Iterable[TradeRecord], now_ms: int, window_ms: int
) -> list[TradeRecord]:
    """Records active within ``window_ms`` of ``now_ms``, upstream order kept."""
    cutoff = now_ms - window_ms
    return [r for r in records if r.latest_time and r.latest_time >= cutoff]


def summarize(tokens: Sequence[TokenResult], total_tokens: int | None = None) -> WalletStats:
    """Roll evaluated tokens up into wallet-level statistics.

    ``avg_score`` averages the per-buy population (each token's score
    repeated buy_count times); the distribution counts each token once.
    """
    stats = WalletStats(total_tokens=len(tokens) if total_tokens is None else total_tokens)
    scores: list[int] = []

    for token in tokens:
        scores.extend(token.entry_scores)
        stats.distribution.add(token.score)
        if token.is_rugged:
            stats.rugged += 1
        if token.holding:
            stats.held += 1
            stats.total_bags_value += token.balance_usd

    stats.total_buys = len(scores)
    stats.avg_score = sum(scores) / len(scores) if scores else 0.0
    return stats


class WalletScorer:
    """Scores one wallet per call. Holds no per-wallet state between calls."""

    def __init__(self, client: OkxClient, config: ScoringConfig = DEFAULT_CONFIG) -> None:
        self._client = client
        self._config = config

    async def score_wallet(
        self,
        wallet: str,
        chain_id: int,
        max_tokens: int | None = None,
        now_ms: int | None = None,
    ) -> WalletReport:
        if max_tokens is None:
            max_tokens = self._config.max_tokens
        elif max_tokens < 1:
            raise ValueError(f"max_tokens must be positive, got {max_tokens}")
        now_ms = now_ms if now_ms is not None else int(time.time() * 1000)

        report = WalletReport(
            wallet=wallet,
            chain_id=chain_id,
            chain=chain_name(chain_id),
            timestamp=datetime.now(UTC).isoformat(),
        )

        report.kol, report.dev = await asyncio.gather(
            self._client.get_wallet_profile(chain_id, wallet),
            self._client.get_dev_analysis(chain_id, wallet),
        )

        history = await self._client.get_trading_history(chain_id, wallet, limit=max_tokens)
        recent = filter_recent(history, now_ms, self._config.recency_window_ms)
        logger.info(
            f"[SCORER] {wallet[:8]} on {report.chain}: "
            f"{len(recent)}/{len(history)} tokens active in window"
        )

        realized = unrealized = 0.0
        for record in recent[:max_tokens]:
            candles = await self._client.get_candles(
                chain_id,
                record.token_address,
                limit=self._config.candle_limit,
                bar=self._config.candle_bar,
            )
            result = evaluate_token(record, candles, self._config)
            report.tokens.append(result)
            realized += record.realized_pnl
            unrealized += record.unrealized_pnl
            logger.debug(
                f"[SCORER] {result.symbol}: score={result.score} "
                f"({result.before_context}/{result.after_context}) "
                f"candles={len(candles)} mult={result.multiplier:.2f}"
            )

        report.stats = summarize(report.tokens, total_tokens=len(recent))
        report.stats.realized_pnl = realized
        report.stats.unrealized_pnl = unrealized

        logger.info(
            f"[SCORER] {wallet[:8]} avg={report.stats.avg_score:.2f} "
            f"entries={report.stats.total_buys} rugged={report.stats.rugged}"
        )
        return report

    async def close(self) -> None:
        await self._client.close()


def create_wallet_scorer() -> WalletScorer:
    """WalletScorer wired from application settings."""
    from config.settings import settings

    client = OkxClient(max_rps=settings.okx_max_rps, timeout=settings.okx_timeout_sec)
    return WalletScorer(client, ScoringConfig.from_settings(settings))
