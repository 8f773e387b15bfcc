"""OKX web3 market API client (public priapi endpoints, no key).

Wallet profile and trade history are required for scoring and raise on
failure. Dev analysis and candles are optional: any failure is logged and
replaced by a neutral value so one bad token never aborts a wallet.
"""

import time
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from src.parsers.okx import endpoints
from src.parsers.okx.exceptions import OkxApiError, OkxError, OkxHttpError
from src.parsers.okx.models import DevSummary, KolProfile, TradeRecord, TradingHistoryPage
from src.parsers.rate_limiter import RateLimiter
from src.scoring.types import Candle


def _now_ms() -> int:
    return int(time.time() * 1000)


def _code_ok(data: dict[str, Any]) -> bool:
    # Candles answer with "0", pnl endpoints with 0
    return str(data.get("code")) == "0"


class OkxClient:
    """Async REST client for the OKX wallet PnL and candle endpoints.

    Trade-history pages and candle requests go through the rate limiter
    (default 10 RPS = 100ms spacing). Profile and dev-analysis calls are
    not paced so they can run concurrently.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter | None = None,
        max_rps: float = 10.0,
        timeout: float = 15.0,
    ) -> None:
        self._rate_limiter = rate_limiter or RateLimiter(max_rps)
        self._client = httpx.AsyncClient(
            base_url=endpoints.BASE_URL,
            timeout=timeout,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    async def _request(
        self, path: str, params: dict[str, Any], *, paced: bool = False
    ) -> dict[str, Any]:
        """GET ``path`` and return the decoded JSON body.

        Raises OkxHttpError on transport errors, non-2xx or a non-JSON body.
        Business codes are left to the caller.
        """
        if paced:
            await self._rate_limiter.acquire()
        query = {**params, "t": _now_ms()}
        try:
            resp = await self._client.get(path, params=query)
        except httpx.RequestError as e:
            raise OkxHttpError(f"Request failed: {path}: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise OkxHttpError(f"HTTP {resp.status_code}", status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise OkxHttpError(f"Invalid JSON from {path}", status_code=resp.status_code) from e
        if not isinstance(data, dict):
            raise OkxHttpError(f"Unexpected response shape from {path}")
        return data

    async def get_wallet_profile(self, chain_id: int, wallet: str) -> KolProfile:
        data = await self._request(
            endpoints.WALLET_PROFILE,
            {"chainId": chain_id, "walletAddress": wallet},
        )
        if not _code_ok(data):
            logger.debug(f"[OKX] wallet profile code={data.get('code')} for {wallet[:8]}")
            return KolProfile(is_kol=False)

        body = data.get("data") or {}
        tags = body.get("t") if isinstance(body, dict) else None
        kol_tag = next(
            (t for t in tags or [] if isinstance(t, dict) and t.get("k") == "kol"),
            None,
        )
        if kol_tag is None:
            return KolProfile(is_kol=False)

        extra = kol_tag.get("e")
        if not isinstance(extra, dict):
            extra = {}
        return KolProfile(
            is_kol=True,
            name=extra.get("name") or "Unknown",
            twitter=extra.get("kolTwitterLink") or None,
        )

    async def get_dev_analysis(self, chain_id: int, wallet: str) -> DevSummary:
        """Token-creator history. Never raises: failures mean "not a dev"."""
        try:
            data = await self._request(
                endpoints.DEV_ANALYSIS,
                {
                    "chainId": chain_id,
                    "walletAddress": wallet,
                    "isDesc": "true",
                    "sortBy": 1,
                    "page": 1,
                    "pageSize": 1,
                    "filterRisk": "false",
                    "filterUnmigrate": "false",
                },
            )
        except OkxError as e:
            logger.debug(f"[OKX] dev analysis failed for {wallet[:8]}: {e}")
            return DevSummary(is_dev=False)

        if not _code_ok(data):
            return DevSummary(is_dev=False)

        body = data.get("data")
        summary = body.get("devAnalysisSummaryVO") if isinstance(body, dict) else None
        if not isinstance(summary, dict):
            return DevSummary(is_dev=False)

        try:
            token_count = int(summary.get("createdTokenCount") or 0)
            rug_count = int(summary.get("ruggedTokenCount") or 0)
            golden_dog_count = int(summary.get("goldenDogCount") or 0)
        except (TypeError, ValueError):
            logger.debug(f"[OKX] malformed dev summary for {wallet[:8]}: {summary}")
            return DevSummary(is_dev=False)

        if token_count <= 0:
            return DevSummary(is_dev=False)
        return DevSummary(
            is_dev=True,
            token_count=token_count,
            rug_count=rug_count,
            golden_dog_count=golden_dog_count,
        )

    async def get_trading_history(
        self, chain_id: int, wallet: str, limit: int = 50
    ) -> list[TradeRecord]:
        """Traded tokens, most recent activity first, up to ``limit`` entries.

        A business error on the first page raises OkxApiError; on a later
        page it ends pagination with what was collected so far.
        """
        tokens: list[TradeRecord] = []
        offset = 0

        while len(tokens) < limit:
            data = await self._request(
                endpoints.TRADING_HISTORY,
                {
                    "walletAddress": wallet,
                    "chainId": chain_id,
                    "isAsc": "false",
                    "sortType": 2,
                    "offset": offset,
                    "limit": endpoints.TRADING_HISTORY_PAGE_SIZE,
                    "filterRisk": "false",
                    "filterSmallBalance": "false",
                    "filterEmptyBalance": "false",
                },
                paced=True,
            )
            if not _code_ok(data):
                if not tokens:
                    raise OkxApiError(
                        f"Trading history error {data.get('code')}: {data.get('msg', '')}",
                        code=data.get("code"),
                    )
                logger.warning(
                    f"[OKX] history page at offset {offset} failed "
                    f"(code={data.get('code')}), keeping {len(tokens)} tokens"
                )
                break

            try:
                page = TradingHistoryPage.model_validate(data.get("data") or {})
            except ValidationError as e:
                raise OkxApiError(f"Malformed trading history page: {e}") from e

            tokens.extend(page.token_list)
            if not page.has_next or len(tokens) >= limit:
                break
            # Each page must be non-empty and move the offset forward
            if not page.token_list or page.offset <= offset:
                logger.warning(
                    f"[OKX] history pagination stalled at offset {offset} "
                    f"(next={page.offset}, page={len(page.token_list)}), keeping {len(tokens)} tokens"
                )
                break
            offset = page.offset

        return tokens[:limit]

    async def get_candles(
        self, chain_id: int, token_address: str, limit: int = 500, bar: str = "15m"
    ) -> list[Candle]:
        """OHLC candles as returned upstream (newest first). Empty on any failure."""
        try:
            data = await self._request(
                endpoints.CANDLES,
                {"chainId": chain_id, "address": token_address, "bar": bar, "limit": limit},
                paced=True,
            )
        except OkxError as e:
            logger.debug(f"[OKX] candles failed for {token_address[:12]}: {e}")
            return []

        if not _code_ok(data):
            logger.debug(f"[OKX] candles code={data.get('code')} for {token_address[:12]}")
            return []

        rows = data.get("data")
        if not isinstance(rows, list):
            return []
        return _parse_candles(rows)

    async def close(self) -> None:
        await self._client.aclose()


def _parse_candles(rows: list[Any]) -> list[Candle]:
    """Parse `[ts, o, h, l, c, ...]` rows, skipping malformed ones."""
    candles: list[Candle] = []
    for row in rows:
        if not isinstance(row, (list, tuple)) or len(row) < 5:
            continue
        try:
            candles.append(Candle(
                timestamp=int(row[0]),
                open=float(row[1]),
                high=float(row[2]),
                low=float(row[3]),
                close=float(row[4]),
            ))
        except (TypeError, ValueError):
            continue
    return candles
