"""Tests for the OKX web3 market API client and its response models."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.parsers.okx import endpoints
from src.parsers.okx.client import OkxClient, _parse_candles
from src.parsers.okx.exceptions import OkxApiError, OkxHttpError
from src.parsers.okx.models import TradeRecord, TradingHistoryPage

WALLET = "FCMXEqaSGdEHbufTCMBdG9kDd5MvU9tQmWqPn9yXF9qb"


def make_response(payload, status_code: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


class TestModels:
    def test_trade_record_parses_string_numbers(self) -> None:
        record = TradeRecord.model_validate({
            "tokenContractAddress": "Mint111",
            "tokenSymbol": "BONK",
            "totalTxBuy": "4",
            "totalTxSell": 2,
            "buyAvgPrice": "0.0000123",
            "buyVolume": "250.5",
            "balanceUsd": "12",
            "realizedPnl": "-3.25",
            "latestTime": "1700000000000",
        })
        assert record.buy_count == 4
        assert record.sell_count == 2
        assert record.buy_avg_price == pytest.approx(0.0000123)
        assert record.buy_volume == pytest.approx(250.5)
        assert record.realized_pnl == pytest.approx(-3.25)
        assert record.latest_time == 1_700_000_000_000

    def test_trade_record_defaults_malformed_fields(self) -> None:
        record = TradeRecord.model_validate({
            "tokenContractAddress": "Mint111",
            "tokenSymbol": "",
            "buyAvgPrice": "n/a",
            "sellVolume": None,
            "totalPnl": "NaN",
            "latestTime": "soon",
        })
        assert record.symbol == "UNKNOWN"
        assert record.buy_count == 0
        assert record.buy_avg_price == 0.0
        assert record.sell_volume == 0.0
        assert record.total_pnl == 0.0
        assert record.latest_time is None

    def test_trade_record_is_immutable(self) -> None:
        record = TradeRecord.model_validate({"tokenContractAddress": "Mint111"})
        with pytest.raises(Exception):
            record.balance = 5.0  # type: ignore[misc]

    def test_history_page(self) -> None:
        page = TradingHistoryPage.model_validate(
            {"tokenList": [{"tokenContractAddress": "a"}], "hasNext": "true", "offset": "20"}
        )
        assert len(page.token_list) == 1
        assert page.has_next is True
        assert page.offset == 20

    def test_parse_candles_skips_bad_rows(self) -> None:
        rows = [
            ["1700000000000", "1.0", "1.2", "0.9", "1.1", "123"],
            ["bad", "1", "1", "1", "1"],
            ["1700000900000", "1.1"],
            None,
        ]
        candles = _parse_candles(rows)
        assert len(candles) == 1
        assert candles[0].timestamp == 1_700_000_000_000
        assert candles[0].high == 1.2
        assert candles[0].close == 1.1


class TestWalletProfile:
    @pytest.mark.asyncio
    async def test_kol_tag(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(return_value=make_response({
            "code": 0,
            "data": {"t": [
                {"k": "smart"},
                {"k": "kol", "e": {"name": "Ansem", "kolTwitterLink": "https://x.com/blknoiz06"}},
            ]},
        }))
        profile = await okx_client.get_wallet_profile(501, WALLET)

        assert profile.is_kol
        assert profile.name == "Ansem"
        assert profile.twitter == "https://x.com/blknoiz06"
        path = okx_client._client.get.call_args.args[0]
        params = okx_client._client.get.call_args.kwargs["params"]
        assert path == endpoints.WALLET_PROFILE
        assert params["chainId"] == 501
        assert params["walletAddress"] == WALLET
        assert "t" in params

    @pytest.mark.asyncio
    async def test_kol_without_name(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(return_value=make_response(
            {"code": 0, "data": {"t": [{"k": "kol"}]}}
        ))
        profile = await okx_client.get_wallet_profile(501, WALLET)
        assert profile.is_kol
        assert profile.name == "Unknown"
        assert profile.twitter is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("extra", ["Ansem", ["Ansem"], 7])
    async def test_kol_with_malformed_extra(self, okx_client: OkxClient, extra) -> None:
        okx_client._client.get = AsyncMock(return_value=make_response(
            {"code": 0, "data": {"t": [{"k": "kol", "e": extra}]}}
        ))
        profile = await okx_client.get_wallet_profile(501, WALLET)
        assert profile.is_kol
        assert profile.name == "Unknown"
        assert profile.twitter is None

    @pytest.mark.asyncio
    async def test_business_error_means_not_kol(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(return_value=make_response({"code": 50011, "msg": "busy"}))
        profile = await okx_client.get_wallet_profile(501, WALLET)
        assert not profile.is_kol

    @pytest.mark.asyncio
    async def test_http_error_raises(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(return_value=make_response({}, status_code=502))
        with pytest.raises(OkxHttpError) as exc:
            await okx_client.get_wallet_profile(501, WALLET)
        assert exc.value.status_code == 502
        assert "HTTP 502" in str(exc.value)

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(OkxHttpError):
            await okx_client.get_wallet_profile(501, WALLET)


class TestDevAnalysis:
    @pytest.mark.asyncio
    async def test_dev_summary(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(return_value=make_response({
            "code": 0,
            "data": {"devAnalysisSummaryVO": {
                "createdTokenCount": "12",
                "ruggedTokenCount": "9",
                "goldenDogCount": "1",
            }},
        }))
        dev = await okx_client.get_dev_analysis(501, WALLET)
        assert dev.is_dev
        assert (dev.token_count, dev.rug_count, dev.golden_dog_count) == (12, 9, 1)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [None, "0", 0])
    async def test_no_created_tokens(self, okx_client: OkxClient, count) -> None:
        okx_client._client.get = AsyncMock(return_value=make_response(
            {"code": 0, "data": {"devAnalysisSummaryVO": {"createdTokenCount": count}}}
        ))
        dev = await okx_client.get_dev_analysis(501, WALLET)
        assert not dev.is_dev

    @pytest.mark.asyncio
    async def test_failures_are_swallowed(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        dev = await okx_client.get_dev_analysis(501, WALLET)
        assert not dev.is_dev

    @pytest.mark.asyncio
    async def test_malformed_summary(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(return_value=make_response(
            {"code": 0, "data": {"devAnalysisSummaryVO": {"createdTokenCount": "many"}}}
        ))
        dev = await okx_client.get_dev_analysis(501, WALLET)
        assert not dev.is_dev


def _page(tokens: list[str], has_next: bool, offset: int = 0) -> dict:
    return {
        "code": 0,
        "data": {
            "tokenList": [{"tokenContractAddress": t, "tokenSymbol": t} for t in tokens],
            "hasNext": has_next,
            "offset": offset,
        },
    }


class TestTradingHistory:
    @pytest.mark.asyncio
    async def test_paginates_with_upstream_offset(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(side_effect=[
            make_response(_page(["a", "b"], True, offset=37)),
            make_response(_page(["c"], False)),
        ])
        tokens = await okx_client.get_trading_history(501, WALLET, limit=50)

        assert [t.token_address for t in tokens] == ["a", "b", "c"]
        offsets = [c.kwargs["params"]["offset"] for c in okx_client._client.get.call_args_list]
        assert offsets == [0, 37]

    @pytest.mark.asyncio
    async def test_stops_at_limit(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(side_effect=[
            make_response(_page(["a", "b", "c"], True, offset=3)),
            make_response(_page(["d", "e", "f"], True, offset=6)),
        ])
        tokens = await okx_client.get_trading_history(501, WALLET, limit=4)

        assert [t.token_address for t in tokens] == ["a", "b", "c", "d"]
        assert okx_client._client.get.await_count == 2

    @pytest.mark.asyncio
    async def test_first_page_business_error_raises(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(return_value=make_response({"code": 1, "msg": "bad wallet"}))
        with pytest.raises(OkxApiError, match="bad wallet"):
            await okx_client.get_trading_history(501, WALLET)

    @pytest.mark.asyncio
    async def test_later_page_error_keeps_collected(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(side_effect=[
            make_response(_page(["a"], True, offset=1)),
            make_response({"code": 1}),
        ])
        tokens = await okx_client.get_trading_history(501, WALLET)
        assert [t.token_address for t in tokens] == ["a"]

    @pytest.mark.asyncio
    async def test_empty_page_with_has_next_stops(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(
            return_value=make_response(_page([], True, offset=0))
        )
        tokens = await asyncio.wait_for(okx_client.get_trading_history(501, WALLET), 1.0)

        assert tokens == []
        assert okx_client._client.get.await_count == 1

    @pytest.mark.asyncio
    async def test_repeated_offset_stops(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(side_effect=[
            make_response(_page(["a"], True, offset=1)),
            make_response(_page(["b"], True, offset=1)),
            make_response(_page(["c"], False)),
        ])
        tokens = await asyncio.wait_for(okx_client.get_trading_history(501, WALLET), 1.0)

        assert [t.token_address for t in tokens] == ["a", "b"]
        assert okx_client._client.get.await_count == 2

    @pytest.mark.asyncio
    async def test_missing_offset_stops(self, okx_client: OkxClient) -> None:
        page = _page(["a"], True)
        del page["data"]["offset"]
        okx_client._client.get = AsyncMock(return_value=make_response(page))
        tokens = await asyncio.wait_for(okx_client.get_trading_history(501, WALLET), 1.0)

        assert [t.token_address for t in tokens] == ["a"]
        assert okx_client._client.get.await_count == 1

    @pytest.mark.asyncio
    async def test_pages_are_paced(self) -> None:
        limiter = AsyncMock()
        client = OkxClient(rate_limiter=limiter)
        client._client = AsyncMock()
        client._client.get = AsyncMock(side_effect=[
            make_response(_page(["a"], True, offset=1)),
            make_response(_page(["b"], False)),
        ])
        await client.get_trading_history(501, WALLET)
        assert limiter.acquire.await_count == 2


class TestCandles:
    @pytest.mark.asyncio
    async def test_string_code_success(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(return_value=make_response({
            "code": "0",
            "data": [
                ["1700000900000", "1.1", "1.3", "1.0", "1.2"],
                ["1700000000000", "1.0", "1.2", "0.9", "1.1"],
            ],
        }))
        candles = await okx_client.get_candles(501, "Mint111")

        assert [c.close for c in candles] == [1.2, 1.1]
        params = okx_client._client.get.call_args.kwargs["params"]
        assert params["bar"] == "15m"
        assert params["limit"] == 500
        assert params["address"] == "Mint111"

    @pytest.mark.asyncio
    async def test_candles_are_paced(self) -> None:
        limiter = AsyncMock()
        client = OkxClient(rate_limiter=limiter)
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=make_response({"code": "0", "data": []}))

        await client.get_candles(501, "Mint111")
        await client.get_candles(501, "Mint222")

        assert limiter.acquire.await_count == 2

    @pytest.mark.asyncio
    async def test_profile_and_dev_calls_are_not_paced(self) -> None:
        limiter = AsyncMock()
        client = OkxClient(rate_limiter=limiter)
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=make_response({"code": 0, "data": {}}))

        await client.get_wallet_profile(501, WALLET)
        await client.get_dev_analysis(501, WALLET)

        limiter.acquire.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_error_code_is_empty(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(return_value=make_response({"code": "51000", "data": []}))
        assert await okx_client.get_candles(501, "Mint111") == []

    @pytest.mark.asyncio
    async def test_http_error_is_empty(self, okx_client: OkxClient) -> None:
        okx_client._client.get = AsyncMock(return_value=make_response({}, status_code=429))
        assert await okx_client.get_candles(501, "Mint111") == []

    @pytest.mark.asyncio
    async def test_invalid_json_is_empty(self, okx_client: OkxClient) -> None:
        resp = make_response(None)
        resp.json.side_effect = ValueError("not json")
        okx_client._client.get = AsyncMock(return_value=resp)
        assert await okx_client.get_candles(501, "Mint111") == []
