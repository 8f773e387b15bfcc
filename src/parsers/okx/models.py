"""Pydantic models for OKX web3 market API responses.

The priapi endpoints return most numbers as strings and omit fields freely,
so numeric fields coerce to float/int and fall back to 0 when missing or
unparseable.
"""

import math
from typing import Any

from pydantic import BaseModel, Field, field_validator


def _to_float(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return result if math.isfinite(result) else 0.0


def _to_int(value: Any) -> int:
    return int(_to_float(value))


class KolProfile(BaseModel):
    """KOL tag from the wallet-profile endpoint (`t[]` entry with k == "kol")."""

    is_kol: bool = False
    name: str | None = None
    twitter: str | None = None


class DevSummary(BaseModel):
    """Token-creator history from `devAnalysisSummaryVO`."""

    is_dev: bool = False
    token_count: int = 0
    rug_count: int = 0
    golden_dog_count: int = 0


class TradeRecord(BaseModel):
    """One token entry from the pnl token-list (trade history) endpoint."""

    token_address: str = Field("", alias="tokenContractAddress")
    symbol: str = Field("UNKNOWN", alias="tokenSymbol")
    buy_count: int = Field(0, alias="totalTxBuy")
    sell_count: int = Field(0, alias="totalTxSell")
    buy_avg_price: float = Field(0.0, alias="buyAvgPrice")
    buy_volume: float = Field(0.0, alias="buyVolume")
    sell_volume: float = Field(0.0, alias="sellVolume")
    balance: float = 0.0
    balance_usd: float = Field(0.0, alias="balanceUsd")
    realized_pnl: float = Field(0.0, alias="realizedPnl")
    unrealized_pnl: float = Field(0.0, alias="unrealizedPnl")
    total_pnl: float = Field(0.0, alias="totalPnl")
    latest_time: int | None = Field(None, alias="latestTime")  # epoch ms

    model_config = {"populate_by_name": True, "extra": "ignore", "frozen": True}

    @field_validator("symbol", mode="before")
    @classmethod
    def _default_symbol(cls, v: Any) -> str:
        return str(v) if v else "UNKNOWN"

    @field_validator("token_address", mode="before")
    @classmethod
    def _default_address(cls, v: Any) -> str:
        return str(v) if v else ""

    @field_validator("buy_count", "sell_count", mode="before")
    @classmethod
    def _parse_count(cls, v: Any) -> int:
        return max(_to_int(v), 0)

    @field_validator(
        "buy_avg_price",
        "buy_volume",
        "sell_volume",
        "balance",
        "balance_usd",
        "realized_pnl",
        "unrealized_pnl",
        "total_pnl",
        mode="before",
    )
    @classmethod
    def _parse_amount(cls, v: Any) -> float:
        return _to_float(v)

    @field_validator("latest_time", mode="before")
    @classmethod
    def _parse_latest_time(cls, v: Any) -> int | None:
        if v is None or v == "":
            return None
        try:
            return int(v)
        except (TypeError, ValueError):
            return None


class TradingHistoryPage(BaseModel):
    """`data` object of one token-list page."""

    token_list: list[TradeRecord] = Field(default_factory=list, alias="tokenList")
    has_next: bool = Field(False, alias="hasNext")
    offset: int = 0

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("token_list", mode="before")
    @classmethod
    def _parse_token_list(cls, v: Any) -> list:
        return v if isinstance(v, list) else []

    @field_validator("has_next", mode="before")
    @classmethod
    def _parse_has_next(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.lower() == "true"
        return bool(v)

    @field_validator("offset", mode="before")
    @classmethod
    def _parse_offset(cls, v: Any) -> int:
        return _to_int(v)
