"""Format wallet score reports into Telegram HTML messages."""

import html
import math
import re
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal, localcontext

from src.scoring.config import explorer_for
from src.scoring.types import TokenResult, WalletReport

TOP_TOKENS = 5

SCORE_ICONS = {2: "🔵", 1: "🟢", 0: "🟡", -1: "🟠", -2: "🔴"}

# (lower bound, label) checked top-down
QUALITY_BANDS: list[tuple[float, str]] = [
    (1.5, "🔵 Excellent"),
    (0.5, "🟢 Good"),
    (-0.5, "🟡 Neutral"),
    (-1.5, "🟠 Poor"),
]


def fixed(value: float, places: int) -> str:
    """Fixed-point text rounding halves away from zero: fixed(2.5, 0) == "3".

    Rounds the exact binary value, so 1.005 (stored just below) gives "1.00".
    """
    if not math.isfinite(value):
        return f"{value:.{places}f}"
    with localcontext() as ctx:
        ctx.prec = 400  # wide enough for any finite float
        quantum = Decimal(1).scaleb(-places)
        return format(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def format_amount(num: float) -> str:
    """Signed USD amount with K/M/B suffixes: +$1.5M, -$50, +$0.50."""
    abs_num = abs(num)
    sign = "+" if num >= 0 else "-"

    if abs_num >= 1_000_000_000:
        return f"{sign}${fixed(abs_num / 1_000_000_000, 1)}B"
    if abs_num >= 1_000_000:
        return f"{sign}${fixed(abs_num / 1_000_000, 1)}M"
    if abs_num >= 1_000:
        return f"{sign}${fixed(abs_num / 1_000, 1)}K"
    if abs_num >= 1:
        return f"{sign}${fixed(abs_num, 0)}"
    return f"{sign}${fixed(abs_num, 2)}"


def format_usd(num: float) -> str:
    """Unsigned variant of format_amount for bag values."""
    return format_amount(num).removeprefix("+")


def format_multiplier(mult: float) -> str:
    """Return multiple. Losses show as the fraction lost: 0.32 -> -0.68x."""
    mult = max(mult, 0.0)

    if mult < 1:
        return f"{fixed(mult - 1, 2)}x"
    if mult >= 1_000_000:
        return f"{fixed(mult / 1_000_000, 1)}Mx"
    if mult >= 1_000:
        return f"{fixed(mult / 1_000, 1)}Kx"
    if mult >= 100:
        return f"{fixed(mult, 0)}x"
    if mult >= 10:
        return f"{fixed(mult, 1)}x"
    return f"{fixed(mult, 2)}x"


def score_icon(score: int) -> str:
    if score >= 2:
        return SCORE_ICONS[2]
    if score >= 1:
        return SCORE_ICONS[1]
    if score >= 0:
        return SCORE_ICONS[0]
    if score >= -1:
        return SCORE_ICONS[-1]
    return SCORE_ICONS[-2]


def quality_rating(avg_score: float) -> str:
    for bound, label in QUALITY_BANDS:
        if avg_score >= bound:
            return label
    return "🔴 Terrible"


def rank_top_tokens(tokens: Sequence[TokenResult], limit: int = TOP_TOKENS) -> list[TokenResult]:
    """Held bags first (largest USD value first), then sold tokens by pnl."""
    held = sorted((t for t in tokens if t.holding), key=lambda t: t.balance_usd, reverse=True)
    sold = sorted((t for t in tokens if not t.holding), key=lambda t: t.pnl, reverse=True)
    return (held + sold)[:limit]


def shorten_address(address: str) -> str:
    return f"{address[:4]}...{address[-4:]}"


def _format_token_line(token: TokenResult, token_url: str) -> str:
    if token.holding and token.balance_usd > 0:
        value = format_usd(token.balance_usd)
    else:
        value = format_amount(token.pnl)

    trades = f"({token.buy_count}↗ | {token.sell_count}↘)"
    rug = " 💀" if token.is_rugged else ""
    symbol = html.escape(token.symbol)
    return (
        f"{score_icon(token.score)} <a href=\"{token_url}{token.address}\">{symbol}</a>: "
        f"{value} 💰 {format_multiplier(token.multiplier)} {trades}{rug}"
    )


def format_wallet_report(report: WalletReport) -> str:
    """Render a WalletReport as Telegram HTML."""
    stats = report.stats
    explorer = explorer_for(report.chain_id)
    wallet_url = f"{explorer.wallet_url}{report.wallet}"

    lines = [f"Scored Wallet: <a href=\"{wallet_url}\">{shorten_address(report.wallet)}</a>"]
    if report.kol and report.kol.is_kol:
        lines.append(f"👑 KOL: {html.escape(report.kol.name or 'Unknown')}")
    if report.dev and report.dev.is_dev:
        lines.append(f"🛠 Dev: {report.dev.token_count} tokens, {report.dev.rug_count} rugs")
    lines.append("")

    lines.append(f"Score: {fixed(stats.avg_score, 2)} {quality_rating(stats.avg_score)}")
    lines.append(f"Tokens: {stats.total_tokens} | Entries: {stats.total_buys}")
    dist = stats.distribution
    lines.append(
        f"🔵 {dist.excellent} | 🟢 {dist.good} | 🟡 {dist.neutral} | "
        f"🟠 {dist.poor} | 🔴 {dist.terrible}"
    )
    lines.append("")

    lines.append(f"Realized PnL: {format_amount(stats.realized_pnl)}")
    if stats.total_bags_value > 0:
        lines.append(f"Holdings: {format_usd(stats.total_bags_value)} ({stats.held} tokens)")
    if stats.rugged > 0 and stats.total_tokens > 0:
        rug_pct = stats.rugged / stats.total_tokens * 100
        lines.append(f"Rugged: {stats.rugged}/{stats.total_tokens} ({fixed(rug_pct, 0)}%)")
    else:
        lines.append(f"Rugged: {stats.rugged}/{stats.total_tokens}")
    lines.append("")

    top = rank_top_tokens(report.tokens)
    if top:
        lines.append("<b>Top Tokens</b>")
        lines.extend(_format_token_line(t, explorer.token_url) for t in top)

    return "\n".join(lines)


_ANSI_REPLACEMENTS = [
    (re.compile(r"<b>"), "\x1b[1m"),
    (re.compile(r"</b>"), "\x1b[0m"),
    (re.compile(r"<i>"), "\x1b[3m"),
    (re.compile(r"</i>"), "\x1b[0m"),
    (re.compile(r"</?code>"), ""),
    (re.compile(r"<a href=\"[^\"]*\">([^<]*)</a>"), "\x1b[4m\\1\x1b[0m"),
]


def html_to_terminal(text: str) -> str:
    """Turn the Telegram HTML subset into ANSI escapes for a terminal."""
    for pattern, repl in _ANSI_REPLACEMENTS:
        text = pattern.sub(repl, text)
    return html.unescape(text)
