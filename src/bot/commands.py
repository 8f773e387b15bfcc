"""Parsing of the /score chat command."""

import re
from dataclasses import dataclass

from src.scoring.config import resolve_chain

# Telegram appends @botname to commands in group chats
_SCORE_RE = re.compile(
    r"^/score(?:@\w+)?\s+([A-Za-z0-9]{32,44})\b(?:\s+(\w+))?",
    re.IGNORECASE,
)

USAGE = (
    "❌ <b>Invalid command</b>\n\n"
    "Usage: /score &lt;wallet&gt; &lt;chain&gt;\n\n"
    "Chains: sol, eth, bsc, base\n\n"
    "Example:\n<code>/score FCMXEqaS...fTCMBd sol</code>"
)


@dataclass(frozen=True)
class ScoreCommand:
    wallet: str
    chain_id: int


def parse_score_command(text: str) -> ScoreCommand | None:
    """`/score[@bot] <address> [chain]` -> ScoreCommand, None if unusable.

    Address must be 32-44 alphanumerics; chain defaults to sol and must be
    one of the known aliases.
    """
    match = _SCORE_RE.match(text.strip())
    if not match:
        return None

    chain_id = resolve_chain(match.group(2) or "sol")
    if chain_id is None:
        return None
    return ScoreCommand(wallet=match.group(1), chain_id=chain_id)
