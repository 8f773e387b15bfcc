"""Score a wallet from the command line.

Usage:
    wallet-scorer FCMXEqaSGdEHbufTCMBdG9kDd5MvU9tQmWqPn9yXF9qb sol
    wallet-scorer 0x1234...5678 eth --max-tokens 10
    wallet-scorer <wallet> --json-only
"""

import argparse
import asyncio
import json
import sys

from src.bot.formatters import format_wallet_report, html_to_terminal
from src.scoring.config import chain_name, resolve_chain
from src.scoring.wallet_scorer import create_wallet_scorer
from src.utils.logger import setup_logger

VALID_CHAINS = "sol, eth, bsc, base"


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wallet-scorer",
        description="Rate a wallet's token entries against surrounding price action.",
    )
    parser.add_argument("wallet", help="Wallet address")
    parser.add_argument("chain", nargs="?", default="sol", help=f"Chain: {VALID_CHAINS}")
    parser.add_argument("--max-tokens", type=positive_int, default=None, help="Tokens to evaluate (default 30)")
    parser.add_argument("--json-only", action="store_true", help="Print only the raw JSON report")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


async def run(wallet: str, chain_id: int, max_tokens: int | None, json_only: bool) -> None:
    scorer = create_wallet_scorer()
    try:
        report = await scorer.score_wallet(wallet, chain_id, max_tokens=max_tokens)
    finally:
        await scorer.close()

    if not json_only:
        print(html_to_terminal(format_wallet_report(report)))
        print("\n--- Raw JSON ---")
    print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(level="DEBUG" if args.verbose else "WARNING", log_file=False)

    chain_id = resolve_chain(args.chain)
    if chain_id is None:
        print(f"Unknown chain: {args.chain}", file=sys.stderr)
        print(f"Valid chains: {VALID_CHAINS}", file=sys.stderr)
        return 1

    if not args.json_only:
        print(f"Scoring wallet {args.wallet[:8]}... on {chain_name(chain_id)}...\n")

    try:
        asyncio.run(run(args.wallet, chain_id, args.max_tokens, args.json_only))
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
