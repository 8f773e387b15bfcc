"""Telegram bot command handlers."""

import html

from aiogram import Router
from aiogram.filters import BaseFilter, Command, CommandStart
from aiogram.types import LinkPreviewOptions, Message
from loguru import logger

from src.bot.commands import USAGE, parse_score_command
from src.bot.formatters import format_wallet_report
from src.scoring.wallet_scorer import WalletScorer

router = Router()

NO_PREVIEW = LinkPreviewOptions(is_disabled=True)

HELP_TEXT = (
    "<b>Wallet Scorer</b>\n\n"
    "Rates a wallet's entries over the last 7 days: did it buy dips that "
    "recovered, or chase pumps that reversed?\n\n"
    "Usage: /score &lt;wallet&gt; [chain]\n"
    "Chains: sol (default), eth, bsc, base"
)


class AdminFilter(BaseFilter):
    """Only allow messages from the configured admin user."""

    async def __call__(self, message: Message) -> bool:
        from config.settings import settings

        admin_id = settings.telegram_admin_id
        if not admin_id:
            return True  # no admin configured = public bot
        return message.from_user is not None and message.from_user.id == admin_id


router.message.filter(AdminFilter())


@router.message(CommandStart())
@router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await message.answer(HELP_TEXT, parse_mode="HTML")


@router.message(Command("score", ignore_case=True))
async def cmd_score(message: Message, scorer: WalletScorer) -> None:
    """Score a wallet: /score <address> [chain]."""
    parsed = parse_score_command(message.text or "")
    if parsed is None:
        await message.reply(USAGE, parse_mode="HTML")
        return

    await message.reply("⏳ Scoring wallet...")
    try:
        report = await scorer.score_wallet(parsed.wallet, parsed.chain_id)
    except Exception as e:
        logger.exception(f"[BOT] Scoring {parsed.wallet[:8]} failed: {e}")
        await message.reply(f"❌ Error: {html.escape(str(e))}", parse_mode="HTML")
        return

    await message.reply(
        format_wallet_report(report),
        parse_mode="HTML",
        link_preview_options=NO_PREVIEW,
    )
