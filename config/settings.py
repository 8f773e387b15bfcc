from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Telegram bot
    telegram_bot_token: str = ""
    telegram_admin_id: int = 0  # 0 = every chat may use /score
    telegram_webhook_secret: str = ""  # X-Telegram-Bot-Api-Secret-Token, empty = unchecked

    # OKX web3 market API (public priapi endpoints, no key)
    okx_max_rps: float = 10.0  # paced calls (history pages, candles) -> 100ms spacing
    okx_timeout_sec: float = 15.0

    # Wallet scoring
    score_max_tokens: int = 30
    recency_days: int = 7
    candle_bar: str = "15m"
    candle_limit: int = 500

    # Bot delivery: "polling" (aiogram long polling) or "webhook" (FastAPI endpoint)
    bot_mode: str = "polling"

    # Webhook server
    webhook_host: str = "0.0.0.0"
    webhook_port: int = 8080

    log_level: str = "INFO"


settings = Settings()
