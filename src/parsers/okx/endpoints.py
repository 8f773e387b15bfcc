BASE_URL = "https://web3.okx.com"

# Wallet profile + PnL (priapi, no key)
WALLET_PROFILE = "/priapi/v1/dx/market/v2/pnl/wallet-profile/query/address/info"
TRADING_HISTORY = "/priapi/v1/dx/market/v2/pnl/token-list"
DEV_ANALYSIS = "/priapi/v1/dx/market/v2/dev/analysis-list"

# Market data
CANDLES = "/priapi/v5/dex/token/market/dex-token-hlc-candles"

TRADING_HISTORY_PAGE_SIZE = 20
