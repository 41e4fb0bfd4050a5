"""
Constants for the BingX perpetual swap broker.
"""

BROKER_NAME = "bingx"

# API Configuration
BASE_URL_PROD = "https://open-api.bingx.com"
BASE_URL_DEMO = "https://open-api-vst.bingx.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MARGIN_ASSET = "USDT"

# Authentication Configuration
API_KEY_HEADER = "X-BX-APIKEY"

# Endpoints
ENDPOINT_BALANCE = "/openApi/swap/v3/user/balance"
ENDPOINT_POSITIONS = "/openApi/swap/v2/user/positions"
ENDPOINT_ORDER = "/openApi/swap/v2/trade/order"
ENDPOINT_OPEN_ORDERS = "/openApi/swap/v2/trade/openOrders"
ENDPOINT_CANCEL_ALL = "/openApi/swap/v2/trade/allOpenOrders"
ENDPOINT_LEVERAGE = "/openApi/swap/v2/trade/leverage"
ENDPOINT_SERVER_TIME = "/openApi/swap/v2/server/time"
ENDPOINT_PRICE = "/openApi/swap/v1/ticker/price"

# HTTP Status Codes
SUCCESS_STATUS_CODE = 200

# API response codes
API_SUCCESS_CODE = 0
API_AUTH_FAILED_CODES = (100001, 100413)
API_RATE_LIMITED_CODES = (100410,)
API_INSUFFICIENT_BALANCE_CODES = (101204,)

# Capabilities
MAX_LEVERAGE = 125
