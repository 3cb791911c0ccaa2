import os
from dotenv import load_dotenv

from .errors import ConfigError

load_dotenv()

# API Keys and Config - loaded from .env
TWELVELABS_API_KEY = os.getenv("TWELVELABS_API_KEY")
TWELVELABS_API_BASE_URL = os.getenv("TWELVELABS_API_BASE_URL", "https://api.twelvelabs.io/v1.3")
DEFAULT_INDEX_ID = os.getenv("DEFAULT_INDEX_ID")

# Timeouts (seconds). Video analysis can take tens of seconds upstream.
ANALYZE_TIMEOUT = float(os.getenv("ANALYZE_TIMEOUT", "120"))
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))

# Local cart persistence
CART_STORE_PATH = os.getenv("CART_STORE_PATH", ".shoppable_cart.json")
CART_STORAGE_KEY = "shoppable_video_cart"

# Player progress interval
TICK_INTERVAL = 0.1

# Related products search defaults
RELATED_PRODUCTS_LIMIT = 4
RELATED_MIN_CONFIDENCE = 0.5

# Category search product detection
DETECT_MIN_CONFIDENCE = 0.6
DETECT_ADJUST_CONFIDENCE = 0.7


def require_settings(*names: str) -> dict[str, str]:
    """Return the named settings, or raise ConfigError listing the missing ones.

    Example: require_settings("TWELVELABS_API_KEY", "DEFAULT_INDEX_ID")
    """
    values = {name: globals().get(name) for name in names}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigError(missing)
    return values
