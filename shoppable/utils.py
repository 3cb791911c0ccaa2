from .models.product import Product

# Price text the analysis uses when no price was seen
PRICE_SENTINELS = {"", "unknown", "not specified", "n/a", "na", "none", "not available", "not mentioned"}


def format_time(seconds: float) -> str:
    """Format seconds as m:ss.

    Example: 75.4 -> "1:15"
    """
    seconds = max(0.0, seconds)
    return f"{int(seconds // 60)}:{int(seconds % 60):02d}"


def display_price(price: str | None) -> str | None:
    """Price text to show, or None when it's a sentinel like "Not specified"."""
    if price is None:
        return None
    text = price.strip()
    if text.lower().rstrip(".") in PRICE_SENTINELS:
        return None
    return text


def marker_position(product: Product) -> dict[str, str]:
    """CSS position of a product marker on the video, from its percentage location."""
    x, y = product.location[0], product.location[1]
    return {"left": f"{x}%", "top": f"{y}%"}
