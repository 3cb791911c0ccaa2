"""Replay a video's product timeline headlessly.

    python -m shoppable.handlers.demo <video_id> [--reanalyze] [--rate N]
    python -m shoppable.handlers.demo --sample [--rate N]
"""

import sys

from ..cart import JsonFileStore
from ..config import CART_STORE_PATH
from ..models.sample import SAMPLE_PRODUCTS
from ..player import PlaybackTimeSource, SimulatedPlayer
from ..session import ShoppableSession
from ..utils import display_price, format_time

# Playback past the last product before stopping
TAIL_SECONDS = 5.0


def run_demo(session: ShoppableSession, rate: float = 1.0) -> ShoppableSession:
    """Play the session's products through a simulated player, printing changes."""
    products = session.products
    duration = None
    if session.current_video:
        duration = session.current_video.system_metadata.get("duration")
    if not duration:
        duration = max((p.end for p in products), default=0.0) + TAIL_SECONDS

    player = SimulatedPlayer(duration=duration, rate=rate)
    source = PlaybackTimeSource(player)
    session.attach(source)

    def print_visible(visible):
        session.on_visible_products_change(visible)
        names = ", ".join(p.product_name for p in visible) or "-"
        print(f"[{format_time(source.current_time)}] On screen: {names}", flush=True)

    def print_collapse(t):
        if session.on_time_update(t):
            expanded = [p.product_name for p in products if not session.is_collapsed(p)]
            print(f"[{format_time(t)}] Expanded: {', '.join(expanded) or '-'}", flush=True)

    source.on_visible_products_change = print_visible
    source.on_time_update = print_collapse
    source.ready()

    print(f"Playing {format_time(duration)} at {rate}x with {len(products)} products", flush=True)
    source.run()
    return session


if __name__ == "__main__":
    args = sys.argv[1:]
    if not args:
        print("Usage: python -m shoppable.handlers.demo <video_id> [--reanalyze] [--rate N]")
        print("       python -m shoppable.handlers.demo --sample [--rate N]")
        print()
        print("Arguments:")
        print("  video_id     - TwelveLabs video ID in DEFAULT_INDEX_ID")
        print("  --reanalyze  - Ignore stored products and analyze again")
        print("  --rate N     - Playback speed multiplier (default: 1.0)")
        print("  --sample     - Use the built-in sample products, no API calls")
        sys.exit(1)

    rate = 1.0
    if "--rate" in args:
        rate = float(args[args.index("--rate") + 1])

    with ShoppableSession.from_config(JsonFileStore(CART_STORE_PATH), use_sample_fallback=True) as session:
        if "--sample" in args:
            session.set_products(SAMPLE_PRODUCTS)
        else:
            session.select_video(args[0], force_reanalyze="--reanalyze" in args)
            if session.error:
                print(f"ERROR: {session.error}", flush=True)
                if session.using_sample:
                    print("Falling back to sample products", flush=True)

        for product in session.products:
            price = display_price(product.price) or "-"
            print(
                f"  {format_time(product.start)}-{format_time(product.end)}  "
                f"{product.brand} / {product.product_name}  ({price})",
                flush=True,
            )
        print()

        run_demo(session, rate=rate)
        print(f"\nCart: {session.cart.total_items} items", flush=True)
