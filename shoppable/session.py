"""Application state for one viewer: products, playback sync, cart.

All mutation happens through the methods below, called from the host's
event handlers (time tick, toggle click, video selection). Each
user-initiated operation catches ShoppableError, records one message in
`error`, and leaves a usable default state.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

from . import config
from .cart import Cart, KeyValueStore, MemoryStore
from .clients.twelvelabs import TwelveLabsClient
from .engine.collapse import CollapseController
from .errors import ConfigError, ShoppableError
from .models.product import Product, ProductKey
from .models.related import RelatedProduct
from .models.sample import SAMPLE_PRODUCTS
from .models.video import VideoItem
from .player.time_source import PlaybackTimeSource, PlayerHandle
from .services.analysis import AnalysisService
from .services.related import RelatedProductService

logger = logging.getLogger(__name__)


@dataclass
class SelectionResult:
    """Outcome of fetching products for a selected video."""
    video_id: str
    video: VideoItem | None = None
    products: list[Product] = field(default_factory=list)
    error: str | None = None
    used_sample: bool = False


class ShoppableSession:
    """Explicit state object owned by the host for the lifetime of the app."""

    def __init__(
        self,
        cart: Cart,
        api_key: str | None = None,
        base_url: str | None = None,
        index_id: str | None = None,
        use_sample_fallback: bool = False,
        on_change: Callable[[], None] | None = None,
    ):
        self.cart = cart
        self.api_key = api_key
        self.base_url = base_url
        self.index_id = index_id
        self.use_sample_fallback = use_sample_fallback
        self.on_change = on_change

        self.collapse = CollapseController()
        self.products: list[Product] = []
        self.visible_products: list[Product] = []
        self.current_time = 0.0
        self.videos: list[VideoItem] = []
        self.current_video: VideoItem | None = None
        self.using_sample = False
        self.error: str | None = None
        self.player: PlayerHandle | None = None
        self.time_source: PlaybackTimeSource | None = None

        self._client: TwelveLabsClient | None = None
        self._selection_id = 0
        self._started = False

    @classmethod
    def from_config(cls, store: KeyValueStore | None = None, **kwargs) -> "ShoppableSession":
        """Build a session from environment settings (see config.py)."""
        cart = Cart(store if store is not None else MemoryStore())
        return cls(
            cart,
            api_key=config.TWELVELABS_API_KEY,
            base_url=config.TWELVELABS_API_BASE_URL,
            index_id=config.DEFAULT_INDEX_ID,
            **kwargs,
        )

    # --- lifecycle ---

    def start(self):
        """Load persisted state. Call once on app start."""
        if self._started:
            return
        self.cart.load()
        self._started = True

    def close(self):
        """Flush pending writes. Call on shutdown."""
        self.cart.flush()
        self._started = False

    def __enter__(self) -> "ShoppableSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # --- collaborators ---

    def _require_client(self) -> TwelveLabsClient:
        missing = [
            name for name, value in (
                ("TWELVELABS_API_KEY", self.api_key),
                ("TWELVELABS_API_BASE_URL", self.base_url),
            ) if not value
        ]
        if missing:
            raise ConfigError(missing)
        if self._client is None:
            self._client = TwelveLabsClient(self.api_key, self.base_url)
        return self._client

    def _require_index(self) -> str:
        if not self.index_id:
            raise ConfigError(["DEFAULT_INDEX_ID"])
        return self.index_id

    def attach(self, time_source: PlaybackTimeSource):
        """Wire a time source's callbacks into this session."""
        self.time_source = time_source
        time_source.on_time_update = self.on_time_update
        time_source.on_visible_products_change = self.on_visible_products_change
        time_source.on_player_ready = self.on_player_ready
        time_source.set_products(self.products)

    # --- videos ---

    def load_videos(self, limit: int = 50) -> list[VideoItem]:
        """List the index's videos, newest first. Errors leave an empty list."""
        try:
            index_id = self._require_index()
            self.videos = self._require_client().list_videos(index_id, limit=limit)
        except ShoppableError as e:
            logger.error(f"Failed to load videos: {e}")
            self.error = str(e)
            self.videos = []
        return self.videos

    def select_video(self, video_id: str, force_reanalyze: bool = False) -> bool:
        """Load a video and its products. Returns False if a newer selection won."""
        selection_id = self.begin_selection()
        result = self.fetch_selection(video_id, force_reanalyze)
        return self.apply_selection(selection_id, result)

    def begin_selection(self) -> int:
        """Tag a new selection. Responses for older tags are dropped."""
        self._selection_id += 1
        return self._selection_id

    def fetch_selection(self, video_id: str, force_reanalyze: bool = False) -> SelectionResult:
        """
        Fetch the video and its products. Safe to run off the main thread.

        Never raises ShoppableError: failures become an error message and
        the fallback product list.
        """
        result = SelectionResult(video_id=video_id)
        try:
            client = self._require_client()
            index_id = self._require_index()
            result.video = client.get_video(index_id, video_id)
            result.products = AnalysisService(client).products_for_video(result.video, force_reanalyze)
        except ShoppableError as e:
            logger.error(f"Failed to load products for video {video_id}: {e}")
            result.error = str(e)
            if self.use_sample_fallback:
                result.products = list(SAMPLE_PRODUCTS)
                result.used_sample = True
            else:
                result.products = []
        return result

    def apply_selection(self, selection_id: int, result: SelectionResult) -> bool:
        """Install a fetched selection unless a newer one has started since."""
        if selection_id != self._selection_id:
            logger.info(f"Discarding stale result for video {result.video_id} (selection {selection_id})")
            return False

        self.current_video = result.video
        self.error = result.error
        self.using_sample = result.used_sample
        self.set_products(result.products)
        return True

    def set_products(self, products: list[Product]):
        """Replace the product list; all per-product UI state starts over."""
        self.products = list(products)
        self.visible_products = []
        self.collapse.reset(self.products)
        if self.time_source:
            self.time_source.set_products(self.products)
        self._notify()

    @property
    def video_url(self) -> str | None:
        return self.current_video.video_url if self.current_video else None

    # --- playback ---

    def on_time_update(self, t: float) -> bool:
        """Time tick. Returns True if the sidebar needs a re-render."""
        self.current_time = t
        changed = self.collapse.tick(t)
        if changed:
            self._notify()
        return changed

    def on_visible_products_change(self, products: list[Product]):
        self.visible_products = products

    def on_player_ready(self, handle: PlayerHandle):
        self.player = handle

    def select_product(self, product: Product):
        """Jump playback to where the product first appears."""
        if self.player:
            self.player.seek_to(product.start)

    def toggle_collapse(self, product: Product | ProductKey):
        key = product.key if isinstance(product, Product) else product
        self.collapse.toggle(key)
        self._notify()

    def is_collapsed(self, product: Product) -> bool:
        return self.collapse.is_collapsed(product.key)

    # --- shopping ---

    def add_to_cart(self, item: Product | RelatedProduct):
        self.cart.add_item(item)
        self._notify()

    def find_related(self, product: Product, limit: int = config.RELATED_PRODUCTS_LIMIT) -> list[RelatedProduct]:
        """Related products for a product, or [] if the search fails."""
        try:
            service = RelatedProductService(self._require_client())
            return service.find_related(
                self._require_index(),
                product_name=product.product_name,
                video_id=self.current_video.id if self.current_video else None,
                limit=limit,
            )
        # ValueError: nothing to search by, e.g. a product with an empty name
        except (ShoppableError, ValueError) as e:
            logger.error(f"Failed to find related products: {e}")
            self.error = str(e)
            return []

    def _notify(self):
        if self.on_change:
            self.on_change()
