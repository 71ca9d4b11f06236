import enum
import logging
from dataclasses import dataclass, field

from src.catalog.models import ProductRecord
from src.catalog.normalizer import normalize_feed
from src.catalog.sample import sample_product
from src.integrations.feed.client import FeedClientProtocol
from src.integrations.feed.models import EmptyResultError, FeedError, FeedResult
from src.render.card import CardCallbacks, ProductCard, render_card

logger = logging.getLogger(__name__)

SAMPLE_FALLBACK_NOTICE = "Showing a sample product instead."


class ListState(str, enum.Enum):
    LOADING = "loading"
    POPULATED = "populated"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class ProductListView:
    """The surface the list renderer fills. Each render pass replaces it wholesale."""

    state: ListState = ListState.LOADING
    generation: int = 0
    cards: list[ProductCard] = field(default_factory=list)
    message: str | None = None
    progress_visible: bool = True
    list_visible: bool = False
    message_visible: bool = False

    def begin(self) -> int:
        self.generation += 1
        self.state = ListState.LOADING
        self.cards = []
        self.message = None
        self.progress_visible = True
        self.list_visible = False
        self.message_visible = False
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def show_populated(self, cards: list[ProductCard]) -> None:
        self.state = ListState.POPULATED
        self.cards = cards
        self.message = None
        self.progress_visible = False
        self.list_visible = True
        self.message_visible = False

    def show_empty(self, message: str) -> None:
        self.state = ListState.EMPTY
        self.cards = []
        self.message = message
        self.progress_visible = False
        self.list_visible = False
        self.message_visible = True

    def show_failed(self, message: str, cards: list[ProductCard]) -> None:
        self.state = ListState.FAILED
        self.cards = cards
        self.message = message
        self.progress_visible = False
        self.list_visible = bool(cards)
        self.message_visible = True

    def card_at(self, position: int) -> ProductCard | None:
        if 0 <= position < len(self.cards):
            return self.cards[position]
        return None

    def find_by_id(self, product_id: int) -> ProductCard | None:
        """First card for the product id; ids are not guaranteed unique in the feed."""
        return next((c for c in self.cards if c.record.id == product_id), None)

    def find_by_asin(self, asin: str) -> ProductCard | None:
        asin = asin.strip().upper()
        return next((c for c in self.cards if c.asin == asin), None)


def _records_from(result: FeedResult) -> list[ProductRecord]:
    if result.error is not None:
        raise result.error
    records = normalize_feed(result.payloads)
    if not records:
        raise EmptyResultError("Feed returned no products")
    return records


class ListRenderer:
    """Fetch -> normalize -> card pipeline for one product list surface."""

    def __init__(
        self,
        client: FeedClientProtocol,
        feed_url: str,
        callbacks: CardCallbacks | None = None,
    ) -> None:
        self._client = client
        self._feed_url = feed_url
        self._callbacks = callbacks

    async def render(self, container: ProductListView) -> ListState:
        generation = container.begin()
        result = await self._client.fetch(self._feed_url)

        if not container.is_current(generation):
            logger.info(
                "Discarding feed result for generation %d, container is at %d",
                generation, container.generation,
            )
            return container.state

        try:
            records = _records_from(result)
        except EmptyResultError as exc:
            logger.info("Feed reachable but empty")
            container.show_empty(exc.user_message)
        except FeedError as exc:
            logger.warning("Feed unavailable (%s), rendering sample product", exc)
            container.show_failed(
                f"{exc.user_message} {SAMPLE_FALLBACK_NOTICE}",
                [self._card(sample_product())],
            )
        else:
            container.show_populated([self._card(record) for record in records])
            logger.info("Rendered %d product cards", len(records))

        return container.state

    def _card(self, record: ProductRecord) -> ProductCard:
        return render_card(record, self._callbacks)
