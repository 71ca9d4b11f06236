import itertools
import logging
from collections import OrderedDict
from typing import Literal

from src.catalog.models import ProductRecord
from src.core.config import settings
from src.core.exceptions import ConflictError, NotFoundError
from src.integrations.amazon.links import product_url, reviews_url
from src.integrations.feed.client import FeedClient, FeedClientProtocol
from src.render.card import CardCallbacks, ProductCard
from src.render.detail import DetailOverlay, OverlayContent
from src.render.listing import ListRenderer, ProductListView

logger = logging.getLogger(__name__)

CardLinkAction = Literal["buy", "reviews"]

MAX_OVERLAY_SESSIONS = 10_000
NO_LONGER_LISTED = "This product is no longer listed. Reload the page."


class ExternalNavigator:
    """Receives the URL a card action wants opened; the HTTP layer redirects to it."""

    def __init__(self) -> None:
        self._target: str | None = None

    def open_external(self, url: str | None) -> None:
        self._target = url

    def take(self) -> str | None:
        target, self._target = self._target, None
        return target


class Storefront:
    """Product list, per-visitor detail overlays and outbound links.

    Every ``refresh`` renders into its own ``ProductListView``; a finished
    view replaces ``latest`` only if no newer pass has already landed.
    Card links name products by id or ASIN, so pages from older passes keep
    working as long as the product is still listed.
    """

    def __init__(
        self,
        client: FeedClientProtocol,
        *,
        feed_url: str,
        affiliate_tag: str,
        fallback_video_id: str,
        max_sessions: int = MAX_OVERLAY_SESSIONS,
    ) -> None:
        self.affiliate_tag = affiliate_tag
        self.fallback_video_id = fallback_video_id
        self.navigator = ExternalNavigator()
        self.renderer = ListRenderer(
            client,
            feed_url,
            CardCallbacks(
                on_activate=lambda record: record,
                on_purchase=self._open_product_page,
                on_reviews=self._open_reviews_page,
            ),
        )
        self._latest = ProductListView()
        self._latest_pass = 0
        self._passes = itertools.count(1)
        self._overlays: OrderedDict[str, DetailOverlay] = OrderedDict()
        self._max_sessions = max_sessions

    @property
    def latest(self) -> ProductListView:
        return self._latest

    @property
    def latest_pass(self) -> int:
        return self._latest_pass

    async def refresh(self) -> ProductListView:
        render_pass = next(self._passes)
        view = ProductListView()
        await self.renderer.render(view)
        if render_pass > self._latest_pass:
            self._latest, self._latest_pass = view, render_pass
        else:
            logger.info(
                "Render pass %d finished after pass %d, keeping the newer list",
                render_pass, self._latest_pass,
            )
        return view

    def card_by_id(self, product_id: int) -> ProductCard:
        card = self._latest.find_by_id(product_id)
        if card is None:
            raise NotFoundError(NO_LONGER_LISTED)
        return card

    def card_by_asin(self, asin: str) -> ProductCard:
        card = self._latest.find_by_asin(asin)
        if card is None:
            raise NotFoundError(NO_LONGER_LISTED)
        return card

    def overlay_for(self, session_id: str) -> DetailOverlay:
        overlay = self._overlays.get(session_id)
        if overlay is None:
            overlay = DetailOverlay(self.fallback_video_id, self.affiliate_tag)
            self._overlays[session_id] = overlay
            if len(self._overlays) > self._max_sessions:
                self._overlays.popitem(last=False)
        else:
            self._overlays.move_to_end(session_id)
        return overlay

    def open_detail(self, overlay: DetailOverlay, product_id: int) -> OverlayContent:
        card = self.card_by_id(product_id)
        if not overlay.open(card.activate()):
            raise ConflictError("A product video is already playing")
        return overlay.content

    def follow_link(self, action: CardLinkAction, asin: str) -> str:
        card = self.card_by_asin(asin)
        if action == "buy":
            card.purchase()
        else:
            card.reviews()
        target = self.navigator.take()
        if target is None:
            raise NotFoundError("This product has no Amazon listing")
        return target

    def _open_product_page(self, record: ProductRecord) -> None:
        self.navigator.open_external(product_url(record.amazon_asin, self.affiliate_tag))

    def _open_reviews_page(self, record: ProductRecord) -> None:
        self.navigator.open_external(reviews_url(record.amazon_asin))


def build_storefront(client: FeedClientProtocol | None = None) -> Storefront:
    return Storefront(
        client or FeedClient(),
        feed_url=settings.feed_url,
        affiliate_tag=settings.affiliate_tag,
        fallback_video_id=settings.placeholder_video_id,
    )
