"""Tests for the list renderer state machine and render generations."""
import asyncio

import pytest

from src.catalog.sample import sample_product
from src.integrations.feed.client import FakeFeedClient
from src.integrations.feed.models import FeedResult, HttpError, NetworkError, ParseError
from src.render.listing import (
    SAMPLE_FALLBACK_NOTICE,
    ListRenderer,
    ListState,
    ProductListView,
)
from tests.factories import make_camel_payload, make_display_payload

FEED_URL = "https://feed.example.com/exec"


class _GatedFeedClient:
    """Feed client whose responses are released by the test, one per call."""

    def __init__(self):
        self.gates: list[asyncio.Future] = []

    async def fetch(self, url: str) -> FeedResult:
        gate = asyncio.get_running_loop().create_future()
        self.gates.append(gate)
        return await gate


class TestProductListView:
    def test_initial_state_is_loading(self):
        view = ProductListView()
        assert view.state is ListState.LOADING
        assert view.progress_visible
        assert not view.list_visible
        assert not view.message_visible

    def test_begin_resets_and_advances_generation(self):
        view = ProductListView()
        view.show_empty("nothing")
        generation = view.begin()
        assert generation == 1
        assert view.state is ListState.LOADING
        assert view.message is None
        assert view.progress_visible and not view.message_visible

    def test_card_at_bounds(self):
        view = ProductListView()
        assert view.card_at(0) is None
        assert view.card_at(-1) is None


class TestListRenderer:
    @pytest.mark.asyncio
    async def test_populated_preserves_feed_order(self):
        client = FakeFeedClient(payloads=[
            make_display_payload(product_id=3),
            make_camel_payload(product_id=1),
            make_display_payload(product_id=2),
        ])
        view = ProductListView()
        state = await ListRenderer(client, FEED_URL).render(view)
        assert state is ListState.POPULATED
        assert [c.record.id for c in view.cards] == [3, 1, 2]
        assert view.list_visible and not view.progress_visible and not view.message_visible
        assert client.requested_urls == [FEED_URL]

    @pytest.mark.asyncio
    async def test_empty_feed_shows_message_and_no_cards(self):
        view = ProductListView()
        state = await ListRenderer(FakeFeedClient(payloads=[]), FEED_URL).render(view)
        assert state is ListState.EMPTY
        assert view.cards == []
        assert view.message == "No products available at the moment."
        assert view.message_visible and not view.list_visible and not view.progress_visible

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [NetworkError("down"), HttpError(500), ParseError("html")],
    )
    async def test_failure_renders_message_and_sample(self, error):
        view = ProductListView()
        state = await ListRenderer(FakeFeedClient(error=error), FEED_URL).render(view)
        assert state is ListState.FAILED
        assert len(view.cards) == 1
        assert view.cards[0].record == sample_product()
        assert view.message.startswith(error.user_message)
        assert view.message.endswith(SAMPLE_FALLBACK_NOTICE)
        assert not view.progress_visible
        assert view.message_visible and view.list_visible

    @pytest.mark.asyncio
    async def test_undecodable_rows_still_render(self):
        view = ProductListView()
        await ListRenderer(FakeFeedClient(payloads=["junk", {}]), FEED_URL).render(view)
        assert view.state is ListState.POPULATED
        assert len(view.cards) == 2

    @pytest.mark.asyncio
    async def test_rerender_replaces_cards(self):
        view = ProductListView()
        renderer = ListRenderer(FakeFeedClient(payloads=[make_display_payload()]), FEED_URL)
        await renderer.render(view)
        first = view.cards
        await renderer.render(view)
        assert view.generation == 2
        assert view.cards is not first
        assert len(view.cards) == 1

    @pytest.mark.asyncio
    async def test_stale_completion_is_discarded(self):
        client = _GatedFeedClient()
        view = ProductListView()
        renderer = ListRenderer(client, FEED_URL)

        first = asyncio.create_task(renderer.render(view))
        await asyncio.sleep(0)
        second = asyncio.create_task(renderer.render(view))
        await asyncio.sleep(0)
        assert view.generation == 2

        client.gates[1].set_result(FeedResult.success([make_display_payload(product_id=22)]))
        assert await second is ListState.POPULATED

        client.gates[0].set_result(FeedResult.success([make_display_payload(product_id=11)]))
        await first
        assert [c.record.id for c in view.cards] == [22]
        assert view.generation == 2

    @pytest.mark.asyncio
    async def test_loading_state_while_fetch_in_flight(self):
        client = _GatedFeedClient()
        view = ProductListView()
        task = asyncio.create_task(ListRenderer(client, FEED_URL).render(view))
        await asyncio.sleep(0)
        assert view.state is ListState.LOADING
        assert view.progress_visible
        client.gates[0].set_result(FeedResult.success([]))
        assert await task is ListState.EMPTY
