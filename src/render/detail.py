import enum
import logging
from dataclasses import dataclass
from urllib.parse import parse_qs, urlencode, urlparse

from src.catalog.models import ProductRecord
from src.integrations.amazon.links import product_url
from src.render.card import PLACEHOLDER_IMAGE_PATH, StockLine, format_price, stock_line, viewing_line

logger = logging.getLogger(__name__)

YOUTUBE_EMBED_BASE = "https://www.youtube.com/embed/"


class VideoState(str, enum.Enum):
    PLAYING = "playing"
    PAUSED = "paused"
    BUFFERING = "buffering"
    ENDED = "ended"
    ERROR = "error"


def _youtube_id(url: str) -> str | None:
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if host in ("youtu.be", "www.youtu.be"):
        return parsed.path.lstrip("/").split("/")[0] or None
    if host.endswith("youtube.com") or host.endswith("youtube-nocookie.com"):
        if parsed.path == "/watch":
            return (parse_qs(parsed.query).get("v") or [None])[0]
        for prefix in ("/embed/", "/shorts/"):
            if parsed.path.startswith(prefix):
                return parsed.path[len(prefix):].split("/")[0] or None
    return None


def embed_url(video_url: str, fallback_video_id: str) -> str:
    """Embeddable player URL with the JS API enabled so playback events reach the page."""
    if not video_url:
        return f"{YOUTUBE_EMBED_BASE}{fallback_video_id}?{urlencode({'enablejsapi': 1})}"
    video_id = _youtube_id(video_url)
    if video_id is None:
        return video_url
    return f"{YOUTUBE_EMBED_BASE}{video_id}?{urlencode({'enablejsapi': 1})}"


@dataclass
class DetailView:
    title: str
    description: str
    image_src: str
    price_text: str
    stock: StockLine
    viewing_text: str | None
    buy_url: str | None


@dataclass
class OverlayContent:
    record: ProductRecord
    video_url: str
    video_title: str
    details: DetailView
    details_visible: bool = False
    video_error: bool = False


class DetailOverlay:
    """Expanded product view with a promotional video.

    One overlay belongs to one visitor. While its video is playing,
    ``open`` is refused. ``close`` always stops playback.
    """

    def __init__(self, fallback_video_id: str, affiliate_tag: str) -> None:
        self._fallback_video_id = fallback_video_id
        self._affiliate_tag = affiliate_tag
        self._content: OverlayContent | None = None
        self._playing = False

    @property
    def content(self) -> OverlayContent | None:
        return self._content

    @property
    def is_open(self) -> bool:
        return self._content is not None

    @property
    def is_playing(self) -> bool:
        return self._playing

    def open(self, record: ProductRecord) -> bool:
        if self._playing:
            logger.info("Video already playing, detail for product %d suppressed", record.id)
            return False
        self._content = OverlayContent(
            record=record,
            video_url=embed_url(record.video_url, self._fallback_video_id),
            video_title=f"Promotional Video for {record.name}",
            details=self._details(record),
        )
        return True

    def video_state(self, state: VideoState) -> None:
        if self._content is None:
            logger.debug("Video state %s received with no overlay open", state.value)
            return
        if state is VideoState.PLAYING:
            self._playing = True
        elif state is VideoState.ENDED:
            self._playing = False
            self._content.details_visible = True
        elif state is VideoState.ERROR:
            self._playing = False
            self._content.details_visible = True
            self._content.video_error = True

    def close(self) -> None:
        if self._content is not None:
            logger.debug("Closing detail overlay for product %d", self._content.record.id)
        self._content = None
        self._playing = False

    def _details(self, record: ProductRecord) -> DetailView:
        return DetailView(
            title=record.name,
            description=record.description,
            image_src=record.image_url or PLACEHOLDER_IMAGE_PATH,
            price_text=f"Price: {format_price(record.price)}",
            stock=stock_line(record),
            viewing_text=viewing_line(record),
            buy_url=product_url(record.amazon_asin, self._affiliate_tag),
        )
