from pydantic import BaseModel, Field

from src.render.detail import VideoState


class SubscriptionRequest(BaseModel):
    email: str = Field(default="", max_length=320)
    whatsapp: str = Field(default="", max_length=32)
    terms: bool = False


class SubscriptionResponse(BaseModel):
    ok: bool
    message: str


class ChatRequest(BaseModel):
    message: str = Field(max_length=500)


class ChatResponse(BaseModel):
    reply: str


class AdSlotResponse(BaseModel):
    slot: str
    text: str | None = None
    remaining_ms: int = 0


class AssetManifestResponse(BaseModel):
    version: str
    urls: list[str]
    cached: int


class VideoStateRequest(BaseModel):
    state: VideoState


class OverlayStateResponse(BaseModel):
    is_open: bool
    is_playing: bool
    details_visible: bool = False
    video_error: bool = False
    product_id: int | None = None
