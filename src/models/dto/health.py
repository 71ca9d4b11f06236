from pydantic import BaseModel


class FeedCheck(BaseModel):
    status: str
    last_state: str | None = None
    generation: int = 0


class AssetCacheCheck(BaseModel):
    status: str
    version: str
    cached: int
    listed: int


class HealthChecks(BaseModel):
    feed: FeedCheck
    assets: AssetCacheCheck


class HealthDetailedResponse(BaseModel):
    status: str
    version: str | None = None
    checks: HealthChecks
