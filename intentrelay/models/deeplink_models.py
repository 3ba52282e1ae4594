from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from intentrelay.domains.attribution.models import (
    AppInfo,
    MatchedIntent,
    ResolveResult,
    SignalTuple,
)


class DeviceInfo(BaseModel):
    """Device metadata reported by the installed app"""

    model_config = ConfigDict(populate_by_name=True)

    ip: Optional[str] = Field(None, description="Device IP, defaults to the request IP")
    browser: Optional[str] = Field(None, description="Client name")
    browser_version: Optional[str] = Field(None, alias="browserVersion")
    os: Optional[str] = Field(None, description="Platform name, e.g. iOS or Android")
    os_version: Optional[str] = Field(None, alias="osVersion")
    device_model: Optional[str] = Field(None, alias="deviceModel")
    language: Optional[str] = None
    encoding: Optional[str] = None

    def to_signals(self, fallback_ip: Optional[str] = None) -> SignalTuple:
        return SignalTuple(
            network_address=self.ip or fallback_ip,
            client_name=self.browser,
            client_version=self.browser_version,
            platform_name=self.os,
            platform_version=self.os_version,
            device_model=self.device_model,
            locale=self.language,
            encoding=self.encoding,
        )


class DeferredDeepLinkRequest(BaseModel):
    """Request model for install-time resolution"""

    model_config = ConfigDict(populate_by_name=True)

    device_info: Optional[DeviceInfo] = Field(None, alias="deviceInfo")
    app_info: Optional[AppInfo] = Field(None, alias="appInfo")


class LinkData(BaseModel):
    """Matched intent as returned to the app"""

    model_config = ConfigDict(populate_by_name=True)

    link_id: str = Field(..., alias="linkId")
    content: str
    campaign: str
    source: str
    match_score: float = Field(..., alias="matchScore")
    timestamp: int

    @classmethod
    def from_intent(cls, intent: MatchedIntent) -> "LinkData":
        return cls(
            link_id=intent.link_id,
            content=intent.content,
            campaign=intent.campaign,
            source=intent.source,
            match_score=intent.score,
            timestamp=intent.timestamp,
        )


class DeferredDeepLinkResponse(BaseModel):
    """Response model for install-time resolution"""

    model_config = ConfigDict(populate_by_name=True)

    found: bool
    reason: Optional[str] = None
    score: Optional[float] = None
    link_data: Optional[LinkData] = Field(None, alias="linkData")

    @classmethod
    def from_result(cls, result: ResolveResult) -> "DeferredDeepLinkResponse":
        return cls(
            found=result.found,
            reason=result.reason,
            score=result.score,
            link_data=LinkData.from_intent(result.record) if result.record else None,
        )


class StatsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    active_pending_links: int = Field(..., alias="activePendingLinks")
    success: int
    error: int
    date: str
    timestamp: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    redis: Optional[str] = None
    error: Optional[str] = None
