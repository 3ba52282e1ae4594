"""
Device and network signals observed at click time or install time
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from intentrelay.shared.constants.attribution import MOBILE_PLATFORMS


class ObservationContext(str, Enum):
    """Where a set of signals was observed"""

    CLICK = "click"  # mobile browser following a marketing link
    INSTALL = "install"  # the freshly installed app calling back


SIGNAL_FIELDS = (
    "network_address",
    "client_name",
    "client_version",
    "platform_name",
    "platform_version",
    "device_model",
    "locale",
    "encoding",
)

# Fields copied into an intent record for later scoring
CAPTURED_FIELDS = (
    "network_address",
    "platform_name",
    "platform_version",
    "client_name",
)


class SignalTuple(BaseModel):
    """
    Identifying evidence captured at one observation point.

    Every field is optional. Missing and blank values are normalised to None
    so that "absent" has exactly one representation.
    """

    model_config = ConfigDict(frozen=True)

    network_address: Optional[str] = None
    client_name: Optional[str] = None
    client_version: Optional[str] = None
    platform_name: Optional[str] = None
    platform_version: Optional[str] = None
    device_model: Optional[str] = None
    locale: Optional[str] = None
    encoding: Optional[str] = None

    @field_validator(*SIGNAL_FIELDS, mode="before")
    @classmethod
    def normalize_blank(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    def is_mobile(self) -> bool:
        return self.platform_name in MOBILE_PLATFORMS

    def captured(self) -> "SignalTuple":
        """The subset stored with an intent record for matching"""
        return SignalTuple(**{name: getattr(self, name) for name in CAPTURED_FIELDS})


class AppInfo(BaseModel):
    """Metadata the installed app reports about itself"""

    version: Optional[str] = Field(None, description="App version string")
    build: Optional[str] = Field(None, description="Build number")
    bundle_id: Optional[str] = Field(None, description="Bundle or package identifier")
