"""
Turn an incoming click request into a SignalTuple
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from user_agents import parse as parse_user_agent

from intentrelay.domains.attribution.models import SignalTuple

# user-agents reports these families for platforms it cannot identify
_UNKNOWN_FAMILIES = {"Other", ""}


def extract_ip_address(request: Request) -> Optional[str]:
    """Client IP: first X-Forwarded-For hop, then X-Real-IP, then the socket peer"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        ip = forwarded_for.split(",")[0].strip()
        if ip:
            return ip

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host

    return None


def _family(value: Optional[str]) -> Optional[str]:
    if value in _UNKNOWN_FAMILIES:
        return None
    return value


@dataclass(frozen=True)
class ClickContext:
    """Signals plus the platform classification the redirect page needs"""

    signals: SignalTuple
    is_mobile: bool
    is_ios: bool


def signals_from_headers(
    user_agent: Optional[str],
    network_address: Optional[str] = None,
    accept_language: Optional[str] = None,
    accept_encoding: Optional[str] = None,
) -> ClickContext:
    """Parse a User-Agent header and companion headers"""
    parsed = parse_user_agent(user_agent or "")

    signals = SignalTuple(
        network_address=network_address,
        client_name=_family(parsed.browser.family),
        client_version=parsed.browser.version_string,
        platform_name=_family(parsed.os.family),
        platform_version=parsed.os.version_string,
        device_model=_family(parsed.device.model),
        locale=accept_language,
        encoding=accept_encoding,
    )
    return ClickContext(
        signals=signals,
        is_mobile=signals.is_mobile(),
        is_ios=signals.platform_name == "iOS",
    )


def signals_from_request(request: Request) -> ClickContext:
    return signals_from_headers(
        user_agent=request.headers.get("User-Agent"),
        network_address=extract_ip_address(request),
        accept_language=request.headers.get("Accept-Language"),
        accept_encoding=request.headers.get("Accept-Encoding"),
    )
