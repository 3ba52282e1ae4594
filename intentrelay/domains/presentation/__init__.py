"""
Redirect and presentation layer: request parsing, URLs, interstitial page
"""

from .links import LinkBuilder
from .interstitial import render_interstitial
from .request_signals import (
    ClickContext,
    extract_ip_address,
    signals_from_headers,
    signals_from_request,
)

__all__ = [
    "LinkBuilder",
    "render_interstitial",
    "ClickContext",
    "extract_ip_address",
    "signals_from_headers",
    "signals_from_request",
]
