"""
Device fingerprint construction

The click side (browser, parsed from request headers) and the install side
(app-reported metadata) both go through build_fingerprint, so field order and
default substitution are identical on both ends.
"""

import hashlib
from typing import List, Optional

from intentrelay.shared.constants.attribution import INSTALL_CLIENT_NAME, UNKNOWN_VALUE
from ..models.signals import ObservationContext, SignalTuple

FIELD_SEPARATOR = "|"


def _client_name_default(context: ObservationContext) -> str:
    if context == ObservationContext.INSTALL:
        return INSTALL_CLIENT_NAME
    return UNKNOWN_VALUE


def resolve_fields(
    signals: SignalTuple,
    context: ObservationContext = ObservationContext.CLICK,
    app_version: Optional[str] = None,
) -> List[str]:
    """Signal values in fingerprint order with absent fields substituted"""
    client_version = signals.client_version
    if client_version is None and context == ObservationContext.INSTALL:
        client_version = app_version or None

    return [
        signals.network_address or UNKNOWN_VALUE,
        signals.client_name or _client_name_default(context),
        client_version or UNKNOWN_VALUE,
        signals.platform_name or UNKNOWN_VALUE,
        signals.platform_version or UNKNOWN_VALUE,
        signals.device_model or UNKNOWN_VALUE,
        signals.locale or "",
        signals.encoding or "",
    ]


def build_fingerprint(
    signals: SignalTuple,
    context: ObservationContext = ObservationContext.CLICK,
    app_version: Optional[str] = None,
) -> str:
    """SHA-256 hex digest of the pipe-joined resolved fields"""
    joined = FIELD_SEPARATOR.join(resolve_fields(signals, context, app_version))
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()


def short_fingerprint(fingerprint: str) -> str:
    """Truncated form for log lines"""
    return fingerprint[:12]
