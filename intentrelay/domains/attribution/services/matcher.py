"""
Approximate device matching between a stored click and an install query
"""

from typing import Callable, Dict, Optional, Tuple

from intentrelay.shared.constants.attribution import (
    MATCH_THRESHOLD,
    MIN_COMPARABLE_FIELDS,
    UNKNOWN_VALUE,
)
from ..models.signals import SignalTuple

SUBNET_OCTETS = 3


def major_version(version: str) -> str:
    """'17.4.1' -> '17'"""
    return version.split(".")[0]


def network_prefix(address: str) -> str:
    """First three dot-separated octets, i.e. the /24 for IPv4"""
    return ".".join(address.split(".")[:SUBNET_OCTETS])


def network_bucket(address: Optional[str]) -> str:
    """Index key grouping pending records that could match the same network"""
    if not address:
        return UNKNOWN_VALUE
    return network_prefix(address)


def _identity(value: str) -> str:
    return value


# field -> projection compared for equality
COMPARISONS: Dict[str, Callable[[str], str]] = {
    "platform_name": _identity,
    "platform_version": major_version,
    "network_address": network_prefix,
    "client_name": _identity,
}


def compare_fields(stored: SignalTuple, query: SignalTuple) -> Tuple[int, int]:
    """Return (agreeing, comparable) over fields both sides supplied"""
    agreeing = 0
    comparable = 0
    for field, project in COMPARISONS.items():
        stored_value = getattr(stored, field)
        query_value = getattr(query, field)
        if not stored_value or not query_value:
            continue
        comparable += 1
        if project(stored_value) == project(query_value):
            agreeing += 1
    return agreeing, comparable


def score_signals(stored: SignalTuple, query: SignalTuple) -> float:
    """
    Fraction of comparable fields that agree.

    Zero when no field is populated on both sides: no evidence is not a match.
    """
    agreeing, comparable = compare_fields(stored, query)
    if comparable == 0:
        return 0.0
    return agreeing / comparable


def is_match(score: float, threshold: float = MATCH_THRESHOLD) -> bool:
    return score >= threshold


def has_enough_evidence(
    stored: SignalTuple, query: SignalTuple, minimum: int = MIN_COMPARABLE_FIELDS
) -> bool:
    """
    Whether a network-bucket candidate may be scored at all.

    Both sides must report the platform, and at least ``minimum`` fields
    must be comparable. A query carrying only an address would otherwise
    score 1.0 against every click from its /24.
    """
    if not stored.platform_name or not query.platform_name:
        return False
    _, comparable = compare_fields(stored, query)
    return comparable >= minimum
