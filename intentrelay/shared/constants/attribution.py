"""
Attribution policy constants
"""

# Intent records live for 24 hours from the click, reads never extend this
INTENT_TTL_SECONDS = 24 * 60 * 60

# Minimum match score for a query to claim a stored intent record.
# Raising it trades attribution recall for fewer false positives.
MATCH_THRESHOLD = 0.6

# Network-bucket candidates must share the platform and at least this many
# comparable fields; exact fingerprint hits are exempt
MIN_COMPARABLE_FIELDS = 2

# Newest pending records read per network bucket during fallback lookup
MAX_BUCKET_CANDIDATES = 25

# Upper bound on a best-effort counter update
STATS_TIMEOUT_SECONDS = 1.0

# Sentinels for absent click parameters
DEFAULT_CONTENT = "default"
DEFAULT_CAMPAIGN = "direct"
DEFAULT_SOURCE = "unknown"

# Fingerprint field substitutions
UNKNOWN_VALUE = "unknown"
INSTALL_CLIENT_NAME = "app"

# Platforms classified as mobile
MOBILE_PLATFORMS = ("iOS", "Android")

# Negative resolution reasons
REASON_NOT_FOUND = "No matching fingerprint found"
REASON_EXPIRED = "Data expired"
REASON_MISMATCH = "Device mismatch"

# Counter outcomes
OUTCOME_SUCCESS = "success"
OUTCOME_ERROR = "error"

__all__ = [
    "INTENT_TTL_SECONDS",
    "MATCH_THRESHOLD",
    "MIN_COMPARABLE_FIELDS",
    "MAX_BUCKET_CANDIDATES",
    "STATS_TIMEOUT_SECONDS",
    "DEFAULT_CONTENT",
    "DEFAULT_CAMPAIGN",
    "DEFAULT_SOURCE",
    "UNKNOWN_VALUE",
    "INSTALL_CLIENT_NAME",
    "MOBILE_PLATFORMS",
    "REASON_NOT_FOUND",
    "REASON_EXPIRED",
    "REASON_MISMATCH",
    "OUTCOME_SUCCESS",
    "OUTCOME_ERROR",
]
