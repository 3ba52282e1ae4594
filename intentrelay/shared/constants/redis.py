"""
Redis-specific constants
"""

DEFAULT_REDIS_PORT = 6379
DEFAULT_REDIS_DB = 0
DEFAULT_REDIS_TLS = False

# Key namespaces
# ===========================================
# Pending intent records: intentrelay:{fingerprint}
INTENT_KEY_PREFIX = "intentrelay"
# Network bucket index: intentrelay:bucket:{a.b.c}
INTENT_BUCKET_PREFIX = "intentrelay:bucket"
# Daily counters: stats:{outcome}:{YYYY-MM-DD}
STATS_KEY_PREFIX = "stats"
# Health probe keys: health:{timestamp}
HEALTH_KEY_PREFIX = "health"
HEALTH_PROBE_TTL_SECONDS = 10

__all__ = [
    "DEFAULT_REDIS_PORT",
    "DEFAULT_REDIS_DB",
    "DEFAULT_REDIS_TLS",
    "INTENT_KEY_PREFIX",
    "INTENT_BUCKET_PREFIX",
    "STATS_KEY_PREFIX",
    "HEALTH_KEY_PREFIX",
    "HEALTH_PROBE_TTL_SECONDS",
]
