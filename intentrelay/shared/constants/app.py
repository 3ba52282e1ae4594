"""
Application-level constants
"""

PROJECT_NAME = "IntentRelay"
VERSION = "1.0.0"
DEFAULT_PORT = 3000
HEALTH_CHECK_TIMEOUT = 5
ENVIRONMENT_DEVELOPMENT = "development"
ENVIRONMENT_PRODUCTION = "production"

# Presentation defaults, overridden by env vars
DEFAULT_IOS_APP_ID = "123456789"
DEFAULT_ANDROID_PACKAGE = "com.yourapp"
DEFAULT_APP_SCHEME = "yourapp"
DEFAULT_WEBSITE_URL = "https://yourwebsite.com"

# Interstitial page: delay before the app-open attempt and before store fallback
APP_OPEN_DELAY_MS = 500
STORE_FALLBACK_DELAY_MS = 3000

__all__ = [
    "PROJECT_NAME",
    "VERSION",
    "DEFAULT_PORT",
    "HEALTH_CHECK_TIMEOUT",
    "ENVIRONMENT_DEVELOPMENT",
    "ENVIRONMENT_PRODUCTION",
    "DEFAULT_IOS_APP_ID",
    "DEFAULT_ANDROID_PACKAGE",
    "DEFAULT_APP_SCHEME",
    "DEFAULT_WEBSITE_URL",
    "APP_OPEN_DELAY_MS",
    "STORE_FALLBACK_DELAY_MS",
]
