"""
Deep-link, store and web fallback URL construction
"""

from dataclasses import dataclass
from urllib.parse import quote, urlencode

from intentrelay.shared.constants.app import (
    DEFAULT_ANDROID_PACKAGE,
    DEFAULT_APP_SCHEME,
    DEFAULT_IOS_APP_ID,
    DEFAULT_WEBSITE_URL,
)


@dataclass(frozen=True)
class LinkBuilder:
    """Builds every URL the redirect flow hands to a browser"""

    ios_app_id: str = DEFAULT_IOS_APP_ID
    android_package: str = DEFAULT_ANDROID_PACKAGE
    app_scheme: str = DEFAULT_APP_SCHEME
    website_url: str = DEFAULT_WEBSITE_URL

    @classmethod
    def from_settings(cls, presentation_settings) -> "LinkBuilder":
        return cls(
            ios_app_id=presentation_settings.IOS_APP_ID,
            android_package=presentation_settings.ANDROID_PACKAGE,
            app_scheme=presentation_settings.APP_SCHEME,
            website_url=presentation_settings.WEBSITE_URL,
        )

    def content_url(self, content: str) -> str:
        """Web page for desktop visitors"""
        return f"{self.website_url}/content/{quote(content, safe='')}"

    def deep_link_url(self, content: str, campaign: str, source: str) -> str:
        """Custom-scheme URL the installed app handles"""
        query = urlencode({"campaign": campaign, "source": source})
        return f"{self.app_scheme}://content/{quote(content, safe='')}?{query}"

    def store_url(self, is_ios: bool) -> str:
        if is_ios:
            return f"https://apps.apple.com/app/id{self.ios_app_id}"
        return f"https://play.google.com/store/apps/details?id={self.android_package}"

    def android_intent_url(self, content: str, campaign: str, source: str) -> str:
        """Chrome intent URL, falls back to the Play Store when the app is missing"""
        fallback = quote(self.store_url(is_ios=False), safe="")
        return (
            f"intent://content/{quote(content, safe='')}"
            f"#Intent;scheme={self.app_scheme};package={self.android_package};"
            f"S.campaign={quote(campaign, safe='')};S.source={quote(source, safe='')};"
            f"S.browser_fallback_url={fallback};end"
        )
