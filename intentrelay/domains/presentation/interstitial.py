"""
"Opening the app..." page shown to mobile visitors

The page tries the app's deep link shortly after load and sends the visitor
to the store if the page is still visible after STORE_FALLBACK_DELAY_MS.
"""

import html
import json
from string import Template
from urllib.parse import quote

from intentrelay.shared.constants.app import APP_OPEN_DELAY_MS, STORE_FALLBACK_DELAY_MS
from .links import LinkBuilder

_PAGE = Template(
    """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Opening the app...</title>
  $smart_banner
  <style>
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
      margin: 0;
      padding: 20px;
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
      color: white;
      min-height: 100vh;
      display: flex;
      flex-direction: column;
      justify-content: center;
      align-items: center;
      text-align: center;
    }
    .container {
      background: rgba(255, 255, 255, 0.1);
      padding: 40px;
      border-radius: 16px;
      box-shadow: 0 8px 32px rgba(0, 0, 0, 0.1);
    }
    .spinner {
      width: 40px;
      height: 40px;
      border: 4px solid rgba(255, 255, 255, 0.3);
      border-top: 4px solid white;
      border-radius: 50%;
      animation: spin 1s linear infinite;
      margin: 20px auto;
    }
    @keyframes spin {
      0% { transform: rotate(0deg); }
      100% { transform: rotate(360deg); }
    }
    .store-button {
      display: inline-block;
      background: white;
      color: #333;
      padding: 12px 24px;
      text-decoration: none;
      border-radius: 8px;
      margin-top: 20px;
      font-weight: bold;
    }
  </style>
</head>
<body>
  <div class="container">
    <h2>Opening the app...</h2>
    <div class="spinner"></div>
    <p>If the app is not installed you will be taken to the store.</p>
    <a href="$store_href" id="storeLink" class="store-button">Download the app</a>
  </div>
  <script>
    var opened = false;
    var timeout;
    var appUrl = $app_url;
    var storeUrl = $store_url;

    function markOpened() {
      opened = true;
      if (timeout) clearTimeout(timeout);
    }

    function tryOpenApp() {
      if (opened) return;
      window.location = appUrl;
      timeout = setTimeout(function () {
        if (!opened) window.location = storeUrl;
      }, $fallback_delay);
    }

    window.addEventListener('load', function () {
      setTimeout(tryOpenApp, $open_delay);
    });
    document.addEventListener('visibilitychange', function () {
      if (document.hidden) markOpened();
    });
    window.addEventListener('blur', markOpened);
    window.addEventListener('beforeunload', markOpened);
  </script>
</body>
</html>"""
)


def _js_string(value: str) -> str:
    # json.dumps yields a valid JS literal; "</" is split so it cannot close the script tag
    return json.dumps(value).replace("</", "<\\/")


def render_interstitial(
    links: LinkBuilder, content: str, campaign: str, source: str, is_ios: bool
) -> str:
    """HTML for the app-open attempt with store fallback"""
    deep_link = links.deep_link_url(content, campaign, source)
    store_url = links.store_url(is_ios)
    app_url = deep_link if is_ios else links.android_intent_url(content, campaign, source)

    smart_banner = ""
    if is_ios:
        smart_banner = (
            '<meta name="apple-itunes-app" content="app-id='
            f"{html.escape(links.ios_app_id)}, app-argument="
            f'{html.escape(quote(deep_link, safe=""))}">'
        )

    return _PAGE.substitute(
        smart_banner=smart_banner,
        store_href=html.escape(store_url),
        app_url=_js_string(app_url),
        store_url=_js_string(store_url),
        fallback_delay=STORE_FALLBACK_DELAY_MS,
        open_delay=APP_OPEN_DELAY_MS,
    )
