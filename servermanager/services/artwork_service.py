"""
Cover art lookup for discovered servers.

Art comes straight from Steam's CDN header image. A HEAD request confirms
the image exists; anything else (404, timeout, no network) just means the
server is shown without art.
"""
import asyncio
import logging
import ssl
from typing import Optional

import aiohttp
import certifi

from ..settings import get_setting

logger = logging.getLogger(__name__)

COVER_ART_URL = "https://cdn.akamai.steamstatic.com/steam/apps/{app_id}/header.jpg"
USER_AGENT = 'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'


def cover_art_url(app_id: int) -> str:
    return COVER_ART_URL.format(app_id=app_id)


def create_http_session() -> aiohttp.ClientSession:
    """Create a session using certifi's CA bundle."""
    ssl_context = ssl.create_default_context(cafile=certifi.where())
    connector = aiohttp.TCPConnector(ssl=ssl_context, limit_per_host=5)
    return aiohttp.ClientSession(
        connector=connector,
        headers={'User-Agent': USER_AGENT}
    )


async def _check_url(session: aiohttp.ClientSession, url: str, timeout: float) -> bool:
    async with session.head(
        url,
        allow_redirects=True,
        timeout=aiohttp.ClientTimeout(total=timeout)
    ) as resp:
        return 200 <= resp.status < 300


async def fetch_cover_art(
    app_id: int,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: Optional[float] = None
) -> Optional[str]:
    """Return the CDN header image URL for app_id if it exists, else None.

    Args:
        app_id: Steam app ID
        session: Shared session for a discovery pass; a private one is
            created and closed when omitted.
        timeout: Seconds for the request; the cover_art_timeout setting
            when omitted.
    """
    url = cover_art_url(app_id)
    timeout = timeout or get_setting("cover_art_timeout") or 10

    try:
        if session is None:
            async with create_http_session() as own_session:
                ok = await _check_url(own_session, url, timeout)
        else:
            ok = await _check_url(session, url, timeout)
    except asyncio.TimeoutError:
        logger.debug(f"[CoverArt] Timeout for app {app_id}")
        return None
    except Exception as e:
        logger.debug(f"[CoverArt] Failed to fetch cover art for app {app_id}: {e}")
        return None

    return url if ok else None
