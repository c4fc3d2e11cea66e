import logging
from typing import Tuple

import httpx

logger = logging.getLogger(__name__)

SHORT_LINK_HOSTS: Tuple[str, ...] = ("vm.tiktok.com", "vt.tiktok.com")


def is_short_link(url: str) -> bool:
    return any(host in url for host in SHORT_LINK_HOSTS)


async def resolve_redirect(http: httpx.AsyncClient, url: str) -> str:
    """Follow a short link to its final URL; fall back to ``url`` on any failure."""
    if not is_short_link(url):
        return url
    try:
        resp = await http.get(url, follow_redirects=True)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("Could not resolve redirect for %s: %s", url, exc)
        return url
    return str(resp.url) or url
