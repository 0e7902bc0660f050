# quizreco/api/v1/routers/images.py
import logging
import re
from urllib.parse import urlparse

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, Response

from quizreco.api.deps import http_client
from quizreco.core.config import Settings, get_settings
from quizreco.domain.services.normalizer import is_storefront_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)

_BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
    ),
    "Accept": "image/avif,image/webp,image/apng,image/*,*/*;q=0.8",
    "Accept-Language": "pt-BR,pt;q=0.9,en;q=0.8",
}

@router.get("/img")
async def image_relay(
    u: str = Query(""),
    client: httpx.AsyncClient = Depends(http_client),
    settings: Settings = Depends(get_settings),
):
    """Relays storefront images that refuse hotlinking from the quiz domain.

    Only storefront and image CDN hosts are fetched.
    """
    if not _ABSOLUTE_URL.match(u):
        return PlainTextResponse("Bad url", status_code=400)

    if not any(is_storefront_url(u, host) for host in settings.image_relay_hosts):
        logger.warning(f"IMG host not allowed url={u}")
        return PlainTextResponse("Host not allowed", status_code=403)

    parsed = urlparse(u)
    headers = {**_BROWSER_HEADERS, "Referer": f"{parsed.scheme}://{parsed.netloc}/"}
    try:
        r = await client.get(u, headers=headers, timeout=settings.image_timeout_s)
    except httpx.HTTPError as e:
        logger.error(f"IMG proxy error url={u}: {e}")
        return PlainTextResponse("Proxy error", status_code=500)

    if not r.is_success:
        logger.error(f"IMG upstream status={r.status_code} url={u}")
        return PlainTextResponse("Bad upstream", status_code=502)

    return Response(
        content=r.content,
        media_type=r.headers.get("content-type") or "image/jpeg",
        headers={"Cache-Control": "public, max-age=3600"},
    )
