# quizreco/api/deps.py
from functools import lru_cache
from typing import AsyncIterator, Dict, Optional

import httpx
from fastapi import Depends, Request

from quizreco.core.config import Settings, get_settings
from quizreco.db.redis import get_redis
from quizreco.domain.models.config import RecommenderConfig
from quizreco.domain.repositories.catalog_repo import CatalogSearch, VtexCatalogRepo
from quizreco.domain.repositories.charge_repo import ChargeService, build_charge_service
from quizreco.domain.repositories.lead_repo import SheetsLeadSink
from quizreco.domain.services.recommender_config import build_all_configs


# Shared client from the lifespan; a short-lived one when the app runs without it (tests, scripts)
async def http_client(request: Request) -> AsyncIterator[httpx.AsyncClient]:
    client = getattr(request.app.state, "http", None)
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient() as tmp:
        yield tmp


@lru_cache
def recommender_configs() -> Dict[str, RecommenderConfig]:
    """Per-process, read-only pipeline configuration for every product family."""
    return build_all_configs(get_settings())


def catalog_dep(
    client: httpx.AsyncClient = Depends(http_client),
    settings: Settings = Depends(get_settings),
) -> CatalogSearch:
    return VtexCatalogRepo(
        client,
        settings.CATALOG_BASE_URL,
        page_size=settings.catalog_page_size,
        timeout_s=settings.catalog_timeout_s,
        redis=get_redis(),
        cache_ttl=settings.catalog_cache_ttl,
        cache_prefix=settings.catalog_cache_prefix,
    )


def lead_sink_dep(
    client: httpx.AsyncClient = Depends(http_client),
    settings: Settings = Depends(get_settings),
) -> SheetsLeadSink:
    return SheetsLeadSink(client, settings.SHEETS_WEBHOOK_URL, timeout_s=settings.lead_timeout_s)


def charge_service_dep(
    client: httpx.AsyncClient = Depends(http_client),
    settings: Settings = Depends(get_settings),
) -> Optional[ChargeService]:
    return build_charge_service(
        client,
        fake=settings.FAKE_PIX,
        access_token=settings.MP_ACCESS_TOKEN,
        api_url=settings.MP_API_URL,
        timeout_s=settings.charge_timeout_s,
    )
