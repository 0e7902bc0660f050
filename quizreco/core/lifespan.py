# quizreco/core/lifespan.py
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from quizreco.db import redis as r
from quizreco.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    # Redis optional (catalog cache)
    await r.connect()

    # One pooled HTTP client for catalog, webhook, payments and image relay
    app.state.http = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.catalog_timeout_s),
        limits=httpx.Limits(max_connections=50, max_keepalive_connections=20),
    )
    logger.info(
        f"{settings.APP_NAME} started env={settings.APP_ENV} family={settings.PRODUCT_FAMILY} "
        f"budget_policy={settings.BUDGET_POLICY} fake_pix={settings.FAKE_PIX}"
    )

    # Application runs
    yield

    # --- Shutdown ---
    await app.state.http.aclose()
    app.state.http = None
    await r.disconnect()
