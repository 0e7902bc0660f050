from fastapi import FastAPI
from quizreco.core.config import get_settings
from quizreco.core.lifespan import lifespan
from quizreco.api.v1.routers.recommendations import router as recommendations_router
from quizreco.api.v1.routers.health import router as health_router
from quizreco.api.v1.routers.leads import router as leads_router
from quizreco.api.v1.routers.payments import router as payments_router
from quizreco.api.v1.routers.images import router as images_router
from quizreco.core.logging import configure_logging

from fastapi.middleware.cors import CORSMiddleware
import logging

settings = get_settings()
configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- CORS -------
# CORS_ORIGIN is a CSV of allowed origins, e.g.
# CORS_ORIGIN="https://quiz.example.com,https://www.quiz.example.com"
# Requests without an Origin header (curl, server-to-server) are not affected.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=86400,
)

# ------- Routes -------
app.include_router(health_router, prefix=settings.api_prefix)
app.include_router(recommendations_router, prefix=settings.api_prefix)  # quiz -> products
app.include_router(leads_router, prefix=settings.api_prefix)            # lead capture
app.include_router(payments_router, prefix=settings.api_prefix)         # pix unlock
app.include_router(images_router, prefix=settings.api_prefix)           # image relay
