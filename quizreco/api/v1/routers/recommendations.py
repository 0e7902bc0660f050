# quizreco/api/v1/routers/recommendations.py
from fastapi import APIRouter, Depends, HTTPException
from typing import Dict
import time
import logging

from quizreco.api.deps import catalog_dep, recommender_configs
from quizreco.api.v1.schemas.quiz import GenerateProductsIn
from quizreco.core.config import Settings, get_settings
from quizreco.domain.errors import CatalogExhaustedError, UnknownProductFamilyError
from quizreco.domain.models.config import RecommenderConfig
from quizreco.domain.models.product import RecommendationResult
from quizreco.domain.repositories.catalog_repo import CatalogSearch
from quizreco.domain.services.pipeline_svc import pipeline_for

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recommendations"])

@router.post("/generate-products", response_model=RecommendationResult)
async def generate_products(
    body: GenerateProductsIn,
    configs: Dict[str, RecommenderConfig] = Depends(recommender_configs),
    catalog: CatalogSearch = Depends(catalog_dep),
    settings: Settings = Depends(get_settings),
):
    """
    Quiz answers -> K catalog products (one per routine slot), budget-aware.
    Degrades to fewer/weaker products plus an advisory message; only total
    catalog exhaustion under the 'error' policy fails the request (503).
    """
    if body.answers is None:
        raise HTTPException(status_code=400, detail="answers ausente")

    profile = body.answers.to_profile(default_family=settings.PRODUCT_FAMILY)
    logger.info(
        "Request: generate_products family=%s type=%s sensitive=%s concerns=%s budget=%r",
        profile.family, profile.skin_type, profile.sensitive, sorted(profile.concerns), profile.budget,
    )

    try:
        pipeline = pipeline_for(configs, profile.family, catalog)
    except UnknownProductFamilyError as e:
        raise HTTPException(status_code=400, detail=str(e))

    start_time = time.perf_counter()
    try:
        res = await pipeline.recommend(profile)
    except CatalogExhaustedError as e:
        logger.error(f"generate_products exhausted: {e}")
        raise HTTPException(status_code=503, detail="Nenhum produto disponível no catálogo no momento")

    elapsed_time = time.perf_counter() - start_time
    logger.info(
        "Response: generate_products count=%s honored=%s message=%s elapsed_time=%.4fs",
        len(res.products), res.budget_honored, bool(res.message), elapsed_time,
    )
    return res
