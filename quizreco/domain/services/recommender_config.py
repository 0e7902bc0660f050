from typing import Dict

from quizreco.core.config import Settings
from quizreco.domain.errors import UnknownProductFamilyError
from quizreco.domain.models.config import RecommenderConfig
from quizreco.domain.services.constants import (
    AFFILIATE_PARAMS,
    BUDGET_LADDER,
    ESCALATION_MESSAGE,
    FAMILIES,
    FORBIDDEN_TERMS,
    SLOT_SUFFICIENCY,
    UNHONORED_MESSAGE,
)


def build_recommender_config(settings: Settings, family: str) -> RecommenderConfig:
    """Freeze the per-process settings and tables for one product family."""
    fam = FAMILIES.get((family or "").strip().lower())
    if fam is None:
        raise UnknownProductFamilyError(family)
    return RecommenderConfig(
        family=fam,
        ladder=BUDGET_LADDER,
        forbidden_terms=FORBIDDEN_TERMS,
        budget_policy=settings.BUDGET_POLICY,
        exhaustion_policy=settings.EXHAUSTION_POLICY,
        storefront_url=settings.CATALOG_BASE_URL,
        storefront_domain=settings.CATALOG_DOMAIN,
        default_brand=settings.CATALOG_DEFAULT_BRAND,
        affiliate_params=AFFILIATE_PARAMS,
        fallback_price=settings.fallback_price,
        image_relay_url=settings.IMAGE_RELAY_URL,
        sufficiency=SLOT_SUFFICIENCY,
        search_timeout_s=settings.catalog_timeout_s,
        request_deadline_s=settings.request_deadline_s,
        escalation_message=ESCALATION_MESSAGE,
        unhonored_message=UNHONORED_MESSAGE,
    )


def build_all_configs(settings: Settings) -> Dict[str, RecommenderConfig]:
    return {name: build_recommender_config(settings, name) for name in FAMILIES}
