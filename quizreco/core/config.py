from functools import lru_cache
from typing import Literal
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]
BudgetPolicy = Literal["escalate", "hard_ceiling"]
ExhaustionPolicy = Literal["filler", "error"]

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "QuizRecommendationAPI"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"

    # Redis (optional, catalog response cache only)
    REDIS_URL: str = ""
    catalog_cache_ttl: int = 10 * 60            # 10 minutes
    catalog_cache_prefix: str = "catalog"       # redis key namespace

    # Catalog (VTEX storefront)
    CATALOG_BASE_URL: str = "https://www.opaque.com.br"
    CATALOG_DOMAIN: str = "opaque.com.br"
    CATALOG_DEFAULT_BRAND: str = "Opaque"
    catalog_page_size: int = 100
    catalog_timeout_s: float = 8.0              # per search call
    request_deadline_s: float = 25.0            # whole collection phase

    # Recommendation policy
    PRODUCT_FAMILY: str = "face"
    BUDGET_POLICY: BudgetPolicy = "escalate"
    EXHAUSTION_POLICY: ExhaustionPolicy = "filler"
    fallback_price: float = 49.9

    # Pix / Mercado Pago
    FAKE_PIX: bool = False
    MP_ACCESS_TOKEN: str = ""
    MP_API_URL: str = "https://api.mercadopago.com"
    charge_default_amount: float = 4.99
    charge_default_description: str = "Desbloqueio recomendações + cupom APP10"
    charge_timeout_s: float = 15.0

    # Leads
    SHEETS_WEBHOOK_URL: str = ""
    lead_timeout_s: float = 15.0

    # Images
    IMAGE_RELAY_URL: str = ""                   # e.g. "/api/img"; empty = direct links
    image_timeout_s: float = 15.0
    IMAGE_RELAY_HOSTS: str = "vteximg.com.br,vtexassets.com,images.pexels.com"  # CSV, plus CATALOG_DOMAIN

    # API
    CORS_ORIGIN: str = ""
    api_prefix: str = "/api"

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True)

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGIN.split(",") if o.strip()]

    @property
    def image_relay_hosts(self) -> list[str]:
        extra = [h.strip().lower() for h in self.IMAGE_RELAY_HOSTS.split(",") if h.strip()]
        return [self.CATALOG_DOMAIN.lower(), *extra]

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )
