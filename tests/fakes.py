"""Shared builders for tests: VTEX-shaped records, in-memory catalogs and configs."""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from quizreco.domain.models.config import BudgetBand, RecommenderConfig
from quizreco.domain.models.product import Candidate
from quizreco.domain.services.constants import (
    AFFILIATE_PARAMS,
    BUDGET_LADDER,
    ESCALATION_MESSAGE,
    FACE_FAMILY,
    FORBIDDEN_TERMS,
    UNHONORED_MESSAGE,
)

STOREFRONT = "https://www.opaque.com.br"

# Coarse ladder used by the escalation scenarios
SIMPLE_LADDER = (
    BudgetBand(label="0-60", min=0, max=60),
    BudgetBand(label="61-120", min=60.01, max=120),
    BudgetBand(label="121+", min=120.01, max=9999),
)


def make_record(
    name: str,
    slug: str,
    price: Optional[float] = 49.9,
    *,
    available: bool = True,
    image: str = "https://opaque.vteximg.com.br/arquivos/ids/1/produto.jpg",
    brand: str = "Marca X",
) -> Dict[str, Any]:
    offer: Dict[str, Any] = {"IsAvailable": available, "AvailableQuantity": 10 if available else 0}
    if price is not None:
        offer["Price"] = price
    return {
        "productName": name,
        "brand": brand,
        "linkText": slug,
        "items": [{"images": [{"imageUrl": image}], "sellers": [{"commertialOffer": offer}]}],
    }


def make_candidate(
    name: str,
    slug: str,
    *,
    category: str = "other",
    price: float = 49.9,
    score: float = 0.0,
    index: int = 0,
    image: str = "https://opaque.vteximg.com.br/arquivos/ids/1/produto.jpg",
    slot: Optional[str] = None,
) -> Candidate:
    return Candidate(
        name=name,
        brand="Marca X",
        price=price,
        image_url=image,
        purchase_url=f"{STOREFRONT}/{slug}/p",
        category=category,
        score=score,
        discovery_index=index,
        slot_affinity=slot,
    )


def face_records(price: float = 45.0, prefix: str = "") -> List[Dict[str, Any]]:
    """Two products for each of the five facial routine categories."""
    names = [
        ("Gel de Limpeza Facial Oil Control", "gel-limpeza"),
        ("Sabonete Facial Suave", "sabonete-facial"),
        ("Hidratante Facial Hialurônico", "hidratante-hialuronico"),
        ("Hidratante Gel Creme Matte", "hidratante-matte"),
        ("Protetor Solar Facial FPS 50", "protetor-fps50"),
        ("Protetor Solar Toque Seco FPS 30", "protetor-fps30"),
        ("Sérum Facial Vitamina C", "serum-vitamina-c"),
        ("Tônico Facial Niacinamida", "tonico-niacinamida"),
        ("Esfoliante Facial Suave", "esfoliante-suave"),
        ("Esfoliante Facial Acne", "esfoliante-acne"),
    ]
    return [make_record(f"{n}", f"{prefix}{slug}", price) for n, slug in names]


def make_config(**overrides) -> RecommenderConfig:
    params: Dict[str, Any] = dict(
        family=FACE_FAMILY,
        ladder=BUDGET_LADDER,
        forbidden_terms=FORBIDDEN_TERMS,
        affiliate_params=AFFILIATE_PARAMS,
        storefront_url=STOREFRONT,
        storefront_domain="opaque.com.br",
        default_brand="Opaque",
        search_timeout_s=0.5,
        request_deadline_s=5.0,
        escalation_message=ESCALATION_MESSAGE,
        unhonored_message=UNHONORED_MESSAGE,
    )
    params.update(overrides)
    return RecommenderConfig(**params)


class FakeCatalog:
    """Returns the same records for every query and remembers what was asked."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None):
        self.records = list(records or [])
        self.queries: List[str] = []

    async def search(self, query: str) -> List[Dict[str, Any]]:
        self.queries.append(query)
        return list(self.records)


class FailingCatalog:
    async def search(self, query: str) -> List[Dict[str, Any]]:
        raise RuntimeError("catalog down")


class SlowCatalog:
    def __init__(self, delay: float = 1.0):
        self.delay = delay

    async def search(self, query: str) -> List[Dict[str, Any]]:
        await asyncio.sleep(self.delay)
        return [make_record("Gel de Limpeza Facial", "lento")]


class FakeRedis:
    """Enough of redis.asyncio.Redis for the cache helpers."""

    def __init__(self):
        self.store: Dict[str, str] = {}

    async def get(self, key: str):
        return self.store.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None):
        self.store[key] = value
        return True
