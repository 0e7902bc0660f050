from __future__ import annotations
from typing import Dict, Literal, Optional, Tuple
from pydantic import BaseModel, Field, model_validator


class BudgetBand(BaseModel):
    label: str
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)
    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_bounds(self) -> "BudgetBand":
        if self.min > self.max:
            raise ValueError(f"band {self.label!r}: min {self.min} > max {self.max}")
        return self

    def contains(self, price: float) -> bool:
        """Known prices only; 0 means unknown and is never inside a band."""
        return price > 0 and self.min <= price <= self.max


class KeywordRule(BaseModel):
    """Name keywords that classify a product into `category`."""
    category: str
    keywords: Tuple[str, ...]
    model_config = {"frozen": True}


class Slot(BaseModel):
    """A functional role in the basket, filled once by the diversifier."""
    key: str
    keyword: str                                  # search keyword, e.g. "limpador"
    preferred: Tuple[str, ...]                    # category tags that fit the slot
    fallback_image: str = ""
    category_page: str = ""                       # storefront page used for filler entries
    model_config = {"frozen": True}


class ProductFamily(BaseModel):
    name: str
    label: str                                    # user-facing routine name
    slots: Tuple[Slot, ...]
    category_rules: Tuple[KeywordRule, ...]       # ordered, first match wins
    family_keywords: Tuple[str, ...]              # relevance keywords for the family
    query_suffixes: Tuple[str, ...]               # "facial", "face"
    treatment_prefix: str                         # "tratamento facial"
    category_page: str = ""                       # storefront landing page for the whole family
    type_terms: Dict[str, str] = {}               # profile type -> query term
    sensitive_term: str = ""
    concern_terms: Dict[str, str] = {}            # concern -> query term
    type_keywords: Dict[str, Tuple[str, ...]] = {}     # profile type -> name keywords
    sensitive_keywords: Tuple[str, ...] = ()
    concern_keywords: Dict[str, Tuple[str, ...]] = {}  # concern -> name keywords
    benefit_rules: Tuple[Tuple[Tuple[str, ...], str], ...] = ()
    generic_benefit: str
    reason: str
    fallback_images: Tuple[str, ...] = ()
    model_config = {"frozen": True}

    @property
    def basket_size(self) -> int:
        return len(self.slots)

    def slot(self, key: str) -> Optional[Slot]:
        return next((s for s in self.slots if s.key == key), None)


class ScoringWeights(BaseModel):
    category_fit: float = 5.0
    family_match: float = 2.5
    off_family_penalty: float = -4.0           # kept below category_fit in magnitude
    profile_match: float = 1.1
    profile_cap: float = 2.2
    concern_match: float = 0.9
    concern_cap: float = 2.7
    in_band: float = 1.2
    out_of_band_penalty: float = -2.0
    secure_image: float = 0.6
    named_brand: float = 0.2
    storefront_link: float = 0.6
    model_config = {"frozen": True}


class RecommenderConfig(BaseModel):
    """Everything the pipeline reads. Built once per process, never mutated."""
    family: ProductFamily
    ladder: Tuple[BudgetBand, ...]
    forbidden_terms: Tuple[str, ...]
    weights: ScoringWeights = ScoringWeights()
    budget_policy: Literal["escalate", "hard_ceiling"] = "escalate"
    exhaustion_policy: Literal["filler", "error"] = "filler"
    storefront_url: str = "https://www.opaque.com.br"
    storefront_domain: str = "opaque.com.br"
    default_brand: str = "Opaque"
    affiliate_params: Dict[str, str] = {}
    fallback_price: float = 49.9
    image_relay_url: str = ""
    sufficiency: int = 60                         # per-slot candidates before short-circuit
    search_timeout_s: float = 8.0
    request_deadline_s: float = 25.0
    escalation_message: str = ""
    unhonored_message: str = ""
    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_ladder(self) -> "RecommenderConfig":
        if not self.ladder:
            raise ValueError("budget ladder must not be empty")
        for lower, upper in zip(self.ladder, self.ladder[1:]):
            if upper.min < lower.min or upper.max < lower.max:
                raise ValueError(f"budget ladder out of order at {upper.label!r}")
        return self

    @property
    def basket_size(self) -> int:
        return self.family.basket_size
