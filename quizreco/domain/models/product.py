from pydantic import BaseModel, Field
from typing import Optional, List, Literal, FrozenSet

from quizreco.domain.models.config import BudgetBand

class UserProfile(BaseModel):
    """Quiz answers reduced to what the pipeline reads. Built per request."""
    family: str = "face"
    skin_type: Optional[str] = None        # "oily" | "dry" | "combination" | "normal" (face) or hair type
    sensitive: bool = False
    concerns: FrozenSet[str] = frozenset()
    budget: str = ""                       # raw budget selector as answered in the quiz

    model_config = {"frozen": True}  # immuable = safe

class Candidate(BaseModel):
    name: str = Field(..., min_length=1)
    brand: str
    price: float = Field(0.0, ge=0)        # 0 means unknown
    image_url: str = ""
    purchase_url: str
    available: bool = True
    category: str = "other"

    # Request-scoped, filled in by the pipeline
    score: float = 0.0
    slot_affinity: Optional[str] = None
    discovery_index: int = 0

    model_config = {"frozen": True}  # immuable = safe

    @property
    def has_price(self) -> bool:
        return self.price > 0

class ProductOut(BaseModel):
    id: str
    kind: Literal["product", "category_link"] = "product"
    name: str
    brand: str
    price: Optional[float] = None
    image: str
    category: str
    benefits: List[str]
    reason: str
    purchase_url: str
    model_config = {"frozen": True}

class BudgetOut(BaseModel):
    requested: BudgetBand
    used: Optional[BudgetBand] = None
    model_config = {"frozen": True}

class RecommendationResult(BaseModel):
    products: List[ProductOut]
    message: str = ""
    budget: BudgetOut
    budget_honored: bool = True
    model_config = {"frozen": True} # immuable = safe

    @property
    def budget_used(self) -> Optional[BudgetBand]:
        return self.budget.used
