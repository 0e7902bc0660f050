import math
from typing import Iterable, List, Optional

from quizreco.domain.models.config import BudgetBand, ProductFamily, ScoringWeights, Slot
from quizreco.domain.models.product import Candidate, UserProfile
from quizreco.domain.services.filters import is_forbidden
from quizreco.domain.services.normalizer import is_storefront_url

DISQUALIFIED = -math.inf


def _has_any(name: str, keywords: Iterable[str]) -> bool:
    return any(k in name for k in keywords)


def profile_points(name: str, profile: UserProfile, family: ProductFamily, w: ScoringWeights) -> float:
    hits = 0
    if profile.skin_type and _has_any(name, family.type_keywords.get(profile.skin_type, ())):
        hits += 1
    if profile.sensitive and _has_any(name, family.sensitive_keywords):
        hits += 1
    return min(hits * w.profile_match, w.profile_cap)


def concern_points(name: str, profile: UserProfile, family: ProductFamily, w: ScoringWeights) -> float:
    hits = sum(
        1 for concern in profile.concerns
        if _has_any(name, family.concern_keywords.get(concern, ()))
    )
    return min(hits * w.concern_match, w.concern_cap)


def budget_points(price: float, band: Optional[BudgetBand], w: ScoringWeights) -> float:
    # Unknown price: neutral
    if band is None or price <= 0:
        return 0.0
    return w.in_band if band.contains(price) else w.out_of_band_penalty


def score_candidate(
    candidate: Candidate,
    profile: UserProfile,
    slot: Slot,
    *,
    family: ProductFamily,
    band: Optional[BudgetBand],
    forbidden_terms: Iterable[str],
    default_brand: str,
    storefront_domain: str,
    weights: ScoringWeights = ScoringWeights(),
) -> float:
    """
    Additive suitability score of one candidate for one slot.

    Disallowed or unavailable candidates score -inf; this is the only place that
    decides disqualification, even though the eligibility filter runs first.
    """
    w = weights
    name = candidate.name.lower()

    if is_forbidden(name, forbidden_terms) or not candidate.available:
        return DISQUALIFIED

    s = 0.0
    if candidate.category in slot.preferred:
        s += w.category_fit
    s += w.family_match if _has_any(name, family.family_keywords) else w.off_family_penalty
    s += profile_points(name, profile, family, w)
    s += concern_points(name, profile, family, w)
    s += budget_points(candidate.price, band, w)

    if candidate.image_url.lower().startswith("https://"):
        s += w.secure_image
    if candidate.brand and candidate.brand != default_brand:
        s += w.named_brand
    if is_storefront_url(candidate.purchase_url, storefront_domain):
        s += w.storefront_link
    return s


def rank(candidates: Iterable[Candidate]) -> List[Candidate]:
    """Best first; equal scores keep discovery order."""
    return sorted(candidates, key=lambda c: (-c.score, c.discovery_index))
