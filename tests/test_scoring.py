import pytest

from fakes import make_candidate
from quizreco.domain.models.config import BudgetBand, ScoringWeights
from quizreco.domain.models.product import UserProfile
from quizreco.domain.services.constants import FACE_FAMILY, FORBIDDEN_TERMS
from quizreco.domain.services.scoring import (
    DISQUALIFIED,
    budget_points,
    concern_points,
    profile_points,
    rank,
    score_candidate,
)

W = ScoringWeights()
BAND = BudgetBand(label="0-60", min=0, max=60)
CLEANSER = FACE_FAMILY.slot("cleanser")


def _score(c, profile=UserProfile(skin_type="oily"), slot=CLEANSER, band=BAND):
    return score_candidate(
        c, profile, slot,
        family=FACE_FAMILY,
        band=band,
        forbidden_terms=FORBIDDEN_TERMS,
        default_brand="Opaque",
        storefront_domain="opaque.com.br",
        weights=W,
    )


def test_full_score_breakdown():
    c = make_candidate("Gel de Limpeza Facial Oil Control", "gel", category="cleanser", price=50)
    # category 5 + family 2.5 + profile 1.1 + band 1.2 + https 0.6 + brand 0.2 + storefront 0.6
    assert _score(c) == pytest.approx(11.2)


def test_disqualified_candidates():
    c = make_candidate("Sabonete Infantil", "inf", category="cleanser")
    assert _score(c) == DISQUALIFIED
    c = make_candidate("Gel de Limpeza", "esgotado", category="cleanser").model_copy(update={"available": False})
    assert _score(c) == DISQUALIFIED


def test_slot_fit_and_family_match():
    fits = make_candidate("Gel de Limpeza Facial", "a", category="cleanser")
    other_slot = make_candidate("Hidratante Facial", "b", category="moisturizer")
    off_family = make_candidate("Camiseta Básica", "c", category="other")
    assert _score(fits) > _score(other_slot) > _score(off_family)


def test_profile_and_concern_caps():
    profile = UserProfile(skin_type="oily", sensitive=True, concerns=frozenset({"acne", "spots", "pores", "dryness"}))
    name = "gel oil suave acne vitamina c poro hidrat"
    assert profile_points(name, profile, FACE_FAMILY, W) == pytest.approx(2.2)
    assert concern_points(name, profile, FACE_FAMILY, W) == pytest.approx(2.7)


def test_budget_points():
    assert budget_points(50, BAND, W) == W.in_band
    assert budget_points(80, BAND, W) == W.out_of_band_penalty
    assert budget_points(0, BAND, W) == 0
    assert budget_points(50, None, W) == 0


def test_insecure_image_scores_lower():
    https = make_candidate("Gel de Limpeza", "a", category="cleanser")
    http = make_candidate("Gel de Limpeza", "b", category="cleanser", image="http://cdn/x.jpg")
    assert _score(https) - _score(http) == pytest.approx(W.secure_image)


def test_rank_ties_keep_discovery_order():
    a = make_candidate("A", "a", score=3.0, index=2)
    b = make_candidate("B", "b", score=3.0, index=0)
    c = make_candidate("C", "c", score=5.0, index=1)
    assert [x.name for x in rank([a, b, c])] == ["C", "B", "A"]


def test_category_fit_is_the_largest_single_weight():
    others = [v for k, v in W.model_dump().items() if k != "category_fit"]
    assert all(abs(v) < W.category_fit for v in others)


def test_on_slot_product_without_family_keyword_still_beats_off_slot_penalty():
    on_slot = make_candidate("Gel Oil Control", "a", category="cleanser")
    off_family_off_slot = make_candidate("Camiseta Básica", "b", category="other")
    assert _score(on_slot) > _score(off_family_off_slot)
    assert W.category_fit + W.off_family_penalty > 0
