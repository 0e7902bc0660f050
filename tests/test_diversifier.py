from fakes import make_candidate
from quizreco.domain.services.constants import FACE_FAMILY, HAIR_FAMILY
from quizreco.domain.services.diversifier import select_basket

SLOTS = FACE_FAMILY.slots


def test_one_per_slot_in_slot_order():
    pool = [
        make_candidate("Sérum", "serum", category="serum", score=9, index=0),
        make_candidate("Protetor", "protetor", category="sunscreen", score=8, index=1),
        make_candidate("Esfoliante", "esfoliante", category="exfoliant", score=7, index=2),
        make_candidate("Hidratante", "hidratante", category="moisturizer", score=6, index=3),
        make_candidate("Limpador", "limpador", category="cleanser", score=5, index=4),
    ]
    out = select_basket(pool, SLOTS, 5)
    assert [c.category for c in out] == ["cleanser", "moisturizer", "sunscreen", "serum", "exfoliant"]
    assert [c.slot_affinity for c in out] == [s.key for s in SLOTS]


def test_missing_category_takes_best_remaining_then_fills():
    pool = [
        make_candidate("Limpador A", "la", category="cleanser", score=9, index=0),
        make_candidate("Limpador B", "lb", category="cleanser", score=8, index=1),
        make_candidate("Hidratante", "h", category="moisturizer", score=7, index=2),
    ]
    out = select_basket(pool, HAIR_FAMILY.slots, 3)
    # no hair categories at all: every slot takes the best remaining candidate
    assert [c.name for c in out] == ["Limpador A", "Limpador B", "Hidratante"]


def test_never_repeats_purchase_url():
    dup = make_candidate("Limpador", "mesmo", category="cleanser", score=9, index=0)
    pool = [dup, dup.model_copy(update={"score": 8, "discovery_index": 1}), make_candidate("Sérum", "s", category="serum", score=1, index=2)]
    out = select_basket(pool, SLOTS, 5)
    assert [c.purchase_url for c in out] == [dup.purchase_url, pool[2].purchase_url]


def test_fill_phase_uses_score_order():
    pool = [
        make_candidate("Limpador A", "la", category="cleanser", score=9, index=0),
        make_candidate("Limpador B", "lb", category="cleanser", score=3, index=1),
        make_candidate("Limpador C", "lc", category="cleanser", score=6, index=2),
    ]
    out = select_basket(pool, SLOTS[:1], 3)
    assert [c.name for c in out] == ["Limpador A", "Limpador C", "Limpador B"]
    assert out[1].slot_affinity is None


def test_smaller_k_stops_early():
    pool = [make_candidate(f"P{i}", f"p{i}", category="cleanser", score=10 - i, index=i) for i in range(5)]
    assert len(select_basket(pool, SLOTS, 2)) == 2
    assert select_basket([], SLOTS, 5) == []


def test_slot_without_match_leaves_later_slots_their_only_candidate():
    pool = [
        make_candidate("Protetor", "protetor", category="sunscreen", score=9, index=0),
        make_candidate("Hidratante", "hidratante", category="moisturizer", score=6, index=1),
        make_candidate("Sérum", "serum", category="serum", score=5, index=2),
        make_candidate("Esfoliante", "esfoliante", category="exfoliant", score=4, index=3),
        make_candidate("Batom", "batom", category="other", score=1, index=4),
    ]
    out = select_basket(pool, SLOTS, 5)
    # no cleanser: the cleanser seat goes to the category nobody else wants
    assert [c.category for c in out] == ["other", "moisturizer", "sunscreen", "serum", "exfoliant"]
    assert [c.slot_affinity for c in out] == [s.key for s in SLOTS]


def test_reserved_categories_are_borrowed_when_nothing_else_is_left():
    pool = [
        make_candidate("Protetor A", "pa", category="sunscreen", score=9, index=0),
        make_candidate("Protetor B", "pb", category="sunscreen", score=8, index=1),
    ]
    out = select_basket(pool, SLOTS[:3], 3)
    assert [c.name for c in out] == ["Protetor A", "Protetor B"]
    assert out[1].slot_affinity == "moisturizer"
