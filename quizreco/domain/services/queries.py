from typing import Iterator, List

from quizreco.domain.models.config import ProductFamily, Slot
from quizreco.domain.models.product import UserProfile


def _profile_terms(profile: UserProfile, family: ProductFamily) -> List[str]:
    terms: List[str] = []
    if profile.skin_type and profile.skin_type in family.type_terms:
        terms.append(family.type_terms[profile.skin_type])
    if profile.sensitive and family.sensitive_term:
        terms.append(family.sensitive_term)
    # family order, not profile order, so identical profiles build identical queries
    for concern, term in family.concern_terms.items():
        if concern in profile.concerns:
            terms.append(term)
    return terms


def iter_slot_queries(profile: UserProfile, slot: Slot, family: ProductFamily) -> Iterator[str]:
    """
    Yield search strings for one slot, most specific first.

    The last string is always the bare slot keyword, so the caller never runs
    out of queries before trying at least one.
    """
    suffix = family.query_suffixes[0] if family.query_suffixes else ""
    specific = " ".join([slot.keyword, suffix, *_profile_terms(profile, family)])

    seen = set()
    for q in (
        specific,
        *(f"{slot.keyword} {s}" for s in family.query_suffixes),
        f"{family.treatment_prefix} {slot.keyword}",
        slot.keyword,
    ):
        q = " ".join(q.split())
        if q and q not in seen:
            seen.add(q)
            yield q


def build_queries(profile: UserProfile, slot: Slot, family: ProductFamily) -> List[str]:
    return list(iter_slot_queries(profile, slot, family))
