from typing import Iterable, List

from quizreco.domain.models.product import Candidate

def is_forbidden(name: str, forbidden_terms: Iterable[str]) -> bool:
    """
    Case-insensitive substring match against the disallowed-terms list.
    The list targets products meant for children, which the quiz never recommends.
    """
    n = (name or "").lower()
    return any(t.lower() in n for t in forbidden_terms)

def is_eligible(candidate: Candidate, forbidden_terms: Iterable[str]) -> bool:
    if not candidate.purchase_url:
        return False
    if not candidate.available:
        return False
    return not is_forbidden(candidate.name, forbidden_terms)

def filter_eligible(candidates: Iterable[Candidate], forbidden_terms: Iterable[str]) -> List[Candidate]:
    """Order-preserving predicate filter; no scoring happens here."""
    terms = tuple(forbidden_terms)
    return [c for c in candidates if is_eligible(c, terms)]
