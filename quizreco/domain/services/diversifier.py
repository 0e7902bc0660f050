from typing import Collection, List, Optional, Sequence, Set

from quizreco.domain.models.config import Slot
from quizreco.domain.models.product import Candidate
from quizreco.domain.services.scoring import rank


def _best(
    ranked: Sequence[Candidate],
    taken: Set[str],
    slot: Optional[Slot] = None,
    reserved: Collection[str] = (),
) -> Optional[Candidate]:
    for c in ranked:
        if c.purchase_url in taken or c.category in reserved:
            continue
        if slot is None or c.category in slot.preferred:
            return c
    return None


def select_basket(pool: Sequence[Candidate], slots: Sequence[Slot], k: int) -> List[Candidate]:
    """
    One candidate per slot (preferred category first, best score otherwise),
    then fill up to k by score. Output order is slot order followed by fill
    order. A purchase link is never chosen twice.

    A slot without an on-tag candidate first borrows from categories no later
    slot prefers, so it never takes the only match of a slot still to come.
    """
    ranked = rank(pool)
    chosen: List[Candidate] = []
    taken: Set[str] = set()

    for i, slot in enumerate(slots):
        if len(chosen) >= k:
            break
        reserved = {tag for later in slots[i + 1:] for tag in later.preferred}
        pick = (
            _best(ranked, taken, slot)
            or _best(ranked, taken, reserved=reserved)
            or _best(ranked, taken)
        )
        if pick is None:
            break
        chosen.append(pick.model_copy(update={"slot_affinity": slot.key}))
        taken.add(pick.purchase_url)

    for c in ranked:
        if len(chosen) >= k:
            break
        if c.purchase_url in taken:
            continue
        chosen.append(c)
        taken.add(c.purchase_url)

    return chosen
