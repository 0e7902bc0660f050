"""
Budget ladder resolution.

Given the scored candidate pool and the band the user picked, decide which
price range the basket is drawn from. Two mutually exclusive policies:

- escalate: widen the upper bound band by band until K candidates fit, then
  fall back to the whole ladder, then to the unconstrained pool. Every change
  produces an advisory message naming the requested and the used band.
- hard_ceiling: never go above the requested band's max. Missing seats are
  left for category-page fillers.
"""
import logging
import re
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel

from quizreco.domain.models.config import BudgetBand
from quizreco.domain.models.product import Candidate
from quizreco.domain.services.constants import POLICY_HARD_CEILING

logger = logging.getLogger(__name__)

_NUM_RE = re.compile(r"\d+(?:[.,]\d+)?")


class BudgetResolution(BaseModel):
    pool: Tuple[Candidate, ...]
    requested: BudgetBand
    used: Optional[BudgetBand]           # None when the budget could not be honored
    honored: bool = True
    message: str = ""
    model_config = {"frozen": True}

    @property
    def escalated(self) -> bool:
        return self.used != self.requested


def _band_for(value: float, ladder: Sequence[BudgetBand]) -> int:
    for i, band in enumerate(ladder):
        if value <= band.max:
            return i
    return len(ladder) - 1


def detect_band_index(text: Optional[str], ladder: Sequence[BudgetBand]) -> int:
    """
    Map the quiz's budget answer to a ladder index.

    Accepts exact labels ("R$ 61 - R$ 90"), ranges ("81-150", legacy quiz
    versions), ceilings ("até 80") and open-ended answers ("R$ 351+",
    "acima de 350"). Anything unreadable picks the first band.
    """
    t = (text or "").strip().lower()
    if not t:
        return 0
    for i, band in enumerate(ladder):
        if t == band.label.lower():
            return i

    nums = [float(n.replace(",", ".")) for n in _NUM_RE.findall(t)]
    if "+" in t or "acima" in t:
        if not nums:
            return len(ladder) - 1
        return _band_for(nums[0] + (0.01 if "acima" in t else 0), ladder)
    if len(nums) >= 2:
        return _band_for(nums[1], ladder)
    if nums:
        return _band_for(nums[0], ladder)
    return 0


def _within(pool: Sequence[Candidate], lo: float, hi: float) -> List[Candidate]:
    return [c for c in pool if c.has_price and lo <= c.price <= hi]


class BudgetLadder:
    def __init__(self, ladder: Sequence[BudgetBand], policy: str, *, escalation_message: str, unhonored_message: str):
        self.ladder = tuple(ladder)
        self.policy = policy
        self.escalation_message = escalation_message
        self.unhonored_message = unhonored_message

    def band(self, index: int) -> BudgetBand:
        return self.ladder[max(0, min(index, len(self.ladder) - 1))]

    def resolve(self, pool: Sequence[Candidate], selected: int, k: int) -> BudgetResolution:
        selected = max(0, min(selected, len(self.ladder) - 1))
        requested = self.ladder[selected]

        if self.policy == POLICY_HARD_CEILING:
            return self._hard_ceiling(pool, requested)

        # 1) requested band
        current = _within(pool, requested.min, requested.max)
        logger.debug(f"Budget band {requested.label!r}: {len(current)} candidates (need {k})")
        if len(current) >= k:
            return BudgetResolution(pool=tuple(current), requested=requested, used=requested)

        # 2) widen the upper bound one band at a time
        for band in self.ladder[selected + 1:]:
            current = _within(pool, requested.min, band.max)
            logger.debug(f"Budget widened to {band.label!r}: {len(current)} candidates")
            if len(current) >= k:
                return self._escalated(current, requested, band)

        # 3) the whole ladder, cheaper bands included
        first, last = self.ladder[0], self.ladder[-1]
        if first.min < requested.min:
            span = BudgetBand(label=f"{first.label} a {last.label}", min=first.min, max=last.max)
            current = _within(pool, span.min, span.max)
            logger.debug(f"Budget spans the whole ladder: {len(current)} candidates")
            if len(current) >= k:
                return self._escalated(current, requested, span)

        # 4) price filter lifted entirely
        logger.info(f"Budget {requested.label!r} could not be honored; using unconstrained pool of {len(pool)}")
        return BudgetResolution(
            pool=tuple(pool),
            requested=requested,
            used=None,
            honored=False,
            message=self.unhonored_message.format(requested=requested.label) if pool else "",
        )

    def _escalated(self, pool: Sequence[Candidate], requested: BudgetBand, used: BudgetBand) -> BudgetResolution:
        logger.info(f"Budget escalated from {requested.label!r} to {used.label!r}")
        return BudgetResolution(
            pool=tuple(pool),
            requested=requested,
            used=used,
            message=self.escalation_message.format(requested=requested.label, used=used.label),
        )

    def _hard_ceiling(self, pool: Sequence[Candidate], requested: BudgetBand) -> BudgetResolution:
        # unknown prices stay: they never exceed the ceiling and get a fallback price inside it
        kept = [c for c in pool if c.price <= requested.max]
        logger.debug(f"Hard ceiling {requested.max}: kept {len(kept)} of {len(pool)} candidates")
        return BudgetResolution(pool=tuple(kept), requested=requested, used=requested)
