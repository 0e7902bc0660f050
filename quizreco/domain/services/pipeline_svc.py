import asyncio
import logging
import time
from typing import Dict, List, Tuple

from quizreco.domain.errors import CatalogExhaustedError, UnknownProductFamilyError
from quizreco.domain.models.config import RecommenderConfig, Slot
from quizreco.domain.models.product import Candidate, RecommendationResult, UserProfile
from quizreco.domain.repositories.catalog_repo import CatalogSearch
from quizreco.domain.services.assembler import assemble, exhausted_result
from quizreco.domain.services.budget import BudgetLadder, detect_band_index
from quizreco.domain.services.constants import EXHAUSTION_ERROR
from quizreco.domain.services.diversifier import select_basket
from quizreco.domain.services.filters import filter_eligible
from quizreco.domain.services.normalizer import normalize_records
from quizreco.domain.services.queries import iter_slot_queries
from quizreco.domain.services.scoring import DISQUALIFIED, rank, score_candidate

logger = logging.getLogger(__name__)


def dedupe_by_url(candidates: List[Candidate]) -> List[Candidate]:
    """Keep the best-scored copy of each purchase link, best first."""
    seen = set()
    out: List[Candidate] = []
    for c in rank(candidates):
        if c.purchase_url in seen:
            continue
        seen.add(c.purchase_url)
        out.append(c)
    return out


class RecommendationPipeline:
    """
    End-to-end recommendation pipeline for one product family.

    High-level flow:
      1) Resolve the requested budget band from the quiz answer.
      2) Per slot (concurrently): walk the slot's queries from most specific to
         bare keyword, normalizing and filtering records, until enough
         candidates are gathered or the queries run out.
      3) Score every candidate against the profile and its slot; drop -inf.
      4) De-duplicate by purchase link, keeping the best copy.
      5) Resolve the budget pool (escalation or hard ceiling).
      6) Pick one candidate per slot, fill the rest by score.
      7) Assemble the response (fallbacks, benefits, affiliate links, message).

    Notes:
      - The catalog is the only I/O. Each call is bounded by `search_timeout_s`
        and the whole collection phase by `request_deadline_s`; anything that
        fails or times out counts as zero results.
      - Nothing is cached or shared between requests here.
    """

    def __init__(self, config: RecommenderConfig, catalog: CatalogSearch):
        self.config = config
        self.catalog = catalog
        self.ladder = BudgetLadder(
            config.ladder,
            config.budget_policy,
            escalation_message=config.escalation_message,
            unhonored_message=config.unhonored_message,
        )

    # ---------- Collection ----------
    async def _safe_search(self, query: str) -> List[dict]:
        try:
            return await asyncio.wait_for(self.catalog.search(query), timeout=self.config.search_timeout_s)
        except asyncio.TimeoutError:
            logger.warning(f"Catalog query timed out q={query!r}")
        except Exception as e:
            logger.error(f"Catalog query failed q={query!r}: {e}")
        return []

    async def _collect_slot(self, profile: UserProfile, slot: Slot) -> Tuple[List[Candidate], int]:
        cfg = self.config
        agg: List[Candidate] = []
        tried = 0
        for q in iter_slot_queries(profile, slot, cfg.family):
            tried += 1
            records = await self._safe_search(q)
            found = normalize_records(
                records,
                rules=cfg.family.category_rules,
                storefront_url=cfg.storefront_url,
                storefront_domain=cfg.storefront_domain,
                default_brand=cfg.default_brand,
            )
            agg.extend(filter_eligible(found, cfg.forbidden_terms))
            if len(agg) >= cfg.sufficiency:
                break
        logger.debug(f"Slot {slot.key}: {len(agg)} candidates from {tried} queries")
        return agg, tried

    async def collect(self, profile: UserProfile) -> Tuple[List[List[Candidate]], int]:
        """Candidates per slot, in slot order. Slots past the deadline come back empty."""
        slots = self.config.family.slots
        tasks = [asyncio.ensure_future(self._collect_slot(profile, s)) for s in slots]
        done, pending = await asyncio.wait(tasks, timeout=self.config.request_deadline_s)
        for t in pending:
            t.cancel()
        if pending:
            logger.warning(f"Request deadline hit: {len(pending)} of {len(tasks)} slots dropped")

        per_slot: List[List[Candidate]] = []
        total_tried = 0
        for t in tasks:
            if t in done and not t.cancelled() and t.exception() is None:
                found, tried = t.result()
                per_slot.append(found)
                total_tried += tried
            else:
                if t in done and not t.cancelled():
                    logger.error(f"Slot collection failed: {t.exception()}")
                per_slot.append([])
        return per_slot, total_tried

    # ---------- Scoring ----------
    def score_pool(self, profile: UserProfile, per_slot: List[List[Candidate]], band_index: int) -> List[Candidate]:
        cfg = self.config
        band = self.ladder.band(band_index)
        scored: List[Candidate] = []
        order = 0
        for slot, found in zip(cfg.family.slots, per_slot):
            for c in found:
                s = score_candidate(
                    c, profile, slot,
                    family=cfg.family,
                    band=band,
                    forbidden_terms=cfg.forbidden_terms,
                    default_brand=cfg.default_brand,
                    storefront_domain=cfg.storefront_domain,
                    weights=cfg.weights,
                )
                if s == DISQUALIFIED:
                    continue
                scored.append(c.model_copy(update={"score": s, "slot_affinity": slot.key, "discovery_index": order}))
                order += 1
        return scored

    # ---------- Entry point ----------
    async def recommend(self, profile: UserProfile) -> RecommendationResult:
        cfg = self.config
        t0 = time.perf_counter()
        k = cfg.basket_size

        # ---- 1) Requested band -------------------------------------------------
        band_index = detect_band_index(profile.budget, cfg.ladder)
        logger.info(
            f"Starting recommend pipeline: family={cfg.family.name}, band={cfg.ladder[band_index].label!r}, "
            f"policy={cfg.budget_policy}, k={k}"
        )

        # ---- 2) Collection -----------------------------------------------------
        per_slot, tried = await self.collect(profile)

        # ---- 3-4) Scoring + dedupe --------------------------------------------
        pool = dedupe_by_url(self.score_pool(profile, per_slot, band_index))
        logger.info(f"Scored pool: {len(pool)} unique candidates from {tried} queries")

        if not pool:
            if cfg.exhaustion_policy == EXHAUSTION_ERROR:
                raise CatalogExhaustedError(cfg.family.name, tried)
            logger.warning(f"No usable catalog products for family={cfg.family.name}; answering with category link")
            return exhausted_result(cfg.ladder[band_index], cfg)

        # ---- 5) Budget ---------------------------------------------------------
        resolution = self.ladder.resolve(pool, band_index, k)

        # ---- 6) Diversity ------------------------------------------------------
        chosen = select_basket(resolution.pool, cfg.family.slots, k)

        # ---- 7) Response -------------------------------------------------------
        result = assemble(chosen, resolution, cfg)
        logger.info(
            f"Recommend done: products={len(result.products)}, used={resolution.used.label if resolution.used else None!r}, "
            f"elapsed={time.perf_counter() - t0:.3f}s"
        )
        return result


def pipeline_for(configs: Dict[str, RecommenderConfig], family: str, catalog: CatalogSearch) -> RecommendationPipeline:
    cfg = configs.get((family or "").strip().lower())
    if cfg is None:
        raise UnknownProductFamilyError(family)
    return RecommendationPipeline(cfg, catalog)
