import base64
import logging
from typing import List, Optional, Sequence
from urllib.parse import parse_qsl, quote, urlencode, urlparse, urlunparse

from quizreco.domain.models.config import BudgetBand, ProductFamily, RecommenderConfig, Slot
from quizreco.domain.models.product import BudgetOut, Candidate, ProductOut, RecommendationResult
from quizreco.domain.services.budget import BudgetResolution
from quizreco.domain.services.normalizer import is_storefront_url

logger = logging.getLogger(__name__)

MAX_BENEFITS = 4


def is_https(url: str) -> bool:
    try:
        return urlparse(url or "").scheme == "https"
    except ValueError:
        return False


def add_affiliate(url: str, params: dict, domain: str) -> str:
    """Set tracking params on storefront links; other links and the path are left alone."""
    if not url or not params or not is_storefront_url(url, domain):
        return url
    try:
        parts = urlparse(url)
    except ValueError:
        return url
    # pairs, not a dict: repeated keys (VTEX fq filters) must survive
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in params]
    query += list(params.items())
    return urlunparse(parts._replace(query=urlencode(query)))


def product_id(url: str, domain: str) -> str:
    prefix = domain.split(".")[0] or "item"
    encoded = base64.b64encode(url.encode("utf-8")).decode("ascii").rstrip("=")
    return f"{prefix}-{encoded}"


def make_benefits(name: str, family: ProductFamily) -> List[str]:
    n = (name or "").lower()
    out = [text for keywords, text in family.benefit_rules if any(k in n for k in keywords)]
    return out[:MAX_BENEFITS] or [family.generic_benefit]


def pick_image(candidate: Candidate, index: int, family: ProductFamily, relay_url: str = "") -> str:
    if is_https(candidate.image_url):
        if relay_url:
            return f"{relay_url}?u={quote(candidate.image_url, safe='')}"
        return candidate.image_url
    slot = family.slot(candidate.slot_affinity or "")
    if slot and slot.fallback_image:
        return slot.fallback_image
    if family.fallback_images:
        return family.fallback_images[index % len(family.fallback_images)]
    return ""


def fallback_price(default: float, band: Optional[BudgetBand]) -> float:
    """Default price pulled inside the band, so an unknown price never reads as off-budget."""
    if band is None:
        return round(default, 2)
    return round(min(max(default, band.min), band.max), 2)


def _to_out(c: Candidate, index: int, band: Optional[BudgetBand], cfg: RecommenderConfig) -> ProductOut:
    family = cfg.family
    return ProductOut(
        id=product_id(c.purchase_url, cfg.storefront_domain),
        name=c.name,
        brand=c.brand or cfg.default_brand,
        price=c.price if c.has_price else fallback_price(cfg.fallback_price, band),
        image=pick_image(c, index, family, cfg.image_relay_url),
        category=c.category,
        benefits=make_benefits(c.name, family),
        reason=family.reason,
        purchase_url=add_affiliate(c.purchase_url, cfg.affiliate_params, cfg.storefront_domain),
    )


def filler_entry(cfg: RecommenderConfig, slot: Optional[Slot] = None) -> ProductOut:
    """Link to a storefront category page, used when real products run out."""
    family = cfg.family
    page = (slot.category_page if slot else family.category_page) or "/"
    url = cfg.storefront_url.rstrip("/") + "/" + page.lstrip("/")
    title = f"Ver mais opções de {slot.keyword}" if slot else f"Ver produtos para {family.label}"
    image = (slot.fallback_image if slot else "") or (family.fallback_images[0] if family.fallback_images else "")
    return ProductOut(
        id=product_id(url, cfg.storefront_domain),
        kind="category_link",
        name=title,
        brand=cfg.default_brand,
        price=None,
        image=image,
        category=slot.key if slot else "other",
        benefits=[family.generic_benefit],
        reason=family.reason,
        purchase_url=add_affiliate(url, cfg.affiliate_params, cfg.storefront_domain),
    )


def assemble(chosen: Sequence[Candidate], resolution: BudgetResolution, cfg: RecommenderConfig) -> RecommendationResult:
    """
    Map the chosen candidates to the response shape. When fewer than the basket
    size were found, every uncovered slot gets a category-page filler.
    """
    band = resolution.used or resolution.requested
    products = [_to_out(c, i, band, cfg) for i, c in enumerate(chosen)]

    if len(products) < cfg.basket_size:
        covered = {c.slot_affinity for c in chosen}
        seen = {p.purchase_url for p in products}
        for slot in cfg.family.slots:
            if len(products) >= cfg.basket_size:
                break
            if slot.key in covered:
                continue
            filler = filler_entry(cfg, slot)
            if filler.purchase_url in seen:
                continue
            products.append(filler)
            seen.add(filler.purchase_url)
        logger.info(f"Basket padded with {len(products) - len(chosen)} category fillers")

    return RecommendationResult(
        products=products,
        message=resolution.message,
        budget=BudgetOut(requested=resolution.requested, used=resolution.used),
        budget_honored=resolution.honored,
    )


def exhausted_result(resolution_band: BudgetBand, cfg: RecommenderConfig) -> RecommendationResult:
    """Degraded answer when no catalog product survived at all."""
    return RecommendationResult(
        products=[filler_entry(cfg)],
        message="",
        budget=BudgetOut(requested=resolution_band, used=None),
        budget_honored=False,
    )
