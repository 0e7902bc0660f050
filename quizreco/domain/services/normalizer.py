"""
VTEX catalog record -> Candidate.

Records come from `/api/catalog_system/pub/products/search`. Only the fields
below are read; anything else in the document is ignored:

    productName, brand, linkText, link,
    items[0].images[0].imageUrl,
    items[0].sellers[0].commertialOffer.{Price, spotPrice, IsAvailable, AvailableQuantity}
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlparse

from quizreco.domain.models.config import KeywordRule
from quizreco.domain.models.product import Candidate

logger = logging.getLogger(__name__)


def classify_category(name: str, rules: Iterable[KeywordRule]) -> str:
    """First matching rule wins; rule order is part of the configuration."""
    n = (name or "").lower()
    for rule in rules:
        if any(k in n for k in rule.keywords):
            return rule.category
    return "other"


def is_storefront_url(url: str, domain: str) -> bool:
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return False
    return host == domain or host.endswith("." + domain)


def _first(seq: Any) -> Dict[str, Any]:
    if isinstance(seq, list) and seq and isinstance(seq[0], dict):
        return seq[0]
    return {}


def _offer(record: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    item = _first(record.get("items"))
    seller = _first(item.get("sellers"))
    offer = seller.get("commertialOffer")
    return item, offer if isinstance(offer, dict) else {}


def _to_price(*values: Any) -> float:
    for v in values:
        try:
            price = float(v)
        except (TypeError, ValueError):
            continue
        if price == price and price > 0:  # NaN != NaN
            return round(price, 2)
    return 0.0


def _is_available(offer: Dict[str, Any]) -> bool:
    # Missing stock information means available
    if offer.get("IsAvailable") is False:
        return False
    qty = offer.get("AvailableQuantity")
    if isinstance(qty, bool):
        return True
    try:
        return float(qty) > 0 if qty is not None else True
    except (TypeError, ValueError):
        return True


def _purchase_url(record: Dict[str, Any], storefront_url: str) -> str:
    link_text = str(record.get("linkText") or "").strip().strip("/")
    if link_text:
        return f"{storefront_url.rstrip('/')}/{link_text}/p"
    link = str(record.get("link") or "").strip()
    if link.startswith("http"):
        return link
    return ""


def normalize_record(
    record: Any,
    *,
    rules: Tuple[KeywordRule, ...],
    storefront_url: str,
    storefront_domain: str,
    default_brand: str,
) -> Optional[Candidate]:
    """Returns None when the record has no usable name or storefront link."""
    if not isinstance(record, dict):
        return None

    name = " ".join(str(record.get("productName") or "").split())
    if not name:
        return None

    url = _purchase_url(record, storefront_url)
    if not url or not is_storefront_url(url, storefront_domain):
        return None

    item, offer = _offer(record)
    image = _first(item.get("images")).get("imageUrl") or ""

    return Candidate(
        name=name,
        brand=str(record.get("brand") or "").strip() or default_brand,
        price=_to_price(offer.get("Price"), offer.get("spotPrice")),
        image_url=str(image),
        purchase_url=url,
        available=_is_available(offer),
        category=classify_category(name, rules),
    )


def normalize_records(records: Iterable[Any], **kw) -> List[Candidate]:
    out: List[Candidate] = []
    dropped = 0
    for r in records:
        c = normalize_record(r, **kw)
        if c is None:
            dropped += 1
            continue
        out.append(c)
    if dropped:
        logger.debug(f"Normalizer dropped {dropped} malformed records")
    return out
