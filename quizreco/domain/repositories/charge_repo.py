# quizreco/domain/repositories/charge_repo.py
from __future__ import annotations
import logging
import uuid
from typing import Any, Dict, Optional, Protocol

import httpx

from quizreco.domain.errors import ChargeServiceError

logger = logging.getLogger(__name__)

FAKE_PAYMENT_ID = 999999
FAKE_QR = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAAB..."
FAKE_COPY_PASTE = "000201FAKEPIX-CODIGO-COPIA-E-COLA"


class ChargeService(Protocol):
    fake: bool

    async def create_charge(self, amount: float, description: str, *, payer_email: str, payer_name: str) -> Dict[str, Any]: ...

    async def get_charge_status(self, payment_id: int) -> str: ...


class FakeChargeService:
    """Canned Pix charge that is always approved; for demos and local runs."""
    fake = True

    async def create_charge(self, amount: float, description: str, *, payer_email: str = "", payer_name: str = "") -> Dict[str, Any]:
        return {
            "payment_id": FAKE_PAYMENT_ID,
            "qr_base64": FAKE_QR,
            "copy_paste": FAKE_COPY_PASTE,
            "fake": True,
            "amount": amount,
            "description": description,
        }

    async def get_charge_status(self, payment_id: int) -> str:
        return "approved"


class MercadoPagoChargeService:
    """
    Pix charges through the Mercado Pago payments REST API (`/v1/payments`).
    Errors from the provider surface as ChargeServiceError.
    """
    fake = False

    def __init__(self, client: httpx.AsyncClient, access_token: str, api_url: str, timeout_s: float = 15.0):
        self.client = client
        self.access_token = access_token
        self.api_url = api_url.rstrip("/")
        self.timeout_s = timeout_s

    def _headers(self, idempotent: bool = False) -> Dict[str, str]:
        h = {"Authorization": f"Bearer {self.access_token}", "Content-Type": "application/json"}
        if idempotent:
            h["X-Idempotency-Key"] = uuid.uuid4().hex
        return h

    async def _request(self, method: str, path: str, **kw) -> Dict[str, Any]:
        try:
            r = await self.client.request(method, f"{self.api_url}{path}", timeout=self.timeout_s, **kw)
        except httpx.HTTPError as e:
            logger.error(f"Mercado Pago {method} {path} failed: {e}")
            raise ChargeServiceError(str(e)) from e
        if not r.is_success:
            logger.error(f"Mercado Pago {method} {path} status={r.status_code} body={r.text[:500]}")
            raise ChargeServiceError(f"provider status {r.status_code}")
        try:
            data = r.json()
        except ValueError as e:
            raise ChargeServiceError("provider returned non-JSON body") from e
        return data if isinstance(data, dict) else {}

    async def create_charge(self, amount: float, description: str, *, payer_email: str = "", payer_name: str = "") -> Dict[str, Any]:
        body = {
            "transaction_amount": round(float(amount), 2),
            "description": description,
            "payment_method_id": "pix",
            "payer": {
                "email": payer_email or "comprador@example.com",
                "first_name": (payer_name or "Cliente").split(" ")[0],
            },
        }
        payment = await self._request("POST", "/v1/payments", json=body, headers=self._headers(idempotent=True))
        trx = (payment.get("point_of_interaction") or {}).get("transaction_data") or {}
        raw_b64 = str(trx.get("qr_code_base64") or "").strip()
        logger.info(f"Pix charge created payment_id={payment.get('id')}")
        return {
            "payment_id": payment.get("id"),
            "qr_base64": f"data:image/png;base64,{raw_b64}" if raw_b64 else "",
            "copy_paste": str(trx.get("qr_code") or ""),
            "fake": False,
            "amount": amount,
            "description": description,
        }

    async def get_charge_status(self, payment_id: int) -> str:
        info = await self._request("GET", f"/v1/payments/{payment_id}", headers=self._headers())
        return str(info.get("status") or "unknown")


def build_charge_service(client: httpx.AsyncClient, *, fake: bool, access_token: str, api_url: str, timeout_s: float) -> Optional[ChargeService]:
    """None when real mode is selected but no access token is configured."""
    if fake:
        return FakeChargeService()
    if not access_token:
        return None
    return MercadoPagoChargeService(client, access_token, api_url, timeout_s)
