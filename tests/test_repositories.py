import asyncio
import json

import httpx
import pytest

from fakes import FakeRedis, make_record
from quizreco.domain.errors import ChargeServiceError, LeadSinkError
from quizreco.domain.repositories.catalog_repo import VtexCatalogRepo
from quizreco.domain.repositories.charge_repo import (
    FakeChargeService,
    MercadoPagoChargeService,
    build_charge_service,
)
from quizreco.domain.repositories.lead_repo import SheetsLeadSink

BASE = "https://www.opaque.com.br"


def _with_client(handler, fn):
    async def main():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fn(client)
    return asyncio.run(main())


# ---------- Catalog ----------

def test_catalog_search_request_shape():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = request.url
        return httpx.Response(200, json=[make_record("Gel de Limpeza", "gel"), "junk"])

    records = _with_client(handler, lambda c: VtexCatalogRepo(c, BASE, page_size=50).search("limpador facial"))

    assert [r["linkText"] for r in records] == ["gel"]
    assert seen["url"].path == "/api/catalog_system/pub/products/search/"
    params = dict(seen["url"].params)
    assert params["ft"] == "limpador facial"
    assert params["O"] == "OrderByBestDiscountDESC"
    assert params["_from"] == "0"
    assert params["_to"] == "49"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json=[]),
        httpx.Response(200, text="<html>oops</html>"),
        httpx.Response(200, json={"error": "bad"}),
    ],
)
def test_catalog_bad_responses_are_empty(response):
    assert _with_client(lambda request: response, lambda c: VtexCatalogRepo(c, BASE).search("x")) == []


def test_catalog_network_error_is_empty():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    assert _with_client(handler, lambda c: VtexCatalogRepo(c, BASE).search("x")) == []


def test_catalog_cache_hit_skips_network():
    calls = []
    redis = FakeRedis()

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=[make_record("Sérum", "serum")])

    async def twice(client):
        repo = VtexCatalogRepo(client, BASE, redis=redis, cache_ttl=60)
        first = await repo.search("serum")
        second = await repo.search("serum")
        return first, second

    first, second = _with_client(handler, twice)
    assert first == second
    assert len(calls) == 1
    assert len(redis.store) == 1


# ---------- Leads ----------

def test_lead_sink_posts_record():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"ok": True, "row": 12})

    record = {"nome": "Ana", "email": "ana@x.com", "telefone": "11999999999"}
    out = _with_client(handler, lambda c: SheetsLeadSink(c, "https://script.google.com/macros/s/abc/exec").submit_lead(record))
    assert out == {"ok": True, "row": 12}
    assert seen["body"] == record


def test_lead_sink_errors():
    def handler(request):
        return httpx.Response(500, text="boom")

    with pytest.raises(LeadSinkError):
        _with_client(handler, lambda c: SheetsLeadSink(c, "https://hook").submit_lead({}))
    with pytest.raises(LeadSinkError):
        _with_client(handler, lambda c: SheetsLeadSink(c, "").submit_lead({}))


def test_lead_sink_accepts_empty_body():
    out = _with_client(lambda r: httpx.Response(200, text=""), lambda c: SheetsLeadSink(c, "https://hook").submit_lead({}))
    assert out == {"ok": True}


# ---------- Charges ----------

def test_fake_charge_is_always_approved():
    svc = FakeChargeService()
    charge = asyncio.run(svc.create_charge(4.99, "Desbloqueio"))
    assert charge["payment_id"] == 999999
    assert charge["fake"] is True
    assert asyncio.run(svc.get_charge_status(charge["payment_id"])) == "approved"


def test_mercado_pago_create_and_status():
    seen = []

    def handler(request):
        seen.append(request)
        if request.method == "POST":
            return httpx.Response(201, json={
                "id": 123,
                "point_of_interaction": {"transaction_data": {"qr_code_base64": "QUJD", "qr_code": "000201PIX"}},
            })
        return httpx.Response(200, json={"id": 123, "status": "pending"})

    async def flow(client):
        svc = MercadoPagoChargeService(client, "TEST-TOKEN", "https://api.mercadopago.com/")
        return await svc.create_charge(4.99, "Desbloqueio", payer_email="ana@x.com", payer_name="Ana Souza"), await svc.get_charge_status(123)

    charge, status = _with_client(handler, flow)
    assert charge["payment_id"] == 123
    assert charge["qr_base64"] == "data:image/png;base64,QUJD"
    assert charge["copy_paste"] == "000201PIX"
    assert status == "pending"

    post = seen[0]
    assert post.url.path == "/v1/payments"
    assert post.headers["Authorization"] == "Bearer TEST-TOKEN"
    assert "X-Idempotency-Key" in post.headers
    body = json.loads(post.content)
    assert body["payment_method_id"] == "pix"
    assert body["payer"]["first_name"] == "Ana"
    assert seen[1].url.path == "/v1/payments/123"


def test_mercado_pago_error_raises():
    def handler(request):
        return httpx.Response(401, json={"message": "invalid token"})

    async def create(client):
        return await MercadoPagoChargeService(client, "bad", "https://api.mercadopago.com").create_charge(1, "x")

    with pytest.raises(ChargeServiceError):
        _with_client(handler, create)


def test_build_charge_service_modes():
    client = httpx.AsyncClient()
    try:
        assert isinstance(build_charge_service(client, fake=True, access_token="", api_url="u", timeout_s=1), FakeChargeService)
        assert build_charge_service(client, fake=False, access_token="", api_url="u", timeout_s=1) is None
        real = build_charge_service(client, fake=False, access_token="t", api_url="u", timeout_s=1)
        assert isinstance(real, MercadoPagoChargeService)
    finally:
        asyncio.run(client.aclose())
