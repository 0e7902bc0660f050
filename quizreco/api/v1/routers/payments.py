# quizreco/api/v1/routers/payments.py
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import logging

from quizreco.api.deps import charge_service_dep
from quizreco.api.v1.schemas.reco import ChargeIn, ChargeOut, ChargeStatusOut
from quizreco.core.config import Settings, get_settings
from quizreco.domain.errors import ChargeServiceError
from quizreco.domain.repositories.charge_repo import ChargeService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments"])

@router.post("/create-pix", response_model=ChargeOut)
async def create_pix(
    body: ChargeIn,
    service: Optional[ChargeService] = Depends(charge_service_dep),
    settings: Settings = Depends(get_settings),
):
    """Pix charge that unlocks the recommendations (fake or Mercado Pago)."""
    if service is None:
        raise HTTPException(status_code=500, detail="Mercado Pago não configurado")

    amount = body.amount if body.amount is not None else settings.charge_default_amount
    description = body.description or settings.charge_default_description
    try:
        charge = await service.create_charge(
            amount, description, payer_email=body.email or "", payer_name=body.nome or ""
        )
    except ChargeServiceError as e:
        logger.error(f"create_pix failed: {e}")
        raise HTTPException(status_code=500, detail="Falha ao criar Pix")
    return ChargeOut(**charge)

@router.get("/charge-status", response_model=ChargeStatusOut)
async def charge_status(
    id: Optional[int] = Query(None),
    service: Optional[ChargeService] = Depends(charge_service_dep),
):
    if service is None:
        raise HTTPException(status_code=500, detail="Mercado Pago não configurado")
    if service.fake:
        return ChargeStatusOut(status=await service.get_charge_status(id or 0), fake=True)
    if id is None:
        raise HTTPException(status_code=400, detail="id ausente")

    try:
        status = await service.get_charge_status(id)
    except ChargeServiceError as e:
        logger.error(f"charge_status failed id={id}: {e}")
        raise HTTPException(status_code=500, detail="Falha ao consultar status")
    return ChargeStatusOut(status=status, fake=False)
