# quizreco/api/v1/routers/leads.py
from fastapi import APIRouter, Depends, HTTPException
import logging

from quizreco.api.deps import lead_sink_dep
from quizreco.api.v1.schemas.reco import LeadIn, LeadOut
from quizreco.domain.errors import LeadSinkError
from quizreco.domain.repositories.lead_repo import SheetsLeadSink

logger = logging.getLogger(__name__)

router = APIRouter(tags=["leads"])

@router.post("/save-lead", response_model=LeadOut)
async def save_lead(body: LeadIn, sink: SheetsLeadSink = Depends(lead_sink_dep)):
    if not sink.configured:
        raise HTTPException(status_code=500, detail="SHEETS_WEBHOOK_URL não configurada")

    record = body.cleaned()
    if not (record["nome"] and record["email"] and record["telefone"]):
        raise HTTPException(status_code=400, detail="nome/email/telefone são obrigatórios")

    try:
        data = await sink.submit_lead(record)
    except LeadSinkError:
        raise HTTPException(status_code=502, detail="Falha ao gravar no Sheets")

    logger.info("Lead saved origem=%s utm_source=%s", record["origem"], record["utm_source"])
    return LeadOut(ok=True, sheets=data)
