# api/v1/schemas/reco.py
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional

class LeadIn(BaseModel):
    nome: Optional[str] = None
    email: Optional[str] = None
    telefone: Optional[str] = None
    origem: str = "site"
    utm_source: str = ""
    utm_medium: str = ""
    utm_campaign: str = ""

    def cleaned(self) -> Dict[str, str]:
        return {
            "nome": (self.nome or "").strip(),
            "email": (self.email or "").strip(),
            "telefone": (self.telefone or "").strip(),
            "origem": self.origem or "site",
            "utm_source": self.utm_source,
            "utm_medium": self.utm_medium,
            "utm_campaign": self.utm_campaign,
        }

class LeadOut(BaseModel):
    ok: bool
    sheets: Optional[Any] = None

class ChargeIn(BaseModel):
    amount: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = None
    nome: Optional[str] = None
    email: Optional[str] = None

class ChargeOut(BaseModel):
    payment_id: Optional[int] = None
    qr_base64: str = ""
    copy_paste: str = ""
    fake: bool = False
    amount: float
    description: str

class ChargeStatusOut(BaseModel):
    status: str
    fake: bool = False
