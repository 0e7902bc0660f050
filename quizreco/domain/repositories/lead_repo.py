# quizreco/domain/repositories/lead_repo.py
from __future__ import annotations
import logging
from typing import Any, Dict

import httpx

from quizreco.domain.errors import LeadSinkError

logger = logging.getLogger(__name__)


class SheetsLeadSink:
    """
    Forwards quiz leads to a Google Apps Script webhook that appends a row to a sheet.
    The webhook answers with JSON on success; some deployments answer with an empty body.
    """

    def __init__(self, client: httpx.AsyncClient, webhook_url: str, timeout_s: float = 15.0):
        self.client = client
        self.webhook_url = webhook_url
        self.timeout_s = timeout_s

    @property
    def configured(self) -> bool:
        return bool(self.webhook_url)

    async def submit_lead(self, record: Dict[str, Any]) -> Any:
        if not self.configured:
            raise LeadSinkError("SHEETS_WEBHOOK_URL not configured")
        try:
            r = await self.client.post(
                self.webhook_url,
                json=record,
                timeout=self.timeout_s,
                follow_redirects=True,
            )
        except httpx.HTTPError as e:
            logger.error(f"Sheets webhook request failed: {e}")
            raise LeadSinkError(str(e)) from e

        if not r.is_success:
            logger.error(f"Sheets webhook error: status={r.status_code} body={r.text[:500]}")
            raise LeadSinkError(f"webhook status {r.status_code}")

        try:
            return r.json()
        except ValueError:
            return {"ok": True}
