# dancelink/functions/send_application_notification.py
# 지원 결과 알림 함수 (별도 배포: uvicorn dancelink.functions.send_application_notification:app)
# - OPTIONS: CORS preflight 응답
# - POST: 템플릿 렌더링 후 Resend 로 1명에게 발송

import logging
from typing import Dict, List

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from dancelink.config import settings
from dancelink.schemas.notification import NotificationPayload
from dancelink.services.email_templates import render_notification

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


class ResendClient:
    """Resend HTTP API (POST /emails)"""

    def __init__(self, api_key: str | None, base_url: str, http: httpx.AsyncClient | None = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.http = http

    async def send_email(self, sender: str, to: List[str], subject: str, html: str) -> Dict:
        if not self.api_key:
            raise RuntimeError("RESEND_API_KEY is not set")

        body = {"from": sender, "to": to, "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {self.api_key}"}

        if self.http is not None:
            res = await self.http.post(f"{self.base_url}/emails", json=body, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=15.0) as http:
                res = await http.post(f"{self.base_url}/emails", json=body, headers=headers)

        res.raise_for_status()
        return res.json()


def get_resend() -> ResendClient:
    return ResendClient(settings.resend_api_key, settings.resend_api_url)


app = FastAPI(title="send-application-notification")


@app.options("/")
@app.options("/{path:path}")
async def preflight(path: str = ""):
    return Response(status_code=200, headers=CORS_HEADERS)


@app.post("/")
async def send_application_notification(
    request: Request,
    resend: ResendClient = Depends(get_resend),
):
    try:
        payload = NotificationPayload.model_validate(await request.json())
        subject, html = render_notification(payload)

        email_response = await resend.send_email(
            sender=settings.email_from,
            to=[payload.dancerEmail],
            subject=subject,
            html=html,
        )
        logger.info("Notification email sent: %s", email_response)

        return JSONResponse(content=email_response, status_code=200, headers=CORS_HEADERS)

    except Exception as e:
        logger.error("Error sending notification: %r", e)
        return JSONResponse(content={"error": str(e)}, status_code=500, headers=CORS_HEADERS)
