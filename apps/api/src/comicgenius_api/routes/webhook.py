"""WhatsApp webhook routes.

Meta calls these directly, so they answer in plain text and are not
behind bearer auth.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import PlainTextResponse

from comicgenius_services import webhook
from comicgenius_api.deps import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhook", tags=["Webhook"])


@router.get("/whatsapp", response_class=PlainTextResponse)
async def verify_whatsapp(
    mode: Optional[str] = Query(None, alias="hub.mode"),
    token: Optional[str] = Query(None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(None, alias="hub.challenge"),
):
    """Subscription handshake: echo the challenge if the token matches."""
    result = webhook.verify(mode, token, challenge, get_settings().whatsapp_verify_token)
    if result is None:
        return PlainTextResponse("Forbidden", status_code=403)
    return PlainTextResponse(result)


@router.post("/whatsapp", response_class=PlainTextResponse)
async def receive_whatsapp(request: Request):
    """Reply to incoming messages with canned text."""
    try:
        body = await request.json()
        await webhook.handle_payload(body, app_url=get_settings().app_url)
    except Exception:
        logger.exception("WhatsApp webhook error")
        return PlainTextResponse("Error", status_code=500)
    return PlainTextResponse("OK")
