"""WhatsApp Business webhook handling.

The bot is a keyword matcher: it never generates comics itself, it only
points people at the web app.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from comicgenius_generators.templates import render

logger = logging.getLogger(__name__)

DEFAULT_APP_URL = "https://comicgenius.vercel.app"

Sender = Callable[[str, dict], Awaitable[None]]

WELCOME_REPLY = """\
\U0001F3A8 Welcome to ComicGenius!

Create amazing comics from your stories with AI:

\U0001F4DD Write your story
\U0001F465 Add character photos
\U0001F3A8 Choose your style
✨ Generate your comic

Visit: {{ app_url }}

Type "help" for more commands."""

HELP_REPLY = """\
\U0001F916 ComicGenius Commands:

• "comic" or "story" - Get started
• "help" - Show this help
• "about" - Learn more about ComicGenius

Visit our web app to create your comic!"""

ABOUT_REPLY = """\
\U0001F3AD About ComicGenius:

ComicGenius uses AI to transform your stories into beautiful comics. Simply write your story, add character photos, choose a style, and watch as AI creates your comic panels!

Features:
✨ AI-powered character generation
\U0001F3A8 Multiple comic styles
\U0001F4F1 Mobile-optimized interface
\U0001F680 Fast and easy to use

Start creating: {{ app_url }}"""


def verify(
    mode: Optional[str],
    token: Optional[str],
    challenge: Optional[str],
    verify_token: Optional[str],
) -> Optional[str]:
    """Answer the subscription handshake.

    Returns:
        The challenge to echo back, or None if verification failed
    """
    if mode == "subscribe" and verify_token and token == verify_token:
        logger.info("WhatsApp webhook verified")
        return challenge or ""
    logger.warning("WhatsApp webhook verification failed")
    return None


def reply_for(text: str, app_url: str = DEFAULT_APP_URL) -> Optional[str]:
    """Pick the canned reply for an incoming message, if any."""
    message = text.lower()

    if "comic" in message or "story" in message:
        return render(WELCOME_REPLY, app_url=app_url)
    if "help" in message:
        return HELP_REPLY
    if "about" in message:
        return render(ABOUT_REPLY, app_url=app_url)
    return None


async def log_sender(to: str, message: dict) -> None:
    """Default sender: the Business API is not wired up, so only log."""
    logger.info("Sending WhatsApp message to %s: %s", to, message)


async def handle_payload(
    body: dict[str, Any],
    app_url: str = DEFAULT_APP_URL,
    sender: Optional[Sender] = None,
) -> int:
    """Reply to every text message in a webhook delivery.

    Only the first change of the first entry is read, and only when it
    carries messages.

    Returns:
        Number of replies sent
    """
    send = sender or log_sender

    if not isinstance(body, dict) or body.get("object") != "whatsapp_business_account":
        return 0

    entries = body.get("entry") or []
    changes = (entries[0].get("changes") or []) if entries else []
    change = changes[0] if changes else None
    if not change or change.get("field") != "messages":
        return 0

    sent = 0
    for message in (change.get("value") or {}).get("messages") or []:
        text = (message.get("text") or {}).get("body")
        if message.get("type") != "text" or not text:
            continue

        reply = reply_for(text, app_url)
        if reply is None:
            continue

        await send(message.get("from", ""), {"type": "text", "text": {"body": reply}})
        sent += 1

    return sent
