"""Contact form email delivery via the Resend API.

Sending is fire-and-forget: the contact route schedules send_contact_message()
as a background task and has already answered the client when it runs, so
failures are logged and never raised.
"""

import html
import logging

import httpx

from portfolio_api.core.config import Settings

logger = logging.getLogger(__name__)

_RESEND_API_URL = "https://api.resend.com/emails"
_RESEND_TIMEOUT = 10.0


def render_contact_html(name: str, email: str, message: str) -> str:
    """Render the notification body. All user input is HTML-escaped."""
    body = html.escape(message).replace("\n", "<br>")
    return (
        '<div style="font-family: Arial, sans-serif; line-height: 1.6;">'
        "<h2>New message from your portfolio</h2>"
        f"<p><strong>From:</strong> {html.escape(name)} "
        f"&lt;{html.escape(email)}&gt;</p>"
        f'<div style="padding: 12px; border-left: 3px solid #ccc;">{body}</div>'
        "</div>"
    )


class ContactMailer:
    """Delivers contact form messages to the portfolio owner.

    Args:
        api_key: Resend API key. When empty, messages are logged and dropped.
        sender: From address (must be a verified Resend sender).
        recipient: Owner inbox that receives the messages.
        transport: Optional httpx transport, for tests.
    """

    def __init__(
        self,
        *,
        api_key: str,
        sender: str,
        recipient: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self.sender = sender
        self.recipient = recipient
        self._transport = transport

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "ContactMailer":
        return cls(
            api_key=app_settings.resend_api_key.get_secret_value(),
            sender=app_settings.email_from,
            recipient=app_settings.contact_recipient or app_settings.email_from,
        )

    @property
    def enabled(self) -> bool:
        return bool(self._api_key and self.recipient)

    def build_payload(self, *, name: str, email: str, message: str) -> dict:
        """Resend request body for one contact message."""
        return {
            "from": f"Portfolio Contact <{self.sender}>",
            "to": [self.recipient],
            "reply_to": email,
            "subject": f"New message from {name} (Portfolio)",
            "html": render_contact_html(name, email, message),
            "text": f"From: {name} <{email}>\n\n{message}",
        }

    async def send_contact_message(self, *, name: str, email: str, message: str) -> bool:
        """Send one contact message.

        Returns:
            True if Resend accepted the message, False otherwise.
        """
        if not self.enabled:
            logger.warning("Contact email not sent: RESEND_API_KEY or recipient unset")
            return False

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.post(
                    _RESEND_API_URL,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                    json=self.build_payload(name=name, email=email, message=message),
                    timeout=_RESEND_TIMEOUT,
                )
                resp.raise_for_status()
        except Exception:
            logger.warning("Failed to send contact email", exc_info=True)
            return False

        logger.info("Contact email delivered")
        return True
