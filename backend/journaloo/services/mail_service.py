"""
Outbound email through an HTTP email provider (SendGrid v3 compatible).
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol
import httpx
from journaloo.core.config import settings
from journaloo.core.exceptions import MailDeliveryError

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    """Sends a plain-text email."""

    async def send(self, to: str, subject: str, body: str) -> None:
        ...


@dataclass
class HttpMailer:
    """Mailer posting messages to the provider's REST endpoint."""

    api_url: str
    api_key: str
    sender: str
    timeout: float = 10.0
    transport: Optional[httpx.AsyncBaseTransport] = None

    async def send(self, to: str, subject: str, body: str) -> None:
        if not self.api_key:
            logger.warning(f"MAIL_API_KEY not configured. Not sending '{subject}' to {to}.")
            return

        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.sender},
            "subject": subject,
            "content": [{"type": "text/plain", "value": body}],
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Mail provider error {e.response.status_code}: {e.response.text}")
            raise MailDeliveryError(f"Mail provider returned {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"Mail provider unreachable: {e}")
            raise MailDeliveryError("Mail provider unreachable")

        logger.info(f"Sent '{subject}' to {to}")


@dataclass
class InMemoryMailer:
    """Test double that records messages instead of sending them."""

    outbox: List[dict] = field(default_factory=list)

    async def send(self, to: str, subject: str, body: str) -> None:
        self.outbox.append({"to": to, "subject": subject, "body": body})


_mailer: Mailer = None


def get_mailer() -> Mailer:
    """Return the process-wide mailer."""
    global _mailer
    if _mailer is None:
        _mailer = HttpMailer(
            api_url=settings.MAIL_API_URL,
            api_key=settings.MAIL_API_KEY,
            sender=settings.MAIL_FROM,
            timeout=settings.MAIL_TIMEOUT,
        )
    return _mailer
