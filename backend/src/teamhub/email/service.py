"""Email service using SendGrid."""

import httpx

from teamhub.logging_config import get_logger

logger = get_logger(__name__)


class EmailService:
    """Transactional email over the SendGrid API.

    Delivery failures are logged and reported through the return value;
    callers decide whether a lost email matters.
    """

    SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"

    def __init__(
        self,
        api_key: str | None,
        from_email: str,
        from_name: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize email service.

        Args:
            api_key: SendGrid API key, email is disabled without it
            from_email: Sender address
            from_name: Sender display name
            transport: Optional httpx transport (used by tests)
        """
        self.api_key = api_key
        self.from_email = from_email
        self.from_name = from_name
        self.transport = transport
        self.enabled = bool(self.api_key)

        if not self.enabled:
            logger.warning("email_service_disabled", reason="SENDGRID_API_KEY not set")

    async def send(self, subject: str, text_content: str, to_email: str) -> bool:
        """Send a plain text email.

        Args:
            subject: Email subject
            text_content: Plain text body
            to_email: Recipient email address

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.enabled:
            logger.warning("email_not_sent", reason="service_disabled", to=to_email)
            return False

        payload = {
            "personalizations": [
                {
                    "to": [{"email": to_email}],
                    "subject": subject,
                }
            ],
            "from": {
                "email": self.from_email,
                "name": self.from_name,
            },
            "content": [
                {"type": "text/plain", "value": text_content},
            ],
        }

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(
                    self.SENDGRID_API_URL,
                    json=payload,
                    headers=headers,
                    timeout=30.0,
                )

                if response.status_code in (200, 201, 202):
                    logger.info("email_sent", to=to_email, subject=subject)
                    return True
                else:
                    logger.error(
                        "email_send_failed",
                        to=to_email,
                        status=response.status_code,
                        body=response.text[:200],
                    )
                    return False

        except httpx.RequestError as e:
            logger.error("email_send_error", to=to_email, error=str(e))
            return False
