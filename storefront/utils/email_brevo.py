import aiohttp
from typing import Any, Mapping, Optional
from pathlib import Path
from jinja2 import Environment, FileSystemLoader, select_autoescape
from fastapi import Request
import os
import logging

from storefront.utils.formatting import format_order_time, format_rupiah

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"

DEFAULT_SITE_NAME = "Twenti Studio"
DEFAULT_ADMIN_EMAIL = "admin@localhost"


def build_template_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["rupiah"] = format_rupiah
    env.filters["order_time"] = format_order_time
    return env


class BrevoEmailService:
    """Transactional email over the Brevo HTTP API

    Lifecycle: construct once, ``await start()`` when the app starts (opens the
    HTTP session) and ``await close()`` on shutdown. Sending before ``start()``
    or without an API key logs and returns False; send methods never raise.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        sender_email: Optional[str] = None,
        site_name: Optional[str] = None,
        admin_email: Optional[str] = None,
        public_base_url: Optional[str] = None,
        base_url: str = "https://api.brevo.com/v3",
    ):
        self.api_key = api_key if api_key is not None else os.getenv("BREVO_API_KEY")
        self.sender_email = sender_email or os.getenv("MAIL_SENDER", "noreply@localhost")
        self.site_name = site_name or os.getenv("SITE_NAME", DEFAULT_SITE_NAME)
        self.admin_email = admin_email or os.getenv("ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL)
        self.public_base_url = (public_base_url or os.getenv("API_URL", "http://localhost:8000")).rstrip("/")
        self.base_url = base_url
        self.templates = build_template_env()
        self._session: Optional[aiohttp.ClientSession] = None

        if not self.api_key:
            logger.warning("BREVO_API_KEY not configured - email sending will fail")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def start(self) -> None:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "accept": "application/json",
                    "content-type": "application/json",
                    "api-key": self.api_key or "",
                },
                timeout=aiohttp.ClientTimeout(total=15),
            )
            logger.info("Email client started")

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
            logger.info("Email client closed")
        self._session = None

    async def send_email(self, to_email: str, to_name: Optional[str], subject: str,
                         html_content: str, sender_name: Optional[str] = None,
                         sender_email: Optional[str] = None) -> bool:
        """Send one HTML email; True when Brevo accepted it"""
        if not self.is_configured:
            logger.error("Cannot send email - BREVO_API_KEY not configured")
            return False
        if self._session is None or self._session.closed:
            logger.error("Cannot send email - email client not started")
            return False

        data = {
            "sender": {
                "name": sender_name or self.site_name,
                "email": sender_email or self.sender_email
            },
            "to": [{"email": to_email, "name": to_name or to_email.split('@')[0]}],
            "subject": subject,
            "htmlContent": html_content
        }

        try:
            async with self._session.post(f"{self.base_url}/smtp/email", json=data) as response:
                response_text = await response.text()

                if response.status == 201:
                    logger.info(f"Email '{subject}' sent to {to_email}")
                    return True
                logger.error(f"Failed to send email to {to_email}. Status: {response.status}, Response: {response_text}")
                return False
        except Exception as e:
            logger.error(f"Email send error for {to_email}: {e}", exc_info=True)
            return False

    def _payment_proof_url(self, payment_proof: Optional[str]) -> Optional[str]:
        if not payment_proof:
            return None
        if payment_proof.startswith("http"):
            return payment_proof
        return f"{self.public_base_url}{payment_proof}"

    async def send_order_notification(self, order, settings: Optional[Mapping[str, str]] = None) -> bool:
        """Tell the shop admin about a new order"""
        settings = settings or {}
        site_name = settings.get("site_name") or self.site_name
        admin_email = settings.get("admin_email") or self.admin_email

        try:
            html_content = self.templates.get_template("order_notification.html").render(
                order=order,
                user_data=dict(order.user_data or {}),
                payment_proof_url=self._payment_proof_url(order.payment_proof),
                site_name=site_name,
            )
        except Exception as e:
            logger.error(f"Failed to render order notification for order {order.id}: {e}", exc_info=True)
            return False

        return await self.send_email(
            to_email=admin_email,
            to_name=site_name,
            subject=f"🛒 Pesanan Baru #{order.id} - {order.product_name}",
            html_content=html_content,
            sender_name=site_name,
            sender_email=settings.get("mail_sender"),
        )

    async def send_delivery_email(self, order, download_url: str,
                                  settings: Optional[Mapping[str, str]] = None) -> bool:
        """Send the download link of a digital product to the customer"""
        settings = settings or {}
        site_name = settings.get("site_name") or self.site_name
        user_data: Mapping[str, Any] = order.user_data or {}

        customer_email = user_data.get("email")
        if not customer_email:
            logger.warning(f"Order {order.id} has no customer email - delivery email skipped")
            return False

        try:
            html_content = self.templates.get_template("delivery.html").render(
                order=order,
                customer_name=user_data.get("name"),
                download_url=download_url,
                site_name=site_name,
            )
        except Exception as e:
            logger.error(f"Failed to render delivery email for order {order.id}: {e}", exc_info=True)
            return False

        return await self.send_email(
            to_email=customer_email,
            to_name=user_data.get("name"),
            subject=f"✅ Download Link - {order.product_name}",
            html_content=html_content,
            sender_name=site_name,
            sender_email=settings.get("mail_sender"),
        )


def get_email_service(request: Request) -> BrevoEmailService:
    """Dependency: the email client the app created at startup"""
    return request.app.state.email_service
