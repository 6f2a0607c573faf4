import logging
from typing import Iterable, Optional

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from fulfillment.core.config import settings
from fulfillment.domain.models import Order, OrderStatus

logger = logging.getLogger(__name__)


def _whatsapp(number: str) -> str:
    # Twilio requires the "whatsapp:" prefix
    return number if number.startswith("whatsapp:") else f"whatsapp:{number}"


class NotificationService:
    """Tells staff on WhatsApp when an order reaches a watched status."""

    def __init__(
        self,
        client: Optional[Client] = None,
        from_number: Optional[str] = None,
        admin_number: Optional[str] = None,
        notify_statuses: Optional[Iterable[str]] = None,
    ):
        self.client = client
        self.from_number = from_number or settings.TWILIO_FROM_NUMBER
        self.admin_number = admin_number or settings.ADMIN_PHONE_NUMBER
        self.notify_statuses = set(notify_statuses) if notify_statuses is not None else settings.notify_statuses

        # Only build a client if credentials exist in .env
        if self.client is None and settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN:
            try:
                self.client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
                logger.info("✅ NotificationService: Twilio Client Initialized")
            except TwilioException as e:
                logger.error(f"❌ Failed to initialize Twilio Client: {e}")

        self.enabled = bool(self.client and self.from_number and self.admin_number)
        if not self.enabled:
            logger.info("NotificationService: credentials or numbers missing. Notifications disabled.")

    def should_notify(self, status: OrderStatus) -> bool:
        return self.enabled and OrderStatus(status).value in self.notify_statuses

    def notify_status_change(self, order: Order, new_status: OrderStatus) -> bool:
        """Returns True if a message was handed to Twilio."""
        if not self.should_notify(new_status):
            return False

        order_summary = "\n".join(f"- {item.quantity}x {item.name}" for item in order.items)
        message_body = (
            f"🔔 *ORDER #{order.id} → {OrderStatus(new_status).value.upper()}*\n\n"
            f"👤 Customer: {order.customer_name or 'Guest'}\n"
            f"🛒 Items:\n{order_summary or '- (none)'}"
        )

        try:
            self.client.messages.create(
                from_=_whatsapp(self.from_number),
                body=message_body,
                to=_whatsapp(self.admin_number),
            )
            logger.info(f"✅ Status notification for {order.id} sent to {self.admin_number}")
            return True
        except Exception as e:  # twilio lets transport errors through unwrapped
            logger.error(f"❌ Failed to send status notification for {order.id}: {e}")
            return False
