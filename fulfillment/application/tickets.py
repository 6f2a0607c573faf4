"""Kitchen tickets and customer receipts.

Output is plain text sized for a thermal printer. Kitchen tickets carry no
prices; receipts carry the full money breakdown.
"""
import logging
from decimal import Decimal
from typing import Iterable, Optional

from fulfillment.core.config import settings
from fulfillment.core.timeutils import to_local
from fulfillment.domain.models import Order
from fulfillment.domain.results import BatchPrintResult, PrintResult
from fulfillment.interfaces.IPrinter import IPrinter

logger = logging.getLogger(__name__)

KITCHEN = "kitchen"
RECEIPT = "receipt"
MODES = (KITCHEN, RECEIPT)


class TicketFormatter:

    def __init__(
        self,
        printer: Optional[IPrinter] = None,
        width: int = settings.TICKET_WIDTH,
        currency: str = settings.CURRENCY_SYMBOL,
    ):
        self.printer = printer
        self.width = width
        self.currency = currency

    def _rule(self, char: str = "=") -> str:
        return char * self.width

    def _money(self, amount: Decimal) -> str:
        return f"{self.currency}{amount:.2f}"

    def _amount_line(self, label: str, amount: Decimal) -> str:
        value = self._money(amount)
        return f"{label}{value.rjust(self.width - len(label))}"

    def generate_kitchen_ticket(self, order: Order) -> str:
        lines = [
            self._rule(),
            "KITCHEN TICKET".center(self.width).rstrip(),
            self._rule(),
            f"ORDER #{order.id}",
            f"Time: {to_local(order.created_at):%Y-%m-%d %H:%M}",
            self._rule(),
            "",
        ]
        for item in order.items:
            lines.append(f"{item.quantity}x {item.name}")
            for mod in item.modifiers:
                lines.append(f"   - {mod.name}: {mod.value}" if mod.value else f"   - {mod.name}")
            if item.special_instructions:
                lines.append(f"   *** {item.special_instructions} ***")
            lines.append("")
        lines.append(self._rule())
        return "\n".join(lines) + "\n"

    def generate_receipt(self, order: Order) -> str:
        lines = [
            self._rule(),
            "RECEIPT".center(self.width).rstrip(),
            self._rule(),
            f"Order #{order.id}",
            f"{to_local(order.created_at):%Y-%m-%d %H:%M}",
            "",
            f"Customer: {order.customer_name or 'Guest'}",
        ]
        if order.customer_email:
            lines.append(f"Email: {order.customer_email}")
        lines += [self._rule(), ""]

        for item in order.items:
            label = f"{item.quantity}x {item.name}"
            if item.line_total is None:
                lines.append(label)
            else:
                lines.append(self._amount_line(label + " ", item.line_total))

        lines += [
            "",
            self._rule(),
            self._amount_line("Subtotal:", order.subtotal),
            self._amount_line("Tax:", order.tax),
            self._amount_line("Tip:", order.tip),
            self._rule(),
            self._amount_line("TOTAL:", order.total),
            self._rule(),
            "",
            "Thank you for your order!",
        ]
        return "\n".join(lines) + "\n"

    def render(self, order: Order, mode: str = KITCHEN) -> str:
        if mode == KITCHEN:
            return self.generate_kitchen_ticket(order)
        if mode == RECEIPT:
            return self.generate_receipt(order)
        raise ValueError(f"mode must be one of {MODES}, got {mode!r}")

    def print_order(self, order: Order, mode: str = KITCHEN) -> PrintResult:
        """
        Render and hand off to the printer, if one is configured.

        The rendered text is the deliverable: a missing or failing printer
        still yields success=True, with ``printed`` telling whether the
        device took it.
        """
        content = self.render(order, mode)
        result = PrintResult(success=True, order_id=order.id, mode=mode, content=content)
        if self.printer is None:
            return result

        title = f"{mode}-{order.id}"
        try:
            self.printer.print_text(content, title)
            result.printed = True
        except Exception as e:  # printer backends raise their own types
            logger.error(f"❌ Print failed for {title}: {e}")
            result.error = str(e)
        return result

    def batch_print(self, orders: Iterable[Order], mode: str = KITCHEN) -> BatchPrintResult:
        if mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {mode!r}")
        count = 0
        failed = 0
        for order in orders:
            result = self.print_order(order, mode)
            count += 1
            if result.error:
                failed += 1
        if failed:
            logger.warning(f"Batch print ({mode}): {failed} of {count} tickets did not reach the printer")
        return BatchPrintResult(success=True, count=count, failed=failed)
