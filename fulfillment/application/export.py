"""CSV export for accounting.

Data rows quote every field and double embedded quotes (RFC 4180), so a
customer called ``Smith, John`` is written as ``"Smith, John"``.
"""
import csv
import io
import re
from decimal import Decimal
from typing import Iterable, List, Optional

from fulfillment.application.query import DateLike, as_date, filter_by_date_range
from fulfillment.core.timeutils import to_local
from fulfillment.domain.models import Order
from fulfillment.domain.results import CsvDownload

HEADER = "Order ID,Date,Customer,Email,Status,Total,Items"

_FILENAME_UNSAFE = re.compile(r'[^A-Za-z0-9_.-]+')


def _items_column(order: Order) -> str:
    return "; ".join(f"{item.quantity}x {item.name}" for item in order.items)


def _row(order: Order) -> List[str]:
    return [
        order.id,
        f"{to_local(order.created_at):%Y-%m-%d %H:%M:%S}",
        order.customer_name or "",
        order.customer_email or "",
        order.status.value,
        f"{order.total:.2f}",
        _items_column(order),
    ]


def export_to_csv(
    orders: Iterable[Order],
    include_summary: bool = False,
    date_from: Optional[DateLike] = None,
    date_to: Optional[DateLike] = None,
) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

    export_orders = list(orders)
    if date_from or date_to:
        label_from = as_date(date_from).isoformat() if date_from else "start"
        label_to = as_date(date_to).isoformat() if date_to else "now"
        writer.writerow(["Date Range", f"{label_from} to {label_to}"])
        buffer.write("\n")
        export_orders = filter_by_date_range(export_orders, date_from, date_to)

    buffer.write(HEADER + "\n")
    for order in export_orders:
        writer.writerow(_row(order))

    if include_summary:
        revenue = sum((o.total for o in export_orders), Decimal("0.00"))
        buffer.write("\n")
        writer.writerow(["Total Orders", str(len(export_orders))])
        writer.writerow(["Total Revenue", f"{revenue:.2f}"])

    return buffer.getvalue()


def download_csv(orders: Iterable[Order], filename: str = "orders.csv", **options) -> CsvDownload:
    """Server-side download: the HTTP layer sends ``content`` with ``content_disposition``."""
    name = _FILENAME_UNSAFE.sub("_", filename).strip("._") or "orders"
    if not name.lower().endswith(".csv"):
        name += ".csv"
    return CsvDownload(filename=name, content=export_to_csv(orders, **options))
