import csv
import io
from datetime import datetime

from fulfillment.application.export import HEADER, download_csv, export_to_csv
from fulfillment.domain.models import Order


def test_generates_csv_from_orders():
    orders = [
        Order(
            id="123",
            created_at=datetime(2025, 11, 13, 12, 0, 0),
            customer_name="John Doe",
            customer_email="john@example.com",
            status="completed",
            total=25.50,
            items=[{"name": "Burger", "quantity": 2}],
        )
    ]

    text = export_to_csv(orders)

    lines = text.splitlines()
    assert lines[0] == "Order ID,Date,Customer,Email,Status,Total,Items"
    assert lines[1] == '"123","2025-11-13 12:00:00","John Doe","john@example.com","completed","25.50","2x Burger"'


def test_escapes_special_characters():
    orders = [
        Order(id="1", customer_name="Smith, John", items=[{"name": 'Pizza "Deluxe"', "quantity": 1}], total=10)
    ]

    text = export_to_csv(orders)

    assert '"Smith, John"' in text
    assert 'Pizza ""Deluxe""' in text
    row = list(csv.reader(io.StringIO(text)))[1]
    assert row[2] == "Smith, John"
    assert row[6] == '1x Pizza "Deluxe"'


def test_items_are_joined_in_order():
    orders = [Order(id="1", items=[{"name": "Burger", "quantity": 2}, {"name": "Fries", "quantity": 1}])]
    row = list(csv.reader(io.StringIO(export_to_csv(orders))))[1]
    assert row[6] == "2x Burger; 1x Fries"


def test_includes_order_summary():
    orders = [Order(id="1", total=10), Order(id="2", total=15)]

    text = export_to_csv(orders, include_summary=True)

    assert '"Total Orders","2"' in text
    assert '"Total Revenue","25.00"' in text


def test_exports_filtered_date_range():
    orders = [
        Order(id="1", created_at=datetime(2025, 11, 1), total=10),
        Order(id="2", created_at=datetime(2025, 11, 15), total=15),
    ]

    text = export_to_csv(orders, date_from="2025-11-10", date_to="2025-11-20")

    assert text.startswith('"Date Range","2025-11-10 to 2025-11-20"\n\n' + HEADER + "\n")
    assert '"1"' not in text
    assert '"2"' in text


def test_summary_covers_only_exported_rows():
    orders = [
        Order(id="1", created_at=datetime(2025, 11, 1), total=10),
        Order(id="2", created_at=datetime(2025, 11, 15), total=15),
    ]

    text = export_to_csv(orders, date_from="2025-11-10", date_to="2025-11-20", include_summary=True)

    assert text.endswith('\n\n"Total Orders","1"\n"Total Revenue","15.00"\n')


def test_missing_fields_export_as_empty_strings():
    row = list(csv.reader(io.StringIO(export_to_csv([Order(id="9")]))))[1]
    assert row[2:] == ["", "", "pending", "0.00", ""]


def test_download_returns_content_and_disposition():
    download = download_csv([Order(id="1", total=10)], filename="november orders")

    assert download.filename == "november_orders.csv"
    assert download.media_type == "text/csv"
    assert download.content_disposition == 'attachment; filename="november_orders.csv"'
    assert download.content.startswith(HEADER)


def test_download_passes_export_options():
    download = download_csv([Order(id="1", total=10)], include_summary=True)
    assert download.filename == "orders.csv"
    assert '"Total Orders","1"' in download.content
