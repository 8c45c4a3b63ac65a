import csv
import io

import pandas as pd
import pytest

from aurora_erp.io import (
    NoDataToExportError,
    bill_export_records,
    export_to_csv,
    humanize_header,
    invoice_export_records,
    product_export_records,
    purchase_order_export_records,
    records_to_csv,
)
from aurora_erp.mock_data import BILLS, INVOICES, PRODUCTS, PURCHASE_ORDERS


@pytest.mark.parametrize(
    "key, expected",
    [
        ("dueDate", "Due date"),
        ("invoiceId", "Invoice id"),
        ("expectedDeliveryDate", "Expected delivery date"),
        ("amount", "Amount"),
        ("poID", "Po ID"),
        ("forecast30", "Forecast30"),
        ("customer_name", "Customer_name"),
        ("sku", "Sku"),
        ("SKU", "SKU"),
        ("ID Barang/SKU", "ID Barang/SKU"),
        ("Nama Barang", "Nama Barang"),
    ],
)
def test_humanize_header(key, expected):
    assert humanize_header(key) == expected


def test_records_to_csv_basic_layout():
    records = [
        {"invoiceId": "INV-1", "dueDate": "2024-01-31", "amount": 5},
        {"invoiceId": "INV-2", "dueDate": "2024-02-29", "amount": 10},
    ]

    text = records_to_csv(records)

    assert text == "Invoice id,Due date,Amount\nINV-1,2024-01-31,5\nINV-2,2024-02-29,10"


def test_records_to_csv_quotes_special_cells_and_blanks_none():
    records = [
        {"name": 'Say "hi", ok', "note": None},
        {"name": "two\nlines", "note": "plain"},
    ]

    text = records_to_csv(records)

    assert text.splitlines()[0] == "Name,Note"
    assert '"Say ""hi"", ok",' in text
    assert '"two\nlines",plain' in text
    assert not text.endswith("\n")


def test_records_to_csv_reads_back_with_standard_readers():
    records = [
        {"customer": "Gekko & Co", "memo": 'He said "buy", then "sell"', "total": 1500},
        {"customer": "Acme, Inc.", "memo": "line one\nline two", "total": None},
    ]

    text = records_to_csv(records)

    df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
    assert list(df.columns) == ["Customer", "Memo", "Total"]
    assert df["Customer"].tolist() == ["Gekko & Co", "Acme, Inc."]
    assert df["Memo"].tolist() == [records[0]["memo"], records[1]["memo"]]
    assert df["Total"].tolist() == ["1500", ""]

    rows = list(csv.reader(io.StringIO(text)))
    assert rows[2] == ["Acme, Inc.", "line one\nline two", ""]


def test_records_to_csv_uses_first_record_key_order():
    records = [
        {"b": 1, "a": 2},
        {"a": 3, "b": 4, "c": 5},
    ]

    text = records_to_csv(records)

    assert text == "B,A\n1,2\n4,3"


def test_records_to_csv_rejects_empty_input():
    with pytest.raises(NoDataToExportError, match="No data to export."):
        records_to_csv([])


def test_export_to_csv_writes_file(tmp_path):
    out_dir = tmp_path / "exports"
    records = product_export_records(PRODUCTS)

    path = export_to_csv("product_inventory.csv", records, out_dir)

    assert path == out_dir / "product_inventory.csv"
    content = path.read_text(encoding="utf-8")
    assert content == records_to_csv(records)
    assert content.splitlines()[0] == "Product id,Name,Sku,Category,Stock,Price"
    assert "PROD-01,Quantum Widget,QW-1001,Widgets,150,350000" in content


def test_export_to_csv_with_no_records_writes_nothing(tmp_path):
    out_dir = tmp_path / "exports"

    with pytest.raises(NoDataToExportError):
        export_to_csv("empty.csv", [], out_dir)

    assert not out_dir.exists()


def test_invoice_export_records_derive_amount():
    records = invoice_export_records(INVOICES)

    assert len(records) == len(INVOICES)
    first = records[0]
    assert list(first) == ["invoiceId", "customer", "date", "dueDate", "amount", "status"]
    assert first["invoiceId"] == "INV-001"
    assert first["amount"] == 50 * 200_000_000 + 5 * 500_000_000


def test_bill_and_purchase_order_projections():
    bills = bill_export_records(BILLS)
    assert list(bills[0]) == ["billId", "vendor", "date", "dueDate", "amount", "status"]

    orders = purchase_order_export_records(PURCHASE_ORDERS)
    assert orders[0]["itemCount"] == len(PURCHASE_ORDERS[0].items)
    header = records_to_csv(orders).splitlines()[0]
    assert header == "Po id,Vendor,Date,Expected delivery date,Total amount,Status,Item count"
