# Aurora ERP - Business management dashboard for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
CSV import and export for Aurora ERP.

Import format (invoices)
------------------------
Plain comma-separated text, first row is the header. Each data row is one
line item; rows sharing the same ``InvoiceID`` are grouped into one invoice.

    InvoiceID,Customer,Date,DueDate,ProductID,Quantity,PriceOverride
    INV-100,Acme,2024-01-01,2024-01-31,PROD-01,2,
    INV-100,Acme,2024-01-01,2024-01-31,PROD-02,1,700000

Required columns: ``InvoiceID, Customer, Date, DueDate, ProductID,
Quantity``. ``PriceOverride`` is optional; when empty, the product's default
price is used. Quoting and escaping are not supported on import.

The parser never raises on malformed rows: each bad row contributes one
error message and is skipped, so valid rows of the same file still import.
Only an empty file or a missing required header aborts the whole import,
with a single error and no invoices.

Export format
-------------
Standard CSV with minimal quoting. Column order follows the key order of the
first record; camelCase keys are turned into readable headers
(``dueDate`` -> ``Due date``). Cells containing a comma, a double quote or a
newline are wrapped in double quotes with embedded quotes doubled, so the
output reads back to the same values with any standard CSV reader.
"""

import logging
import os
import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd

from .models import ImportResult, Invoice, LineItem, Product

logger = logging.getLogger(__name__)

REQUIRED_HEADERS = ["InvoiceID", "Customer", "Date", "DueDate", "ProductID", "Quantity"]
PRICE_OVERRIDE_HEADER = "PriceOverride"

EMPTY_FILE_ERROR = "CSV file is empty or contains only a header."
UNEXPECTED_PARSE_ERROR = (
    "An unexpected error occurred while parsing the file. "
    "Please ensure it is a valid CSV."
)

_INT_PREFIX = re.compile(r"^[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_IDENTIFIER_KEY = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_CAMEL_KEY = re.compile(r"^[a-z][A-Za-z0-9]*$")
_CAMEL_WORD = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z0-9]+")


class NoDataToExportError(ValueError):
    """Raised when an export is requested for an empty list of records."""

    def __init__(self) -> None:
        super().__init__("No data to export.")


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


def _parse_int_prefix(value: str) -> Optional[int]:
    """Leading integer of ``value`` ("12abc" -> 12), or None."""
    match = _INT_PREFIX.match(value.strip())
    return int(match.group(0)) if match else None


def _parse_float_prefix(value: str) -> Optional[float]:
    """Leading decimal number of ``value`` ("12.5 IDR" -> 12.5), or None."""
    match = _FLOAT_PREFIX.match(value.strip())
    return float(match.group(0)) if match else None


def parse_invoices_from_csv(
    csv_text: str, products: Mapping[str, Product]
) -> ImportResult:
    """
    Parse invoices from raw CSV text.

    Parameters
    ----------
    csv_text:
        Full content of the CSV file.
    products:
        Lookup table of known products, keyed by product id.

    Returns
    -------
    ImportResult
        Invoices in order of first appearance of their InvoiceID (status
        ``Due``, line ids ``"{invoice_id}-{n}"``) and error messages in row
        order. Row numbers in messages are 1-based file line numbers, the
        header being line 1.
    """
    lines = csv_text.strip().replace("\r", "").split("\n")
    if len(lines) < 2:
        return ImportResult(invoices=[], errors=[EMPTY_FILE_ERROR])

    headers = [h.strip() for h in lines[0].split(",")]
    for header in REQUIRED_HEADERS:
        if header not in headers:
            return ImportResult(
                invoices=[],
                errors=[
                    f"CSV is missing required header: {header}. "
                    f"Expected headers are {', '.join(REQUIRED_HEADERS)}."
                ],
            )

    errors: list[str] = []
    # InvoiceID -> (header row, line items without ids), insertion-ordered
    grouped: dict[str, tuple[dict[str, Optional[str]], list[dict[str, Any]]]] = {}

    for index, raw_row in enumerate(lines[1:]):
        if not raw_row.strip():
            continue
        row_num = index + 2

        values = [v.strip() for v in raw_row.split(",")]
        row = {h: (values[i] if i < len(values) else None) for i, h in enumerate(headers)}

        if any(not row.get(h) for h in REQUIRED_HEADERS):
            errors.append(f"Row {row_num}: Missing one or more required fields.")
            continue

        product_id = row["ProductID"]
        product = products.get(product_id)
        if product is None:
            errors.append(
                f'Row {row_num}: Product with ID "{product_id}" not found in inventory.'
            )
            continue

        quantity = _parse_int_prefix(row["Quantity"])
        override = row.get(PRICE_OVERRIDE_HEADER)
        price = _parse_float_prefix(override) if override else product.price

        if quantity is None or quantity <= 0 or price is None or price < 0:
            errors.append(
                f"Row {row_num}: Invalid number for Quantity or Price. "
                "Quantity must be positive."
            )
            continue

        item = {
            "product_id": product.id,
            "sku": product.sku,
            "description": product.name,
            "quantity": quantity,
            "price": price,
        }

        invoice_id = row["InvoiceID"]
        if invoice_id in grouped:
            # First row wins for customer and dates.
            grouped[invoice_id][1].append(item)
        else:
            grouped[invoice_id] = (row, [item])

    invoices = [
        Invoice(
            id=invoice_id,
            customer=header_row["Customer"],
            date=header_row["Date"],
            due_date=header_row["DueDate"],
            status="Due",
            items=[
                LineItem(id=f"{invoice_id}-{n}", **item)
                for n, item in enumerate(items, start=1)
            ],
        )
        for invoice_id, (header_row, items) in grouped.items()
    ]

    logger.info(
        "Parsed %d invoice(s) from %d data row(s), %d error(s)",
        len(invoices),
        len(lines) - 1,
        len(errors),
    )
    return ImportResult(invoices=invoices, errors=errors)


def read_invoices_csv(
    path: Union[str, "os.PathLike[str]"], products: Mapping[str, Product]
) -> ImportResult:
    """
    Read a CSV file and parse its invoices.

    Unlike `parse_invoices_from_csv`, unexpected failures (unreadable file,
    undecodable bytes) are converted into a single error message instead of
    propagating, so the caller always gets something to review.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
        return parse_invoices_from_csv(text, products)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read invoice CSV %s: %s", path, exc)
        return ImportResult(invoices=[], errors=[UNEXPECTED_PARSE_ERROR])


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def humanize_header(key: str) -> str:
    """
    Turn a camelCase record key into a column header.

    A space is inserted before each internal capitalized word, which is
    lower-cased; the first letter is capitalized. Acronyms are kept:

        dueDate              -> "Due date"
        expectedDeliveryDate -> "Expected delivery date"
        poID                 -> "Po ID"

    Other identifiers only get their first letter capitalized
    (``customer_name`` -> "Customer_name"). Labels holding spaces or
    punctuation, such as "ID Barang/SKU", are returned unchanged.
    """
    if not _IDENTIFIER_KEY.match(key):
        return key
    if not _CAMEL_KEY.match(key):
        return key[0].upper() + key[1:]

    words = _CAMEL_WORD.findall(key)
    rest = [w if (len(w) > 1 and w.isupper()) else w.lower() for w in words[1:]]
    text = " ".join([words[0], *rest])
    return text[0].upper() + text[1:]


def records_to_csv(records: Sequence[Mapping[str, Any]]) -> str:
    """
    Serialize uniform flat records to CSV text.

    Columns follow the key order of the first record. ``None`` (and missing
    keys) become empty cells. Rows are separated by ``\\n`` with no trailing
    newline.

    Raises
    ------
    NoDataToExportError
        If ``records`` is empty.
    """
    if not records:
        raise NoDataToExportError()

    keys = list(records[0].keys())
    # dtype=object keeps ints as ints when a column also holds None
    df = pd.DataFrame([[r.get(k) for k in keys] for r in records], columns=keys, dtype=object)

    text = df.to_csv(
        index=False,
        header=[humanize_header(k) for k in keys],
        na_rep="",
        lineterminator="\n",
    )
    return text[:-1] if text.endswith("\n") else text


def export_to_csv(
    filename: str,
    records: Sequence[Mapping[str, Any]],
    output_dir: Union[str, "os.PathLike[str]"] = ".",
) -> Path:
    """
    Write records to ``output_dir/filename`` as CSV and return the path.

    Nothing is written when ``records`` is empty; `NoDataToExportError` is
    raised instead so that the caller can tell the user.
    """
    content = records_to_csv(records)

    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / filename
    path.write_text(content, encoding="utf-8")

    logger.info("Exported %d row(s) to %s", len(records), path)
    return path


# ---------------------------------------------------------------------------
# Export projections
# ---------------------------------------------------------------------------


def invoice_export_records(invoices: Sequence[Invoice]) -> list[dict[str, Any]]:
    return [
        {
            "invoiceId": inv.id,
            "customer": inv.customer,
            "date": inv.date,
            "dueDate": inv.due_date,
            "amount": inv.amount,
            "status": inv.status,
        }
        for inv in invoices
    ]


def product_export_records(products: Sequence[Product]) -> list[dict[str, Any]]:
    return [
        {
            "productId": p.id,
            "name": p.name,
            "sku": p.sku,
            "category": p.category,
            "stock": p.stock,
            "price": p.price,
        }
        for p in products
    ]


def bill_export_records(bills) -> list[dict[str, Any]]:
    return [
        {
            "billId": b.id,
            "vendor": b.vendor,
            "date": b.date,
            "dueDate": b.due_date,
            "amount": b.amount,
            "status": b.status,
        }
        for b in bills
    ]


def purchase_order_export_records(orders) -> list[dict[str, Any]]:
    return [
        {
            "poId": po.id,
            "vendor": po.vendor,
            "date": po.date,
            "expectedDeliveryDate": po.expected_delivery_date,
            "totalAmount": po.total_amount,
            "status": po.status,
            "itemCount": len(po.items),
        }
        for po in orders
    ]


def sales_order_export_records(orders) -> list[dict[str, Any]]:
    return [
        {
            "soId": so.id,
            "customer": so.customer,
            "date": so.date,
            "expectedDeliveryDate": so.expected_delivery_date,
            "totalAmount": so.total_amount,
            "status": so.status,
            "itemCount": len(so.items),
        }
        for so in orders
    ]
