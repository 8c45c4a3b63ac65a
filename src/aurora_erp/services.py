# Aurora ERP - Business management dashboard for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Application services on top of the in-memory workspace.

This module is responsible for:
- holding the mutable working copy of the demo dataset (`Workspace`),
- the review step between parsing an invoice CSV and merging its invoices
  (`ImportReview`),
- the record editors shared by the CLI commands (saving invoices, products,
  purchase orders, employees and tasks), posting journals and grouping
  deals and tasks by stage.

Nothing is persisted: each `Workspace` starts from a deep copy of
`aurora_erp.mock_data` and is discarded with the process.
"""

import copy
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Union

from .io import read_invoices_csv
from .ledger import JournalLine, journal_to_ledger_entries
from . import mock_data
from .models import (
    PIPELINE_STAGES,
    TASK_STAGES,
    Bill,
    CashFlowEntry,
    ChartData,
    Contact,
    Deal,
    Employee,
    ImportResult,
    Invoice,
    LedgerEntry,
    LineItem,
    Product,
    Project,
    PurchaseOrder,
    SalesOrder,
    Task,
)

logger = logging.getLogger(__name__)

EDITABLE_IMPORT_FIELDS = ("customer", "date")
ERROR_PREVIEW_LIMIT = 5


class ImportReview:
    """
    Parsed invoices awaiting user confirmation.

    The review works on its own copy of the parsed invoices: edits never
    touch the `ImportResult` it was built from. Only ``customer`` and
    ``date`` can be edited.
    """

    def __init__(self, result: ImportResult) -> None:
        self.invoices: list[Invoice] = copy.deepcopy(list(result.invoices))
        self.errors: list[str] = list(result.errors)

    @property
    def has_invoices(self) -> bool:
        return bool(self.invoices)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def update_field(self, invoice_id: str, field_name: str, value: str) -> Invoice:
        """
        Edit one field of a pending invoice and return the updated invoice.

        Raises
        ------
        ValueError
            If ``field_name`` is not editable.
        KeyError
            If no pending invoice has ``invoice_id``.
        """
        if field_name not in EDITABLE_IMPORT_FIELDS:
            raise ValueError(
                f"Field {field_name!r} cannot be edited during import "
                f"(editable: {', '.join(EDITABLE_IMPORT_FIELDS)})."
            )
        for i, invoice in enumerate(self.invoices):
            if invoice.id == invoice_id:
                updated = replace(invoice, **{field_name: value})
                self.invoices[i] = updated
                return updated
        raise KeyError(f"No pending invoice with ID {invoice_id!r}.")

    def error_preview(self, limit: int = ERROR_PREVIEW_LIMIT) -> list[str]:
        """First ``limit`` errors, plus an ``...and {n} more.`` line if truncated."""
        preview = self.errors[:limit]
        hidden = len(self.errors) - limit
        if hidden > 0:
            preview.append(f"...and {hidden} more.")
        return preview

    def confirm(self) -> list[Invoice]:
        """
        Return the (possibly edited) invoices to merge.

        Raises
        ------
        ValueError
            If there is nothing to import.
        """
        if not self.invoices:
            raise ValueError("No valid invoices to import.")
        return list(self.invoices)


def _upsert(records: list, record: Any, new_id: str) -> Any:
    """
    Replace the record with the same id, or prepend ``record`` under ``new_id``.

    Editors hand back records with a temporary id when they create something;
    any id not already present is treated as new.
    """
    for i, existing in enumerate(records):
        if existing.id == record.id:
            records[i] = record
            return record
    saved = replace(record, id=new_id)
    records.insert(0, saved)
    return saved


@dataclass
class Workspace:
    """Mutable working copy of the business data."""

    products: list[Product] = field(default_factory=list)
    invoices: list[Invoice] = field(default_factory=list)
    bills: list[Bill] = field(default_factory=list)
    purchase_orders: list[PurchaseOrder] = field(default_factory=list)
    sales_orders: list[SalesOrder] = field(default_factory=list)
    chart_data: list[ChartData] = field(default_factory=list)
    contacts: list[Contact] = field(default_factory=list)
    ledger: list[LedgerEntry] = field(default_factory=list)
    deals: list[Deal] = field(default_factory=list)
    cash_flow: list[CashFlowEntry] = field(default_factory=list)
    employees: list[Employee] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    project: Optional[Project] = None

    @classmethod
    def from_mock_data(cls) -> "Workspace":
        return cls(
            products=copy.deepcopy(list(mock_data.PRODUCTS)),
            invoices=copy.deepcopy(list(mock_data.INVOICES)),
            bills=copy.deepcopy(list(mock_data.BILLS)),
            purchase_orders=copy.deepcopy(list(mock_data.PURCHASE_ORDERS)),
            sales_orders=copy.deepcopy(list(mock_data.SALES_ORDERS)),
            chart_data=copy.deepcopy(list(mock_data.CHART_DATA)),
            contacts=copy.deepcopy(list(mock_data.CONTACTS)),
            ledger=copy.deepcopy(list(mock_data.LEDGER)),
            deals=copy.deepcopy(list(mock_data.DEALS)),
            cash_flow=copy.deepcopy(list(mock_data.CASH_FLOW)),
            employees=copy.deepcopy(list(mock_data.EMPLOYEES)),
            tasks=copy.deepcopy(list(mock_data.TASKS)),
            project=mock_data.PROJECT,
        )

    def product_index(self) -> dict[str, Product]:
        return {p.id: p for p in self.products}

    def find_invoice(self, invoice_id: str) -> Optional[Invoice]:
        return next((inv for inv in self.invoices if inv.id == invoice_id), None)

    def find_product(self, product_id: str) -> Optional[Product]:
        return self.product_index().get(product_id)

    def find_purchase_order(self, order_id: str) -> Optional[PurchaseOrder]:
        return next((po for po in self.purchase_orders if po.id == order_id), None)

    def find_employee(self, employee_id: str) -> Optional[Employee]:
        return next((e for e in self.employees if e.id == employee_id), None)

    def find_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    # ------------------------------------------------------------------
    # Sales
    # ------------------------------------------------------------------

    def import_invoices_from_file(
        self, path: Union[str, "os.PathLike[str]"]
    ) -> ImportReview:
        return ImportReview(read_invoices_csv(path, self.product_index()))

    def merge_invoices(self, invoices: Sequence[Invoice]) -> None:
        """Prepend confirmed invoices, newest first."""
        self.invoices[:0] = list(invoices)
        logger.info("Merged %d imported invoice(s)", len(invoices))

    def product_line_item(
        self, item_id: Union[str, int], product_id: str, quantity: int
    ) -> LineItem:
        """
        Build an invoice line for a catalogue product.

        Name, SKU and price are copied from the product.

        Raises
        ------
        KeyError
            If ``product_id`` is unknown.
        """
        product = self.find_product(product_id)
        if product is None:
            raise KeyError(f"No product with ID {product_id!r}.")
        return LineItem(
            id=item_id,
            product_id=product.id,
            sku=product.sku,
            description=product.name,
            quantity=quantity,
            price=product.price,
        )

    def save_invoice(self, invoice: Invoice) -> Invoice:
        """Insert or replace an invoice. New invoices get ``INV-{n:03d}``."""
        return _upsert(self.invoices, invoice, f"INV-{len(self.invoices) + 1:03d}")

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    def save_product(self, product: Product) -> Product:
        """Insert or replace a product. New products get ``PROD-{n:02d}``."""
        return _upsert(self.products, product, f"PROD-{len(self.products) + 1:02d}")

    # ------------------------------------------------------------------
    # Purchasing
    # ------------------------------------------------------------------

    def save_purchase_order(self, order: PurchaseOrder) -> PurchaseOrder:
        """
        Insert or replace a purchase order.

        An order whose id is not yet known is treated as new: it gets the
        next ``PO-00{n}`` id and is prepended.
        """
        return _upsert(
            self.purchase_orders, order, f"PO-00{len(self.purchase_orders) + 1}"
        )

    # ------------------------------------------------------------------
    # Accounting
    # ------------------------------------------------------------------

    def post_journal(
        self, date: str, description: str, lines: Sequence[JournalLine]
    ) -> list[LedgerEntry]:
        """Validate a journal and append its entries to the ledger."""
        entries = journal_to_ledger_entries(date, description, lines)
        self.ledger.extend(entries)
        return entries

    # ------------------------------------------------------------------
    # HR / Projects
    # ------------------------------------------------------------------

    def save_employee(self, employee: Employee) -> Employee:
        """Insert or replace an employee. New employees get ``EMP-{n:03d}``."""
        return _upsert(self.employees, employee, f"EMP-{len(self.employees) + 1:03d}")

    def save_task(self, task: Task) -> Task:
        """
        Insert or replace a task. New tasks get ``TSK-{n:02d}``.

        Raises
        ------
        KeyError
            If the assignee is not a known employee.
        """
        if self.find_employee(task.assignee_id) is None:
            raise KeyError(f"No employee with ID {task.assignee_id!r}.")
        return _upsert(self.tasks, task, f"TSK-{len(self.tasks) + 1:02d}")

    def tasks_by_stage(self) -> dict[str, list[Task]]:
        return {
            stage: [t for t in self.tasks if t.status == stage]
            for stage in TASK_STAGES
        }

    # ------------------------------------------------------------------
    # CRM / AI context
    # ------------------------------------------------------------------

    def deals_by_stage(self) -> dict[str, list[Deal]]:
        return {
            stage: [d for d in self.deals if d.status == stage]
            for stage in PIPELINE_STAGES
        }

    def ai_context(self, include_contacts: bool = False) -> dict[str, Any]:
        """
        Business data handed to the AI analyst.

        Questions also see the contact list; proactive insights do not.
        """
        context: dict[str, Any] = {
            "invoices": self.invoices,
            "bills": self.bills,
            "products": self.products,
            "deals": self.deals,
        }
        if include_contacts:
            context["contacts"] = self.contacts
        return context
