# Aurora ERP - Business management dashboard for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.


"""
Domain records for Aurora ERP.

All records are transient: they live in an in-memory workspace seeded from
the static mock dataset and disappear when the process exits.

------------------------------------------------------------------------------
Records
------------------------------------------------------------------------------

Sales
    - `LineItem`     one priced quantity of a product or free-text service,
    - `Invoice`      customer-facing bill made of line items,
    - `SalesOrder`   confirmed customer order (not yet invoiced).

Purchasing
    - `Bill`          vendor bill,
    - `PurchaseOrder` order sent to a vendor, made of `OrderItem`s.

Inventory
    - `Product`       catalogue item with a default selling price.

Accounting
    - `LedgerEntry`   Revenue or Expense bucket used by the P&L report.
    - `CashFlowEntry` / `ChartData` monthly series used by AI forecasts.

CRM
    - `Deal`, `Contact`.

HR and projects
    - `Employee`      member of staff,
    - `Project` / `Task` task board grouped by `TaskStatus`.

Import
    - `ImportResult`  (invoices, errors) pair produced once per CSV import.

Invariants
----------
- An invoice amount is always derived from its line items
  (``sum(quantity * price)``). It is never stored.
- Statuses and types are plain strings constrained by ``Literal`` aliases so
  that records serialize to JSON without custom encoders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

InvoiceStatus = Literal["Paid", "Due", "Overdue"]
"""Lifecycle status of a customer invoice."""

INVOICE_STATUSES: tuple[str, ...] = ("Paid", "Due", "Overdue")

BillStatus = Literal["Paid", "Pending", "Upcoming"]

PurchaseOrderStatus = Literal["Draft", "Sent", "Fulfilled"]

PURCHASE_ORDER_STATUSES: tuple[str, ...] = ("Draft", "Sent", "Fulfilled")

SalesOrderStatus = Literal["Draft", "Confirmed", "Shipped"]

AccountType = Literal["Revenue", "Expense"]
"""
Classification bucket of a ledger entry.

Values
------
- "Revenue": credited amounts, added to total revenue.
- "Expense": debited amounts, added to total expenses.
"""

DealStatus = Literal["Prospect", "Qualification", "Negotiation", "Won", "Lost"]

PIPELINE_STAGES: tuple[str, ...] = (
    "Prospect",
    "Qualification",
    "Negotiation",
    "Won",
    "Lost",
)

ContactType = Literal["Customer", "Vendor"]

TaskStatus = Literal["To Do", "In Progress", "Done"]

TASK_STAGES: tuple[str, ...] = ("To Do", "In Progress", "Done")

TaskPriority = Literal["High", "Medium", "Low"]

TASK_PRIORITIES: tuple[str, ...] = ("High", "Medium", "Low")


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Product:
    """Catalogue item. ``price`` is the default selling price."""

    id: str
    name: str
    sku: str
    category: str
    stock: int
    price: float


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineItem:
    """
    A single priced quantity within an invoice.

    Attributes
    ----------
    id:
        Line identifier. Imported lines use ``"{invoice_id}-{n}"``; mock data
        uses small integers.
    product_id:
        Reference to a `Product`, or None for free-text services.
    sku:
        Product SKU, ``"N/A"`` for services.
    description:
        Free-text label (product name for catalogue items).
    quantity:
        Positive integer.
    price:
        Non-negative unit price.
    """

    id: Union[str, int]
    product_id: str | None
    sku: str
    description: str
    quantity: int
    price: float

    @property
    def line_total(self) -> float:
        return self.quantity * self.price


@dataclass(frozen=True)
class Invoice:
    """Customer invoice. The amount is derived from ``items``."""

    id: str
    customer: str
    date: str
    due_date: str
    status: InvoiceStatus
    items: list[LineItem] = field(default_factory=list)

    @property
    def amount(self) -> float:
        return sum(item.line_total for item in self.items)


@dataclass(frozen=True)
class OrderItem:
    product_id: str
    product_name: str
    quantity: int
    unit_price: float

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class SalesOrder:
    id: str
    customer: str
    date: str
    expected_delivery_date: str
    total_amount: float
    status: SalesOrderStatus
    items: list[OrderItem] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Purchasing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Bill:
    id: str
    vendor: str
    date: str
    due_date: str
    amount: float
    status: BillStatus


@dataclass(frozen=True)
class PurchaseOrder:
    """
    Order sent to a vendor.

    ``total_amount`` is stored on purchase orders (unlike invoices) because
    scanned vendor documents carry their own printed total.
    """

    id: str
    vendor: str
    date: str
    expected_delivery_date: str
    total_amount: float
    status: PurchaseOrderStatus
    items: list[OrderItem] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Accounting
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LedgerEntry:
    id: str
    date: str
    account: str
    type: AccountType
    amount: float


@dataclass(frozen=True)
class CashFlowEntry:
    month: str
    cash_in: float
    cash_out: float


@dataclass(frozen=True)
class ChartData:
    name: str
    income: float
    expense: float


# ---------------------------------------------------------------------------
# CRM
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Contact:
    id: str
    name: str
    company: str
    email: str
    phone: str
    type: ContactType


@dataclass(frozen=True)
class Deal:
    id: str
    name: str
    company: str
    value: float
    status: DealStatus


# ---------------------------------------------------------------------------
# HR / Projects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Employee:
    id: str
    name: str
    role: str
    department: str
    email: str
    avatar_url: str


@dataclass(frozen=True)
class Task:
    """A project task. ``assignee_id`` references an `Employee`."""

    id: str
    title: str
    assignee_id: str
    status: TaskStatus
    priority: TaskPriority


@dataclass(frozen=True)
class Project:
    id: str
    name: str


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ImportResult:
    """
    Outcome of one CSV import attempt.

    Attributes
    ----------
    invoices:
        Successfully parsed invoices, in order of first appearance of their
        InvoiceID in the file.
    errors:
        Human-readable error messages, in row order. Structural failures
        (empty file, missing header) produce exactly one message and no
        invoices.
    """

    invoices: list[Invoice] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
