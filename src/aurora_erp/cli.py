# Aurora ERP - Business management dashboard for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for Aurora ERP.

The CLI is intentionally thin: it does not implement business logic itself.
Each invocation builds a fresh `Workspace` from the demo dataset, runs one
command against it and prints the result. Nothing is persisted except CSV
exports and the theme preference.


Commands
--------

    aurora-erp [--config PATH] [--verbose] <group> <command> [options]

sales
    list [--search TERM] [--status STATUS] [--page N]
    import FILE [--set ID:field=value ...] [--yes]
    export [--output FILE]
    new --customer NAME [--product ID[:QTY] ...] [--item DESC:QTY:PRICE ...]
    edit INVOICE_ID [--customer] [--date] [--due-date] [--status] [lines]

inventory
    list [--search TERM] [--page N]
    export [--output FILE]
    add --name NAME [--sku] [--category] [--stock N] [--price P]
    edit PRODUCT_ID [same options]

purchases
    bills | orders
    export-bills | export-orders [--output FILE]
    scan IMAGE [--save]
    new --vendor NAME --item NAME:QTY:UNIT_PRICE ...
    edit PO_ID [--vendor] [--date] [--expected-delivery] [--status] [--item ...]

orders (sales orders)
    list | export [--output FILE]

reports
    pnl
    summary                     AI summary of monthly income/expense
    journal --date D --description TEXT --line ACCOUNT:DEBIT:CREDIT ...

crm
    pipeline
    score [DEAL_ID]             AI lead score (all deals when omitted)
    contacts [--search TERM] [--page N]

hr
    list | add --name NAME [--role] [--department] [--email] | edit EMPLOYEE_ID

projects
    board | add --title TEXT [--assignee ID] [--priority] [--status] | edit TASK_ID

cashflow
    show | forecast

ai
    insights | ask QUESTION | chat MESSAGE... | journal INVOICE_ID

datagen --module M --columns "A, B, C" --rows N [--rules TEXT] [--output FILE]

settings
    show | save [--primary #rrggbb] [--dark-bg #rrggbb]


Invoice import
--------------

``sales import`` parses the CSV file, prints the errors (first five) and the
invoices that would be imported, then stops unless ``--yes`` is given. The
customer or date of a pending invoice can be corrected before merging:

    aurora-erp sales import invoices.csv --set INV-100:customer="Acme Ltd" --yes


AI commands
-----------

AI commands need the credential named by ``[ai].api_key_env`` in the
configuration (``API_KEY`` by default). When it is missing, AI commands exit
with a message and every other command keeps working.


End of module description.
"""

import argparse
import base64
import logging
import mimetypes
from dataclasses import dataclass, replace
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

from . import __version__
from .assistant import Assistant, ChatSession, split_column_list
from .config import AppConfig, load_app_config
from .formatting import format_currency
from .io import (
    NoDataToExportError,
    bill_export_records,
    export_to_csv,
    invoice_export_records,
    product_export_records,
    purchase_order_export_records,
    sales_order_export_records,
)
from .ledger import JournalLine, ledger_frame, profit_and_loss
from .llm import AIServiceError, LLMClient
from .models import (
    INVOICE_STATUSES,
    PURCHASE_ORDER_STATUSES,
    TASK_PRIORITIES,
    TASK_STAGES,
    Employee,
    Invoice,
    LineItem,
    OrderItem,
    Product,
    PurchaseOrder,
    Task,
)
from .services import ImportReview, Workspace
from .tables import ComputedColumn, FieldColumn, paginate, render_table, search_rows
from .theme import PreferenceStore, Theme, ThemeStore

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="aurora-erp",
        description=(
            "Aurora ERP - Business management dashboard for SMBs. "
            "Lists and exports business records, imports invoices from CSV "
            "and offers AI-assisted analysis."
        ),
    )
    ap.add_argument(
        "--version",
        action="version",
        version=f"aurora_erp version {__version__}",
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the TOML configuration file. "
            "If omitted, 'aurora_erp_config.toml' in the current directory is "
            "used when present."
        ),
    )
    ap.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    subparsers = ap.add_subparsers(dest="command", metavar="command")

    def _list_options(p: argparse.ArgumentParser) -> None:
        p.add_argument("--search", default="", help="Case-insensitive search term.")
        p.add_argument("--page", type=int, default=1, help="Page number (1-based).")

    def _output_option(p: argparse.ArgumentParser, default: str) -> None:
        p.add_argument(
            "--output",
            default=default,
            help=f"CSV file name, written under [export].output_dir (default: {default}).",
        )

    # ------------------------------------------------------------------
    # sales
    # ------------------------------------------------------------------
    sales = subparsers.add_parser("sales", help="Customer invoices.")
    sales_sub = sales.add_subparsers(dest="sales_command", metavar="sales-command")

    sales_list = sales_sub.add_parser("list", help="List invoices.")
    _list_options(sales_list)
    sales_list.add_argument("--status", choices=INVOICE_STATUSES, help="Filter by status.")

    sales_import = sales_sub.add_parser("import", help="Import invoices from a CSV file.")
    sales_import.add_argument("file", help="CSV file to import.")
    sales_import.add_argument(
        "--set",
        dest="edits",
        action="append",
        default=[],
        metavar="ID:FIELD=VALUE",
        help="Edit the customer or date of a pending invoice before import.",
    )
    sales_import.add_argument(
        "--yes",
        action="store_true",
        help="Merge the valid invoices (otherwise only a preview is shown).",
    )

    _output_option(sales_sub.add_parser("export", help="Export invoices to CSV."), "sales_invoices.csv")

    def _invoice_options(p: argparse.ArgumentParser, new: bool) -> None:
        p.add_argument("--customer", required=new, default=None, help="Customer name.")
        p.add_argument("--date", default=None, help="Invoice date (default: today)." if new else "Invoice date.")
        p.add_argument(
            "--due-date",
            dest="due_date",
            default=None,
            help="Due date (default: 30 days after today)." if new else "Due date.",
        )
        p.add_argument("--status", choices=INVOICE_STATUSES, default=None, help="Invoice status.")
        p.add_argument(
            "--product",
            dest="lines",
            action="append",
            type=_product_ref,
            metavar="PRODUCT_ID[:QTY]",
            help="Catalogue line; name, SKU and price come from the product.",
        )
        p.add_argument(
            "--item",
            dest="lines",
            action="append",
            type=_service_line,
            metavar="DESCRIPTION:QTY:PRICE",
            help="Free-text line.",
        )

    _invoice_options(sales_sub.add_parser("new", help="Create an invoice."), new=True)
    sales_edit = sales_sub.add_parser(
        "edit", help="Edit an invoice (line options replace all lines)."
    )
    sales_edit.add_argument("invoice_id", help="Invoice ID.")
    _invoice_options(sales_edit, new=False)

    # ------------------------------------------------------------------
    # inventory
    # ------------------------------------------------------------------
    inventory = subparsers.add_parser("inventory", help="Products and stock.")
    inventory_sub = inventory.add_subparsers(dest="inventory_command", metavar="inventory-command")
    _list_options(inventory_sub.add_parser("list", help="List products."))
    _output_option(
        inventory_sub.add_parser("export", help="Export products to CSV."),
        "product_inventory.csv",
    )

    def _product_options(p: argparse.ArgumentParser, new: bool) -> None:
        p.add_argument("--name", required=new, default=None, help="Product name.")
        p.add_argument("--sku", default=None, help="SKU.")
        p.add_argument("--category", default=None, help="Category.")
        p.add_argument("--stock", type=int, default=None, help="Units in stock.")
        p.add_argument("--price", type=float, default=None, help="Selling price.")

    _product_options(inventory_sub.add_parser("add", help="Add a product."), new=True)
    inventory_edit = inventory_sub.add_parser("edit", help="Edit a product.")
    inventory_edit.add_argument("product_id", help="Product ID.")
    _product_options(inventory_edit, new=False)

    # ------------------------------------------------------------------
    # purchases
    # ------------------------------------------------------------------
    purchases = subparsers.add_parser("purchases", help="Vendor bills and purchase orders.")
    purchases_sub = purchases.add_subparsers(dest="purchases_command", metavar="purchases-command")
    _list_options(purchases_sub.add_parser("bills", help="List vendor bills."))
    _list_options(purchases_sub.add_parser("orders", help="List purchase orders."))
    _output_option(
        purchases_sub.add_parser("export-bills", help="Export vendor bills to CSV."),
        "purchase_bills.csv",
    )
    _output_option(
        purchases_sub.add_parser("export-orders", help="Export purchase orders to CSV."),
        "purchase_orders.csv",
    )
    scan = purchases_sub.add_parser("scan", help="Extract a purchase order from an invoice image.")
    scan.add_argument("image", help="Invoice image file (PNG or JPEG).")
    scan.add_argument("--save", action="store_true", help="Add the scanned order to the list.")

    def _purchase_order_options(p: argparse.ArgumentParser, new: bool) -> None:
        p.add_argument("--vendor", required=new, default=None, help="Vendor name.")
        p.add_argument("--date", default=None, help="Order date (default: today)." if new else "Order date.")
        p.add_argument(
            "--expected-delivery",
            dest="expected_delivery_date",
            default=None,
            help="Expected delivery date (default: 14 days after today)." if new else "Expected delivery date.",
        )
        p.add_argument(
            "--status", choices=PURCHASE_ORDER_STATUSES, default=None, help="Order status."
        )
        p.add_argument(
            "--item",
            dest="items",
            action="append",
            type=_order_item,
            metavar="PRODUCT_NAME:QTY:UNIT_PRICE",
            help="Order line; repeat for each line.",
        )

    _purchase_order_options(
        purchases_sub.add_parser("new", help="Create a purchase order."), new=True
    )
    po_edit = purchases_sub.add_parser(
        "edit", help="Edit a purchase order (--item replaces all lines)."
    )
    po_edit.add_argument("order_id", help="Purchase order ID.")
    _purchase_order_options(po_edit, new=False)

    # ------------------------------------------------------------------
    # orders (sales orders)
    # ------------------------------------------------------------------
    orders = subparsers.add_parser("orders", help="Sales orders.")
    orders_sub = orders.add_subparsers(dest="orders_command", metavar="orders-command")
    _list_options(orders_sub.add_parser("list", help="List sales orders."))
    _output_option(
        orders_sub.add_parser("export", help="Export sales orders to CSV."),
        "sales_orders.csv",
    )

    # ------------------------------------------------------------------
    # reports
    # ------------------------------------------------------------------
    reports = subparsers.add_parser("reports", help="Accounting reports.")
    reports_sub = reports.add_subparsers(dest="reports_command", metavar="reports-command")
    reports_sub.add_parser("pnl", help="Profit & loss statement.")
    reports_sub.add_parser("summary", help="AI summary of monthly income and expense.")
    journal = reports_sub.add_parser("journal", help="Post a manual journal entry.")
    journal.add_argument("--date", default=None, help="Entry date (YYYY-MM-DD, default: today).")
    journal.add_argument("--description", default="", help="Entry description.")
    journal.add_argument(
        "--line",
        dest="lines",
        action="append",
        default=[],
        metavar="ACCOUNT:DEBIT:CREDIT",
        help="Journal line; repeat for each line. Leave DEBIT or CREDIT empty.",
    )

    # ------------------------------------------------------------------
    # crm / cashflow
    # ------------------------------------------------------------------
    crm = subparsers.add_parser("crm", help="Deals pipeline.")
    crm_sub = crm.add_subparsers(dest="crm_command", metavar="crm-command")
    crm_sub.add_parser("pipeline", help="Deals grouped by stage.")
    score = crm_sub.add_parser("score", help="AI lead score and next action.")
    score.add_argument("deal_id", nargs="?", help="Deal ID (default: every deal).")
    _list_options(crm_sub.add_parser("contacts", help="List customer and vendor contacts."))

    # ------------------------------------------------------------------
    # hr / projects
    # ------------------------------------------------------------------
    hr = subparsers.add_parser("hr", help="Employee directory.")
    hr_sub = hr.add_subparsers(dest="hr_command", metavar="hr-command")
    _list_options(hr_sub.add_parser("list", help="List employees."))

    def _employee_options(p: argparse.ArgumentParser, new: bool) -> None:
        p.add_argument("--name", required=new, default=None, help="Full name.")
        p.add_argument("--role", default=None, help="Role or position.")
        p.add_argument("--department", default=None, help="Department.")
        p.add_argument("--email", default=None, help="Email address.")
        p.add_argument("--avatar-url", dest="avatar_url", default=None, help="Avatar image URL.")

    _employee_options(hr_sub.add_parser("add", help="Add an employee."), new=True)
    hr_edit = hr_sub.add_parser("edit", help="Edit an employee.")
    hr_edit.add_argument("employee_id", help="Employee ID.")
    _employee_options(hr_edit, new=False)

    projects = subparsers.add_parser("projects", help="Project task board.")
    projects_sub = projects.add_subparsers(dest="projects_command", metavar="projects-command")
    projects_sub.add_parser("board", help="Tasks grouped by status.")

    def _task_options(p: argparse.ArgumentParser, new: bool) -> None:
        p.add_argument("--title", required=new, default=None, help="Task title.")
        p.add_argument(
            "--assignee",
            dest="assignee_id",
            default=None,
            help="Employee ID (default: first employee)." if new else "Employee ID.",
        )
        p.add_argument("--status", choices=TASK_STAGES, default=None, help="Task status.")
        p.add_argument("--priority", choices=TASK_PRIORITIES, default=None, help="Task priority.")

    _task_options(projects_sub.add_parser("add", help="Create a task."), new=True)
    task_edit = projects_sub.add_parser("edit", help="Edit a task.")
    task_edit.add_argument("task_id", help="Task ID.")
    _task_options(task_edit, new=False)

    cashflow = subparsers.add_parser("cashflow", help="Cash flow history and forecast.")
    cashflow_sub = cashflow.add_subparsers(dest="cashflow_command", metavar="cashflow-command")
    cashflow_sub.add_parser("show", help="Monthly cash in / cash out.")
    cashflow_sub.add_parser("forecast", help="AI 30/60/90-day forecast.")

    # ------------------------------------------------------------------
    # ai
    # ------------------------------------------------------------------
    ai = subparsers.add_parser("ai", help="AI business analyst.")
    ai_sub = ai.add_subparsers(dest="ai_command", metavar="ai-command")
    ai_sub.add_parser("insights", help="Proactive insights on the business data.")
    ask = ai_sub.add_parser("ask", help="Ask a question about the business data.")
    ask.add_argument("question", help="Question to analyze.")
    chat = ai_sub.add_parser("chat", help="Send one or more chat messages.")
    chat.add_argument("messages", nargs="+", help="Messages, sent in order.")
    ai_journal = ai_sub.add_parser("journal", help="Propose a journal entry for an invoice.")
    ai_journal.add_argument("invoice_id", help="Invoice ID.")

    # ------------------------------------------------------------------
    # datagen
    # ------------------------------------------------------------------
    datagen = subparsers.add_parser("datagen", help="Generate synthetic CSV data with AI.")
    datagen.add_argument("--module", default="Inventory", help="Target module name.")
    datagen.add_argument("--columns", required=True, help="Comma-separated column names.")
    datagen.add_argument("--rows", type=int, default=50, help="Number of rows.")
    datagen.add_argument("--rules", default="", help="Generation rules.")
    datagen.add_argument(
        "--output",
        default=None,
        help="CSV file name (default: {module}_data_{rows}_rows.csv).",
    )

    # ------------------------------------------------------------------
    # settings
    # ------------------------------------------------------------------
    settings = subparsers.add_parser("settings", help="Theme colours.")
    settings_sub = settings.add_subparsers(dest="settings_command", metavar="settings-command")
    settings_sub.add_parser("show", help="Show the current theme.")
    save = settings_sub.add_parser("save", help="Save theme colours.")
    save.add_argument("--primary", default=None, help="Primary colour (#rrggbb).")
    save.add_argument("--dark-bg", dest="dark_bg", default=None, help="Dark background colour (#rrggbb).")

    return ap


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_assistant(config: AppConfig) -> Assistant:
    """
    Build the AI assistant from configuration.

    Raises
    ------
    SystemExit
        If the AI credential is missing.
    """
    try:
        client = LLMClient.from_config(config.ai)
    except AIServiceError as exc:
        raise SystemExit(str(exc)) from exc
    return Assistant(client, context_char_limit=config.ai.context_char_limit)


def _print_page(columns, rows, args: argparse.Namespace, config: AppConfig) -> None:
    """Search, paginate and print a table."""
    matching = search_rows(rows, args.search)
    page = paginate(matching, args.page, config.items_per_page)
    if not page.rows:
        print("No records found.")
        return
    print(render_table(columns, page.rows).to_string(index=False))
    print()
    print(f"Page {page.number} of {page.total_pages} ({page.total_rows} record(s))")


def _export(filename: str, records, config: AppConfig) -> None:
    try:
        path = export_to_csv(filename, records, config.export_dir)
    except NoDataToExportError as exc:
        print(exc)
        return
    print(f"Wrote {path} ({len(records)} rows)")


def _parse_edit(value: str) -> tuple[str, str, str]:
    """
    Parse an ``ID:field=value`` edit.

    Raises
    ------
    SystemExit
        If the edit is malformed.
    """
    invoice_id, sep, rest = value.partition(":")
    field_name, eq, new_value = rest.partition("=")
    if not sep or not eq or not invoice_id or not field_name:
        raise SystemExit(f"Invalid edit: {value!r}. Expected ID:field=value.")
    return invoice_id, field_name, new_value


@dataclass(frozen=True)
class _ProductRef:
    product_id: str
    quantity: int


def _quantity(text: str) -> int:
    try:
        quantity = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid quantity: {text!r}") from None
    if quantity <= 0:
        raise argparse.ArgumentTypeError(f"quantity must be positive: {text!r}")
    return quantity


def _price(text: str) -> float:
    try:
        price = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid price: {text!r}") from None
    if price < 0:
        raise argparse.ArgumentTypeError(f"price must not be negative: {text!r}")
    return price


def _product_ref(value: str) -> _ProductRef:
    """Parse ``PRODUCT_ID[:QTY]`` (quantity defaults to 1)."""
    product_id, sep, quantity = value.partition(":")
    if not product_id:
        raise argparse.ArgumentTypeError(f"invalid product line: {value!r}")
    return _ProductRef(product_id, _quantity(quantity) if sep else 1)


def _split_line(value: str) -> tuple[str, str, str]:
    parts = value.rsplit(":", 2)
    if len(parts) != 3 or not parts[0].strip():
        raise argparse.ArgumentTypeError(f"invalid line: {value!r} (expected TEXT:QTY:PRICE)")
    return parts[0].strip(), parts[1], parts[2]


def _service_line(value: str) -> LineItem:
    """Parse ``DESCRIPTION:QTY:PRICE`` into a free-text invoice line."""
    description, quantity, price = _split_line(value)
    return LineItem(0, None, "N/A", description, _quantity(quantity), _price(price))


def _order_item(value: str) -> OrderItem:
    """Parse ``PRODUCT_NAME:QTY:UNIT_PRICE`` into a purchase order line."""
    name, quantity, price = _split_line(value)
    return OrderItem("", name, _quantity(quantity), _price(price))


def _changes(args: argparse.Namespace, names: tuple[str, ...]) -> dict:
    """Options given on the command line, by field name."""
    return {name: getattr(args, name) for name in names if getattr(args, name) is not None}


def _invoice_lines(workspace: Workspace, lines) -> list[LineItem]:
    """Number invoice lines from 1 and resolve catalogue products."""
    items = []
    for n, line in enumerate(lines, start=1):
        if isinstance(line, _ProductRef):
            try:
                items.append(workspace.product_line_item(n, line.product_id, line.quantity))
            except KeyError as exc:
                raise SystemExit(exc.args[0]) from exc
        else:
            items.append(replace(line, id=n))
    return items


def _order_lines(items) -> list[OrderItem]:
    return [replace(item, product_id=f"manual-{n}") for n, item in enumerate(items, start=1)]


def _parse_journal_line(value: str) -> JournalLine:
    """Parse an ``ACCOUNT:DEBIT:CREDIT`` journal line (account may contain ':')."""
    parts = value.rsplit(":", 2)
    if len(parts) != 3:
        raise SystemExit(f"Invalid journal line: {value!r}. Expected ACCOUNT:DEBIT:CREDIT.")
    account, debit, credit = parts
    return JournalLine(account=account.strip(), debit=debit, credit=credit)


INVOICE_COLUMNS = [
    FieldColumn("Invoice ID", "id"),
    FieldColumn("Customer", "customer"),
    FieldColumn("Date", "date"),
    ComputedColumn("Amount", lambda inv: format_currency(inv.amount)),
    FieldColumn("Status", "status"),
]

PRODUCT_COLUMNS = [
    FieldColumn("Product ID", "id"),
    FieldColumn("Name", "name"),
    FieldColumn("SKU", "sku"),
    FieldColumn("Category", "category"),
    FieldColumn("Stock", "stock"),
    ComputedColumn("Price", lambda p: format_currency(p.price)),
]

BILL_COLUMNS = [
    FieldColumn("Bill ID", "id"),
    FieldColumn("Vendor", "vendor"),
    FieldColumn("Date", "date"),
    FieldColumn("Due Date", "due_date"),
    ComputedColumn("Amount", lambda b: format_currency(b.amount)),
    FieldColumn("Status", "status"),
]

PURCHASE_ORDER_COLUMNS = [
    FieldColumn("PO ID", "id"),
    FieldColumn("Vendor", "vendor"),
    FieldColumn("Date", "date"),
    FieldColumn("Expected Delivery", "expected_delivery_date"),
    ComputedColumn("Total", lambda po: format_currency(po.total_amount)),
    FieldColumn("Status", "status"),
]

SALES_ORDER_COLUMNS = [
    FieldColumn("SO ID", "id"),
    FieldColumn("Customer", "customer"),
    FieldColumn("Date", "date"),
    FieldColumn("Expected Delivery", "expected_delivery_date"),
    ComputedColumn("Total", lambda so: format_currency(so.total_amount)),
    FieldColumn("Status", "status"),
]

CONTACT_COLUMNS = [
    FieldColumn("Contact ID", "id"),
    FieldColumn("Name", "name"),
    FieldColumn("Company", "company"),
    FieldColumn("Email", "email"),
    FieldColumn("Phone", "phone"),
    FieldColumn("Type", "type"),
]

EMPLOYEE_COLUMNS = [
    FieldColumn("Employee ID", "id"),
    FieldColumn("Name", "name"),
    FieldColumn("Role", "role"),
    FieldColumn("Department", "department"),
    FieldColumn("Email", "email"),
]

TASK_COLUMNS = [
    FieldColumn("Task ID", "id"),
    FieldColumn("Title", "title"),
    FieldColumn("Assignee", "assignee_id"),
    FieldColumn("Status", "status"),
    FieldColumn("Priority", "priority"),
]

# Editors hand new records to the workspace under this id; saving assigns the real one.
_NEW_ID = "new"


def _print_saved(columns, record, label: str) -> None:
    print(render_table(columns, [record]).to_string(index=False))
    print()
    print(f"Saved {label} {record.id}.")


def _print_invoice(invoice: Invoice) -> None:
    print(f"Invoice {invoice.id}: {invoice.customer} ({invoice.status})")
    print(f"Date: {invoice.date} | Due: {invoice.due_date}")
    for item in invoice.items:
        print(
            f"  - {item.description} x{item.quantity} @ {format_currency(item.price)}"
            f" = {format_currency(item.line_total)}"
        )
    print(f"Total: {format_currency(invoice.amount)}")
    print()
    print(f"Saved invoice {invoice.id}.")


def _print_purchase_order(order: PurchaseOrder) -> None:
    print(f"Purchase order {order.id}: {order.vendor} ({order.status})")
    print(f"Date: {order.date} | Expected delivery: {order.expected_delivery_date}")
    for item in order.items:
        print(
            f"  - {item.product_name} x{item.quantity} @ {format_currency(item.unit_price)}"
            f" = {format_currency(item.line_total)}"
        )
    print(f"Total: {format_currency(order.total_amount)}")
    print()
    print(f"Saved purchase order {order.id}.")


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _print_review(review: ImportReview) -> None:
    if review.has_errors:
        print(f"{len(review.errors)} error(s) found:")
        for message in review.error_preview():
            print(f"  - {message}")
        print()
    if review.has_invoices:
        print(f"{len(review.invoices)} invoice(s) ready to import:")
        print(render_table(INVOICE_COLUMNS, review.invoices).to_string(index=False))
    else:
        print("No valid invoices to import.")


def _handle_sales(args: argparse.Namespace, workspace: Workspace, config: AppConfig) -> None:
    subcmd = args.sales_command
    if subcmd == "list":
        rows = workspace.invoices
        if args.status:
            rows = [inv for inv in rows if inv.status == args.status]
        _print_page(INVOICE_COLUMNS, rows, args, config)
    elif subcmd == "import":
        review = workspace.import_invoices_from_file(args.file)
        for edit in args.edits:
            invoice_id, field_name, value = _parse_edit(edit)
            try:
                review.update_field(invoice_id, field_name, value)
            except (KeyError, ValueError) as exc:
                raise SystemExit(exc.args[0]) from exc
        _print_review(review)
        if not review.has_invoices:
            return
        if not args.yes:
            print()
            print("Preview only: re-run with --yes to import.")
            return
        workspace.merge_invoices(review.confirm())
        print()
        print(f"Imported {len(review.invoices)} invoice(s). Total invoices: {len(workspace.invoices)}")
    elif subcmd == "export":
        _export(args.output, invoice_export_records(workspace.invoices), config)
    elif subcmd == "new":
        items = _invoice_lines(workspace, args.lines or [])
        if not items:
            raise SystemExit("An invoice needs at least one line (--product or --item).")
        today = date.today()
        invoice = Invoice(
            id=_NEW_ID,
            customer=args.customer,
            date=args.date or today.isoformat(),
            due_date=args.due_date or (today + timedelta(days=30)).isoformat(),
            status=args.status or "Due",
            items=items,
        )
        _print_invoice(workspace.save_invoice(invoice))
    elif subcmd == "edit":
        invoice = workspace.find_invoice(args.invoice_id)
        if invoice is None:
            raise SystemExit(f"Invoice not found: {args.invoice_id}")
        changes = _changes(args, ("customer", "date", "due_date", "status"))
        if args.lines:
            changes["items"] = _invoice_lines(workspace, args.lines)
        _print_invoice(workspace.save_invoice(replace(invoice, **changes)))
    else:
        print(
            "No sales subcommand specified. Available: 'list', 'import', 'export', "
            "'new', 'edit'."
        )


def _handle_inventory(args: argparse.Namespace, workspace: Workspace, config: AppConfig) -> None:
    subcmd = args.inventory_command
    if subcmd == "list":
        _print_page(PRODUCT_COLUMNS, workspace.products, args, config)
    elif subcmd == "export":
        _export(args.output, product_export_records(workspace.products), config)
    elif subcmd == "add":
        product = Product(
            id=_NEW_ID,
            name=args.name,
            sku=args.sku or "",
            category=args.category or "",
            stock=args.stock or 0,
            price=args.price or 0.0,
        )
        _print_saved(PRODUCT_COLUMNS, workspace.save_product(product), "product")
    elif subcmd == "edit":
        product = workspace.find_product(args.product_id)
        if product is None:
            raise SystemExit(f"Product not found: {args.product_id}")
        changes = _changes(args, ("name", "sku", "category", "stock", "price"))
        _print_saved(PRODUCT_COLUMNS, workspace.save_product(replace(product, **changes)), "product")
    else:
        print("No inventory subcommand specified. Available: 'list', 'export', 'add', 'edit'.")


def _handle_purchases(args: argparse.Namespace, workspace: Workspace, config: AppConfig) -> None:
    subcmd = args.purchases_command
    if subcmd == "bills":
        _print_page(BILL_COLUMNS, workspace.bills, args, config)
    elif subcmd == "orders":
        _print_page(PURCHASE_ORDER_COLUMNS, workspace.purchase_orders, args, config)
    elif subcmd == "export-bills":
        _export(args.output, bill_export_records(workspace.bills), config)
    elif subcmd == "export-orders":
        _export(args.output, purchase_order_export_records(workspace.purchase_orders), config)
    elif subcmd == "scan":
        _handle_scan(args, workspace, config)
    elif subcmd == "new":
        items = _order_lines(args.items or [])
        if not items:
            raise SystemExit("A purchase order needs at least one --item.")
        today = date.today()
        order = PurchaseOrder(
            id=_NEW_ID,
            vendor=args.vendor,
            date=args.date or today.isoformat(),
            expected_delivery_date=(
                args.expected_delivery_date or (today + timedelta(days=14)).isoformat()
            ),
            total_amount=sum(item.line_total for item in items),
            status=args.status or "Draft",
            items=items,
        )
        _print_purchase_order(workspace.save_purchase_order(order))
    elif subcmd == "edit":
        order = workspace.find_purchase_order(args.order_id)
        if order is None:
            raise SystemExit(f"Purchase order not found: {args.order_id}")
        changes = _changes(args, ("vendor", "date", "expected_delivery_date", "status"))
        if args.items:
            items = _order_lines(args.items)
            changes["items"] = items
            changes["total_amount"] = sum(item.line_total for item in items)
        _print_purchase_order(workspace.save_purchase_order(replace(order, **changes)))
    else:
        print(
            "No purchases subcommand specified. Available: 'bills', 'orders', "
            "'export-bills', 'export-orders', 'scan', 'new', 'edit'."
        )


def _handle_scan(args: argparse.Namespace, workspace: Workspace, config: AppConfig) -> None:
    image_path = Path(args.image)
    if not image_path.is_file():
        raise SystemExit(f"Image file not found: {image_path}")

    assistant = _build_assistant(config)
    mime_type = mimetypes.guess_type(image_path.name)[0] or "image/png"
    image_b64 = base64.b64encode(image_path.read_bytes()).decode("ascii")
    try:
        scanned = assistant.parse_invoice_image(image_b64, mime_type)
    except AIServiceError as exc:
        raise SystemExit(f"Failed to scan invoice. Please try a clearer image. ({exc})") from exc

    order = scanned.to_purchase_order()
    print("Data extracted successfully from image. GL Accounts have been recommended for review.")
    print(f"Vendor: {order.vendor}")
    print(f"Date: {order.date} | Due: {order.expected_delivery_date}")
    print(f"Total: {format_currency(order.total_amount)}")
    for item in order.items:
        print(f"  - {item.product_name}: {format_currency(item.unit_price)}")

    if args.save:
        saved = workspace.save_purchase_order(order)
        print(f"Saved as {saved.id}.")


def _handle_orders(args: argparse.Namespace, workspace: Workspace, config: AppConfig) -> None:
    subcmd = args.orders_command
    if subcmd == "list":
        _print_page(SALES_ORDER_COLUMNS, workspace.sales_orders, args, config)
    elif subcmd == "export":
        _export(args.output, sales_order_export_records(workspace.sales_orders), config)
    else:
        print("No orders subcommand specified. Available: 'list', 'export'.")


def _print_pnl(workspace: Workspace) -> None:
    pnl = profit_and_loss(workspace.ledger)
    for title, frame, total in (
        ("Revenue", pnl.revenue, pnl.total_revenue),
        ("Expenses", pnl.expenses, pnl.total_expenses),
    ):
        print(f"=== {title} ===")
        if frame.empty:
            print("(none)")
        else:
            display = frame.assign(amount=frame["amount"].map(format_currency))
            print(display.to_string(index=False))
        print(f"Total {title.lower()}: {format_currency(total)}")
        print()
    print(f"Net income: {format_currency(pnl.net_income)}")


def _handle_reports(args: argparse.Namespace, workspace: Workspace, config: AppConfig) -> None:
    subcmd = args.reports_command
    if subcmd == "pnl":
        _print_pnl(workspace)
    elif subcmd == "summary":
        print(_build_assistant(config).financial_summary(workspace.chart_data))
    elif subcmd == "journal":
        entry_date = args.date or date.today().isoformat()
        lines = [_parse_journal_line(v) for v in args.lines]
        try:
            entries = workspace.post_journal(entry_date, args.description, lines)
        except ValueError as exc:
            raise SystemExit(str(exc)) from exc
        print(f"Posted {len(entries)} ledger entries:")
        print(ledger_frame(entries).to_string(index=False))
        print()
        _print_pnl(workspace)
    else:
        print("No reports subcommand specified. Available: 'pnl', 'summary', 'journal'.")


def _handle_crm(args: argparse.Namespace, workspace: Workspace, config: AppConfig) -> None:
    subcmd = args.crm_command
    if subcmd == "pipeline":
        for stage, deals in workspace.deals_by_stage().items():
            print(f"=== {stage} ({len(deals)}) ===")
            for deal in deals:
                print(f"  {deal.id}  {deal.name} - {deal.company}  {format_currency(deal.value)}")
    elif subcmd == "score":
        deals = workspace.deals
        if args.deal_id:
            deals = [d for d in deals if d.id == args.deal_id]
            if not deals:
                raise SystemExit(f"Deal not found: {args.deal_id}")
        assistant = _build_assistant(config)
        for deal in deals:
            try:
                result = assistant.lead_score(deal.name, deal.value)
            except AIServiceError as exc:
                logger.warning("Lead scoring failed for %s: %s", deal.id, exc)
                print(f"{deal.id}  {deal.name}: score unavailable ({exc})")
                continue
            print(f"{deal.id}  {deal.name}: score {result.score:g} - {result.action}")
    elif subcmd == "contacts":
        _print_page(CONTACT_COLUMNS, workspace.contacts, args, config)
    else:
        print("No crm subcommand specified. Available: 'pipeline', 'score', 'contacts'.")


def _handle_hr(args: argparse.Namespace, workspace: Workspace, config: AppConfig) -> None:
    subcmd = args.hr_command
    if subcmd == "list":
        _print_page(EMPLOYEE_COLUMNS, workspace.employees, args, config)
    elif subcmd == "add":
        email = args.email or ""
        employee = Employee(
            id=_NEW_ID,
            name=args.name,
            role=args.role or "",
            department=args.department or "",
            email=email,
            avatar_url=args.avatar_url or f"https://i.pravatar.cc/150?u={email or args.name}",
        )
        _print_saved(EMPLOYEE_COLUMNS, workspace.save_employee(employee), "employee")
    elif subcmd == "edit":
        employee = workspace.find_employee(args.employee_id)
        if employee is None:
            raise SystemExit(f"Employee not found: {args.employee_id}")
        changes = _changes(args, ("name", "role", "department", "email", "avatar_url"))
        _print_saved(
            EMPLOYEE_COLUMNS, workspace.save_employee(replace(employee, **changes)), "employee"
        )
    else:
        print("No hr subcommand specified. Available: 'list', 'add', 'edit'.")


def _save_task(workspace: Workspace, task: Task) -> None:
    try:
        saved = workspace.save_task(task)
    except KeyError as exc:
        raise SystemExit(exc.args[0]) from exc
    _print_saved(TASK_COLUMNS, saved, "task")


def _handle_projects(args: argparse.Namespace, workspace: Workspace, config: AppConfig) -> None:
    subcmd = args.projects_command
    if subcmd == "board":
        names = {e.id: e.name for e in workspace.employees}
        if workspace.project is not None:
            print(workspace.project.name)
            print()
        for stage, tasks in workspace.tasks_by_stage().items():
            print(f"=== {stage} ({len(tasks)}) ===")
            for task in tasks:
                assignee = names.get(task.assignee_id, "Unassigned")
                print(f"  {task.id}  [{task.priority}] {task.title} - {assignee}")
    elif subcmd == "add":
        default_assignee = workspace.employees[0].id if workspace.employees else ""
        task = Task(
            id=_NEW_ID,
            title=args.title,
            assignee_id=args.assignee_id or default_assignee,
            status=args.status or "To Do",
            priority=args.priority or "Medium",
        )
        _save_task(workspace, task)
    elif subcmd == "edit":
        task = workspace.find_task(args.task_id)
        if task is None:
            raise SystemExit(f"Task not found: {args.task_id}")
        changes = _changes(args, ("title", "assignee_id", "status", "priority"))
        _save_task(workspace, replace(task, **changes))
    else:
        print("No projects subcommand specified. Available: 'board', 'add', 'edit'.")


def _handle_cashflow(args: argparse.Namespace, workspace: Workspace, config: AppConfig) -> None:
    subcmd = args.cashflow_command
    if subcmd == "show":
        for entry in workspace.cash_flow:
            print(
                f"{entry.month}: in {format_currency(entry.cash_in)} | "
                f"out {format_currency(entry.cash_out)} | "
                f"net {format_currency(entry.cash_in - entry.cash_out)}"
            )
    elif subcmd == "forecast":
        forecast = _build_assistant(config).cash_flow_forecast(workspace.cash_flow)
        print(f"30 days: {format_currency(forecast.forecast30)}")
        print(f"60 days: {format_currency(forecast.forecast60)}")
        print(f"90 days: {format_currency(forecast.forecast90)}")
        if forecast.warning:
            print(f"Warning: {forecast.warning}")
    else:
        print("No cashflow subcommand specified. Available: 'show', 'forecast'.")


def _handle_ai(args: argparse.Namespace, workspace: Workspace, config: AppConfig) -> None:
    subcmd = args.ai_command
    if subcmd is None:
        print("No ai subcommand specified. Available: 'insights', 'ask', 'chat', 'journal'.")
        return

    assistant = _build_assistant(config)
    if subcmd == "insights":
        for insight in assistant.proactive_insights(workspace.ai_context()):
            print(f"[{insight.type}] {insight.title}")
            print(f"  {insight.description}")
    elif subcmd == "ask":
        try:
            print(
                assistant.analyze_question(
                    args.question, workspace.ai_context(include_contacts=True)
                )
            )
        except ValueError as exc:
            raise SystemExit(str(exc)) from exc
    elif subcmd == "chat":
        session = ChatSession(assistant)
        for message in args.messages:
            session.send(message)
        for message in session.messages:
            print(f"{message.sender}> {message.text}")
    elif subcmd == "journal":
        invoice = workspace.find_invoice(args.invoice_id)
        if invoice is None:
            raise SystemExit(f"Invoice not found: {args.invoice_id}")
        proposal = assistant.journal_entry_from_invoice(invoice)
        print(f"Source: {proposal.transaction_source_id}")
        for entry in proposal.gl_entries:
            print(
                f"  {entry.account_id}: debit {format_currency(entry.debit_amount)} | "
                f"credit {format_currency(entry.credit_amount)}"
            )
        print(f"Balanced: {'yes' if proposal.is_balanced else 'no'}")
        print(f"Rationale: {proposal.ai_rationale}")


def _handle_datagen(args: argparse.Namespace, config: AppConfig) -> None:
    assistant = _build_assistant(config)
    try:
        dataset = assistant.synthetic_data(
            args.module, split_column_list(args.columns), args.rows, args.rules
        )
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    except AIServiceError as exc:
        raise SystemExit(
            "Failed to generate data. The model might be busy or the request "
            f"is invalid. Details: {exc}"
        ) from exc

    preview = dataset.preview()
    if preview:
        columns = [FieldColumn(c.original, c.original) for c in dataset.columns]
        print(render_table(columns, preview).to_string(index=False))
        print()
    _export(args.output or dataset.default_filename, dataset.to_export_records(), config)


def _handle_settings(args: argparse.Namespace, config: AppConfig) -> None:
    store = ThemeStore(PreferenceStore(config.preferences_path))
    subcmd = args.settings_command
    if subcmd == "show":
        theme = store.get()
        print(f"Primary colour: {theme.primary}")
        print(f"Dark background: {theme.dark_bg}")
    elif subcmd == "save":
        current = store.get()
        try:
            theme = Theme(
                primary=args.primary or current.primary,
                dark_bg=args.dark_bg or current.dark_bg,
            )
        except ValueError as exc:
            raise SystemExit(str(exc)) from exc
        store.save(theme)
        print(f"Theme saved to {config.preferences_path}")
    else:
        print("No settings subcommand specified. Available: 'show', 'save'.")


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the Aurora ERP CLI.

    This function parses command-line arguments, configures logging, loads
    the configuration, builds a fresh workspace from the demo dataset and
    dispatches to the selected command. AI failures are reported as a
    one-line error and a non-zero exit status.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if args.config_path:
        config = load_app_config(args.config_path)
    else:
        config = load_app_config()

    workspace = Workspace.from_mock_data()

    handlers = {
        "sales": _handle_sales,
        "inventory": _handle_inventory,
        "purchases": _handle_purchases,
        "orders": _handle_orders,
        "reports": _handle_reports,
        "crm": _handle_crm,
        "hr": _handle_hr,
        "projects": _handle_projects,
        "cashflow": _handle_cashflow,
        "ai": _handle_ai,
    }

    try:
        if args.command in handlers:
            handlers[args.command](args, workspace, config)
        elif args.command == "datagen":
            _handle_datagen(args, config)
        elif args.command == "settings":
            _handle_settings(args, config)
        else:
            parser.print_help()
    except AIServiceError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
