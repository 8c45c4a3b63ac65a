from dataclasses import replace

import pytest

from aurora_erp import mock_data
from aurora_erp.io import UNEXPECTED_PARSE_ERROR, parse_invoices_from_csv
from aurora_erp.ledger import JournalLine
from aurora_erp.models import (
    PIPELINE_STAGES,
    TASK_STAGES,
    Employee,
    ImportResult,
    Invoice,
    LineItem,
    Product,
    PurchaseOrder,
    Task,
)
from aurora_erp.services import ImportReview, Workspace

CSV_TEXT = "\n".join(
    [
        "InvoiceID,Customer,Date,DueDate,ProductID,Quantity,PriceOverride",
        "INV-100,Acme,2024-01-01,2024-01-31,PROD-01,2,",
        "INV-101,Globex,2024-01-02,2024-02-01,PROD-02,1,",
    ]
)


def make_review(products) -> tuple[ImportResult, ImportReview]:
    result = parse_invoices_from_csv(CSV_TEXT, products)
    return result, ImportReview(result)


def test_update_field_edits_only_the_review_copy(products):
    result, review = make_review(products)

    updated = review.update_field("INV-100", "customer", "Acme Ltd")

    assert updated.customer == "Acme Ltd"
    assert review.invoices[0].customer == "Acme Ltd"
    assert result.invoices[0].customer == "Acme"


def test_update_field_date(products):
    _, review = make_review(products)

    review.update_field("INV-101", "date", "2024-03-03")

    assert review.invoices[1].date == "2024-03-03"
    assert review.invoices[1].due_date == "2024-02-01"


@pytest.mark.parametrize("field_name", ["status", "due_date", "items", "id"])
def test_update_field_rejects_other_fields(products, field_name):
    _, review = make_review(products)

    with pytest.raises(ValueError, match="cannot be edited"):
        review.update_field("INV-100", field_name, "x")


def test_update_field_unknown_invoice(products):
    _, review = make_review(products)

    with pytest.raises(KeyError):
        review.update_field("INV-999", "customer", "x")


def test_error_preview_truncates_after_five():
    errors = [f"Row {n}: bad" for n in range(2, 9)]
    review = ImportReview(ImportResult(invoices=[], errors=errors))

    preview = review.error_preview()

    assert preview == errors[:5] + ["...and 2 more."]
    assert review.has_errors
    assert not review.has_invoices


def test_error_preview_without_truncation():
    errors = [f"Row {n}: bad" for n in range(2, 7)]
    review = ImportReview(ImportResult(invoices=[], errors=errors))

    assert review.error_preview() == errors


def test_confirm_requires_invoices():
    review = ImportReview(ImportResult(invoices=[], errors=["CSV file is empty"]))

    with pytest.raises(ValueError):
        review.confirm()


def test_workspace_lists_are_deep_copies():
    ws = Workspace.from_mock_data()

    ws.invoices[0].items.clear()

    assert mock_data.INVOICES[0].items


def test_import_and_merge_prepends_confirmed_invoices(tmp_path):
    ws = Workspace.from_mock_data()
    path = tmp_path / "import.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    before = len(ws.invoices)

    review = ws.import_invoices_from_file(path)
    review.update_field("INV-100", "customer", "Acme Ltd")
    ws.merge_invoices(review.confirm())

    assert len(ws.invoices) == before + 2
    assert [inv.id for inv in ws.invoices[:2]] == ["INV-100", "INV-101"]
    assert ws.invoices[0].customer == "Acme Ltd"
    assert ws.invoices[2].id == mock_data.INVOICES[0].id


def test_import_from_unreadable_file(tmp_path):
    ws = Workspace.from_mock_data()

    review = ws.import_invoices_from_file(tmp_path / "missing.csv")

    assert review.errors == [UNEXPECTED_PARSE_ERROR]
    assert not review.has_invoices


def test_save_purchase_order_new_and_existing():
    ws = Workspace.from_mock_data()
    count = len(ws.purchase_orders)
    scanned = PurchaseOrder(
        id="SM-2024-001",
        vendor="PT Sumber Makmur",
        date="2024-03-01",
        expected_delivery_date="2024-03-10",
        total_amount=1_500_000,
        status="Draft",
    )

    saved = ws.save_purchase_order(scanned)

    assert saved.id == f"PO-00{count + 1}"
    assert ws.purchase_orders[0] == saved

    edited = replace(saved, status="Sent")
    ws.save_purchase_order(edited)
    assert len(ws.purchase_orders) == count + 1
    assert ws.purchase_orders[0].status == "Sent"


def test_post_journal_appends_ledger_entries():
    ws = Workspace.from_mock_data()
    before = len(ws.ledger)

    entries = ws.post_journal(
        "2024-01-15",
        "Pens",
        [JournalLine("Office Supplies", "150000", ""), JournalLine("Cash", "", "150000")],
    )

    assert len(entries) == 2
    assert ws.ledger[before:] == entries


def test_deals_by_stage_covers_every_stage():
    ws = Workspace.from_mock_data()

    grouped = ws.deals_by_stage()

    assert list(grouped) == list(PIPELINE_STAGES)
    assert sum(len(d) for d in grouped.values()) == len(ws.deals)
    assert [d.id for d in grouped["Won"]] == ["DEAL-04"]


def test_ai_context_contents():
    ws = Workspace.from_mock_data()

    assert set(ws.ai_context()) == {"invoices", "bills", "products", "deals"}
    with_contacts = ws.ai_context(include_contacts=True)
    assert with_contacts["contacts"] == ws.contacts
    assert len(ws.contacts) == 5


def test_product_line_item_copies_catalogue_fields():
    ws = Workspace.from_mock_data()

    item = ws.product_line_item(1, "PROD-03", 4)

    assert item == LineItem(1, "PROD-03", "NG-3003", "Nano Gear", 4, 185000)
    assert item.line_total == 740000


def test_product_line_item_unknown_product():
    ws = Workspace.from_mock_data()

    with pytest.raises(KeyError, match="PROD-99"):
        ws.product_line_item(1, "PROD-99", 1)


def test_save_invoice_new_and_existing():
    ws = Workspace.from_mock_data()
    count = len(ws.invoices)
    draft = Invoice(
        "new",
        "Umbrella Corp",
        "2024-05-01",
        "2024-05-31",
        "Due",
        [ws.product_line_item(1, "PROD-01", 2)],
    )

    saved = ws.save_invoice(draft)

    assert saved.id == f"INV-{count + 1:03d}"
    assert ws.invoices[0] == saved
    assert saved.amount == 700000

    ws.save_invoice(replace(saved, status="Paid"))
    assert len(ws.invoices) == count + 1
    assert ws.find_invoice(saved.id).status == "Paid"


def test_save_product_new_and_existing():
    ws = Workspace.from_mock_data()

    saved = ws.save_product(Product("new", "Warp Coil", "WC-6006", "Components", 3, 990000))

    assert saved.id == "PROD-06"
    assert ws.products[0] == saved
    assert "PROD-06" in ws.product_index()

    ws.save_product(replace(ws.find_product("PROD-03"), stock=50))
    assert ws.find_product("PROD-03").stock == 50
    assert len(ws.products) == 6


def test_save_employee_new_and_existing():
    ws = Workspace.from_mock_data()
    new = Employee("new", "Natasha Romanoff", "QA Lead", "Engineering", "natasha@aurora.ai", "")

    saved = ws.save_employee(new)

    assert saved.id == "EMP-006"
    assert ws.employees[0] == saved

    ws.save_employee(replace(ws.find_employee("EMP-003"), role="Head of Product"))
    assert ws.find_employee("EMP-003").role == "Head of Product"
    assert len(ws.employees) == 6


def test_save_task_new_existing_and_unknown_assignee():
    ws = Workspace.from_mock_data()

    saved = ws.save_task(Task("new", "Plan launch party", "EMP-003", "To Do", "Low"))

    assert saved.id == "TSK-07"
    assert ws.tasks[0] == saved

    ws.save_task(replace(ws.find_task("TSK-05"), status="In Progress"))
    assert ws.find_task("TSK-05").status == "In Progress"

    with pytest.raises(KeyError, match="EMP-999"):
        ws.save_task(replace(saved, assignee_id="EMP-999"))
    assert ws.find_task("TSK-07").assignee_id == "EMP-003"


def test_tasks_by_stage_covers_every_stage():
    ws = Workspace.from_mock_data()

    grouped = ws.tasks_by_stage()

    assert list(grouped) == list(TASK_STAGES)
    assert [t.id for t in grouped["Done"]] == ["TSK-01", "TSK-02"]
    assert sum(len(t) for t in grouped.values()) == len(ws.tasks)
    assert ws.project.id == "PROJ-ALPHA"
