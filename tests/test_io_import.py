from aurora_erp.io import (
    EMPTY_FILE_ERROR,
    UNEXPECTED_PARSE_ERROR,
    parse_invoices_from_csv,
    read_invoices_csv,
)

HEADER = "InvoiceID,Customer,Date,DueDate,ProductID,Quantity,PriceOverride"


def make_csv(*rows: str) -> str:
    return "\n".join([HEADER, *rows])


def test_rows_are_grouped_into_one_invoice(products):
    """Two rows with the same InvoiceID become one invoice with two lines."""
    text = make_csv(
        "INV-100,Acme,2024-01-01,2024-01-31,PROD-01,2,",
        "INV-100,Acme,2024-01-01,2024-01-31,PROD-02,1,700000",
    )

    result = parse_invoices_from_csv(text, products)

    assert result.errors == []
    assert len(result.invoices) == 1
    inv = result.invoices[0]
    assert inv.id == "INV-100"
    assert inv.customer == "Acme"
    assert inv.date == "2024-01-01"
    assert inv.due_date == "2024-01-31"
    assert inv.status == "Due"

    first, second = inv.items
    assert first.id == "INV-100-1"
    assert first.product_id == "PROD-01"
    assert first.sku == "QW-1001"
    assert first.description == "Quantum Widget"
    assert first.quantity == 2
    assert first.price == 350000

    assert second.id == "INV-100-2"
    assert second.quantity == 1
    assert second.price == 700000.0

    assert inv.amount == 1_400_000


def test_invoices_keep_order_of_first_appearance(products):
    text = make_csv(
        "INV-2,Beta,2024-01-02,2024-02-01,PROD-01,1,",
        "INV-1,Alpha,2024-01-01,2024-01-31,PROD-02,1,",
        "INV-2,Beta,2024-01-02,2024-02-01,PROD-03,1,",
    )

    result = parse_invoices_from_csv(text, products)

    assert [inv.id for inv in result.invoices] == ["INV-2", "INV-1"]
    assert len(result.invoices[0].items) == 2


def test_first_row_wins_for_invoice_header_fields(products):
    text = make_csv(
        "INV-7,First Customer,2024-01-01,2024-01-31,PROD-01,1,",
        "INV-7,Other Customer,2024-05-05,2024-06-05,PROD-02,1,",
    )

    inv = parse_invoices_from_csv(text, products).invoices[0]

    assert inv.customer == "First Customer"
    assert inv.date == "2024-01-01"
    assert len(inv.items) == 2


def test_missing_required_header_aborts_import(products):
    text = "\n".join(
        [
            "InvoiceID,Customer,Date,DueDate,ProductID",
            "INV-1,Acme,2024-01-01,2024-01-31,PROD-01",
        ]
    )

    result = parse_invoices_from_csv(text, products)

    assert result.invoices == []
    assert result.errors == [
        "CSV is missing required header: Quantity. Expected headers are "
        "InvoiceID, Customer, Date, DueDate, ProductID, Quantity."
    ]


def test_empty_file_and_header_only_file(products):
    assert parse_invoices_from_csv("", products).errors == [EMPTY_FILE_ERROR]
    assert parse_invoices_from_csv("   \n  ", products).errors == [EMPTY_FILE_ERROR]

    result = parse_invoices_from_csv(HEADER + "\n", products)
    assert result.invoices == []
    assert result.errors == [EMPTY_FILE_ERROR]


def test_unknown_product_is_reported_and_other_rows_survive(products):
    text = make_csv(
        "INV-1,Acme,2024-01-01,2024-01-31,PROD-99,1,",
        "INV-2,Acme,2024-01-01,2024-01-31,PROD-01,1,",
    )

    result = parse_invoices_from_csv(text, products)

    assert result.errors == ['Row 2: Product with ID "PROD-99" not found in inventory.']
    assert [inv.id for inv in result.invoices] == ["INV-2"]


def test_missing_required_field_in_row(products):
    text = make_csv(
        "INV-1,,2024-01-01,2024-01-31,PROD-01,1,",
        "INV-2,Acme,2024-01-01",
    )

    result = parse_invoices_from_csv(text, products)

    assert result.invoices == []
    assert result.errors == [
        "Row 2: Missing one or more required fields.",
        "Row 3: Missing one or more required fields.",
    ]


def test_invalid_quantity_and_price(products):
    text = make_csv(
        "INV-1,Acme,2024-01-01,2024-01-31,PROD-01,0,",
        "INV-2,Acme,2024-01-01,2024-01-31,PROD-01,abc,",
        "INV-3,Acme,2024-01-01,2024-01-31,PROD-01,-3,",
        "INV-4,Acme,2024-01-01,2024-01-31,PROD-01,1,-5",
        "INV-5,Acme,2024-01-01,2024-01-31,PROD-01,1,free",
    )

    result = parse_invoices_from_csv(text, products)

    assert result.invoices == []
    expected = "Invalid number for Quantity or Price. Quantity must be positive."
    assert result.errors == [f"Row {n}: {expected}" for n in range(2, 7)]


def test_numbers_use_their_leading_numeric_part(products):
    """Quantity "3 pcs" reads as 3 and price "12.5 IDR" as 12.5."""
    text = make_csv("INV-1,Acme,2024-01-01,2024-01-31,PROD-01,3 pcs,12.5 IDR")

    item = parse_invoices_from_csv(text, products).invoices[0].items[0]

    assert item.quantity == 3
    assert item.price == 12.5


def test_zero_price_override_is_accepted(products):
    text = make_csv("INV-1,Acme,2024-01-01,2024-01-31,PROD-01,1,0")

    item = parse_invoices_from_csv(text, products).invoices[0].items[0]

    assert item.price == 0.0


def test_price_override_column_is_optional(products):
    text = "\n".join(
        [
            "InvoiceID,Customer,Date,DueDate,ProductID,Quantity",
            "INV-1,Acme,2024-01-01,2024-01-31,PROD-05,1",
        ]
    )

    item = parse_invoices_from_csv(text, products).invoices[0].items[0]

    assert item.price == 12_500_000


def test_blank_lines_are_skipped_but_keep_row_numbers(products):
    text = make_csv(
        "INV-1,Acme,2024-01-01,2024-01-31,PROD-01,1,",
        "",
        "INV-2,Acme,2024-01-01,2024-01-31,PROD-99,1,",
    )

    result = parse_invoices_from_csv(text, products)

    assert len(result.invoices) == 1
    assert result.errors == ['Row 4: Product with ID "PROD-99" not found in inventory.']


def test_crlf_line_endings_and_padded_cells(products):
    text = (
        " InvoiceID , Customer ,Date,DueDate,ProductID,Quantity\r\n"
        "INV-1 , Acme Corp ,2024-01-01,2024-01-31, PROD-02 , 4 \r\n"
    )

    inv = parse_invoices_from_csv(text, products).invoices[0]

    assert inv.id == "INV-1"
    assert inv.customer == "Acme Corp"
    assert inv.items[0].product_id == "PROD-02"
    assert inv.items[0].quantity == 4


def test_headers_may_appear_in_any_order(products):
    text = "\n".join(
        [
            "Quantity,ProductID,DueDate,Date,Customer,InvoiceID",
            "2,PROD-03,2024-01-31,2024-01-01,Acme,INV-9",
        ]
    )

    inv = parse_invoices_from_csv(text, products).invoices[0]

    assert inv.id == "INV-9"
    assert inv.items[0].quantity == 2
    assert inv.items[0].product_id == "PROD-03"


def test_read_invoices_csv_reads_file(tmp_path, products):
    path = tmp_path / "invoices.csv"
    path.write_text(make_csv("INV-1,Acme,2024-01-01,2024-01-31,PROD-01,1,"), encoding="utf-8")

    result = read_invoices_csv(path, products)

    assert [inv.id for inv in result.invoices] == ["INV-1"]


def test_read_invoices_csv_reports_unreadable_files(tmp_path, products):
    missing = read_invoices_csv(tmp_path / "missing.csv", products)
    assert missing.invoices == []
    assert missing.errors == [UNEXPECTED_PARSE_ERROR]

    binary = tmp_path / "binary.csv"
    binary.write_bytes(b"\xff\xfe\x00\x81garbage")
    result = read_invoices_csv(binary, products)
    assert result.errors == [UNEXPECTED_PARSE_ERROR]
