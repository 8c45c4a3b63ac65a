import pytest
import requests

from aurora_erp.cli import main
from aurora_erp.ledger import UNBALANCED_ERROR

KEY_ENV = "AURORA_CLI_TEST_KEY"


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    """Config writing exports and preferences under tmp_path, no AI credential."""
    monkeypatch.delenv(KEY_ENV, raising=False)
    path = tmp_path / "aurora.toml"
    path.write_text(
        f"""
[ai]
api_key_env = "{KEY_ENV}"

[export]
output_dir = "out"

[preferences]
path = "prefs.json"
""",
        encoding="utf-8",
    )
    return path


def run(config_path, *args):
    main(["--config", str(config_path), *args])


def write_import_csv(tmp_path):
    path = tmp_path / "invoices.csv"
    path.write_text(
        "\n".join(
            [
                "InvoiceID,Customer,Date,DueDate,ProductID,Quantity,PriceOverride",
                "INV-100,Acme,2024-01-01,2024-01-31,PROD-01,2,",
                "INV-101,Acme,2024-01-01,2024-01-31,PROD-99,1,",
            ]
        ),
        encoding="utf-8",
    )
    return path


def test_sales_export_writes_csv(config_path, tmp_path, capsys):
    run(config_path, "sales", "export")

    out_file = tmp_path / "out" / "sales_invoices.csv"
    assert out_file.is_file()
    lines = out_file.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Invoice id,Customer,Date,Due date,Amount,Status"
    assert len(lines) == 7
    assert "Wrote" in capsys.readouterr().out


def test_sales_list_search(config_path, capsys):
    run(config_path, "sales", "list", "--search", "stark")

    out = capsys.readouterr().out
    assert "INV-001" in out
    assert "INV-002" not in out
    assert "Page 1 of 1 (1 record(s))" in out


def test_sales_import_preview_does_not_merge(config_path, tmp_path, capsys):
    path = write_import_csv(tmp_path)

    run(config_path, "sales", "import", str(path))

    out = capsys.readouterr().out
    assert "1 error(s) found:" in out
    assert 'Row 3: Product with ID "PROD-99" not found in inventory.' in out
    assert "1 invoice(s) ready to import:" in out
    assert "Preview only" in out


def test_sales_import_with_edit_and_confirmation(config_path, tmp_path, capsys):
    path = write_import_csv(tmp_path)

    run(config_path, "sales", "import", str(path), "--set", "INV-100:customer=Acme Ltd", "--yes")

    out = capsys.readouterr().out
    assert "Acme Ltd" in out
    assert "Imported 1 invoice(s). Total invoices: 7" in out


def test_sales_import_rejects_non_editable_field(config_path, tmp_path):
    path = write_import_csv(tmp_path)

    with pytest.raises(SystemExit) as exc:
        run(config_path, "sales", "import", str(path), "--set", "INV-100:status=Paid")

    assert "cannot be edited" in str(exc.value.code)


def test_reports_pnl(config_path, capsys):
    run(config_path, "reports", "pnl")

    out = capsys.readouterr().out
    assert "Total revenue: Rp 77.000.500" in out
    assert "Net income: Rp 250" in out


def test_reports_journal(config_path, capsys):
    run(
        config_path,
        "reports",
        "journal",
        "--date",
        "2024-01-15",
        "--description",
        "Pens",
        "--line",
        "Office Supplies:150000:",
        "--line",
        "Cash::150000",
    )

    out = capsys.readouterr().out
    assert "Posted 2 ledger entries" in out
    assert "Office Supplies (Pens)" in out


def test_reports_journal_unbalanced(config_path):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "reports", "journal", "--line", "Cash:100:", "--line", "Sales::90")

    assert exc.value.code == UNBALANCED_ERROR


def test_ai_command_without_credential(config_path):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "ai", "insights")

    assert KEY_ENV in str(exc.value.code)


def test_crm_score_with_ai(config_path, monkeypatch, fake_session, capsys):
    monkeypatch.setenv(KEY_ENV, "secret")
    monkeypatch.setattr(requests, "Session", lambda: fake_session)
    fake_session.reply_json({"score": 91, "action": "Send the renewal contract."})

    run(config_path, "crm", "score", "DEAL-04")

    out = capsys.readouterr().out
    assert "DEAL-04" in out
    assert "score 91 - Send the renewal contract." in out
    assert fake_session.calls[0]["headers"] == {"x-goog-api-key": "secret"}


def test_ai_failure_is_reported(config_path, monkeypatch, fake_session):
    monkeypatch.setenv(KEY_ENV, "secret")
    monkeypatch.setattr(requests, "Session", lambda: fake_session)
    fake_session.reply({"error": {"message": "quota"}}, status_code=429)

    with pytest.raises(SystemExit) as exc:
        run(config_path, "cashflow", "forecast")

    assert str(exc.value.code).startswith("AI request failed:")


def test_datagen_exports_with_original_labels(config_path, tmp_path, monkeypatch, fake_session):
    monkeypatch.setenv(KEY_ENV, "secret")
    monkeypatch.setattr(requests, "Session", lambda: fake_session)
    fake_session.reply_json([{"ID_Barang_SKU": "SKU-1", "Nama_Barang": "Kopi"}])

    run(
        config_path,
        "datagen",
        "--module",
        "Inventory",
        "--columns",
        "ID Barang/SKU, Nama Barang",
        "--rows",
        "1",
    )

    content = (tmp_path / "out" / "Inventory_data_1_rows.csv").read_text(encoding="utf-8")
    assert content == "ID Barang/SKU,Nama Barang\nSKU-1,Kopi"


def test_settings_save_and_show(config_path, tmp_path, capsys):
    run(config_path, "settings", "save", "--primary", "#ff0000")
    capsys.readouterr()

    run(config_path, "settings", "show")

    out = capsys.readouterr().out
    assert "Primary colour: #ff0000" in out
    assert "Dark background: #111827" in out
    assert (tmp_path / "prefs.json").is_file()


def test_settings_save_invalid_colour(config_path):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "settings", "save", "--dark-bg", "black")

    assert "#rrggbb" in str(exc.value.code)


def test_crm_pipeline(config_path, capsys):
    run(config_path, "crm", "pipeline")

    out = capsys.readouterr().out
    assert "=== Won (1) ===" in out
    assert "DEAL-04" in out


def test_crm_score_continues_after_a_failed_deal(config_path, monkeypatch, fake_session, capsys):
    monkeypatch.setenv(KEY_ENV, "secret")
    monkeypatch.setattr(requests, "Session", lambda: fake_session)
    fake_session.fail(requests.ConnectionError("boom"))
    for _ in range(3):
        fake_session.reply_json({"score": 80, "action": "Follow up."})

    run(config_path, "crm", "score")

    out = capsys.readouterr().out
    assert "DEAL-01  Project Titan Server Upgrade: score unavailable (AI request failed: boom)" in out
    assert out.count("score 80 - Follow up.") == 3
    assert len(fake_session.calls) == 4


def test_crm_contacts(config_path, capsys):
    run(config_path, "crm", "contacts", "--search", "vendor")

    out = capsys.readouterr().out
    assert "Hank Scorpio" in out
    assert "Bill Lumbergh" in out
    assert "Tony Stark" not in out


def test_sales_new_invoice_with_product_and_service_lines(config_path, capsys):
    run(
        config_path,
        "sales",
        "new",
        "--customer",
        "Umbrella Corp",
        "--product",
        "PROD-01:2",
        "--item",
        "Installation: on site:1:150000",
    )

    out = capsys.readouterr().out
    assert "Invoice INV-007: Umbrella Corp (Due)" in out
    assert "Quantum Widget x2" in out
    assert "Installation: on site x1" in out
    assert "Total: Rp 850.000" in out


def test_sales_new_requires_a_line(config_path):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "sales", "new", "--customer", "Umbrella Corp")

    assert "at least one line" in str(exc.value.code)


def test_sales_new_rejects_unknown_product(config_path):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "sales", "new", "--customer", "X", "--product", "PROD-99")

    assert "PROD-99" in str(exc.value.code)


def test_sales_new_rejects_bad_quantity(config_path):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "sales", "new", "--customer", "X", "--item", "Consulting:0:100")

    assert exc.value.code == 2


def test_sales_edit_keeps_lines_when_none_given(config_path, capsys):
    run(config_path, "sales", "edit", "INV-002", "--status", "Paid")

    out = capsys.readouterr().out
    assert "Invoice INV-002: Wayne Enterprises (Paid)" in out
    assert "Turbo Encabulator x2" in out


def test_inventory_add_and_edit(config_path, capsys):
    run(config_path, "inventory", "add", "--name", "Warp Coil", "--sku", "WC-6006", "--price", "990000")
    assert "Saved product PROD-06." in capsys.readouterr().out

    run(config_path, "inventory", "edit", "PROD-03", "--stock", "40")
    out = capsys.readouterr().out
    assert "Saved product PROD-03." in out
    assert "40" in out


def test_purchases_new_computes_total(config_path, capsys):
    run(
        config_path,
        "purchases",
        "new",
        "--vendor",
        "Initech",
        "--item",
        "Staplers:10:25000",
        "--item",
        "TPS cover sheets:2:5000",
    )

    out = capsys.readouterr().out
    assert "Purchase order PO-004: Initech (Draft)" in out
    assert "Total: Rp 260.000" in out


def test_hr_add_and_edit(config_path, capsys):
    run(config_path, "hr", "add", "--name", "Natasha Romanoff", "--role", "QA Lead")
    assert "Saved employee EMP-006." in capsys.readouterr().out

    run(config_path, "hr", "edit", "EMP-003", "--department", "Leadership")
    out = capsys.readouterr().out
    assert "Leadership" in out
    assert "Saved employee EMP-003." in out


def test_projects_board_and_add(config_path, capsys):
    run(config_path, "projects", "board")
    out = capsys.readouterr().out
    assert 'Q4 Product Launch - "Phoenix"' in out
    assert "=== Done (2) ===" in out
    assert "TSK-03  [High] Implement frontend for dashboard - Diana Prince" in out

    run(config_path, "projects", "add", "--title", "Plan launch party")
    out = capsys.readouterr().out
    assert "Saved task TSK-07." in out
    assert "EMP-001" in out


def test_projects_edit_rejects_unknown_assignee(config_path):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "projects", "edit", "TSK-01", "--assignee", "EMP-999")

    assert "EMP-999" in str(exc.value.code)
