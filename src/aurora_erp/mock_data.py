# Aurora ERP - Business management dashboard for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Static demo dataset.

These records are read-only templates. Callers that need to mutate data must
work on a copy (see `aurora_erp.services.Workspace`).
"""

from .models import (
    Bill,
    CashFlowEntry,
    ChartData,
    Contact,
    Deal,
    Employee,
    Invoice,
    LedgerEntry,
    LineItem,
    OrderItem,
    Product,
    Project,
    PurchaseOrder,
    SalesOrder,
    Task,
)

PRODUCTS: tuple[Product, ...] = (
    Product("PROD-01", "Quantum Widget", "QW-1001", "Widgets", 150, 350000),
    Product("PROD-02", "Hyper Sprocket", "HS-2002", "Sprockets", 80, 750000),
    Product("PROD-03", "Nano Gear", "NG-3003", "Gears", 7, 185000),
    Product("PROD-04", "Flux Capacitor Casing", "FC-4004", "Components", 25, 2800000),
    Product("PROD-05", "Turbo Encabulator", "TE-5005", "Machinery", 10, 12500000),
)

INVOICES: tuple[Invoice, ...] = (
    Invoice(
        "INV-001",
        "Stark Industries",
        "2023-10-01",
        "2023-10-31",
        "Paid",
        [
            LineItem(1, None, "N/A", "Mark 42 Armor Plating", 50, 200000000),
            LineItem(2, None, "N/A", "Arc Reactor Core", 5, 500000000),
        ],
    ),
    Invoice(
        "INV-002",
        "Wayne Enterprises",
        "2023-10-05",
        "2023-11-04",
        "Due",
        [
            LineItem(1, "PROD-05", "TE-5005", "Turbo Encabulator", 2, 12500000),
            LineItem(2, "PROD-04", "FC-4004", "Flux Capacitor Casing", 10, 2800000),
        ],
    ),
    Invoice(
        "INV-003",
        "Cyberdyne Systems",
        "2023-09-15",
        "2023-10-15",
        "Overdue",
        [
            LineItem(1, None, "N/A", "T-800 Endoskeleton Chassis", 1, 200000000),
            LineItem(2, None, "N/A", "Neural Net Processor", 1, 50075000),
        ],
    ),
    Invoice(
        "INV-004",
        "Ollivanders Wand Shop",
        "2023-10-10",
        "2023-11-09",
        "Due",
        [
            LineItem(1, "PROD-03", "NG-3003", "Nano Gear", 100, 185000),
            LineItem(2, None, "N/A", "Wand Polishing Service", 5, 1500000),
        ],
    ),
    Invoice(
        "INV-005",
        "Acme Corporation",
        "2023-10-12",
        "2023-10-28",
        "Paid",
        [
            LineItem(1, "PROD-01", "QW-1001", "Quantum Widget", 10, 350000),
            LineItem(2, "PROD-02", "HS-2002", "Hyper Sprocket", 5, 750000),
        ],
    ),
    Invoice(
        "INV-006",
        "Gekko & Co",
        "2023-10-20",
        "2023-11-19",
        "Due",
        [LineItem(1, None, "N/A", "Suspender Sharpening Service", 5, 3500000)],
    ),
)

BILLS: tuple[Bill, ...] = (
    Bill("BILL-101", "Globex Corporation", "2023-10-02", "2023-11-01", 7500000, "Pending"),
    Bill("BILL-102", "Initech", "2023-09-28", "2023-10-28", 4500000, "Paid"),
    Bill("BILL-103", "Massive Dynamic", "2023-10-15", "2023-11-14", 12000000, "Upcoming"),
    Bill("BILL-104", "Stark Industries", "2023-10-18", "2023-11-17", 3000000, "Upcoming"),
)

PURCHASE_ORDERS: tuple[PurchaseOrder, ...] = (
    PurchaseOrder(
        "PO-001",
        "Globex Corporation",
        "2023-10-25",
        "2023-11-10",
        30650000,
        "Sent",
        [
            OrderItem("PROD-01", "Quantum Widget", 50, 325000),
            OrderItem("PROD-02", "Hyper Sprocket", 20, 720000),
        ],
    ),
    PurchaseOrder(
        "PO-002",
        "Massive Dynamic",
        "2023-10-28",
        "2023-11-15",
        27500000,
        "Fulfilled",
        [OrderItem("PROD-04", "Flux Capacitor Casing", 10, 2750000)],
    ),
    PurchaseOrder(
        "PO-003",
        "Initech",
        "2023-11-01",
        "2023-11-20",
        60000000,
        "Draft",
        [OrderItem("PROD-05", "Turbo Encabulator", 5, 12000000)],
    ),
)

SALES_ORDERS: tuple[SalesOrder, ...] = (
    SalesOrder(
        "SO-1001",
        "Stark Industries",
        "2023-11-01",
        "2023-11-10",
        150000000,
        "Confirmed",
        [
            OrderItem("PROD-01", "Quantum Widget", 100, 350000),
            OrderItem("PROD-05", "Turbo Encabulator", 2, 12500000),
        ],
    ),
    SalesOrder(
        "SO-1002",
        "Wayne Enterprises",
        "2023-11-03",
        "2023-11-15",
        7500000,
        "Draft",
        [OrderItem("PROD-02", "Hyper Sprocket", 10, 750000)],
    ),
    SalesOrder(
        "SO-1003",
        "Cyberdyne Systems",
        "2023-11-05",
        "2023-11-20",
        56000000,
        "Shipped",
        [OrderItem("PROD-04", "Flux Capacitor Casing", 20, 2800000)],
    ),
)

CHART_DATA: tuple[ChartData, ...] = (
    ChartData("Jan", 40000000, 24000000),
    ChartData("Feb", 30000000, 13980000),
    ChartData("Mar", 50000000, 38000000),
    ChartData("Apr", 47800000, 39080000),
    ChartData("May", 58900000, 48000000),
    ChartData("Jun", 63900000, 58000000),
    ChartData("Jul", 74900000, 63000000),
)

CONTACTS: tuple[Contact, ...] = (
    Contact("CUST-001", "Tony Stark", "Stark Industries", "tony@starkind.com", "555-123-4567", "Customer"),
    Contact("VEND-001", "Hank Scorpio", "Globex Corporation", "h.scorpio@globex.com", "555-987-6543", "Vendor"),
    Contact("CUST-002", "Bruce Wayne", "Wayne Enterprises", "bruce@wayne.com", "555-111-2222", "Customer"),
    Contact("VEND-002", "Bill Lumbergh", "Initech", "bill.lumbergh@initech.com", "555-888-9999", "Vendor"),
    Contact("CUST-003", "Wile E. Coyote", "Acme Corporation", "wile@acme.com", "555-222-3333", "Customer"),
)

LEDGER: tuple[LedgerEntry, ...] = (
    LedgerEntry("LED-001", "2023-10-31", "Product Sales", "Revenue", 62000500),
    LedgerEntry("LED-002", "2023-10-25", "Service Revenue", "Revenue", 15000000),
    LedgerEntry("LED-003", "2023-10-28", "Cost of Goods Sold", "Expense", 25000000),
    LedgerEntry("LED-004", "2023-10-30", "Salaries and Wages", "Expense", 32000000),
    LedgerEntry("LED-005", "2023-10-15", "Rent Expense", "Expense", 12000000),
    LedgerEntry("LED-006", "2023-10-10", "Marketing", "Expense", 5500250),
    LedgerEntry("LED-007", "2023-10-05", "Office Supplies", "Expense", 2500000),
)

DEALS: tuple[Deal, ...] = (
    Deal("DEAL-01", "Project Titan Server Upgrade", "Stark Industries", 750000000, "Negotiation"),
    Deal("DEAL-02", "Annual Batmobile Maintenance", "Wayne Enterprises", 1200000000, "Qualification"),
    Deal("DEAL-03", "Skynet Defense Contract", "Cyberdyne Systems", 2500000000, "Prospect"),
    Deal("DEAL-04", "Explosive Tennis Balls Supply", "Acme Corporation", 50000000, "Won"),
)

CASH_FLOW: tuple[CashFlowEntry, ...] = (
    CashFlowEntry("Apr", 40000000, 24000000),
    CashFlowEntry("May", 45000000, 30000000),
    CashFlowEntry("Jun", 50000000, 48000000),
    CashFlowEntry("Jul", 48000000, 38000000),
    CashFlowEntry("Aug", 55000000, 42000000),
    CashFlowEntry("Sep", 60000000, 59000000),
)

EMPLOYEES: tuple[Employee, ...] = (
    Employee("EMP-001", "Diana Prince", "Lead Developer", "Engineering", "diana.prince@aurora.ai", "https://i.pravatar.cc/150?u=emp001"),
    Employee("EMP-002", "Bruce Banner", "Senior Backend Engineer", "Engineering", "bruce.banner@aurora.ai", "https://i.pravatar.cc/150?u=emp002"),
    Employee("EMP-003", "Clark Kent", "Product Manager", "Product", "clark.kent@aurora.ai", "https://i.pravatar.cc/150?u=emp003"),
    Employee("EMP-004", "Peter Parker", "Frontend Developer", "Engineering", "peter.parker@aurora.ai", "https://i.pravatar.cc/150?u=emp004"),
    Employee("EMP-005", "Wanda Maximoff", "UI/UX Designer", "Design", "wanda.maximoff@aurora.ai", "https://i.pravatar.cc/150?u=emp005"),
)

PROJECT = Project("PROJ-ALPHA", 'Q4 Product Launch - "Phoenix"')

TASKS: tuple[Task, ...] = (
    Task("TSK-01", "Design new dashboard layout", "EMP-005", "Done", "High"),
    Task("TSK-02", "Develop API endpoints for CRM", "EMP-002", "Done", "High"),
    Task("TSK-03", "Implement frontend for dashboard", "EMP-001", "In Progress", "High"),
    Task("TSK-04", "Integrate new chart library", "EMP-004", "In Progress", "Medium"),
    Task("TSK-05", "Test dashboard functionality", "EMP-001", "To Do", "Medium"),
    Task("TSK-06", "Write user documentation", "EMP-003", "To Do", "Low"),
)
