# Aurora ERP - Business management dashboard for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Aurora ERP
----------

A small business-management dashboard for Small and Medium-sized Businesses
(SMBs), driven from the command line. Records live in an in-memory
workspace seeded from a demo dataset.

Main capabilities:
- invoice import from CSV with per-row error reporting and a review step,
- CSV export of invoices, products, bills, purchase and sales orders,
- profit & loss report and manual journal entries,
- AI-assisted analysis: financial summary, lead scoring, cash-flow
  forecast, proactive insights, free-form questions and chat,
- AI document intake: invoice image scanning and journal entry proposals,
- AI synthetic data generation exported as CSV,
- persisted theme preference.

Aurora ERP separates domain logic (io, ledger, assistant), configuration
(TOML) and presentation (CLI).


Version: 0.1.0

Usage:
    aurora-erp --help
"""

__all__ = ["assistant", "io", "ledger", "llm", "services"]

__version__ = "0.1.0"
