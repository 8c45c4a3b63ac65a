# Aurora ERP - Business management dashboard for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Manual journal entries and the profit & loss report.

A journal is a list of raw `JournalLine`s as typed by the user (strings for
the amounts). It is validated once, then turned into ledger entries:

- a line with a debit becomes an ``Expense`` entry,
- a line with a credit becomes a ``Revenue`` entry,
- lines with neither are dropped.

This is a simplified two-bucket ledger for the P&L report, not a general
ledger with a chart of accounts.
"""

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pandas as pd

from .models import LedgerEntry

logger = logging.getLogger(__name__)

UNBALANCED_ERROR = "Total debits must equal total credits and cannot be zero."
MISSING_ACCOUNT_ERROR = "All line items must have an account name."

_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _amount(text: str) -> float:
    """Leading number of ``text``; blank or non-numeric input counts as 0."""
    match = _FLOAT_PREFIX.match((text or "").strip())
    return float(match.group(0)) if match else 0.0


@dataclass(frozen=True)
class JournalLine:
    account: str
    debit: str = ""
    credit: str = ""

    @property
    def debit_amount(self) -> float:
        return _amount(self.debit)

    @property
    def credit_amount(self) -> float:
        return _amount(self.credit)


def journal_totals(lines: Sequence[JournalLine]) -> tuple[float, float]:
    """Return ``(total_debit, total_credit)``."""
    return (
        sum(line.debit_amount for line in lines),
        sum(line.credit_amount for line in lines),
    )


def validate_journal(lines: Sequence[JournalLine]) -> Optional[str]:
    """
    Check a journal before posting.

    Returns
    -------
    str or None
        The first error message, or None when the journal can be posted.
        Balance is checked before account names.
    """
    total_debit, total_credit = journal_totals(lines)
    if not (total_debit > 0 and math.isclose(total_debit, total_credit)):
        return UNBALANCED_ERROR
    if any(not line.account.strip() for line in lines):
        return MISSING_ACCOUNT_ERROR
    return None


def journal_to_ledger_entries(
    date: str,
    description: str,
    lines: Sequence[JournalLine],
    id_prefix: Optional[str] = None,
) -> list[LedgerEntry]:
    """
    Convert a validated journal into ledger entries.

    Raises
    ------
    ValueError
        If the journal does not pass `validate_journal`.
    """
    error = validate_journal(lines)
    if error is not None:
        raise ValueError(error)

    prefix = id_prefix or f"LED-{datetime.now().strftime('%Y%m%d%H%M%S')}"
    entries: list[LedgerEntry] = []
    for line in lines:
        debit, credit = line.debit_amount, line.credit_amount
        if debit <= 0 and credit <= 0:
            continue
        entries.append(
            LedgerEntry(
                id=f"{prefix}-{len(entries)}",
                date=date,
                account=f"{line.account} ({description})",
                type="Expense" if debit > 0 else "Revenue",
                amount=debit if debit > 0 else credit,
            )
        )

    logger.info("Journal of %d line(s) produced %d ledger entries", len(lines), len(entries))
    return entries


# ---------------------------------------------------------------------------
# Profit & loss
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProfitAndLoss:
    """
    Profit & loss statement.

    Attributes
    ----------
    revenue, expenses:
        DataFrames with columns ``account`` and ``amount``, in ledger order.
    total_revenue, total_expenses, net_income:
        Totals; ``net_income = total_revenue - total_expenses``.
    """

    revenue: pd.DataFrame
    expenses: pd.DataFrame
    total_revenue: float
    total_expenses: float

    @property
    def net_income(self) -> float:
        return self.total_revenue - self.total_expenses


def ledger_frame(entries: Sequence[LedgerEntry]) -> pd.DataFrame:
    """Ledger entries as a DataFrame (id, date, account, type, amount)."""
    return pd.DataFrame(
        [
            {
                "id": e.id,
                "date": e.date,
                "account": e.account,
                "type": e.type,
                "amount": float(e.amount),
            }
            for e in entries
        ],
        columns=["id", "date", "account", "type", "amount"],
    )


def profit_and_loss(entries: Sequence[LedgerEntry]) -> ProfitAndLoss:
    df = ledger_frame(entries)
    revenue = df.loc[df["type"] == "Revenue", ["account", "amount"]].reset_index(drop=True)
    expenses = df.loc[df["type"] == "Expense", ["account", "amount"]].reset_index(drop=True)
    return ProfitAndLoss(
        revenue=revenue,
        expenses=expenses,
        total_revenue=float(revenue["amount"].sum()),
        total_expenses=float(expenses["amount"].sum()),
    )
