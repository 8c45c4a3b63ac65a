# Aurora ERP - Business management dashboard for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
AI capabilities built on top of `aurora_erp.llm.LLMClient`.

Each capability is a one-shot request -> parse -> typed value:

- financial summary, chat reply, free-form data question  -> text
- lead score, cash-flow forecast, proactive insights,
  synthetic data, scanned invoice                          -> JSON
- journal entry proposal                                   -> tool call

Structured responses are validated with pydantic models in strict mode.
A response that does not match the expected shape raises
`aurora_erp.llm.AIResponseError`; no partially-filled result is ever
returned.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import date
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .llm import AIResponseError, AIServiceError, LLMClient, ToolDeclaration, inline_data_part, text_part
from .models import CashFlowEntry, ChartData, OrderItem, PurchaseOrder

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_CHAR_LIMIT = 5000

_NON_KEY_CHAR = re.compile(r"[^a-zA-Z0-9_]")
_WHITESPACE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class _StrictModel(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)


class LeadScore(_StrictModel):
    """Score (0-100) and suggested next action for a sales deal."""

    score: float
    action: str


class CashFlowForecast(_StrictModel):
    forecast30: float
    forecast60: float
    forecast90: float
    warning: Optional[str] = None

    @field_validator("warning")
    @classmethod
    def _blank_warning_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value


InsightType = Literal["Anomaly", "Opportunity", "Efficiency"]
"""
Category of a proactive insight.

Values
------
- "Anomaly": unexpected negative trend (sales drop, overdue invoice, ...).
- "Opportunity": cross-selling, deals worth a push, bundling.
- "Efficiency": cost savings, expensive vendors.
"""


class ProactiveInsight(_StrictModel):
    type: InsightType
    title: str
    description: str


class ScannedLineItem(_StrictModel):
    description: str
    amount: float
    recommended_gl_account: str


class ScannedInvoice(_StrictModel):
    """Structured data extracted from an invoice image."""

    document_type: Literal["INVOICE"]
    vendor_name: str
    invoice_id: str
    invoice_date: str
    currency: Optional[Literal["IDR", "USD"]] = None
    total_amount: float
    due_date: Optional[str] = None
    line_items: list[ScannedLineItem]

    def to_purchase_order(self, today: Optional[date] = None) -> PurchaseOrder:
        """
        Map the scan to a draft purchase order.

        Missing identifiers and dates fall back to a generated id, "Unknown
        Vendor" and ``today``. Each line becomes one order item of quantity 1
        whose name carries the recommended GL account.
        """
        today = today or date.today()
        fallback_date = today.isoformat()
        items = [
            OrderItem(
                product_id=f"scan-{i}",
                product_name=f"{line.description} (GL: {line.recommended_gl_account})",
                quantity=1,
                unit_price=line.amount,
            )
            for i, line in enumerate(self.line_items)
        ]
        return PurchaseOrder(
            id=self.invoice_id or f"INV-{today.strftime('%Y%m%d')}",
            vendor=self.vendor_name or "Unknown Vendor",
            date=self.invoice_date or fallback_date,
            expected_delivery_date=self.due_date or fallback_date,
            total_amount=self.total_amount or 0,
            status="Draft",
            items=items,
        )


class GLEntry(_StrictModel):
    account_id: str
    debit_amount: float
    credit_amount: float


class JournalEntryProposal(_StrictModel):
    """Arguments of a ``post_validated_journal_entry`` tool call."""

    gl_entries: list[GLEntry] = Field(min_length=1)
    transaction_source_id: str
    ai_rationale: str

    @property
    def total_debit(self) -> float:
        return sum(e.debit_amount for e in self.gl_entries)

    @property
    def total_credit(self) -> float:
        return sum(e.credit_amount for e in self.gl_entries)

    @property
    def is_balanced(self) -> bool:
        return abs(self.total_debit - self.total_credit) < 1e-9


_INSIGHTS = TypeAdapter(list[ProactiveInsight])
_ROWS = TypeAdapter(list[dict[str, Any]])


# ---------------------------------------------------------------------------
# Synthetic data
# ---------------------------------------------------------------------------


def sanitize_column(name: str) -> str:
    """
    Turn a user-supplied column label into a JSON-safe key.

        "ID Barang/SKU" -> "ID_Barang_SKU"
    """
    key = _NON_KEY_CHAR.sub("_", name.strip())
    return _WHITESPACE.sub("_", key)


def split_column_list(text: str) -> list[str]:
    """Split a comma-separated list of column labels, dropping blanks."""
    return [c.strip() for c in text.split(",") if c.strip()]


@dataclass(frozen=True)
class ColumnMapping:
    original: str
    key: str


@dataclass(frozen=True)
class SyntheticDataset:
    """
    Generated rows keyed by sanitized column names.

    ``columns`` keeps the original labels so that exports show what the user
    typed rather than the sanitized keys.
    """

    module: str
    columns: list[ColumnMapping]
    rows: list[dict[str, Any]] = field(default_factory=list)
    requested_rows: int = 0

    def to_export_records(self) -> list[dict[str, Any]]:
        return [
            {c.original: row.get(c.key) for c in self.columns} for row in self.rows
        ]

    def preview(self, limit: int = 10) -> list[dict[str, Any]]:
        return self.to_export_records()[:limit]

    @property
    def default_filename(self) -> str:
        return f"{self.module}_data_{self.requested_rows}_rows.csv"


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

LEAD_SCORE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "score": {"type": "NUMBER", "description": "Lead score from 0 to 100"},
        "action": {
            "type": "STRING",
            "description": "Suggested next action for the sales team",
        },
    },
    "required": ["score", "action"],
}

CASH_FLOW_FORECAST_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "forecast30": {"type": "NUMBER"},
        "forecast60": {"type": "NUMBER"},
        "forecast90": {"type": "NUMBER"},
        "warning": {"type": "STRING"},
    },
    "required": ["forecast30", "forecast60", "forecast90", "warning"],
}

PROACTIVE_INSIGHTS_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "type": {"type": "STRING", "enum": ["Anomaly", "Opportunity", "Efficiency"]},
            "title": {"type": "STRING"},
            "description": {"type": "STRING"},
        },
        "required": ["type", "title", "description"],
    },
}

SCANNED_INVOICE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "document_type": {"type": "STRING", "enum": ["INVOICE"]},
        "vendor_name": {"type": "STRING"},
        "invoice_id": {"type": "STRING"},
        "invoice_date": {"type": "STRING", "description": "Format YYYY-MM-DD"},
        "currency": {"type": "STRING", "enum": ["IDR", "USD"]},
        "total_amount": {"type": "NUMBER"},
        "due_date": {"type": "STRING", "description": "Format YYYY-MM-DD"},
        "line_items": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "description": {"type": "STRING"},
                    "amount": {"type": "NUMBER"},
                    "recommended_gl_account": {"type": "STRING"},
                },
                "required": ["description", "amount", "recommended_gl_account"],
            },
        },
    },
    "required": [
        "document_type",
        "vendor_name",
        "invoice_id",
        "invoice_date",
        "total_amount",
        "line_items",
    ],
}

POST_JOURNAL_ENTRY_TOOL = ToolDeclaration(
    name="post_validated_journal_entry",
    description=(
        "Posts a validated journal entry to the ERP backend. Use this when "
        "transaction data is verified and ready for the General Ledger."
    ),
    parameters={
        "type": "OBJECT",
        "properties": {
            "gl_entries": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "account_id": {
                            "type": "STRING",
                            "description": "Unique GL Account ID (e.g., 1100-Kas)",
                        },
                        "debit_amount": {
                            "type": "NUMBER",
                            "description": "Amount to Debit. 0 if Credit.",
                        },
                        "credit_amount": {
                            "type": "NUMBER",
                            "description": "Amount to Credit. 0 if Debit.",
                        },
                    },
                    "required": ["account_id", "debit_amount", "credit_amount"],
                },
            },
            "transaction_source_id": {
                "type": "STRING",
                "description": "Source Document ID (e.g., INV-2025001)",
            },
            "ai_rationale": {
                "type": "STRING",
                "description": "AI explanation for the account classification for audit trail.",
            },
        },
        "required": ["gl_entries", "transaction_source_id", "ai_rationale"],
    },
)


def synthetic_rows_schema(columns: Sequence[ColumnMapping]) -> dict[str, Any]:
    return {
        "type": "ARRAY",
        "items": {
            "type": "OBJECT",
            "properties": {
                c.key: {
                    "type": "STRING",
                    "description": f"Synthetic data for column: {c.original}",
                }
                for c in columns
            },
            "required": [c.key for c in columns],
        },
    }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _plain(value: Any) -> Any:
    """Recursively convert dataclass records into JSON-friendly values."""
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _validate(adapter: Any, data: Any, what: str) -> Any:
    try:
        if isinstance(adapter, TypeAdapter):
            return adapter.validate_python(data)
        return adapter.model_validate(data)
    except ValidationError as exc:
        logger.warning("Unexpected %s response: %s", what, exc)
        raise AIResponseError(
            f"AI returned an unexpected {what} response "
            f"({exc.error_count()} validation error(s))."
        ) from exc


class Assistant:
    """
    Business-analysis capabilities backed by a generative model.

    Parameters
    ----------
    client:
        Configured `LLMClient`.
    context_char_limit:
        Maximum number of characters of JSON business data embedded in
        analyst prompts.
    """

    def __init__(
        self, client: LLMClient, context_char_limit: int = DEFAULT_CONTEXT_CHAR_LIMIT
    ) -> None:
        self.client = client
        self.context_char_limit = context_char_limit

    def _context(self, data: Any) -> str:
        return json.dumps(_plain(data), indent=2, default=str)[: self.context_char_limit]

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def financial_summary(self, chart_data: Sequence[ChartData]) -> str:
        prompt = f"""
Analyze the following financial data which represents monthly income and expense in IDR.
Provide a concise summary of the financial performance.
Highlight key trends, highest/lowest points, and potential areas for concern or opportunity.
The output should be in simple markdown format. Use ** for headings and * for list items.

Data:
{json.dumps(_plain(list(chart_data)))}
"""
        return self.client.generate_text(prompt)

    def chat_reply(self, user_input: str) -> str:
        prompt = f"""
You are an AI assistant for an ERP system.
Answer the user's question concisely based on general business knowledge.
Do not mention that you are an AI.
User's question: "{user_input}"
"""
        return self.client.generate_text(prompt)

    def analyze_question(self, question: str, context: Any) -> str:
        """
        Answer a free-form question about the business data in ``context``.

        Raises
        ------
        ValueError
            If ``question`` is blank.
        """
        if not question.strip():
            raise ValueError("Please enter a question to analyze.")
        prompt = f"""
You are an AI business analyst for an ERP system.
Analyze the provided JSON business data to answer the user's question.
Provide a clear, concise, and helpful response.
If the data is insufficient to answer, state that and explain what information is missing.
Format your response using simple markdown (e.g., use ** for bold, * for list items).

User Question: "{question}"

Business Data Context (truncated):
{self._context(context)}
"""
        return self.client.generate_text(prompt)

    # ------------------------------------------------------------------
    # Structured JSON
    # ------------------------------------------------------------------

    def lead_score(self, deal_name: str, deal_value: float) -> LeadScore:
        prompt = f"""
Analyze the following sales deal and provide a lead score (0-100) and a concise next action suggestion.
- Deal Name: "{deal_name}"
- Deal Value: IDR {deal_value}

Consider factors like deal value and keywords in the name (e.g., 'upgrade', 'maintenance', 'contract' are positive).
Return a JSON object with two keys: "score" (a number) and "action" (a string).
"""
        data = self.client.generate_json(prompt, LEAD_SCORE_SCHEMA)
        return _validate(LeadScore, data, "lead score")

    def cash_flow_forecast(self, entries: Sequence[CashFlowEntry]) -> CashFlowForecast:
        prompt = f"""
Based on the following historical cash flow data (in IDR) for the last 6 months, generate a forecast for the next 30, 60, and 90 days.
Also, provide a brief "warning" string if you detect a potential negative cash flow or a significant downturn. If there are no warnings, return an empty string for the warning.

Historical Data:
{json.dumps(_plain(list(entries)))}

Return a JSON object with keys: "forecast30", "forecast60", "forecast90" (all numbers), and "warning" (a string).
"""
        data = self.client.generate_json(prompt, CASH_FLOW_FORECAST_SCHEMA)
        return _validate(CashFlowForecast, data, "cash-flow forecast")

    def proactive_insights(self, context: Any) -> list[ProactiveInsight]:
        prompt = f"""
You are an expert AI business analyst for an ERP system.
Analyze the provided JSON data which includes invoices, products, deals, and bills.
Identify the top 3-5 most critical or valuable insights. Categorize each insight as one of the following: 'Anomaly', 'Opportunity', or 'Efficiency'.

- 'Anomaly': Unexpected negative trends, significant drops in sales for a product, overdue high-value invoices, etc.
- 'Opportunity': Potential for cross-selling based on customer behavior, deals with high lead scores needing a push, products that could be bundled.
- 'Efficiency': Suggestions for cost savings, vendors that are consistently expensive, etc.

Provide a concise title and a short description for each insight.

Business Data Context:
{self._context(context)}...
(Data has been truncated for brevity)
"""
        data = self.client.generate_json(prompt, PROACTIVE_INSIGHTS_SCHEMA)
        return _validate(_INSIGHTS, data, "insights")

    def synthetic_data(
        self, module: str, columns: Sequence[str], row_count: int, rules: str = ""
    ) -> SyntheticDataset:
        """
        Generate ``row_count`` rows of fake data for the given columns.

        Raises
        ------
        ValueError
            If no column is given or ``row_count`` is not positive.
        AIResponseError
            If the response is not an array of objects carrying every column.
        """
        mappings = [
            ColumnMapping(original=c.strip(), key=sanitize_column(c))
            for c in columns
            if c.strip()
        ]
        if not mappings or row_count <= 0:
            raise ValueError("Please provide column names and a valid number of rows.")

        keys = ", ".join(f'"{c.key}"' for c in mappings)
        rules_text = rules or (
            "Generate realistic and varied data that would be found in a real business."
        )
        prompt = f"""
You are an expert synthetic data generator for an ERP system. Your task is to create realistic fake data based on user specifications.
The user wants to generate data for the "{module}" module.

**Specifications:**
- Number of rows to generate: {row_count}
- Special rules and formatting instructions: "{rules_text}"

**Output Instructions:**
1. The output MUST be a valid JSON array of objects.
2. Each object in the array represents a single row of data.
3. Each object MUST contain these exact keys: {keys}.
4. The value for the key "{mappings[0].key}" should correspond to the column "{mappings[0].original}", and so on for all columns.
5. Ensure the generated data strictly adheres to all the specified rules. Do not add any extra text or explanations outside of the JSON array.
"""
        data = self.client.generate_json(prompt, synthetic_rows_schema(mappings))
        rows = _validate(_ROWS, data, "synthetic data")

        for n, row in enumerate(rows, start=1):
            missing = [c.key for c in mappings if c.key not in row]
            if missing:
                raise AIResponseError(
                    f"Synthetic row {n} is missing column(s): {', '.join(missing)}."
                )

        logger.info("Generated %d synthetic row(s) for %s", len(rows), module)
        return SyntheticDataset(
            module=module, columns=mappings, rows=rows, requested_rows=row_count
        )

    def parse_invoice_image(
        self, image_b64: str, mime_type: str = "image/png"
    ) -> ScannedInvoice:
        prompt = """
Analyze this invoice image and extract the following information into a strict JSON format.
Identify the vendor, date, total amount, and line items.
Crucially, recommend a GL Account for each line item (e.g., '5100-Office Supplies', '5200-Cost of Goods Sold', '5300-Utilities').
If the currency is not explicit, infer it from context (default to IDR).
"""
        parts = [inline_data_part(image_b64, mime_type), text_part(prompt)]
        data = self.client.generate_json(parts, SCANNED_INVOICE_SCHEMA)
        return _validate(ScannedInvoice, data, "invoice scan")

    # ------------------------------------------------------------------
    # Tool call
    # ------------------------------------------------------------------

    def journal_entry_from_invoice(self, invoice: Any) -> JournalEntryProposal:
        """
        Ask the model for a balanced journal entry for ``invoice``.

        Raises
        ------
        AIResponseError
            If the model did not call the journal tool or its arguments do
            not match the tool declaration.
        """
        prompt = f"""
Based on this invoice data, generate a balanced journal entry structure.
Invoice: {json.dumps(_plain(invoice), default=str)}

Rules:
1. Debit the appropriate Expense or Asset accounts based on line items.
2. Credit '2000-Accounts Payable' for the total amount.
3. Ensure Total Debit equals Total Credit.
4. Provide a clear rationale.
"""
        args = self.client.call_tool(prompt, POST_JOURNAL_ENTRY_TOOL)
        if args is None:
            raise AIResponseError("AI did not propose a journal entry.")
        return _validate(JournalEntryProposal, args, "journal entry")


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------

CHAT_GREETING = (
    "Halo! Saya asisten bisnis AI Anda. Tanyakan apa saja tentang data Anda, "
    "seperti 'Berapa laba bersih kita?' atau 'Produk mana yang paling laris?'"
)
CHAT_ERROR_REPLY = "Sorry, I encountered an error. Please try again."


@dataclass(frozen=True)
class ChatMessage:
    sender: Literal["user", "ai"]
    text: str


class ChatSession:
    """
    Cosmetic chat history around `Assistant.chat_reply`.

    Each turn is sent as an independent prompt; earlier messages are only
    kept for display.
    """

    def __init__(self, assistant: Assistant) -> None:
        self.assistant = assistant
        self.messages: list[ChatMessage] = [ChatMessage("ai", CHAT_GREETING)]

    def send(self, text: str) -> Optional[ChatMessage]:
        """Record a user turn and the reply. Blank input is ignored."""
        if not text.strip():
            return None
        self.messages.append(ChatMessage("user", text))
        try:
            reply = self.assistant.chat_reply(text)
        except AIServiceError as exc:
            logger.warning("Chat reply failed: %s", exc)
            reply = CHAT_ERROR_REPLY
        message = ChatMessage("ai", reply)
        self.messages.append(message)
        return message
