"""Invoice Document — pure rendering of the downloadable invoice placeholder.

Invariants:
    - Output depends only on the invoice payload and generated_on (deterministic)
    - Missing optional customer/invoice fields render as "N/A"
    - Filename is always invoice-<id>.<extension>

Design Decisions:
    - Plain text labeled as application/pdf: the encoding is a replaceable
      detail, only layout, filename and NotFound behavior are contractual
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

DOCUMENT_MEDIA_TYPE = "application/pdf"
DOCUMENT_EXTENSION = "pdf"


@dataclass(frozen=True)
class InvoiceDocument:
    """Rendered document ready to be sent as an attachment."""
    filename: str
    media_type: str
    content: str


def document_filename(invoice_id: int, extension: str = DOCUMENT_EXTENSION) -> str:
    return f"invoice-{invoice_id}.{extension}"


def format_document_date(value: date | str) -> str:
    """Render a date as e.g. 'Mon Jan 15 2024'."""
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    return value.strftime("%a %b %d %Y")


def _or_na(value: object) -> str:
    return str(value) if value not in (None, "") else "N/A"


def render_invoice_document(invoice: dict, generated_on: date) -> str:
    """Render invoice (detail projection, full customer) into document text."""
    customer = invoice["customer"]
    amount = Decimal(str(invoice["amount"])).quantize(Decimal("0.01"))
    lines = [
        f"INVOICE #{invoice['id']}",
        f"Date: {format_document_date(invoice['date'])}",
        f"Customer: {customer['name']}",
        f"Address: {_or_na(customer.get('address'))}",
        f"Phone: {_or_na(customer.get('phone'))}",
        f"Email: {_or_na(customer.get('email'))}",
        f"Job Location: {_or_na(customer.get('jobLocation'))}",
        "",
        f"Description: {invoice['description']}",
        f"Amount: ${amount}",
        f"Note: {_or_na(invoice.get('note'))}",
        "",
        f"Generated on: {format_document_date(generated_on)}",
    ]
    return "\n".join(lines) + "\n"


def build_invoice_document(invoice: dict, generated_on: date) -> InvoiceDocument:
    return InvoiceDocument(
        filename=document_filename(invoice["id"]),
        media_type=DOCUMENT_MEDIA_TYPE,
        content=render_invoice_document(invoice, generated_on),
    )
