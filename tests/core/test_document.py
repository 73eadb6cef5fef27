"""Tests for the invoice document placeholder — layout, filename, N/A fallbacks."""

from datetime import date

from invoice_api.core.document import (
    build_invoice_document,
    document_filename,
    format_document_date,
    render_invoice_document,
)

INVOICE = {
    "id": 7,
    "date": "2024-01-15",
    "description": "Website Development Services",
    "amount": 2500.0,
    "note": None,
    "customer": {
        "name": "John Smith",
        "address": "123 Main St",
        "phone": None,
        "email": "john.smith@email.com",
        "jobLocation": "",
    },
}


def test_filename_pattern():
    assert document_filename(7) == "invoice-7.pdf"


def test_date_format():
    assert format_document_date("2024-01-15") == "Mon Jan 15 2024"
    assert format_document_date(date(2024, 3, 1)) == "Fri Mar 01 2024"


def test_render_layout():
    text = render_invoice_document(INVOICE, date(2024, 3, 1))
    assert text.splitlines() == [
        "INVOICE #7",
        "Date: Mon Jan 15 2024",
        "Customer: John Smith",
        "Address: 123 Main St",
        "Phone: N/A",
        "Email: john.smith@email.com",
        "Job Location: N/A",
        "",
        "Description: Website Development Services",
        "Amount: $2500.00",
        "Note: N/A",
        "",
        "Generated on: Fri Mar 01 2024",
    ]


def test_render_is_deterministic():
    day = date(2024, 3, 1)
    assert render_invoice_document(INVOICE, day) == render_invoice_document(INVOICE, day)


def test_document_is_labeled_as_pdf_attachment():
    document = build_invoice_document(INVOICE, date(2024, 3, 1))
    assert document.filename == "invoice-7.pdf"
    assert document.media_type == "application/pdf"
    assert document.content.startswith("INVOICE #7\n")
