from fpdf import FPDF

from app.models.document import Document
from app.services.lifecycle import SignatureMode, status_label


def _latin1(text: str) -> str:
    """Encode to latin-1, replacing unsupported chars: fpdf built-in fonts are latin-1 only."""
    return text.encode("latin-1", errors="replace").decode("latin-1")


def _party(label: str, name: str | None, email: str | None) -> str:
    return f"{label}: {name or 'Unknown'} <{email or '-'}>"


def generate_summary_pdf(doc: Document) -> bytes:
    """Render a one-page summary of a signature request and its current state."""
    pdf = FPDF()
    pdf.set_margins(20, 20, 20)
    pdf.add_page()

    # Title
    pdf.set_font("Helvetica", "B", 18)
    pdf.multi_cell(0, 10, _latin1(doc.title or "Signature Request"), align="L")
    pdf.ln(2)

    # Parties and timeline
    pdf.set_font("Helvetica", "", 11)
    pdf.set_text_color(80, 80, 80)
    sender, recipient = doc.sender, doc.recipient
    pdf.cell(0, 7, _latin1(_party("From", sender and sender.name, sender and sender.email)), ln=True)
    pdf.cell(0, 7, _latin1(_party("To", recipient and recipient.name, recipient and recipient.email)), ln=True)
    pdf.cell(0, 7, _latin1(f"Status: {status_label(doc.status)}"), ln=True)
    pdf.cell(0, 7, _latin1(f"Requested: {doc.requested_at}"), ln=True)
    if doc.signed_at:
        pdf.cell(0, 7, _latin1(f"Signed: {doc.signed_at}"), ln=True)
    if doc.completed_at:
        pdf.cell(0, 7, _latin1(f"Completed: {doc.completed_at}"), ln=True)
    if doc.file_name:
        pdf.cell(0, 7, _latin1(f"Attachment: {doc.file_name}"), ln=True)

    # Divider
    pdf.ln(3)
    pdf.set_draw_color(200, 200, 200)
    pdf.line(20, pdf.get_y(), 190, pdf.get_y())
    pdf.ln(5)

    pdf.set_text_color(0, 0, 0)
    if doc.signature_mode == SignatureMode.TYPED.value and doc.signature_text:
        pdf.set_font("Helvetica", "I", 22)
        pdf.multi_cell(0, 12, _latin1(doc.signature_text))
    elif doc.signature_mode == SignatureMode.DRAWN.value:
        pdf.set_font("Helvetica", "I", 12)
        pdf.multi_cell(0, 7, "Drawn signature on file.")
    else:
        pdf.set_font("Helvetica", "", 10)
        pdf.multi_cell(0, 5, "This document has not been signed yet.")

    return bytes(pdf.output())
