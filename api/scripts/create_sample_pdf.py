"""Upload an A4 sample document as pdfs/sample-a4.pdf for local testing."""
from io import BytesIO
from reportlab.pdfgen import canvas

from app.storage import put_bytes, original_key

A4 = (595.28, 841.89)

LINES = [
    "This is a sample PDF document for testing signature placement.",
    "",
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Sed do eiusmod",
    "tempor incididunt ut labore et dolore magna aliqua. Ut enim ad minim",
    "veniam, quis nostrud exercitation ullamco laboris nisi ut aliquip ex ea",
    "commodo consequat.",
    "",
    "",
    "Signature: _________________________________",
    "",
    "Date: _____________________",
]

def render_sample() -> bytes:
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    width, height = A4
    c.setFont("Helvetica-Bold", 24)
    c.drawString(50, height - 50, "Sample Document for Signature")
    c.setFont("Helvetica", 12)
    y = height - 100
    for line in LINES:
        c.drawString(50, y, line)
        y -= 20
    c.showPage(); c.save()
    return buf.getvalue()

if __name__ == "__main__":
    key = original_key("sample-a4")
    put_bytes(key, render_sample(), "application/pdf")
    print(f"Uploaded sample PDF to {key}")
