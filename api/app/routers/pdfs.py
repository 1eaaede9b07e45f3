from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Response
from ..storage import ObjectNotFound, get_bytes, original_key, signed_key

router = APIRouter()

@router.get("/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

@router.get("/pdfs/{pdf_id}")
def get_pdf(pdf_id: str):
    try:
        pdf_bytes = get_bytes(original_key(pdf_id))
    except ObjectNotFound:
        raise HTTPException(404, f"PDF not found: {pdf_id}")
    return Response(content=pdf_bytes, media_type="application/pdf")

# mounted without the /api prefix, mirrors the static /signed directory
signed_router = APIRouter()

@signed_router.get("/{filename}")
def get_signed_pdf(filename: str):
    if "/" in filename or not filename.endswith(".pdf"):
        raise HTTPException(404, "not found")
    try:
        pdf_bytes = get_bytes(signed_key(filename))
    except ObjectNotFound:
        raise HTTPException(404, f"signed PDF not found: {filename}")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
