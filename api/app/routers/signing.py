from fastapi import APIRouter, Depends, Request
from sqlmodel import Session
from ..audit import SqlAuditStore
from ..db import get_session
from ..schemas import SignPdfRequest, SignPdfResponse, SignerMeta, SkippedFieldOut
from ..service import sign_pdf

router = APIRouter()

def _signer_meta(request: Request) -> SignerMeta:
    return SignerMeta(
        ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )

@router.post("/sign-pdf")
def sign_pdf_endpoint(payload: SignPdfRequest, request: Request, session: Session = Depends(get_session)):
    outcome = sign_pdf(
        payload.pdf_id,
        payload.fields,
        payload.signature_image_base64,
        signer_meta=_signer_meta(request),
        store=SqlAuditStore(session),
    )
    body = SignPdfResponse(
        signed_pdf_url=str(request.url_for("get_signed_pdf", filename=outcome.filename)),
        audit_log_id=outcome.audit_id,
        original_hash=outcome.original_hash,
        signed_hash=outcome.signed_hash,
        warnings=[SkippedFieldOut(field_id=w.field_id, reason=w.reason, detail=w.detail) for w in outcome.warnings],
    )
    return body.model_dump(by_alias=True)
