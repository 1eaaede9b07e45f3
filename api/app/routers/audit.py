from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlmodel import Session
from ..audit import audit_log_out, find_by_hash
from ..db import get_session
from ..models import AuditLog
from ..schemas import VerifyResponse
from ..utils import sha256_bytes

router = APIRouter()

@router.get("/audit-logs/{audit_id}")
def get_audit_log(audit_id: int, session: Session = Depends(get_session)):
    row = session.get(AuditLog, audit_id)
    if not row:
        raise HTTPException(404, "audit log not found")
    return audit_log_out(row).model_dump(mode="json", by_alias=True)

@router.post("/verify")
async def verify_pdf(file: UploadFile = File(...), session: Session = Depends(get_session)):
    """Hash an uploaded PDF and report which audit record, if any, it belongs to."""
    data = await file.read()
    digest = sha256_bytes(data)
    matched, row = find_by_hash(session, digest)
    resp = VerifyResponse(
        sha256=digest,
        matched=matched,
        audit_log=audit_log_out(row) if row else None,
    )
    return resp.model_dump(mode="json", by_alias=True)
