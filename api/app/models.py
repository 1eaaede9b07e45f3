from typing import Optional
from datetime import datetime, timezone
from sqlmodel import SQLModel, Field as ORMField

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class AuditLog(SQLModel, table=True):
    id: Optional[int] = ORMField(default=None, primary_key=True)
    pdf_id: str = ORMField(index=True)
    original_hash: str = ORMField(index=True)  # sha256 hex of the input PDF
    signed_hash: str = ORMField(index=True)    # sha256 hex of the stamped PDF
    fields_json: str = "[]"
    signer_meta_json: str = "{}"
    created_at: datetime = ORMField(default_factory=_utcnow)
    prev_hash: str = "0" * 64
    record_hash: Optional[str] = None
