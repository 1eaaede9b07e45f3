# Celery entry point for signing outside the request cycle.
# Run with: celery -A app.tasks worker -Q signing

from celery import Celery
from pydantic import TypeAdapter, ValidationError
from sqlmodel import Session
from typing import List
from .config import REDIS_URL, WORKER_QUEUE
from .audit import SqlAuditStore
from .errors import InvalidInput
from .schemas import PdfField, SignerMeta
from .service import sign_pdf
from . import db

cel = Celery("signing", broker=REDIS_URL, backend=REDIS_URL)

_fields_adapter = TypeAdapter(List[PdfField])

def _invalid(exc: ValidationError) -> InvalidInput:
    parts = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
    return InvalidInput("Invalid request: " + "; ".join(parts))

@cel.task(name="sign_document", queue=WORKER_QUEUE)
def sign_document(pdf_id: str, fields: list, signature_image_b64: str, signer_meta: dict = None):
    try:
        parsed = _fields_adapter.validate_python(fields) if fields is not None else None
        meta = SignerMeta.model_validate(signer_meta or {})
    except ValidationError as exc:
        raise _invalid(exc) from exc
    with Session(db.engine) as session:
        outcome = sign_pdf(pdf_id, parsed, signature_image_b64, signer_meta=meta, store=SqlAuditStore(session))
    return {
        "pdf": outcome.signed_key,
        "sha256_original": outcome.original_hash,
        "sha256_final": outcome.signed_hash,
        "audit_log_id": outcome.audit_id,
        "warnings": [w.field_id for w in outcome.warnings],
    }
