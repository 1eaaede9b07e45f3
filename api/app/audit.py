"""Integrity digests and the audit trail for signing runs.

Both digests are SHA-256 over the exact byte streams, so anyone holding the
original and the signed PDF can recompute them without access to the audit
store. Persisting the record is best effort: a failing store downgrades the
run to unaudited, it never fails it.
"""
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol, Sequence, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .errors import PersistenceUnavailable
from .models import AuditLog
from .schemas import AuditLogOut, PdfField, SignerMeta
from .utils import canonical_json, sha256_bytes

logger = logging.getLogger(__name__)

GENESIS_HASH = "0" * 64


@dataclass(frozen=True)
class AuditRecord:
    document_id: str
    original_hash: str
    signed_hash: str
    fields: Tuple[PdfField, ...]
    signer_meta: SignerMeta
    created_at: datetime

    def payload(self) -> dict:
        return {
            "pdfId": self.document_id,
            "originalHash": self.original_hash,
            "signedHash": self.signed_hash,
            "fields": [f.model_dump(mode="json", by_alias=True) for f in self.fields],
            "signerMeta": self.signer_meta.model_dump(mode="json", by_alias=True),
            "createdAt": self.created_at.isoformat(),
        }


class AuditStore(Protocol):
    def save(self, record: AuditRecord) -> int: ...


class SqlAuditStore:
    """Writes audit records to the ``auditlog`` table as a hash chain."""

    def __init__(self, session: Session):
        self.session = session

    def save(self, record: AuditRecord) -> int:
        try:
            last = self.session.exec(select(AuditLog).order_by(AuditLog.id.desc())).first()
            prev_hash = last.record_hash if last and last.record_hash else GENESIS_HASH
            payload = record.payload()
            row = AuditLog(
                pdf_id=record.document_id,
                original_hash=record.original_hash,
                signed_hash=record.signed_hash,
                fields_json=canonical_json(payload["fields"]),
                signer_meta_json=canonical_json(payload["signerMeta"]),
                created_at=record.created_at,
                prev_hash=prev_hash,
            )
            row.record_hash = sha256_bytes((prev_hash + canonical_json(payload)).encode())
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceUnavailable(f"audit log write failed: {exc}") from exc
        return row.id


@dataclass(frozen=True)
class IntegrityReport:
    original_hash: str
    signed_hash: str
    record: AuditRecord
    audit_id: Optional[int] = None


def record_signing(
    original: bytes,
    signed: bytes,
    document_id: str,
    fields: Sequence[PdfField],
    signer_meta: SignerMeta,
    store: Optional[AuditStore],
) -> IntegrityReport:
    record = AuditRecord(
        document_id=document_id,
        original_hash=sha256_bytes(original),
        signed_hash=sha256_bytes(signed),
        fields=tuple(fields),
        signer_meta=signer_meta,
        created_at=datetime.now(timezone.utc),
    )
    audit_id = None
    if store is None:
        logger.warning("no audit store configured; signing %s without an audit log", document_id)
    else:
        try:
            audit_id = store.save(record)
        except Exception as exc:
            # the hashes are still returned, so the signature stays verifiable
            logger.warning("audit log not saved for %s: %s", document_id, exc)
    return IntegrityReport(
        original_hash=record.original_hash,
        signed_hash=record.signed_hash,
        record=record,
        audit_id=audit_id,
    )


def audit_log_out(row: AuditLog) -> AuditLogOut:
    return AuditLogOut(
        id=row.id,
        pdf_id=row.pdf_id,
        original_hash=row.original_hash,
        signed_hash=row.signed_hash,
        fields=json.loads(row.fields_json or "[]"),
        signer_meta=json.loads(row.signer_meta_json or "{}"),
        created_at=row.created_at,
        prev_hash=row.prev_hash,
        record_hash=row.record_hash or "",
    )


def find_by_hash(session: Session, digest: str) -> Tuple[Optional[str], Optional[AuditLog]]:
    """Look up the newest audit row whose signed or original hash equals ``digest``."""
    row = session.exec(
        select(AuditLog)
        .where(or_(AuditLog.signed_hash == digest, AuditLog.original_hash == digest))
        .order_by(AuditLog.id.desc())
    ).first()
    if row is None:
        return None, None
    return ("signed" if row.signed_hash == digest else "original"), row
