import binascii
import logging
import time
import uuid
from dataclasses import dataclass, field as dc_field
from typing import List, Optional, Sequence

from .audit import AuditStore, record_signing
from .compositing import SkippedField, composite_fields
from .errors import DocumentNotFound, MissingInput, UnsupportedAssetFormat
from .schemas import PdfField, SignerMeta
from .storage import ObjectNotFound, get_bytes, put_bytes, original_key, signed_key
from .utils import b64image_to_bytes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SigningOutcome:
    filename: str
    signed_key: str
    pdf_bytes: bytes
    original_hash: str
    signed_hash: str
    audit_id: Optional[int] = None
    warnings: List[SkippedField] = dc_field(default_factory=list)


def _require_inputs(pdf_id, fields, signature_image_b64):
    missing = []
    if not pdf_id:
        missing.append("pdfId")
    if fields is None:  # an empty list is a valid (no-op) field set
        missing.append("fields")
    if not signature_image_b64:
        missing.append("signatureImageBase64")
    if missing:
        raise MissingInput(missing)


def load_original(pdf_id: str) -> bytes:
    try:
        return get_bytes(original_key(pdf_id))
    except ObjectNotFound as exc:
        raise DocumentNotFound(pdf_id) from exc


def _signed_filename() -> str:
    return f"signed-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}.pdf"


def sign_pdf(
    pdf_id: Optional[str],
    fields: Optional[Sequence[PdfField]],
    signature_image_b64: Optional[str],
    signer_meta: Optional[SignerMeta] = None,
    store: Optional[AuditStore] = None,
) -> SigningOutcome:
    """Stamp the signature into ``pdf_id``, store the result and audit it."""
    _require_inputs(pdf_id, fields, signature_image_b64)
    original = load_original(pdf_id)
    try:
        asset_bytes = b64image_to_bytes(signature_image_b64)
    except (binascii.Error, ValueError) as exc:
        raise UnsupportedAssetFormat() from exc

    result = composite_fields(original, fields, asset_bytes)

    filename = _signed_filename()
    key = signed_key(filename)
    put_bytes(key, result.pdf_bytes, content_type="application/pdf")
    report = record_signing(original, result.pdf_bytes, pdf_id, fields, signer_meta or SignerMeta(), store)
    logger.info(
        "signed %s -> %s (%d placed, %d skipped, audit=%s)",
        pdf_id, key, len(result.placements), len(result.skipped), report.audit_id,
    )
    return SigningOutcome(
        filename=filename,
        signed_key=key,
        pdf_bytes=result.pdf_bytes,
        original_hash=report.original_hash,
        signed_hash=report.signed_hash,
        audit_id=report.audit_id,
        warnings=list(result.skipped),
    )
