from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

class FieldType(str, Enum):
    text = "text"
    signature = "signature"
    image = "image"
    date = "date"
    radio = "radio"

class PdfField(BaseModel):
    # geometry is normalized to page size, top-left origin (UI convention)
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    pdf_id: str = Field(alias="pdfId")
    page_index: int = Field(alias="pageIndex")
    type: FieldType
    x_pct: float = Field(alias="xPct", ge=0, le=1)
    y_pct: float = Field(alias="yPct", ge=0, le=1)
    w_pct: float = Field(alias="wPct", gt=0, le=1)
    h_pct: float = Field(alias="hPct", gt=0, le=1)

class SignPdfRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pdf_id: Optional[str] = Field(default=None, alias="pdfId")
    fields: Optional[List[PdfField]] = None
    signature_image_base64: Optional[str] = Field(default=None, alias="signatureImageBase64")

class SkippedFieldOut(BaseModel):
    field_id: str = Field(serialization_alias="fieldId")
    reason: str
    detail: str

class SignPdfResponse(BaseModel):
    success: bool = True
    signed_pdf_url: str = Field(serialization_alias="signedPdfUrl")
    audit_log_id: Optional[int] = Field(default=None, serialization_alias="auditLogId")
    original_hash: str = Field(serialization_alias="originalHash")
    signed_hash: str = Field(serialization_alias="signedHash")
    warnings: List[SkippedFieldOut] = []

class SignerMeta(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ip: Optional[str] = None
    user_agent: Optional[str] = Field(default=None, alias="userAgent")

class AuditLogOut(BaseModel):
    id: int
    pdf_id: str = Field(serialization_alias="pdfId")
    original_hash: str = Field(serialization_alias="originalHash")
    signed_hash: str = Field(serialization_alias="signedHash")
    fields: list
    signer_meta: dict = Field(serialization_alias="signerMeta")
    created_at: datetime = Field(serialization_alias="createdAt")
    prev_hash: str = Field(serialization_alias="prevHash")
    record_hash: str = Field(serialization_alias="recordHash")

class VerifyResponse(BaseModel):
    sha256: str
    matched: Optional[str] = None  # "signed" | "original"
    audit_log: Optional[AuditLogOut] = Field(default=None, serialization_alias="auditLog")
