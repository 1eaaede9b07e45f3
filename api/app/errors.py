"""Failure kinds raised by the signing pipeline.

Request-level errors carry an HTTP status and are rendered by the handler
registered in ``app.main``. ``GeometryError`` and ``PageOutOfRange`` are
field-level: the pipeline catches them, logs, and moves on to the next field.
"""
from typing import Iterable, Optional


class SigningError(Exception):
    code = "signing_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingInput(SigningError):
    code = "missing_input"
    status_code = 400

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required fields: {', '.join(self.missing)}")


class InvalidInput(SigningError):
    code = "invalid_input"
    status_code = 422


class DocumentNotFound(SigningError):
    code = "document_not_found"
    status_code = 404

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(f"PDF not found: {document_id}")


class UnsupportedAssetFormat(SigningError):
    code = "unsupported_asset_format"
    status_code = 400

    def __init__(self, tried: Iterable[str] = ("PNG", "JPEG")):
        self.tried = list(tried)
        super().__init__(
            f"Invalid image format. Only {' and '.join(self.tried)} are supported."
        )


class CompositingFailed(SigningError):
    code = "compositing_failed"
    status_code = 500


class PersistenceUnavailable(SigningError):
    code = "persistence_unavailable"


class GeometryError(SigningError):
    code = "geometry_error"
    status_code = 422

    def __init__(self, message: str, field_id: Optional[str] = None):
        super().__init__(message)
        self.field_id = field_id


class PageOutOfRange(SigningError):
    code = "page_out_of_range"
    status_code = 422

    def __init__(self, field_id: str, page_index: int, page_count: int):
        self.field_id = field_id
        self.page_index = page_index
        self.page_count = page_count
        super().__init__(
            f"Page {page_index} not found (document has {page_count}), skipping field {field_id}"
        )
