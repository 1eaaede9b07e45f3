import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from .routers import pdfs, signing, audit
from .db import init_db
from .errors import InvalidInput, SigningError
from .config import LOG_LEVEL

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Signature Injection API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
def on_startup():
    try:
        init_db()
    except SQLAlchemyError as exc:
        # signing keeps working; record_signing drops the audit row
        logger.warning("audit database unavailable, audit logging disabled: %s", exc)

def _error_body(exc: SigningError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message, "reason": exc.code},
    )

@app.exception_handler(SigningError)
def signing_error_handler(request: Request, exc: SigningError):
    if exc.status_code >= 500:
        logger.error("signing failed: %s", exc.message)
    return _error_body(exc)

def describe_validation_errors(errors) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "Invalid request: " + "; ".join(parts)

@app.exception_handler(RequestValidationError)
def validation_error_handler(request: Request, exc: RequestValidationError):
    return _error_body(InvalidInput(describe_validation_errors(exc.errors())))

app.include_router(pdfs.router, prefix="/api", tags=["pdfs"])
app.include_router(signing.router, prefix="/api", tags=["signing"])
app.include_router(audit.router, prefix="/api", tags=["audit"])
app.include_router(pdfs.signed_router, prefix="/signed", tags=["signed"])

@app.get("/")
def root():
    return {"ok": True, "service": "signature-injection-api"}
