"""
FastAPI backend: contact registration API in front of the spreadsheet store.
Run with uvicorn: uvicorn api.main:app --reload --port 5000
"""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from invitees.application import (
    DEFAULT_SHEET_NAME,
    BackendError,
    ContactCreated,
    ContactData,
    Duplicate,
    Invalid,
    RegistrationService,
)
from invitees.infrastructure import build_sheet_store

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

API_NAME = "Invitee Registry API"
DEFAULT_ALLOWED_ORIGINS = "http://localhost:3000"
# Preview deployments of the form.
ALLOWED_ORIGIN_REGEX = r"https://.*\.vercel\.app"


def _allowed_origins() -> list[str]:
    raw = os.environ.get("ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS)
    return [o.strip() for o in raw.split(",") if o.strip()]


def _sheet_name() -> str:
    return os.environ.get("SHEET_NAME", DEFAULT_SHEET_NAME).strip() or DEFAULT_SHEET_NAME


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        store = build_sheet_store()
    except BackendError as e:
        logger.error("Failed to start server: %s", e)
        logger.error("Make sure Google Sheets credentials are configured in .env")
        raise
    service = RegistrationService(store, sheet_name=_sheet_name())
    await run_in_threadpool(service.ensure_headers)
    app.state.service = service
    logger.info("API ready. Health check: /health. Sheet: %s", service.sheet_url())
    yield
    logger.info("Shutting down")


app = FastAPI(title=API_NAME, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_origin_regex=ALLOWED_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_service(request: Request) -> RegistrationService:
    return request.app.state.service


def _failure(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        content={"success": False, "message": message, **extra},
        status_code=status_code,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _failure(404, "Route not found")
    return _failure(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Rejected request body on %s: %s", request.url.path, exc.errors())
    return _failure(400, "Invalid request body")


# --- REST: health ---


@app.get("/health")
def health():
    return {
        "status": "OK",
        "message": f"{API_NAME} is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# --- REST: contacts ---


class CreateContactBody(BaseModel):
    # Optional so that missing fields reach the service and get field-specific messages.
    name: str | None = None
    email: str | None = None
    phone: str | None = None


@app.post("/api/contacts")
def create_contact(
    body: CreateContactBody,
    service: RegistrationService = Depends(get_service),
):
    data = ContactData(name=body.name, email=body.email, phone=body.phone)
    try:
        result = service.create(data)
    except BackendError as e:
        logger.error("Error creating contact: %s", e)
        return _failure(500, str(e))
    except Exception as e:
        logger.exception("Error creating contact")
        return _failure(500, str(e) or "Internal server error")
    if isinstance(result, Invalid):
        return _failure(400, result.reason)
    if isinstance(result, Duplicate):
        return _failure(409, result.message, duplicate=True, field=result.field)
    if not isinstance(result, ContactCreated):
        return _failure(500, "Internal server error")
    return JSONResponse(
        content={
            "success": True,
            "message": "Contact saved successfully",
            "data": result.contact.to_dict(),
        },
        status_code=201,
    )


@app.get("/api/contacts/count")
def count_contacts(service: RegistrationService = Depends(get_service)):
    try:
        result = service.count()
    except Exception:
        logger.exception("Error counting contacts")
        return _failure(500, "Error counting contacts")
    return {"success": True, "count": result.count}


@app.get("/api/contacts/sheet-url")
def sheet_url(service: RegistrationService = Depends(get_service)):
    return {"success": True, "url": service.sheet_url()}
