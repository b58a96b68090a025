"""
FastAPI backend: subscriber list and URL shortener REST API.
Run with uvicorn: uvicorn api.main:app --reload
"""

import hmac
import logging
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

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, ConfigDict, Field

from api.settings import Settings, load_settings
from portfolio.application import KeyValueStore, ShortLinkService, SubscriberService
from portfolio.domain import (
    AuthError,
    LinkNotFound,
    LinkUnavailable,
    ShortLink,
    StorageError,
    SubscriberNotFound,
    ValidationError,
)
from portfolio.infrastructure import (
    InMemoryKeyValueStore,
    KeyValueSubscriberRepository,
    RedisKeyValueStore,
    to_e164,
)

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)


def _build_store(settings: Settings) -> KeyValueStore:
    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()
    return RedisKeyValueStore.from_url(settings.redis_url)


def _get_settings(app: FastAPI) -> Settings:
    if getattr(app.state, "settings", None) is None:
        app.state.settings = load_settings()
    return app.state.settings


def _get_store(app: FastAPI) -> KeyValueStore:
    if getattr(app.state, "store", None) is None:
        app.state.store = _build_store(_get_settings(app))
    return app.state.store


def get_subscriber_service(app: FastAPI) -> SubscriberService:
    repo = KeyValueSubscriberRepository(_get_store(app))
    return SubscriberService(repo, format_phone=to_e164)


def get_short_link_service(app: FastAPI) -> ShortLinkService:
    return ShortLinkService(_get_store(app))


def _require_api_key(api_key: str | None, settings: Settings) -> None:
    supplied = (api_key or "").encode()
    if not supplied or not any(
        hmac.compare_digest(supplied, key.encode()) for key in settings.admin_api_keys
    ):
        raise AuthError("Unauthorized")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.store = None
    settings = load_settings()
    logging.getLogger().setLevel(settings.log_level)
    app.state.settings = settings
    try:
        app.state.store = _build_store(settings)
        logger.info("Storage backend: %s", app.state.store.storage_type)
        if not app.state.store.ping():
            logger.warning("Storage backend did not answer ping at startup")
        yield
    finally:
        close = getattr(app.state.store, "close", None)
        if close is not None:
            close()


app = FastAPI(title="Portfolio API", lifespan=lifespan)


# --- Error translation ---


@app.exception_handler(ValidationError)
def _validation_error(request: Request, exc: ValidationError):
    return JSONResponse(content={"message": str(exc)}, status_code=400)


@app.exception_handler(RequestValidationError)
def _request_validation_error(request: Request, exc: RequestValidationError):
    # Shortener routes report errors under "error", subscriber routes under "message".
    key = "error" if request.url.path.startswith("/url-shortner") else "message"
    return JSONResponse(content={key: "Invalid request body"}, status_code=400)


@app.exception_handler(AuthError)
def _auth_error(request: Request, exc: AuthError):
    return JSONResponse(content={"message": "Unauthorized"}, status_code=401)


@app.exception_handler(SubscriberNotFound)
def _subscriber_not_found(request: Request, exc: SubscriberNotFound):
    return JSONResponse(content={"message": "Subscriber not found"}, status_code=404)


@app.exception_handler(StorageError)
def _storage_error(request: Request, exc: StorageError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(content={"message": "Internal server error"}, status_code=500)


# --- REST: health ---


@app.get("/health")
def health(request: Request):
    store = _get_store(request.app)
    if not store.ping():
        return JSONResponse(content={"status": "unavailable"}, status_code=503)
    return {"status": "ok", "storageType": store.storage_type}


# --- REST: subscribers ---


class SubscribeBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: str | None = Field(None, alias="fullName")
    phone_number: str | None = Field(None, alias="phoneNumber")
    email: str | None = None


@app.post("/subscribers")
def subscribe(body: SubscribeBody, request: Request):
    service = get_subscriber_service(request.app)
    result = service.subscribe(body.full_name, body.phone_number, body.email)
    if result.is_new:
        return JSONResponse(
            content={
                "message": "Subscription successful",
                "success": True,
                "isNewSubscription": True,
            },
            status_code=201,
        )
    return JSONResponse(
        content={
            "message": "Subscription updated successfully",
            "success": True,
            "isNewSubscription": False,
        },
        status_code=200,
    )


@app.get("/subscribers")
def list_subscribers(
    request: Request,
    api_key: str | None = Query(None, alias="apiKey"),
):
    _require_api_key(api_key, _get_settings(request.app))
    service = get_subscriber_service(request.app)
    subscribers = {s.id: s.to_dict() for s in service.list_subscribers()}
    return {"subscribers": subscribers, "storageType": service.storage_type}


@app.get("/subscribers/recipients")
def list_recipients(
    request: Request,
    api_key: str | None = Query(None, alias="apiKey"),
):
    _require_api_key(api_key, _get_settings(request.app))
    recipients = get_subscriber_service(request.app).recipients()
    return {"phoneNumbers": recipients.phone_numbers, "emails": recipients.emails}


@app.delete("/subscribers")
def delete_subscriber(
    request: Request,
    api_key: str | None = Query(None, alias="apiKey"),
    subscriber_id: str | None = Query(None, alias="id"),
    phone: str | None = Query(None),
    phone_number: str | None = Query(None, alias="phoneNumber"),
    email: str | None = Query(None),
):
    _require_api_key(api_key, _get_settings(request.app))
    service = get_subscriber_service(request.app)
    service.unsubscribe(
        subscriber_id=subscriber_id,
        phone=phone or phone_number,
        email=email,
    )
    return {"message": "Subscriber deleted successfully"}


# --- REST: URL shortener ---


class ShortenBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str | None = None
    expires_at: str | None = Field(None, alias="expiresAt")


def _base_url(request: Request) -> str:
    configured = _get_settings(request.app).public_base_url
    if configured:
        return configured
    return f"{request.url.scheme}://{request.url.netloc}"


def _link_item(link: ShortLink, base_url: str) -> dict:
    return {
        "id": link.code,
        "shortCode": link.code,
        "originalUrl": link.original_url,
        "shortUrl": f"{base_url}/s/{link.code}",
        "clickCount": link.click_count,
        "createdAt": link.created_at,
        "expiresAt": link.expires_at,
        "isRevoked": link.revoked,
    }


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)


@app.post("/url-shortner")
def create_short_url(body: ShortenBody, request: Request):
    service = get_short_link_service(request.app)
    try:
        result = service.shorten(body.url, body.expires_at)
    except ValidationError as e:
        return _error(str(e), 400)
    except StorageError:
        logger.exception("Error creating short URL")
        return _error("Failed to create short URL", 500)
    link = result.link
    short_url = f"{_base_url(request)}/s/{link.code}"
    if not result.exists:
        return {"shortCode": link.code, "shortUrl": short_url, "exists": False}
    return {
        "shortCode": link.code,
        "shortUrl": short_url,
        "exists": True,
        "clickCount": link.click_count,
        "createdAt": link.created_at,
        "expiresAt": link.expires_at,
        "isRevoked": link.revoked,
    }


@app.get("/url-shortner")
def get_short_url(
    request: Request,
    code: str | None = None,
    action: str | None = None,
):
    service = get_short_link_service(request.app)
    try:
        if action == "getAll":
            base_url = _base_url(request)
            return [_link_item(link, base_url) for link in service.list_all()]
        if not code:
            return _error("Short code is required", 400)
        link = service.get(code)
    except LinkNotFound:
        return _error("URL not found", 404)
    except StorageError:
        logger.exception("Error retrieving URL")
        return _error("Failed to retrieve URL", 500)
    return {
        "url": link.original_url,
        "clicks": link.click_count,
        "created": link.created_at,
        "expiresAt": link.expires_at,
        "revoked": link.revoked,
        "code": link.code,
    }


@app.delete("/url-shortner")
def delete_short_url(
    request: Request,
    code: str | None = None,
    action: str | None = None,
):
    if not code:
        return _error("Short code is required", 400)
    service = get_short_link_service(request.app)
    try:
        if action == "revoke":
            revoked = service.toggle_revoke(code)
            message = "URL revoked successfully" if revoked else "URL reactivated successfully"
            return {"success": True, "message": message, "isRevoked": revoked}
        service.delete(code)
    except LinkNotFound:
        return _error("URL not found", 404)
    except StorageError:
        logger.exception("Error deleting URL")
        return _error("Failed to delete URL", 500)
    return {"success": True, "message": "URL deleted successfully"}


@app.get("/s/{code}")
def follow_short_url(code: str, request: Request):
    service = get_short_link_service(request.app)
    try:
        target = service.follow(code)
    except LinkUnavailable as e:
        logger.info("Short code %s unavailable: %s", code, e.reason)
        if e.reason == "not_found":
            return RedirectResponse(url="/404")
        return RedirectResponse(url=f"/404?reason={e.reason}")
    except StorageError:
        logger.exception("Error redirecting %s", code)
        return RedirectResponse(url="/404")
    return RedirectResponse(url=target)
