import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from .config import get_settings
from .db import close_store_connection, connect_to_store, is_connected
from .routers import database

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title="Document Gateway API", default_response_class=ORJSONResponse)
settings = get_settings()

# CORS origins are a CSV list
_allow_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
logger.info("[CORS] allow_origins=%s", _allow_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location"],
    allow_credentials=True,
)
app.add_middleware(GZipMiddleware, minimum_size=512)


@app.middleware("http")
async def log_slow_requests(request, call_next):
    t0 = time.time()
    response = await call_next(request)
    dt = (time.time() - t0) * 1000
    if dt >= get_settings().slow_request_ms:
        logger.warning(
            "[perf] slow request %s %s %sms status=%s",
            request.method,
            request.url.path,
            int(dt),
            response.status_code,
        )
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_as_bad_request(request: Request, exc: RequestValidationError):
    # Malformed bodies are reported like any other failed operation
    details = "; ".join(str(err.get("msg", "")) for err in exc.errors()) or "Invalid request"
    return ORJSONResponse(details, status_code=400)


@app.on_event("startup")
async def startup():
    await connect_to_store()


@app.on_event("shutdown")
async def shutdown():
    await close_store_connection()


app.include_router(database.router, prefix=settings.api_base_path.rstrip("/"), tags=["database"])


@app.get("/")
async def root():
    return {"status": "document-gateway-ok"}


@app.get("/health/db")
async def db_health():
    return {
        "store": "connected" if is_connected() else "disconnected",
        "db": str(get_settings().database_name),
    }


def run() -> None:
    import uvicorn

    uvicorn.run("document_gateway.main:app", host="0.0.0.0", port=get_settings().port)
