# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Instantiate the FastAPI app.
* Register CORS middleware and the request-log middleware.
* Map the typed service errors (core.errors) to HTTP responses.
* Mount the feature routers (vault, events).
* Expose a /health endpoint for container liveness checks.
"""

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from core.config import settings
from core.errors import StoreFailureError, VaultCoreError
from core.logger import logger
from events.router import collect_router, router as events_router
from vault.router import router as vault_router

app = FastAPI(title="Vault Core", version="1.0.0")

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# Bodies are never echoed – they carry ciphertext.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            client_ip,
            response.status_code,
            elapsed_ms,
        )
        return response


app.add_middleware(_RequestLogMiddleware)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


@app.exception_handler(VaultCoreError)
async def _vault_core_error(request: Request, exc: VaultCoreError) -> JSONResponse:
    if isinstance(exc, StoreFailureError):
        logger.error("%s %s | store failure: %s (%r)", request.method, request.url.path, exc.message, exc.__cause__)
    else:
        logger.warning("%s %s | %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(vault_router)
app.include_router(events_router)
app.include_router(collect_router)

# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


@app.on_event("startup")
async def _on_startup():
    logger.info("Vault Core service starting up")


@app.on_event("shutdown")
async def _on_shutdown():
    logger.info("Vault Core service shutting down")


@app.get("/health")
def health():
    return {"status": "ok"}
