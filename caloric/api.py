# -*- coding: utf-8 -*-
"""
Caloric API

Nutrition estimation from text or meal photos, food logging and calorie/macro
progress against a computed target.
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .assistant.api import router as assistant_router
from .config import settings
from .errors import CaloricError
from .estimation.api import router as estimation_router
from .food_log.api import router as food_log_router
from .profiles.api import router as profiles_router

log = logging.getLogger(__name__)
logging.getLogger("caloric").setLevel(settings.log_level)

CORS_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"
CORS_ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"

app = FastAPI(
    title="Caloric",
    description="AI nutrition estimation, food log and calorie target tracking",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)


def _cors_headers(request: Request) -> dict[str, str]:
    origin = "*"
    if settings.cors_origins != ["*"]:
        requested = request.headers.get("origin") or ""
        origin = requested if requested in settings.cors_origins else settings.cors_origins[0]
    headers = {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
    }
    if origin != "*":
        headers["Vary"] = "Origin"
    return headers


@app.middleware("http")
async def _cors(request: Request, call_next):
    headers = _cors_headers(request)
    # Preflight: empty body, permissive headers, never routed.
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=headers)
    try:
        response = await call_next(request)
    except Exception:
        log.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"}, headers=headers)
    response.headers.update(headers)
    return response


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    message = "; ".join(problems) or "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(CaloricError)
async def _domain_error(request: Request, exc: CaloricError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


app.include_router(estimation_router)
app.include_router(profiles_router)
app.include_router(food_log_router)
app.include_router(assistant_router)


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.environ.get("CALORIC_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("CALORIC_PORT") or os.environ.get("PORT") or "8000"
    try:
        port = int(port_raw)
    except ValueError:
        port = 8000

    uvicorn.run("caloric.api:app", host=host, port=port, reload=False)
