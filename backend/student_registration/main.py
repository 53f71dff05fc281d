"""
Point d'entrée principal de l'API d'inscription des élèves.
Démarrage : uvicorn student_registration.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import student_registration.models  # noqa: F401 — enregistre les modèles dans Base.metadata
from student_registration.config import settings
from student_registration.routers import students
from student_registration.schemas.student import ErrorEnvelope
from student_registration.store.factory import create_student_store

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /api/health",
    "GET /api/students",
    "GET /api/students/{id}",
    "POST /api/students",
    "POST /api/students/validate",
]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie : crée le store (avec repli SQLite) et le libère à l'arrêt."""
    store = create_student_store(settings)
    app.state.student_store = store
    logger.info("Store %s prêt.", store.backend_name)
    yield
    store.close()


app = FastAPI(
    title="Student Registration API",
    description="API d'inscription des élèves : validation et persistance",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(students.router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Corps illisible ou mal typé : même enveloppe 400 que les erreurs du validateur."""
    errors = []
    for error in exc.errors():
        # Les positions numériques (offset JSON, index de liste) ne désignent pas un champ
        loc = [part for part in error.get("loc", ()) if isinstance(part, str) and part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc) or "body", "message": error.get("msg", "Invalid value")})
    return students.validation_error_response(errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    envelope = ErrorEnvelope(message=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope.model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware et ne divulgue aucun détail au client.
    """
    logger.error("Exception non gérée sur %s %s : %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorEnvelope(message="Internal server error").model_dump(exclude_none=True),
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {
        "status": "OK",
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.api_route("/api/{path:path}", methods=["GET", "POST"], include_in_schema=False)
def unmatched_api_route(path: str, request: Request):
    """Route d'API inconnue : 404 avec la liste des endpoints disponibles."""
    logger.info("Route d'API inconnue : %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=404,
        content={
            "success": False,
            "message": "API endpoint not found",
            "path": request.url.path,
            "method": request.method,
            "available_endpoints": AVAILABLE_ENDPOINTS,
        },
    )
