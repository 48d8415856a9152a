"""
Main Entry Point - FastAPI Application
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Configura l'applicazione FastAPI con middleware, router e lifecycle.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError

from invoicing.api.v1 import api_v1_router
from invoicing.core.config import settings
from invoicing.core.database import Database, is_store_unavailable
from invoicing.core.exceptions import AppException, StoreUnavailableError

# ------------------------------------------------------------
# Configurazione Logging
# ------------------------------------------------------------
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# Lifespan Handler
# ------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Gestisce il ciclo di vita dell'applicazione.

    - Startup: costruisce l'handle del database e verifica la connessione
    - Shutdown: chiude le connessioni database
    """
    # Startup
    logger.info("Avvio %s v%s", settings.app_name, settings.app_version)
    database = Database.from_settings(settings)
    await database.connect()
    app.state.database = database
    logger.info("Applicazione avviata con successo")

    yield

    # Shutdown
    logger.info("Arresto applicazione in corso...")
    await database.dispose()
    logger.info("Applicazione arrestata")


# ------------------------------------------------------------
# FastAPI Application
# ------------------------------------------------------------
app = FastAPI(
    title=settings.app_name,
    description="Gestionale preventivi e fatture - Backend API",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# ------------------------------------------------------------
# Exception Handlers
# ------------------------------------------------------------
@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Gestore per tutte le eccezioni applicative.

    Restituisce lo status HTTP dell'eccezione con error_code stabile
    e messaggio leggibile.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Gestore per errori di validazione dell'input.

    Converte gli errori Pydantic in messaggi per campo.
    """
    fields: dict[str, str] = {}
    for error in exc.errors():
        # Scarta la posizione ("body", "query", ...) e il tag della variante
        location = [str(part) for part in error.get("loc", ())[1:] if part not in ("quote", "invoice")]
        fields[".".join(location) or "body"] = error.get("msg", "Valore non valido")

    return JSONResponse(
        status_code=422,
        content={
            "detail": "Dati non validi",
            "error_code": "VALIDATION_ERROR",
            "fields": fields,
        },
    )


@app.exception_handler(DBAPIError)
async def database_exception_handler(request: Request, exc: DBAPIError) -> JSONResponse:
    """
    Gestore per errori del database non tradotti dai service.

    Il testo dell'errore originale viene solo loggato, mai restituito.
    """
    if is_store_unavailable(exc):
        logger.error("Database non raggiungibile: %s", exc.__class__.__name__)
        unavailable = StoreUnavailableError()
        return JSONResponse(status_code=unavailable.status_code, content=unavailable.to_dict())

    logger.error("Errore database non gestito: %s", exc.__class__.__name__, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Errore interno del server", "error_code": "INTERNAL_SERVER_ERROR"},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Gestore generico per tutte le eccezioni non catturate.

    Converte l'eccezione in risposta HTTP 500 e logga l'errore.
    """
    logger.error("Unhandled exception: %s", exc.__class__.__name__, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Errore interno del server", "error_code": "INTERNAL_SERVER_ERROR"},
    )


# ------------------------------------------------------------
# Middleware CORS
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------
@app.get(
    "/health",
    name="Health Check",
    summary="Controlla lo stato dell'applicazione",
    tags=["System"],
)
async def health_check() -> dict[str, str]:
    """
    Endpoint per il controllo dello stato di salute.

    Returns:
        dict: Stato dell'applicazione
    """
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.app_env,
    }


# ------------------------------------------------------------
# Router
# ------------------------------------------------------------
app.include_router(api_v1_router)
