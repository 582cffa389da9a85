# main.py
# CodeMentor — FastAPI application entry point.
# Builds settings, the Gemini client, the DB session factory and both services,
# then registers routers and exception handlers.
# Imports from: ai/*, api/*, database/db.py, utils/*

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, sessionmaker

from ai.explainer import ExplanationService
from ai.gemini_client import GeminiClient, TextGenerator
from ai.problem_generator import ProblemGenerationService
from api.responses import CORS_HEADERS, cors_middleware, error_body, error_response
from api.routes_explain import router as explain_router
from api.routes_practice import router as practice_router
from database.db import build_engine, build_session_factory, check_db_health, create_tables
from utils.config import Settings, load_settings
from utils.constants import SERVICE_NAME, SERVICE_VERSION
from utils.errors import CodeMentorError
from utils.logger import configure_logging, get_logger

log = get_logger("main")


# ─────────────────────────────────────────────
# Exception handlers: every failure is {error, code}, never a traceback
# ─────────────────────────────────────────────

async def _handle_codementor_error(request: Request, exc: CodeMentorError) -> JSONResponse:
    log.warning(
        "request_failed",
        path=request.url.path,
        code=exc.code,
        status=exc.status_code,
        error=exc.message,
    )
    return error_response(exc)


def _summarise_request_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors()[:3]:
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        msg = err.get("msg", "invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request body"


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _summarise_request_errors(exc)
    log.warning("request_invalid", path=request.url.path, error=message)
    return JSONResponse(
        status_code=400,
        content=error_body(message, "invalid_request"),
        headers=CORS_HEADERS,
    )


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    log.exception("request_unhandled_error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=400,
        content=error_body("Unknown error", "internal_error"),
        headers=CORS_HEADERS,
    )


# ─────────────────────────────────────────────
# App factory
# ─────────────────────────────────────────────

def create_app(
    settings:        Optional[Settings] = None,
    client:          Optional[TextGenerator] = None,
    session_factory: Optional[sessionmaker[Session]] = None,
) -> FastAPI:
    """
    Anything not passed in is built from the environment. When the session
    factory is built here, tables are created on startup.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    client = client or GeminiClient.from_settings(settings)

    engine = None
    if session_factory is None:
        engine = build_engine(settings.database_url)
        session_factory = build_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("codementor_startup_begin", model=settings.gemini_model)

        if not settings.has_gemini_key:
            # Not fatal at boot: each call fails fast with a configuration error.
            log.warning("gemini_api_key_missing")

        if engine is not None:
            try:
                create_tables(engine)
            except Exception as exc:
                log.exception("db_init_failed", error=str(exc))
                raise

        log.info("codementor_startup_complete")
        yield

        if engine is not None:
            engine.dispose()
        log.info("codementor_shutdown")

    app = FastAPI(
        title=SERVICE_NAME,
        description=(
            "AI code explanations and generated practice problems "
            "for the CodeMentor browser editor."
        ),
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    app.state.settings            = settings
    app.state.session_factory     = session_factory
    app.state.explanation_service = ExplanationService(settings, client)
    app.state.problem_service     = ProblemGenerationService(settings, client, session_factory)

    app.middleware("http")(cors_middleware)     # OPTIONS short-circuit + CORS headers

    app.add_exception_handler(CodeMentorError, _handle_codementor_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)

    app.include_router(explain_router)      # POST /explain-code
    app.include_router(practice_router)     # POST /generate-practice
                                            # GET  /practice-problems, /practice-problems/{id}

    @app.get("/health", tags=["system"], summary="Health check")
    def health_check() -> dict:
        return {
            "status":            "ok",
            "service":           SERVICE_NAME,
            "version":           SERVICE_VERSION,
            "gemini_configured": settings.has_gemini_key,
            "database_ok":       check_db_health(session_factory),
        }

    @app.get("/", tags=["system"], include_in_schema=False)
    def root() -> dict:
        return {
            "service": SERVICE_NAME,
            "docs":    "/docs",
            "health":  "/health",
        }

    return app


app = create_app()


# ─────────────────────────────────────────────
# Dev server entry point
# ─────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    from utils.constants import SERVER_HOST, SERVER_PORT

    log.info("starting_dev_server", host=SERVER_HOST, port=SERVER_PORT)
    uvicorn.run(
        "main:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=True,
        log_level="info",
    )
