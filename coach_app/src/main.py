from __future__ import annotations

import logging
import logging.handlers
import sys
import time
import uuid
from functools import lru_cache
from typing import Any, Dict

import typer
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from langsmith.run_helpers import tracing_context
from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from coach_app.config.settings import settings, LOGS_DIR
from coach_app.agents.coach import FitnessCoach, interpret
from coach_app.agents.dates import local_now
from coach_app.agents.errors import CoachError, InvalidRequestError
from coach_app.agents.llm_utils import OpenAITextGenerator
from shared.database.connection import check_connection, create_all_tables
from shared.database.store import SqlAlchemyStore


def setup_logging() -> logging.Logger:
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=settings.log_format,
        handlers=[
            logging.handlers.RotatingFileHandler(
                LOGS_DIR / settings.log_file,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
            ),
            logging.StreamHandler(sys.stdout),
        ],
    )
    # Reduce noisy HTTP logs that may include sensitive URLs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    return logging.getLogger("coach_app")


logger = setup_logging()


@lru_cache(maxsize=1)
def get_coach() -> FitnessCoach:
    generator = OpenAITextGenerator(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        max_tokens=settings.openai_max_tokens,
        temperature=settings.openai_temperature,
        timeout=settings.http_timeout_seconds,
    )
    return FitnessCoach(store=SqlAlchemyStore(), generator=generator)


class CoachRequest(BaseModel):
    message: str | None = None
    userId: str | None = None
    timezone: str | None = None


def _error_response(error: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "success": False})


app = FastAPI(title=settings.app_name, version=settings.version, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.on_event("startup")
async def on_startup():
    try:
        create_all_tables()
        logger.info("Ensured database tables exist for Coach App")
    except Exception as e:
        logger.error(f"Failed to ensure DB tables: {e}")


@app.exception_handler(RequestValidationError)
async def on_validation_error(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return _error_response("Invalid request body", 400)


@app.get("/health")
async def health() -> Dict[str, str]:
    database = "connected" if check_connection() else "unavailable"
    return {"status": "ok", "version": settings.version, "database": database}


if settings.request_logging_enabled:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        start = time.perf_counter()
        logger.info(f"HTTP {request.method} {request.url.path} rid={request_id}")
        try:
            response = await call_next(request)
        except Exception:
            duration = (time.perf_counter() - start) * 1000
            logger.exception(f"HTTP EXC {request.method} {request.url.path} rid={request_id} dur_ms={duration:.1f}")
            raise
        duration = (time.perf_counter() - start) * 1000
        response.headers["X-Request-Id"] = request_id
        logger.info(f"HTTP {request.method} {request.url.path} -> {response.status_code} rid={request_id} dur_ms={duration:.1f}")
        return response


@app.post("/fitness-coach")
async def fitness_coach(payload: CoachRequest, coach: FitnessCoach = Depends(get_coach)) -> Any:
    try:
        try:
            now = local_now(payload.timezone)
        except ValueError as e:
            raise InvalidRequestError(str(e)) from e
        with tracing_context(project_name=settings.langsmith_project):
            reply = await coach.handle(payload.message, payload.userId, now=now)
    except CoachError as e:
        logger.error(f"Error in fitness-coach: {e}")
        return _error_response(str(e), e.status_code)
    except Exception as e:
        logger.exception("Unexpected error in fitness-coach")
        return _error_response(str(e) or "Internal error", 500)

    logger.info(
        f"fitness-coach intent={reply.intent.value} logged={len(reply.logged_items)} dur_s={reply.duration_seconds:.2f}"
    )
    return JSONResponse(
        status_code=200,
        content={"response": reply.response, "loggedItems": reply.logged_items, "success": True},
    )


cli = typer.Typer(name="coach-app", help="Fitness coach API and message interpreter", rich_markup_mode="rich")
console = Console()


@cli.command()
def serve(host: str = "0.0.0.0", port: int = 8000):
    """Run the coach API under uvicorn."""
    import uvicorn

    uvicorn.run("coach_app.src.main:app", host=host, port=port, reload=False, log_level=settings.log_level.lower())


@cli.command("interpret")
def interpret_command(message: str, timezone: str = typer.Option(None, help="IANA timezone, e.g. Europe/Paris")):
    """Dry run: show the intent and records a message would produce. Nothing is written."""
    try:
        now = local_now(timezone)
    except ValueError as e:
        console.print(f"❌ [red]{e}[/red]")
        raise typer.Exit(code=1)
    result = interpret(message, now)
    console.print(f"🧭 Intent: [bold]{result.intent.value}[/bold]")
    if not result.records:
        console.print("No records would be written.")
        return
    table = Table(title="Extracted records")
    table.add_column("Kind")
    table.add_column("Fields")
    for record in result.records:
        fields = ", ".join(f"{k}={v}" for k, v in vars(record).items() if k != "exercises")
        exercises = getattr(record, "exercises", None)
        if exercises:
            fields += "; exercises=" + ", ".join(f"{ex.name} {[s.reps for s in ex.sets]}" for ex in exercises)
        table.add_row(type(record).__name__, fields)
    console.print(table)


if __name__ == "__main__":
    cli()
