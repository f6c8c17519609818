"""FastAPI application.

Every request builds its own TableStore from the configured backend, so no
store state is shared between requests.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse

from veriflow.api.html import render_database_page
from veriflow.api.models import (
    INVALID_BODY_MESSAGES,
    DebugInconsistencyRequest,
    ExecuteQueryRequest,
    ExecuteQueryResponse,
    GenerateSQLRequest,
    GenerateSQLResponse,
    TableDumpResponse,
    ViewDefinitionResponse,
    ViewListResponse,
)
from veriflow.assistant import (
    InconsistencyDebugger,
    SQLGenerator,
    debug_inconsistency,
    generate_sql,
)
from veriflow.config import Settings, load_settings
from veriflow.engine import MockSQLEngine
from veriflow.llm import LLM, has_provider
from veriflow.log import configure_logging
from veriflow.store import StoreBackend, TableStore, open_backend
from veriflow.types import utc_now_iso

logger = logging.getLogger(__name__)

TABLE_ALIASES = {"customers": "Customers", "transactions": "Transactions", "views": "Views"}


def build_llm(settings: Settings) -> LLM | None:
    """Create the LLM client, or None when disabled or no provider is configured."""
    if not settings.llm_enabled:
        logger.info("LLM disabled by configuration")
        return None
    if settings.model is None and not has_provider():
        logger.warning("No LLM API key found, assistants will return placeholder output")
        return None
    return LLM(model=settings.model, temperature=settings.temperature)


async def load_store(request: Request) -> TableStore:
    """Read the whole store for this request."""
    return await TableStore(request.app.state.backend).load()


def _error(status: int, error: str, **extra: Any) -> JSONResponse:
    return JSONResponse({"error": error, **extra}, status_code=status)


def database_summary(store: TableStore) -> dict[str, Any]:
    """Counts, two-row samples and key-based schema for each table."""
    customers = store.get("Customers")
    transactions = store.get("Transactions")
    views = store.views
    return {
        "database_file": store.location,
        "tables": {
            "Customers": {"count": len(customers), "sample": customers[:2]},
            "Transactions": {"count": len(transactions), "sample": transactions[:2]},
            "Views": {"count": len(views), "list": list(views)},
        },
        "schema": {
            "Customers": list(customers[0]) if customers else [],
            "Transactions": list(transactions[0]) if transactions else [],
        },
    }


def create_app(
    settings: Settings | None = None,
    backend: StoreBackend | None = None,
    llm: LLM | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Runtime settings (defaults used if None)
        backend: Store backend; opened from settings if None
        llm: LLM client; built from settings if None

    Returns:
        Configured FastAPI app
    """
    settings = settings or Settings()
    if backend is None:
        backend = open_backend(path=settings.db_path, url=settings.db_url)
    if llm is None:
        llm = build_llm(settings)

    app = FastAPI(title="Veriflow", description="Natural-language SQL with a mock JSON database")
    app.state.settings = settings
    app.state.backend = backend
    app.state.generator = SQLGenerator(llm)
    app.state.debugger = InconsistencyDebugger(llm)
    app.state.write_lock = asyncio.Lock()

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if any(e.get("type") == "json_invalid" for e in errors):
            message = "Invalid request body"
        else:
            message = INVALID_BODY_MESSAGES.get(request.url.path, "Invalid request body")
        logger.warning("%s: %s", message, errors)
        return _error(400, message, details=str(errors))

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/execute-query", response_model=ExecuteQueryResponse)
    async def execute_query(body: ExecuteQueryRequest, request: Request):
        logger.info("Received SQL (%d chars)", len(body.sql))
        try:
            async with request.app.state.write_lock:
                store = await load_store(request)
                engine = MockSQLEngine(store, row_limit=request.app.state.settings.row_limit)
                result = await engine.execute(body.sql)
        except Exception as e:
            logger.exception("Execute query failed")
            return _error(500, "Failed to execute query", details=str(e), data=[])

        logger.info("Query executed, %d rows", result.row_count)
        return result.to_dict()

    @app.get("/execute-query")
    async def get_views(request: Request, view: str | None = Query(default=None)):
        try:
            store = await load_store(request)
        except Exception as e:
            logger.exception("Reading views failed")
            return _error(500, str(e))

        if view:
            record = store.get_view(view)
            if record is None:
                return _error(404, "View not found")
            return ViewDefinitionResponse(
                view_name=view, definition=record.definition, created_at=record.created_at
            ).model_dump(by_alias=True)

        return ViewListResponse(views=list(store.views), all_views=store.views).model_dump(
            by_alias=True
        )

    @app.get("/database")
    async def database(
        request: Request,
        table: str | None = Query(default=None),
        output_format: str = Query(default="json", alias="format"),
    ):
        try:
            store = await load_store(request)
        except Exception as e:
            logger.exception("Reading database failed")
            return _error(500, str(e))

        if table:
            name = TABLE_ALIASES.get(table.lower())
            if name is None:
                return _error(404, "Table not found")
            data = store.views if name == "Views" else store.get(name)
            return TableDumpResponse(table=name, count=len(data), data=data).model_dump()

        summary = database_summary(store)
        if output_format == "html":
            return HTMLResponse(render_database_page(store, summary))
        return summary

    @app.post("/generate-sql", response_model=GenerateSQLResponse)
    async def generate(body: GenerateSQLRequest, request: Request):
        logger.info("Received prompt (%d chars)", len(body.prompt))
        try:
            sql = await generate_sql(
                body.prompt, request.app.state.backend, request.app.state.generator
            )
        except Exception as e:
            logger.exception("SQL generation failed")
            return _error(
                500,
                "Failed to generate SQL",
                details=str(e),
                timestamp=utc_now_iso(),
            )
        return {"sql": sql}

    @app.post("/debug-inconsistency")
    async def debug(body: DebugInconsistencyRequest, request: Request):
        logger.info("Received problem description: %s", body.problem_description)
        try:
            store = await load_store(request)
            report = await debug_inconsistency(
                body.problem_description, store, request.app.state.debugger
            )
        except Exception as e:
            logger.exception("Inconsistency debugging failed")
            return _error(500, "Failed to debug inconsistency", details=str(e))
        return report.to_response()

    return app


def app_from_env() -> FastAPI:
    """Application factory for uvicorn: settings from veriflow.yaml and the environment."""
    settings = load_settings()
    configure_logging(settings.log_level)
    return create_app(settings)


__all__ = ["create_app", "app_from_env", "build_llm", "database_summary"]
