from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...api import call_function, get_functions
from ...data import DEFAULT_UPCOMING_LIMIT, seed_demo_data
from ...errors import (
    BackingStoreError,
    IntegrationError,
    IntegrationNotConfiguredError,
    NotFoundError,
    ValidationError,
)
from ..context import ServiceContext
from ..search import SEARCH_DISCLAIMER
from ..weather import InvalidCoordinatesError

logger = logging.getLogger(__name__)


class FunctionCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


def _query_text(payload: Any) -> str:
    query = payload.get("query") if isinstance(payload, dict) else None
    if not isinstance(query, str) or not query.strip():
        raise HTTPException(status_code=400, detail="Query is required")
    return query.strip()


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"message": f"Invalid {exc.entity} data", "errors": [issue.to_dict() for issue in exc.issues]},
        )

    @app.exception_handler(NotFoundError)
    async def _not_found(_: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"message": f"{exc.entity.capitalize()} not found"})

    @app.exception_handler(BackingStoreError)
    async def _store_failure(_: Request, exc: BackingStoreError) -> JSONResponse:
        logger.error("Storage failure: %s", exc)
        return JSONResponse(status_code=500, content={"message": "Storage is unavailable. Please try again later."})

    @app.exception_handler(IntegrationNotConfiguredError)
    async def _integration_missing(_: Request, exc: IntegrationNotConfiguredError) -> JSONResponse:
        logger.warning("%s", exc)
        return JSONResponse(status_code=503, content={"message": f"{exc.provider} is not configured"})

    @app.exception_handler(IntegrationError)
    async def _integration_failure(_: Request, exc: IntegrationError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"message": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def _request_invalid(_: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"field": ".".join(str(part) for part in error["loc"][1:]) or "request", "message": error["msg"]}
            for error in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"message": "Invalid request", "errors": errors})


def create_app(context: Optional[ServiceContext] = None) -> FastAPI:
    """Build the HTTP application around ``context`` (a fresh one by default)."""

    ctx = context or ServiceContext()
    handlers = ctx.handlers

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if ctx.settings.storage.seed_demo:
            await seed_demo_data(ctx.stores)
        logger.info("Clinic Calendar API ready (%s store)", ctx.stores.backend)
        yield

    app = FastAPI(title="Clinic Calendar API", version="0.1.0", lifespan=lifespan)
    app.state.context = ctx
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(ctx.settings.server.cors_origins) or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _install_error_handlers(app)

    # Events

    @app.get("/api/events")
    async def list_events() -> Any:
        return await handlers.list_events()

    @app.get("/api/events/upcoming")
    async def upcoming_events(
        limit: int = Query(DEFAULT_UPCOMING_LIMIT),
        from_instant: Optional[str] = Query(None, alias="from"),
    ) -> Any:
        return await handlers.upcoming_events(limit=limit, from_instant=from_instant)

    @app.get("/api/events/id/{event_id}")
    async def get_event(event_id: int) -> Any:
        return await handlers.get_event(event_id)

    @app.get("/api/events/{day}")
    async def events_by_date(day: str) -> Any:
        return await handlers.events_by_date(day)

    @app.post("/api/events", status_code=201)
    async def create_event(payload: Any = Body(None)) -> Any:
        return await handlers.create_event(payload)

    @app.patch("/api/events/{event_id}")
    async def update_event(event_id: int, payload: Any = Body(None)) -> Any:
        return await handlers.update_event(event_id, payload)

    @app.delete("/api/events/{event_id}")
    async def delete_event(event_id: int) -> Any:
        return await handlers.delete_event(event_id)

    # Notes

    @app.get("/api/notes")
    async def list_notes() -> Any:
        return await handlers.list_notes()

    @app.get("/api/notes/id/{note_id}")
    async def get_note(note_id: int) -> Any:
        return await handlers.get_note(note_id)

    @app.get("/api/notes/{day}")
    async def note_by_date(day: str) -> Any:
        return await handlers.note_by_date(day)

    @app.post("/api/notes", status_code=201)
    async def create_note(payload: Any = Body(None)) -> Any:
        return await handlers.create_note(payload)

    @app.patch("/api/notes/{note_id}")
    async def update_note(note_id: int, payload: Any = Body(None)) -> Any:
        return await handlers.update_note(note_id, payload)

    @app.delete("/api/notes/{note_id}")
    async def delete_note(note_id: int) -> Any:
        return await handlers.delete_note(note_id)

    # Views

    @app.get("/api/calendar/{year}/{month}")
    async def month_view(year: int, month: int) -> Any:
        return await handlers.month_view(year, month)

    @app.get("/api/schedule/{day}")
    async def day_schedule(
        day: str,
        start_hour: int = Query(8, alias="startHour", ge=0, le=23),
        end_hour: int = Query(18, alias="endHour", ge=0, le=23),
    ) -> Any:
        return await handlers.day_schedule(day, start_hour=start_hour, end_hour=end_hour)

    # Profile

    @app.get("/api/profile")
    async def get_profile() -> Any:
        return await handlers.get_profile()

    @app.post("/api/profile")
    async def save_profile(payload: Any = Body(None)) -> Any:
        return await handlers.save_profile(payload)

    # Integrations

    @app.post("/api/ai/search")
    async def ai_search(payload: Any = Body(None)) -> Any:
        answer = await ctx.assistant.ask(_query_text(payload))
        return {"result": answer, "disclaimer": SEARCH_DISCLAIMER}

    @app.post("/api/search")
    async def web_search(payload: Any = Body(None)) -> Any:
        results = await ctx.web_search.search(_query_text(payload))
        return {"results": [result.to_dict() for result in results]}

    @app.get("/api/weather")
    async def weather(lat: Optional[float] = Query(None), lon: Optional[float] = Query(None)) -> Any:
        if lat is None or lon is None:
            raise HTTPException(status_code=400, detail="Latitude and longitude are required")
        try:
            report = await ctx.weather.current(lat, lon)
        except InvalidCoordinatesError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return report.to_dict()

    # Calendar functions

    @app.get("/api/functions")
    async def list_functions() -> Any:
        return {"functions": [function.describe() for function in get_functions()]}

    @app.post("/api/functions/{function_name}")
    async def invoke_function(function_name: str, request: FunctionCallRequest) -> Any:
        try:
            result = call_function(function_name, **request.arguments)
        except KeyError as exc:
            logger.warning("Calendar function not found: %s", function_name)
            raise HTTPException(status_code=404, detail=f"Function '{function_name}' not found") from exc
        except (TypeError, ValueError, OverflowError) as exc:
            logger.info("Calendar function %s rejected arguments: %s", function_name, exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        logger.debug("Calendar function %s executed successfully", function_name)
        return {"name": function_name, "result": result}

    return app


def run_local_server(host: Optional[str] = None, port: Optional[int] = None) -> None:
    import asyncio

    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    app = create_app()
    server_settings = app.state.context.settings.server
    config = Config()
    config.bind = [f"{host or server_settings.host}:{port or server_settings.port}"]
    logger.info("Serving Clinic Calendar API on %s", config.bind[0])
    asyncio.run(serve(app, config))
