import logging
from pathlib import Path

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request, Response, WebSocket
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from app.algorithms.comment_view import partition_comments
from app.algorithms.state import DashboardState
from app.consumers.websocket import WebSocketConsumer
from app.utils.config import HOST, LOG_LEVEL, PORT, Settings, settings as default_settings
from app.utils.errors import ValidationError
from app.utils.metrics import submissions_rejected
from app.utils.observability import setup_tracing
from app.utils.schemas import (
    Comment,
    CommentSubmission,
    CommentView,
    Job,
    JobSubmission,
    WorkerRecord,
)

logger = logging.getLogger(__name__)

# Handlers are all async so that every mutation runs on the event loop,
# which is the single writer for DashboardState.
api = APIRouter()
spa = APIRouter()


def get_state(request: Request) -> DashboardState:
    return request.app.state.dashboard


@api.get("/healthz")
async def healthz(request: Request) -> dict[str, str]:
    return {"status": "ok", "service": request.app.state.settings.service_name}


@api.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@api.post("/api/comments", status_code=201, response_model=Comment)
async def submit_comment(payload: CommentSubmission, state: DashboardState = Depends(get_state)) -> Comment:
    return state.store.add_comment(payload.user_name, payload.text, payload.worker_id)


@api.get("/api/comments", response_model=list[Comment])
async def list_comments(state: DashboardState = Depends(get_state)) -> list[Comment]:
    return state.store.list_comments()


@api.get("/api/comments/view", response_model=CommentView)
async def comment_view(state: DashboardState = Depends(get_state)) -> CommentView:
    return partition_comments(state.store.list_comments())


@api.delete("/api/comments", response_class=PlainTextResponse)
async def clear_comments(state: DashboardState = Depends(get_state)) -> str:
    state.store.clear_comments()
    return "Dashboard Cleared"


@api.post("/api/jobs", status_code=201, response_model=Job)
async def submit_job(payload: JobSubmission, state: DashboardState = Depends(get_state)) -> Job:
    return state.store.add_job(payload.url)


@api.get("/api/jobs", response_model=list[Job])
async def pending_jobs(state: DashboardState = Depends(get_state)) -> list[Job]:
    return state.store.list_pending_jobs()


@api.get("/api/workers", response_model=list[WorkerRecord])
async def list_workers(state: DashboardState = Depends(get_state)) -> list[WorkerRecord]:
    return state.presence.list_workers()


@api.websocket("/ws")
async def push_channel(websocket: WebSocket):
    await WebSocketConsumer(websocket, websocket.app.state.dashboard).run()


@spa.get("/{full_path:path}", include_in_schema=False)
async def spa_fallback(full_path: str, request: Request) -> Response:
    static_dir = Path(request.app.state.settings.static_dir).resolve()
    if full_path:
        candidate = (static_dir / full_path).resolve()
        if candidate.is_relative_to(static_dir) and candidate.is_file():
            return FileResponse(candidate)

    index = static_dir / "index.html"
    if index.is_file():
        return FileResponse(index)
    return PlainTextResponse(
        f"Build folder '{static_dir.name}' not found. Please run the dashboard build.",
        status_code=500,
    )


async def _rejected(request: Request, exc: ValidationError) -> PlainTextResponse:
    submissions_rejected.labels(kind=exc.kind).inc()
    logger.info("[Dashboard] rejected %s %s: %s", request.method, request.url.path, exc.message)
    return PlainTextResponse(exc.message, status_code=400)


async def _malformed(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    submissions_rejected.labels(kind="malformed").inc()
    logger.info("[Dashboard] malformed body %s %s: %s", request.method, request.url.path, exc.errors())
    return PlainTextResponse("Invalid request body", status_code=400)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    app = FastAPI(title="Stream Chat Dashboard", version="1.0.0")
    app.state.settings = settings
    app.state.dashboard = DashboardState(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ValidationError, _rejected)
    app.add_exception_handler(RequestValidationError, _malformed)
    app.include_router(api)
    # Catch-all must come last.
    app.include_router(spa)

    if setup_tracing(app, settings):
        logger.info("[Dashboard] tracing enabled endpoint=%s", settings.otel_exporter_endpoint)
    return app


app = create_app()


def run() -> None:
    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="[%(asctime)s] %(levelname)-8s %(name)s %(message)s",
        datefmt="%H:%M:%S",
    )
    logger.info("[Dashboard] starting on %s:%d", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
