import logging
import os
import shutil

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from ytmp4.api import download, health
from ytmp4.config.settings import config
from ytmp4.core.logging import setup_logging
from ytmp4.core.state import state
from ytmp4.services.cookies import load_cookies_file

logger = logging.getLogger(__name__)

app = FastAPI(
    title=config.api.title,
    version=config.api.version,
    docs_url="/docs" if config.api.debug else None,
    redoc_url=None
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Errors are plain text, the front-end shows them verbatim
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(
        str(exc.detail),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return PlainTextResponse(str(exc), status_code=400)


# Routes
app.include_router(health.router, tags=["Health"])
app.include_router(download.router, tags=["Download"])


def resolve_static_dir(path: str) -> str:
    """Relative paths are tried against the working directory, then the project root"""
    if os.path.isabs(path) or os.path.isdir(path):
        return os.path.abspath(path)
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(project_root, path)


# Front-end, mounted last so it never shadows the API
static_dir = resolve_static_dir(config.api.static_dir)
if os.path.isdir(static_dir):
    app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")


@app.on_event("startup")
async def startup_event():
    setup_logging()

    state.cookies_file = load_cookies_file(config.ytdlp)
    state.ytdlp_path = shutil.which(config.ytdlp.binary)
    state.ffmpeg_path = shutil.which("ffmpeg")

    if not state.ytdlp_path:
        logger.warning("%s not found on PATH, downloads will fail", config.ytdlp.binary)
    if not state.ffmpeg_path:
        logger.warning("ffmpeg not found on PATH, merging and conversion will fail")
    if not os.path.isdir(static_dir):
        logger.info("No front-end at %s", static_dir)
