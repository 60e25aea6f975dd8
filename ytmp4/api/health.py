from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from ytmp4.config.settings import config
from ytmp4.core.state import state

router = APIRouter()


@router.get("/healthz", response_class=PlainTextResponse)
async def healthz():
    """Liveness check"""
    return "ok"


@router.get("/health")
async def health_check():
    """Tooling overview"""
    return {
        "status": "ok",
        "ytdlp": state.ytdlp_path,
        "ffmpeg": state.ffmpeg_path,
        "cookies": state.cookies_file is not None,
        "timeout_ms": config.download.timeout_ms,
    }
