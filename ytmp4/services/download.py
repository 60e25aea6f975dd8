import functools
import os
from typing import AsyncIterator, Dict, NamedTuple

import aiofiles
from fastapi import HTTPException, Request
from fastapi.responses import StreamingResponse

from ytmp4.config.settings import config
from ytmp4.core.logging import log_error, log_info, log_warning
from ytmp4.core.state import state
from ytmp4.i18n import i18n
from ytmp4.models.internal import DownloadIntent
from ytmp4.services.format import FormatDecision
from ytmp4.services.workspace import Workspace
from ytmp4.services.ytdlp import SubprocessExecutor, SubprocessTimeout, YTDLPCommandBuilder
from ytmp4.utils.filename import content_disposition
from ytmp4.utils.locale import safe_url_for_log


class PreparedDownload(NamedTuple):
    """A finished yt-dlp run, ready to be streamed"""
    body: AsyncIterator[bytes]
    headers: Dict[str, str]
    media_type: str
    workspace: Workspace


class WorkspaceStreamingResponse(StreamingResponse):
    """StreamingResponse that removes its workspace however the response ends"""

    def __init__(self, content, workspace: Workspace, **kwargs):
        super().__init__(content, **kwargs)
        self.workspace = workspace

    async def __call__(self, scope, receive, send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            self.workspace.cleanup()


def _diagnostics(stderr: bytes) -> str:
    # errors="ignore" so the text never grows past the byte limit
    return stderr.decode("utf-8", errors="ignore").strip()


class DownloadService:
    """Runs yt-dlp for one request inside a private workspace"""

    @staticmethod
    async def download(intent: DownloadIntent, locale: str, request: Request) -> PreparedDownload:
        """
        Download to a temp workspace, then hand back a body iterator.

        Every failure raises HTTPException after the workspace is removed. On
        success the workspace belongs to the returned body and is removed once
        streaming stops, whether it completed, failed or the client went away.
        """
        _ = functools.partial(i18n.get, locale=locale)
        metadata = FormatDecision.get_metadata(intent)
        log_info(request, _("log.format_decided", format=metadata.format_str))

        workspace = Workspace.create()
        handed_off = False
        try:
            cmd = YTDLPCommandBuilder.build_download_command(
                intent,
                metadata,
                workspace.output_template(),
                state.cookies_file
            )
            log_info(request, _(
                "log.starting_download",
                format=metadata.ext,
                url=safe_url_for_log(intent.url)
            ))

            try:
                result = await SubprocessExecutor.run(
                    cmd,
                    timeout=config.download.timeout_seconds,
                    cwd=workspace.path,
                    stderr_limit=config.download.stderr_limit
                )
            except SubprocessTimeout as e:
                log_error(request, f"yt-dlp timed out after {e.timeout:g}s")
                detail = _("error.timeout", seconds=f"{e.timeout:g}")
                diagnostics = _diagnostics(e.stderr)
                if diagnostics:
                    detail = f"{detail}\n{diagnostics}"
                raise HTTPException(status_code=500, detail=detail)
            except FileNotFoundError:
                log_error(request, f"yt-dlp binary not found: {config.ytdlp.binary}")
                raise HTTPException(status_code=500, detail=_("error.tool_missing"))
            except OSError as e:
                log_error(request, f"Failed to start yt-dlp: {e}")
                raise HTTPException(status_code=500, detail=_("error.spawn_failed"))

            if result.returncode != 0:
                diagnostics = _diagnostics(result.stderr)
                log_error(request, _("log.tool_failed", code=result.returncode))
                raise HTTPException(
                    status_code=500,
                    detail=f"{_('error.download_failed')}\n{diagnostics}"
                )

            try:
                produced = workspace.find_output(metadata.ext)
                file_size = os.path.getsize(produced) if produced else 0
            except OSError as e:
                log_error(request, f"Failed to read workspace: {e}")
                raise HTTPException(status_code=500, detail=_("error.read_failed"))

            if not produced:
                log_error(request, f"No .{metadata.ext} in {workspace.path}")
                raise HTTPException(
                    status_code=500,
                    detail=_("error.no_output", format=metadata.ext.upper())
                )

            log_info(request, _("log.download_finished", size=file_size / 1024 / 1024))

            title = os.path.splitext(os.path.basename(produced))[0]
            headers = {
                'Content-Disposition': content_disposition(title, metadata.ext, metadata.fallback_name),
                'Content-Length': str(file_size),
                'X-Content-Type-Options': 'nosniff',
                'Cache-Control': 'no-cache',
            }

            chunk_size = config.download.chunk_size

            async def generate():
                try:
                    async with aiofiles.open(produced, 'rb') as f:
                        while True:
                            chunk = await f.read(chunk_size)
                            if not chunk:
                                break
                            yield chunk
                except OSError as e:
                    # Headers are already sent; aborting is all that is left
                    log_warning(request, f"Streaming error: {e}")
                    raise
                finally:
                    workspace.cleanup()

            handed_off = True
            return PreparedDownload(
                body=generate(),
                headers=headers,
                media_type=metadata.media_type,
                workspace=workspace
            )
        finally:
            if not handed_off:
                workspace.cleanup()
