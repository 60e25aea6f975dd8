import functools

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ytmp4.core.logging import bind_request_id, log_info, log_warning
from ytmp4.core.security import SecurityValidator, UrlValidationResult
from ytmp4.i18n import i18n
from ytmp4.models.request import DownloadRequest
from ytmp4.services.download import DownloadService, WorkspaceStreamingResponse
from ytmp4.utils.locale import get_locale, safe_url_for_log

router = APIRouter()


@router.get("/download", dependencies=[Depends(bind_request_id)])
async def download_video(
    request: Request,
    url: str = Query("", description="Video page URL"),
    quality: str = Query("best", description="Max height (144-2160) or 'best'"),
    media_format: str = Query("mp4", alias="format", description="mp4 or mp3"),
):
    """Download a single video with yt-dlp and stream it back as an attachment"""

    locale = get_locale(request.headers.get("accept-language"))
    _ = functools.partial(i18n.get, locale=locale)

    download_request = DownloadRequest(url=url, quality=quality, format=media_format)

    validation_result = SecurityValidator.validate_url(download_request.url)
    if validation_result == UrlValidationResult.INVALID:
        raise HTTPException(status_code=400, detail=_("error.invalid_url"))
    if validation_result == UrlValidationResult.BLOCKED:
        log_warning(request, f"Rejected local URL {safe_url_for_log(download_request.url)}")
        raise HTTPException(status_code=400, detail=_("error.local_url"))
    if download_request.media_format is None:
        raise HTTPException(
            status_code=400,
            detail=_("error.unsupported_format", format=download_request.format)
        )

    intent = download_request.to_intent()
    log_info(request, f"Download requested: {safe_url_for_log(intent.url)} quality={intent.quality or 'best'}")

    prepared = await DownloadService.download(intent, locale, request)

    return WorkspaceStreamingResponse(
        prepared.body,
        workspace=prepared.workspace,
        media_type=prepared.media_type,
        headers=prepared.headers
    )
