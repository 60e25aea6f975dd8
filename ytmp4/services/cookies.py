import base64
import binascii
import logging
import os
from typing import Optional

from ytmp4.config.settings import YtDlpConfig

logger = logging.getLogger(__name__)


def load_cookies_file(settings: YtDlpConfig) -> Optional[str]:
    """
    Resolve the cookies.txt handed to yt-dlp for sign-in gated sources.

    Priority: YTDLP_COOKIES_BASE64 (decoded and written to cookies_target with
    mode 0600), then YTDLP_COOKIES_PATH, then cookies_fallback. The file paths
    are only used when they exist. Any failure is logged and yields None.
    """
    try:
        if settings.cookies_base64:
            data = base64.b64decode(settings.cookies_base64)
            target = settings.cookies_target
            fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            logger.info("Cookies written to %s", target)
            return target

        path = settings.cookies_path or settings.cookies_fallback
        if path and os.path.exists(path):
            logger.info("Using cookies from %s", path)
            return os.path.abspath(path)
    except (OSError, binascii.Error, ValueError) as e:
        logger.warning("Failed to load cookies file: %s", e)

    return None
