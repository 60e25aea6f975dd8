from typing import Optional
from urllib.parse import urlparse
from ytmp4.config.settings import config

def get_locale(accept_language: Optional[str] = None) -> str:
    """Extract locale from Accept-Language header"""
    if not accept_language:
        return config.i18n.default_locale

    languages = []
    for lang in accept_language.split(","):
        parts = lang.strip().split(";")
        locale = parts[0].split("-")[0].lower()
        languages.append(locale)

    for locale in languages:
        if locale in config.i18n.supported_locales:
            return locale

    return config.i18n.default_locale

def safe_url_for_log(url: str) -> str:
    """URL without query string or credentials, for logging"""
    try:
        parsed = urlparse(url)
        host = parsed.hostname or ""
        base_url = f"{parsed.scheme}://{host}{parsed.path}"

        if parsed.query:
            return f"{base_url}?..."

        return base_url
    except ValueError:
        return "invalid_url"
