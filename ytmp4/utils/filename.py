import re
import unicodedata
from urllib.parse import quote

CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]+')
FORBIDDEN_CHARS = re.compile(r'[<>:"/\\|?*]+')
NON_PRINTABLE_ASCII = re.compile(r'[^\x20-\x7e]+')

WINDOWS_RESERVED = {
    'CON', 'PRN', 'AUX', 'NUL',
    'COM1', 'COM2', 'COM3', 'COM4', 'COM5', 'COM6', 'COM7', 'COM8', 'COM9',
    'LPT1', 'LPT2', 'LPT3', 'LPT4', 'LPT5', 'LPT6', 'LPT7', 'LPT8', 'LPT9'
}


def sanitize_filename(name: str, max_length: int = 200) -> str:
    """Sanitize filename for cross-platform compatibility"""
    name = unicodedata.normalize("NFKC", name)
    name = CONTROL_CHARS.sub('', name)
    name = FORBIDDEN_CHARS.sub('', name)
    name = name.strip()

    if name.upper() in WINDOWS_RESERVED:
        name = f"_{name}"

    return name[:max_length].strip()


def ascii_fallback(name: str) -> str:
    """Printable ASCII subset of name, for clients ignoring filename*"""
    return NON_PRINTABLE_ASCII.sub('', name).strip()


def encode_rfc5987(value: str) -> str:
    """Percent-encode a UTF-8 value for the filename* parameter (RFC 5987)"""
    return quote(value, safe="!~")


def content_disposition(title: str, ext: str, fallback: str = "video") -> str:
    """
    Build an attachment Content-Disposition carrying both a plain ASCII
    filename and a UTF-8 filename*.
    """
    display = sanitize_filename(title) or fallback
    plain = ascii_fallback(display) or fallback
    return (
        f'attachment; filename="{plain}.{ext}"; '
        f"filename*=UTF-8''{encode_rfc5987(f'{display}.{ext}')}"
    )
