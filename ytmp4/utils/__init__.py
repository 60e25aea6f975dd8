from .filename import ascii_fallback, content_disposition, encode_rfc5987, sanitize_filename

__all__ = ["ascii_fallback", "content_disposition", "encode_rfc5987", "sanitize_filename"]
