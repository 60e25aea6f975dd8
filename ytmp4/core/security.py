import ipaddress
import re
import socket
from enum import Enum, auto
from typing import Optional, Union
from urllib.parse import urlparse

from ytmp4.config.settings import config

# Suffix match so that e.g. "foo.localhost" is rejected as well
LOCAL_HOST_PATTERN = re.compile(r"(localhost|127\.0\.0\.1|0\.0\.0\.0|::1)$")

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class UrlValidationResult(Enum):
    """URL validation result without throwing exceptions"""
    OK = auto()
    BLOCKED = auto()
    INVALID = auto()


def parse_ip_literal(host: str) -> Optional[IPAddress]:
    """
    Parse host as an IP literal the way URL parsers normalize it, including
    the short, decimal, hex and octal IPv4 spellings (127.1, 2130706433,
    0x7f000001, 0177.0.0.1). Returns None for names.
    """
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        if ":" in host:
            return None
        try:
            ip = ipaddress.IPv4Address(socket.inet_aton(host))
        except (OSError, ValueError):
            return None

    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def is_local_host(hostname: str) -> bool:
    host = hostname.lower().rstrip(".")
    if not host or LOCAL_HOST_PATTERN.search(host):
        return True

    ip = parse_ip_literal(host)
    return ip is not None and (ip.is_loopback or ip.is_unspecified)


class SecurityValidator:
    """
    Validate URL security without throwing exceptions.
    Returns result enum for separation of concerns.
    """

    @staticmethod
    def validate_url(url: str) -> UrlValidationResult:
        """
        Check that the URL is absolute and does not point at this machine.
        IP literals are normalized before the check; no DNS lookups are made.
        """
        if not url:
            return UrlValidationResult.INVALID

        try:
            parsed = urlparse(url)
            hostname = parsed.hostname
        except ValueError:
            return UrlValidationResult.INVALID

        if not parsed.scheme or not hostname:
            return UrlValidationResult.INVALID

        if config.security.enable_ssrf_protection and is_local_host(hostname):
            return UrlValidationResult.BLOCKED

        return UrlValidationResult.OK
