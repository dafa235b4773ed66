import ipaddress
import socket
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

from noodlenook.domain.exceptions import ValidationError

ALLOWED_SCHEMES = {"http", "https"}

BLOCKED_MESSAGE = "Requests to private/local networks are not allowed"


@dataclass(frozen=True)
class PublicTarget:
    """A URL whose host has been resolved and vetted, pinned to that address."""

    url: str          # original URL with the host swapped for the vetted address
    host: str         # value for the Host header
    server_name: str  # TLS SNI / certificate hostname


def _is_blocked(address) -> bool:
    ip = ipaddress.ip_address(address)
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped:
        ip = ip.ipv4_mapped
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_reserved
        or ip.is_multicast
        or ip.is_unspecified
    )


def _bracket(address: str) -> str:
    return f"[{address}]" if ":" in address else address


def resolve_public_url(url) -> PublicTarget:
    """
    Resolve the URL's host once and refuse it unless every address is public.

    The returned target carries the first vetted address, so the caller
    connects to exactly what was checked instead of resolving again.
    """
    if not isinstance(url, str) or not url:
        raise ValidationError("URL is required")

    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        raise ValidationError("Invalid URL format")

    if parts.scheme not in ALLOWED_SCHEMES:
        raise ValidationError("Only HTTP and HTTPS URLs are allowed")

    host = parts.hostname
    if not host:
        raise ValidationError("Invalid URL format")

    if host == "localhost" or host.endswith(".localhost"):
        raise ValidationError(BLOCKED_MESSAGE)

    try:
        ascii_host = host.encode("idna").decode("ascii")
        infos = socket.getaddrinfo(ascii_host, port or (443 if parts.scheme == "https" else 80))
    except UnicodeError:
        raise ValidationError("Invalid webhook host")
    except socket.gaierror:
        raise ValidationError("Webhook host could not be resolved")

    if not infos:
        raise ValidationError("Webhook host could not be resolved")

    for info in infos:
        if _is_blocked(info[4][0]):
            raise ValidationError(BLOCKED_MESSAGE)

    address = infos[0][4][0]
    suffix = f":{port}" if port else ""

    return PublicTarget(
        url=urlunsplit((parts.scheme, _bracket(address) + suffix, parts.path, parts.query, "")),
        host=_bracket(ascii_host) + suffix,
        server_name=ascii_host,
    )


def assert_public_url(url):
    """Reject URLs whose host is, or resolves to, a loopback/private address."""
    resolve_public_url(url)
    return url
