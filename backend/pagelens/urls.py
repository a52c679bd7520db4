"""URL normalization for incoming analysis requests."""

import re
from urllib.parse import urlsplit, urlunsplit

from pagelens.errors import InputError

_DEFAULT_PORTS = {"http": 80, "https": 443}
_TRAILING_SLASHES = re.compile(r"/+$")
_HOST = re.compile(r"^[a-z0-9_-]+(\.[a-z0-9_-]+)*\.?$")


def normalize_url(url: str) -> str:
    """
    Trim, lowercase, strip trailing slashes, default the scheme to https and
    drop default ports. Raises InputError if the result is not an absolute
    http(s) URL with a hostname.

    normalize_url(normalize_url(u)) == normalize_url(u) for every valid u.
    """
    if url is None:
        raise InputError("URL is required")

    normalized = _TRAILING_SLASHES.sub("", str(url).strip().lower())
    if not normalized:
        raise InputError("URL is required")

    if not normalized.startswith(("http://", "https://")):
        normalized = "https://" + normalized

    try:
        parts = urlsplit(normalized)
        port = parts.port
    except ValueError:
        raise InputError("Invalid URL format")

    host = _to_ascii_host(parts.hostname)
    if parts.scheme not in _DEFAULT_PORTS or not _is_valid_host(host):
        raise InputError("Invalid URL format")

    netloc = f"[{host}]" if ":" in host else host
    if parts.username or parts.password:
        userinfo = parts.username or ""
        if parts.password:
            userinfo += ":" + parts.password
        netloc = f"{userinfo}@{netloc}"
    if port is not None and port != _DEFAULT_PORTS[parts.scheme]:
        netloc = f"{netloc}:{port}"

    path = _TRAILING_SLASHES.sub("", parts.path)
    return urlunsplit((parts.scheme, netloc, path, parts.query, parts.fragment))


def _to_ascii_host(host: str | None) -> str | None:
    # Internationalized names are stored in their punycode form.
    if not host or ":" in host or host.isascii():
        return host
    try:
        return host.encode("idna").decode("ascii")
    except UnicodeError:
        raise InputError("Invalid URL format")


def _is_valid_host(host: str | None) -> bool:
    # Bare words like "not-a-valid-url" are rejected; localhost and IPs are not.
    if not host:
        return False
    if host == "localhost" or ":" in host:
        return True
    return "." in host and bool(_HOST.match(host))


def is_valid_url(url: str) -> bool:
    try:
        normalize_url(url)
        return True
    except InputError:
        return False
