"""
URL normalization for stored destination URLs.

Links store their destination in one canonical form so that a URL can be
looked up by exact match no matter how it was typed. Normalizing also
validates: anything that does not come out as a usable https URL raises
URLNormalizationError.
"""

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from pydantic import HttpUrl, TypeAdapter, ValidationError
from url_normalize import url_normalize

from hashlink_app.exceptions import URLNormalizationError

SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
# Only strip www. when what remains still looks like a domain (www.com stays)
WWW_RE = re.compile(r"^www\.(?!www\.)[a-z0-9-]{1,63}\.[a-z0-9.-]{2,63}$")
DUPLICATE_SLASHES_RE = re.compile(r"/{2,}")
TRACKING_PARAM_RE = re.compile(r"^utm_\w+", re.IGNORECASE)

ALLOWED_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}

_http_url = TypeAdapter(HttpUrl)


def _param_key(param: str) -> str:
    return param.split("=", 1)[0]


def _normalize_query(query: str) -> str:
    """Drop empty and utm_* params, then sort the rest by key (stable)"""
    params = [
        param for param in query.split("&")
        if param and not TRACKING_PARAM_RE.match(_param_key(param))
    ]
    return "&".join(sorted(params, key=_param_key))


def normalize_url(url: str) -> str:
    """
    Normalize a URL to the canonical form links are stored in.

    Process:
    1. Assume https:// when no scheme is given
    2. Run url_normalize (lowercase scheme/host, IDNA host, percent-encoding,
       dot segments, default ports)
    3. Force https, drop credentials, port 443 and a leading www.
    4. Collapse duplicate slashes and drop the trailing slash
    5. Drop utm_* tracking params and sort the remaining query params
    6. Check the result is a valid http URL

    Normalizing an already-normalized URL returns it unchanged.

    Raises:
        URLNormalizationError: if the URL is empty, malformed or not http(s)
    """
    if not isinstance(url, str) or not url.strip():
        raise URLNormalizationError("URL must be a non-empty string")

    url = url.strip()
    if url.startswith("//"):
        url = "https:" + url
    elif not SCHEME_RE.match(url):
        url = "https://" + url

    try:
        parts = urlsplit(url_normalize(url))
        port = parts.port
    except ValueError as err:
        raise URLNormalizationError(f"Invalid URL '{url}': {err}") from err

    if parts.scheme not in ALLOWED_SCHEMES:
        raise URLNormalizationError(f"Unsupported URL scheme '{parts.scheme}'")

    host = parts.hostname
    if not host:
        raise URLNormalizationError(f"Invalid URL '{url}': missing host")
    if WWW_RE.match(host):
        host = host[len("www."):]

    netloc = f"[{host}]" if ":" in host else host
    if port is not None and port != 443:
        netloc = f"{netloc}:{port}"

    path = DUPLICATE_SLASHES_RE.sub("/", parts.path)
    if path.endswith("/"):
        path = path[:-1]

    normalized = urlunsplit(("https", netloc, path, _normalize_query(parts.query), parts.fragment))

    try:
        _http_url.validate_python(normalized)
    except ValidationError as err:
        message = err.errors()[0]["msg"] if err.errors() else str(err)
        raise URLNormalizationError(f"Invalid URL '{url}': {message}") from err

    return normalized


def url_host(url: str) -> str:
    """Hostname of an already-normalized URL"""
    return urlsplit(url).hostname or ""


def url_port(url: str) -> Optional[int]:
    """Port of an already-normalized URL, falling back to the scheme default"""
    parts = urlsplit(url)
    return parts.port or DEFAULT_PORTS.get(parts.scheme)
