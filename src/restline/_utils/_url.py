from typing import Any, Mapping
from urllib.parse import SplitResult, quote, unquote_plus, urlencode, urlsplit, urlunsplit

import httpx

from ..models.errors import InvalidURLError, UrlConstructionError
from ._params import QUERY_SAFE, iter_pairs


def split_url(url: str) -> SplitResult:
    """Decompose an absolute URL, raising ``InvalidURLError`` if it cannot be."""
    try:
        parts = urlsplit(url)
        # accessing the port validates it
        parts.port
    except ValueError as e:
        raise InvalidURLError(url, str(e)) from e

    if not parts.scheme or not parts.netloc:
        raise InvalidURLError(url, "expected an absolute URL with scheme and host")
    return parts


def validate_url(url: str) -> str:
    split_url(url)
    try:
        httpx.URL(url)
    except httpx.InvalidURL as e:
        raise InvalidURLError(url, str(e)) from e
    return url


def join_url(base_url: str, path: str) -> str:
    """Join a base URL and a path with exactly one slash between them."""
    if not path:
        return base_url
    if path.startswith(("http://", "https://")):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def _segment_key(segment: str) -> str:
    return unquote_plus(segment.split("=", 1)[0])


def merge_query(url: str, params: Mapping[str, Any]) -> str:
    """Merge ``params`` into the query string of ``url``.

    Existing query items whose key appears in ``params`` are dropped and the
    new values appended after the surviving items. Surviving items keep their
    original text, so ``?flag&x=1`` stays ``flag&x=1``. List values expand into
    one item per element. Values without a string form are skipped with a
    warning.

    >>> merge_query("https://api.example.com/items?sort=asc", {"sort": "desc", "limit": 10})
    'https://api.example.com/items?sort=desc&limit=10'

    Raises:
        InvalidURLError: ``url`` cannot be decomposed.
        UrlConstructionError: The merged components do not form a valid URL.
    """
    if not params:
        return url

    parts = split_url(url)
    replaced = set(params)
    segments = [
        segment
        for segment in parts.query.split("&")
        if segment and _segment_key(segment) not in replaced
    ]
    added = urlencode(
        list(iter_pairs(params, strict=False)), safe=QUERY_SAFE, quote_via=quote
    )
    if added:
        segments.append(added)

    query = "&".join(segments)
    merged = urlunsplit(parts._replace(query=query))
    try:
        httpx.URL(merged)
    except httpx.InvalidURL as e:
        raise UrlConstructionError(merged, str(e)) from e
    return merged
