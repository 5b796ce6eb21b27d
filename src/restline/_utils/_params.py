"""Encoding of request parameters into query items and request bodies.

Parameter values are either primitives (``str``, ``int``, ``float``,
``bool`` or an enum member wrapping one of them) or a ``list``/``tuple`` of
primitives. Sequences are always flattened into one ``key=value`` pair per
element, in order, for both query strings and form bodies.
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl, quote

from ..models.enums import ContentType
from ..models.errors import EncodingError

logger = logging.getLogger(__name__)

Primitive = Union[str, int, float, bool]

# RFC 3986 unreserved characters; everything else is percent-encoded.
QUERY_SAFE = "-._~"


def is_primitive(value: Any) -> bool:
    if isinstance(value, Enum):
        return is_primitive(value.value)
    return isinstance(value, (str, int, float, bool))


def stringify(value: Primitive) -> str:
    """Canonical string form of a primitive parameter value."""
    if isinstance(value, Enum):
        return stringify(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def percent_encode(value: str) -> str:
    return quote(value, safe=QUERY_SAFE)


def iter_pairs(
    params: Mapping[str, Any], *, strict: bool = True
) -> Iterator[Tuple[str, str]]:
    """Yield ``(key, value)`` string pairs, flattening sequences.

    Args:
        params: The parameter mapping.
        strict: When True, a value without a canonical string form raises
            ``EncodingError``. When False it is skipped and a warning is logged.
    """
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            if all(is_primitive(item) for item in value):
                for item in value:
                    yield key, stringify(item)
                continue
        elif is_primitive(value):
            yield key, stringify(value)
            continue

        if strict:
            raise EncodingError(
                f"Parameter {key!r} has unsupported value {value!r}; "
                "expected a primitive or a list of primitives"
            )
        logger.warning(
            f"Ignoring parameter {key!r} with unsupported type "
            f"{type(value).__name__} in URL query. Value: {value!r}"
        )


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_json(params: Mapping[str, Any], *, as_array: bool = False) -> bytes:
    payload: Any = dict(params)
    if as_array:
        payload = [payload]
    try:
        text = json.dumps(
            payload,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
            default=_json_default,
        )
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Could not encode parameters as JSON: {e}") from e
    return text.encode("utf-8")


def encode_form(params: Mapping[str, Any]) -> bytes:
    """Encode ``params`` as ``application/x-www-form-urlencoded``.

    >>> encode_form({"a": "x y", "b": ["1", "2"]})
    b'a=x%20y&b=1&b=2'
    """
    pairs = (
        f"{percent_encode(key)}={percent_encode(value)}"
        for key, value in iter_pairs(params, strict=True)
    )
    return "&".join(pairs).encode("utf-8")


def decode_form(body: Union[bytes, str]) -> Dict[str, Union[str, List[str]]]:
    """Inverse of ``encode_form``; keys seen more than once map to a list."""
    text = body.decode("utf-8") if isinstance(body, bytes) else body
    decoded: Dict[str, Union[str, List[str]]] = {}
    for key, value in parse_qsl(text, keep_blank_values=True):
        if key not in decoded:
            decoded[key] = value
            continue
        existing = decoded[key]
        if isinstance(existing, list):
            existing.append(value)
        else:
            decoded[key] = [existing, value]
    return decoded


def encode_body(
    params: Mapping[str, Any],
    content_type: ContentType,
    *,
    as_array: bool = False,
) -> Optional[bytes]:
    """Encode ``params`` as a request body for ``content_type``.

    Returns None when there is nothing to encode.

    Raises:
        EncodingError: A value cannot be represented, or the content type has
            no parameter encoding (multipart, binary formats).
    """
    if not params:
        return None
    if content_type is ContentType.JSON:
        return encode_json(params, as_array=as_array)
    if content_type is ContentType.FORM:
        return encode_form(params)
    raise EncodingError(
        f"Cannot encode request parameters as {content_type.mime_type}"
    )
