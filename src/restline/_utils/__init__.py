from ._logs import mask_headers, setup_logging
from ._params import (
    decode_form,
    encode_body,
    encode_form,
    encode_json,
    iter_pairs,
    stringify,
)
from ._service_url_overrides import clear_overrides_cache, get_service_override
from ._url import join_url, merge_query, split_url, validate_url
from ._user_agent import user_agent_value

__all__ = [
    "clear_overrides_cache",
    "decode_form",
    "encode_body",
    "encode_form",
    "encode_json",
    "get_service_override",
    "iter_pairs",
    "join_url",
    "mask_headers",
    "merge_query",
    "setup_logging",
    "split_url",
    "stringify",
    "user_agent_value",
    "validate_url",
]
