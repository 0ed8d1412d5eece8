"""Content graph gateway access."""

from .client import GraphClient
from .normalize import normalize_content_item, normalize_items
from .queries import CONTENT_SEARCH_QUERY, recent_content_query
from .signing import SignedRequest, compute_auth_header, sign

__all__ = [
    "CONTENT_SEARCH_QUERY",
    "GraphClient",
    "SignedRequest",
    "compute_auth_header",
    "normalize_content_item",
    "normalize_items",
    "recent_content_query",
    "sign",
]
