"""Composite resource identifiers."""

from .codec import (
    CompositeIdCodec,
    build_rql_search_id,
    decode,
    encode,
    parse_rql_search_id,
)

__all__ = [
    "CompositeIdCodec",
    "encode",
    "decode",
    "build_rql_search_id",
    "parse_rql_search_id",
]
