"""Input parsers."""

from .inputs import is_valid_rql_search_config, parse_rql_search_config, parse_user_role_query

__all__ = [
    "parse_rql_search_config",
    "parse_user_role_query",
    "is_valid_rql_search_config",
]
