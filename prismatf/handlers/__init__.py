"""Resource and data source handlers."""

from .rql_search import RqlSearchResource, build_search_request
from .user_role import UserRoleDataSource

__all__ = [
    "RqlSearchResource",
    "UserRoleDataSource",
    "build_search_request",
]
