"""Interface of the Prisma Cloud API client used by the handlers.

Transport (authentication, HTTP, JSON) belongs to the client implementation.
Handlers only rely on the methods below, on request/response dictionaries in
the API's camelCase shape, and on :class:`ObjectNotFoundError` being raised
for objects that do not exist.
"""

from typing import Any, Dict, Protocol, runtime_checkable

from prismatf.core.exceptions import ApiError, ObjectNotFoundError

__all__ = ["PrismaCloudClient", "ApiError", "ObjectNotFoundError"]


@runtime_checkable
class PrismaCloudClient(Protocol):
    """Prisma Cloud API operations needed by the resources in this package."""

    def config_search(self, request: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def network_search(self, request: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def event_search(self, request: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def iam_search(self, request: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def asset_search(self, request: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def identify_role(self, name: str) -> str:
        """Resolve a role name to its id."""
        ...

    def get_role(self, role_id: str) -> Dict[str, Any]:
        ...
