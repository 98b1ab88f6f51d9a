"""User role data source."""

import logging
from typing import Callable, Optional, TypeVar

from pydantic import ValidationError as PydanticValidationError

from prismatf.client import PrismaCloudClient
from prismatf.core.config import GlobalConfig, get_config
from prismatf.core.exceptions import ObjectNotFoundError, ValidationError
from prismatf.core.models import UserRole, UserRoleQuery
from prismatf.resilience.poller import RetryPolicy, poll

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UserRoleDataSource:
    """Look up a user role by id or by name."""

    def __init__(
        self, client: PrismaCloudClient, settings: Optional[GlobalConfig] = None
    ):
        """Initialize the data source.

        Args:
            client: Prisma Cloud API client
            settings: Retry defaults, or the global configuration
        """
        self.client = client
        self.settings = settings or get_config()

    def read(self, query: UserRoleQuery) -> Optional[UserRole]:
        """Fetch the role matching ``query``.

        Returns:
            The role, or None if it does not exist

        Raises:
            InvalidConfigurationError: If the retry settings are invalid
            ValidationError: If the returned role payload is malformed
            Exception: Any API error other than not-found
        """
        call = self._caller(query)

        try:
            role_id = query.role_id
            if not role_id:
                role_id = call(lambda: self.client.identify_role(query.name))
            payload = call(lambda: self.client.get_role(role_id))
        except ObjectNotFoundError:
            logger.info(
                f"User role not found (role_id={query.role_id!r}, name={query.name!r})"
            )
            return None

        try:
            return UserRole.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid user role payload:\n{e}") from e

    def _caller(self, query: UserRoleQuery) -> Callable[[Callable[[], T]], T]:
        """Return a function running one API call, with backoff if enabled."""
        backoff_retry = (
            self.settings.backoff_retry
            if query.backoff_retry is None
            else query.backoff_retry
        )
        if not backoff_retry:
            return lambda operation: operation()

        policy = RetryPolicy.from_config(self.settings, max_retries=query.max_retries)

        def with_backoff(operation: Callable[[], T]) -> T:
            return poll(operation, policy).unwrap()

        return with_backoff
