"""Validation of raw resource and data source inputs."""

from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError

from prismatf.core.exceptions import ValidationError
from prismatf.core.models import RqlSearchConfig, UserRoleQuery


def parse_rql_search_config(data: Dict[str, Any]) -> RqlSearchConfig:
    """Parse saved RQL search input from a dictionary.

    Args:
        data: Input attributes, e.g. ``{"search_type": "network", "query": "..."}``

    Returns:
        Validated RqlSearchConfig

    Raises:
        ValidationError: If the input is invalid

    Example:
        >>> config = parse_rql_search_config({"query": "config from cloud.resource"})
        >>> config.search_type.value
        'config'
    """
    try:
        return RqlSearchConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid rql_search input:\n{e}")


def parse_user_role_query(data: Dict[str, Any]) -> UserRoleQuery:
    """Parse user role data source input from a dictionary.

    Raises:
        ValidationError: If neither role_id nor name is set, or a field is invalid
    """
    try:
        return UserRoleQuery.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid user_role input:\n{e}")


def is_valid_rql_search_config(data: Dict[str, Any]) -> bool:
    """Validate saved RQL search input without raising exceptions."""
    try:
        parse_rql_search_config(data)
        return True
    except ValidationError:
        return False
