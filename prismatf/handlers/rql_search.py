"""Saved RQL search resource."""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from prismatf.client import PrismaCloudClient
from prismatf.core.exceptions import MalformedIdentifierError, ObjectNotFoundError
from prismatf.core.models import RqlSearchConfig, RqlSearchState, TimeRange
from prismatf.core.types import SearchType
from prismatf.ids.codec import build_rql_search_id, parse_rql_search_id
from prismatf.resilience.poller import RetryPolicy, poll

logger = logging.getLogger(__name__)

# State key -> response key, per search type
CONFIG_ITEM_FIELDS = {
    "state_id": "stateId",
    "name": "name",
    "url": "url",
}

NETWORK_ITEM_FIELDS = {
    "account": "account",
    "region_id": "regionId",
    "account_name": "accountName",
}

EVENT_ITEM_FIELDS = {
    "account": "account",
    "region_id": "regionId",
    "region_api_identifier": "regionApiIdentifier",
}

IAM_ITEM_FIELDS = {
    "accessed_resources_count": "accessedResourcesCount",
    "dest_cloud_account": "destCloudAccount",
    "dest_cloud_region": "destCloudRegion",
    "dest_cloud_resource_rrn": "destCloudResourceRrn",
    "dest_cloud_service_name": "destCloudServiceName",
    "dest_cloud_type": "destCloudType",
    "dest_resource_id": "destResourceId",
    "dest_resource_name": "destResourceName",
    "dest_resource_type": "destResourceType",
    "effective_action_name": "effectiveActionName",
    "granted_by_cloud_entity_id": "grantedByCloudEntityId",
    "granted_by_cloud_entity_name": "grantedByCloudEntityName",
    "granted_by_cloud_entity_rrn": "grantedByCloudEntityRrn",
    "granted_by_cloud_entity_type": "grantedByCloudEntityType",
    "granted_by_cloud_policy_id": "grantedByCloudPolicyId",
    "granted_by_cloud_policy_name": "grantedByCloudPolicyName",
    "granted_by_cloud_policy_rrn": "grantedByCloudPolicyRrn",
    "granted_by_cloud_policy_type": "grantedByCloudPolicyType",
    "granted_by_cloud_type": "grantedByCloudType",
    "message_id": "id",
    "is_wild_card_dest_cloud_resource_name": "isWildCardDestCloudResourceName",
    "last_access_date": "lastAccessDate",
    "source_cloud_account": "sourceCloudAccount",
    "source_cloud_region": "sourceCloudRegion",
    "source_cloud_resource_rrn": "sourceCloudResourceRrn",
    "source_cloud_service_name": "sourceCloudServiceName",
    "source_cloud_type": "sourceCloudType",
    "source_idp_domain": "sourceIdpDomain",
    "source_idp_email": "sourceIdpEmail",
    "source_idp_group": "sourceIdpGroup",
    "source_idp_rrn": "sourceIdpRrn",
    "source_idp_service": "sourceIdpService",
    "source_idp_user_name": "sourceIdpUsername",
    "source_public": "sourcePublic",
    "source_resource_id": "sourceResourceId",
    "source_resource_name": "sourceResourceName",
    "source_resource_type": "sourceResourceType",
}

ASSET_ITEM_FIELDS = {
    "unified_asset_id": "unifiedAssetId",
    "external_asset_id": "externalAssetId",
    "asset_name": "assetName",
    "asset_type": "assetType",
    "cloud_account_id": "accountId",
    "cloud_account_name": "accountName",
    "cloud_service_name": "serviceName",
    "cloud_region": "regionName",
    "finding_count": "findingCount",
    "last_modified_at": "lastModifiedAt",
    "asset_category": "assetCategory",
    "asset_class": "assetClass",
    "cloud_type": "cloudType",
    "finding_types_by_severity_order": "findingTypesBySeverityOrder",
    "total_security_issues_count": "totalSecurityIssuesCount",
    "matching_security_issues_count": "matchingSecurityIssuesCount",
}

# Request keys each search type accepts, besides query and limit
_REQUEST_OPTIONS = {
    SearchType.CONFIG: ("timeRange", "skipResult", "heuristicSearch"),
    SearchType.NETWORK: ("timeRange", "skipResult"),
    SearchType.EVENT: ("timeRange", "skipResult", "heuristicSearch"),
    SearchType.IAM: (),
    SearchType.ASSET: ("skipResult",),
}

_DATA_FIELDS = {
    SearchType.CONFIG: "config_data",
    SearchType.NETWORK: "network_data",
    SearchType.EVENT: "event_data",
    SearchType.IAM: "iam_data",
    SearchType.ASSET: "asset_data",
}


def _project(item: Dict[str, Any], fields: Dict[str, str]) -> Dict[str, Any]:
    return {key: item.get(source) for key, source in fields.items()}


def build_search_request(
    config: RqlSearchConfig, search_id: Optional[str] = None
) -> Dict[str, Any]:
    """Build the search request body for ``config``.

    Args:
        config: Search input
        search_id: Server-issued search id to re-run, if any

    Returns:
        Request dictionary in the API's shape
    """
    request: Dict[str, Any] = {"query": config.query, "limit": config.limit}

    if search_id:
        # Asset searches are re-run by saved search id
        if config.search_type == SearchType.ASSET:
            request["savedSearchId"] = search_id
        else:
            request["id"] = search_id

    options = _REQUEST_OPTIONS[config.search_type]
    if "timeRange" in options and config.time_range is not None:
        request["timeRange"] = config.time_range.to_api()
    if "skipResult" in options:
        request["skipResult"] = config.skip_result
    if "heuristicSearch" in options:
        request["heuristicSearch"] = config.heuristic_search

    return request


def response_search_id(search_type: SearchType, response: Dict[str, Any]) -> str:
    """Extract the server-issued search id from a search response."""
    if search_type == SearchType.ASSET:
        return (response.get("resultMetadata") or {}).get("searchId", "")
    return response.get("id", "")


class RqlSearchResource:
    """Create, read and forget saved RQL searches.

    The resource id packs (search type, query, search id) so that a search
    can be re-run from the id alone.
    """

    def __init__(
        self, client: PrismaCloudClient, policy: Optional[RetryPolicy] = None
    ):
        """Initialize the resource handler.

        Args:
            client: Prisma Cloud API client
            policy: Polling policy for read-after-write, or defaults
        """
        self.client = client
        self.policy = policy or RetryPolicy()

    def _search_fn(
        self, search_type: SearchType
    ) -> Callable[[Dict[str, Any]], Dict[str, Any]]:
        dispatch = {
            SearchType.CONFIG: self.client.config_search,
            SearchType.NETWORK: self.client.network_search,
            SearchType.EVENT: self.client.event_search,
            SearchType.IAM: self.client.iam_search,
            SearchType.ASSET: self.client.asset_search,
        }
        return dispatch[search_type]

    def create(self, config: RqlSearchConfig) -> RqlSearchState:
        """Run a new search and wait until it can be re-run by id.

        Args:
            config: Search input

        Returns:
            State of the saved search

        Raises:
            Exception: The last API error if the search never resolves
        """
        search = self._search_fn(config.search_type)

        logger.info(
            f"Creating {config.search_type.value} RQL search: {config.query!r}"
        )
        first = search(build_search_request(config))
        search_id = response_search_id(config.search_type, first)

        request = build_search_request(config, search_id)
        outcome = poll(lambda: search(request), self.policy)
        response = outcome.unwrap()
        logger.debug(
            f"Search {search_id} resolved after {outcome.attempts} attempt(s)"
        )

        state = RqlSearchState(
            id=build_rql_search_id(config.search_type.value, config.query, search_id),
            inputs=config,
        )
        self._apply(state, config.search_type, response)
        return state

    def update(self, state: RqlSearchState, config: RqlSearchConfig) -> RqlSearchState:
        """Apply new input to an existing search.

        Saved searches cannot be edited upstream: a different search type or
        query creates a new search, anything else re-reads the existing one.
        """
        if (
            config.search_type != state.inputs.search_type
            or config.query != state.inputs.query
        ):
            logger.info(f"Search identity changed for {state.id}, recreating")
            return self.create(config)

        refreshed = self.read(state.model_copy(update={"inputs": config}))
        if refreshed is None:
            return self.create(config)
        return refreshed

    def read(self, state: RqlSearchState) -> Optional[RqlSearchState]:
        """Re-run the search identified by ``state.id``.

        Returns:
            Refreshed state, or None if the search no longer resolves
        """
        try:
            search_type, query, search_id = self._parse_id(state.id)
        except MalformedIdentifierError as e:
            logger.warning(f"Dropping RQL search with unreadable id: {e}")
            return None

        config = state.inputs.model_copy(
            update={"search_type": search_type, "query": query}
        )
        try:
            response = self._search_fn(search_type)(
                build_search_request(config, search_id)
            )
        except ObjectNotFoundError:
            logger.warning(f"RQL search {search_id} not found, removing from state")
            return None

        refreshed = RqlSearchState(id=state.id, inputs=config)
        self._apply(refreshed, search_type, response)
        return refreshed

    def delete(self, state: RqlSearchState) -> None:
        """Searches cannot be deleted upstream; forgetting the state is enough."""
        logger.debug(f"Delete of RQL search {state.id} is a no-op")

    @staticmethod
    def _parse_id(token: str) -> Tuple[SearchType, str, str]:
        search_type, query, search_id = parse_rql_search_id(token)
        try:
            return SearchType(search_type), query, search_id
        except ValueError as e:
            raise MalformedIdentifierError(
                token, f"unknown search type {search_type!r}"
            ) from e

    def _apply(
        self,
        state: RqlSearchState,
        search_type: SearchType,
        response: Dict[str, Any],
    ) -> None:
        """Project a search response onto ``state``."""
        for data_field in _DATA_FIELDS.values():
            setattr(state, data_field, [])

        if search_type == SearchType.ASSET:
            metadata = response.get("resultMetadata") or {}
            state.search_id = metadata.get("searchId")
            state.cloud_type = metadata.get("cloudType")
            state.group_by = []
            state.asset_data = self._asset_items(response.get("value") or [])
            return

        state.search_id = response.get("id")
        state.name = response.get("name")
        state.description = response.get("description")
        items = (response.get("data") or {}).get("items") or []

        if search_type == SearchType.IAM:
            state.saved = response.get("saved")
            try:
                time_range = TimeRange.from_api(response.get("timeRange"))
            except (KeyError, TypeError, PydanticValidationError) as e:
                logger.warning(f"Error setting 'time_range' for {state.id!r}: {e}")
                time_range = None
            if time_range is not None:
                state.inputs = state.inputs.model_copy(update={"time_range": time_range})
            state.iam_data = self._iam_items(items)
            return

        state.cloud_type = response.get("cloudType")
        group_by = response.get("groupBy") or []
        if isinstance(group_by, list):
            state.group_by = [str(g) for g in group_by]
        else:
            logger.warning(f"Error setting 'group_by' for {state.id!r}: {group_by!r}")

        fields = {
            SearchType.CONFIG: CONFIG_ITEM_FIELDS,
            SearchType.NETWORK: NETWORK_ITEM_FIELDS,
            SearchType.EVENT: EVENT_ITEM_FIELDS,
        }[search_type]
        setattr(state, _DATA_FIELDS[search_type], [_project(x, fields) for x in items])

    @staticmethod
    def _iam_items(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        result = []
        for x in items:
            entry = _project(x, IAM_ITEM_FIELDS)
            entry["exceptions"] = [
                {"message_code": exc.get("messageCode")}
                for exc in x.get("exceptions") or []
            ]
            result.append(entry)
        return result

    @staticmethod
    def _asset_items(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        result = []
        for x in items:
            entry = _project(x, ASSET_ITEM_FIELDS)
            entry["matched_security_issues"] = [
                {"type": issue.get("type"), "count": issue.get("count")}
                for issue in x.get("matchedSecurityIssues") or []
            ]
            result.append(entry)
        return result
