"""Organization and user tools."""

from checkmate_mcp.tools.api import NotFound, api_tool
from checkmate_mcp.tools.base import ToolDefinition
from checkmate_mcp.tools.params import ORG_ID, integer, positive_id

ORGS_TIP = "Use get-orgs-list to find valid organization IDs."


def org_tools() -> tuple[ToolDefinition, ...]:
    """Tools for organizations and the users in them."""
    return (
        api_tool(
            "get-orgs-list",
            "Retrieve all organizations the authenticated user belongs to",
            "GET",
            "api/v1/orgs",
            action="retrieve organizations list",
            failure="retrieving organizations",
            tip="Check that your authentication token is valid.",
        ),
        api_tool(
            "get-org-details",
            "Fetch organization details by orgId",
            "GET",
            "api/v1/org/detail",
            (ORG_ID,),
            action="retrieve organization {orgId} details",
            failure="retrieving organization details",
            tip=ORGS_TIP,
            not_found=NotFound("Organization", "orgId", "get-orgs-list"),
        ),
        api_tool(
            "get-user-details",
            "Get details of the authenticated user",
            "GET",
            "api/v1/user/details",
            action="retrieve authenticated user details",
            failure="retrieving user details",
            tip="Check that your authentication token is valid.",
        ),
        api_tool(
            "get-all-users",
            "Get a list of all users in the system",
            "GET",
            "api/v1/users",
            (
                positive_id("orgId", "Filter by organization ID", required=False),
                positive_id("limit", "Limit the number of users returned", required=False),
                integer("offset", "Offset for pagination", minimum=0, required=False),
            ),
            action="retrieve users list",
            failure="getting users",
            tip=ORGS_TIP,
        ),
    )
