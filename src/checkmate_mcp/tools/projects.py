"""Project tools."""

from checkmate_mcp.tools.api import NotFound, api_tool
from checkmate_mcp.tools.base import ToolDefinition
from checkmate_mcp.tools.params import (
    ORG_ID,
    PAGE,
    PROJECT_ID,
    PROJECT_PAGE_SIZE,
    flag,
    text,
)

PROJECTS_TIP = "Use get-projects to find valid project IDs."


def project_tools() -> tuple[ToolDefinition, ...]:
    """Listing, lookup and maintenance of projects."""
    return (
        api_tool(
            "get-projects",
            "Retrieve paginated list of projects for an organization",
            "GET",
            "api/v1/projects",
            (
                ORG_ID,
                PAGE,
                PROJECT_PAGE_SIZE,
                text("textSearch", "Filter by project name", required=False, allow_empty=True),
                text("projectDescription", "Filter by project description", required=False),
            ),
            action="retrieve projects for organization {orgId}",
            failure="retrieving projects",
            tip="Use get-orgs-list to find valid organization IDs.",
        ),
        api_tool(
            "get-project-detail",
            "Get details of a single project",
            "GET",
            "api/v1/project/detail",
            (PROJECT_ID,),
            action="retrieve project {projectId} details",
            failure="retrieving project details",
            tip=PROJECTS_TIP,
            not_found=NotFound("Project", "projectId", "get-projects"),
        ),
        api_tool(
            "create-project",
            "Create a new project in an organization",
            "POST",
            "api/v1/project/create",
            (
                ORG_ID,
                text("projectName", "Project name"),
                text("projectDescription", "Project description", required=False, allow_empty=True),
            ),
            action='create project "{projectName}"',
            failure="creating project",
            tip="Use get-orgs-list to find valid organization IDs.",
        ),
        api_tool(
            "edit-project",
            "Edit an existing project",
            "PUT",
            "api/v1/project/edit",
            (
                PROJECT_ID,
                text("projectName", "New project name", required=False),
                text("projectDescription", "New project description", required=False, allow_empty=True),
            ),
            action="edit project {projectId}",
            failure="editing project",
            tip=PROJECTS_TIP,
        ),
        api_tool(
            "update-project-status",
            "Activate or deactivate a project",
            "PUT",
            "api/v1/project/update-status",
            (PROJECT_ID, flag("isActive", "Whether the project is active")),
            action=lambda a: f"{'activate' if a['isActive'] else 'deactivate'} project {a['projectId']}",
            failure="updating project status",
            tip=PROJECTS_TIP,
        ),
    )
