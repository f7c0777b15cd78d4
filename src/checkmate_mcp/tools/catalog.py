"""
Catalog tools: the lookup values tests are classified with.

Priorities, types, automation statuses and coverage sources are defined per
organization; labels, squads and sections per project.
"""

from checkmate_mcp.tools.api import api_tool
from checkmate_mcp.tools.base import ToolDefinition
from checkmate_mcp.tools.params import ORG_ID, PROJECT_ID, positive_id, text, text_list

ORGS_TIP = "Use get-orgs-list to find valid organization IDs."
PROJECTS_TIP = "Use get-projects to find valid project IDs."


def _org_lookup(name: str, description: str, path: str, noun: str) -> ToolDefinition:
    return api_tool(
        name,
        description,
        "GET",
        path,
        (ORG_ID,),
        action=f"retrieve {noun} for organization {{orgId}}",
        failure=f"retrieving {noun}",
        tip=ORGS_TIP,
    )


def catalog_tools() -> tuple[ToolDefinition, ...]:
    """Organization-level lookups and project-level labels, squads and sections."""
    return (
        _org_lookup("get-priority", "Get priority levels for an organization", "api/v1/priority", "priorities"),
        _org_lookup("get-type", "Get test types for an organization", "api/v1/type", "test types"),
        _org_lookup(
            "get-automation-status",
            "Get automation statuses for an organization",
            "api/v1/automationStatus",
            "automation statuses",
        ),
        _org_lookup(
            "get-test-covered-by",
            "Get test coverage sources for an organization",
            "api/v1/testCoveredBy",
            "test coverage data",
        ),
        api_tool(
            "get-labels",
            "Get labels for a project",
            "GET",
            "api/v1/labels",
            (PROJECT_ID,),
            action="retrieve labels for project {projectId}",
            failure="retrieving labels",
            tip=PROJECTS_TIP,
        ),
        api_tool(
            "add-labels",
            "Add new labels to a project",
            "POST",
            "api/v1/labels/add",
            (PROJECT_ID, text_list("labels", "Array of label names to create")),
            action=lambda a: f"add {len(a['labels'])} labels to project {a['projectId']}",
            failure="adding labels",
            tip=PROJECTS_TIP,
        ),
        api_tool(
            "get-squads",
            "Get squads for a project",
            "GET",
            "api/v1/project/squads",
            (PROJECT_ID,),
            action="retrieve squads for project {projectId}",
            failure="retrieving squads",
            tip=PROJECTS_TIP,
        ),
        api_tool(
            "add-squads",
            "Add new squads to a project",
            "POST",
            "api/v1/squads/add",
            (PROJECT_ID, text_list("squads", "Array of squad names to create")),
            action=lambda a: f"add {len(a['squads'])} squads to project {a['projectId']}",
            failure="adding squads",
            tip=PROJECTS_TIP,
        ),
        api_tool(
            "get-sections",
            "Get sections for a project, optionally scoped to a run",
            "GET",
            "api/v1/project/sections",
            (PROJECT_ID, positive_id("runId", "Only sections with tests in this run", required=False)),
            action="retrieve sections for project {projectId}",
            failure="retrieving sections",
            tip=PROJECTS_TIP,
        ),
        api_tool(
            "add-section",
            "Add a section to a project",
            "POST",
            "api/v1/section/add",
            (
                PROJECT_ID,
                text("sectionName", "Section name"),
                positive_id("parentSectionId", "Parent section ID for nesting", required=False),
            ),
            action='add section "{sectionName}" to project {projectId}',
            failure="adding section",
            tip="Use get-sections to view existing sections.",
        ),
        api_tool(
            "edit-section",
            "Rename a section",
            "PUT",
            "api/v1/section/edit",
            (positive_id("sectionId", "Section ID to edit"), text("sectionName", "New section name")),
            action='edit section {sectionId} name to "{sectionName}"',
            failure="editing section",
            tip="Use get-sections to find valid section IDs.",
        ),
    )
