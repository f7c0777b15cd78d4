"""
Test case tools.

Single and bulk create/update/delete, lookups, export and status history.
create-test, update-test and bulk-update-tests share one set of optional
metadata arguments (section, priority, type, ...), all given as ids.
"""

from checkmate_mcp.tools.api import NotFound, api_tool
from checkmate_mcp.tools.base import ToolDefinition
from checkmate_mcp.tools.params import (
    ORG_ID,
    PAGE,
    PAGE_SIZE,
    PROJECT_ID,
    TEST_ID,
    TEXT_SEARCH,
    Param,
    ParamKind,
    choice,
    id_list,
    object_list,
    positive_id,
    text,
)

TESTS_TIP = "Use get-tests to find valid test IDs."

TEST_METADATA: tuple[Param, ...] = (
    text("testDescription", "Test description", required=False, allow_empty=True),
    positive_id("sectionId", "Section ID", required=False),
    positive_id("priorityId", "Priority ID", required=False),
    positive_id("typeId", "Test type ID", required=False),
    positive_id("automationStatusId", "Automation status ID", required=False),
    positive_id("platformId", "Platform ID", required=False),
    positive_id("testCoveredById", "Test covered by ID", required=False),
    positive_id("squadId", "Squad ID", required=False),
    id_list("labels", "Array of label IDs", required=False, non_empty=False),
)

# One row of a bulk import; lookup values are given by name, not id
BULK_TEST_FIELDS: tuple[Param, ...] = (
    text("title", "Test title"),
    text("section", "Section name"),
    text("description", "Test description", required=False, allow_empty=True),
    text("squad", "Squad name", required=False, allow_empty=True),
    text("priority", "Priority name", required=False, allow_empty=True),
    text("platform", "Platform name", required=False, allow_empty=True),
    text("type", "Test type name", required=False, allow_empty=True),
    text("automationStatus", "Automation status name", required=False, allow_empty=True),
    Param("steps", ParamKind.STRING, "Test steps", required=False, nullable=True),
    text("preConditions", "Pre-conditions", required=False, allow_empty=True),
    text("expectedResult", "Expected result", required=False, allow_empty=True),
    text("testCoveredBy", "Test covered by", required=False, allow_empty=True),
    text("additionalGroups", "Additional groups", required=False, allow_empty=True),
    text("automationId", "Automation ID", required=False, allow_empty=True),
    text("jiraTicket", "JIRA ticket", required=False, allow_empty=True),
    text("defects", "Defects", required=False, allow_empty=True),
    text("sectionDescription", "Section description", required=False, allow_empty=True),
)

BULK_UPDATE_FIELDS: tuple[Param, ...] = (
    TEST_ID,
    text("testName", "New test name", required=False),
    *TEST_METADATA,
)


def testcase_tools() -> tuple[ToolDefinition, ...]:
    """Everything that reads or changes test cases outside of a run."""
    return (
        api_tool(
            "get-tests",
            "Get tests of a project (not tied to a run)",
            "GET",
            "api/v1/project/tests",
            (PROJECT_ID, PAGE, PAGE_SIZE, TEXT_SEARCH),
            action="retrieve tests for project {projectId}",
            failure="retrieving tests",
            tip="Use get-projects to find valid project IDs.",
        ),
        api_tool(
            "get-test-details",
            "Get full details of a single test",
            "GET",
            "api/v1/test/details",
            (PROJECT_ID, TEST_ID),
            action="retrieve test {testId} details",
            failure="retrieving test details",
            tip=TESTS_TIP,
            not_found=NotFound("Test", "testId", "get-tests"),
        ),
        api_tool(
            "create-test",
            "Create a new test case in a project",
            "POST",
            "api/v1/test/create",
            (PROJECT_ID, text("testName", "Test name/title"), *TEST_METADATA),
            action='create test "{testName}" in project {projectId}',
            failure="creating test",
            tip="Use get-sections, get-priority, get-type tools to find valid IDs.",
        ),
        api_tool(
            "update-test",
            "Update an existing test case",
            "PUT",
            "api/v1/test/update",
            (TEST_ID, text("testName", "New test name", required=False), *TEST_METADATA),
            action="update test {testId}",
            failure="updating test",
            tip="Use get-test-details to verify the test exists and get-sections, get-priority to find valid IDs.",
        ),
        api_tool(
            "delete-test",
            "Delete a test case",
            "DELETE",
            "api/v1/test/delete",
            (TEST_ID, PROJECT_ID),
            action="delete test {testId} from project {projectId}",
            failure="deleting test",
            tip=TESTS_TIP,
        ),
        api_tool(
            "bulk-add-tests",
            "Create multiple test cases at once",
            "POST",
            "api/v1/test/bulk-add",
            (
                PROJECT_ID,
                ORG_ID,
                id_list("labelIds", "Array of label IDs to assign to all tests", required=False, non_empty=False),
                object_list("tests", BULK_TEST_FIELDS, "Array of test objects to create"),
            ),
            action=lambda a: f"bulk add {len(a['tests'])} tests",
            failure="bulk adding tests",
            tip="Use get-sections and get-labels to check names and label IDs.",
        ),
        api_tool(
            "bulk-update-tests",
            "Update multiple test cases at once",
            "PUT",
            "api/v1/test/bulk-update",
            (object_list("tests", BULK_UPDATE_FIELDS, "Array of test objects to update (each must include testId)"),),
            action=lambda a: f"bulk update {len(a['tests'])} tests",
            failure="bulk updating tests",
            tip="Ensure all testIds exist using get-tests.",
        ),
        api_tool(
            "bulk-delete-tests",
            "Delete multiple test cases at once",
            "DELETE",
            "api/v1/test/bulk-delete",
            (PROJECT_ID, id_list("testIds", "Array of test IDs to delete")),
            action=lambda a: f"delete {len(a['testIds'])} tests from project {a['projectId']}",
            failure="bulk deleting tests",
            tip=TESTS_TIP,
        ),
        api_tool(
            "download-tests",
            "Export the tests of a project",
            "GET",
            "api/v1/test/download",
            (PROJECT_ID, choice("format", ("json", "csv"), "Export format", default="json")),
            action="download tests for project {projectId} in {format} format",
            failure="downloading tests",
            tip="Use get-projects to find valid project IDs.",
        ),
        api_tool(
            "get-test-status-history",
            "Get the status history of a test across runs",
            "GET",
            "api/v1/test/test-status-history",
            (TEST_ID,),
            action="retrieve status history for test {testId}",
            failure="retrieving test status history",
            tip=TESTS_TIP,
        ),
    )
