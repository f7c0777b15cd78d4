"""Run tools: creating runs, executing tests inside them and reporting."""

from checkmate_mcp.tools.api import NotFound, api_tool
from checkmate_mcp.tools.base import ToolDefinition
from checkmate_mcp.tools.params import (
    PAGE,
    PAGE_SIZE,
    PROJECT_ID,
    RUN_ID,
    TEST_ID,
    TEXT_SEARCH,
    choice,
    id_list,
    object_list,
    positive_id,
    text,
)

RUNS_TIP = "Use get-runs to find valid run IDs."
RUN_TESTS_TIP = "Use get-run-tests-list to find tests in this run."

TEST_STATUS_FIELDS = (
    positive_id("testId", "Test ID", required=False),
    text("status", "New status, e.g. Passed, Failed, Blocked, Retest", required=False),
    text("comment", "Comment for this test", required=False, allow_empty=True),
)


def run_tools() -> tuple[ToolDefinition, ...]:
    """Run lifecycle and per-test execution status."""
    return (
        api_tool(
            "get-runs",
            "Get paginated runs of a project",
            "GET",
            "api/v1/runs",
            (PROJECT_ID, PAGE, PAGE_SIZE, TEXT_SEARCH),
            action="retrieve runs for project {projectId}",
            failure="retrieving runs",
            tip="Use get-projects to find valid project IDs.",
        ),
        api_tool(
            "get-run-detail",
            "Get details of a single run",
            "GET",
            "api/v1/run/detail",
            (RUN_ID,),
            action="retrieve run {runId} details",
            failure="retrieving run details",
            tip=RUNS_TIP,
            not_found=NotFound("Run", "runId", "get-runs"),
        ),
        api_tool(
            "create-run",
            "Create a run from a set of tests",
            "POST",
            "api/v1/run/create",
            (
                PROJECT_ID,
                text("runName", "Run name"),
                text("runDescription", "Run description", required=False, allow_empty=True),
                id_list("testIds", "IDs of the tests to include"),
            ),
            action=lambda a: f'create run "{a["runName"]}" with {len(a["testIds"])} test(s)',
            failure="creating run",
            tip="Use get-tests to find valid test IDs to include in the run.",
        ),
        api_tool(
            "edit-run",
            "Edit the name or description of a run",
            "PUT",
            "api/v1/run/edit",
            (
                RUN_ID,
                PROJECT_ID,
                text("runName", "New run name", required=False),
                text("runDescription", "New run description", required=False, allow_empty=True),
            ),
            action="edit run {runId}",
            failure="editing run",
            tip=RUNS_TIP,
        ),
        api_tool(
            "delete-run",
            "Delete a run",
            "DELETE",
            "api/v1/run/delete",
            (RUN_ID, PROJECT_ID),
            action="delete run {runId}",
            failure="deleting run",
            tip=RUNS_TIP,
        ),
        api_tool(
            "get-run-state-detail",
            "Get meta information / state summary for a run",
            "GET",
            "api/v1/run/state-detail",
            (
                RUN_ID,
                positive_id("projectId", "Project ID", required=False),
                choice("groupBy", ("squads",), "Group by field", required=False),
            ),
            action="retrieve state of run {runId}",
            failure="retrieving run state",
            tip=RUNS_TIP,
        ),
        api_tool(
            "get-run-tests-list",
            "Get the tests of a run with their current status",
            "GET",
            "api/v1/run/tests",
            (PROJECT_ID, RUN_ID, PAGE, PAGE_SIZE, TEXT_SEARCH),
            action="retrieve tests of run {runId}",
            failure="retrieving run tests",
            tip=RUNS_TIP,
        ),
        api_tool(
            "get-run-test-status",
            "Get the current status of one test in a run",
            "GET",
            "api/v1/run/test-status",
            (PROJECT_ID, RUN_ID, TEST_ID),
            action="retrieve status for test {testId} in run {runId}",
            failure="retrieving test status",
            tip=RUN_TESTS_TIP,
        ),
        api_tool(
            "get-test-status-history-in-run",
            "Get the status history of a test within one run",
            "GET",
            "api/v1/run/test-status-history",
            (RUN_ID, TEST_ID),
            action="retrieve status history for test {testId} in run {runId}",
            failure="retrieving test status history",
            tip=RUN_TESTS_TIP,
        ),
        api_tool(
            "run-update-test-status",
            "Update status for one or more tests inside a run",
            "POST",
            "api/v1/run/update-test-status",
            (
                RUN_ID,
                object_list("testIdStatusArray", TEST_STATUS_FIELDS, "Array of objects mapping testId to new status"),
                positive_id("projectId", "Project ID", required=False),
                text("comment", "Overall comment", required=False),
            ),
            action=lambda a: f"update status for {len(a['testIdStatusArray'])} test(s) in run {a['runId']}",
            failure="updating test statuses",
            tip=RUN_TESTS_TIP,
        ),
        api_tool(
            "run-lock",
            "Lock a run so its results can no longer change",
            "PUT",
            "api/v1/run/lock",
            (RUN_ID, PROJECT_ID),
            action="lock run {runId}",
            failure="locking run",
            tip="Use get-runs to find valid run IDs. Note: Only Active runs can be locked.",
        ),
        api_tool(
            "run-reset",
            "Reset a run, marking all Passed tests as Retest",
            "POST",
            "api/v1/run/reset",
            (RUN_ID,),
            action="reset run {runId}",
            failure="resetting run",
            tip="Use get-runs to find valid run IDs. This will mark all Passed tests as Retest.",
        ),
        api_tool(
            "run-remove-tests",
            "Remove tests from a run",
            "PUT",
            "api/v1/run/remove-tests",
            (RUN_ID, PROJECT_ID, id_list("testIds", "IDs of the tests to remove")),
            action=lambda a: f"remove {len(a['testIds'])} test(s) from run {a['runId']}",
            failure="removing tests from run",
            tip=RUN_TESTS_TIP,
        ),
        api_tool(
            "download-report",
            "Download the report of a run",
            "GET",
            "api/v1/run/report",
            (RUN_ID, PROJECT_ID, choice("format", ("json", "pdf", "html"), "Report format", default="json")),
            action="download report for run {runId} in {format} format",
            failure="downloading report",
            tip=RUNS_TIP,
        ),
    )
