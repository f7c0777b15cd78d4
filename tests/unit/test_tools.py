"""
Unit tests for the tool catalogue.

Tools are driven through the registry with a FakeDispatcher, so these tests
check what each tool sends and how it reports the answer.

Tests cover:
- Catalogue shape (size, unique names, schemas, tips)
- Query string and body construction
- Detail tools reporting missing entities
- Transport failures surfaced verbatim
- Attachment preconditions and upload instructions
"""

import re
from typing import Any

import pytest

from checkmate_mcp.errors import NetworkError
from checkmate_mcp.tools.registry import ToolRegistry

EXPECTED_TOOLS = {
    "get-orgs-list", "get-org-details", "get-user-details", "get-all-users",
    "get-projects", "get-project-detail", "create-project", "edit-project", "update-project-status",
    "get-priority", "get-type", "get-automation-status", "get-test-covered-by",
    "get-labels", "add-labels", "get-squads", "add-squads",
    "get-sections", "add-section", "edit-section",
    "get-tests", "get-test-details", "create-test", "update-test", "delete-test",
    "bulk-add-tests", "bulk-update-tests", "bulk-delete-tests", "download-tests",
    "get-test-status-history",
    "get-runs", "get-run-detail", "create-run", "edit-run", "delete-run",
    "get-run-state-detail", "get-run-tests-list", "get-run-test-status",
    "get-test-status-history-in-run", "run-update-test-status", "run-lock", "run-reset",
    "run-remove-tests", "download-report",
    "get-test-attachments", "get-run-attachments", "get-presigned-upload-url",
    "confirm-attachment-upload", "delete-test-attachment", "delete-run-attachment",
}

TOOL_NAME = re.compile(r"\b[a-z]+(?:-[a-z]+)+\b")


class TestCatalogue:
    """Tests for the catalogue as a whole."""

    def test_size(self, registry: ToolRegistry) -> None:
        """Fifty tools are registered."""
        assert len(registry) == 50

    def test_names(self, registry: ToolRegistry) -> None:
        """Every expected tool is present."""
        assert set(registry.list_tools()) == EXPECTED_TOOLS

    def test_descriptions(self, registry: ToolRegistry) -> None:
        """Every tool describes itself."""
        for definition in registry:
            assert definition.description, definition.name

    def test_schemas_are_closed_objects(self, registry: ToolRegistry) -> None:
        """Every input schema is a closed object whose required names exist."""
        for definition in registry:
            schema = definition.input_schema
            assert schema["type"] == "object"
            assert schema["additionalProperties"] is False
            assert set(schema["required"]) <= set(schema["properties"]), definition.name

    def test_tips_name_registered_tools(self, registry: ToolRegistry) -> None:
        """Tools named in tips exist."""
        for definition in registry:
            for name in TOOL_NAME.findall(definition.tip or ""):
                assert name in registry, f"{definition.name} tip mentions {name}"

    def test_methods(self, registry: ToolRegistry) -> None:
        """Only the four verbs are used."""
        assert {d.method for d in registry} == {"GET", "POST", "PUT", "DELETE"}


class TestRequests:
    """Tests for what tools send."""

    def test_add_labels(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """add-labels posts its arguments and states what it did."""
        response = registry.invoke(
            "add-labels", {"projectId": 3, "labels": ["smoke", "regression"]}, dispatcher
        )
        assert len(dispatcher.calls) == 1
        call = dispatcher.calls[0]
        assert call.method == "POST"
        assert call.path == "api/v1/labels/add"
        assert call.body == {"projectId": 3, "labels": ["smoke", "regression"]}
        assert response.is_error is False
        assert "add 2 labels to project 3" in response.text

    def test_get_query_in_declared_order(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """GET tools put arguments in the query string."""
        registry.invoke(
            "get-projects", {"textSearch": "login", "orgId": 1, "pageSize": 10}, dispatcher
        )
        call = dispatcher.calls[0]
        assert call.method == "GET"
        assert call.path == "api/v1/projects?orgId=1&pageSize=10&textSearch=login"
        assert call.body is None

    def test_get_without_arguments(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """Tools without params call the bare path."""
        registry.invoke("get-orgs-list", None, dispatcher)
        assert dispatcher.calls[0].path == "api/v1/orgs"

    def test_enum_default_sent(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """Defaults are applied before dispatch."""
        response = registry.invoke("download-tests", {"projectId": 4}, dispatcher)
        assert dispatcher.calls[0].path == "api/v1/test/download?projectId=4&format=json"
        assert "download tests for project 4 in json format" in response.text

    def test_delete_sends_body(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """DELETE tools send a JSON body."""
        registry.invoke("bulk-delete-tests", {"projectId": 2, "testIds": [5, 6]}, dispatcher)
        call = dispatcher.calls[0]
        assert call.method == "DELETE"
        assert call.body == {"projectId": 2, "testIds": [5, 6]}

    def test_unknown_keys_not_forwarded(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """Only declared arguments reach the backend."""
        registry.invoke("run-lock", {"runId": 1, "projectId": 2, "force": True}, dispatcher)
        assert dispatcher.calls[0].body == {"runId": 1, "projectId": 2}

    def test_nested_objects(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """Status updates send the nested array as given."""
        response = registry.invoke(
            "run-update-test-status",
            {"runId": 9, "testIdStatusArray": [{"testId": 1, "status": "Passed"}]},
            dispatcher,
        )
        assert dispatcher.calls[0].body == {
            "runId": 9,
            "testIdStatusArray": [{"testId": 1, "status": "Passed"}],
        }
        assert "update status for 1 test(s) in run 9" in response.text

    def test_nested_null_not_forwarded(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """Null fields inside status updates are left out of the body."""
        registry.invoke(
            "run-update-test-status",
            {"runId": 1, "testIdStatusArray": [{"testId": 2, "status": None}]},
            dispatcher,
        )
        assert dispatcher.calls[0].body == {"runId": 1, "testIdStatusArray": [{"testId": 2}]}

    def test_page_size_uncapped_for_tests(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """get-tests passes a large pageSize through."""
        response = registry.invoke("get-tests", {"projectId": 1, "pageSize": 250}, dispatcher)
        assert response.is_error is False
        assert dispatcher.calls[0].path == "api/v1/project/tests?projectId=1&pageSize=250"

    def test_page_size_capped_for_projects(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """get-projects rejects a pageSize above 100."""
        response = registry.invoke("get-projects", {"orgId": 1, "pageSize": 250}, dispatcher)
        assert response.is_error is True
        assert "'pageSize' must be <= 100" in response.text
        assert dispatcher.calls == []

    @pytest.mark.parametrize(
        ("tool", "args", "path"),
        [
            ("get-tests", {"projectId": 1}, "api/v1/project/tests?projectId=1"),
            ("get-run-tests-list", {"projectId": 1, "runId": 2}, "api/v1/run/tests?projectId=1&runId=2"),
        ],
    )
    def test_blank_search_not_sent(
        self, registry: ToolRegistry, dispatcher: Any, tool: str, args: dict[str, Any], path: str
    ) -> None:
        """An empty textSearch is dropped from test listings."""
        response = registry.invoke(tool, {**args, "textSearch": ""}, dispatcher)
        assert response.is_error is False
        assert dispatcher.calls[0].path == path

    def test_blank_search_sent_for_projects(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """get-projects forwards an empty textSearch."""
        registry.invoke("get-projects", {"orgId": 1, "textSearch": ""}, dispatcher)
        assert dispatcher.calls[0].path == "api/v1/projects?orgId=1&textSearch="

    @pytest.mark.parametrize(
        ("args", "argument"),
        [
            ({"labels": ["smoke"]}, "projectId"),
            ({"projectId": 0, "labels": ["smoke"]}, "projectId"),
            ({"projectId": 3, "labels": []}, "labels"),
        ],
    )
    def test_invalid_arguments_never_dispatch(
        self, registry: ToolRegistry, dispatcher: Any, args: dict[str, Any], argument: str
    ) -> None:
        """Validation failures stop before the backend."""
        response = registry.invoke("add-labels", args, dispatcher)
        assert response.is_error is True
        assert f"Invalid arguments: '{argument}'" in response.text
        assert dispatcher.calls == []

    def test_get_tools_never_send_a_body(self, registry: ToolRegistry, make_dispatcher: Any) -> None:
        """No GET tool sends a body, whatever its arguments."""
        for definition in registry:
            if definition.method != "GET":
                continue
            fake = make_dispatcher(payload={"data": {"id": 1}})
            definition.invoke({"orgId": 1, "projectId": 1, "runId": 1, "testId": 1}, fake)
            for call in fake.calls:
                assert call.body is None, definition.name
                assert call.method == "GET"

    def test_deterministic(self, registry: ToolRegistry, make_dispatcher: Any) -> None:
        """The same arguments give the same request and envelope."""
        args = {"projectId": 2, "runId": 9, "page": 1, "textSearch": "checkout"}
        first, second = make_dispatcher(payload={"data": []}), make_dispatcher(payload={"data": []})
        one = registry.invoke("get-run-tests-list", args, first)
        two = registry.invoke("get-run-tests-list", dict(reversed(list(args.items()))), second)
        assert first.calls == second.calls
        assert one == two


class TestResponses:
    """Tests for how answers are reported."""

    def test_success_envelope(self, registry: ToolRegistry, make_dispatcher: Any) -> None:
        """Success text has the action, the payload and the parameter hints."""
        fake = make_dispatcher(payload={"data": [{"labelId": 1, "name": "smoke"}]})
        response = registry.invoke("get-labels", {"projectId": 3}, fake)
        assert response.is_error is False
        assert response.text.startswith("✅ Successfully completed: retrieve labels for project 3")
        assert '"name": "smoke"' in response.text
        assert "📝 Parameters:\n- projectId (number, required)" in response.text

    def test_missing_org(self, registry: ToolRegistry, make_dispatcher: Any) -> None:
        """An empty detail payload is a not-found envelope."""
        fake = make_dispatcher(payload={})
        response = registry.invoke("get-org-details", {"orgId": 7}, fake)
        assert response.is_error is True
        assert "Organization not found" in response.text
        assert "Organization 7 does not exist" in response.text
        assert "get-orgs-list" in response.text

    @pytest.mark.parametrize(
        ("tool", "args", "kind"),
        [
            ("get-project-detail", {"projectId": 5}, "Project"),
            ("get-run-detail", {"runId": 5}, "Run"),
            ("get-test-details", {"projectId": 1, "testId": 5}, "Test"),
        ],
    )
    def test_missing_entities(
        self, registry: ToolRegistry, make_dispatcher: Any, tool: str, args: dict[str, Any], kind: str
    ) -> None:
        """Detail tools treat None and empty data as not found."""
        for payload in (None, {"data": {}}, {"data": None}):
            response = registry.invoke(tool, args, make_dispatcher(payload=payload))
            assert response.is_error is True
            assert f"{kind} 5 does not exist" in response.text

    def test_empty_list_is_success(self, registry: ToolRegistry, make_dispatcher: Any) -> None:
        """List tools report empty results as success."""
        response = registry.invoke("get-runs", {"projectId": 1}, make_dispatcher(payload={"data": []}))
        assert response.is_error is False

    def test_backend_reported_error(self, registry: ToolRegistry, make_dispatcher: Any) -> None:
        """A payload carrying error is a failure envelope."""
        fake = make_dispatcher(payload={"error": "Project name already exists"})
        response = registry.invoke("create-project", {"orgId": 1, "projectName": "Web"}, fake)
        assert response.is_error is True
        assert "❌ Failed to create project \"Web\"" in response.text
        assert "Project name already exists" in response.text

    def test_network_error_verbatim(self, registry: ToolRegistry, make_dispatcher: Any) -> None:
        """Transport failures reach the caller verbatim after one attempt."""
        fake = make_dispatcher(error=NetworkError(method="GET", path="x", underlying_error="Connection refused"))
        response = registry.invoke("get-labels", {"projectId": 3}, fake)
        assert len(fake.calls) == 1
        assert response.is_error is True
        assert response.text == (
            "❌ Error retrieving labels: Network request failed: Connection refused"
            "\n\n💡 Tip: Use get-projects to find valid project IDs."
        )

    def test_update_project_status_action(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """The action statement reflects the new status."""
        response = registry.invoke("update-project-status", {"projectId": 2, "isActive": False}, dispatcher)
        assert "deactivate project 2" in response.text


class TestAttachments:
    """Tests for attachment tools."""

    UPLOAD = {
        "projectId": 1,
        "testId": 2,
        "filename": "screen.png",
        "mimeType": "image/png",
        "fileSize": 2048,
    }

    def test_actual_requires_run(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """"actual" attachments need a runId and never dispatch without one."""
        response = registry.invoke(
            "get-presigned-upload-url", {**self.UPLOAD, "attachmentType": "actual"}, dispatcher
        )
        assert response.is_error is True
        assert "'runId' is required for actual behavior attachments" in response.text
        assert dispatcher.calls == []

    def test_confirm_actual_requires_run(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """Confirmation has the same precondition."""
        response = registry.invoke(
            "confirm-attachment-upload",
            {**self.UPLOAD, "storageKey": "k", "attachmentType": "actual"},
            dispatcher,
        )
        assert response.is_error is True
        assert dispatcher.calls == []

    def test_expected_without_run(self, registry: ToolRegistry, dispatcher: Any) -> None:
        """"expected" attachments don't need a run."""
        registry.invoke("get-presigned-upload-url", {**self.UPLOAD, "attachmentType": "expected"}, dispatcher)
        assert dispatcher.calls[0].method == "POST"
        assert dispatcher.calls[0].body["attachmentType"] == "expected"

    def test_upload_instructions(self, registry: ToolRegistry, make_dispatcher: Any) -> None:
        """A presigned URL is rendered as upload instructions."""
        fake = make_dispatcher(payload={
            "data": {
                "uploadUrl": "https://bucket.test/put",
                "storageKey": "att/1/2/screen.png",
                "expiresAt": "2026-01-01T00:00:00Z",
            }
        })
        response = registry.invoke(
            "get-presigned-upload-url", {**self.UPLOAD, "runId": 8, "attachmentType": "actual"}, fake
        )
        assert response.is_error is False
        assert response.text.startswith("✅ Presigned upload URL generated successfully!")
        assert "https://bucket.test/put" in response.text
        assert 'storageKey: "att/1/2/screen.png"' in response.text
        assert "runId: 8" in response.text
        assert response.meta == {"storage_key": "att/1/2/screen.png"}

    def test_unrecognised_upload_payload(self, registry: ToolRegistry, make_dispatcher: Any) -> None:
        """Other payload shapes fall back to the generic envelope."""
        fake = make_dispatcher(payload={"data": {"status": "queued"}})
        response = registry.invoke(
            "get-presigned-upload-url", {**self.UPLOAD, "attachmentType": "expected"}, fake
        )
        assert response.text.startswith("✅ Successfully completed: generate presigned upload URL")
