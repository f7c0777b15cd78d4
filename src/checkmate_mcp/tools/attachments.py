"""
Attachment tools.

Uploads are two-step: get-presigned-upload-url returns a URL the caller PUTs
the file to, then confirm-attachment-upload registers the stored object
against the test (or the test inside a run). "expected" attachments belong to
the test itself; "actual" attachments record what happened during a run and
therefore need a runId.
"""

from collections.abc import Mapping
from typing import Any

from checkmate_mcp.errors import ToolInvalidArgsError
from checkmate_mcp.schema import ToolResponse
from checkmate_mcp.tools.api import api_tool
from checkmate_mcp.tools.base import ToolDefinition
from checkmate_mcp.tools.params import (
    PROJECT_ID,
    TEST_ID,
    choice,
    positive_id,
    text,
)

ATTACHMENT_TYPE = choice(
    "attachmentType",
    ("expected", "actual"),
    '"expected" for reference material, "actual" for run results (requires runId)',
)
OPTIONAL_RUN_ID = positive_id("runId", "Run ID (required for actual attachments)", required=False)
FILE_PARAMS = (
    text("filename", "Original filename"),
    text("mimeType", "MIME type, e.g. image/png"),
    positive_id("fileSize", "File size in bytes"),
)


def require_run_for_actual(args: dict[str, Any]) -> None:
    """Reject "actual" attachments that aren't tied to a run."""
    if args.get("attachmentType") == "actual" and not args.get("runId"):
        raise ToolInvalidArgsError(
            argument="runId",
            reason="is required for actual behavior attachments",
            suggestion="Provide a runId when attaching results during test execution",
        )


def render_upload_url(payload: Any, args: dict[str, Any]) -> ToolResponse | None:
    """Turn a {"data": {uploadUrl, storageKey, expiresAt}} payload into upload instructions."""
    if not isinstance(payload, Mapping):
        return None
    data = payload.get("data")
    if not isinstance(data, Mapping) or "uploadUrl" not in data:
        return None

    text_ = (
        "✅ Presigned upload URL generated successfully!\n\n"
        f"📤 **Upload URL**: {data['uploadUrl']}\n\n"
        f"🔑 **Storage Key**: {data.get('storageKey')}\n\n"
        f"⏰ **Expires At**: {data.get('expiresAt')}\n\n"
        "📝 **Next Steps**:\n"
        f"1. Upload your file to the URL using PUT request with Content-Type: {args['mimeType']}\n"
        "2. After successful upload, call confirm-attachment-upload with:\n"
        f'   - storageKey: "{data.get("storageKey")}"\n'
        f'   - filename: "{args["filename"]}"\n'
        f'   - mimeType: "{args["mimeType"]}"\n'
        f"   - fileSize: {args['fileSize']}\n"
        f'   - attachmentType: "{args["attachmentType"]}"\n'
    )
    if args.get("runId"):
        text_ += f"   - runId: {args['runId']}\n"
    return ToolResponse.ok(text_, storage_key=data.get("storageKey"))


def attachment_tools() -> tuple[ToolDefinition, ...]:
    """Listing, uploading and deleting attachments of tests and runs."""
    return (
        api_tool(
            "get-test-attachments",
            "List the attachments of a test",
            "GET",
            "api/v1/test/attachments",
            (PROJECT_ID, TEST_ID),
            action="retrieve attachments for test {testId}",
            failure="retrieving test attachments",
            tip="Use get-tests to find valid test IDs.",
        ),
        api_tool(
            "get-run-attachments",
            "List the attachments recorded for a test in a run",
            "GET",
            "api/v1/run/attachments",
            (PROJECT_ID, positive_id("runId", "Run ID"), TEST_ID),
            action="retrieve attachments for test {testId} in run {runId}",
            failure="retrieving run attachments",
            tip="Use get-run-tests-list to find valid test IDs in a run.",
        ),
        api_tool(
            "get-presigned-upload-url",
            "Get a presigned URL to upload an attachment",
            "POST",
            "api/v1/attachments/presigned-url",
            (PROJECT_ID, TEST_ID, OPTIONAL_RUN_ID, *FILE_PARAMS, ATTACHMENT_TYPE),
            action="generate presigned upload URL",
            failure="generating presigned URL",
            tip=(
                "Supported file types are images (PNG, JPEG, GIF, WebP, max 10MB) "
                "and videos (MP4, WebM, MOV, max 100MB)."
            ),
            checks=(require_run_for_actual,),
            render=render_upload_url,
        ),
        api_tool(
            "confirm-attachment-upload",
            "Register an uploaded file as an attachment",
            "POST",
            "api/v1/attachments/confirm-upload",
            (
                PROJECT_ID,
                TEST_ID,
                OPTIONAL_RUN_ID,
                text("storageKey", "Storage key from get-presigned-upload-url"),
                *FILE_PARAMS,
                text("description", "Attachment description", required=False, allow_empty=True),
                ATTACHMENT_TYPE,
            ),
            action="confirm attachment upload",
            failure="confirming attachment upload",
            tip="Make sure the file was successfully uploaded to the presigned URL before confirming.",
            checks=(require_run_for_actual,),
        ),
        api_tool(
            "delete-test-attachment",
            "Delete an attachment of a test",
            "DELETE",
            "api/v1/test/attachments/delete",
            (PROJECT_ID, positive_id("attachmentId", "Attachment ID")),
            action="delete test attachment {attachmentId}",
            failure="deleting test attachment",
            tip="Use get-test-attachments to find valid attachment IDs.",
        ),
        api_tool(
            "delete-run-attachment",
            "Delete an attachment recorded in a run",
            "DELETE",
            "api/v1/run/attachments/delete",
            (PROJECT_ID, positive_id("attachmentId", "Attachment ID")),
            action="delete run attachment {attachmentId}",
            failure="deleting run attachment",
            tip="Use get-run-attachments to find valid attachment IDs.",
        ),
    )
