"""
Tests for the MCP tool handlers.

Each handler is called directly with an arguments dict and a workspace
registry, the same way the server router calls it.
"""

import json

import pytest

from test_intelligence_mcp.handlers.core import HANDLERS as CORE_HANDLERS
from test_intelligence_mcp.handlers.core import TOOLS as CORE_TOOLS
from test_intelligence_mcp.handlers.core.analyze_coverage import handle as handle_analyze_coverage
from test_intelligence_mcp.handlers.core.analyze_flaky_test import handle as handle_analyze_flaky
from test_intelligence_mcp.handlers.core.analyze_test_file import handle as handle_analyze_file
from test_intelligence_mcp.handlers.core.detect_flaky_tests import handle as handle_detect_flaky
from test_intelligence_mcp.handlers.core.discover_tests import (
    TOOL_DEFINITION as DISCOVER_TOOL,
    handle as handle_discover,
)
from test_intelligence_mcp.handlers.core.find_coverage_gaps import handle as handle_gaps
from test_intelligence_mcp.handlers.core.find_duplicate_tests import handle as handle_duplicates
from test_intelligence_mcp.handlers.core.find_slow_tests import handle as handle_slow
from test_intelligence_mcp.handlers.core.get_impacted_tests import handle as handle_impacted
from test_intelligence_mcp.handlers.core.get_test_health import handle as handle_health
from test_intelligence_mcp.handlers.core.get_test_history import handle as handle_history
from test_intelligence_mcp.handlers.core.list_quarantined import handle as handle_list_quarantined
from test_intelligence_mcp.handlers.core.quarantine_test import handle as handle_quarantine
from test_intelligence_mcp.handlers.core.record_test_run import handle as handle_record
from test_intelligence_mcp.handlers.core.release_test import handle as handle_release
from test_intelligence_mcp.handlers.core.select_tests import (
    TOOL_DEFINITION as SELECT_TOOL,
    handle as handle_select,
)
from test_intelligence_mcp.handlers.git import HANDLERS as GIT_HANDLERS
from test_intelligence_mcp.handlers.git import TOOLS as GIT_TOOLS
from test_intelligence_mcp.handlers.workspace import HANDLERS as WORKSPACE_HANDLERS
from test_intelligence_mcp.handlers.workspace import TOOLS as WORKSPACE_TOOLS
from test_intelligence_mcp.handlers.workspace.close_workspace import handle as handle_close
from test_intelligence_mcp.handlers.workspace.open_workspace import (
    TOOL_DEFINITION as OPEN_TOOL,
    handle as handle_open,
)
from test_intelligence_mcp.services import WorkspaceRegistry

USER_TEST_ID = "src/user.test.ts:1:creates a user"


def write(root, rel_path, content=""):
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def payload(result):
    """Decode the JSON text of a handler response."""
    assert len(result) == 1
    return json.loads(result[0].text)


@pytest.fixture
def workspaces():
    return WorkspaceRegistry()


@pytest.fixture
def workspace_id(tmp_path, workspaces):
    write(tmp_path, "package.json", json.dumps({"devDependencies": {"jest": "29"}}))
    write(tmp_path, "src/user.ts", "export function createUser() {}\n")
    write(tmp_path, "src/user.test.ts", "it('creates a user', () => { createUser(); });\n")
    write(tmp_path, "lib/other.test.ts", "it('other', () => {});\n")
    return workspaces.open(str(tmp_path)).unwrap().workspace_id


# =============================================================================
# Tool Definition Tests
# =============================================================================

class TestToolDefinitions:
    """Tests for TOOL_DEFINITION objects."""

    def test_registries_match(self):
        """Every registered tool has a handler under the same name."""
        for tools, handlers in (
            (CORE_TOOLS, CORE_HANDLERS),
            (GIT_TOOLS, GIT_HANDLERS),
            (WORKSPACE_TOOLS, WORKSPACE_HANDLERS),
        ):
            assert [t.name for t in tools] == list(handlers)

    def test_workspace_id_required(self):
        """All tools except open_workspace take a workspace handle."""
        for tool in [*CORE_TOOLS, *GIT_TOOLS]:
            assert "workspace_id" in tool.inputSchema["required"]
        assert OPEN_TOOL.inputSchema["required"] == ["repo_path"]

    def test_discover_tool_definition(self):
        assert DISCOVER_TOOL.name == "discover_tests"
        assert "framework" in DISCOVER_TOOL.inputSchema["properties"]

    def test_select_tool_definition(self):
        properties = SELECT_TOOL.inputSchema["properties"]
        assert {"changed_files", "base_ref", "include_flaky", "max_tests", "test_types"} <= set(properties)


# =============================================================================
# Workspace Handler Tests
# =============================================================================

class TestWorkspaceHandlers:
    """Tests for open_workspace and close_workspace."""

    @pytest.mark.asyncio
    async def test_open_and_close(self, tmp_path, workspaces):
        opened = payload(await handle_open({"repo_path": str(tmp_path)}, workspaces))

        assert opened["framework"] == "jest"
        assert len(workspaces) == 1

        closed = payload(await handle_close({"workspace_id": opened["workspace_id"]}, workspaces))
        assert closed["closed"] is True
        assert len(workspaces) == 0

    @pytest.mark.asyncio
    async def test_open_missing_path(self, tmp_path, workspaces):
        result = await handle_open({"repo_path": str(tmp_path / "nope")}, workspaces)
        assert result[0].text.startswith("Error:")

    @pytest.mark.asyncio
    async def test_unknown_workspace(self, workspaces):
        result = await handle_discover({"workspace_id": "nope"}, workspaces)
        assert "Unknown workspace" in result[0].text


# =============================================================================
# Discovery and Selection Handler Tests
# =============================================================================

class TestDiscoveryHandlers:
    """Tests for discover_tests and analyze_test_file."""

    @pytest.mark.asyncio
    async def test_discover(self, workspaces, workspace_id):
        data = payload(await handle_discover({"workspace_id": workspace_id}, workspaces))

        assert data["total_files"] == 2
        assert data["total_tests"] == 2
        assert [f["path"] for f in data["files"]] == ["lib/other.test.ts", "src/user.test.ts"]

    @pytest.mark.asyncio
    async def test_discover_unknown_framework(self, workspaces, workspace_id):
        result = await handle_discover(
            {"workspace_id": workspace_id, "framework": "nose"}, workspaces
        )
        assert result[0].text == "Error: Unknown framework: nose"

    @pytest.mark.asyncio
    async def test_analyze_test_file(self, workspaces, workspace_id):
        data = payload(await handle_analyze_file(
            {"workspace_id": workspace_id, "test_file": "src/user.test.ts"}, workspaces
        ))
        assert data["tests"][0]["id"] == USER_TEST_ID

    @pytest.mark.asyncio
    async def test_analyze_missing_file(self, workspaces, workspace_id):
        result = await handle_analyze_file(
            {"workspace_id": workspace_id, "test_file": "nope.test.ts"}, workspaces
        )
        assert "not found" in result[0].text


class TestSelectionHandlers:
    """Tests for select_tests and get_impacted_tests."""

    @pytest.mark.asyncio
    async def test_select(self, workspaces, workspace_id):
        data = payload(await handle_select(
            {"workspace_id": workspace_id, "changed_files": ["src/user.ts"]}, workspaces
        ))

        assert data["must_run"] == 1
        assert data["can_skip"] == 1
        assert data["tests"]["must_run"][0]["id"] == USER_TEST_ID
        assert data["changed_files"] == ["src/user.ts"]

    @pytest.mark.asyncio
    async def test_select_needs_changes(self, workspaces, workspace_id):
        result = await handle_select({"workspace_id": workspace_id}, workspaces)
        assert "changed_files" in result[0].text

    @pytest.mark.asyncio
    async def test_select_rejects_bare_string(self, workspaces, workspace_id):
        """A single path string is an error, not a list of characters."""
        for handler in (handle_select, handle_impacted):
            result = await handler(
                {"workspace_id": workspace_id, "changed_files": "src/user.ts"}, workspaces
            )
            assert result[0].text == "Error: 'changed_files' must be a list of paths"

    @pytest.mark.asyncio
    async def test_select_invalid_max_tests(self, workspaces, workspace_id):
        result = await handle_select(
            {"workspace_id": workspace_id, "changed_files": [], "max_tests": 0}, workspaces
        )
        assert result[0].text.startswith("Error:")

    @pytest.mark.asyncio
    async def test_impacted(self, workspaces, workspace_id):
        data = payload(await handle_impacted(
            {"workspace_id": workspace_id, "changed_files": ["src/user.ts"]}, workspaces
        ))
        assert data["total_impacted"] == 1
        assert data["tests"][0]["impact_score"] == 80


# =============================================================================
# History and Flakiness Handler Tests
# =============================================================================

class TestHistoryHandlers:
    """Tests for recording, history and flakiness tools."""

    async def record_alternating(self, workspaces, workspace_id):
        results = [
            {"test_id": USER_TEST_ID, "passed": i % 2 == 0, "duration": 10,
             "file": "src/user.test.ts", "test_name": "creates a user"}
            for i in range(5)
        ]
        return payload(await handle_record(
            {"workspace_id": workspace_id, "results": results}, workspaces
        ))

    @pytest.mark.asyncio
    async def test_record_and_history(self, workspaces, workspace_id):
        assert (await self.record_alternating(workspaces, workspace_id)) == {"recorded": 5}

        history = payload(await handle_history(
            {"workspace_id": workspace_id, "test_id": USER_TEST_ID}, workspaces
        ))
        assert len(history[USER_TEST_ID]) == 5

    @pytest.mark.asyncio
    async def test_record_invalid(self, workspaces, workspace_id):
        result = await handle_record(
            {"workspace_id": workspace_id, "results": [{"test_id": "a"}]}, workspaces
        )
        assert "passed" in result[0].text

    @pytest.mark.asyncio
    async def test_detect_and_analyze_flaky(self, workspaces, workspace_id):
        await self.record_alternating(workspaces, workspace_id)

        detected = payload(await handle_detect_flaky({"workspace_id": workspace_id}, workspaces))
        assert detected["total_flaky"] == 1
        assert detected["tests"][0]["flaky_score"] == 100.0
        assert "recent_runs" not in detected["tests"][0]

        analysis = payload(await handle_analyze_flaky(
            {"workspace_id": workspace_id, "test_id": USER_TEST_ID}, workspaces
        ))
        assert analysis["history"] is True
        assert len(analysis["recent_runs"]) == 5

    @pytest.mark.asyncio
    async def test_analyze_flaky_without_history(self, workspaces, workspace_id):
        data = payload(await handle_analyze_flaky(
            {"workspace_id": workspace_id, "test_id": "unknown"}, workspaces
        ))
        assert data == {"test_id": "unknown", "history": False}

    @pytest.mark.asyncio
    async def test_quarantine_cycle(self, workspaces, workspace_id):
        args = {"workspace_id": workspace_id, "test_id": USER_TEST_ID, "reason": "flaky on CI"}

        first = payload(await handle_quarantine(args, workspaces))
        again = payload(await handle_quarantine(args, workspaces))
        assert first["already_quarantined"] is False
        assert again["already_quarantined"] is True

        listed = payload(await handle_list_quarantined({"workspace_id": workspace_id}, workspaces))
        assert listed["tests"] == [{"test_id": USER_TEST_ID, "reason": "flaky on CI"}]

        selection = payload(await handle_select(
            {"workspace_id": workspace_id, "changed_files": ["src/user.ts"]}, workspaces
        ))
        assert selection["exclusions"] == {USER_TEST_ID: "quarantined"}

        released = payload(await handle_release(
            {"workspace_id": workspace_id, "test_id": USER_TEST_ID}, workspaces
        ))
        assert released["released"] is True


# =============================================================================
# Coverage and Health Handler Tests
# =============================================================================

class TestCoverageAndHealthHandlers:
    """Tests for coverage, health, slow and duplicate tools."""

    @pytest.mark.asyncio
    async def test_no_coverage_report(self, workspaces, workspace_id):
        data = payload(await handle_analyze_coverage({"workspace_id": workspace_id}, workspaces))
        assert data["found"] is False

    @pytest.mark.asyncio
    async def test_coverage_and_gaps(self, tmp_path, workspaces, workspace_id):
        write(tmp_path, "coverage/lcov.info", "SF:src/user.ts\nDA:1,1\nDA:2,0\nend_of_record\n")

        report = payload(await handle_analyze_coverage(
            {"workspace_id": workspace_id, "include_files": True}, workspaces
        ))
        assert report["format"] == "lcov"
        assert report["lines"]["percentage"] == 50.0
        assert report["files"][0]["path"] == "src/user.ts"

        gaps = payload(await handle_gaps({"workspace_id": workspace_id}, workspaces))
        assert gaps["total_gaps"] == 1
        assert gaps["by_risk"] == {"high": 1}

    @pytest.mark.asyncio
    async def test_health(self, workspaces, workspace_id):
        data = payload(await handle_health({"workspace_id": workspace_id}, workspaces))

        assert data["total_tests"] == 2
        assert data["overall_score"] == 50
        assert "recommendations" in data

    @pytest.mark.asyncio
    async def test_slow_and_duplicates(self, workspaces, workspace_id):
        await handle_record({"workspace_id": workspace_id, "results": [
            {"test_id": USER_TEST_ID, "passed": True, "duration": 2500},
        ]}, workspaces)

        slow = payload(await handle_slow({"workspace_id": workspace_id}, workspaces))
        assert slow["tests"][0]["test_id"] == USER_TEST_ID

        duplicates = payload(await handle_duplicates({"workspace_id": workspace_id}, workspaces))
        assert duplicates["total_duplicates"] == 0
