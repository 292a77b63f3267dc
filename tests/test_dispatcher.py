import asyncio

import pytest

from dispatcher import MCPDispatcher
from models import ToolCallResult
from tools_manager import tools_manager

EXPECTED_TOOLS = {"create_ticket", "get_groups", "get_ticket", "get_agent", "assign_ticket"}


def dispatch(message, dispatcher=None):
    dispatcher = dispatcher or MCPDispatcher(tools_manager)
    return asyncio.run(dispatcher.dispatch(message))


@pytest.mark.parametrize("request_id", [1, 0, "req-7", None])
@pytest.mark.parametrize("method", ["initialize", "tools/list", "ping", "no/such/method"])
def test_id_is_echoed_verbatim(request_id, method):
    response = dispatch({"jsonrpc": "2.0", "id": request_id, "method": method})

    assert response["jsonrpc"] == "2.0"
    assert response["id"] == request_id
    assert ("result" in response) != ("error" in response)


@pytest.mark.parametrize("method", ["notifications/initialized", "tools/list", "initialize", "no/such/method"])
def test_notifications_produce_no_response(method):
    assert dispatch({"jsonrpc": "2.0", "method": method}) is None


def test_initialized_notification_marks_session():
    dispatcher = MCPDispatcher(tools_manager)

    assert dispatch({"jsonrpc": "2.0", "method": "notifications/initialized"}, dispatcher) is None
    assert dispatcher.initialized is True


def test_initialize_returns_fixed_identity():
    first = dispatch({"jsonrpc": "2.0", "id": 1, "method": "initialize"})
    second = dispatch({
        "jsonrpc": "2.0",
        "id": 2,
        "method": "initialize",
        "params": {"protocolVersion": "1999-01-01", "clientInfo": {"name": "other"}},
    })

    assert first["result"] == second["result"]
    assert first["result"]["protocolVersion"] == "2024-11-05"
    assert first["result"]["capabilities"] == {"tools": {}}
    assert first["result"]["serverInfo"] == {"name": "freshdesk-mcp-server", "version": "1.0.0"}


def test_missing_method_is_invalid_request():
    response = dispatch({"jsonrpc": "2.0", "id": 3})

    assert response["id"] == 3
    assert response["error"]["code"] == -32600


@pytest.mark.parametrize("message", [[], "tools/list", 42, {"jsonrpc": "2.0", "method": 5}])
def test_malformed_messages_are_invalid_request(message):
    response = dispatch(message)

    assert response["id"] is None
    assert response["error"]["code"] == -32600


def test_params_must_be_an_object():
    response = dispatch({"jsonrpc": "2.0", "id": 4, "method": "tools/list", "params": [1, 2]})

    assert response["id"] == 4
    assert response["error"]["code"] == -32600


def test_unknown_method_is_method_not_found():
    response = dispatch({"jsonrpc": "2.0", "id": 5, "method": "resources/list"})

    assert response["error"] == {"code": -32601, "message": "Method not found: resources/list"}


def test_unknown_tool_is_method_not_found():
    response = dispatch({
        "jsonrpc": "2.0",
        "id": 6,
        "method": "tools/call",
        "params": {"name": "delete_everything", "arguments": {}},
    })

    assert response["id"] == 6
    assert response["error"]["code"] == -32601
    assert "delete_everything" in response["error"]["message"]


def test_tool_call_without_name_is_method_not_found():
    response = dispatch({"jsonrpc": "2.0", "id": 7, "method": "tools/call"})

    assert response["error"]["code"] == -32601


def test_non_object_arguments_are_invalid_request():
    response = dispatch({
        "jsonrpc": "2.0",
        "id": 8,
        "method": "tools/call",
        "params": {"name": "get_groups", "arguments": "acme"},
    })

    assert response["error"]["code"] == -32600


def test_tools_list_catalog():
    response = dispatch({"jsonrpc": "2.0", "id": 9, "method": "tools/list"})

    names = [tool["name"] for tool in response["result"]["tools"]]
    assert len(names) == len(set(names))
    assert set(names) == EXPECTED_TOOLS
    for tool in response["result"]["tools"]:
        assert tool["inputSchema"]["type"] == "object"
        assert {"freshdesk_domain", "freshdesk_api_key"} <= set(tool["inputSchema"]["required"])


def test_ping_returns_empty_result():
    assert dispatch({"jsonrpc": "2.0", "id": 10, "method": "ping"})["result"] == {}


class _ExplodingManager:
    def is_valid_tool(self, tool_name):
        return True

    def get_tool_function(self, tool_name):
        async def explode(arguments) -> ToolCallResult:
            raise RuntimeError("boom")
        return explode


def test_internal_failure_becomes_internal_error():
    dispatcher = MCPDispatcher(_ExplodingManager())

    response = dispatch({
        "jsonrpc": "2.0",
        "id": 11,
        "method": "tools/call",
        "params": {"name": "anything", "arguments": {}},
    }, dispatcher)

    assert response["id"] == 11
    assert response["error"]["code"] == -32603
    assert response["error"]["message"] == "boom"
    assert "RuntimeError" in response["error"]["data"]


def test_internal_failure_in_notification_is_silent():
    dispatcher = MCPDispatcher(_ExplodingManager())

    response = dispatch({
        "jsonrpc": "2.0",
        "method": "tools/call",
        "params": {"name": "anything"},
    }, dispatcher)

    assert response is None
