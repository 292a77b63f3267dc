"""
Freshdesk MCP Server - JSON-RPCディスパッチャ

HTTP / stdio どちらのトランスポートからも同じ dispatch() を呼び出す。
"""

import logging
import traceback
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import ValidationError

from config import PROTOCOL_VERSION, SERVER_CONFIG
from models import JSONRPCErrorCode, MCPError, MCPErrorResponse, MCPRequest, MCPResponse
from tools_manager import ToolsManager

logger = logging.getLogger(__name__)


class MCPProtocolError(Exception):
    """エラーエンベロープとして返すプロトコルレベルのエラー"""

    def __init__(self, code: JSONRPCErrorCode, message: str, data: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


def error_payload(request_id: Any, code: int, message: str, data: Any = None) -> Dict[str, Any]:
    return MCPErrorResponse(
        id=request_id,
        error=MCPError(code=int(code), message=message, data=data)
    ).to_payload()


class MCPDispatcher:
    def __init__(self, tools_manager: ToolsManager):
        self.tools_manager = tools_manager
        # stdioセッションでのみ意味を持つ
        self.initialized = False
        self._methods: Dict[str, Callable[[Dict[str, Any]], Awaitable[Any]]] = {
            "initialize": self._initialize,
            "notifications/initialized": self._notifications_initialized,
            "ping": self._ping,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
        }

    async def dispatch(self, message: Any) -> Optional[Dict[str, Any]]:
        """デコード済みメッセージを処理し、レスポンス（通知の場合はNone）を返す"""
        request_id = message.get("id") if isinstance(message, dict) else None

        if not isinstance(message, dict) or not isinstance(message.get("method"), str):
            logger.warning("[MCP_DISPATCH] Invalid request - missing method")
            return error_payload(request_id, JSONRPCErrorCode.INVALID_REQUEST,
                                 "Invalid Request - method is required")

        try:
            request = MCPRequest.model_validate(message)
        except ValidationError as e:
            logger.warning(f"[MCP_DISPATCH] Invalid request envelope: {e}")
            return error_payload(request_id, JSONRPCErrorCode.INVALID_REQUEST,
                                 f"Invalid Request - {e.errors()[0]['msg']}")

        logger.info(f"[MCP_DISPATCH] Method: {request.method} ID: {request.id}")

        try:
            handler = self._methods.get(request.method)
            if handler is None:
                raise MCPProtocolError(JSONRPCErrorCode.METHOD_NOT_FOUND,
                                       f"Method not found: {request.method}")
            result = await handler(request.params or {})
            response = MCPResponse(id=request.id, result=result).to_payload()
        except MCPProtocolError as e:
            logger.warning(f"[MCP_DISPATCH] {e.message}")
            response = error_payload(request.id, e.code, e.message, e.data)
        except Exception as e:
            logger.exception(f"[MCP_DISPATCH] EXCEPTION CAUGHT: {e}")
            response = error_payload(request.id, JSONRPCErrorCode.INTERNAL_ERROR,
                                     str(e) or "Internal error", traceback.format_exc())

        if request.is_notification:
            return None
        return response

    async def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {
                "name": SERVER_CONFIG["name"],
                "version": SERVER_CONFIG["version"]
            }
        }

    async def _notifications_initialized(self, params: Dict[str, Any]) -> Dict[str, Any]:
        self.initialized = True
        logger.info("[MCP_DISPATCH] Client initialized")
        return {}

    async def _ping(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    async def _tools_list(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"tools": self.tools_manager.get_tools_list()}

    async def _tools_call(self, params: Dict[str, Any]) -> Dict[str, Any]:
        tool_name = params.get("name")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}

        logger.info(f"[MCP_DISPATCH] Tool call: {tool_name}")

        if not self.tools_manager.is_valid_tool(tool_name):
            raise MCPProtocolError(JSONRPCErrorCode.METHOD_NOT_FOUND, f"Unknown tool: {tool_name}")
        if not isinstance(arguments, dict):
            raise MCPProtocolError(JSONRPCErrorCode.INVALID_REQUEST,
                                   "Invalid Request - arguments must be an object")

        tool_function = self.tools_manager.get_tool_function(tool_name)
        tool_result = await tool_function(arguments)
        if tool_result.isError:
            logger.warning(f"[MCP_DISPATCH] Tool {tool_name} failed: {tool_result.content[0].text}")
        return tool_result.to_payload()
