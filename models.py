# Freshdesk MCP Data Models

import json
from enum import IntEnum
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Any, List, Optional, Union


class JSONRPCErrorCode(IntEnum):
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INTERNAL_ERROR = -32603


# JSON-RPC エンベロープ

class MCPRequest(BaseModel):
    jsonrpc: str = "2.0"
    id: Any = None
    method: str
    params: Optional[Dict[str, Any]] = None

    @property
    def is_notification(self) -> bool:
        """idキーが無いリクエストは通知扱い"""
        return "id" not in self.model_fields_set


class MCPResponse(BaseModel):
    jsonrpc: str = "2.0"
    id: Any = None
    result: Any = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()


class MCPError(BaseModel):
    code: int
    message: str
    data: Any = None


class MCPErrorResponse(BaseModel):
    jsonrpc: str = "2.0"
    id: Any = None
    error: MCPError

    def to_payload(self) -> Dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "error": self.error.model_dump(exclude_none=True)
        }


# ツール定義・実行結果

class ToolDescription(BaseModel):
    name: str
    description: str
    inputSchema: Dict[str, Any]


class TextContent(BaseModel):
    type: str = "text"
    text: str


class ToolCallResult(BaseModel):
    content: List[TextContent]
    isError: Optional[bool] = None

    @classmethod
    def from_data(cls, data: Any) -> "ToolCallResult":
        """Freshdeskのレスポンスを整形済みJSONテキストで返す"""
        text = json.dumps(data, indent=2, ensure_ascii=False)
        return cls(content=[TextContent(text=text)])

    @classmethod
    def from_error(cls, message: str) -> "ToolCallResult":
        return cls(content=[TextContent(text=message)], isError=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


# ツール引数

class FreshdeskCredentials(BaseModel):
    model_config = ConfigDict(extra="ignore")

    freshdesk_domain: str = Field(..., min_length=1, description="Freshdesk domain (e.g., yourcompany.freshdesk.com)")
    freshdesk_api_key: str = Field(..., min_length=1, description="Freshdesk API key")


class CreateTicketArgs(FreshdeskCredentials):
    subject: Any = None
    description: Any = None
    email: Any = None
    priority: Any = None
    status: Any = None
    source: Any = None
    group_id: Any = None
    responder_id: Any = None


class TicketLookupArgs(FreshdeskCredentials):
    ticket_id: Union[int, str]


class AgentLookupArgs(FreshdeskCredentials):
    agent_id: Union[int, str]


class AssignTicketArgs(TicketLookupArgs):
    responder_id: Any = None
    group_id: Any = None
