# Freshdesk MCP Configuration

import os

# サーバー設定
SERVER_CONFIG = {
    "name": "freshdesk-mcp-server",
    "title": "Freshdesk MCP Server",
    "version": "1.0.0",
    "host": "0.0.0.0",
    "port": int(os.getenv("PORT", "3000"))
}

# MCPプロトコル設定
PROTOCOL_VERSION = "2024-11-05"

# Freshdesk API設定
FRESHDESK_CONFIG = {
    "api_prefix": "/api/v2",
    # APIキーをユーザー名にした場合、パスワードは無視される
    "auth_password": "X"
}
