#!/usr/bin/env python3
"""
Freshdesk MCP Server - stdioトランスポート

1行=1JSON のリクエストを標準入力から受け取り、1行=1JSON のレスポンスを標準出力へ返す。
標準出力はプロトコル専用のため、ログはすべて標準エラーに出す。
"""

import asyncio
import json
import logging
import os
import platform
import sys
from typing import Any, Dict, Optional, TextIO

from dispatcher import MCPDispatcher, error_payload
from models import JSONRPCErrorCode
from tools_manager import ToolsManager, tools_manager

logger = logging.getLogger(__name__)


async def handle_line(dispatcher: MCPDispatcher, line: str) -> Optional[Dict[str, Any]]:
    try:
        message = json.loads(line)
    except ValueError as e:
        logger.warning(f"[STDIO] Could not decode line: {e}")
        return error_payload(None, JSONRPCErrorCode.INVALID_REQUEST, f"Invalid Request - {e}")
    return await dispatcher.dispatch(message)


def write_message(stream: TextIO, payload: Dict[str, Any]) -> None:
    stream.write(json.dumps(payload, ensure_ascii=False) + "\n")
    stream.flush()


async def serve(instream: TextIO, outstream: TextIO, manager: ToolsManager = tools_manager) -> MCPDispatcher:
    """EOFまで1行ずつ順番に処理する（1接続=1セッション）"""
    dispatcher = MCPDispatcher(manager)
    while True:
        line = await asyncio.to_thread(instream.readline)
        if not line:
            logger.info("[STDIO] Stdin ended")
            break
        line = line.strip()
        if not line:
            continue

        payload = await handle_line(dispatcher, line)
        if payload is not None:
            write_message(outstream, payload)
    return dispatcher


def log_startup_diagnostics() -> None:
    logger.info("=== MCP Server Starting ===")
    logger.info(f"Python version: {platform.python_version()}")
    logger.info(f"Platform: {sys.platform}")
    logger.info(f"CWD: {os.getcwd()}")
    logger.info(f"Stdin is TTY: {sys.stdin.isatty()}")
    logger.info(f"Stdout is TTY: {sys.stdout.isatty()}")


def main() -> None:
    # ログ設定（標準エラー出力）
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    log_startup_diagnostics()
    logger.info("=== Freshdesk MCP Server running on stdio ===")
    asyncio.run(serve(sys.stdin, sys.stdout))


if __name__ == "__main__":
    main()
