#!/usr/bin/env python3
"""
Freshdesk MCP Server - HTTPトランスポート
Port: 3000 (環境変数 PORT で変更可)
"""

import json
import logging
from datetime import datetime, timezone
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import SERVER_CONFIG
from dispatcher import MCPDispatcher, error_payload
from models import JSONRPCErrorCode
from tools_manager import tools_manager

# ログ設定
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = ["/", "/tools", "/mcp"]

app = FastAPI(
    title=SERVER_CONFIG["title"],
    version=SERVER_CONFIG["version"]
)


# OPTIONSはどのパスでも200を返す（CORSMiddlewareより内側）
@app.middleware("http")
async def answer_options(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=200)
    return await call_next(request)


# CORS設定
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"[HTTP] {request.method} {request.url.path}")
    response = await call_next(request)
    logger.info(f"[HTTP] {request.method} {request.url.path} -> {response.status_code}")
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # メソッド違い(405)も未定義ルートとして404を返す
    if exc.status_code in (404, 405):
        logger.info(f"[HTTP] 404 - Route not found: {request.method} {request.url.path}")
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not Found",
                "path": request.url.path,
                "availableEndpoints": AVAILABLE_ENDPOINTS
            }
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.get("/")
async def root():
    return {
        "status": "ok",
        "service": SERVER_CONFIG["name"],
        "version": SERVER_CONFIG["version"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": {
            "mcp": "/mcp",
            "tools": "/tools"
        }
    }


@app.get("/tools")
async def list_available_tools():
    """MCPプロトコル準拠のツール一覧（tools/list と同一内容）"""
    return {
        "tools": tools_manager.get_tools_list()
    }


def status_for(payload: dict) -> int:
    error = payload.get("error")
    if not error:
        return 200
    if error["code"] == JSONRPCErrorCode.INTERNAL_ERROR:
        return 500
    return 400


@app.post("/mcp")
async def mcp_endpoint(request: Request):
    """MCPプロトコルエンドポイント"""
    raw_body = await request.body()
    try:
        message = json.loads(raw_body)
    except ValueError as e:
        logger.warning(f"[MCP_ENDPOINT] Could not decode request body: {e}")
        payload = error_payload(None, JSONRPCErrorCode.INVALID_REQUEST, f"Invalid Request - {e}")
        return JSONResponse(status_code=400, content=payload)

    # HTTPリクエストごとに独立したディスパッチャを使う
    payload = await MCPDispatcher(tools_manager).dispatch(message)
    if payload is None:
        return Response(status_code=202)
    return JSONResponse(status_code=status_for(payload), content=payload)


def run():
    import uvicorn
    logger.info(f"[MCP_SERVER] {SERVER_CONFIG['title']} starting on port {SERVER_CONFIG['port']}")
    uvicorn.run(app, host=SERVER_CONFIG["host"], port=SERVER_CONFIG["port"])


if __name__ == "__main__":
    run()
