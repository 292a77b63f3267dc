# Freshdesk API Client

import httpx
import logging
from pydantic import BaseModel
from typing import Any, Dict, Optional
from config import FRESHDESK_CONFIG

logger = logging.getLogger(__name__)


class FreshdeskOutcome(BaseModel):
    """Freshdesk API呼び出し結果（成功時はdata、失敗時はerror/message）"""
    ok: bool
    status_code: Optional[int] = None
    data: Any = None
    error: Any = None
    message: Optional[str] = None


def describe_upstream_error(status_code: int, payload: Any, raw_text: str = "") -> str:
    """Freshdeskのエラーペイロードから説明文を作る"""
    if isinstance(payload, dict) and payload.get("description"):
        text = str(payload["description"])
        field_errors = [
            f"{item.get('field')}: {item.get('message')}"
            for item in payload.get("errors") or []
            if isinstance(item, dict) and item.get("message")
        ]
        if field_errors:
            text += f" ({'; '.join(field_errors)})"
        return text
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    if raw_text.strip():
        return raw_text.strip()
    return f"Freshdesk API returned status {status_code}"


class FreshdeskClient:
    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        # テスト時は httpx.MockTransport を差し込む
        self.transport = transport

    def build_url(self, domain: str, path: str) -> str:
        return f"https://{domain}{path}"

    async def invoke(self, method: str, path: str, domain: str, api_key: str,
                     body: Optional[Dict[str, Any]] = None) -> FreshdeskOutcome:
        """Freshdesk REST APIを1回だけ呼び出す（リトライ・キャッシュなし）"""
        url = self.build_url(domain, path)
        logger.info(f"[FreshdeskClient] {method} {url}")

        request_kwargs: Dict[str, Any] = {
            "auth": (api_key, FRESHDESK_CONFIG["auth_password"]),
            "headers": {"Content-Type": "application/json"},
        }
        if body is not None:
            request_kwargs["json"] = body

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.request(method, url, **request_kwargs)
        except httpx.HTTPError as e:
            logger.error(f"[FreshdeskClient] Request failed: {e}")
            return FreshdeskOutcome(ok=False, message=str(e) or type(e).__name__)

        logger.info(f"[FreshdeskClient] Freshdesk API Status: {response.status_code}")
        payload = self._decode(response)

        if response.is_success:
            return FreshdeskOutcome(
                ok=True,
                status_code=response.status_code,
                data=payload if payload is not None else {}
            )

        message = describe_upstream_error(response.status_code, payload, response.text)
        logger.warning(f"[FreshdeskClient] Freshdesk API error {response.status_code}: {message}")
        return FreshdeskOutcome(
            ok=False,
            status_code=response.status_code,
            error=payload,
            message=message
        )

    def _decode(self, response: httpx.Response) -> Any:
        """JSONとして解釈できなければ生テキストを返す（空ボディはNone）"""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text


# グローバルインスタンス
freshdesk_client = FreshdeskClient()
