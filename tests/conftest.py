import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from utils.freshdesk_client import freshdesk_client


class FakeFreshdesk:
    """httpx.MockTransport 用のハンドラ。受け取ったリクエストを記録する"""

    def __init__(self, status_code: int = 200, json_body: Any = None,
                 content: Optional[bytes] = None, error: Optional[Exception] = None) -> None:
        self.status_code = status_code
        self.json_body = json_body
        self.content = content
        self.error = error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def last_body(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def freshdesk_api(monkeypatch: pytest.MonkeyPatch):
    def install(**kwargs: Any) -> FakeFreshdesk:
        fake = FakeFreshdesk(**kwargs)
        monkeypatch.setattr(freshdesk_client, "transport", httpx.MockTransport(fake))
        return fake

    return install


@pytest.fixture
def credentials() -> Dict[str, str]:
    return {"freshdesk_domain": "acme.freshdesk.com", "freshdesk_api_key": "k123"}
