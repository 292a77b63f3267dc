import copy
import json
import importlib
import logging
import os
from typing import Dict, List, Any, Optional, Callable, Awaitable

from models import ToolCallResult, ToolDescription

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "tools", "tools_config.json")

ToolFunction = Callable[[Dict[str, Any]], Awaitable[ToolCallResult]]


class ToolsManager:
    """ツール定義の一元管理クラス（起動時に1回だけ読み込み、以後は読み取り専用）"""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)

        self._tools = tuple(config["tools"])
        names = [tool["name"] for tool in self._tools]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate tool names in {config_path}: {duplicates}")

        # ツール名 → 関数のディスパッチテーブル
        self._functions: Dict[str, ToolFunction] = {
            tool["name"]: self._load_function(tool) for tool in self._tools
        }
        self._descriptions = [self._build_description(tool) for tool in self._tools]

    @staticmethod
    def _load_function(tool: Dict[str, Any]) -> ToolFunction:
        try:
            module = importlib.import_module(tool["module_path"])
            return getattr(module, tool["function_name"])
        except (ImportError, AttributeError) as e:
            logger.error(f"[ToolsManager] Failed to import {tool['name']}: {e}")
            raise

    @staticmethod
    def _build_description(tool: Dict[str, Any]) -> Dict[str, Any]:
        properties = {}
        required = []
        for param_name, param in tool["parameters"].items():
            if param.get("required"):
                required.append(param_name)
            properties[param_name] = {key: value for key, value in param.items() if key != "required"}

        return ToolDescription(
            name=tool["name"],
            description=tool["description"],
            inputSchema={
                "type": "object",
                "properties": properties,
                "required": required
            }
        ).model_dump()

    def get_tools_list(self) -> List[Dict[str, Any]]:
        """tools/list と GET /tools 共通のツール一覧"""
        return copy.deepcopy(self._descriptions)

    def get_tool_function(self, tool_name: str) -> Optional[ToolFunction]:
        return self._functions.get(tool_name)

    def is_valid_tool(self, tool_name: Any) -> bool:
        """ツール名の有効性チェック"""
        return isinstance(tool_name, str) and tool_name in self._functions

    def get_tool_names(self) -> List[str]:
        """全ツール名のリスト"""
        return [tool["name"] for tool in self._tools]


# プロセス全体で共有するツールカタログ
tools_manager = ToolsManager()
