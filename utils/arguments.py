# Tool argument validation

from typing import Any, Dict, Optional, Tuple, Type, TypeVar
from pydantic import BaseModel, ValidationError

ArgsModel = TypeVar("ArgsModel", bound=BaseModel)


def describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item["loc"]) or "arguments"
        parts.append(f"{field}: {item['msg']}")
    return "; ".join(parts)


def parse_tool_arguments(model: Type[ArgsModel], params: Dict[str, Any]) -> Tuple[Optional[ArgsModel], Optional[str]]:
    """ツール引数をモデルで検証し、(引数, エラーメッセージ) を返す"""
    try:
        return model.model_validate(params or {}), None
    except ValidationError as e:
        return None, describe_validation_error(e)


def present_fields(args: BaseModel, *names: str) -> Dict[str, Any]:
    """呼び出し側が指定したフィールドのみ抽出（明示的なnullもそのまま送る）"""
    return {
        name: getattr(args, name)
        for name in names
        if name in args.model_fields_set
    }
