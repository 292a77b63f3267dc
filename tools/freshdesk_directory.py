# Freshdesk MCP - Agent / Group Tools

from typing import Dict, Any
from config import FRESHDESK_CONFIG
from models import AgentLookupArgs, FreshdeskCredentials, ToolCallResult
from utils.arguments import parse_tool_arguments
from utils.freshdesk_client import freshdesk_client


async def get_agent(params: Dict[str, Any]) -> ToolCallResult:
    """エージェント取得"""
    args, error = parse_tool_arguments(AgentLookupArgs, params)
    if error:
        return ToolCallResult.from_error(f"Error fetching agent: {error}")

    outcome = await freshdesk_client.invoke(
        "GET",
        f"{FRESHDESK_CONFIG['api_prefix']}/agents/{args.agent_id}",
        args.freshdesk_domain,
        args.freshdesk_api_key
    )

    if not outcome.ok:
        return ToolCallResult.from_error(f"Error fetching agent {args.agent_id}: {outcome.message}")
    return ToolCallResult.from_data(outcome.data)


async def get_groups(params: Dict[str, Any]) -> ToolCallResult:
    args, error = parse_tool_arguments(FreshdeskCredentials, params)
    if error:
        return ToolCallResult.from_error(f"Error fetching groups: {error}")

    outcome = await freshdesk_client.invoke(
        "GET",
        f"{FRESHDESK_CONFIG['api_prefix']}/groups",
        args.freshdesk_domain,
        args.freshdesk_api_key
    )

    if not outcome.ok:
        return ToolCallResult.from_error(f"Error fetching groups: {outcome.message}")
    return ToolCallResult.from_data(outcome.data)
