# Freshdesk MCP - Ticket Tools

import logging
from typing import Dict, Any
from config import FRESHDESK_CONFIG
from models import AssignTicketArgs, CreateTicketArgs, TicketLookupArgs, ToolCallResult
from utils.arguments import parse_tool_arguments, present_fields
from utils.freshdesk_client import freshdesk_client

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 1  # Low
DEFAULT_STATUS = 2  # Open


def build_ticket_body(args: CreateTicketArgs) -> Dict[str, Any]:
    """チケット作成リクエストのボディを組み立てる"""
    body = present_fields(args, "subject", "description", "email")
    # 0 などの偽値は未指定と同じ扱い
    body["priority"] = args.priority or DEFAULT_PRIORITY
    body["status"] = args.status or DEFAULT_STATUS
    body.update(present_fields(args, "source", "group_id", "responder_id"))
    return body


async def create_ticket(params: Dict[str, Any]) -> ToolCallResult:
    """チケット作成"""
    args, error = parse_tool_arguments(CreateTicketArgs, params)
    if error:
        return ToolCallResult.from_error(f"Error creating ticket: {error}")

    logger.info(f"[create_ticket] Creating Freshdesk ticket on {args.freshdesk_domain} for {args.email}")
    outcome = await freshdesk_client.invoke(
        "POST",
        f"{FRESHDESK_CONFIG['api_prefix']}/tickets",
        args.freshdesk_domain,
        args.freshdesk_api_key,
        build_ticket_body(args)
    )

    if not outcome.ok:
        return ToolCallResult.from_error(f"Error creating ticket: {outcome.message}")

    if isinstance(outcome.data, dict):
        logger.info(f"[create_ticket] Ticket created successfully, ID: {outcome.data.get('id')}")
    return ToolCallResult.from_data(outcome.data)


async def get_ticket(params: Dict[str, Any]) -> ToolCallResult:
    """チケット取得"""
    args, error = parse_tool_arguments(TicketLookupArgs, params)
    if error:
        return ToolCallResult.from_error(f"Error fetching ticket: {error}")

    outcome = await freshdesk_client.invoke(
        "GET",
        f"{FRESHDESK_CONFIG['api_prefix']}/tickets/{args.ticket_id}",
        args.freshdesk_domain,
        args.freshdesk_api_key
    )

    if not outcome.ok:
        return ToolCallResult.from_error(f"Error fetching ticket {args.ticket_id}: {outcome.message}")
    return ToolCallResult.from_data(outcome.data)


async def assign_ticket(params: Dict[str, Any]) -> ToolCallResult:
    """チケットの担当者・グループ割り当て

    responder_id / group_id のどちらも無い場合も、そのまま空の更新として送信する。
    """
    args, error = parse_tool_arguments(AssignTicketArgs, params)
    if error:
        return ToolCallResult.from_error(f"Error assigning ticket: {error}")

    body = present_fields(args, "responder_id", "group_id")
    if not body:
        logger.warning(f"[assign_ticket] No responder_id or group_id given for ticket {args.ticket_id}")

    outcome = await freshdesk_client.invoke(
        "PUT",
        f"{FRESHDESK_CONFIG['api_prefix']}/tickets/{args.ticket_id}",
        args.freshdesk_domain,
        args.freshdesk_api_key,
        body
    )

    if not outcome.ok:
        return ToolCallResult.from_error(f"Error assigning ticket {args.ticket_id}: {outcome.message}")
    return ToolCallResult.from_data(outcome.data)
