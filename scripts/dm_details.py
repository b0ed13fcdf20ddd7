"""
LinkedIn DM Conversation Details
==================================

Per-week, per-conversation message counts split between our own messages
and the correspondent's, with the busiest conversation of each week.

Unlike ``calculate_dm_metrics`` (which credits a conversation only to the
week it first appeared), every week a conversation has traffic gets its
own entry here.

Usage:
    from scripts.dm_details import calculate_dm_details
    weeks = calculate_dm_details(funnel_data["linkedinDMLog"])
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from models.funnel_models import DMConversationDetail, DMDetailMetrics
from scripts.lib.logger import setup_logger
from scripts.lib.records import get_string, get_week_start, is_me_sender
from scripts.lib.weeks import week_sort_key

logger = setup_logger(__name__)


def _new_conversation(conversation_id: str, week: str) -> Dict[str, Any]:
    return {
        "conversation_id": conversation_id,
        "week": week,
        "messages_by_me": 0,
        "messages_by_correspondent": 0,
        "total_messages": 0,
        "first_message_date": None,
        "last_message_date": None,
    }


def _fold_messages(records: List[Any], aliases: Optional[Iterable[str]]) -> Dict[str, Dict[str, Any]]:
    week_map: Dict[str, Dict[str, Any]] = {}

    for record in records:
        if not isinstance(record, dict):
            continue
        week = get_week_start(record)
        conversation_id = get_string(record, "Conversation_id")
        if not week or not conversation_id:
            continue

        week_data = week_map.setdefault(week, {
            "conversations": {},
            "total_messages_by_me": 0,
            "total_messages_by_correspondent": 0,
        })
        conversation = week_data["conversations"].setdefault(
            conversation_id, _new_conversation(conversation_id, week)
        )

        if is_me_sender(get_string(record, "Sender"), aliases):
            conversation["messages_by_me"] += 1
            week_data["total_messages_by_me"] += 1
        else:
            conversation["messages_by_correspondent"] += 1
            week_data["total_messages_by_correspondent"] += 1
        conversation["total_messages"] += 1

        # Raw string comparison, as stored upstream
        sent_time = get_string(record, "Sent time")
        if sent_time:
            first = conversation["first_message_date"]
            last = conversation["last_message_date"]
            if first is None or sent_time < first:
                conversation["first_message_date"] = sent_time
            if last is None or sent_time > last:
                conversation["last_message_date"] = sent_time

    return week_map


def _top_conversation(conversations: List[DMConversationDetail]) -> Optional[DMConversationDetail]:
    top = None
    for conversation in conversations:
        # Strict ">" keeps the first conversation reached on ties
        if top is None or conversation.total_messages > top.total_messages:
            top = conversation
    return top


def calculate_dm_details(
    linkedin_dm_log: Any,
    aliases: Optional[Iterable[str]] = None,
) -> List[DMDetailMetrics]:
    """Break the DM log down by week and conversation.

    Returns an empty list for input that is not a list of records (for
    example an ``{"error": ...}`` payload from a failed fetch).
    """
    if isinstance(linkedin_dm_log, dict) and "error" in linkedin_dm_log:
        logger.warning("calculate_dm_details: received error payload: %s", linkedin_dm_log.get("error"))
        return []
    if not isinstance(linkedin_dm_log, (list, tuple)):
        logger.warning(
            "calculate_dm_details: expected a list, got %s", type(linkedin_dm_log).__name__
        )
        return []

    try:
        week_map = _fold_messages(list(linkedin_dm_log), aliases)
    except Exception as e:
        logger.error("Error calculating DM details: %s", e, exc_info=True)
        return []

    metrics: List[DMDetailMetrics] = []
    for week, data in week_map.items():
        conversations = [DMConversationDetail(**c) for c in data["conversations"].values()]
        metrics.append(DMDetailMetrics(
            week=week,
            total_messages_by_me=data["total_messages_by_me"],
            total_messages_by_correspondent=data["total_messages_by_correspondent"],
            total_conversations=len(conversations),
            conversations=conversations,
            top_conversation=_top_conversation(conversations),
        ))

    metrics.sort(key=lambda m: week_sort_key(m.week))
    return metrics
