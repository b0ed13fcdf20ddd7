"""
Funnel Dashboard Summary
==========================

Runs every aggregator over a loaded funnel snapshot and condenses the
series into "last completed week vs. the week before" summary cards.

The current (partial) week is left out of the cards so a Monday morning
view does not compare one day of activity against a full week.

Exports:
    compute_funnel_series, recent_metrics, build_summary_card,
    build_summary_cards, build_funnel_dashboard
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from models.funnel_models import Metric
from scripts import funnel_metrics as fm
from scripts.dm_details import calculate_dm_details
from scripts.inactive_leads import split_deck_sources
from scripts.lib.logger import setup_logger
from scripts.lib.weeks import format_range, is_completed_week, week_sort_key

logger = setup_logger(__name__)

# (card key, title, series name)
SUMMARY_CARDS: Tuple[Tuple[str, str, str], ...] = (
    ("mkt-outreach-sent", "MKT Outreach Emails Sent", "mkt_outreach_sent"),
    ("outreach-opens", "Outreach Email Opens", "outreach_interactions"),
    ("nurture-sent", "Nurture Emails Sent", "nurture_sent"),
    ("nurture-opens", "Nurture Email Opens", "nurture_interactions"),
    ("dm-new-conversations", "New DM Conversations", "dm_new_conversations"),
    ("dm-lead-replied", "DM Leads Replied", "dm_lead_replied"),
    ("dm-followups", "DM Follow-ups", "dm_followups"),
    ("organic-leads", "New Organic Leads", "organic_leads"),
    ("lm-landed", "Lead Magnet Sessions", "lead_magnet_landed"),
    ("lm-submissions", "Deck Submissions", "lead_magnet_submissions"),
    ("sales-landed", "FF Website Sessions", "sales_landed"),
    ("book-call-clicks", "Book a Call Clicks", "sales_clicks"),
    ("book-call-ctr", "% Landed over Clicked", "sales_click_to_landed"),
    ("bookings", "Calls Booked", "sales_bookings"),
)


def compute_funnel_series(tables: Dict[str, Any]) -> Dict[str, List[Metric]]:
    """Run every weekly aggregator over the snapshot tables."""
    sent = tables.get("sentEmailLog") or []
    interactions = tables.get("emailInteractions") or []
    dm_log = tables.get("linkedinDMLog") or []
    lead_list = tables.get("leadList") or []
    primary, redemptive = split_deck_sources(tables.get("deckAnalysisInteractions") or [])

    lead_magnet = fm.calculate_lead_magnet_metrics(
        primary, tables.get("deckReports") or [], redemptive
    )
    sales = fm.calculate_sales_funnel_metrics(
        tables.get("ffInteractions") or [], tables.get("bookACall") or []
    )

    series = {
        "mkt_outreach_sent": fm.calculate_mkt_outreach_metrics(sent, interactions),
        "nurture_sent": fm.calculate_nurture_email_metrics(sent, interactions),
        "outreach_interactions": fm.calculate_outreach_email_interaction_metrics(interactions),
        "nurture_interactions": fm.calculate_nurture_email_interaction_metrics(interactions),
        "analysis_result_interactions": fm.calculate_analysis_result_email_interaction_metrics(
            interactions
        ),
        "dm_new_conversations": fm.calculate_dm_metrics(dm_log),
        "dm_lead_replied": fm.calculate_dm_lead_replied_metrics(dm_log),
        "dm_followups": fm.calculate_dm_followup_metrics(dm_log),
        "organic_leads": fm.calculate_organic_leads(lead_list),
        "lead_magnet_leads": fm.calculate_lead_magnet_leads(lead_list),
        "book_a_call_leads": fm.calculate_book_a_call_leads(lead_list),
    }
    for name, metrics in lead_magnet.items():
        series[f"lead_magnet_{name}"] = metrics
    for name, metrics in sales.items():
        series[f"sales_{name}"] = metrics

    logger.debug("Computed %d funnel series", len(series))
    return series


def recent_metrics(
    series: List[Metric],
    now: Union[date, datetime],
) -> Tuple[Optional[Metric], Optional[Metric]]:
    """Return (last completed week, the week before it).

    Falls back to the whole series when no week has completed yet.
    """
    ordered = sorted(
        (m for m in series if isinstance(m, Metric)), key=lambda m: week_sort_key(m.week)
    )
    if not ordered:
        return None, None

    completed = [m for m in ordered if is_completed_week(m.week, now)]
    if completed:
        ordered = completed

    last = ordered[-1]
    previous = ordered[-2] if len(ordered) > 1 else None
    return last, previous


def build_summary_card(
    key: str,
    title: str,
    series: List[Metric],
    now: Union[date, datetime],
) -> Optional[Dict[str, Any]]:
    """Summary card for the latest completed week of ``series``, or None if empty."""
    last, previous = recent_metrics(series, now)
    if last is None:
        return None
    return {
        "key": key,
        "title": title,
        "week": last.week,
        "week_label": format_range(last.week),
        "value": last.value,
        "percentage": last.percentage,
        "change": last.change,
        "previous_value": previous.value if previous else None,
    }


def build_summary_cards(
    series: Dict[str, List[Metric]],
    now: Union[date, datetime],
) -> List[Dict[str, Any]]:
    cards = []
    for key, title, name in SUMMARY_CARDS:
        card = build_summary_card(key, title, series.get(name, []), now)
        if card:
            cards.append(card)
    return cards


def build_funnel_dashboard(
    tables: Dict[str, Any],
    now: Union[date, datetime],
) -> Dict[str, Any]:
    """Everything the dashboard renders, as JSON-ready dicts."""
    series = compute_funnel_series(tables)
    dm_details = calculate_dm_details(tables.get("linkedinDMLog") or [])
    return {
        "last_updated": tables.get("lastUpdated"),
        "series": {
            name: [m.model_dump(exclude_none=True) for m in metrics]
            for name, metrics in series.items()
        },
        "dm_details": [d.model_dump(exclude_none=True) for d in dm_details],
        "summary": build_summary_cards(series, now),
    }
