"""
Funnel Dashboard — Pydantic Models
====================================

Value objects produced by the aggregation engine and returned by the API:
weekly metrics, LinkedIn DM conversation breakdowns and the inactive
lead-magnet lead report. All are built fresh per aggregation call and
never mutated afterwards.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ─── Weekly Metrics ─────────────────────────────────────────

class DeckBreakdown(BaseModel):
    """Primary vs. redemptive deck-analysis site split for one week."""
    model_config = ConfigDict(frozen=True)

    primary_count: Optional[int] = None
    redemptive_count: Optional[int] = None
    primary_average_duration: Optional[float] = None
    redemptive_average_duration: Optional[float] = None
    primary_unique_visits: Optional[int] = None
    redemptive_unique_visits: Optional[int] = None


class Metric(BaseModel):
    """One week of one metric series.

    ``previous_week`` and ``change`` are unset on the first week of a
    series; ``change`` is 0 when the previous week's value was 0.
    """
    model_config = ConfigDict(frozen=True)

    week: str
    # ints for counts, floats for averages and ratios
    value: Union[int, float]
    percentage: Optional[float] = None
    previous_week: Optional[Union[int, float]] = None
    change: Optional[float] = None

    clicked: Optional[int] = None
    unique_emails: Optional[int] = None
    unique_emails_opened: Optional[int] = None
    unique_emails_clicked: Optional[int] = None
    unique_leads: Optional[int] = None
    unique_visits: Optional[int] = None
    avg_interactions_per_lead: Optional[float] = None

    success: Optional[int] = None
    failed: Optional[int] = None
    replied: Optional[int] = None
    no_reply: Optional[int] = None
    leads_opened_multiple: Optional[int] = None
    high_interest_count: Optional[int] = None
    bounce_count: Optional[int] = None

    links: Optional[List[str]] = None
    click_links_by_email: Optional[Dict[str, List[str]]] = None
    lead_emails: Optional[List[str]] = None
    click_lead_emails: Optional[List[str]] = None
    high_interest_leads: Optional[List[str]] = None
    bounce_leads: Optional[List[str]] = None
    lead_session_counts: Optional[Dict[str, int]] = None
    lead_count_label: Optional[str] = None
    deck_breakdown: Optional[DeckBreakdown] = None


# ─── LinkedIn DM Details ────────────────────────────────────

class DMConversationDetail(BaseModel):
    """Message counts for one conversation within one week."""
    model_config = ConfigDict(frozen=True)

    conversation_id: str
    week: str
    messages_by_me: int = 0
    messages_by_correspondent: int = 0
    total_messages: int = 0
    first_message_date: Optional[str] = None
    last_message_date: Optional[str] = None


class DMDetailMetrics(BaseModel):
    """All DM conversations with traffic in one week."""
    model_config = ConfigDict(frozen=True)

    week: str
    total_messages_by_me: int = 0
    total_messages_by_correspondent: int = 0
    total_conversations: int = 0
    conversations: List[DMConversationDetail] = Field(default_factory=list)
    top_conversation: Optional[DMConversationDetail] = None


# ─── Inactive Lead-Magnet Leads ─────────────────────────────

class InactiveLead(BaseModel):
    email: str
    linkedin_url: Optional[str] = None


class DateRange(BaseModel):
    # "from" is reserved in Python
    from_date: str = Field(serialization_alias="from")
    to_date: str = Field(serialization_alias="to")


class InactiveLeadsCriteria(BaseModel):
    visited_either_site: bool = True
    no_submission: bool = True


class InactiveLeadsDebug(BaseModel):
    """Tally of how the inactive list was derived."""
    total_visits_tracked: int = 0
    leads_with_either_site: int = 0
    leads_with_primary_only: int = 0
    leads_with_redemptive_only: int = 0
    leads_with_both_sites: int = 0
    total_submissions_ever: int = 0
    inactive_leads_count: int = 0
    leads_with_linkedin: int = 0
    leads_without_linkedin: int = 0


class InactiveLeadsResult(BaseModel):
    leads: List[InactiveLead] = Field(default_factory=list)
    count: int = 0
    date_range: DateRange
    criteria: InactiveLeadsCriteria = Field(default_factory=InactiveLeadsCriteria)
    debug: InactiveLeadsDebug = Field(default_factory=InactiveLeadsDebug)
