"""Tests for the per-week LinkedIn DM breakdown."""

from scripts.dm_details import calculate_dm_details

W1 = "29/12/2024"
W2 = "05/01/2025"
WEEK = "Week start of report date"


def _dm(week, conversation, sender, sent_time=None):
    record = {WEEK: week, "Conversation_id": conversation, "Sender": sender}
    if sent_time:
        record["Sent time"] = sent_time
    return record


class TestCalculateDMDetails:
    def test_conversation_gets_entry_in_every_active_week(self):
        log = [
            _dm(W1, "C1", "Me", "2024-12-30T09:00:00Z"),
            _dm(W2, "C1", "Alice", "2025-01-06T09:00:00Z"),
        ]
        weeks = calculate_dm_details(log)

        assert [w.week for w in weeks] == [W1, W2]
        first, second = weeks
        assert first.conversations[0].conversation_id == "C1"
        assert first.conversations[0].messages_by_me == 1
        assert first.conversations[0].messages_by_correspondent == 0
        assert second.conversations[0].messages_by_correspondent == 1
        assert second.conversations[0].week == W2

    def test_weekly_totals(self):
        log = [
            _dm(W2, "C1", "Jay"),
            _dm(W2, "C1", "Alice"),
            _dm(W2, "C2", ""),
            _dm(W2, "C2", "Bob"),
            _dm(W2, "C2", "Bob"),
        ]
        week = calculate_dm_details(log)[0]

        assert week.total_messages_by_me == 2
        assert week.total_messages_by_correspondent == 3
        assert week.total_conversations == 2
        assert week.top_conversation.conversation_id == "C2"
        assert week.top_conversation.total_messages == 3

    def test_top_conversation_tie_keeps_first_seen(self):
        log = [
            _dm(W2, "C1", "Me"),
            _dm(W2, "C2", "Me"),
            _dm(W2, "C2", "Alice"),
            _dm(W2, "C1", "Alice"),
        ]
        week = calculate_dm_details(log)[0]
        assert week.top_conversation.conversation_id == "C1"

    def test_first_and_last_message_dates(self):
        log = [
            _dm(W2, "C1", "Me", "2025-01-07T10:00:00Z"),
            _dm(W2, "C1", "Alice", "2025-01-05T08:00:00Z"),
            _dm(W2, "C1", "Me", "2025-01-09T18:30:00Z"),
            _dm(W2, "C1", "Alice"),
        ]
        conversation = calculate_dm_details(log)[0].conversations[0]
        assert conversation.first_message_date == "2025-01-05T08:00:00Z"
        assert conversation.last_message_date == "2025-01-09T18:30:00Z"
        assert conversation.total_messages == 4

    def test_custom_aliases(self):
        log = [_dm(W2, "C1", "Bob"), _dm(W2, "C1", "Jay")]
        week = calculate_dm_details(log, aliases=("bob",))[0]
        assert week.total_messages_by_me == 1
        assert week.total_messages_by_correspondent == 1

    def test_records_without_week_or_conversation_are_skipped(self):
        log = [_dm("", "C1", "Me"), _dm(W2, "", "Me"), "garbage", _dm(W2, "C1", "Me")]
        weeks = calculate_dm_details(log)
        assert len(weeks) == 1
        assert weeks[0].total_conversations == 1

    def test_error_payload_yields_empty_list(self):
        assert calculate_dm_details({"error": "Airtable timeout"}) == []

    def test_non_list_input_yields_empty_list(self):
        assert calculate_dm_details(None) == []
        assert calculate_dm_details("not a log") == []

    def test_empty_log(self):
        assert calculate_dm_details([]) == []
