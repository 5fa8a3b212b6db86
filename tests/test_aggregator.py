"""Tests for the multi-calendar aggregation loop."""

from datetime import datetime, timezone

import pytest

from conftest import FakeCalendarClient, fixed_now, make_event, make_event_data

from gcalorg.aggregator import (
    CalendarAggregator,
    add_months,
    calendar_heading,
    order_events,
    passes_title_filters,
    time_window,
)
from gcalorg.exceptions import CalendarServiceError
from gcalorg.org import HEADER, render_event
from gcalorg.types import CalendarMetadata, CalendarSpec

UTC = timezone.utc
WORK = CalendarSpec(tag="WORK", calendar_id="work@example.com")
HOME = CalendarSpec(tag="HOME", calendar_id="home@example.com")

WORK_HEADING = (
    "* Work :CALENDAR:WORK:\n"
    ":PROPERTIES:\n"
    ":ID:         work@example.com\n"
    ":END:\n"
    "\n"
    "  Work stuff\n"
    "\n"
)


class TestTimeWindow:
    def test_window_around_tomorrow_midnight(self):
        assert time_window(fixed_now()) == (
            "2023-09-01T00:00:00Z",
            "2025-06-01T00:00:00Z",
        )

    def test_anchor_uses_utc_date(self):
        now = datetime.fromisoformat("2024-05-31T23:30:00-05:00")
        time_min, time_max = time_window(now)
        assert time_min == "2023-09-02T00:00:00Z"
        assert time_max == "2025-06-02T00:00:00Z"

    def test_add_months_rolls_day_overflow_forward(self):
        assert add_months(datetime(2023, 5, 31), -3) == datetime(2023, 3, 3)

    def test_add_months_across_years(self):
        assert add_months(datetime(2024, 2, 29), 12) == datetime(2025, 3, 1)
        assert add_months(datetime(2024, 1, 15), -9) == datetime(2023, 4, 15)


class TestHelpers:
    def test_calendar_heading(self):
        calendar = CalendarMetadata(
            id="work@example.com", summary="Work", description="Work stuff"
        )
        assert calendar_heading(calendar, "WORK") == WORK_HEADING

    def test_title_filter_matches_substring(self):
        standup = make_event(summary="Daily Standup")
        assert not passes_title_filters(standup, ["Standup"])
        assert passes_title_filters(make_event(summary="Planning"), ["Standup"])

    def test_title_filter_is_case_sensitive(self):
        assert passes_title_filters(make_event(summary="daily standup"), ["Standup"])

    def test_no_filters(self):
        assert passes_title_filters(make_event(summary="Anything"), [])

    def test_order_events_sorts_and_dedupes(self):
        events = [
            make_event("b"),
            make_event("a", summary="first a"),
            make_event("a", summary="second a"),
        ]
        ordered = order_events(events)
        assert [e.id for e in ordered] == ["a", "b"]
        assert ordered[0].summary == "first a"


class TestCalendarAggregator:
    """Tests for CalendarAggregator.build_document."""

    def aggregator(self, client):
        return CalendarAggregator(client, UTC, now=fixed_now)

    def test_events_are_rendered_in_id_order(self, fake_client):
        fake_client.pages = {
            "work@example.com": [[make_event_data("b"), make_event_data("a")]]
        }
        text = self.aggregator(fake_client).build_document([WORK]).text()

        first = text.index(":ID:       a@google.com")
        assert first < text.index(":ID:       b@google.com")

    def test_follows_page_tokens(self, fake_client):
        fake_client.pages = {
            "work@example.com": [
                [make_event_data("c")],
                [make_event_data("a")],
                [make_event_data("b")],
            ]
        }
        text = self.aggregator(fake_client).build_document([WORK]).text()

        tokens = [call[3] for call in fake_client.event_calls]
        assert tokens == [None, "1", "2"]
        assert text.index("Event a") < text.index("Event b") < text.index("Event c")

    def test_requests_use_fixed_window(self, fake_client):
        self.aggregator(fake_client).build_document([WORK])

        assert fake_client.event_calls == [
            ("work@example.com", "2023-09-01T00:00:00Z", "2025-06-01T00:00:00Z", None)
        ]

    def test_duplicate_events_rendered_once(self, fake_client):
        fake_client.pages = {
            "work@example.com": [[make_event_data("a")], [make_event_data("a")]]
        }
        text = self.aggregator(fake_client).build_document([WORK]).text()

        assert text.count("** Event a\n") == 1

    def test_title_filters_skip_events(self, fake_client):
        fake_client.pages = {
            "work@example.com": [
                [
                    make_event_data("a", summary="Daily Standup"),
                    make_event_data("b", summary="Planning"),
                ]
            ]
        }
        text = (
            self.aggregator(fake_client)
            .build_document([WORK], title_filters=["Standup"])
            .text()
        )

        assert "Standup" not in text
        assert "** Planning\n" in text

    def test_self_declined_events_are_dropped(self, fake_client):
        fake_client.pages = {
            "work@example.com": [
                [
                    make_event_data(
                        "a",
                        attendees=[
                            {
                                "email": "me@example.com",
                                "responseStatus": "declined",
                                "self": True,
                            },
                            {"email": "x@example.com", "responseStatus": "accepted"},
                        ],
                    )
                ]
            ]
        }
        text = self.aggregator(fake_client).build_document([WORK]).text()

        assert text == HEADER + WORK_HEADING

    def test_unknown_calendar_is_skipped(self, fake_client):
        missing = CalendarSpec(tag="GONE", calendar_id="gone@example.com")
        text = self.aggregator(fake_client).build_document([missing, WORK]).text()

        assert "GONE" not in text
        assert text == HEADER + WORK_HEADING
        assert [call[0] for call in fake_client.event_calls] == ["work@example.com"]

    def test_filetags_in_header(self, fake_client):
        text = self.aggregator(fake_client).build_document([], filetags="work").text()
        assert text == HEADER + "#+filetags: :work:\n"

    def test_listing_failure_aborts(self, fake_client):
        fake_client.fail_on = "list_calendars"

        with pytest.raises(CalendarServiceError):
            self.aggregator(fake_client).build_document([WORK])

    def test_page_failure_aborts(self, fake_client):
        fake_client.fail_on = "home@example.com"

        with pytest.raises(CalendarServiceError):
            self.aggregator(fake_client).build_document([WORK, HOME])

    def test_two_calendars_end_to_end(self):
        client = FakeCalendarClient(
            calendars=[
                {"id": "other@example.com", "summary": "Other", "description": "x"},
                {"id": "home@example.com", "summary": "Home", "description": "Family"},
                {
                    "id": "work@example.com",
                    "summary": "Work",
                    "description": "Work stuff",
                },
            ],
            pages={
                "work@example.com": [[make_event_data("w1", summary="Planning")]],
                "home@example.com": [
                    [make_event_data("h1", summary="Dinner", description="At home")]
                ],
            },
        )

        text = self.aggregator(client).build_document([WORK, HOME]).text()

        home_heading = (
            "* Home :CALENDAR:HOME:\n"
            ":PROPERTIES:\n"
            ":ID:         home@example.com\n"
            ":END:\n"
            "\n"
            "  Family\n"
            "\n"
        )
        work_event = render_event(make_event("w1", summary="Planning"), UTC)
        home_event = render_event(
            make_event("h1", summary="Dinner", description="At home"), UTC
        )
        assert text == HEADER + WORK_HEADING + work_event + home_heading + home_event
        assert "Other" not in text
