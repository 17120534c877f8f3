from datetime import date, datetime

import pytest

from inkplanner.models.types import MeridiemPolicy
from inkplanner.time_parser import TimePhraseParser, parse_event_text

DAY = date(2024, 1, 10)


def at(hour, minute=0):
    return datetime(2024, 1, 10, hour, minute)


def test_at_time_afternoon_bias():
    parsed = parse_event_text("Dentist at 3", DAY)
    assert parsed.title == "Dentist"
    assert parsed.start_time == at(15)
    assert parsed.end_time == at(16)


def test_range_with_trailing_meridiem():
    parsed = parse_event_text("Team sync 9-10:30am", DAY)
    assert parsed.title == "Team sync"
    assert parsed.start_time == at(9)
    assert parsed.end_time == at(10, 30)


def test_range_from_to_keeps_end_after_start():
    parsed = parse_event_text("from 11 to 1 lunch with Sam", DAY)
    assert parsed.title == "Lunch with Sam"
    assert parsed.start_time == at(11)
    # 1 is read as 13:00
    assert parsed.end_time == at(13)


def test_range_end_before_start_wraps_by_twelve_hours():
    parsed = parse_event_text("Workshop 10-8", DAY)
    assert parsed.title == "Workshop"
    assert parsed.start_time == at(10)
    assert parsed.end_time == at(20)


def test_range_end_still_before_start_falls_back_to_one_hour():
    parsed = parse_event_text("Call 11pm-10am", DAY)
    assert parsed.start_time == at(23)
    assert parsed.end_time == datetime(2024, 1, 11, 0, 0)


def test_standalone_time_requires_meridiem():
    parsed = parse_event_text("Pick up kids 4:15pm", DAY)
    assert parsed.title == "Pick up kids"
    assert parsed.start_time == at(16, 15)
    assert parsed.end_time == at(17, 15)


def test_noon_and_midnight():
    assert parse_event_text("Lunch 12pm", DAY).start_time == at(12)
    assert parse_event_text("Backup 12am", DAY).start_time == at(0)


def test_military_time():
    parsed = parse_event_text("Standup 09:45", DAY)
    assert parsed.title == "Standup"
    assert parsed.start_time == at(9, 45)
    assert parsed.end_time == at(10, 45)


def test_no_time_is_all_day():
    parsed = parse_event_text("buy groceries", DAY)
    assert parsed.title == "Buy groceries"
    assert parsed.start_time is None
    assert parsed.end_time is None


def test_out_of_range_hour_is_consumed_but_not_parsed():
    parsed = parse_event_text("Review at 25", DAY)
    assert parsed.title == "Review"
    assert parsed.start_time is None


def test_title_cleanup_strips_separators():
    parsed = parse_event_text("  -- meeting   with   Bob,  at 10 ", DAY)
    assert parsed.title == "Meeting with Bob"
    assert parsed.start_time == at(10)


def test_empty_title_falls_back_to_original_line():
    parsed = parse_event_text("at 5", DAY)
    assert parsed.title == "At 5"
    assert parsed.start_time == at(17)


def test_case_insensitive_patterns():
    parsed = parse_event_text("Gym AT 7PM", DAY)
    assert parsed.title == "Gym"
    assert parsed.start_time == at(19)


def test_literal_policy_keeps_morning_hours():
    parser = TimePhraseParser(MeridiemPolicy.LITERAL)
    parsed = parser.parse("Run at 6", DAY)
    assert parsed.start_time == at(6)


def test_datetime_reference_uses_its_day():
    parsed = parse_event_text("Dentist at 3", datetime(2024, 1, 10, 22, 15))
    assert parsed.start_time == at(15)


@pytest.mark.parametrize("line", [
    "Sync 9-10:30am", "from 1 to 2 review", "Deploy 10pm-11pm", "Call 11pm-10am", "Party 5-5",
])
def test_range_output_end_after_start(line):
    parsed = parse_event_text(line, DAY)
    assert parsed.start_time is not None
    assert parsed.end_time > parsed.start_time
