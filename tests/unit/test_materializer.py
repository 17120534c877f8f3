import sqlite3
from datetime import date, datetime

import pytest

from inkplanner.materializer import EventMaterializer
from inkplanner.models.document import LocalDocumentRecord
from inkplanner.time_parser import ParsedTime, parse_event_text

DAY = date(2024, 1, 10)


@pytest.fixture
def document(doc_repo):
    record = LocalDocumentRecord(
        id="local-doc",
        user_id="user-1",
        document_id="remote-doc",
        document_version="1",
        document_name="Monday plan",
    )
    doc_repo.insert(record)
    return record


@pytest.fixture
def materializer(event_repo, calendar_repo, clock):
    return EventMaterializer(event_repo, clock)


def test_timed_event_with_provenance(materializer, event_repo, document):
    line = "Dentist at 3"
    result = materializer.materialize(parse_event_text(line, DAY), "cal-home", document, line, DAY)

    assert result.created
    assert result.error is None
    assert result.line == line
    event = event_repo.get_event(result.event_id)
    assert event.title == "Dentist"
    assert event.start_time == datetime(2024, 1, 10, 15, 0)
    assert event.end_time == datetime(2024, 1, 10, 16, 0)
    assert not event.is_all_day
    assert event.external_id.startswith("remarkable_")
    assert event.metadata == {"source": "remarkable", "documentId": "local-doc", "originalText": line}

    links = event_repo.list_source_links("local-doc")
    assert [(l.event_id, l.extracted_text) for l in links] == [(result.event_id, line)]


def test_all_day_event_spans_reference_day(materializer, event_repo, document):
    line = "Pay rent"
    result = materializer.materialize(parse_event_text(line, DAY), "cal-home", document, line, DAY)

    event = event_repo.get_event(result.event_id)
    assert result.is_all_day and event.is_all_day
    assert event.start_time == datetime(2024, 1, 10, 0, 0)
    assert event.end_time == datetime(2024, 1, 10, 23, 59, 59, 999999)


def test_start_without_end_lasts_one_hour(materializer, event_repo, document):
    parsed = ParsedTime(title="Review", start_time=datetime(2024, 1, 10, 9, 0))
    result = materializer.materialize(parsed, "cal-home", document, "Review 9", DAY)
    assert event_repo.get_event(result.event_id).end_time == datetime(2024, 1, 10, 10, 0)


def test_auto_create_disabled_has_no_side_effects(materializer, event_repo, document):
    result = materializer.materialize(parse_event_text("Gym at 7pm", DAY), "cal-home", document, "Gym at 7pm", DAY,
                                      auto_create=False)
    assert not result.created
    assert result.event_id is None
    assert result.start_time == datetime(2024, 1, 10, 19, 0)
    assert event_repo.list_source_links("local-doc") == []


def test_empty_title_is_not_created(materializer, document):
    result = materializer.materialize(ParsedTime(title=""), "cal-home", document, "", DAY)
    assert not result.created


def test_event_insert_failure_is_reported(materializer, document):
    # Unknown calendar violates the foreign key
    result = materializer.materialize(parse_event_text("Dentist at 3", DAY), "no-such-calendar", document,
                                      "Dentist at 3", DAY)
    assert not result.created
    assert result.event_id is None
    assert "FOREIGN KEY" in result.error


def test_link_failure_keeps_event(clock, document):
    class Events:
        def insert_event(self, event):
            return event.id

        def insert_source_link(self, link):
            raise sqlite3.OperationalError("database is locked")

    result = EventMaterializer(Events(), clock).materialize(
        parse_event_text("Call Mom", DAY), "cal-home", document, "Call Mom", DAY
    )
    assert result.created
    assert result.event_id
    assert result.error == "database is locked"
