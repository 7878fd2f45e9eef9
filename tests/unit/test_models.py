from datetime import UTC, date, datetime

import pytest
from pydantic import ValidationError

from core.models import DailyReport, DriverReport, LegKind, LegRecord, LineItem

NOW = datetime(2026, 10, 19, 3, 0, tzinfo=UTC)


# --- LineItem ---


def test_line_item_valid():
    item = LineItem(passenger_name="Santri Ali", fare=10000)
    assert item.model_dump() == {"passenger_name": "Santri Ali", "fare": 10000}


def test_line_item_rejects_negative_fare():
    with pytest.raises(ValidationError):
        LineItem(passenger_name="Santri Ali", fare=-1)


def test_line_item_rejects_empty_name():
    with pytest.raises(ValidationError):
        LineItem(passenger_name="", fare=10000)


# --- LegRecord ---


def test_leg_record_total():
    record = LegRecord(
        leg_id=1,
        kind=LegKind.DEPARTURE,
        driver_name="Pak Ahmad",
        trip_date=date(2026, 10, 19),
        recorded_at=NOW,
        items=[LineItem(passenger_name="Ali", fare=10000), LineItem(passenger_name="Umar", fare=8000)],
    )
    assert record.total == 18000
    assert record.model_dump()["total"] == 18000
    assert record.replaced is False


def test_leg_kind_labels():
    assert LegKind.DEPARTURE.label == "Antar"
    assert LegKind.RETURN.label == "Jemput"
    assert LegKind("return") is LegKind.RETURN


# --- Reports ---


def test_driver_report_subtotal_counts_both_kinds():
    report = DriverReport(
        driver_name="Pak Ahmad",
        departures=[LineItem(passenger_name="Ali", fare=10000)],
        returns=[LineItem(passenger_name="Ali", fare=8000)],
    )
    assert report.subtotal == 18000


def test_driver_report_defaults_are_not_shared():
    first = DriverReport(driver_name="A")
    second = DriverReport(driver_name="B")
    first.departures.append(LineItem(passenger_name="Ali", fare=10000))
    assert second.departures == []


def test_daily_report_grand_total():
    report = DailyReport(
        trip_date=date(2026, 10, 19),
        drivers=[
            DriverReport(driver_name="A", departures=[LineItem(passenger_name="Ali", fare=10000)]),
            DriverReport(driver_name="B", returns=[LineItem(passenger_name="Umar", fare=8000)]),
        ],
    )
    assert report.grand_total == 18000
