"""Unit tests for report building and formatting."""

from datetime import date

import pytest

from core.errors import ErrorCode, ReportError, ValidationError
from core.models.ledger import LegKind
from core.services.report import format_report, format_rupiah, parse_report_date

TODAY = date(2026, 10, 19)


# --- parse_report_date ---


@pytest.mark.parametrize("text", ["", "  ", "hari ini", "today"])
def test_parse_today(text):
    assert parse_report_date(text, TODAY) == TODAY


@pytest.mark.parametrize("text", ["kemarin", "Kemarin", "yesterday"])
def test_parse_yesterday(text):
    assert parse_report_date(text, TODAY) == date(2026, 10, 18)


def test_parse_yesterday_across_month():
    assert parse_report_date("kemarin", date(2026, 11, 1)) == date(2026, 10, 31)


@pytest.mark.parametrize("text", ["01-02-2025", "2025-02-01"])
def test_parse_specific_date(text):
    assert parse_report_date(text, TODAY) == date(2025, 2, 1)


@pytest.mark.parametrize("text", ["31-02-2025", "besok", "2025/02/01", "01-13-2025"])
def test_parse_invalid_date(text):
    with pytest.raises(ValidationError) as exc_info:
        parse_report_date(text, TODAY)
    assert exc_info.value.code == ErrorCode.INVALID_DATE_FORMAT


def test_format_rupiah():
    assert format_rupiah(10000) == "Rp 10.000"
    assert format_rupiah(1250000) == "Rp 1.250.000"
    assert format_rupiah(0) == "Rp 0"


# --- ReportBuilder ---


@pytest.fixture
def recorded_day(roster, ledger):
    roster.register_driver("Pak Budi")
    roster.register_driver("Pak Ahmad")
    roster.register_driver("Pak Idle")
    ledger.record_leg(LegKind.DEPARTURE, "Pak Ahmad", ["Santri Ali", "Santri Umar"])
    ledger.record_leg(LegKind.RETURN, "Pak Ahmad", ["Santri Ali"])
    ledger.record_leg(LegKind.RETURN, "Pak Budi", ["Santri Umar", "Santri Hasan"])


def test_report_lists_every_driver_with_a_leg(reports, recorded_day):
    report = reports.report_for_date(TODAY)

    assert [d.driver_name for d in report.drivers] == ["Pak Ahmad", "Pak Budi"]
    ahmad, budi = report.drivers
    assert [(i.passenger_name, i.fare) for i in ahmad.departures] == [("Santri Ali", 10000), ("Santri Umar", 10000)]
    assert [(i.passenger_name, i.fare) for i in ahmad.returns] == [("Santri Ali", 8000)]
    assert ahmad.subtotal == 28000
    assert budi.departures == []
    assert [(i.passenger_name, i.fare) for i in budi.returns] == [("Santri Umar", 8000), ("Santri Hasan", 10000)]
    assert budi.subtotal == 18000


def test_grand_total_is_sum_of_all_fares(reports, recorded_day):
    assert reports.report_for_date(TODAY).grand_total == 46000


def test_report_today_uses_clock(reports, recorded_day):
    assert reports.report_today().trip_date == TODAY


def test_no_legs_is_no_data(reports, recorded_day):
    with pytest.raises(ReportError) as exc_info:
        reports.report_for_date(date(2026, 10, 18))
    assert exc_info.value.code == ErrorCode.NO_DATA_FOR_DATE


def test_report_on_empty_database(reports):
    with pytest.raises(ReportError):
        reports.report_today()


def test_format_report(reports, recorded_day):
    text = format_report(reports.report_for_date(TODAY))

    assert text.startswith("Laporan 19-10-2026")
    assert "Driver: Pak Ahmad\nAntar:\n- Santri Ali: Rp 10.000\n- Santri Umar: Rp 10.000\nJemput:\n- Santri Ali: Rp 8.000\nSubtotal: Rp 28.000" in text
    assert "Driver: Pak Budi\nJemput:" in text
    assert text.endswith("Total: Rp 46.000")
    assert "Pak Idle" not in text
