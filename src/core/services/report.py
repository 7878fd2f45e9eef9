"""Daily report: departures and returns per driver with fares and totals."""

import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from core.db.repositories import LegRepository
from core.db.transaction import transaction
from core.db.utils import local_date, utc_now
from core.errors import ErrorCode, ReportError, ValidationError
from core.models.ledger import LegKind, LineItem
from core.models.report import DailyReport, DriverReport

logger = logging.getLogger(__name__)

TODAY_WORDS = {"", "hari ini", "hariini", "today"}
YESTERDAY_WORDS = {"kemarin", "yesterday"}
DATE_FORMATS = ("%d-%m-%Y", "%Y-%m-%d")


def parse_report_date(text: str, today: date) -> date:
    """Turn the argument of ``/laporan`` into a calendar date."""
    value = (text or "").strip().lower()
    if value in TODAY_WORDS:
        return today
    if value in YESTERDAY_WORDS:
        return today - timedelta(days=1)
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValidationError(f"Invalid date: {text!r}", code=ErrorCode.INVALID_DATE_FORMAT)


def format_rupiah(amount: int) -> str:
    return "Rp " + f"{amount:,}".replace(",", ".")


def format_report(report: DailyReport) -> str:
    lines = [f"Laporan {report.trip_date.strftime('%d-%m-%Y')}", ""]
    for driver in report.drivers:
        lines.append(f"Driver: {driver.driver_name}")
        for label, items in ((LegKind.DEPARTURE.label, driver.departures), (LegKind.RETURN.label, driver.returns)):
            if not items:
                continue
            lines.append(f"{label}:")
            lines.extend(f"- {item.passenger_name}: {format_rupiah(item.fare)}" for item in items)
        lines.append(f"Subtotal: {format_rupiah(driver.subtotal)}")
        lines.append("")
    lines.append(f"Total: {format_rupiah(report.grand_total)}")
    return "\n".join(lines)


class ReportBuilder:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        timezone: str = "Asia/Jakarta",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._timezone = timezone
        self._clock = clock

    def today(self) -> date:
        return local_date(self._clock(), self._timezone)

    def report_for_date(self, trip_date: date) -> DailyReport:
        drivers: dict[str, DriverReport] = {}
        with self._session_factory() as session, transaction(session, writing=False):
            legs = LegRepository(session)
            for kind in LegKind:
                for leg in legs.list_on(kind, trip_date):
                    entry = drivers.setdefault(leg.driver.name, DriverReport(driver_name=leg.driver.name))
                    items = [LineItem(passenger_name=p.passenger_name, fare=p.price) for p in leg.passengers]
                    if kind is LegKind.DEPARTURE:
                        entry.departures.extend(items)
                    else:
                        entry.returns.extend(items)

        if not drivers:
            raise ReportError(f"No legs on {trip_date}", code=ErrorCode.NO_DATA_FOR_DATE)

        report = DailyReport(trip_date=trip_date, drivers=[drivers[name] for name in sorted(drivers)])
        logger.info("Built report for %s: %d drivers", trip_date, len(report.drivers))
        return report

    def report_today(self) -> DailyReport:
        return self.report_for_date(self.today())
