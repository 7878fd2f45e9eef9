"""Trip ledger: records one departure or return leg per driver per day.

Recording a leg is an upsert keyed by (driver, kind, calendar day). A second
record for the same key replaces the leg's passengers instead of adding a
new leg, and every passenger's fare is recomputed from how many legs they
already rode that day.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.db.repositories import LegRepository, RosterRepository
from core.db.transaction import bound_lock_wait, transaction
from core.db.utils import local_date, utc_now
from core.errors import ErrorCode, RosterError, StoreError, ValidationError
from core.models.ledger import LegKind, LegRecord, LineItem
from core.services.pricing import FarePolicy
from core.services.roster import clean_name

logger = logging.getLogger(__name__)


class TripLedger:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        fare_policy: FarePolicy,
        timezone: str = "Asia/Jakarta",
        lock_timeout_ms: int = 5000,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._fare_policy = fare_policy
        self._timezone = timezone
        self._lock_timeout_ms = lock_timeout_ms
        self._clock = clock

    def record_leg(self, kind: LegKind, driver_name: str, passenger_names: Sequence[str]) -> LegRecord:
        """Upsert today's leg of ``kind`` for a driver and price its passengers.

        Raises:
            ValidationError: empty driver name or no passenger names
            RosterError: the driver is not registered
            StoreError: the transaction could not run or commit
        """
        driver_name = clean_name(driver_name, "Driver")
        names = [" ".join(name.split()) for name in passenger_names]
        names = [name for name in names if name]
        if not names:
            raise ValidationError("No passengers given", code=ErrorCode.MALFORMED_INPUT)

        with self._session_factory() as session, transaction(session):
            bound_lock_wait(session, self._lock_timeout_ms)
            roster = RosterRepository(session)
            legs = LegRepository(session)

            # Locking the driver row serializes concurrent records for this driver.
            driver = roster.find_driver(driver_name, lock=True)
            if driver is None:
                raise RosterError(f"Driver '{driver_name}' not found", code=ErrorCode.UNKNOWN_DRIVER)

            now = self._clock()
            today = local_date(now, self._timezone)

            leg = legs.find(kind, driver.id, today)
            replaced = leg is not None
            if leg is not None:
                removed = legs.clear_items(leg)
                leg.created_at = now
                logger.debug("Replacing %s leg %d, removed %d items", kind.value, leg.id, removed)
            else:
                try:
                    leg = legs.create(kind, driver.id, today, now)
                except IntegrityError as e:
                    # Another transaction created this leg first; the caller retries.
                    raise StoreError(
                        f"Concurrent {kind.value} for driver '{driver_name}' on {today}",
                        code=ErrorCode.STORE_UNAVAILABLE,
                    ) from e

            items: list[LineItem] = []
            for name in names:
                # Autoflush makes earlier items of this call visible to the count.
                trips = roster.trip_count(name, today)
                fare = self._fare_policy.fare(trips)
                legs.add_item(kind, leg.id, name, fare)
                items.append(LineItem(passenger_name=name, fare=fare))
            session.flush()

            record = LegRecord(
                leg_id=leg.id,
                kind=kind,
                driver_name=driver.name,
                trip_date=today,
                recorded_at=now,
                replaced=replaced,
                items=items,
            )

        logger.info(
            "Recorded %s for %s on %s: %d passengers, total %d%s",
            kind.value,
            record.driver_name,
            record.trip_date,
            len(record.items),
            record.total,
            " (replaced)" if replaced else "",
        )
        return record

    def record_departure(self, driver_name: str, passenger_names: Sequence[str]) -> LegRecord:
        return self.record_leg(LegKind.DEPARTURE, driver_name, passenger_names)

    def record_return(self, driver_name: str, passenger_names: Sequence[str]) -> LegRecord:
        return self.record_leg(LegKind.RETURN, driver_name, passenger_names)
