"""Database backup: JSON snapshot of every table, uploaded to S3."""

import json
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from core.db.repositories import LegRepository, RosterRepository
from core.db.transaction import transaction
from core.db.utils import utc_now
from core.errors import AngkotError, AuthorizationError, ErrorCode
from core.models.ledger import LegKind

logger = logging.getLogger(__name__)


def ensure_admin(chat_id: int, admin_chat_id: int | None) -> None:
    if admin_chat_id is None or chat_id != admin_chat_id:
        raise AuthorizationError(f"Chat {chat_id} is not the admin", code=ErrorCode.FORBIDDEN)


def export_snapshot(session_factory: Callable[[], Session]) -> dict[str, Any]:
    """Read all drivers, passengers and legs in one transaction."""
    with session_factory() as session, transaction(session, writing=False):
        roster = RosterRepository(session)
        legs = LegRepository(session)
        snapshot: dict[str, Any] = {
            "drivers": [
                {"id": d.id, "name": d.name, "created_at": d.created_at.isoformat()} for d in roster.list_drivers()
            ],
            "passengers": [
                {"name": p.name, "created_at": p.created_at.isoformat()} for p in roster.list_passengers()
            ],
        }
        for kind, key in ((LegKind.DEPARTURE, "departures"), (LegKind.RETURN, "returns")):
            snapshot[key] = [
                {
                    "id": leg.id,
                    "driver": leg.driver.name,
                    "trip_date": leg.trip_date.isoformat(),
                    "created_at": leg.created_at.isoformat(),
                    "passengers": [{"name": p.passenger_name, "price": p.price} for p in leg.passengers],
                }
                for leg in legs.list_all(kind)
            ]
    return snapshot


def upload_backup(
    snapshot: dict[str, Any],
    s3_client: Any,
    bucket: str,
    now: datetime | None = None,
) -> str:
    """Write the snapshot to S3 and return its object key."""
    if not bucket:
        raise AngkotError("BACKUP_BUCKET not configured")
    stamp = (now or utc_now()).strftime("%Y%m%dT%H%M%SZ")
    key = f"backups/angkot-{stamp}.json"
    s3_client.put_object(
        Bucket=bucket,
        Key=key,
        Body=json.dumps(snapshot, ensure_ascii=False, indent=2).encode(),
        ContentType="application/json",
    )
    logger.info("Uploaded backup to s3://%s/%s", bucket, key)
    return key
