"""Telegram webhook handler: one chat message in, one reply out.

The reply is returned as a Bot API method call in the webhook response
body, so the function never calls Telegram itself.
"""

import hmac
import json
import logging
from functools import lru_cache
from typing import Any

from core.clients import get_dynamo_client, get_s3_client
from core.config import get_config
from core.db import get_database
from core.logging_setup import setup_logging
from core.services.backup import export_snapshot, upload_backup
from core.services.commands import CommandDispatcher
from core.services.ledger import TripLedger
from core.services.pricing import FarePolicy
from core.services.report import ReportBuilder
from core.services.roster import RosterService
from core.services.session import ChatSessionStore

_config = get_config()
setup_logging(_config.log_level, json_output=_config.environment != "local", environment=_config.environment)
logger = logging.getLogger(__name__)

SECRET_HEADER = "x-telegram-bot-api-secret-token"


@lru_cache(maxsize=1)
def get_dispatcher() -> CommandDispatcher:
    config = get_config()
    database = get_database()
    fare_policy = FarePolicy.from_config(config)

    def backup() -> str:
        return upload_backup(export_snapshot(database.session), get_s3_client(), config.backup_bucket)

    return CommandDispatcher(
        roster=RosterService(database.session, timezone=config.trip_timezone),
        ledger=TripLedger(
            database.session,
            fare_policy,
            timezone=config.trip_timezone,
            lock_timeout_ms=config.lock_timeout_ms,
        ),
        reports=ReportBuilder(database.session, timezone=config.trip_timezone),
        sessions=ChatSessionStore(get_dynamo_client(), config.sessions_table),
        admin_chat_id=config.admin_chat_id,
        backup=backup,
        timezone=config.trip_timezone,
    )


def _secret_ok(event: dict[str, Any], expected: str) -> bool:
    if not expected:
        return True
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    return hmac.compare_digest(headers.get(SECRET_HEADER, ""), expected)


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    """Always returns 200 for accepted updates. Telegram retries anything else."""
    config = get_config()
    if not _secret_ok(event, config.telegram_webhook_secret):
        logger.warning("Rejected webhook call with bad secret token")
        return {"statusCode": 403}

    try:
        update = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        logger.warning("Ignoring webhook call with invalid JSON body")
        return {"statusCode": 200}

    if not isinstance(update, dict):
        logger.warning("Ignoring webhook call whose body is not an Update object")
        return {"statusCode": 200}

    message = update.get("message") or update.get("edited_message")
    if not isinstance(message, dict) or not isinstance(message.get("text"), str):
        return {"statusCode": 200}

    chat = message.get("chat")
    chat_id = chat.get("id") if isinstance(chat, dict) else None
    if chat_id is None:
        logger.warning("Ignoring message without a chat id")
        return {"statusCode": 200}
    logger.info("Received message from chat %s", chat_id)

    try:
        reply = get_dispatcher().dispatch(chat_id, message["text"])
        if reply is None:
            return {"statusCode": 200}
        return {
            "statusCode": 200,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps({"method": "sendMessage", "chat_id": chat_id, "text": reply}),
        }
    except Exception:
        logger.exception("Failed to handle message from chat %s", chat_id)
        return {"statusCode": 200}
